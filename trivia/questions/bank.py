"""
Question Bank - Source of the questions a game is built from.

A game draws its questions once, when it starts. The bank is read-only
after construction so it can be shared by every request.

Question file format (JSON list):
    [
        {
            "ID": "optional-id",
            "Question": "What is the speed of light?",
            "RightAnswer": "299,792 km/s",
            "WrongAnswer1": "150,000 km/s",
            "WrongAnswer2": "1,080 km/h",
            "WrongAnswer3": "3,000 km/s",
            "Image": "https://example.org/light.png"
        }
    ]

Only "Question" and "RightAnswer" are required.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence
import json
import random

WRONG_ANSWER_KEYS = ("WrongAnswer1", "WrongAnswer2", "WrongAnswer3")


class QuestionBankError(Exception):
    """Raised when a question source cannot be loaded."""


@dataclass(frozen=True)
class Question:
    """A multiple-choice question."""
    question_id: str
    text: str
    right_answer: str
    wrong_answers: tuple[str, ...] = field(default_factory=tuple)
    image: str | None = None

    def is_correct(self, answer: str) -> bool:
        """Answers match ignoring case and surrounding whitespace."""
        return answer.strip().casefold() == self.right_answer.strip().casefold()

    def wrong_answer(self, position: int) -> str | None:
        """Wrong answer at a 0-based position, or None when absent."""
        if position < len(self.wrong_answers):
            return self.wrong_answers[position]
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any], default_id: str) -> "Question":
        text = data.get("Question")
        right_answer = data.get("RightAnswer")
        if not isinstance(text, str) or not text.strip():
            raise QuestionBankError(f"Question {default_id}: 'Question' must be a non-empty string")
        if not isinstance(right_answer, str) or not right_answer.strip():
            raise QuestionBankError(f"Question {default_id}: 'RightAnswer' must be a non-empty string")

        wrong_answers = []
        for key in WRONG_ANSWER_KEYS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise QuestionBankError(f"Question {default_id}: '{key}' must be a string")
            wrong_answers.append(value)

        image = data.get("Image")
        if image is not None and not isinstance(image, str):
            raise QuestionBankError(f"Question {default_id}: 'Image' must be a string")

        question_id = data.get("ID", default_id)
        return cls(
            question_id=str(question_id),
            text=text,
            right_answer=right_answer,
            wrong_answers=tuple(wrong_answers),
            image=image or None,
        )


class QuestionBank:
    """
    Read-only collection of questions.

    Usage:
        bank = QuestionBank.from_file("questions.json")
        questions = bank.draw(10)
    """

    def __init__(self, questions: Sequence[Question], seed: int | None = None):
        if not questions:
            raise QuestionBankError("Question bank is empty")
        self._questions = tuple(questions)
        self._rng = random.Random(seed)

    def __len__(self) -> int:
        return len(self._questions)

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    def draw(self, count: int) -> list[Question]:
        """
        Draw `count` questions for a new game.

        Questions do not repeat until the whole bank has been used; larger
        games cycle through reshuffled copies of the bank.
        """
        if count < 1:
            raise ValueError("count must be at least 1")

        drawn: list[Question] = []
        while len(drawn) < count:
            batch = list(self._questions)
            self._rng.shuffle(batch)
            drawn.extend(batch[: count - len(drawn)])
        return drawn

    @classmethod
    def from_file(cls, path: str | Path, seed: int | None = None) -> "QuestionBank":
        """Load questions from a JSON file (see module docstring)."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise QuestionBankError(f"Question file not found: {path}")
        except OSError as e:
            raise QuestionBankError(f"Cannot read question file {path}: {e}")
        except json.JSONDecodeError as e:
            raise QuestionBankError(f"Question file {path} is not valid JSON: {e}")

        if not isinstance(data, list):
            raise QuestionBankError(f"Question file {path} must contain a JSON list")

        questions = []
        for i, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise QuestionBankError(f"Question {i + 1} in {path} is not an object")
            questions.append(Question.from_dict(entry, default_id=f"q{i + 1}"))
        return cls(questions, seed=seed)

    @classmethod
    def default(cls, seed: int | None = None) -> "QuestionBank":
        """The built-in sample questions."""
        from .samples import SAMPLE_QUESTIONS
        return cls(SAMPLE_QUESTIONS, seed=seed)
