"""
Session State - Per-user game state and the results of advancing it.

A GameSession is created by a valid start request and lives in the
SessionStore under its UserID. Each "next" request moves it forward:

    index=0, awaiting_answer=False     (just started)
      -> serve question 1              awaiting_answer=True
      -> answer question 1             index=1, awaiting_answer=False
      -> serve question 2              awaiting_answer=True
      ...
      -> answer question N             index=N  -> GameOver (completed)

A session can also end early by abandonment -> GameOver (abandoned).
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum

from ..questions import Question


class GameOutcome(str, Enum):
    """How a game ended."""
    COMPLETED = "completed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class QuestionResult:
    """Outcome of one answered question."""
    number: int  # 1-based
    question: Question
    given_answer: str
    correct: bool


@dataclass
class GameSession:
    """
    In-progress game for one user.

    Only the SessionStore mutates a session, and only while holding the
    user's lock.
    """
    user_id: str
    message_id: str
    questions: list[Question]
    created_at: float
    updated_at: float

    # Number of questions answered so far
    index: int = 0
    # Question at `index` has been served and not yet answered
    awaiting_answer: bool = False
    score: int = 0
    results: list[QuestionResult] = field(default_factory=list)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def current_number(self) -> int:
        """1-based number of the question at `index`."""
        return self.index + 1

    def is_complete(self) -> bool:
        return self.index >= self.question_count

    def current_question(self) -> Question:
        return self.questions[self.index]

    def copy(self) -> "GameSession":
        return replace(self, questions=list(self.questions), results=list(self.results))


@dataclass(frozen=True)
class NextQuestion:
    """A question served to the user."""
    user_id: str
    message_id: str
    number: int
    total: int
    question: Question
    score: int


@dataclass(frozen=True)
class GameOver:
    """Final statistics of a finished game."""
    user_id: str
    message_id: str
    outcome: GameOutcome
    score: int
    total: int
    results: tuple[QuestionResult, ...]
    finished_at: float

    @property
    def answered(self) -> int:
        return len(self.results)

    @classmethod
    def from_session(
        cls,
        session: GameSession,
        outcome: GameOutcome,
        finished_at: float,
    ) -> "GameOver":
        return cls(
            user_id=session.user_id,
            message_id=session.message_id,
            outcome=outcome,
            score=session.score,
            total=session.question_count,
            results=tuple(session.results),
            finished_at=finished_at,
        )
