"""
Tests for the question bank.
"""

import json

import pytest

from ..questions import Question, QuestionBank, QuestionBankError
from ..questions.samples import SAMPLE_QUESTIONS


class TestQuestion:

    def test_is_correct(self):
        question = Question("q1", "Capital of France?", "Paris", ("Lyon",))

        assert question.is_correct("Paris")
        assert question.is_correct(" PARIS\n")
        assert not question.is_correct("Lyon")
        assert not question.is_correct("")

    def test_wrong_answer_positions(self):
        question = Question("q1", "Pick one", "a", ("b", "c"))

        assert question.wrong_answer(0) == "b"
        assert question.wrong_answer(1) == "c"
        assert question.wrong_answer(2) is None

    def test_from_dict_full(self):
        question = Question.from_dict({
            "ID": "light",
            "Question": "Speed of light?",
            "RightAnswer": "300,000 km/s",
            "WrongAnswer1": "150,000 km/s",
            "WrongAnswer2": "1,080 km/h",
            "WrongAnswer3": "3,000 km/s",
            "Image": "light.png",
        }, default_id="q1")

        assert question.question_id == "light"
        assert question.wrong_answers == ("150,000 km/s", "1,080 km/h", "3,000 km/s")
        assert question.image == "light.png"

    def test_from_dict_minimal(self):
        question = Question.from_dict({"Question": "2 + 2?", "RightAnswer": "4"}, default_id="q9")

        assert question.question_id == "q9"
        assert question.wrong_answers == ()
        assert question.image is None

    def test_empty_image_is_none(self):
        question = Question.from_dict(
            {"Question": "2 + 2?", "RightAnswer": "4", "Image": ""}, default_id="q1"
        )
        assert question.image is None

    @pytest.mark.parametrize("data", [
        {"RightAnswer": "4"},
        {"Question": "", "RightAnswer": "4"},
        {"Question": "2 + 2?"},
        {"Question": "2 + 2?", "RightAnswer": "  "},
        {"Question": "2 + 2?", "RightAnswer": 4},
        {"Question": "2 + 2?", "RightAnswer": "4", "WrongAnswer2": 5},
        {"Question": "2 + 2?", "RightAnswer": "4", "Image": ["a.png"]},
    ])
    def test_from_dict_invalid(self, data):
        with pytest.raises(QuestionBankError):
            Question.from_dict(data, default_id="q1")


class TestQuestionBank:

    def test_empty_bank(self):
        with pytest.raises(QuestionBankError):
            QuestionBank([])

    def test_draw_without_repeats(self, bank, questions):
        drawn = bank.draw(3)
        assert sorted(q.question_id for q in drawn) == ["q1", "q2", "q3"]

    def test_draw_fewer(self, bank):
        drawn = bank.draw(2)
        assert len(drawn) == 2
        assert drawn[0] != drawn[1]

    def test_draw_cycles_through_bank(self, bank):
        drawn = bank.draw(7)

        assert len(drawn) == 7
        # Each full pass uses every question once
        assert sorted(q.question_id for q in drawn[:3]) == ["q1", "q2", "q3"]
        assert sorted(q.question_id for q in drawn[3:6]) == ["q1", "q2", "q3"]

    @pytest.mark.parametrize("count", [0, -1])
    def test_draw_invalid_count(self, bank, count):
        with pytest.raises(ValueError):
            bank.draw(count)

    def test_seed_is_reproducible(self, questions):
        first = QuestionBank(questions, seed=42).draw(3)
        second = QuestionBank(questions, seed=42).draw(3)
        assert first == second

    def test_default_bank(self):
        bank = QuestionBank.default(seed=1)

        assert len(bank) == len(SAMPLE_QUESTIONS)
        assert len(bank.draw(30)) == 30

    def test_sample_questions_are_well_formed(self):
        ids = [q.question_id for q in SAMPLE_QUESTIONS]
        assert len(ids) == len(set(ids))
        for question in SAMPLE_QUESTIONS:
            assert question.text
            assert question.right_answer
            assert question.right_answer not in question.wrong_answers


class TestQuestionFile:

    def test_from_file(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps([
            {"Question": "2 + 2?", "RightAnswer": "4", "WrongAnswer1": "5"},
            {"ID": "paris", "Question": "Capital of France?", "RightAnswer": "Paris"},
        ]))

        bank = QuestionBank.from_file(path)

        assert len(bank) == 2
        assert [q.question_id for q in bank.questions] == ["q1", "paris"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(QuestionBankError, match="not found"):
            QuestionBank.from_file(tmp_path / "nope.json")

    @pytest.mark.parametrize("content", [
        "not json",
        '{"Question": "2 + 2?", "RightAnswer": "4"}',
        "[]",
        '["just a string"]',
        '[{"Question": "2 + 2?"}]',
    ])
    def test_bad_file(self, tmp_path, content):
        path = tmp_path / "questions.json"
        path.write_text(content)

        with pytest.raises(QuestionBankError):
            QuestionBank.from_file(path)
