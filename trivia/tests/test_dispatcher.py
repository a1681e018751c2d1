"""
Tests for the Next-Question Dispatcher.

Covers the per-user game lifecycle:
- start (supersede / reject)
- serving and re-serving questions
- scoring answers, duplicate and out-of-order answers
- completion, abandonment and replay of final statistics
"""

import pytest

from ..errors import ErrorKind, GameError
from ..session import (
    GameOutcome,
    GameOver,
    NextQuestion,
    NextQuestionDispatcher,
    SessionPolicy,
)


@pytest.fixture
def dispatcher(store):
    return NextQuestionDispatcher(store)


@pytest.fixture
def started(dispatcher, questions):
    """Dispatcher with a 3-question game for u1, nothing served yet."""
    dispatcher.start("u1", "m1", questions)
    return dispatcher


class TestStart:

    def test_creates_session_at_index_zero(self, dispatcher, questions):
        session = dispatcher.start("u1", "m1", questions)

        assert session.user_id == "u1"
        assert session.message_id == "m1"
        assert session.question_count == 3
        assert session.index == 0
        assert session.score == 0
        assert not session.awaiting_answer
        assert dispatcher.lookup("u1") is not None

    def test_overwrite_policy_supersedes(self, started, questions):
        started.advance("u1")
        started.start("u1", "m2", questions[:1])

        session = started.lookup("u1")
        assert session.message_id == "m2"
        assert session.question_count == 1
        assert session.index == 0

    def test_reject_policy(self, store, questions):
        dispatcher = NextQuestionDispatcher(store, policy=SessionPolicy.REJECT)
        dispatcher.start("u1", "m1", questions)

        with pytest.raises(GameError) as exc_info:
            dispatcher.start("u1", "m2", questions)

        assert exc_info.value.kind is ErrorKind.SESSION_CONFLICT
        assert dispatcher.lookup("u1").message_id == "m1"

    def test_reject_policy_allows_new_game_after_finish(self, store, questions):
        dispatcher = NextQuestionDispatcher(store, policy=SessionPolicy.REJECT)
        dispatcher.start("u1", "m1", questions)
        dispatcher.abandon("u1")

        dispatcher.start("u1", "m2", questions)
        assert dispatcher.lookup("u1").message_id == "m2"

    def test_new_game_clears_finished_result(self, started, store, questions):
        started.abandon("u1")
        assert store.finished("u1") is not None

        started.start("u1", "m2", questions)
        assert store.finished("u1") is None

    def test_users_are_independent(self, dispatcher, questions):
        dispatcher.start("u1", "m1", questions)
        dispatcher.start("u2", "m2", questions[:2])
        dispatcher.advance("u1")

        assert dispatcher.lookup("u1").awaiting_answer
        assert not dispatcher.lookup("u2").awaiting_answer
        assert dispatcher.lookup("u2").question_count == 2


class TestAdvance:

    def test_unknown_user(self, dispatcher):
        with pytest.raises(GameError) as exc_info:
            dispatcher.advance("ghost")
        assert exc_info.value.kind is ErrorKind.SESSION_NOT_FOUND

    def test_first_question(self, started, questions):
        step = started.advance("u1")

        assert isinstance(step, NextQuestion)
        assert step.number == 1
        assert step.total == 3
        assert step.question == questions[0]
        assert step.score == 0
        assert started.lookup("u1").awaiting_answer

    def test_reserve_without_answer(self, started):
        first = started.advance("u1")
        again = started.advance("u1")

        assert again == first
        assert started.lookup("u1").index == 0

    def test_right_answer_scores(self, started, questions):
        started.advance("u1")
        step = started.advance("u1", answer="4")

        assert step.number == 2
        assert step.question == questions[1]
        assert step.score == 1

    def test_answer_match_ignores_case_and_whitespace(self, started):
        started.advance("u1")
        started.advance("u1", answer="4")
        step = started.advance("u1", answer="  paris ")
        assert step.score == 2

    def test_wrong_answer_does_not_score(self, started):
        started.advance("u1")
        step = started.advance("u1", answer="5")

        assert step.number == 2
        assert step.score == 0

    def test_answer_before_any_question(self, started):
        with pytest.raises(GameError) as exc_info:
            started.advance("u1", answer="4")

        assert exc_info.value.kind is ErrorKind.PAYLOAD_VALIDATION
        assert not started.lookup("u1").awaiting_answer

    def test_duplicate_answer_not_scored_twice(self, started):
        started.advance("u1")
        first = started.advance("u1", answer="4", question_number=1)
        retry = started.advance("u1", answer="4", question_number=1)

        assert retry == first
        session = started.lookup("u1")
        assert session.index == 1
        assert session.score == 1

    def test_answer_for_future_question(self, started):
        started.advance("u1")

        with pytest.raises(GameError) as exc_info:
            started.advance("u1", answer="4", question_number=2)

        assert exc_info.value.kind is ErrorKind.PAYLOAD_VALIDATION
        assert started.lookup("u1").index == 0

    def test_completion_returns_statistics(self, started, store):
        started.advance("u1")
        started.advance("u1", answer="4", question_number=1)
        started.advance("u1", answer="Lyon", question_number=2)
        result = started.advance("u1", answer="h2o", question_number=3)

        assert isinstance(result, GameOver)
        assert result.outcome is GameOutcome.COMPLETED
        assert result.score == 2
        assert result.total == 3
        assert result.answered == 3
        assert [r.correct for r in result.results] == [True, False, True]
        assert [r.number for r in result.results] == [1, 2, 3]
        assert result.results[1].given_answer == "Lyon"

        assert started.lookup("u1") is None
        assert store.finished("u1") == result

    def test_statistics_replayed_after_finish(self, started):
        started.advance("u1")
        started.advance("u1", answer="4")
        started.advance("u1", answer="Paris")
        final = started.advance("u1", answer="H2O", question_number=3)

        assert started.advance("u1") == final
        assert started.advance("u1", answer="H2O", question_number=3) == final

    def test_new_answer_after_finish(self, started):
        started.advance("u1")
        for answer in ("4", "Paris", "H2O"):
            started.advance("u1", answer=answer)

        with pytest.raises(GameError) as exc_info:
            started.advance("u1", answer="again")
        assert exc_info.value.kind is ErrorKind.SESSION_COMPLETE

        with pytest.raises(GameError) as exc_info:
            started.advance("u1", answer="again", question_number=4)
        assert exc_info.value.kind is ErrorKind.SESSION_COMPLETE

    def test_single_question_game(self, dispatcher, questions):
        dispatcher.start("u1", "m1", questions[:1])

        assert dispatcher.advance("u1").number == 1
        result = dispatcher.advance("u1", answer="4")
        assert isinstance(result, GameOver)
        assert result.score == 1

    def test_updated_at_moves(self, started, clock):
        created = started.lookup("u1").updated_at
        clock.advance(30)
        started.advance("u1")
        assert started.lookup("u1").updated_at == created + 30


class TestAbandon:

    def test_abandon_midway(self, started, store):
        started.advance("u1")
        started.advance("u1", answer="4")

        result = started.abandon("u1")

        assert result.outcome is GameOutcome.ABANDONED
        assert result.score == 1
        assert result.answered == 1
        assert result.total == 3
        assert started.lookup("u1") is None
        assert store.finished("u1") == result

    def test_abandon_without_game(self, dispatcher):
        with pytest.raises(GameError) as exc_info:
            dispatcher.abandon("u1")
        assert exc_info.value.kind is ErrorKind.SESSION_NOT_FOUND

    def test_next_after_abandon_replays(self, started):
        result = started.abandon("u1")
        assert started.advance("u1") == result
