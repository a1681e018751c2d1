"""
Next-Question Dispatcher - Decides what a returning user gets next.

Given a UserID the dispatcher answers with one of:
- the next question (NextQuestion)
- final statistics (GameOver), ending the game
- an error (GameError)

Duplicate delivery is safe:
- a request without an answer re-serves the question awaiting one
- an answer tagged with an already-scored QuestionNumber is not scored again
- once the game is over, retries get the archived statistics
"""

from __future__ import annotations
import logging

from ..errors import ErrorKind, GameError
from ..questions import Question
from .state import GameOutcome, GameOver, GameSession, NextQuestion, QuestionResult
from .store import SessionPolicy, SessionSlot, SessionStore

logger = logging.getLogger(__name__)


class NextQuestionDispatcher:
    """Session lifecycle operations on top of a SessionStore."""

    def __init__(
        self,
        store: SessionStore,
        policy: SessionPolicy = SessionPolicy.OVERWRITE,
    ):
        self.store = store
        self.policy = policy

    def start(self, user_id: str, message_id: str, questions: list[Question]) -> GameSession:
        """
        Create the user's session at question index 0.

        An existing game is superseded, or rejected with SESSION_CONFLICT
        under the REJECT policy.
        """
        with self.store.locked(user_id) as slot:
            if slot.session is not None:
                if self.policy is SessionPolicy.REJECT:
                    raise GameError(
                        ErrorKind.SESSION_CONFLICT,
                        f"User {user_id} already has a game in progress!",
                    )
                logger.info(
                    f"User {user_id}: game {slot.session.message_id} superseded by {message_id}"
                )

            now = self.store.clock()
            slot.session = GameSession(
                user_id=user_id,
                message_id=message_id,
                questions=list(questions),
                created_at=now,
                updated_at=now,
            )
            slot.finished = None
            return slot.session.copy()

    def lookup(self, user_id: str) -> GameSession | None:
        """The user's session, or None if no game is in progress."""
        return self.store.lookup(user_id)

    def advance(
        self,
        user_id: str,
        answer: str | None = None,
        question_number: int | None = None,
    ) -> NextQuestion | GameOver:
        """
        Score `answer` (if any) and move the user's game forward.

        Args:
            user_id: Player whose game to advance
            answer: Answer to the question awaiting one
            question_number: 1-based number of the question `answer` is for;
                lets a retried answer be recognised as a duplicate

        Returns:
            The question to show now, or the final statistics

        Raises:
            GameError: SESSION_NOT_FOUND, SESSION_COMPLETE or PAYLOAD_VALIDATION
        """
        with self.store.locked(user_id) as slot:
            session = slot.session
            if session is None:
                return self._replay_finished(slot, answer, question_number)

            if session.awaiting_answer:
                if answer is None:
                    return self._serve(session)
                if question_number is not None:
                    if question_number < session.current_number:
                        logger.info(
                            f"User {user_id}: duplicate answer for question {question_number}"
                        )
                        return self._serve(session)
                    if question_number > session.current_number:
                        raise GameError(
                            ErrorKind.PAYLOAD_VALIDATION,
                            f"Question {question_number} has not been served yet!",
                        )
                self._score(session, answer)
            elif answer is not None:
                raise GameError(
                    ErrorKind.PAYLOAD_VALIDATION,
                    "No question is awaiting an answer!",
                )

            session.updated_at = self.store.clock()
            if session.is_complete():
                return self._finish(slot, GameOutcome.COMPLETED)

            session.awaiting_answer = True
            return self._serve(session)

    def abandon(self, user_id: str) -> GameOver:
        """End the user's game early and return its statistics so far."""
        with self.store.locked(user_id) as slot:
            if slot.session is None:
                raise GameError(
                    ErrorKind.SESSION_NOT_FOUND,
                    f"No active game for user {user_id}!",
                )
            return self._finish(slot, GameOutcome.ABANDONED)

    def _serve(self, session: GameSession) -> NextQuestion:
        logger.info(
            f"User {session.user_id}: serving question "
            f"{session.current_number}/{session.question_count}"
        )
        return NextQuestion(
            user_id=session.user_id,
            message_id=session.message_id,
            number=session.current_number,
            total=session.question_count,
            question=session.current_question(),
            score=session.score,
        )

    def _score(self, session: GameSession, answer: str):
        question = session.current_question()
        correct = question.is_correct(answer)
        session.results.append(QuestionResult(
            number=session.current_number,
            question=question,
            given_answer=answer,
            correct=correct,
        ))
        if correct:
            session.score += 1
        session.index += 1
        session.awaiting_answer = False

    def _finish(self, slot: SessionSlot, outcome: GameOutcome) -> GameOver:
        game_over = GameOver.from_session(slot.session, outcome, self.store.clock())
        slot.session = None
        slot.finished = game_over
        logger.info(
            f"User {game_over.user_id}: game {game_over.message_id} {outcome.value}, "
            f"score {game_over.score}/{game_over.total}"
        )
        return game_over

    def _replay_finished(
        self,
        slot: SessionSlot,
        answer: str | None,
        question_number: int | None,
    ) -> GameOver:
        finished = slot.finished
        if finished is None:
            raise GameError(
                ErrorKind.SESSION_NOT_FOUND,
                f"No active game for user {slot.user_id}!",
            )
        duplicate = question_number is not None and question_number <= finished.total
        if answer is None or duplicate:
            return finished
        raise GameError(
            ErrorKind.SESSION_COMPLETE,
            f"Game {finished.message_id} is already over!",
        )
