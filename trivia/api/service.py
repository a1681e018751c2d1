"""
API Service - Game logic behind the HTTP endpoints.

The service:
1. Starts games (draws questions, creates the session)
2. Advances games (next question or final statistics)
3. Abandons games
4. Formats responses for the bot

This layer is framework-agnostic: it takes validated request models and
returns response models, raising GameError on failure.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..questions import QuestionBank
from ..session import (
    GameOver,
    NextQuestion,
    NextQuestionDispatcher,
    SessionPolicy,
    SessionStore,
)
from ..config import DEFAULT_SESSION_TTL
from .schemas import (
    EndGameRequest,
    NextRequest,
    QuestionResponse,
    QuestionResultInfo,
    StartGameRequest,
    StatisticsResponse,
)

logger = logging.getLogger(__name__)


@dataclass
class GameService:
    """
    Main service for the TheoryBot client.

    Usage:
        service = GameService(bank=QuestionBank.default())

        ack = service.start_game(start_request)
        step = service.next_step(next_request)   # question or statistics
        stats = service.end_game(end_request)
    """
    bank: QuestionBank = field(default_factory=QuestionBank.default)
    store: SessionStore = field(default_factory=SessionStore)
    session_policy: SessionPolicy = SessionPolicy.OVERWRITE
    session_ttl_seconds: int = DEFAULT_SESSION_TTL

    def __post_init__(self):
        self.dispatcher = NextQuestionDispatcher(self.store, policy=self.session_policy)

    def start_game(self, request: StartGameRequest) -> str:
        """
        Create the user's game and acknowledge it.

        Returns:
            "User: <UserID>, Game: <MessageID>, Questions: <QuestionCount>"
        """
        self.store.cleanup_stale(self.session_ttl_seconds)

        questions = self.bank.draw(request.question_count)
        self.dispatcher.start(request.user_id, request.message_id, questions)

        acknowledgement = request.acknowledgement()
        logger.info(acknowledgement)
        return acknowledgement

    def next_step(self, request: NextRequest) -> QuestionResponse | StatisticsResponse:
        """Serve the next question, or the final statistics when the game is over."""
        result = self.dispatcher.advance(
            request.user_id,
            answer=request.answer,
            question_number=request.question_number,
        )
        if isinstance(result, GameOver):
            return self._statistics(result)
        return self._question(result)

    def end_game(self, request: EndGameRequest) -> StatisticsResponse:
        """Abandon the user's game."""
        return self._statistics(self.dispatcher.abandon(request.user_id))

    def active_sessions(self) -> int:
        return len(self.store)

    def _question(self, step: NextQuestion) -> QuestionResponse:
        question = step.question
        return QuestionResponse(
            user_id=step.user_id,
            message_id=step.message_id,
            question_number=step.number,
            question_count=step.total,
            question=question.text,
            right_answer=question.right_answer,
            wrong_answer1=question.wrong_answer(0),
            wrong_answer2=question.wrong_answer(1),
            wrong_answer3=question.wrong_answer(2),
            image=question.image,
            score=step.score,
        )

    def _statistics(self, game_over: GameOver) -> StatisticsResponse:
        return StatisticsResponse(
            user_id=game_over.user_id,
            message_id=game_over.message_id,
            outcome=game_over.outcome.value,
            score=game_over.score,
            total=game_over.total,
            answered=game_over.answered,
            results=[
                QuestionResultInfo(
                    question_number=r.number,
                    question=r.question.text,
                    answer=r.given_answer,
                    right_answer=r.question.right_answer,
                    correct=r.correct,
                )
                for r in game_over.results
            ],
        )
