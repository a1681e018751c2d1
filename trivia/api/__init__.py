"""
API Module - HTTP interface for the TheoryBot client.

The bot:
1. Starts a game for a user (/startGame)
2. Asks for the next question, sending the user's answers (/getNext)
3. Receives final statistics when the game is over
4. Abandons games it no longer needs (/endGame)

All state is session-scoped. No persistent user accounts.
"""

from .schemas import (
    # Requests
    StartGameRequest,
    NextRequest,
    EndGameRequest,
    # Responses
    QuestionResponse,
    QuestionResultInfo,
    StatisticsResponse,
    HealthResponse,
)
from .auth import BasicAuthGate
from .service import GameService
from .app import create_app, create_app_from_env

__all__ = [
    # Requests
    "StartGameRequest",
    "NextRequest",
    "EndGameRequest",
    # Responses
    "QuestionResponse",
    "QuestionResultInfo",
    "StatisticsResponse",
    "HealthResponse",
    # Service
    "BasicAuthGate",
    "GameService",
    "create_app",
    "create_app_from_env",
]
