"""
Session Module - Per-user game sessions.

A session represents one quiz game:
- Created when the bot starts a game for a user
- Advanced one question at a time
- Archived as final statistics when finished or abandoned

Sessions are EPHEMERAL: in-memory only, gone when the process stops.
"""

from .state import GameOutcome, GameOver, GameSession, NextQuestion, QuestionResult
from .store import SessionPolicy, SessionSlot, SessionStore
from .dispatcher import NextQuestionDispatcher

__all__ = [
    "GameOutcome",
    "GameOver",
    "GameSession",
    "NextQuestion",
    "QuestionResult",
    "SessionPolicy",
    "SessionSlot",
    "SessionStore",
    "NextQuestionDispatcher",
]
