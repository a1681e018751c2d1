"""
Pytest fixtures for Trivia tests.
"""

import pytest

from ..api.app import create_app
from ..api.service import GameService
from ..config import Credentials, ServerConfig
from ..questions import Question, QuestionBank
from ..session import SessionStore


USERNAME = "admin"
PASSWORD = "secret"
BOT_HEADERS = {"User-Agent": "TheoryBot"}


class FakeClock:
    """Manually advanced clock for session timestamps."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username=USERNAME, password=PASSWORD)


@pytest.fixture
def config(credentials: Credentials) -> ServerConfig:
    return ServerConfig(credentials=credentials)


@pytest.fixture
def questions() -> list[Question]:
    """Three questions with known answers."""
    return [
        Question("q1", "What is 2 + 2?", "4", ("3", "5", "22")),
        Question("q2", "Capital of France?", "Paris", ("Lyon", "Nice", "Lille")),
        Question("q3", "Chemical symbol for water?", "H2O", ("CO2", "O2"), image="water.png"),
    ]


@pytest.fixture
def bank(questions: list[Question]) -> QuestionBank:
    return QuestionBank(questions, seed=7)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SessionStore:
    return SessionStore(clock=clock)


@pytest.fixture
def service(bank: QuestionBank, store: SessionStore) -> GameService:
    return GameService(bank=bank, store=store)


@pytest.fixture
def client(config: ServerConfig, service: GameService):
    """TestClient for an app with the default (legacy) policies."""
    from fastapi.testclient import TestClient

    return TestClient(create_app(config, service=service))


@pytest.fixture
def auth() -> tuple[str, str]:
    return (USERNAME, PASSWORD)
