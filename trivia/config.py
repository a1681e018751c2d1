"""
Server Configuration - Credentials and settings loaded once at startup.

The configuration is an explicit value:
- Built by ServerConfig.from_env() or by the CLI
- Passed into create_app()
- Never modified afterwards

Any problem with it (missing credentials file, malformed JSON, bad
environment value) raises ConfigurationError, which is fatal at startup.

Environment:
    TRIVIA_CREDENTIALS_FILE     Credentials JSON (default: creds.json)
    TRIVIA_HOST                 Bind host (default: 0.0.0.0)
    TRIVIA_PORT                 Bind port (default: 6969)
    TRIVIA_CLIENT_USER_AGENT    Expected client marker (default: TheoryBot)
    TRIVIA_MAX_BODY_BYTES       Request body limit (default: 65536)
    TRIVIA_STATUS_POLICY        legacy | strict (default: legacy)
    TRIVIA_SESSION_POLICY       overwrite | reject (default: overwrite)
    TRIVIA_SESSION_TTL          Idle session lifetime in seconds (default: 3600)
    TRIVIA_QUESTIONS_FILE       Question bank JSON (default: built-in set)
    TRIVIA_LOG_LEVEL            Logging level (default: INFO)
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping
import json
import logging
import os

from uvicorn.config import LOG_LEVELS

from .errors import StatusPolicy
from .session.store import SessionPolicy

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_FILE = "creds.json"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6969
DEFAULT_CLIENT_USER_AGENT = "TheoryBot"
DEFAULT_MAX_BODY_BYTES = 64 * 1024
DEFAULT_SESSION_TTL = 3600
MAX_QUESTION_COUNT = 30

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigurationError(Exception):
    """Raised when the server cannot be configured. Fatal at startup."""


@dataclass(frozen=True)
class Credentials:
    """The single username/password pair every request must present."""
    username: str
    password: str = field(repr=False)


def load_credentials(path: str | Path) -> Credentials:
    """
    Load credentials from a JSON file.

    Expected format:
        {"Username": "...", "Password": "..."}

    Raises:
        ConfigurationError: file missing, unreadable or malformed
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(
            f"Credentials file not found: {path}. Does it exist?"
        )
    except OSError as e:
        raise ConfigurationError(f"Cannot read credentials file {path}: {e}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Credentials file {path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Credentials file {path} must contain a JSON object")

    username = data.get("Username")
    password = data.get("Password")
    if not isinstance(username, str) or not isinstance(password, str):
        raise ConfigurationError(
            f"Credentials file {path} must define string Username and Password"
        )

    logger.info(f"Loaded credentials for user '{username}' from {path}")
    return Credentials(username=username, password=password)


@dataclass(frozen=True)
class ServerConfig:
    """Everything the HTTP layer needs, fixed for the life of the process."""
    credentials: Credentials
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    client_user_agent: str = DEFAULT_CLIENT_USER_AGENT
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    max_question_count: int = MAX_QUESTION_COUNT
    status_policy: StatusPolicy = StatusPolicy.LEGACY
    session_policy: SessionPolicy = SessionPolicy.OVERWRITE
    session_ttl_seconds: int = DEFAULT_SESSION_TTL
    questions_file: Path | None = None
    log_level: str = "INFO"

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Port out of range: {self.port}")
        if self.max_body_bytes <= 0:
            raise ConfigurationError("max_body_bytes must be positive")
        if not 1 <= self.max_question_count <= MAX_QUESTION_COUNT:
            raise ConfigurationError(
                f"max_question_count must be between 1 and {MAX_QUESTION_COUNT}"
            )
        if self.session_ttl_seconds <= 0:
            raise ConfigurationError("session_ttl_seconds must be positive")
        level = self.log_level.lower()
        if level not in LOG_LEVELS or not isinstance(logging.getLevelName(level.upper()), int):
            choices = ", ".join(name for name in LOG_LEVELS if name != "trace")
            raise ConfigurationError(
                f"Unknown log level: {self.log_level} (choose from {choices})"
            )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "ServerConfig":
        """
        Build the configuration from TRIVIA_* environment variables.

        Keyword overrides win over the environment (the CLI passes its
        flags this way). A `credentials_file` override replaces
        TRIVIA_CREDENTIALS_FILE.
        """
        env = os.environ if environ is None else environ

        credentials_file = overrides.pop("credentials_file", None) or env.get(
            "TRIVIA_CREDENTIALS_FILE", DEFAULT_CREDENTIALS_FILE
        )
        questions_file = env.get("TRIVIA_QUESTIONS_FILE")

        values: dict[str, Any] = {
            "host": env.get("TRIVIA_HOST", DEFAULT_HOST),
            "port": _int_setting(env, "TRIVIA_PORT", DEFAULT_PORT),
            "client_user_agent": env.get(
                "TRIVIA_CLIENT_USER_AGENT", DEFAULT_CLIENT_USER_AGENT
            ),
            "max_body_bytes": _int_setting(
                env, "TRIVIA_MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES
            ),
            "status_policy": _enum_setting(
                env, "TRIVIA_STATUS_POLICY", StatusPolicy, StatusPolicy.LEGACY
            ),
            "session_policy": _enum_setting(
                env, "TRIVIA_SESSION_POLICY", SessionPolicy, SessionPolicy.OVERWRITE
            ),
            "session_ttl_seconds": _int_setting(
                env, "TRIVIA_SESSION_TTL", DEFAULT_SESSION_TTL
            ),
            "questions_file": Path(questions_file) if questions_file else None,
            "log_level": env.get("TRIVIA_LOG_LEVEL", "INFO"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        if isinstance(values["questions_file"], str):
            values["questions_file"] = Path(values["questions_file"])

        return cls(credentials=load_credentials(credentials_file), **values)

    def with_overrides(self, **changes: Any) -> "ServerConfig":
        """Copy of this config with some settings replaced."""
        return replace(self, **changes)


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _enum_setting(env: Mapping[str, str], name: str, enum_cls, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(f"{name} must be one of: {choices}; got {raw!r}")


def configure_logging(level: str = "INFO"):
    """Set up process-wide logging for the server."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
