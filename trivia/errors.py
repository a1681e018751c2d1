"""
Errors - Tagged failures raised anywhere in the request pipeline.

Every failure is a GameError carrying an ErrorKind. The HTTP status is not
stored on the error: it is looked up in the active StatusPolicy when the
response is written, so the two status tables below stay the single place
where kinds meet status codes.

Error kinds:
- AUTHENTICATION: missing, malformed or wrong Basic credentials
- ROUTING: request path does not match the handler's path
- CLIENT_IDENTITY: User-Agent is not the expected client marker
- PAYLOAD_DECODE: body is not a JSON object
- PAYLOAD_TOO_LARGE: body exceeds the configured limit
- PAYLOAD_VALIDATION: fields missing, mistyped or out of range
- METHOD_NOT_ALLOWED: HTTP method not supported by the endpoint
- SESSION_NOT_FOUND: user has no game in progress
- SESSION_CONFLICT: user already has a game and superseding is disabled
- SESSION_COMPLETE: answer submitted for a finished game
"""

from __future__ import annotations
from enum import Enum
from typing import Mapping


class ErrorKind(str, Enum):
    """Kinds of request failure."""
    AUTHENTICATION = "AUTHENTICATION"
    ROUTING = "ROUTING"
    CLIENT_IDENTITY = "CLIENT_IDENTITY"
    PAYLOAD_DECODE = "PAYLOAD_DECODE"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    PAYLOAD_VALIDATION = "PAYLOAD_VALIDATION"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_CONFLICT = "SESSION_CONFLICT"
    SESSION_COMPLETE = "SESSION_COMPLETE"


class GameError(Exception):
    """A request failure that is reported straight back to the caller."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        headers: Mapping[str, str] | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.headers = dict(headers or {})

    def __repr__(self) -> str:
        return f"GameError({self.kind.value}, {self.message!r})"


# Status codes the TheoryBot client has always received.
LEGACY_STATUS: dict[ErrorKind, int] = {
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.ROUTING: 404,
    ErrorKind.CLIENT_IDENTITY: 500,
    ErrorKind.PAYLOAD_DECODE: 500,
    ErrorKind.PAYLOAD_TOO_LARGE: 413,
    ErrorKind.PAYLOAD_VALIDATION: 400,
    ErrorKind.METHOD_NOT_ALLOWED: 400,
    ErrorKind.SESSION_NOT_FOUND: 404,
    ErrorKind.SESSION_CONFLICT: 409,
    ErrorKind.SESSION_COMPLETE: 409,
}

STRICT_STATUS: dict[ErrorKind, int] = {
    **LEGACY_STATUS,
    ErrorKind.CLIENT_IDENTITY: 403,
    ErrorKind.PAYLOAD_DECODE: 400,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
}


class StatusPolicy(str, Enum):
    """Which status table to answer with."""
    LEGACY = "legacy"
    STRICT = "strict"

    def status_for(self, kind: ErrorKind) -> int:
        table = STRICT_STATUS if self is StatusPolicy.STRICT else LEGACY_STATUS
        return table[kind]


def _check_tables_exhaustive():
    for name, table in (("legacy", LEGACY_STATUS), ("strict", STRICT_STATUS)):
        missing = set(ErrorKind) - set(table)
        if missing:
            raise RuntimeError(
                f"{name} status table has no entry for: "
                + ", ".join(sorted(kind.value for kind in missing))
            )


_check_tables_exhaustive()
