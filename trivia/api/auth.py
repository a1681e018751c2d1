"""
Auth Gate - HTTP Basic authentication for every endpoint.

Used as a FastAPI dependency, so it runs before the endpoint body and
before the request body is read:

    gate = BasicAuthGate(config.credentials)

    @app.post("/startGame", dependencies=[Depends(gate)])
    async def start_game(request: Request): ...

The Authorization header is decoded to raw bytes, so credentials in any
encoding work as long as the client sends the same bytes the credentials
file holds (UTF-8). Username and password are each compared in constant
time, and both comparisons always run, so a response reveals nothing about
how much of either value matched.
"""

from __future__ import annotations
import base64
import binascii
import logging
import secrets

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param

from ..config import Credentials
from ..errors import ErrorKind, GameError

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized, invalid credentials"
CHALLENGE_HEADERS = {"WWW-Authenticate": "Basic"}


class MalformedCredentials(ValueError):
    """The Authorization header is Basic but cannot be decoded."""


def parse_basic_authorization(header: str | None) -> tuple[bytes, bytes] | None:
    """
    Split a Basic Authorization header into (username, password) bytes.

    Returns None when the header is absent or uses another scheme.

    Raises:
        MalformedCredentials: bad base64, or no ':' separator
    """
    scheme, param = get_authorization_scheme_param(header)
    if not header or scheme.lower() != "basic" or not param:
        return None

    try:
        decoded = base64.b64decode(param, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedCredentials("invalid base64")

    username, separator, password = decoded.partition(b":")
    if not separator:
        raise MalformedCredentials("no ':' separator")
    return username, password


def _as_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


class BasicAuthGate:
    """Rejects any request whose Basic credentials differ from the configured pair."""

    def __init__(self, credentials: Credentials):
        self._username = credentials.username.encode("utf-8")
        self._password = credentials.password.encode("utf-8")

    def verify(self, username: str | bytes, password: str | bytes) -> bool:
        """Constant-time check of a username/password pair."""
        username_ok = secrets.compare_digest(_as_bytes(username), self._username)
        password_ok = secrets.compare_digest(_as_bytes(password), self._password)
        return username_ok and password_ok

    async def __call__(self, request: Request) -> str:
        """
        Authenticate the request.

        Returns:
            The authenticated username

        Raises:
            GameError: AUTHENTICATION, with a Basic challenge header
        """
        try:
            supplied = parse_basic_authorization(request.headers.get("Authorization"))
        except MalformedCredentials as e:
            raise self._rejection(request, f"malformed Authorization header ({e})") from None

        if supplied is None:
            raise self._rejection(request, "no Basic credentials")

        username, password = supplied
        display_name = username.decode("utf-8", errors="replace")
        if not self.verify(username, password):
            raise self._rejection(request, f"wrong credentials for user '{display_name}'")

        return display_name

    def _rejection(self, request: Request, reason: str) -> GameError:
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected {request.method} {request.url.path} from {client}: {reason}")
        return GameError(
            ErrorKind.AUTHENTICATION,
            UNAUTHORIZED_MESSAGE,
            headers=CHALLENGE_HEADERS,
        )
