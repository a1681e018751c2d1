"""
Request Validation - Everything checked between authentication and the
game logic.

Order matters:
1. validate_request: path and client marker (headers only)
2. require_method: HTTP method (no body access)
3. read_body + decode_payload: bounded read, JSON object into a loose dict
4. parse_*: schema check into a frozen request model

Steps 1 and 2 never touch the body, so a misrouted or foreign request is
rejected without reading or decoding anything.
"""

from __future__ import annotations
from typing import Any
import json
import logging
import math

from pydantic import ValidationError
from fastapi import Request

from ..config import MAX_QUESTION_COUNT
from ..errors import ErrorKind, GameError
from .schemas import EndGameRequest, NextRequest, StartGamePayload, StartGameRequest

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "404 Page Not Found."
INVALID_CLIENT_MESSAGE = "Invalid User Agent!"
METHOD_MESSAGE = "Method no support!"
DECODE_MESSAGE = "Error While Decoding JSON! Did You Send It Wrong?"
TOO_LARGE_MESSAGE = "Request body too large!"
START_FIELDS_MESSAGE = (
    "Please specify UserID(string), MessageID(string) and QuestionCount(int) in the JSON!"
)
USER_FIELDS_MESSAGE = "Please specify UserID(string) in the JSON!"
NEXT_FIELDS_MESSAGE = (
    "Please specify UserID(string), and optionally Answer(string) "
    "and QuestionNumber(int) in the JSON!"
)


def question_count_message(maximum: int = MAX_QUESTION_COUNT) -> str:
    return f"Invalid question count! Please give a value from 1 to {maximum}"


def validate_request(expected_path: str, request: Request, client_user_agent: str):
    """
    Check that the request targets `expected_path` and comes from the
    expected client.

    Raises:
        GameError: ROUTING or CLIENT_IDENTITY
    """
    if request.url.path != expected_path:
        raise GameError(ErrorKind.ROUTING, NOT_FOUND_MESSAGE)

    if request.headers.get("User-Agent") != client_user_agent:
        raise GameError(ErrorKind.CLIENT_IDENTITY, INVALID_CLIENT_MESSAGE)


def require_method(request: Request, *allowed: str):
    """Raises METHOD_NOT_ALLOWED unless the request uses one of `allowed`."""
    if request.method not in allowed:
        raise GameError(
            ErrorKind.METHOD_NOT_ALLOWED,
            METHOD_MESSAGE,
            headers={"Allow": ", ".join(allowed)},
        )


async def read_body(request: Request, max_bytes: int) -> bytes:
    """
    Read the whole request body, refusing anything over `max_bytes`.

    A declared Content-Length over the limit is refused before reading.
    """
    declared = request.headers.get("Content-Length")
    if declared is not None and declared.isdigit() and int(declared) > max_bytes:
        raise GameError(ErrorKind.PAYLOAD_TOO_LARGE, TOO_LARGE_MESSAGE)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise GameError(ErrorKind.PAYLOAD_TOO_LARGE, TOO_LARGE_MESSAGE)
    return bytes(body)


def decode_payload(body: bytes | str) -> dict[str, Any]:
    """
    Decode a JSON object into a plain dict.

    Numbers come back as floats and strings as strings; no schema is
    applied here.

    Raises:
        GameError: PAYLOAD_DECODE if the body is not a JSON object
    """
    try:
        payload = json.loads(body, parse_int=float)
    except (ValueError, RecursionError):
        raise GameError(ErrorKind.PAYLOAD_DECODE, DECODE_MESSAGE)

    if not isinstance(payload, dict):
        raise GameError(ErrorKind.PAYLOAD_DECODE, DECODE_MESSAGE)

    logger.info(f"Decoded payload: {payload}")
    return payload


def parse_start_game(
    payload: dict[str, Any],
    max_question_count: int = MAX_QUESTION_COUNT,
) -> StartGameRequest:
    """
    Turn a decoded start body into a StartGameRequest.

    QuestionCount is truncated toward zero, then range-checked.

    Raises:
        GameError: PAYLOAD_VALIDATION
    """
    try:
        fields = StartGamePayload.model_validate(payload)
    except ValidationError:
        raise GameError(ErrorKind.PAYLOAD_VALIDATION, START_FIELDS_MESSAGE)

    raw_count = fields.question_count
    count = int(raw_count) if math.isfinite(raw_count) else 0
    if not 1 <= count <= max_question_count:
        raise GameError(
            ErrorKind.PAYLOAD_VALIDATION,
            question_count_message(max_question_count),
        )

    return StartGameRequest(
        user_id=fields.user_id,
        message_id=fields.message_id,
        question_count=count,
    )


def parse_next_request(payload: dict[str, Any]) -> NextRequest:
    """
    Turn a decoded body or query mapping into a NextRequest.

    Raises:
        GameError: PAYLOAD_VALIDATION
    """
    try:
        return NextRequest.model_validate(payload)
    except ValidationError:
        raise GameError(ErrorKind.PAYLOAD_VALIDATION, NEXT_FIELDS_MESSAGE)


def parse_end_game(payload: dict[str, Any]) -> EndGameRequest:
    try:
        return EndGameRequest.model_validate(payload)
    except ValidationError:
        raise GameError(ErrorKind.PAYLOAD_VALIDATION, USER_FIELDS_MESSAGE)
