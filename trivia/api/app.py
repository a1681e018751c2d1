"""
FastAPI Application - HTTP endpoints for the TheoryBot client.

Endpoints (all require HTTP Basic auth):
    POST      /startGame    Start a game for a user
    GET|POST  /getNext      Next question, or final statistics
    POST      /endGame      Abandon a game
    GET       /health       Health check

Game endpoints also require the client marker header
(User-Agent: TheoryBot by default).

Every failure is a GameError turned into a plain-text response whose
status comes from the configured StatusPolicy.

Running:
    trivia serve
    uvicorn trivia.api.app:create_app_from_env --factory --port 6969
"""

from __future__ import annotations
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import ServerConfig
from ..errors import ErrorKind, GameError
from ..questions import QuestionBank
from .auth import BasicAuthGate
from .schemas import HealthResponse
from .service import GameService
from .validation import (
    METHOD_MESSAGE,
    NOT_FOUND_MESSAGE,
    decode_payload,
    parse_end_game,
    parse_next_request,
    parse_start_game,
    read_body,
    require_method,
    validate_request,
)

logger = logging.getLogger(__name__)

# Endpoints answer unsupported methods themselves instead of a bare 405
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def load_question_bank(config: ServerConfig) -> QuestionBank:
    """The configured question file, or the built-in sample set."""
    if config.questions_file is not None:
        bank = QuestionBank.from_file(config.questions_file)
        logger.info(f"Loaded {len(bank)} questions from {config.questions_file}")
        return bank
    bank = QuestionBank.default()
    logger.info(f"Using {len(bank)} built-in sample questions")
    return bank


def create_app(config: ServerConfig, service: GameService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Server configuration (credentials, limits, policies)
        service: Optional GameService instance (built from config if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Trivia Game Server",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )

    game_service = service or GameService(
        bank=load_question_bank(config),
        session_policy=config.session_policy,
        session_ttl_seconds=config.session_ttl_seconds,
    )
    auth_gate = BasicAuthGate(config.credentials)

    app.state.config = config
    app.state.service = game_service

    # =========================================================================
    # Error handling
    # =========================================================================

    def error_response(request: Request, exc: GameError) -> PlainTextResponse:
        status_code = config.status_policy.status_for(exc.kind)
        logger.warning(
            f"{request.method} {request.url.path} -> {status_code} "
            f"{exc.kind.value}: {exc.message}"
        )
        return PlainTextResponse(
            exc.message + "\n",
            status_code=status_code,
            headers=exc.headers,
        )

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError) -> PlainTextResponse:
        return error_response(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def routing_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> PlainTextResponse:
        """
        Requests the router itself turns away (unknown path, method a
        route does not accept). They still go through the auth gate first.
        """
        try:
            await auth_gate(request)
        except GameError as auth_error:
            return error_response(request, auth_error)

        if exc.status_code == 404:
            return error_response(request, GameError(ErrorKind.ROUTING, NOT_FOUND_MESSAGE))
        if exc.status_code == 405:
            return error_response(
                request,
                GameError(ErrorKind.METHOD_NOT_ALLOWED, METHOD_MESSAGE, headers=exc.headers),
            )
        return PlainTextResponse(
            f"{exc.detail}\n",
            status_code=exc.status_code,
            headers=exc.headers,
        )

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.api_route("/startGame", methods=ANY_METHOD, dependencies=[Depends(auth_gate)])
    async def start_game(request: Request) -> PlainTextResponse:
        """
        Start a game.

        **Request Body:**
        ```json
        {"UserID": "u1", "MessageID": "m1", "QuestionCount": 5}
        ```
        """
        validate_request("/startGame", request, config.client_user_agent)
        require_method(request, "POST")

        payload = decode_payload(await read_body(request, config.max_body_bytes))
        start = parse_start_game(payload, config.max_question_count)

        acknowledgement = game_service.start_game(start)
        return PlainTextResponse(acknowledgement + "\n")

    @app.api_route("/getNext", methods=ANY_METHOD, dependencies=[Depends(auth_gate)])
    async def get_next(request: Request) -> JSONResponse:
        """
        Next question of the user's game, or its final statistics.

        GET takes UserID, Answer and QuestionNumber as query parameters;
        POST takes them as a JSON body.
        """
        validate_request("/getNext", request, config.client_user_agent)
        require_method(request, "GET", "POST")

        if request.method == "GET":
            payload = dict(request.query_params)
        else:
            payload = decode_payload(await read_body(request, config.max_body_bytes))

        step = game_service.next_step(parse_next_request(payload))
        return JSONResponse(step.to_wire())

    @app.api_route("/endGame", methods=ANY_METHOD, dependencies=[Depends(auth_gate)])
    async def end_game(request: Request) -> JSONResponse:
        """Abandon the user's game and return its statistics so far."""
        validate_request("/endGame", request, config.client_user_agent)
        require_method(request, "POST")

        payload = decode_payload(await read_body(request, config.max_body_bytes))
        statistics = game_service.end_game(parse_end_game(payload))
        return JSONResponse(statistics.to_wire())

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        dependencies=[Depends(auth_gate)],
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="trivia-server",
            version=__version__,
            active_sessions=game_service.active_sessions(),
        )

    return app


def create_app_from_env() -> FastAPI:
    """Application factory for `uvicorn --factory`, configured from TRIVIA_* variables."""
    return create_app(ServerConfig.from_env())
