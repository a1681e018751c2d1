"""
Trivia CLI - Command-line interface for the game server.

Usage:
    trivia serve [--credentials creds.json] [--port 6969]   Run the server
    trivia check-config [--credentials creds.json]          Validate config files

Settings not given as flags come from TRIVIA_* environment variables
(see config.py).
"""

import argparse
import logging
import sys

from .config import ConfigurationError, ServerConfig, configure_logging
from .errors import StatusPolicy
from .questions import QuestionBankError
from .session import SessionPolicy

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Trivia - Game server for the TheoryBot quiz client",
        prog="trivia",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    _add_config_arguments(serve_parser)
    serve_parser.add_argument("--host", help="Bind host")
    serve_parser.add_argument("--port", type=int, help="Bind port")
    serve_parser.add_argument(
        "--status-policy",
        choices=[p.value for p in StatusPolicy],
        help="Status codes for client-identity and decode failures",
    )
    serve_parser.add_argument(
        "--session-policy",
        choices=[p.value for p in SessionPolicy],
        help="What a new game does to one already in progress",
    )
    serve_parser.add_argument("--log-level", help="Logging level")

    # Check command
    check_parser = subparsers.add_parser("check-config", help="Validate configuration files")
    _add_config_arguments(check_parser)

    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "check-config":
        cmd_check_config(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_config_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--credentials", help="Credentials JSON file")
    parser.add_argument("--questions", help="Question bank JSON file")


def _load_config(args) -> ServerConfig:
    overrides = {
        "credentials_file": args.credentials,
        "questions_file": args.questions,
        "host": getattr(args, "host", None),
        "port": getattr(args, "port", None),
        "log_level": getattr(args, "log_level", None),
    }
    status_policy = getattr(args, "status_policy", None)
    if status_policy:
        overrides["status_policy"] = StatusPolicy(status_policy)
    session_policy = getattr(args, "session_policy", None)
    if session_policy:
        overrides["session_policy"] = SessionPolicy(session_policy)
    return ServerConfig.from_env(**overrides)


def cmd_serve(args):
    """Run the server until interrupted."""
    import uvicorn
    from .api.app import create_app

    configure_logging()
    try:
        config = _load_config(args)
        configure_logging(config.log_level)
        app = create_app(config)
    except (ConfigurationError, QuestionBankError) as e:
        logger.error(f"Cannot start server: {e}")
        sys.exit(1)

    logger.info(f"Starting server at {config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def cmd_check_config(args):
    """Load every configured file and report what was found."""
    from .api.app import load_question_bank

    configure_logging("WARNING")
    try:
        config = _load_config(args)
        bank = load_question_bank(config)
    except (ConfigurationError, QuestionBankError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Credentials: OK (user '{config.credentials.username}')")
    print(f"Questions: {len(bank)}")
    print(f"Listening on: {config.host}:{config.port}")
    print(f"Client marker: User-Agent: {config.client_user_agent}")
    print(f"Status policy: {config.status_policy.value}")
    print(f"Session policy: {config.session_policy.value}")


if __name__ == "__main__":
    main()
