"""Application entry point for the live quiz server."""

from __future__ import annotations

import logging
import socket

from live_quiz.core.quiz_manager import QuizManager
from live_quiz.server.api_server import run_api_server
from live_quiz.utils.logging_config import configure_logging
from live_quiz.utils.settings import ServerSettings


def _determine_public_host(port: int) -> str:
    """Best-effort determination of the local IP for participant join links."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"{ip_address}:{port}"


def main() -> None:
    """Initialize logging and serve the quiz API."""
    settings = ServerSettings()
    logger = configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
    public_host = settings.public_host or _determine_public_host(settings.port)
    logger.info("Starting live quiz server on %s:%d", settings.host, settings.port)
    logger.info("Participants join via https://%s/participant/<quiz id>", public_host)

    quiz_manager = QuizManager()
    run_api_server(
        quiz_manager=quiz_manager,
        public_host=public_host,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
