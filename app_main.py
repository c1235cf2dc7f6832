"""Service entry point for the quiz API."""

from __future__ import annotations

from quiz_service.constants.about import APP_NAME, APP_VERSION
from quiz_service.constants.network_constants import APP_ENV, DEFAULT_HOST, DEFAULT_PORT
from quiz_service.core.quiz_manager import QuizManager
from quiz_service.core.services.quiz_repository import QuizRepository
from quiz_service.server.api_server import run_api_server
from quiz_service.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, build the in-memory store and serve the API."""
    logger = configure_logging()
    logger.info("Starting %s %s (%s)", APP_NAME, APP_VERSION, APP_ENV)

    quiz_manager = QuizManager(repository=QuizRepository())
    logger.info("API available at http://%s:%s/api", DEFAULT_HOST, DEFAULT_PORT)
    run_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
