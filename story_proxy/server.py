"""
Process entry point for the bedtime story proxy.

Run with: story-proxy  (or python -m story_proxy.server)
"""

import logging
import sys

import uvicorn
from dotenv import find_dotenv, load_dotenv

from .api.config import Settings
from .api.errors import ConfigurationError
from .api.logging import configure_logging
from .api.main import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    """Load configuration and run the API server.

    Exits with status 1 before binding the port if configuration is invalid.
    """
    # Load .env from project root (find_dotenv searches parent directories)
    load_dotenv(find_dotenv(usecwd=True))

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        configure_logging()
        logger.critical(f"ERROR: {e}")
        sys.exit(1)

    configure_logging(
        json_format=settings.json_logs,
        level=logging.DEBUG if settings.verbose_logging else logging.INFO,
    )

    app = create_app(settings)
    logger.info(f"Starting Gemini proxy server on port {settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep our handlers
    )


if __name__ == "__main__":
    main()
