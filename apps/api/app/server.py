import sys

import uvicorn
from loguru import logger

from app.core.config import ConfigError, load_settings
from app.core.logging import setup_logging
from app.main import create_app


def main() -> None:
    setup_logging()
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.critical("{}", e)
        sys.exit(1)

    setup_logging(settings.LOG_LEVEL)
    logger.info("GitHub token configured, listening on {}:{}", settings.HOST, settings.PORT)

    app = create_app(settings)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
