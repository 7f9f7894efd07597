import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from hiretrack.config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(module)s: %(message)s"


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("hiretrack")
    if getattr(logger, "_hiretrack_configured", False):
        return logger

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # Stream to stdout (useful on dev/docker)
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # Rotating file handler (5MB x 5), skipped when LOG_DIR is empty
    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / settings.LOG_FILENAME, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger._hiretrack_configured = True
    logger.info("Logging initialized.")
    return logger
