# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "ekan"

# Supabase's HTTP stack logs every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def setup_logger(level: str = settings.LOG_LEVEL) -> logging.Logger:
    service_logger = logging.getLogger(LOGGER_NAME)
    service_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Uvicorn --reload imports this module again
    if not service_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        service_logger.addHandler(handler)

    return service_logger


logger = setup_logger()
