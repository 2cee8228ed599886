# academy/core/logging.py
import logging
import logging.config

from academy.core.config import settings

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once; uvicorn loggers propagate into it."""
    global _configured
    if _configured:
        return

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {"level": level or settings.LOG_LEVEL, "handlers": ["console"]},
        "loggers": {
            # SQL echo is noisy at INFO
            "sqlalchemy.engine": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
        },
    })
    _configured = True
