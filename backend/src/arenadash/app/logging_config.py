# backend/src/arenadash/app/logging_config.py
import logging
import logging.config
import os

_FORMAT = "%(asctime)s %(levelname)s [cid=%(correlation_id)s] %(name)s: %(message)s"


def build_logging_config(level: str = "INFO") -> dict:
    """dictConfig com o filtro de correlation-id em todos os handlers."""
    return {
        "version": 1,
        "disable_existing_loggers": False,  # mantém loggers de uvicorn/fastapi
        "filters": {
            "cid": {"()": "arenadash.observability.correlacao.CorrelationIdLogFilter"},
        },
        "formatters": {
            "default": {"format": _FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "filters": ["cid"],
                "formatter": "default",
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "arenadash": {"level": level, "handlers": ["console"], "propagate": False},
        },
    }


def setup_logging():
    """Aplica a configuração; nível via ``ARENA_LOG_LEVEL`` (padrão INFO)."""
    level = os.getenv("ARENA_LOG_LEVEL", "INFO").upper()
    logging.config.dictConfig(build_logging_config(level))
