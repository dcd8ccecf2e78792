"""
Logging configuration for the E-Season API.

Application and server loggers share one stdout handler; uvicorn access
lines get their own handler so health checks can be dropped without
touching anything else.
"""

import logging
import logging.config
from typing import Any, Dict, Iterable, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HEALTH_PATHS = ("/health",)

# Loggers that follow the configured application level
APP_LOGGERS = ("eseason", "uvicorn", "uvicorn.error")


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check lines from uvicorn access logs."""

    def __init__(self, paths: Iterable[str] = HEALTH_PATHS):
        super().__init__()
        self.paths = frozenset(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        # uvicorn passes (client, method, path, http_version, status)
        if isinstance(record.args, tuple) and len(record.args) == 5:
            method, path = record.args[1], str(record.args[2])
            return not (method == "GET" and path.split("?", 1)[0] in self.paths)
        message = record.getMessage()
        return not ("GET" in message and any(f"{p} " in message for p in self.paths))


def _logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(
    level: str = "INFO",
    fmt: Optional[str] = None,
    sql_level: str = "WARNING",
) -> Dict[str, Any]:
    """
    Build a dictConfig dictionary.

    Args:
        level: Level for application and server loggers
        fmt: Record format (defaults to DEFAULT_FORMAT)
        sql_level: Level for SQLAlchemy statement logging

    Returns:
        Dictionary accepted by logging.config.dictConfig
    """
    loggers = {name: _logger("default", level) for name in APP_LOGGERS}
    loggers["uvicorn.access"] = _logger("access", level)
    loggers["sqlalchemy.engine"] = _logger("default", sql_level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {"()": HealthCheckFilter},
        },
        "formatters": {
            "default": {"format": fmt or DEFAULT_FORMAT},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": loggers,
        "root": {"level": level, "handlers": ["default"]},
    }


def configure_logging(
    level: str = "INFO", fmt: Optional[str] = None, sql_level: str = "WARNING"
) -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level, fmt, sql_level))
