"""Central logging configuration for the training planner."""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from runcoach.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def _file_handler(path: Path, level: str) -> dict:
    return {
        "class": "logging.FileHandler",
        "filename": str(path),
        "encoding": "utf-8",
        "formatter": "standard",
        "level": level,
    }


def _default_config(log_dir: Path, level: str, sql_echo: bool) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": LOG_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
            "file": _file_handler(log_dir / "app.log", level),
            "scheduler_file": _file_handler(log_dir / "scheduler.log", level),
        },
        "loggers": {
            # Scheduler runs also get their own file next to app.log
            "scheduler": {
                "level": level,
                "handlers": ["scheduler_file"],
            },
            "sqlalchemy.engine": {
                "level": "INFO" if sql_echo else "WARNING",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console", "file"],
        },
    }


def configure_logging() -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    try:
        settings = get_settings()
        log_dir = settings.log_dir
        level = settings.log_level
        sql_echo = settings.debug
    except ValidationError:
        # Settings may be invalid in ad-hoc shells; keep logging usable anyway.
        log_dir = Path("logs")
        level = "INFO"
        sql_echo = False
    log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(_default_config(log_dir, level, sql_echo))
    _configured = True
