"""Logging setup for the planner API and scripts."""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from run_planner.config import Settings, get_settings

LOG_FILENAME = "planner.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers that log every outbound request at INFO.
QUIET_LOGGERS = ("urllib3", "httpx", "anthropic")

_configured = False


def build_logging_config(
    log_dir: Path,
    level: str = "INFO",
    services_level: str | None = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 5,
) -> dict:
    """
    Build the ``dictConfig`` mapping.

    Handlers pass every record through; levels live on the loggers so
    ``run_planner.services`` can run at DEBUG (sanitizer rewrites, model
    replies) while the rest of the app stays at ``level``. The file handler
    rotates ``planner.log`` once it reaches ``max_bytes``.
    """
    loggers = {name: {"level": "WARNING"} for name in QUIET_LOGGERS}
    loggers["run_planner.services"] = {"level": services_level or level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(log_dir / LOG_FILENAME),
                "maxBytes": max_bytes,
                "backupCount": backup_count,
                "encoding": "utf-8",
                "formatter": "standard",
            },
        },
        "loggers": loggers,
        "root": {
            "level": level,
            "handlers": ["console", "file"],
        },
    }


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    try:
        settings = settings or get_settings()
    except ValidationError:
        # Invalid environment; log with defaults so the error itself is visible.
        config = build_logging_config(Path("logs"))
        Path("logs").mkdir(parents=True, exist_ok=True)
    else:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        config = build_logging_config(
            settings.log_dir,
            level=settings.log_level,
            services_level=settings.services_log_level,
            max_bytes=settings.log_max_bytes,
            backup_count=settings.log_backup_count,
        )

    dictConfig(config)
    _configured = True
