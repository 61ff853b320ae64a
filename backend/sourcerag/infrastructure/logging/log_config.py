"""Logging setup: one root handler plus per-category levels from Settings.

SQL echo, outbound HTTP chatter and uvicorn access lines can each be turned
down without hiding the ingestion and query pipeline logs.

Call ``setup_logging()`` once at startup (the FastAPI lifespan does).
"""

import logging
import sys

from sourcerag.config import Settings, get_settings

# Settings field → loggers whose level it controls.
_LEVEL_FIELDS: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "asyncpg"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_pipeline": (
        "IngestionService",
        "QueryService",
        "TenantDeletionService",
        "sourcerag.application.services",
        "sourcerag.infrastructure.loaders",
    ),
    "log_level_openrouter": ("sourcerag.infrastructure.openrouter",),
}

_FORMAT = "%(levelname)-8s %(name)s — %(message)s"


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handlers; tests and scripts may not have any.
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)

    applied: dict[str, str] = {}
    for field_name, logger_names in _LEVEL_FIELDS.items():
        raw = getattr(settings, field_name, "INFO")
        for name in logger_names:
            logging.getLogger(name).setLevel(_parse_level(raw))
        applied[field_name.removeprefix("log_level_")] = raw

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        " ".join(f"{k}={v}" for k, v in applied.items()),
    )


def _parse_level(raw: str) -> int:
    """Level name → logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else logging.INFO
