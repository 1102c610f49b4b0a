"""Logging setup — root handler plus per-category levels taken from Settings.

The Player domain ticks every few seconds and httpx logs every request, so
each noisy area gets its own level knob instead of one global switch.

Usage:
    from steampanel.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from steampanel.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"

# Settings field -> loggers it controls
LEVEL_FIELDS: dict[str, tuple[str, ...]] = {
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_scheduler": (
        "steampanel.application.services.monitoring",
        "PlayerScheduler",
        "SocialScheduler",
        "LibraryScheduler",
        "AchievementsScheduler",
        "NewsScheduler",
    ),
    "log_level_steam": (
        "steampanel.infrastructure.steam",
        "steampanel.application.services.collectors",
    ),
}


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply log levels from ``settings`` (defaults to the cached Settings).

    Installs a stderr handler on the root logger only when nothing else
    (uvicorn, pytest) has installed one. Returns the level applied to each
    configured logger name.
    """
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for field, names in LEVEL_FIELDS.items():
        level = parse_level(getattr(settings, field))
        for name in names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug(
        "Logging configured: %s",
        ", ".join(f"{field}={getattr(settings, field)}" for field in ("log_level", *LEVEL_FIELDS)),
    )
    return applied


def parse_level(raw: str) -> int:
    """Map a level name to its numeric value; unknown names fall back to INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
