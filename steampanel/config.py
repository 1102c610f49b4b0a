import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from steampanel.domain.entities import Domain

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


@dataclass(frozen=True)
class DomainOptions:
    """Timing options for one domain scheduler, built once at assembly time."""

    interval: float
    tolerance: float
    start_delay: float = 0.0

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        if self.tolerance < 0 or self.start_delay < 0:
            raise ValueError("tolerance and start_delay cannot be negative")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Steam Panel Monitor"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3020"]

    # Steam Web API
    steam_api_key: str = ""
    steam_id: str = ""
    steam_base_url: str = "https://api.steampowered.com"
    steam_request_timeout: float = 10.0
    steam_language: str = "english"

    # Player domain: fastest cadence, starts immediately
    player_interval_seconds: float = 3.0
    player_tolerance_seconds: float = 0.5
    player_start_delay_seconds: float = 0.0
    player_level_refresh_seconds: float = 300.0

    # Social domain: waits for the first Player cycle to fill the session cache
    social_interval_seconds: float = 15.0
    social_tolerance_seconds: float = 1.0
    social_start_delay_seconds: float = 2.0
    social_activity_limit: int = 5

    # Library domain
    library_interval_seconds: float = 45.0
    library_tolerance_seconds: float = 2.0
    library_start_delay_seconds: float = 5.0

    # Achievements domain
    achievements_interval_seconds: float = 60.0
    achievements_tolerance_seconds: float = 5.0
    achievements_start_delay_seconds: float = 5.0
    achievements_grace_delay_seconds: float = 0.5  # re-arm delay after a game change

    # News domain
    news_interval_seconds: float = 900.0
    news_tolerance_seconds: float = 30.0
    news_start_delay_seconds: float = 10.0
    news_watch_list_size: int = 5
    news_max_length: int = 300
    news_items_per_game: int = 1

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore, outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_scheduler: str = "INFO"        # domain schedulers and coordinator
    log_level_steam: str = "INFO"            # Steam Web API client

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Warn early when the upstream credentials are missing."""
        if not self.steam_api_key.strip() or not self.steam_id.strip():
            _config_logger.warning(
                "STEAM_API_KEY or STEAM_ID is not configured; every upstream call will fail"
            )

    def domain_options(self, domain: Domain) -> DomainOptions:
        """Build the timing options struct for ``domain``."""
        prefix = domain.value
        return DomainOptions(
            interval=getattr(self, f"{prefix}_interval_seconds"),
            tolerance=getattr(self, f"{prefix}_tolerance_seconds"),
            start_delay=getattr(self, f"{prefix}_start_delay_seconds"),
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
