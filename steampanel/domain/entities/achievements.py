"""Achievements domain payload — badges and per-game achievement progress."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AchievementsData:
    """Badge totals plus achievement progress for the targeted game.

    ``game_app_id`` is 0 when neither a live nor a last-played game could
    be determined; the badge fields are still populated in that case.
    """

    # Badges
    total_badges_earned: int = 0
    total_badge_xp: int = 0
    player_level: int = 0
    latest_badge_name: str | None = None
    latest_badge_date: datetime | None = None

    # Targeted game
    game_app_id: int = 0
    game_name: str | None = None
    is_current_game: bool = False
    achievement_count: int = 0
    unlocked_count: int = 0
    completion_percent: float = 0.0
    latest_achievement_name: str | None = None
    latest_achievement_icon: str | None = None
    latest_achievement_date: datetime | None = None
