"""Library domain payload — owned games and recent playtime."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RecentGame:
    """A game played during the last two weeks."""

    app_id: int
    name: str
    playtime_2weeks_minutes: int = 0
    playtime_forever_minutes: int = 0
    last_played: datetime | None = None

    @property
    def playtime_2weeks_hours(self) -> float:
        return self.playtime_2weeks_minutes / 60

    @property
    def playtime_forever_hours(self) -> float:
        return self.playtime_forever_minutes / 60


@dataclass(frozen=True)
class LibraryData:
    total_games_owned: int = 0
    total_library_playtime_hours: float = 0.0
    most_played_game_name: str | None = None
    most_played_game_hours: float = 0.0
    recent_playtime_hours: float = 0.0
    recent_games_count: int = 0
    most_played_recent_game: str | None = None
    recent_games: tuple[RecentGame, ...] = ()
