"""Player domain payload — profile, presence and current game."""

from dataclasses import dataclass
from datetime import datetime

# Steam persona state codes
PERSONA_STATES: dict[int, str] = {
    0: "Offline",
    1: "Online",
    2: "Busy",
    3: "Away",
    4: "Snooze",
    5: "Looking to trade",
    6: "Looking to play",
}


@dataclass(frozen=True)
class PlayerData:
    """Profile and presence of the monitored account."""

    steam_id: str = ""
    player_name: str | None = None
    online_state: str = "Offline"
    profile_url: str | None = None
    avatar_url: str | None = None
    steam_level: int = 0
    last_log_off: datetime | None = None
    current_game_app_id: int = 0
    current_game_name: str | None = None
    current_game_extra_info: str | None = None
    current_game_banner_url: str | None = None

    @property
    def is_in_game(self) -> bool:
        return self.current_game_app_id > 0

    @property
    def display_status(self) -> str:
        if self.is_in_game:
            return f"Playing {self.current_game_name or self.current_game_app_id}"
        return self.online_state
