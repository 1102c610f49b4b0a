"""Social domain payload — friends presence."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FriendActivity:
    """What one friend is doing right now."""

    steam_id: str
    name: str
    online_state: str
    game_name: str | None = None
    game_app_id: int = 0


@dataclass(frozen=True)
class SocialData:
    total_friends: int = 0
    friends_online: int = 0
    friends_in_game: int = 0
    friends_popular_game: str | None = None
    friends_activity: tuple[FriendActivity, ...] = ()
