"""Session cache — Player-owned record of current and average play-session timing."""

import copy
from dataclasses import dataclass, fields
from datetime import datetime

from .player import PlayerData


@dataclass
class SessionCache:
    """Mutable session timing shared read-only with other domains.

    Only the Player domain mutates the canonical instance. Everyone else
    works on a deep copy obtained through :meth:`clone`.
    """

    current_session_minutes: int = 0
    session_start_time: datetime | None = None
    average_session_minutes: float = 0.0
    completed_sessions: int = 0
    active_game_id: int = 0  # game of the open session, 0 when idle
    last_played_game_id: int = 0
    last_played_game_name: str | None = None
    last_played_game_banner_url: str | None = None
    last_updated: datetime | None = None

    @property
    def in_session(self) -> bool:
        return self.active_game_id > 0

    def clone(self) -> "SessionCache":
        """Return a deep copy sharing no references with this instance."""
        return copy.deepcopy(self)

    def freeze(self) -> "SessionView":
        return SessionView(**{f.name: getattr(self, f.name) for f in fields(SessionCache)})

    def record_session(self, minutes: float) -> None:
        """Fold one finished session into the running average."""
        self.completed_sessions += 1
        self.average_session_minutes += (
            minutes - self.average_session_minutes
        ) / self.completed_sessions

    def update_from_player(self, player: PlayerData, now: datetime) -> None:
        """Advance session state from one Player observation.

        none -> game opens a session, game -> none closes it, and a direct
        switch between two games closes the first session and opens a new one.
        """
        game_id = player.current_game_app_id

        if self.active_game_id and game_id != self.active_game_id:
            self._close_session(now)

        if game_id > 0:
            if not self.active_game_id:
                self.active_game_id = game_id
                self.session_start_time = now
            self.current_session_minutes = _elapsed_minutes(self.session_start_time, now)
            if game_id != self.last_played_game_id:
                self.last_played_game_id = game_id
                self.last_played_game_name = None
                self.last_played_game_banner_url = None
            if player.current_game_name:
                self.last_played_game_name = player.current_game_name
            if player.current_game_banner_url:
                self.last_played_game_banner_url = player.current_game_banner_url

        self.last_updated = now

    def _close_session(self, now: datetime) -> None:
        if self.session_start_time is not None:
            length = (now - self.session_start_time).total_seconds() / 60
            self.record_session(max(length, 0.0))
        self.active_game_id = 0
        self.session_start_time = None
        self.current_session_minutes = 0


def _elapsed_minutes(start: datetime | None, now: datetime) -> int:
    if start is None:
        return 0
    return max(int((now - start).total_seconds() // 60), 0)


@dataclass(frozen=True)
class SessionView:
    """Immutable copy of a SessionCache, attached to published snapshots."""

    current_session_minutes: int = 0
    session_start_time: datetime | None = None
    average_session_minutes: float = 0.0
    completed_sessions: int = 0
    active_game_id: int = 0
    last_played_game_id: int = 0
    last_played_game_name: str | None = None
    last_played_game_banner_url: str | None = None
    last_updated: datetime | None = None

    @property
    def in_session(self) -> bool:
        return self.active_game_id > 0
