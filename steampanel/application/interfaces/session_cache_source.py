"""Read-only access to the Player-owned session cache."""

from abc import ABC, abstractmethod

from steampanel.domain.entities import SessionCache


class SessionCacheSource(ABC):
    """Port handed to reader domains at wiring time."""

    @abstractmethod
    def snapshot(self) -> SessionCache:
        """Return a deep copy of the canonical cache, taken under its lock."""
        ...
