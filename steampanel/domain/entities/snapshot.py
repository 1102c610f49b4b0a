"""Domain snapshot — the immutable record published once per collection cycle."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

from .session_cache import SessionCache, SessionView

PayloadT = TypeVar("PayloadT")


class Domain(str, Enum):
    """Independently scheduled areas of data collection."""

    PLAYER = "player"
    SOCIAL = "social"
    LIBRARY = "library"
    ACHIEVEMENTS = "achievements"
    NEWS = "news"


@dataclass(frozen=True)
class DomainSnapshot(Generic[PayloadT]):
    """One logical moment of a domain.

    A snapshot is either a success (``has_error`` is False and ``payload``
    holds collected data) or an error (``has_error`` is True, ``payload`` is
    the domain's empty default and ``error_message`` explains the failure).
    The next cycle's snapshot supersedes it; snapshots are never merged.

    A ``SessionCache`` passed in is frozen into a ``SessionView``, so every
    consumer of the snapshot sees the same values.
    """

    domain: Domain
    payload: PayloadT
    cycle: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    has_error: bool = False
    error_message: str | None = None
    session: SessionView | None = None

    def __post_init__(self) -> None:
        if isinstance(self.session, SessionCache):
            object.__setattr__(self, "session", self.session.freeze())
        if self.has_error and not self.error_message:
            raise ValueError("Error snapshots require a non-empty error message")
        if not self.has_error and self.error_message:
            raise ValueError("Successful snapshots cannot carry an error message")

    @classmethod
    def success(
        cls,
        domain: Domain,
        payload: PayloadT,
        *,
        cycle: int = 0,
        session: SessionCache | SessionView | None = None,
    ) -> "DomainSnapshot[PayloadT]":
        return cls(domain=domain, payload=payload, cycle=cycle, session=session)

    @classmethod
    def failure(
        cls,
        domain: Domain,
        payload: PayloadT,
        message: str,
        *,
        cycle: int = 0,
        session: SessionCache | SessionView | None = None,
    ) -> "DomainSnapshot[PayloadT]":
        return cls(
            domain=domain,
            payload=payload,
            cycle=cycle,
            has_error=True,
            error_message=message or "Unknown error",
            session=session,
        )
