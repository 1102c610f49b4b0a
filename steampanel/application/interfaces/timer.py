"""Timer port — periodic callbacks driven by the runtime (or a virtual clock in tests)."""

from abc import ABC, abstractmethod
from collections.abc import Callable

TimerCallback = Callable[[], None]


class Timer(ABC):
    """A re-armable one-shot/periodic timer.

    The callback runs on the event loop and must return immediately.
    """

    @abstractmethod
    def change(self, due: float | None, period: float | None = None) -> None:
        """Re-arm the timer.

        Args:
            due: Seconds until the next firing; ``None`` disarms the timer.
            period: Seconds between subsequent firings; ``None`` fires once.
        """
        ...

    @property
    @abstractmethod
    def armed(self) -> bool:
        ...

    @abstractmethod
    def dispose(self) -> None:
        """Disarm permanently and release the underlying handle."""
        ...


class TimerFactory(ABC):
    """Creates timers and exposes the monotonic clock they run on."""

    @abstractmethod
    def create(self, callback: TimerCallback) -> Timer:
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Seconds on the clock the timers are scheduled against."""
        ...
