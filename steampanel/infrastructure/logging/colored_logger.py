"""Colored monitor logger — ANSI-colored console logging for domain schedulers.

Provides a MonitorLogger with color-coded output per domain, making it
easy to visually tell interleaved scheduler cycles apart in the terminal.

Color scheme:
    🟢 Green   — Player
    🔵 Cyan    — Social
    🔷 Blue    — Library
    🟡 Yellow  — Achievements
    🟣 Magenta — News
    ⚪ White   — System / coordinator
    🔴 Red     — Errors
    🟠 Orange  — Timer drift
"""

import logging
import time
from contextlib import contextmanager
from typing import Any

from steampanel.domain.entities import Domain


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"
    ORANGE = "\033[38;5;208m"


# ── Domain Styles ────────────────────────────────────────────────────

class DomainStyle:
    """Label, color and icon for each domain."""

    PLAYER = ("PLAYER", _Colors.GREEN, "🎮")
    SOCIAL = ("SOCIAL", _Colors.CYAN, "👥")
    LIBRARY = ("LIBRARY", _Colors.BLUE, "📚")
    ACHIEVEMENTS = ("ACHIEVEMENTS", _Colors.YELLOW, "🏆")
    NEWS = ("NEWS", _Colors.MAGENTA, "📰")
    SYSTEM = ("SYSTEM", _Colors.WHITE, "⚙️")

    @classmethod
    def for_domain(cls, domain: Domain) -> tuple[str, str, str]:
        return getattr(cls, domain.name)


def _format_details(kwargs: dict[str, Any]) -> str:
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"


# ── MonitorLogger ────────────────────────────────────────────────────

class MonitorLogger:
    """Color-coded logger for one domain scheduler.

    Cycle start/complete lines are DEBUG (the Player domain ticks every few
    seconds); lifecycle changes are INFO, drift is WARNING, failures ERROR.

    Usage:
        log = MonitorLogger("PlayerScheduler", DomainStyle.PLAYER)
        log.lifecycle("Monitoring started", interval="3.0s")
        log.cycle_complete(12, 0.41, game="Counter-Strike 2")
    """

    def __init__(self, component_name: str, style: tuple[str, str, str]):
        self._logger = logging.getLogger(component_name)
        self._style = style

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _prefix(self) -> str:
        label, color, icon = self._style
        return f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET}"

    def lifecycle(self, message: str, **kwargs: Any) -> None:
        """Log a state change (start, stop, dispose, target change)."""
        _, color, _ = self._style
        formatted = f"{self._prefix()} {color}{message}{_Colors.RESET}"
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.info(formatted)

    def cycle_start(self, cycle: int, **kwargs: Any) -> None:
        formatted = f"{self._prefix()} {_Colors.GRAY}cycle {cycle} started{_Colors.RESET}"
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.debug(formatted)

    def cycle_complete(self, cycle: int, elapsed: float, **kwargs: Any) -> None:
        formatted = (
            f"{self._prefix()} {_Colors.GREEN}✓ cycle {cycle} — {elapsed:.2f}s{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.debug(formatted)

    def cycle_error(self, cycle: int, message: str, error: BaseException | None = None) -> None:
        """Log a failed cycle in red."""
        label, _, _ = self._style
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}cycle {cycle}: {message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def drift(self, expected: float, actual: float, deviation: float) -> None:
        """Log a timer deviation beyond the domain's tolerance."""
        label, _, _ = self._style
        self._logger.warning(
            f"{_Colors.ORANGE}⏱ [{label}-TIMER] deviation: expected {expected:.2f}s, "
            f"actual {actual:.2f}s, deviation {deviation:.2f}s{_Colors.RESET}"
        )

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            formatted += f" {_Colors.DIM}({' | '.join(f'{k}={v}' for k, v in kwargs.items())}){_Colors.RESET}"
        self._logger.debug(formatted)

    @contextmanager
    def timed_cycle(self, cycle: int, **kwargs: Any):
        """Context manager that logs start/end of one cycle with elapsed time.

        Failures are logged and re-raised; the caller decides what to publish.

        Usage:
            with log.timed_cycle(cycle):
                payload = await self._collect()
        """
        self.cycle_start(cycle, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.cycle_error(cycle, f"failed after {elapsed:.2f}s", error=e)
            raise
        else:
            self.cycle_complete(cycle, time.perf_counter() - start, **kwargs)
