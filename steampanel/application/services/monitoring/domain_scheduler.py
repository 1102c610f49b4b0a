"""Domain scheduler — periodic, gate-serialized collection for one domain."""

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar

from steampanel.application.interfaces import SessionCacheSource, TimerFactory
from steampanel.application.services.event_channel import EventChannel
from steampanel.application.services.rate_limit_gate import RateLimitGate
from steampanel.config import DomainOptions
from steampanel.domain.entities import Domain, DomainSnapshot, SessionCache
from steampanel.domain.exceptions import (
    CollectorError,
    GateUnavailableError,
    SchedulerDisposedError,
    UpstreamError,
)
from steampanel.infrastructure.logging.colored_logger import DomainStyle, MonitorLogger

PayloadT = TypeVar("PayloadT")


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DISPOSED = "disposed"


class DomainScheduler(ABC, Generic[PayloadT]):
    """Owns one repeating timer and turns each tick into a published snapshot.

    Tick flow: count the cycle, check timer drift, then hand the work to a
    background task so the timer callback returns immediately. The task
    holds the shared :class:`RateLimitGate` only around the upstream calls,
    builds the snapshot after releasing it, and publishes on ``updated``.

    A per-domain busy flag keeps cycles from overlapping: a tick that fires
    while the previous cycle is still running is skipped. Every failed cycle
    publishes an error snapshot; a closed gate (shutdown) publishes nothing.

    Lifecycle: ``IDLE -> RUNNING -> IDLE`` via ``start()``/``stop()``;
    ``dispose()`` is terminal. ``stop()`` does not cancel an in-flight cycle,
    which may still publish once afterwards.
    """

    domain: Domain

    def __init__(
        self,
        *,
        options: DomainOptions,
        gate: RateLimitGate,
        timer_factory: TimerFactory,
    ):
        self._options = options
        self._gate = gate
        self._timer_factory = timer_factory
        self._timer = timer_factory.create(self._on_timer)
        self._log = MonitorLogger(type(self).__name__, DomainStyle.for_domain(self.domain))

        self.updated: EventChannel[DomainSnapshot[PayloadT]] = EventChannel(
            f"{self.domain.value}.updated"
        )

        self._state = SchedulerState.IDLE
        self._cycle_count = 0
        self._busy = False
        self._rerun_pending = False
        self._irregular_tick = False
        self._last_tick: float | None = None
        self._latest: DomainSnapshot[PayloadT] | None = None
        self._pending: set[asyncio.Task] = set()

    # ── Introspection ────────────────────────────────────────────────

    @property
    def options(self) -> DomainOptions:
        return self._options

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def latest(self) -> DomainSnapshot[PayloadT] | None:
        """Most recently published snapshot, ``None`` until the first publish."""
        return self._latest

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> None:
        """Arm the timer with the start delay and period. No-op while running."""
        if self._state is SchedulerState.DISPOSED:
            raise SchedulerDisposedError(self.domain.value)
        if self._state is SchedulerState.RUNNING:
            self._log.detail("start() ignored — already running")
            return

        self._state = SchedulerState.RUNNING
        self._last_tick = None
        self._irregular_tick = False
        self._timer.change(self._options.start_delay, self._options.interval)
        self._log.lifecycle(
            "Monitoring started",
            interval=f"{self._options.interval}s",
            delay=f"{self._options.start_delay}s",
        )

    def stop(self) -> None:
        """Disarm the timer. An in-flight cycle is left to finish on its own."""
        if self._state is not SchedulerState.RUNNING:
            return
        self._timer.change(None)
        self._state = SchedulerState.IDLE
        self._rerun_pending = False
        self._log.lifecycle("Monitoring stopped", cycles=self._cycle_count)

    def dispose(self) -> None:
        if self._state is SchedulerState.DISPOSED:
            return
        self.stop()
        self._timer.dispose()
        self._state = SchedulerState.DISPOSED
        self._log.lifecycle("Disposed")

    def trigger_soon(self, delay: float) -> None:
        """Re-arm the timer to fire after ``delay`` while keeping the normal period."""
        if not self.is_running:
            return
        self._irregular_tick = True
        self._timer.change(max(delay, 0.0), self._options.interval)
        self._log.detail("Out-of-cycle refresh scheduled", delay=f"{delay}s")

    def run_now(self) -> bool:
        """Start a cycle immediately.

        When a cycle is already running the request is remembered and served
        right after it finishes. Returns True if a cycle was dispatched now.
        """
        if not self.is_running:
            return False
        if self._busy:
            self._rerun_pending = True
            return False
        self._cycle_count += 1
        return self._dispatch(self._cycle_count)

    async def wait_idle(self) -> None:
        """Wait until every background task started by this scheduler has finished."""
        while self._pending:
            await asyncio.gather(*tuple(self._pending), return_exceptions=True)

    # ── Timer path ───────────────────────────────────────────────────

    def _on_timer(self) -> None:
        if not self.is_running:
            return

        self._cycle_count += 1
        cycle = self._cycle_count
        triggered = self._irregular_tick
        self._irregular_tick = False
        self._check_drift(triggered)

        if self._busy:
            self._log.detail(f"Tick {cycle} skipped — previous cycle still running")
            if triggered:
                self._rerun_pending = True
            return

        self._dispatch(cycle)

    def _check_drift(self, triggered: bool) -> None:
        now = self._timer_factory.monotonic()
        previous, self._last_tick = self._last_tick, now
        if previous is None or triggered:
            return

        expected = self._options.interval
        actual = now - previous
        deviation = abs(actual - expected)
        if deviation > self._options.tolerance:
            self._log.drift(expected, actual, deviation)

    def _dispatch(self, cycle: int) -> bool:
        if not self._should_collect():
            self._log.detail(f"Cycle {cycle} skipped — nothing to collect")
            return False

        self._busy = True
        task = asyncio.get_running_loop().create_task(
            self._run_cycle(cycle), name=f"{self.domain.value}-cycle-{cycle}"
        )
        self._track(task)
        return True

    def _track(self, task: asyncio.Task) -> None:
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_cycle(self, cycle: int) -> None:
        try:
            async with self._gate.permit():
                # timed_cycle logs collect failures itself
                with self._log.timed_cycle(cycle):
                    payload = await self._collect()
        except GateUnavailableError:
            self._log.detail(f"Cycle {cycle} skipped — rate-limit gate closed")
            return
        except Exception as e:
            snapshot = self._failure_snapshot(e, cycle)
        else:
            try:
                snapshot = self._on_collected(payload, cycle)
            except Exception as e:
                self._log.cycle_error(cycle, "processing collected data failed", e)
                snapshot = self._failure_snapshot(e, cycle)
        finally:
            self._busy = False

        self._publish(snapshot)

        if self._rerun_pending and self.is_running:
            self._rerun_pending = False
            self.run_now()

    # ── Publishing ───────────────────────────────────────────────────

    def _publish(self, snapshot: DomainSnapshot[PayloadT]) -> None:
        self._latest = snapshot
        self.updated.publish(snapshot)

    def _failure_snapshot(self, error: Exception, cycle: int) -> DomainSnapshot[PayloadT]:
        if isinstance(error, UpstreamError):
            message = str(error)
        else:
            message = str(CollectorError(self.domain.value, f"{type(error).__name__}: {error}"))
        return DomainSnapshot.failure(
            self.domain,
            self._empty_payload(),
            message,
            cycle=cycle,
            session=self._session_for_publish(),
        )

    # ── Hooks ────────────────────────────────────────────────────────

    @abstractmethod
    async def _collect(self) -> PayloadT:
        """Run the domain's upstream calls. Called with the gate held."""
        ...

    @abstractmethod
    def _empty_payload(self) -> PayloadT:
        ...

    def _on_collected(self, payload: PayloadT, cycle: int) -> DomainSnapshot[PayloadT]:
        """Build the success snapshot. Called after the gate is released."""
        return DomainSnapshot.success(
            self.domain, payload, cycle=cycle, session=self._session_for_publish()
        )

    def _session_for_publish(self) -> SessionCache | None:
        return None

    def _should_collect(self) -> bool:
        return True


class SessionReadingScheduler(DomainScheduler[PayloadT]):
    """A scheduler that attaches a clone of the Player-owned session cache."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._session_source: SessionCacheSource | None = None

    def set_session_cache(self, source: SessionCacheSource) -> None:
        """Hand over the read API of the canonical cache (once, at wiring time)."""
        if source is None:
            raise ValueError("session cache source is required")
        self._session_source = source

    def get_session_cache(self) -> SessionCache:
        return self._session_for_publish()

    def _session_for_publish(self) -> SessionCache:
        if self._session_source is None:
            return SessionCache()
        return self._session_source.snapshot()
