"""
Refresh scheduler - drives the fetch, transform and render cycle.

Cycle stages:
1. Fetch: pull the raw state vectors from the telemetry source
2. Transform: parse them into a snapshot of renderable aircraft
3. Swap: attach the new snapshot to the map, detach the previous one
4. Wait: sleep for the refresh interval, then start over

Cycles never overlap; the next wait only starts once the current swap
has finished. Failures are handled by a RetryPolicy: either back off and
try again, or stop the loop for good.
"""

import logging
import threading
import time
from enum import Enum
from typing import Optional

from radar.config import config
from radar.exceptions import RadarError
from radar.ingestion.state_vectors import transform_snapshot
from radar.ingestion.telemetry_source import TelemetrySource
from radar.models import Snapshot
from radar.surface import MapSurface

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    FETCHING = 'fetching'
    IDLE_WAITING = 'idle_waiting'
    STOPPED = 'stopped'
    FAILED = 'failed'


class Clock:
    """Time source for the refresh loop; swap it out in tests."""

    def wait(self, seconds: float, stop_event: threading.Event) -> None:
        """Block for `seconds` or until stop_event is set."""
        raise NotImplementedError


class SystemClock(Clock):

    def wait(self, seconds: float, stop_event: threading.Event) -> None:
        stop_event.wait(seconds)


class RetryPolicy:
    """
    What to do after a failed refresh cycle.

    With fail_stop the loop ends on the first failure and the map keeps
    showing the last good snapshot. Otherwise each consecutive failure
    waits initial_delay_ms * factor^(n-1), capped at max_delay_ms.
    """

    def __init__(
        self,
        fail_stop: bool = False,
        initial_delay_ms: int = 5000,
        max_delay_ms: int = 60000,
        factor: float = 2.0,
    ):
        self.fail_stop = fail_stop
        self.initial_delay_ms = initial_delay_ms
        self.max_delay_ms = max_delay_ms
        self.factor = factor

    @classmethod
    def from_config(cls) -> 'RetryPolicy':
        return cls(
            fail_stop=config.refresh.fail_stop,
            initial_delay_ms=config.refresh.initial_delay_ms,
            max_delay_ms=config.refresh.max_delay_ms,
            factor=config.refresh.backoff_factor,
        )

    def delay_ms(self, consecutive_failures: int) -> Optional[float]:
        """Delay before the next attempt, or None to stop."""
        if self.fail_stop:
            return None
        delay = self.initial_delay_ms * (self.factor ** max(consecutive_failures - 1, 0))
        return min(delay, self.max_delay_ms)


class RefreshScheduler:
    """
    Owns the live snapshot and keeps it fresh.

    The scheduler is the only writer of the rendered entity set. It
    replaces it wholesale on every successful cycle.
    """

    def __init__(
        self,
        source: TelemetrySource,
        surface: MapSurface,
        interval_ms: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        self.source = source
        self.surface = surface
        self.interval_ms = interval_ms or config.refresh.interval_ms
        self.retry_policy = retry_policy or RetryPolicy.from_config()
        self.clock = clock or SystemClock()

        self.current: Optional[Snapshot] = None
        self.state = SchedulerState.FETCHING

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        # Statistics
        self._cycle_count = 0
        self._error_count = 0
        self._consecutive_failures = 0
        self._last_success_time: Optional[float] = None
        self._last_error: Optional[str] = None

    def run_cycle(self) -> Snapshot:
        """
        Execute one fetch, transform and swap.

        Raises:
            TransportError / MalformedPayloadError from the source
        """
        self.state = SchedulerState.FETCHING
        self._cycle_count += 1

        raw = self.source.fetch_snapshot()
        snapshot = transform_snapshot(raw)
        self._swap(snapshot)

        self._consecutive_failures = 0
        self._last_success_time = time.time()
        self.state = SchedulerState.IDLE_WAITING

        logger.info(f'Rendered {len(snapshot)} aircraft')
        return snapshot

    def _swap(self, snapshot: Snapshot) -> None:
        """Put the new snapshot on the map and take the old one off."""
        previous = self.current
        self.surface.attach_entities(snapshot)
        self.current = snapshot
        if previous is not None:
            self.surface.detach_entities(previous)

    def run(self, max_cycles: Optional[int] = None) -> None:
        """
        Run the refresh loop until stop() is called.

        If a cycle has already run (the startup fetch), the loop begins
        by waiting out the interval. max_cycles bounds the number of
        attempts made by this call.
        """
        delay_ms = self.interval_ms if self._cycle_count else 0
        attempts = 0

        logger.info(f'Starting refresh loop (interval={self.interval_ms}ms)')

        while max_cycles is None or attempts < max_cycles:
            if delay_ms:
                self.state = SchedulerState.IDLE_WAITING
                self.clock.wait(delay_ms / 1000.0, self._stop_event)
            if self._stop_event.is_set():
                break

            attempts += 1
            try:
                self.run_cycle()
            except RadarError as e:
                self._error_count += 1
                self._consecutive_failures += 1
                self._last_error = str(e)

                delay_ms = self.retry_policy.delay_ms(self._consecutive_failures)
                if delay_ms is None:
                    logger.error(f'Refresh failed, stopping updates: {e}')
                    self.state = SchedulerState.FAILED
                    return

                logger.warning(
                    f'Refresh failed ({self._consecutive_failures} in a row), '
                    f'retrying in {delay_ms:.0f}ms: {e}'
                )
                continue

            delay_ms = self.interval_ms

        self.state = SchedulerState.STOPPED
        logger.info('Refresh loop stopped')

    def _run_guarded(self) -> None:
        try:
            self.run()
        except Exception:
            self.state = SchedulerState.FAILED
            logger.exception('Refresh loop crashed')

    def start_background(self) -> None:
        """Start the refresh loop in a background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Refresh loop already running')
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_guarded,
            name='refresh-scheduler',
            daemon=True,
        )
        self._thread.start()
        logger.info('Background refresh started')

    def stop(self) -> None:
        """Stop the refresh loop; an in-flight fetch is allowed to finish."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5)
        if self.state != SchedulerState.FAILED:
            self.state = SchedulerState.STOPPED

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    @property
    def stats(self) -> dict:
        """Get refresh statistics."""
        return {
            'state': self.state.value,
            'running': self.running,
            'cycle_count': self._cycle_count,
            'error_count': self._error_count,
            'consecutive_failures': self._consecutive_failures,
            'last_success_time': self._last_success_time,
            'last_error': self._last_error,
            'aircraft': len(self.current) if self.current is not None else 0,
            'interval_ms': self.interval_ms,
        }
