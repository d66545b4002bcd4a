"""Status coordinator: owns the status table and dispatches probes.

All coordinator state lives on the event loop thread. Public methods must be
called from that loop; probes run as independent tasks and only write back
through ``_set_status``.

Overlapping checks for the same target are not sequenced. Each check writes
UNKNOWN and later its own result, so whichever write runs last wins. A new
check never cancels one already in flight.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from datetime import datetime
from uuid import UUID

from ..models.config import MonitorSettings, clamp_timeout
from ..models.status import RefreshState, StatusSummary, StatusTable
from ..models.target import ProbeOutcome, Target, TargetStatus
from .prober import ReachabilityProber

logger = logging.getLogger(__name__)

StatusListener = Callable[[UUID, TargetStatus], None]
TargetsProvider = Callable[[], Iterable[Target]]


class StatusCoordinator:
    """Tracks online/offline/unknown status for a collection of targets."""

    def __init__(
        self,
        targets: TargetsProvider | None = None,
        prober: ReachabilityProber | None = None,
        settings: MonitorSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        settings = settings or MonitorSettings()
        self._targets = targets
        self.prober = prober or ReachabilityProber()
        self.refresh_interval = settings.refresh_interval_seconds
        self.debounce = settings.debounce_seconds
        self._timeout = clamp_timeout(settings.timeout_seconds)
        self._clock = clock
        self._table = StatusTable()
        self._refresh = RefreshState()
        self._listeners: list[StatusListener] = []
        self._in_flight: set[asyncio.Task] = set()
        self._refresh_task: asyncio.Task | None = None

    @property
    def timeout(self) -> int:
        """Per-attempt timeout in seconds used for new checks."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: float) -> None:
        self._timeout = clamp_timeout(value)
        logger.debug(f"Probe timeout set to {self._timeout}s")

    def status(self, target_id: UUID) -> TargetStatus:
        return self._table.status_of(target_id)

    @property
    def statuses(self) -> dict[UUID, TargetStatus]:
        """Copy of the status table."""
        return self._table.snapshot()

    @property
    def last_updated(self) -> datetime | None:
        """When every known target was last seen resolved."""
        return self._refresh.last_updated

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def summary(self, targets: Iterable[Target] | None = None) -> StatusSummary:
        """Count statuses over the given targets, or the known ones."""
        if targets is not None:
            ids = [t.id for t in targets]
        else:
            ids = self._known_ids()
        return StatusSummary.from_table(self._table, ids, self._refresh.last_updated)

    def request_check(self, target: Target) -> asyncio.Task:
        """Mark target UNKNOWN now and probe it in the background."""
        loop = asyncio.get_running_loop()
        self._set_status(target.id, TargetStatus.UNKNOWN)
        task = loop.create_task(self._run_probe(target, self._timeout), name=f"probe-{target.id}")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    def request_check_all(self, targets: Iterable[Target] | None = None) -> bool:
        """Check every target unless a sweep started within the debounce window.

        Returns True if a sweep was dispatched.
        """
        now = self._clock()
        last = self._refresh.last_sweep_started
        if last is not None and now - last < self.debounce:
            logger.debug(f"Skipping sweep, previous one started {now - last:.2f}s ago")
            return False
        self._refresh.last_sweep_started = now

        batch = list(self._current_targets() if targets is None else targets)
        logger.debug(f"Checking {len(batch)} targets")
        for target in batch:
            self.request_check(target)

        # An empty collection counts as complete straight away
        self._recompute_last_updated()
        return True

    def forget(self, target_id: UUID) -> None:
        """Drop a removed target's entry."""
        self._table.discard(target_id)
        self._recompute_last_updated()

    async def drain(self) -> None:
        """Wait for every in-flight probe to finish."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def _run_probe(self, target: Target, timeout: int) -> TargetStatus:
        try:
            outcome = await self.prober.probe(target.host, target.port, timeout)
        except Exception as e:
            logger.error(f"Unexpected error probing {target.address}: {e}")
            outcome = ProbeOutcome.UNREACHABLE

        status = TargetStatus.from_outcome(outcome)
        if target.id not in self._table:
            # Forgotten while the probe ran
            logger.debug(f"Dropping result for removed target {target.address}")
            return status
        logger.debug(f"{target.display_name} ({target.address}) is {status.value}")
        self._set_status(target.id, status)
        return status

    @property
    def running(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def start(self) -> None:
        """Start the periodic sweep."""
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._refresh_task = loop.create_task(self._auto_refresh(), name="auto-refresh")
        logger.info(f"Auto refresh every {self.refresh_interval:g}s")

    async def stop(self) -> None:
        """Stop the periodic sweep and wait for probes still running."""
        task, self._refresh_task = self._refresh_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                # Only swallow the refresh task's own cancellation
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
        await self.drain()

    async def _auto_refresh(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            try:
                self.request_check_all()
            except Exception as e:
                logger.error(f"Auto refresh failed: {e}")

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a status listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _current_targets(self) -> list[Target]:
        if self._targets is None:
            return []
        return list(self._targets())

    def _known_ids(self) -> list[UUID]:
        if self._targets is None:
            return list(self._table)
        return [t.id for t in self._targets()]

    def _set_status(self, target_id: UUID, status: TargetStatus) -> None:
        self._table.set(target_id, status)
        self._recompute_last_updated()
        for listener in list(self._listeners):
            try:
                listener(target_id, status)
            except Exception as e:
                logger.error(f"Status listener failed: {e}")

    def _recompute_last_updated(self) -> None:
        if self._table.all_resolved(self._known_ids()):
            self._refresh.last_updated = datetime.now()
