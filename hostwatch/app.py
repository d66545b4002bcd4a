"""Headless monitor application wiring config, target list and coordinator."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from uuid import UUID

from .models.config import Config
from .models.status import StatusSummary
from .models.target import Target, TargetStatus
from .services.coordinator import StatusCoordinator
from .services.target_list import TargetList

logger = logging.getLogger(__name__)


def format_status_line(target: Target, status: TargetStatus) -> str:
    """One line per target, e.g. 'ONLINE   router (192.168.1.1:80)'."""
    return f"{status.value.upper():<8} {target.display_name} ({target.address})"


def format_summary(summary: StatusSummary) -> str:
    """Summary line with responding / not responding counts."""
    parts = [f"{summary.online} responding", f"{summary.not_responding} not responding"]
    if summary.unknown:
        parts.append(f"{summary.unknown} checking")
    if summary.last_updated:
        parts.append(f"last updated {summary.last_updated.strftime('%H:%M:%S')}")
    return " | ".join(parts)


class MonitorApp:
    """Runs the status coordinator over the configured targets."""

    def __init__(
        self,
        config_path: Path | str = "config.json",
        config: Config | None = None,
        timeout: float | None = None,
    ):
        self.config = config or Config.load_or_default(config_path)
        self.targets = TargetList(self.config.build_targets())
        self.coordinator = StatusCoordinator(
            targets=self.targets.targets,
            settings=self.config.settings,
        )
        if timeout is not None:
            self.coordinator.timeout = timeout
        self.targets.bind(self.coordinator)

        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event: asyncio.Event | None = None
        self._reported: datetime | None = None
        self._previous: dict[UUID, TargetStatus] = {}

    def run(self) -> None:
        """Monitor until exit() is called."""
        asyncio.run(self._watch())

    def run_once(self) -> int:
        """Check every target once and print the results.

        Returns 0 if every target is online, 1 otherwise.
        """
        return asyncio.run(self._check_once())

    def exit(self) -> None:
        """Request shutdown. Safe to call from a signal handler."""
        if self._loop is not None and self._stop_event is not None:
            self._loop.call_soon_threadsafe(self._stop_event.set)

    async def _watch(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()

        if not len(self.targets):
            logger.warning("No targets configured")

        unsubscribe = self.coordinator.subscribe(self._on_status)
        self.coordinator.request_check_all()
        self._report_if_updated()
        self.coordinator.start()
        try:
            await self._stop_event.wait()
        finally:
            unsubscribe()
            await self.coordinator.stop()

    async def _check_once(self) -> int:
        self.coordinator.request_check_all()
        await self.coordinator.drain()

        for target in self.targets:
            print(format_status_line(target, self.coordinator.status(target.id)))

        summary = self.coordinator.summary()
        print(format_summary(summary))
        return 0 if summary.online == summary.total else 1

    def _on_status(self, target_id: UUID, status: TargetStatus) -> None:
        if status != TargetStatus.UNKNOWN:
            previous = self._previous.get(target_id)
            self._previous[target_id] = status
            target = self.targets.get(target_id)
            if target is not None and previous is not None and previous != status:
                logger.warning(f"{target.display_name} is now {status.value}")
        self._report_if_updated()

    def _report_if_updated(self) -> None:
        last = self.coordinator.last_updated
        if last is not None and last != self._reported:
            self._reported = last
            logger.info(format_summary(self.coordinator.summary()))
