"""TCP reachability prober with a per-attempt timeout and a single retry."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ..models.config import MIN_TIMEOUT_SECONDS
from ..models.target import MAX_PORT, MIN_PORT, ProbeOutcome

logger = logging.getLogger(__name__)

# Retry configuration (fixed, not user-configurable)
MAX_ATTEMPTS = 2
RETRY_BACKOFF = 0.5

ConnectFn = Callable[[str, int], Awaitable[tuple[asyncio.StreamReader, asyncio.StreamWriter]]]


def is_valid_port(port: object) -> bool:
    """Check that port is an int usable as a 16-bit endpoint port."""
    if isinstance(port, bool) or not isinstance(port, int):
        return False
    return MIN_PORT <= port <= MAX_PORT


def _release_late_connection(task: asyncio.Future) -> None:
    """Close a connection that completed after its attempt already timed out."""
    if task.cancelled() or task.exception() is not None:
        return
    _, writer = task.result()
    writer.close()


class ReachabilityProber:
    """Checks whether a TCP endpoint accepts connections."""

    def __init__(
        self,
        connect: ConnectFn | None = None,
        retry_backoff: float = RETRY_BACKOFF,
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self._connect = connect or asyncio.open_connection
        self.retry_backoff = retry_backoff
        self.max_attempts = max_attempts
        self.attempts_made = 0

    async def probe(self, host: str, port: int, timeout: float) -> ProbeOutcome:
        """Probe host:port, retrying once after a short backoff.

        The timeout applies to each attempt separately. Invalid ports resolve
        to UNREACHABLE without touching the network. Never raises for network
        failures.
        """
        if not is_valid_port(port):
            logger.debug(f"Invalid port {port!r} for {host}, skipping probe")
            return ProbeOutcome.UNREACHABLE

        timeout = max(float(timeout), MIN_TIMEOUT_SECONDS)

        for attempt in range(1, self.max_attempts + 1):
            outcome = await self.attempt(host, port, timeout)
            if outcome == ProbeOutcome.REACHABLE:
                return outcome
            if attempt < self.max_attempts:
                logger.debug(
                    f"{host}:{port} unreachable, retry {attempt + 1} in {self.retry_backoff:.1f}s"
                )
                await asyncio.sleep(self.retry_backoff)

        return ProbeOutcome.UNREACHABLE

    async def attempt(self, host: str, port: int, timeout: float) -> ProbeOutcome:
        """Run one connect attempt raced against the timeout.

        The first of {connect, timeout} resolves the attempt. A connect that
        finishes after the timeout won is discarded and its socket closed.
        """
        self.attempts_made += 1
        connect_task = asyncio.ensure_future(self._connect(host, port))

        try:
            done, _ = await asyncio.wait({connect_task}, timeout=timeout)
        finally:
            if not connect_task.done():
                connect_task.cancel()
                connect_task.add_done_callback(_release_late_connection)

        if connect_task not in done:
            logger.debug(f"Connect to {host}:{port} timed out after {timeout:.1f}s")
            return ProbeOutcome.UNREACHABLE

        try:
            _, writer = connect_task.result()
        except (OSError, ValueError) as e:
            # Refused, unreachable, DNS failure or an unencodable hostname
            logger.debug(f"Connect to {host}:{port} failed: {e}")
            return ProbeOutcome.UNREACHABLE

        await self._close(writer)
        logger.debug(f"Connect to {host}:{port} succeeded")
        return ProbeOutcome.REACHABLE

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        """Close the probe connection right away."""
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error closing probe connection: {e}")
