"""Pytest configuration and fixtures."""

import asyncio
import json
import socket
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from hostwatch.models.target import ProbeOutcome


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "targets": [
            {"name": "Router", "host": "192.168.1.1", "port": 80},
            {"name": "NAS", "host": "nas.local", "port": 5000},
        ],
        "settings": {
            "timeout_seconds": 5,
            "refresh_interval_seconds": 30,
            "log_level": "DEBUG",
        },
    }


@pytest.fixture
def sample_config_file(temp_dir, sample_config_data):
    """Create a sample config file for testing."""
    config_path = temp_dir / "config.json"
    with open(config_path, "w") as f:
        json.dump(sample_config_data, f)
    return config_path


@pytest.fixture
def closed_port():
    """A loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class FakeConnection:
    """Reader/writer pair handed out by FakeConnect."""

    def __init__(self):
        self.reader = MagicMock()
        self.writer = MagicMock()
        self.writer.wait_closed = AsyncMock()


class FakeConnect:
    """Scripted stand-in for asyncio.open_connection.

    Each call consumes the next behaviour; the last one repeats.
    Behaviours: "ok", "refuse", "dns", "hang", "late".
    """

    def __init__(self, *behaviours: str):
        self.behaviours = list(behaviours) or ["ok"]
        self.calls: list[tuple[str, int]] = []
        self.connections: list[FakeConnection] = []

    async def __call__(self, host: str, port: int):
        self.calls.append((host, port))
        index = min(len(self.calls), len(self.behaviours)) - 1
        behaviour = self.behaviours[index]
        conn = FakeConnection()
        self.connections.append(conn)

        if behaviour == "refuse":
            raise ConnectionRefusedError(111, "Connection refused")
        if behaviour == "dns":
            raise socket.gaierror(-2, "Name or service not known")
        if behaviour == "hang":
            await asyncio.sleep(3600)
        if behaviour == "late":
            # Completes even though the attempt cancelled it
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                return conn.reader, conn.writer
        return conn.reader, conn.writer


class FakeProber:
    """Prober double returning scripted outcomes per host.

    When ``gate`` is set, probes block until it is released.
    """

    def __init__(self, outcomes=None, default=ProbeOutcome.REACHABLE):
        self.outcomes = dict(outcomes or {})
        self.default = default
        self.calls: list[tuple[str, int, float]] = []
        self.gate: asyncio.Event | None = None

    async def probe(self, host, port, timeout):
        self.calls.append((host, port, timeout))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.get(host, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_prober():
    return FakeProber()


@pytest.fixture
def make_connect():
    """Factory for scripted connect functions."""
    return FakeConnect
