"""Data models for the monitor."""

from .config import Config, MonitorSettings, TargetConfig
from .status import RefreshState, StatusSummary, StatusTable
from .target import ProbeOutcome, Target, TargetStatus

__all__ = [
    "Config",
    "MonitorSettings",
    "ProbeOutcome",
    "RefreshState",
    "StatusSummary",
    "StatusTable",
    "Target",
    "TargetConfig",
    "TargetStatus",
]
