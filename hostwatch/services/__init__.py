"""Services for probing targets and tracking their status."""

from .coordinator import StatusCoordinator
from .prober import ReachabilityProber
from .target_list import TargetList

__all__ = ["ReachabilityProber", "StatusCoordinator", "TargetList"]
