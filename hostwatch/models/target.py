"""Target and status models."""

from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

MIN_PORT = 1
MAX_PORT = 65535


class ProbeOutcome(str, Enum):
    """Final result of a reachability probe."""

    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"


class TargetStatus(str, Enum):
    """Displayed status of a monitored target."""

    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"

    @classmethod
    def from_outcome(cls, outcome: ProbeOutcome) -> "TargetStatus":
        """Map a probe outcome to the status it resolves to."""
        if outcome == ProbeOutcome.REACHABLE:
            return cls.ONLINE
        return cls.OFFLINE


class Target(BaseModel):
    """A monitored host/port pair with a stable identity.

    Out-of-range ports are accepted on purpose: such a target is still
    monitored and simply resolves to offline.
    """

    id: UUID = Field(default_factory=uuid4)
    name: str = ""
    host: str
    port: int = 80

    @property
    def has_valid_port(self) -> bool:
        """Whether the port fits a 16-bit endpoint port."""
        return MIN_PORT <= self.port <= MAX_PORT

    @property
    def address(self) -> str:
        """Return host:port for display."""
        return f"{self.host}:{self.port}"

    @property
    def display_name(self) -> str:
        """Return best available name for display."""
        return self.name or self.address

    def same_entity(self, other: "Target") -> bool:
        """Targets are the same entity iff their ids match."""
        return self.id == other.id
