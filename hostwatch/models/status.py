"""Status table, refresh bookkeeping and summary models."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from .target import TargetStatus


class StatusTable(Mapping[UUID, TargetStatus]):
    """Target id -> status. Ids never checked read as UNKNOWN."""

    def __init__(self) -> None:
        self._statuses: dict[UUID, TargetStatus] = {}

    def __getitem__(self, target_id: UUID) -> TargetStatus:
        return self._statuses[target_id]

    def __iter__(self) -> Iterator[UUID]:
        return iter(self._statuses)

    def __len__(self) -> int:
        return len(self._statuses)

    def status_of(self, target_id: UUID) -> TargetStatus:
        """Get status for a target id, UNKNOWN if it was never checked."""
        return self._statuses.get(target_id, TargetStatus.UNKNOWN)

    def set(self, target_id: UUID, status: TargetStatus) -> None:
        self._statuses[target_id] = status

    def discard(self, target_id: UUID) -> None:
        self._statuses.pop(target_id, None)

    def all_resolved(self, target_ids: Iterable[UUID]) -> bool:
        """True when none of the ids is UNKNOWN (vacuously true for none)."""
        return all(self.status_of(i) != TargetStatus.UNKNOWN for i in target_ids)

    def snapshot(self) -> dict[UUID, TargetStatus]:
        return dict(self._statuses)


@dataclass
class RefreshState:
    """Timestamps of the last started sweep and the last complete sweep."""

    last_sweep_started: float | None = None  # monotonic, used for debounce
    last_updated: datetime | None = None  # wall clock, used for display


class StatusSummary(BaseModel):
    """Aggregate counts across the current targets."""

    online: int = 0
    offline: int = 0
    unknown: int = 0
    last_updated: datetime | None = None

    @property
    def total(self) -> int:
        return self.online + self.offline + self.unknown

    @property
    def not_responding(self) -> int:
        """Offline targets plus those still being checked."""
        return self.offline + self.unknown

    @property
    def is_checking(self) -> bool:
        return self.unknown > 0

    @property
    def is_complete(self) -> bool:
        return self.unknown == 0

    @classmethod
    def from_table(
        cls,
        table: StatusTable,
        target_ids: Iterable[UUID],
        last_updated: datetime | None = None,
    ) -> "StatusSummary":
        """Count statuses of the given target ids."""
        summary = cls(last_updated=last_updated)
        for target_id in target_ids:
            status = table.status_of(target_id)
            if status == TargetStatus.ONLINE:
                summary.online += 1
            elif status == TargetStatus.OFFLINE:
                summary.offline += 1
            else:
                summary.unknown += 1
        return summary
