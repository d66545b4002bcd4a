"""In-memory, ordered collection of monitored targets."""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING
from uuid import UUID

from ..models.target import Target

if TYPE_CHECKING:
    from .coordinator import StatusCoordinator

logger = logging.getLogger(__name__)


class TargetList:
    """Holds the user's targets and keeps a coordinator in step with edits.

    Adding or editing a target triggers a check for it; removing one drops
    its status entry.
    """

    def __init__(self, targets: list[Target] | None = None):
        self._targets: list[Target] = []
        self._coordinator: "StatusCoordinator | None" = None
        for target in targets or []:
            self._insert(target)

    def bind(self, coordinator: "StatusCoordinator") -> None:
        """Attach the coordinator that should react to list edits."""
        self._coordinator = coordinator

    def __iter__(self) -> Iterator[Target]:
        return iter(list(self._targets))

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, target_id: object) -> bool:
        return any(t.id == target_id for t in self._targets)

    def targets(self) -> list[Target]:
        """Snapshot of the current targets in display order."""
        return list(self._targets)

    def get(self, target_id: UUID) -> Target | None:
        for target in self._targets:
            if target.id == target_id:
                return target
        return None

    def add(self, target: Target) -> None:
        """Append a target and check it."""
        self._insert(target)
        logger.debug(f"Added {target.display_name} ({target.address})")
        if self._coordinator is not None:
            self._coordinator.request_check(target)

    def update(self, target: Target) -> None:
        """Replace the target with the same id, keeping its position."""
        index = self._index_of(target.id)
        if index is None:
            raise KeyError(f"Unknown target: {target.id}")
        self._targets[index] = target
        logger.debug(f"Updated {target.display_name} ({target.address})")
        if self._coordinator is not None:
            self._coordinator.request_check(target)

    def remove(self, target_id: UUID) -> Target | None:
        """Remove a target. Returns the removed record, or None."""
        index = self._index_of(target_id)
        if index is None:
            return None
        target = self._targets.pop(index)
        logger.debug(f"Removed {target.display_name}")
        if self._coordinator is not None:
            self._coordinator.forget(target_id)
        return target

    def move(self, target_id: UUID, position: int) -> None:
        """Move a target to a new position, clamped to the list bounds."""
        index = self._index_of(target_id)
        if index is None:
            raise KeyError(f"Unknown target: {target_id}")
        target = self._targets.pop(index)
        position = min(max(position, 0), len(self._targets))
        self._targets.insert(position, target)

    def _insert(self, target: Target) -> None:
        if self._index_of(target.id) is not None:
            raise ValueError(f"Duplicate target id: {target.id}")
        self._targets.append(target)

    def _index_of(self, target_id: UUID) -> int | None:
        for i, target in enumerate(self._targets):
            if target.id == target_id:
                return i
        return None
