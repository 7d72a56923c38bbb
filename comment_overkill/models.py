"""
Shared data types: candidates, deletion outcomes and the persisted run state.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class Candidate:
    """A deletable item as listed by the content source."""

    element: Any
    timestamp: Optional[str] = None
    item_id: Optional[str] = None
    body: str = ""
    interface: str = "old"


class OutcomeStatus(Enum):
    DELETED = "deleted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DeletionOutcome:
    status: OutcomeStatus
    reason: str = ""

    @classmethod
    def deleted(cls) -> "DeletionOutcome":
        return cls(OutcomeStatus.DELETED)

    @classmethod
    def skipped(cls, reason: str) -> "DeletionOutcome":
        return cls(OutcomeStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, reason: str) -> "DeletionOutcome":
        return cls(OutcomeStatus.FAILED, reason)

    @property
    def is_deleted(self) -> bool:
        return self.status is OutcomeStatus.DELETED


@dataclass
class PageResult:
    """Counters for one call of PageProcessor.process_one_page()."""

    advanced: bool = False
    found: int = 0
    deleted: int = 0
    preserved: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class RunState:
    """
    Progress of a run over the partitions.

    current_partition_index always points at the first partition that is not
    in completed_partitions, except while the controller is advancing.
    """

    partitions: List[str]
    preserve_window: timedelta
    running: bool = True
    current_partition_index: int = 0
    completed_partitions: set = field(default_factory=set)

    @property
    def current_partition(self) -> Optional[str]:
        if 0 <= self.current_partition_index < len(self.partitions):
            return self.partitions[self.current_partition_index]
        return None

    @property
    def is_complete(self) -> bool:
        return all(p in self.completed_partitions for p in self.partitions)

    def next_pending_index(self) -> Optional[int]:
        """Index of the first partition not yet completed, or None."""
        for index, partition in enumerate(self.partitions):
            if partition not in self.completed_partitions:
                return index
        return None

    def mark_completed(self, partition: str) -> None:
        self.completed_partitions.add(partition)
        next_index = self.next_pending_index()
        self.current_partition_index = (
            next_index if next_index is not None else len(self.partitions)
        )

    def to_cursor(self) -> Dict[str, Any]:
        """Encode as the persisted cursor dictionary."""
        return {
            "running": self.running,
            "partition": self.current_partition,
            "partition_index": self.current_partition_index,
            "partitions": list(self.partitions),
            "completed_partitions": [
                p for p in self.partitions if p in self.completed_partitions
            ],
            "preserve_window_seconds": self.preserve_window.total_seconds(),
        }

    @classmethod
    def from_cursor(
        cls, cursor: Dict[str, Any], default_partitions: Optional[Sequence[str]] = None
    ) -> "RunState":
        """
        Decode a persisted cursor.

        Every partition ordered before the persisted index counts as completed.

        Raises:
            ValueError: If the cursor is missing fields or inconsistent
        """
        partitions = list(cursor.get("partitions") or default_partitions or [])
        if not partitions:
            raise ValueError("Cursor has no partitions")

        index = cursor.get("partition_index")
        partition = cursor.get("partition")
        if partition is not None and partition in partitions:
            index = partitions.index(partition)
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValueError(f"Invalid partition index in cursor: {index!r}")
        if index < 0 or index > len(partitions):
            raise ValueError(f"Partition index out of range: {index}")

        seconds = cursor.get("preserve_window_seconds")
        if not isinstance(seconds, (int, float)) or isinstance(seconds, bool) or seconds < 0:
            raise ValueError(f"Invalid preserve window in cursor: {seconds!r}")

        completed = {p for p in cursor.get("completed_partitions", []) if p in partitions}
        completed.update(partitions[:index])

        state = cls(
            partitions=partitions,
            preserve_window=timedelta(seconds=seconds),
            running=bool(cursor.get("running", False)),
            completed_partitions=completed,
        )
        next_index = state.next_pending_index()
        state.current_partition_index = next_index if next_index is not None else len(partitions)
        return state
