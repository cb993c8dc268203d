"""Data models for hybrid DAG scheduling."""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

# Worker index per task, in the fixed task order of the run
Allocation = List[int]


@dataclass
class Task:
    """A unit of work in the DAG."""

    task_id: str
    size: float  # Work size (arbitrary units)
    parents: FrozenSet[str] = field(default_factory=frozenset)

    # Set by the stage-1 assignment pass only
    assigned_worker: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.parents, frozenset):
            self.parents = frozenset(self.parents)


@dataclass(frozen=True)
class Worker:
    """A compute resource with a fixed processing rate."""

    worker_id: str
    rate: float  # Higher = faster computation

    def get_runtime(self, size: float) -> float:
        """Calculate time to process work of the given size.

        Args:
            size: Work size of the task

        Returns:
            Time to complete the work on this worker
        """
        if self.rate <= 0:
            raise ValueError(f"Worker {self.worker_id} has invalid rate: {self.rate}")
        return size / self.rate


@dataclass(frozen=True)
class TimelineEntry:
    """Predicted start/finish of a task as decided by the assignment pass."""

    task_id: str
    worker_index: int
    start: float
    finish: float

    @property
    def duration(self) -> float:
        return self.finish - self.start
