"""Per-worker predicted finish times, kept in ascending order."""

import bisect
from typing import List, Tuple


class WorkerLoadLedger:
    """Ascending working set of (load, worker index) entries.

    Updates remove the worker's entry and reinsert it with the new load; the
    entry is located by binary search, so the order never has to be rebuilt.
    """

    def __init__(self, num_workers: int):
        self._loads: List[float] = [0.0] * num_workers
        self._order: List[Tuple[float, int]] = [(0.0, index) for index in range(num_workers)]

    def __len__(self) -> int:
        return len(self._loads)

    def load_of(self, worker_index: int) -> float:
        """Current predicted finish time of a worker."""
        return self._loads[worker_index]

    def update(self, worker_index: int, new_load: float):
        """Replace a worker's load, keeping the ascending order."""
        old_entry = (self._loads[worker_index], worker_index)
        del self._order[bisect.bisect_left(self._order, old_entry)]

        self._loads[worker_index] = new_load
        bisect.insort(self._order, (new_load, worker_index))

    def snapshot(self) -> Tuple[float, ...]:
        """All current loads in ascending order."""
        return tuple(load for load, _ in self._order)
