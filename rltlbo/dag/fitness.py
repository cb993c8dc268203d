"""Load-based fitness of an allocation."""

from typing import List, Sequence

from .models import Allocation, Task, Worker


class FitnessEvaluator:
    """Simulated worker loads for allocation vectors.

    Tasks placed on one worker are assumed to run back to back, so a
    worker's load is the sum of size / rate over its tasks. Precedence
    between tasks is ignored.
    """

    def __init__(self, tasks: Sequence[Task], workers: Sequence[Worker]):
        """Initialize the evaluator.

        Args:
            tasks: Tasks in the fixed task order of the allocation
            workers: Workers indexed by allocation value
        """
        self.tasks = list(tasks)
        self.workers = list(workers)
        # runtimes[i][w]: time of task i on worker w
        self.runtimes: List[List[float]] = [
            [worker.get_runtime(task.size) for worker in self.workers] for task in self.tasks
        ]

    @property
    def num_tasks(self) -> int:
        return len(self.tasks)

    @property
    def num_workers(self) -> int:
        return len(self.workers)

    def check(self, allocation: Allocation):
        """Raise ValueError unless the allocation fits this task/worker set."""
        if len(allocation) != self.num_tasks:
            raise ValueError(
                f"Allocation has {len(allocation)} slots for {self.num_tasks} tasks"
            )
        for task_index, worker_index in enumerate(allocation):
            if not 0 <= worker_index < self.num_workers:
                raise ValueError(
                    f"Task {self.tasks[task_index].task_id} assigned to unknown worker index {worker_index}"
                )

    def worker_loads(self, allocation: Allocation) -> List[float]:
        """Total runtime assigned to each worker."""
        self.check(allocation)
        loads = [0.0] * self.num_workers
        for task_index, worker_index in enumerate(allocation):
            loads[worker_index] += self.runtimes[task_index][worker_index]
        return loads

    def makespan(self, allocation: Allocation) -> float:
        """Largest worker load; 0.0 when there are no tasks."""
        return max(self.worker_loads(allocation), default=0.0)

    def local_load(self, allocation: Allocation, task_index: int) -> float:
        """Load of the worker that `task_index` is currently assigned to."""
        worker_index = allocation[task_index]
        load = 0.0
        for other_index, other_worker in enumerate(allocation):
            if other_worker == worker_index:
                load += self.runtimes[other_index][worker_index]
        return load
