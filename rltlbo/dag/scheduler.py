"""Stage-1 online assignment of DAG tasks to workers."""

import logging
from typing import Dict, List, Sequence, Tuple

from .ledger import WorkerLoadLedger
from .models import Allocation, Task, TimelineEntry, Worker
from .policy import QLearningPolicy
from .topology import TaskGraph

logger = logging.getLogger(__name__)


class OnlineAssigner:
    """Walks the task graph one ready set at a time and places every task.

    Each decision sees the ledger and value table as left by all earlier
    decisions, so tasks are handled strictly one after another.
    """

    def __init__(
        self,
        graph: TaskGraph,
        workers: Sequence[Worker],
        policy: QLearningPolicy,
    ):
        """Initialize the assigner.

        Args:
            graph: Validated task graph
            workers: Workers indexed by allocation value
            policy: Policy used to pick a worker per task
        """
        self.graph = graph
        self.workers = list(workers)
        self.policy = policy
        self.ledger = WorkerLoadLedger(len(self.workers))

        self.allocation: Allocation = [0] * len(graph)
        self.timeline: Dict[str, TimelineEntry] = {}
        self.epsilon_trace: List[float] = []

    def _assign_task(self, task: Task):
        """Place a single task.

        1. Ask the policy for a worker
        2. Start the task when that worker frees up
        3. Push the worker's load to the task's finish time
        4. Feed the finish time back to the policy
        """
        worker_index = self.policy.select_worker(task, self.ledger.snapshot())
        self.allocation[self.graph.index_of(task.task_id)] = worker_index
        task.assigned_worker = worker_index

        runtime = self.workers[worker_index].get_runtime(task.size)
        start = self.ledger.load_of(worker_index)
        finish = start + runtime

        self.ledger.update(worker_index, finish)
        self.timeline[task.task_id] = TimelineEntry(
            task_id=task.task_id,
            worker_index=worker_index,
            start=start,
            finish=finish,
        )

        self.policy.update_value(task, worker_index, finish)
        self.epsilon_trace.append(self.policy.decay())

    def run(self) -> Tuple[Allocation, Dict[str, TimelineEntry]]:
        """Assign every task.

        Returns:
            Tuple of (allocation in fixed task order, timeline by task id)
        """
        for round_index, ready in enumerate(self.graph.rounds()):
            logger.debug("Ready round %d: %d tasks", round_index, len(ready))
            for task in ready:
                self._assign_task(task)

        return list(self.allocation), dict(self.timeline)
