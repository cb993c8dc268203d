"""Task dependency graph with validation and ready-set tracking."""

import logging
import math
from typing import Dict, Iterable, List, Sequence

import networkx as nx

from .errors import InvalidGraphError, InvalidResourceError
from .models import Task, Worker

logger = logging.getLogger(__name__)


class TaskGraph:
    """Dependency graph over an ordered task list.

    The input order of the tasks is the fixed task order of the run: it is
    both the allocation slot order and the processing order inside a round.
    """

    def __init__(self, tasks: Sequence[Task]):
        """Initialize the graph.

        Args:
            tasks: Tasks in their fixed order

        Raises:
            InvalidGraphError: duplicate ids, dangling parents or a cycle
            InvalidResourceError: a task size that is not positive
        """
        self.tasks: List[Task] = list(tasks)
        self.graph = nx.DiGraph()
        self._index: Dict[str, int] = {}

        self._build_graph()

    def _build_graph(self):
        """Build the NetworkX graph and reject malformed input."""
        for position, task in enumerate(self.tasks):
            if task.task_id in self._index:
                raise InvalidGraphError(f"Duplicate task id: {task.task_id}")
            check_size(task)
            self._index[task.task_id] = position
            self.graph.add_node(task.task_id, task=task)

        # Edges run parent -> child
        for task in self.tasks:
            for parent_id in sorted(task.parents):
                if parent_id not in self._index:
                    raise InvalidGraphError(
                        f"Task {task.task_id} depends on unknown task {parent_id}"
                    )
                self.graph.add_edge(parent_id, task.task_id)

        if not nx.is_directed_acyclic_graph(self.graph):
            cycle = nx.find_cycle(self.graph)
            path = " -> ".join(str(edge[0]) for edge in cycle) + f" -> {cycle[-1][1]}"
            raise InvalidGraphError(f"Dependency cycle: {path}")

    def __len__(self) -> int:
        return len(self.tasks)

    def index_of(self, task_id: str) -> int:
        """Get the allocation slot of a task."""
        try:
            return self._index[task_id]
        except KeyError:
            raise ValueError(f"Unknown task: {task_id}")

    def ready_tasks(self, remaining: Iterable[Task]) -> List[Task]:
        """Get the tasks of `remaining` none of whose parents are in `remaining`.

        Args:
            remaining: Unscheduled tasks, in the fixed task order

        Returns:
            Ready tasks in the order they appear in `remaining`
        """
        remaining = list(remaining)
        pending = {task.task_id for task in remaining}
        return [task for task in remaining if pending.isdisjoint(task.parents)]

    def rounds(self) -> List[List[Task]]:
        """Split the whole graph into successive ready sets.

        Returns:
            One list of tasks per round, each in the fixed task order
        """
        remaining = list(self.tasks)
        result = []
        while remaining:
            ready = self.ready_tasks(remaining)
            # Unreachable for a validated graph
            if not ready:
                raise InvalidGraphError("No ready task among the remaining tasks")
            result.append(ready)
            scheduled = {task.task_id for task in ready}
            remaining = [task for task in remaining if task.task_id not in scheduled]
        logger.debug("Graph of %d tasks splits into %d ready rounds", len(self.tasks), len(result))
        return result


def check_size(task: Task):
    if not _positive(task.size):
        raise InvalidResourceError(f"Task {task.task_id} has invalid size: {task.size}")


def check_rate(worker: Worker):
    if not _positive(worker.rate):
        raise InvalidResourceError(f"Worker {worker.worker_id} has invalid rate: {worker.rate}")


def _positive(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0
