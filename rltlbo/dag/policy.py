"""Epsilon-greedy learned-value policy for online worker selection.

The policy keeps a value table over (state, worker index) pairs. There are
two kinds of state:

- ``SelectionState`` is what a decision sees: the task size and the sorted
  load of every worker.
- ``OutcomeState`` is what an update sees: the task size and the finish
  time the decision produced.

Updates write into outcome states while decisions read selection states, so
learned values do not flow back into decisions.

Continuous values are mapped to logarithmic buckets so that near-identical
situations share a key.
"""

import math
import random
import sys
from dataclasses import dataclass
from typing import Dict, Hashable, Optional, Sequence, Tuple

from .errors import DegenerateRewardError
from .models import Task


def bucket(value: float, resolution: float) -> int:
    """Logarithmic bucket index of a non-negative value.

    Values too large to index map to the last bucket; NaN and negative
    values map to the first.
    """
    if math.isnan(value) or value <= 0:
        return 0
    scaled = math.log1p(value) / resolution
    if not math.isfinite(scaled):
        return sys.maxsize
    return min(int(math.floor(scaled)), sys.maxsize)


@dataclass(frozen=True)
class SelectionState:
    size_bucket: int
    load_buckets: Tuple[int, ...]


@dataclass(frozen=True)
class OutcomeState:
    size_bucket: int
    finish_bucket: int


class ValueTable:
    """Value estimates keyed by (state, worker index); unseen pairs are 0."""

    def __init__(self, num_workers: int):
        self.num_workers = num_workers
        self._values: Dict[Tuple[Hashable, int], float] = {}

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key) -> bool:
        return key in self._values

    def get(self, state: Hashable, worker_index: int) -> float:
        return self._values.get((state, worker_index), 0.0)

    def set(self, state: Hashable, worker_index: int, value: float):
        self._values[(state, worker_index)] = value

    def best(self, state: Hashable) -> Tuple[int, float]:
        """Worker with the highest value for a state; ties go to the lowest index."""
        best_index = 0
        best_value = -math.inf
        for worker_index in range(self.num_workers):
            value = self.get(state, worker_index)
            if value > best_value:
                best_value = value
                best_index = worker_index
        return best_index, best_value


class QLearningPolicy:
    """Epsilon-greedy worker selection with Bellman value updates."""

    def __init__(
        self,
        num_workers: int,
        exploration_rate: float = 0.3,
        exploration_decay: float = 0.95,
        exploration_floor: float = 0.01,
        learning_rate: float = 0.1,
        discount_factor: float = 0.9,
        state_resolution: float = 0.25,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the policy.

        Args:
            num_workers: Number of workers to choose from
            exploration_rate: Initial probability of a random choice
            exploration_decay: Factor applied to the rate by decay()
            exploration_floor: Lower bound for the rate
            learning_rate: Step size of the value update
            discount_factor: Weight of the best next-state value
            state_resolution: Logarithmic bucket width for state keys
            rng: Random stream; a fresh unseeded one if omitted
        """
        if num_workers <= 0:
            raise ValueError(f"Policy needs at least one worker, got {num_workers}")
        self.num_workers = num_workers
        self.epsilon = exploration_rate
        self.exploration_decay = exploration_decay
        self.exploration_floor = exploration_floor
        self.learning_rate = learning_rate
        self.discount_factor = discount_factor
        self.state_resolution = state_resolution
        self.rng = rng if rng is not None else random.Random()

        self.values = ValueTable(num_workers)
        self.explorations = 0
        self.exploitations = 0

    def selection_state(self, task: Task, load_snapshot: Sequence[float]) -> SelectionState:
        loads = sorted(load_snapshot)
        return SelectionState(
            size_bucket=bucket(task.size, self.state_resolution),
            load_buckets=tuple(bucket(load, self.state_resolution) for load in loads),
        )

    def outcome_state(self, task: Task, finish_time: float) -> OutcomeState:
        return OutcomeState(
            size_bucket=bucket(task.size, self.state_resolution),
            finish_bucket=bucket(finish_time, self.state_resolution),
        )

    def select_worker(self, task: Task, load_snapshot: Sequence[float]) -> int:
        """Pick a worker for a task given the ascending worker loads.

        Args:
            task: Task being placed
            load_snapshot: Current worker loads, ascending

        Returns:
            Index of the chosen worker
        """
        state = self.selection_state(task, load_snapshot)
        # Always draw so the random stream does not depend on epsilon
        if self.rng.random() < self.epsilon:
            self.explorations += 1
            return self.rng.randrange(self.num_workers)

        self.exploitations += 1
        worker_index, _ = self.values.best(state)
        return worker_index

    def update_value(self, task: Task, worker_index: int, finish_time: float) -> float:
        """Apply the Bellman update for a realized finish time.

        Args:
            task: Task that was placed
            worker_index: Worker it was placed on
            finish_time: Predicted finish time of the task on that worker

        Returns:
            The new value estimate
        """
        if not finish_time > 0:
            raise DegenerateRewardError(
                f"Task {task.task_id} finished at {finish_time}; reward needs a positive finish time"
            )
        reward = 1.0 / finish_time

        state = self.outcome_state(task, finish_time)
        current = self.values.get(state, worker_index)
        _, best_next = self.values.best(state)
        new_value = current + self.learning_rate * (
            reward + self.discount_factor * best_next - current
        )
        self.values.set(state, worker_index, new_value)
        return new_value

    def decay(self) -> float:
        """Shrink the exploration rate towards its floor."""
        decayed = max(self.exploration_floor, self.epsilon * self.exploration_decay)
        # A rate that starts below the floor is never raised
        self.epsilon = min(self.epsilon, decayed)
        return self.epsilon
