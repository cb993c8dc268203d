"""Entry point for hybrid scheduling: online assignment followed by refinement."""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .config import SchedulerConfig
from .errors import EmptyInputError, InvalidResourceError
from .fitness import FitnessEvaluator
from .metrics import AllocationSummary
from .models import Allocation, Task, TimelineEntry, Worker
from .policy import QLearningPolicy
from .refiner import RefinementRound, TLBORefiner
from .scheduler import OnlineAssigner
from .topology import TaskGraph, check_rate

logger = logging.getLogger(__name__)


@dataclass
class ScheduleResult:
    """Output of a scheduling run."""

    allocation: Allocation
    initial_allocation: Allocation
    timeline: Dict[str, TimelineEntry]
    summary: AllocationSummary
    history: List[RefinementRound]

    @property
    def makespan(self) -> float:
        return self.summary.makespan


class HybridScheduler:
    """Orchestrates a scheduling run.

    Validates the input, runs the learned-policy assignment pass over the
    task graph and refines its allocation with teacher/learner rounds.
    """

    def __init__(
        self,
        tasks: Sequence[Task],
        workers: Sequence[Worker],
        config: Optional[SchedulerConfig] = None,
    ):
        """Initialize the scheduler.

        Args:
            tasks: Tasks in their fixed order
            workers: Workers; allocation values index into this list
            config: Run options, defaults if omitted
        """
        self.tasks = list(tasks)
        self.workers = list(workers)
        self.config = config or SchedulerConfig()

        # Built by setup()
        self.graph: Optional[TaskGraph] = None
        self.evaluator: Optional[FitnessEvaluator] = None
        self.policy: Optional[QLearningPolicy] = None
        self.refiner: Optional[TLBORefiner] = None

    def validate(self):
        """Reject input the optimization loops cannot handle."""
        seen = set()
        for worker in self.workers:
            if worker.worker_id in seen:
                raise InvalidResourceError(f"Duplicate worker id: {worker.worker_id}")
            seen.add(worker.worker_id)
            check_rate(worker)

        self.graph = TaskGraph(self.tasks)

        if self.tasks and not self.workers:
            raise EmptyInputError(f"{len(self.tasks)} tasks but no workers to assign them to")

        # Sizes and rates are each in range but their ratio may not be
        self.evaluator = FitnessEvaluator(self.tasks, self.workers)
        for task, runtimes in zip(self.tasks, self.evaluator.runtimes):
            for worker, runtime in zip(self.workers, runtimes):
                if not (math.isfinite(runtime) and runtime > 0):
                    raise InvalidResourceError(
                        f"Task {task.task_id} on worker {worker.worker_id} has runtime {runtime}"
                    )

    def setup(self):
        """Validate the input and set up fresh components for a run.

        Every call rebuilds the graph, policy and refiner, so a repeated
        schedule() starts from an empty value table and reassigns
        `Task.assigned_worker`.
        """
        self.validate()

        policy_rng, refiner_rng = self.config.make_rngs()
        if self.workers:
            self.policy = QLearningPolicy(
                num_workers=len(self.workers),
                exploration_rate=self.config.initial_exploration_rate,
                exploration_decay=self.config.exploration_decay,
                exploration_floor=self.config.exploration_floor,
                learning_rate=self.config.learning_rate,
                discount_factor=self.config.discount_factor,
                state_resolution=self.config.state_resolution,
                rng=policy_rng,
            )
        self.refiner = TLBORefiner(
            self.evaluator,
            rounds=self.config.refinement_rounds,
            rng=refiner_rng,
        )

    def schedule(self) -> ScheduleResult:
        """Run both stages.

        Returns:
            ScheduleResult with the refined allocation
        """
        self.setup()
        logger.info(
            "Scheduling %d tasks on %d workers", len(self.tasks), len(self.workers)
        )

        if self.tasks:
            assigner = OnlineAssigner(self.graph, self.workers, self.policy)
            initial, timeline = assigner.run()
        else:
            initial, timeline = [], {}
        logger.info("Assignment makespan: %.4f", self.evaluator.makespan(initial))

        allocation, history = self.refiner.refine(initial)
        summary = AllocationSummary.from_allocation(self.evaluator, allocation, initial=initial)
        logger.info("Refined makespan: %.4f", summary.makespan)

        return ScheduleResult(
            allocation=allocation,
            initial_allocation=initial,
            timeline=timeline,
            summary=summary,
            history=history,
        )


def schedule(
    tasks: Sequence[Task],
    workers: Sequence[Worker],
    config: Optional[SchedulerConfig] = None,
) -> ScheduleResult:
    """Schedule tasks on workers with default components."""
    return HybridScheduler(tasks, workers, config).schedule()
