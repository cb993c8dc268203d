"""Load summary of a finished allocation."""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

from .fitness import FitnessEvaluator
from .models import Allocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationSummary:
    """Per-worker loads and aggregate figures for an allocation."""

    num_tasks: int
    worker_loads: Dict[str, float]
    makespan: float  # max worker load
    total_load: float  # sum of worker loads
    mean_load: float
    imbalance: float  # makespan / mean_load, 1.0 is perfectly even
    initial_makespan: Optional[float] = None  # before refinement
    improvement_pct: Optional[float] = None

    @classmethod
    def from_allocation(
        cls,
        evaluator: FitnessEvaluator,
        allocation: Allocation,
        initial: Optional[Allocation] = None,
    ) -> "AllocationSummary":
        """Summarize an allocation.

        Args:
            evaluator: Evaluator for the run's tasks and workers
            allocation: Final allocation
            initial: Allocation before refinement, to report the improvement

        Returns:
            AllocationSummary
        """
        loads = evaluator.worker_loads(allocation)
        makespan = max(loads, default=0.0)
        total = sum(loads)
        mean = total / len(loads) if loads else 0.0

        initial_makespan = None
        improvement_pct = None
        if initial is not None:
            initial_makespan = evaluator.makespan(initial)
            if initial_makespan > 0:
                improvement_pct = (initial_makespan - makespan) / initial_makespan * 100

        return cls(
            num_tasks=len(allocation),
            worker_loads=_by_worker_id(evaluator, loads),
            makespan=makespan,
            total_load=total,
            mean_load=mean,
            imbalance=makespan / mean if mean > 0 else 1.0,
            initial_makespan=initial_makespan,
            improvement_pct=improvement_pct,
        )

    def as_dict(self) -> dict:
        return asdict(self)

    def log(self, level: int = logging.INFO):
        """Write a human-readable summary to the module logger."""
        logger.log(level, "Tasks allocated: %d", self.num_tasks)
        for worker_id, load in self.worker_loads.items():
            logger.log(level, "  %s load: %.2f", worker_id, load)
        if self.initial_makespan is not None:
            logger.log(level, "Makespan before refinement: %.2f", self.initial_makespan)
        logger.log(level, "Makespan: %.2f", self.makespan)
        logger.log(level, "Total load: %.2f (imbalance %.3f)", self.total_load, self.imbalance)
        if self.improvement_pct is not None:
            logger.log(level, "Refinement improvement: %+.2f%%", self.improvement_pct)


def _by_worker_id(evaluator: FitnessEvaluator, loads: Sequence[float]) -> Dict[str, float]:
    return {worker.worker_id: load for worker, load in zip(evaluator.workers, loads)}
