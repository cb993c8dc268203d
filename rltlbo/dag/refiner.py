"""Teaching-learning based refinement of a complete allocation."""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .fitness import FitnessEvaluator
from .models import Allocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefinementRound:
    """What one teacher+learner round did."""

    round_index: int
    teacher_worker: int
    baseline_makespan: float
    makespan_after_teacher: float
    makespan_after_learner: float
    teacher_moves: int
    learner_moves: int


class TLBORefiner:
    """Fixed-round teacher/learner refinement driven only by the fitness evaluator.

    Task precedence is not consulted; the allocation vector is the whole state.
    """

    def __init__(
        self,
        evaluator: FitnessEvaluator,
        rounds: int = 100,
        rng: Optional[random.Random] = None,
    ):
        self.evaluator = evaluator
        self.rounds = rounds
        self.rng = rng if rng is not None else random.Random()

    def find_teacher_worker(self) -> int:
        """Worker with the lowest makespan if every task were assigned to it."""
        best_worker = 0
        best_makespan = math.inf
        for worker_index in range(self.evaluator.num_workers):
            trial = [worker_index] * self.evaluator.num_tasks
            makespan = self.evaluator.makespan(trial)
            if makespan < best_makespan:
                best_makespan = makespan
                best_worker = worker_index
        return best_worker

    def teacher_phase(self, allocation: Allocation) -> Tuple[Allocation, int, int]:
        """Move tasks onto the teacher worker where that beats the phase baseline.

        Each trial is compared with the makespan of the allocation as it was
        handed in, not with the partially updated vector.

        Args:
            allocation: Allocation at phase start; not modified

        Returns:
            Tuple of (new allocation, teacher worker, number of committed moves)
        """
        teacher = self.find_teacher_worker()
        baseline = self.evaluator.makespan(allocation)
        updated = list(allocation)
        moves = 0

        for task_index in range(len(updated)):
            original = updated[task_index]
            updated[task_index] = teacher
            if self.evaluator.makespan(updated) < baseline:
                if original != teacher:
                    moves += 1
            else:
                updated[task_index] = original

        return updated, teacher, moves

    def learner_phase(self, allocation: Allocation) -> Tuple[Allocation, int]:
        """Let each task adopt a random partner's worker if that lowers its local load.

        Moves are committed immediately, so later pairs in the same phase see
        them. With fewer than two tasks there is no partner and nothing changes.

        Args:
            allocation: Allocation at phase start; not modified

        Returns:
            Tuple of (new allocation, number of committed moves)
        """
        updated = list(allocation)
        num_tasks = len(updated)
        if num_tasks < 2:
            return updated, 0

        moves = 0
        for task_index in range(num_tasks):
            partner = self.rng.randrange(num_tasks - 1)
            if partner >= task_index:
                partner += 1

            own_worker = updated[task_index]
            partner_worker = updated[partner]

            updated[task_index] = partner_worker
            moved_load = self.evaluator.local_load(updated, task_index)
            updated[task_index] = own_worker
            current_load = self.evaluator.local_load(updated, task_index)

            if moved_load < current_load:
                updated[task_index] = partner_worker
                moves += 1

        return updated, moves

    def refine(self, allocation: Allocation) -> Tuple[Allocation, List[RefinementRound]]:
        """Run all rounds on an allocation.

        Args:
            allocation: Starting allocation; not modified

        Returns:
            Tuple of (refined allocation, per-round history)
        """
        self.evaluator.check(allocation)
        current = list(allocation)
        history: List[RefinementRound] = []
        if not current:
            return current, history

        for round_index in range(self.rounds):
            baseline = self.evaluator.makespan(current)
            current, teacher, teacher_moves = self.teacher_phase(current)
            after_teacher = self.evaluator.makespan(current)
            current, learner_moves = self.learner_phase(current)
            after_learner = self.evaluator.makespan(current)

            history.append(
                RefinementRound(
                    round_index=round_index,
                    teacher_worker=teacher,
                    baseline_makespan=baseline,
                    makespan_after_teacher=after_teacher,
                    makespan_after_learner=after_learner,
                    teacher_moves=teacher_moves,
                    learner_moves=learner_moves,
                )
            )
            logger.debug(
                "Round %d: teacher worker %d, makespan %.4f -> %.4f -> %.4f (%d/%d moves)",
                round_index,
                teacher,
                baseline,
                after_teacher,
                after_learner,
                teacher_moves,
                learner_moves,
            )

        return current, history
