"""Hybrid learned-policy and teaching-learning scheduling of DAG tasks."""

from .config import SchedulerConfig
from .errors import (
    ConfigurationError,
    DegenerateRewardError,
    EmptyInputError,
    InvalidGraphError,
    InvalidResourceError,
    SchedulingError,
)
from .fitness import FitnessEvaluator
from .ledger import WorkerLoadLedger
from .metrics import AllocationSummary
from .models import Allocation, Task, TimelineEntry, Worker
from .pipeline import HybridScheduler, ScheduleResult, schedule
from .policy import OutcomeState, QLearningPolicy, SelectionState, ValueTable
from .refiner import RefinementRound, TLBORefiner
from .scheduler import OnlineAssigner
from .topology import TaskGraph

__all__ = [
    "Allocation",
    "AllocationSummary",
    "ConfigurationError",
    "DegenerateRewardError",
    "EmptyInputError",
    "FitnessEvaluator",
    "HybridScheduler",
    "InvalidGraphError",
    "InvalidResourceError",
    "OnlineAssigner",
    "OutcomeState",
    "QLearningPolicy",
    "RefinementRound",
    "ScheduleResult",
    "SchedulingError",
    "SelectionState",
    "Task",
    "TaskGraph",
    "TimelineEntry",
    "TLBORefiner",
    "ValueTable",
    "Worker",
    "WorkerLoadLedger",
    "schedule",
]
