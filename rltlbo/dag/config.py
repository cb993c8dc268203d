"""Scheduler options."""

import math
import random
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigurationError

# Option names accepted by from_dict in addition to the field names
_ALIASES = {
    "refinementRounds": "refinement_rounds",
    "initialExplorationRate": "initial_exploration_rate",
    "explorationDecay": "exploration_decay",
    "explorationFloor": "exploration_floor",
    "learningRate": "learning_rate",
    "discountFactor": "discount_factor",
    "stateResolution": "state_resolution",
}


@dataclass(frozen=True)
class SchedulerConfig:
    """Options for a single scheduling run.

    Attributes:
        refinement_rounds: Number of teacher+learner rounds in stage 2
        initial_exploration_rate: Starting epsilon of the assignment policy
        exploration_decay: Factor applied to epsilon after every task
        exploration_floor: Lower bound for epsilon
        learning_rate: Step size of the value update
        discount_factor: Weight of the best next-state value
        state_resolution: Width of a logarithmic bucket in state keys
        seed: Seed for the random streams; None draws from the OS
    """

    refinement_rounds: int = 100
    initial_exploration_rate: float = 0.3
    exploration_decay: float = 0.95
    exploration_floor: float = 0.01
    learning_rate: float = 0.1
    discount_factor: float = 0.9
    state_resolution: float = 0.25
    seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.refinement_rounds, bool) or not isinstance(self.refinement_rounds, int):
            raise ConfigurationError(
                f"refinement_rounds must be an int, got {self.refinement_rounds!r}"
            )
        if self.refinement_rounds <= 0:
            raise ConfigurationError(
                f"refinement_rounds must be positive, got {self.refinement_rounds}"
            )

        for name in ("initial_exploration_rate", "exploration_floor", "discount_factor"):
            self._check_unit_interval(name, closed_top=True)
        for name in ("exploration_decay", "learning_rate"):
            self._check_unit_interval(name, closed_top=True, open_bottom=True)

        if self.exploration_floor > self.initial_exploration_rate:
            raise ConfigurationError(
                f"exploration_floor ({self.exploration_floor}) exceeds "
                f"initial_exploration_rate ({self.initial_exploration_rate})"
            )
        if not math.isfinite(self.state_resolution) or self.state_resolution <= 0:
            raise ConfigurationError(
                f"state_resolution must be positive, got {self.state_resolution}"
            )

    def _check_unit_interval(self, name: str, closed_top: bool, open_bottom: bool = False):
        value = getattr(self, name)
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ConfigurationError(f"{name} must be a real number, got {value!r}")
        low_ok = value > 0 if open_bottom else value >= 0
        high_ok = value <= 1 if closed_top else value < 1
        if not (low_ok and high_ok):
            raise ConfigurationError(f"{name} out of range: {value}")

    @classmethod
    def from_dict(cls, options: Dict[str, Any]) -> "SchedulerConfig":
        """Build a config from a mapping of option names.

        Both snake_case field names and camelCase option names are accepted.

        Args:
            options: Option name to value

        Returns:
            Validated SchedulerConfig
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown scheduler option: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    def make_rngs(self) -> Tuple[random.Random, random.Random]:
        """Create independent random streams for the policy and the refiner."""
        root = random.Random(self.seed)
        return random.Random(root.getrandbits(64)), random.Random(root.getrandbits(64))
