"""Errors raised when scheduling input is rejected."""


class SchedulingError(ValueError):
    """Base class for rejected scheduling input."""


class InvalidGraphError(SchedulingError):
    """Dependency graph has a cycle, a dangling parent or duplicate task ids."""


class InvalidResourceError(SchedulingError):
    """A task size or worker rate is not a positive finite number."""


class EmptyInputError(SchedulingError):
    """There are tasks to place but no workers to place them on."""


class DegenerateRewardError(SchedulingError):
    """A realized finish time is not positive, so no reward can be derived."""


class ConfigurationError(SchedulingError):
    """A scheduler option is out of range or unknown."""
