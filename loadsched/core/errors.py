"""Exceptions raised while loading consumption requests and scheduling their runs.

Every error derives from :class:`SchedulingError` and from the builtin exception a
caller would expect for the same kind of failure, so ``except ValueError`` keeps
catching configuration problems.
"""

from typing import Any, Optional


class SchedulingError(Exception):
    """Base class of all errors raised by loadsched."""


class ConfigValidationError(SchedulingError, ValueError):
    """A configuration value violates its validation rule.

    Args:
        message (str): Human readable description.
        field (str, optional): Dotted path of the offending value, e.g. ``boiler.usage.0.power.to``.
        rule (str, optional): Name of the violated rule, e.g. ``crossed`` or ``day-hours``.
        value (Any, optional): The rejected value.
    """

    def __init__(self, message: str, field: Optional[str] = None, rule: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.rule = rule
        self.value = value

    def __str__(self):
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message

    def located(self, prefix: str) -> "ConfigValidationError":
        """Return a copy of the error whose field path is prefixed with ``prefix``."""
        field = f"{prefix}.{self.field}" if self.field else prefix
        return ConfigValidationError(self.message, field=field, rule=self.rule, value=self.value)


ValidationError = ConfigValidationError


class MissingScheduleError(SchedulingError, RuntimeError):
    """Recurrence was requested for a request that has no schedule."""

    def __init__(self):
        super().__init__("Called next_after on a request without a schedule")


class UnknownTriggerTargetError(SchedulingError, KeyError):
    """A trigger names a request that does not exist.

    Attributes:
        target (str): The missing request name.
        source (str | None): The request declaring the trigger.
        run (Run | None): The run whose completion fired the trigger, set by the scheduler.
    """

    def __init__(self, target: str, source: Optional[str] = None):
        super().__init__(target)
        self.target = target
        self.source = source
        self.run = None

    def __str__(self):
        if self.source is not None:
            return f"Request '{self.source}' triggers unknown request '{self.target}'"
        return f"Unknown request '{self.target}'"


class NumericDegeneracyError(SchedulingError, ArithmeticError):
    """A run start time is not orderable (NaN)."""
