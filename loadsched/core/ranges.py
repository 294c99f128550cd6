"""
Validated numeric ranges.

A range is checked once, when it is built, by its validation policy and is
immutable afterwards. Policies:

- ``BasicRange``: ``from <= to`` and ``from >= 0``.
- ``DayHours``: additionally ``to <= 24``, for hours of the day.
"""

import math
from abc import ABC
from dataclasses import dataclass, field
from numbers import Real
from typing import Type

from loadsched.constants import HOURS_PER_DAY
from loadsched.core.errors import ConfigValidationError
from loadsched.core.randomness import get_random_source


class RangePolicy(ABC):
    """Validation policy of a :class:`Range`."""

    name: str = ""

    @classmethod
    def validate(cls, low: float, high: float) -> None:
        """Raise :class:`ConfigValidationError` if the bounds are invalid."""
        for key, value in (("from", low), ("to", high)):
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ConfigValidationError(
                    f"must be a number, got '{type(value).__name__}'", field=key, rule="type", value=value
                )
            if not math.isfinite(value):
                raise ConfigValidationError(
                    f"must be a finite number, got {value}", field=key, rule="finite", value=value
                )
        if low > high:
            raise ConfigValidationError(
                f"range bounds crossed ({low} > {high})", field="from", rule="crossed", value=(low, high)
            )


class BasicRange(RangePolicy):
    name = "basic"

    @classmethod
    def validate(cls, low: float, high: float) -> None:
        super().validate(low, high)
        if low < 0:
            raise ConfigValidationError(
                f"expected a non-negative number, got {low}", field="from", rule="non-negative", value=low
            )


class DayHours(BasicRange):
    name = "day-hours"

    @classmethod
    def validate(cls, low: float, high: float) -> None:
        super().validate(low, high)
        if high > HOURS_PER_DAY:
            raise ConfigValidationError(
                f"expected an hour in a day, got {high}", field="to", rule="day-hours", value=high
            )


@dataclass(frozen=True)
class Range:
    """Closed interval ``[low, high]`` of real numbers.

    Args:
        low (float): Lower bound (``from`` in site definitions).
        high (float): Upper bound (``to`` in site definitions).
        policy (Type[RangePolicy]): Validation applied on construction. Defaults to ``BasicRange``.

    Raises:
        ConfigValidationError: If the policy rejects the bounds.
    """

    low: float
    high: float
    policy: Type[RangePolicy] = field(default=BasicRange, compare=False, repr=False)

    def __post_init__(self):
        self.policy.validate(self.low, self.high)
        object.__setattr__(self, "low", float(self.low))
        object.__setattr__(self, "high", float(self.high))

    @classmethod
    def basic(cls, low: float, high: float) -> "Range":
        return cls(low, high, BasicRange)

    @classmethod
    def day_hours(cls, low: float, high: float) -> "Range":
        return cls(low, high, DayHours)

    @property
    def length(self) -> float:
        return self.high - self.low

    def pick(self, rng=None) -> float:
        """Draw a uniformly distributed value in ``[low, high)``.

        Args:
            rng (RandomSource | numpy.random.Generator, optional): Source of randomness.
                Defaults to the process-wide source.
        """
        return get_random_source(rng).uniform(self.low, self.high)


WHOLE_DAY = Range(0.0, HOURS_PER_DAY, DayHours)
