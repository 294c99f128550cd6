"""
Consumption requests and their recurrence.

A :class:`Request` describes one appliance: when it recurs (its optional
:class:`Schedule`), what it draws while running (its :class:`Usage` segments)
and which other requests start once it finishes (its :class:`Trigger` links).
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loadsched.constants import HOURS_PER_DAY
from loadsched.core.errors import ConfigValidationError, MissingScheduleError
from loadsched.core.randomness import get_random_source
from loadsched.core.ranges import WHOLE_DAY, DayHours, Range
from loadsched.core.usage import Usage, UsedPower

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Schedule:
    """Recurrence policy of a request.

    Attributes:
        interval (Range): How long to wait after one run ends before the next starts (h).
        restrict_hours (Range): Hours of the day a run may start in. Defaults to the whole day.
        delay_up_to (float): If a start falls outside the restricted hours, it is delayed up to
            this many hours after the first opportunity. Defaults to 0.
    """

    interval: Range
    restrict_hours: Range = WHOLE_DAY
    delay_up_to: float = 0.0

    def __post_init__(self):
        try:
            DayHours.validate(self.restrict_hours.low, self.restrict_hours.high)
        except ConfigValidationError as exc:
            raise exc.located("restrict-hours") from None
        if isinstance(self.delay_up_to, bool) or not isinstance(self.delay_up_to, (int, float)):
            raise ConfigValidationError(
                f"must be a number, got '{type(self.delay_up_to).__name__}'",
                field="delay-up-to",
                rule="type",
                value=self.delay_up_to,
            )
        if not math.isfinite(self.delay_up_to) or self.delay_up_to < 0:
            raise ConfigValidationError(
                f"expected a finite non-negative number, got {self.delay_up_to}",
                field="delay-up-to",
                rule="non-negative",
                value=self.delay_up_to,
            )
        object.__setattr__(self, "delay_up_to", float(self.delay_up_to))


@dataclass(frozen=True)
class Trigger:
    """When the owning request finishes, start request ``other`` right away."""

    other: str


@dataclass(frozen=True)
class Delay:
    """Delay limits of a request. Loaded and validated but not used by the scheduler."""

    max_hours: int
    max_instances: int


@dataclass(frozen=True)
class Request:
    """Static description of one appliance.

    A request without a schedule never recurs on its own; it only runs when
    another request triggers it.
    """

    schedule: Optional[Schedule] = None
    usage: Tuple[Usage, ...] = ()
    trigger: Tuple[Trigger, ...] = ()
    delay: Optional[Delay] = None

    def __post_init__(self):
        object.__setattr__(self, "usage", tuple(self.usage))
        object.__setattr__(self, "trigger", tuple(self.trigger))

    def next_after(self, end_time: float, rng=None) -> float:
        """Start time of the next run after a run ending at ``end_time``.

        Draws a pause from the interval range. If the resulting start falls outside
        the restricted hours it is pushed to the start of the window (the next day's
        window if it is too late) plus a random delay of up to
        ``min(window length, delay_up_to)`` hours.

        Args:
            end_time (float): End of the previous run, ``0.0`` for the first one.
            rng (RandomSource | numpy.random.Generator, optional): Source of randomness.

        Returns:
            float: Start time in hours.

        Raises:
            MissingScheduleError: If the request has no schedule.
        """
        schedule = self.schedule
        if schedule is None:
            raise MissingScheduleError()
        rng = get_random_source(rng)
        window = schedule.restrict_hours

        start = end_time + schedule.interval.pick(rng)
        part_of_day = start % HOURS_PER_DAY

        if part_of_day < window.low:
            adjust = window.low - part_of_day
        elif part_of_day > window.high:
            # Pushed to the next day's window start, measured from `low` as well
            adjust = window.low + (HOURS_PER_DAY - part_of_day)
        else:
            adjust = None

        if adjust is not None:
            logger.debug(
                f"Start at {start:.3f} h is outside the restricted hours [{window.low}, {window.high}], "
                f"pushing it by {adjust:.3f} h"
            )
            max_delay = min(window.length, schedule.delay_up_to)
            start += adjust + rng.uniform(0.0, max_delay)

        return start

    def generate_consumption(self, rng=None) -> List[UsedPower]:
        """Sample every usage segment once, in declaration order."""
        rng = get_random_source(rng)
        return [usage.pick(rng) for usage in self.usage]
