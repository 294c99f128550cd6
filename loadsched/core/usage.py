from dataclasses import dataclass

from loadsched.constants import FIXED_LINES, PowerSource
from loadsched.core.randomness import get_random_source
from loadsched.core.ranges import Range


@dataclass(frozen=True)
class UsedPower:
    """One sampled usage segment.

    Attributes:
        power (float): Power drawn (W).
        duration (float): How long the power is drawn (h).
        source (PowerSource): Line the power is taken from. Never ``RANDOM_LINE``.
    """

    power: float
    duration: float
    source: PowerSource


@dataclass(frozen=True)
class Usage:
    """Definition of one usage segment of an appliance.

    Attributes:
        power (Range): Power range in watts.
        duration (Range): Duration range in hours. Total consumption is power * duration.
        source (PowerSource): Where the power comes from.
    """

    power: Range
    duration: Range
    source: PowerSource

    def pick(self, rng=None) -> UsedPower:
        """Sample power and duration; resolve a random line to one of the three fixed lines."""
        rng = get_random_source(rng)
        source = self.source
        power = self.power.pick(rng)
        duration = self.duration.pick(rng)
        if source is PowerSource.RANDOM_LINE:
            source = rng.choice(FIXED_LINES)
        return UsedPower(power=power, duration=duration, source=source)
