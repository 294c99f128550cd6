import math
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Tuple

from loadsched.core.errors import NumericDegeneracyError
from loadsched.core.request import Request
from loadsched.core.usage import UsedPower


@total_ordering
@dataclass(eq=False)
class Run:
    """One concrete occurrence of a request.

    Runs are ordered by ``start_at``, then by ``triggered`` (not triggered first)
    and finally by ``name``. Equality compares the same three fields; the request
    itself is not compared.

    Attributes:
        name (str): Name of the request this run belongs to.
        request (Request): The request, owned by the :class:`Requests` mapping.
        start_at (float): Start time (h).
        end_at (float): ``start_at`` plus the durations of all consumption segments (h).
        triggered (bool): Whether another request's trigger started this run.
        consumption (Tuple[UsedPower, ...]): Sampled usage segments.
    """

    name: str
    request: Request = field(repr=False)
    start_at: float
    end_at: float
    triggered: bool
    consumption: Tuple[UsedPower, ...] = ()

    @classmethod
    def create(cls, name: str, request: Request, start_at: float, triggered: bool, rng=None) -> "Run":
        """Sample the consumption of ``request`` and build a run starting at ``start_at``.

        Raises:
            NumericDegeneracyError: If ``start_at`` is NaN.
        """
        if math.isnan(start_at):
            raise NumericDegeneracyError(f"Run of '{name}' would start at NaN")
        consumption = tuple(request.generate_consumption(rng))
        duration = sum(used.duration for used in consumption)
        return cls(
            name=name,
            request=request,
            start_at=start_at,
            end_at=start_at + duration,
            triggered=triggered,
            consumption=consumption,
        )

    @property
    def sort_key(self) -> Tuple[float, bool, str]:
        if math.isnan(self.start_at):
            raise NumericDegeneracyError(f"Run of '{self.name}' has a NaN start time")
        return self.start_at, self.triggered, self.name

    def __eq__(self, other):
        if not isinstance(other, Run):
            return NotImplemented
        return self.sort_key == other.sort_key

    def __lt__(self, other):
        if not isinstance(other, Run):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self):
        return hash(self.sort_key)
