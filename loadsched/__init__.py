"""loadsched - Household consumption event scheduler."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("loadsched")
except PackageNotFoundError:
    __version__ = "unknown"

from loadsched.core.errors import (
    ConfigValidationError,
    MissingScheduleError,
    NumericDegeneracyError,
    SchedulingError,
    UnknownTriggerTargetError,
    ValidationError,
)
from loadsched.core.generator import Generator
from loadsched.core.loader import load_requests, load_site, parse_requests
from loadsched.core.randomness import RandomSource
from loadsched.core.ranges import Range
from loadsched.core.request import Delay, Request, Schedule, Trigger
from loadsched.core.run import Run
from loadsched.core.scheduler import EventScheduler, Requests
from loadsched.core.usage import Usage, UsedPower
from loadsched.core.utils import runs_between, runs_to_frame, window_from_index

__all__ = [
    "ConfigValidationError",
    "Delay",
    "EventScheduler",
    "Generator",
    "MissingScheduleError",
    "NumericDegeneracyError",
    "RandomSource",
    "Range",
    "Request",
    "Requests",
    "Run",
    "Schedule",
    "SchedulingError",
    "Trigger",
    "UnknownTriggerTargetError",
    "Usage",
    "UsedPower",
    "ValidationError",
    "load_requests",
    "load_site",
    "parse_requests",
    "runs_between",
    "runs_to_frame",
    "window_from_index",
]
