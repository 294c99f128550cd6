"""Centralized constants for consistent use across the tool."""

from loadsched.constants.columns import Columns
from loadsched.constants.general import HOURS_PER_DAY, Keys
from loadsched.constants.sources import FIXED_LINES, VALID_SOURCES, PowerSource

__all__ = [
    "Columns",
    "FIXED_LINES",
    "HOURS_PER_DAY",
    "Keys",
    "PowerSource",
    "VALID_SOURCES",
]
