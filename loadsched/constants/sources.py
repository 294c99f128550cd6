from enum import Enum


class PowerSource(Enum):
    """Where a usage segment takes its power from."""

    LINE_1 = "line-1"
    LINE_2 = "line-2"
    LINE_3 = "line-3"
    RANDOM_LINE = "random-line"  # One of the three lines, picked anew for every run
    ANY_LINE = "any-line"  # Smart selection of one or more lines, done downstream
    ALL_LINES = "all-lines"  # Taken from all three lines equally
    HOT_WATER = "hot-water"  # Not electricity but hot water (equivalent power)


FIXED_LINES = (PowerSource.LINE_1, PowerSource.LINE_2, PowerSource.LINE_3)

VALID_SOURCES = {source.value for source in PowerSource}
