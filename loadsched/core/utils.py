from itertools import dropwhile, takewhile
from typing import Iterable, Iterator, Optional, Tuple

import pandas as pd

from loadsched.constants import Columns as C
from loadsched.core.run import Run

OUTPUT_COLUMNS = [
    C.NAME,
    C.START,
    C.END,
    C.TRIGGERED,
    C.SEGMENT,
    C.SEGMENT_START,
    C.POWER,
    C.DURATION,
    C.SOURCE,
]


def window_from_index(index: pd.DatetimeIndex) -> Tuple[float, float]:
    """Time window covered by reference data, in hours since midnight of its first day.

    Minutes are the finest resolution; seconds are dropped.
    """
    if len(index) == 0:
        raise ValueError("Cannot derive a time window from an empty index.")
    midnight = index[0].normalize()
    start = ((index[0] - midnight) // pd.Timedelta(minutes=1)) / 60
    stop = ((index[-1] - midnight) // pd.Timedelta(minutes=1)) / 60
    return start, stop


def runs_between(runs: Iterable[Run], start: float, stop: float) -> Iterator[Run]:
    """Runs with ``start <= start_at <= stop`` from a stream ordered by ``start_at``.

    Stops consuming ``runs`` at the first run starting after ``stop``, which makes it
    safe to use on an endless scheduler.
    """
    if start > stop:
        raise ValueError(f"Window start {start} is after its end {stop}.")
    inside = dropwhile(lambda run: run.start_at < start, runs)
    return takewhile(lambda run: run.start_at <= stop, inside)


def runs_to_frame(runs: Iterable[Run], origin: Optional[pd.Timestamp] = None) -> pd.DataFrame:
    """
    One row per consumption segment of the given runs.

    Segments of a run follow each other, so a segment starts when the previous one ends.
    A run without segments still gets one row, with the segment columns empty and its
    segment start at the run start.

    Args:
        runs (Iterable[Run]): Finite collection of runs.
        origin (pd.Timestamp, optional): Wall-clock time of hour 0. If given, a
            ``datetime`` column with the segment start timestamps is added.

    Returns:
        pd.DataFrame: Columns from :data:`OUTPUT_COLUMNS` (plus ``datetime``).
    """
    rows = []
    for run in runs:
        if not run.consumption:
            # Run without usage segments: one row, segment fields left empty
            rows.append(
                {
                    C.NAME: run.name,
                    C.START: run.start_at,
                    C.END: run.end_at,
                    C.TRIGGERED: run.triggered,
                    C.SEGMENT_START: run.start_at,
                }
            )
            continue
        segment_start = run.start_at
        for position, used in enumerate(run.consumption):
            rows.append(
                {
                    C.NAME: run.name,
                    C.START: run.start_at,
                    C.END: run.end_at,
                    C.TRIGGERED: run.triggered,
                    C.SEGMENT: position,
                    C.SEGMENT_START: segment_start,
                    C.POWER: used.power,
                    C.DURATION: used.duration,
                    C.SOURCE: used.source.value,
                }
            )
            segment_start += used.duration

    df = pd.DataFrame(rows, columns=OUTPUT_COLUMNS)
    if origin is not None:
        df[C.DATETIME] = pd.Timestamp(origin) + pd.to_timedelta(df[C.SEGMENT_START], unit="h")
    return df
