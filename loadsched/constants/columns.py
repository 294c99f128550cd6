class Columns:
    """Column names of the tabular run output."""

    DATETIME = "datetime"  # Timestamp of the segment start
    DURATION = "duration[h]"  # Duration of the segment (h)
    END = "end_at[h]"  # End of the run (h since window origin)
    NAME = "name"  # Name of the request
    POWER = "power[W]"  # Power drawn by the segment (W)
    REQUESTS = "requests"  # Number of requests of a site
    RUNS = "runs"  # Number of runs
    RUNS_TRIGGERED = f"{RUNS}_triggered"  # Number of runs started by a trigger
    SEGMENT = "segment"  # Position of the segment within its run
    SEGMENT_START = "segment_start[h]"  # Start of the segment (h)
    SOURCE = "source"  # Line the power is taken from
    START = "start_at[h]"  # Start of the run (h since window origin)
    TRIGGERED = "triggered"  # Whether the run was started by a trigger
