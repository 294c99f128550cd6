class Keys:
    """Keys of site definitions (spelled as in the files) and of generator results.
    Sorted alphabetically for easy reference.
    """

    CONSUMPTION = "consumption"  # Top-level section holding the requests
    DELAY = "delay"  # Delay limits of a request (not evaluated)
    DELAY_UP_TO = "delay-up-to"  # Max. random delay after a restricted-hours push (h)
    DURATION = "duration"  # Duration range of a usage segment (h)
    ERROR = "error"  # Summary key for a site that failed
    FROM = "from"  # Lower bound of a range
    INTERVAL_HOURS = "interval-hours"  # Pause between two runs (h)
    MAX_HOURS = "max-hours"
    MAX_INSTANCES = "max-instances"
    OTHER = "other"  # Target of a trigger
    POWER = "power"  # Power range of a usage segment (W)
    RESTRICT_HOURS = "restrict-hours"  # Hours of the day a run may start in
    RUNS = "runs"  # Result key for the run table of a site
    SCHEDULE = "schedule"
    SOURCE = "source"  # Line the power is taken from
    SUMMARY = "summary"  # Result key for summary metrics
    TO = "to"  # Upper bound of a range
    TRIGGER = "trigger"
    USAGE = "usage"


HOURS_PER_DAY = 24.0
