"""
Loading of consumption requests from site definitions.

A site definition is a YAML or JSON file whose ``consumption`` section maps
request names to requests::

    consumption:
      boiler:
        schedule:
          interval-hours: {from: 4, to: 6}
          restrict-hours: {from: 6, to: 22}
          delay-up-to: 1
        usage:
          - power: {from: 2000, to: 2000}
            duration: {from: 1, to: 1}
            source: line-1
        trigger:
          - other: pump

Every value is validated while loading. The first invalid value aborts the
whole load with a :class:`ConfigValidationError` naming its dotted path.
Optional sections (``schedule``, ``delay``) may be null. Keys with a default
(``restrict-hours``, ``delay-up-to``, ``trigger``) must be left out to get it;
an explicit null is rejected.
"""

import json
import logging
import os
from typing import Any, Dict, Mapping, Optional, Type

import yaml

from loadsched.constants import VALID_SOURCES, Keys, PowerSource
from loadsched.core.errors import ConfigValidationError
from loadsched.core.ranges import WHOLE_DAY, BasicRange, DayHours, Range, RangePolicy
from loadsched.core.request import Delay, Request, Schedule, Trigger
from loadsched.core.scheduler import Requests
from loadsched.core.usage import Usage

logger = logging.getLogger(__name__)

RANGE_KEYS = {Keys.FROM, Keys.TO}
SCHEDULE_KEYS = {Keys.INTERVAL_HOURS, Keys.RESTRICT_HOURS, Keys.DELAY_UP_TO}
USAGE_KEYS = {Keys.POWER, Keys.DURATION, Keys.SOURCE}
TRIGGER_KEYS = {Keys.OTHER}
DELAY_KEYS = {Keys.MAX_HOURS, Keys.MAX_INSTANCES}
REQUEST_KEYS = {Keys.SCHEDULE, Keys.USAGE, Keys.TRIGGER, Keys.DELAY}


def _fail(message: str, field: str, rule: str, value: Any = None):
    logger.error(f"{field}: {message}")
    raise ConfigValidationError(message, field=field, rule=rule, value=value)


def _expect_mapping(raw: Any, field: str) -> Mapping:
    if not isinstance(raw, Mapping):
        _fail(f"expected a mapping, got '{type(raw).__name__}'", field, "type", raw)
    return raw


def _expect_list(raw: Any, field: str) -> list:
    if not isinstance(raw, list):
        _fail(f"expected a list, got '{type(raw).__name__}'", field, "type", raw)
    return raw


def _require(raw: Mapping, key: str, field: str) -> Any:
    if key not in raw:
        _fail(f"missing required key '{key}'", f"{field}.{key}", "required")
    return raw[key]


def _warn_unknown(raw: Mapping, known: set, field: str) -> None:
    unknown = sorted(str(k) for k in raw if k not in known)
    if unknown:
        logger.warning(f"{field}: ignoring unknown keys {unknown}")


def parse_range(raw: Any, policy: Type[RangePolicy] = BasicRange, field: str = "range") -> Range:
    """Build a :class:`Range` from ``{from, to}`` and validate it with ``policy``."""
    raw = _expect_mapping(raw, field)
    _warn_unknown(raw, RANGE_KEYS, field)
    low = _require(raw, Keys.FROM, field)
    high = _require(raw, Keys.TO, field)
    try:
        return Range(low, high, policy)
    except ConfigValidationError as exc:
        located = exc.located(field)
        logger.error(str(located))
        raise located from None


def parse_source(raw: Any, field: str = Keys.SOURCE) -> PowerSource:
    if raw not in VALID_SOURCES:
        _fail(f"unknown power source '{raw}', expected one of {sorted(VALID_SOURCES)}", field, "unknown-source", raw)
    return PowerSource(raw)


def parse_usage(raw: Any, field: str = Keys.USAGE) -> Usage:
    raw = _expect_mapping(raw, field)
    _warn_unknown(raw, USAGE_KEYS, field)
    return Usage(
        power=parse_range(_require(raw, Keys.POWER, field), BasicRange, f"{field}.{Keys.POWER}"),
        duration=parse_range(_require(raw, Keys.DURATION, field), BasicRange, f"{field}.{Keys.DURATION}"),
        source=parse_source(_require(raw, Keys.SOURCE, field), f"{field}.{Keys.SOURCE}"),
    )


def parse_schedule(raw: Any, field: str = Keys.SCHEDULE) -> Schedule:
    raw = _expect_mapping(raw, field)
    _warn_unknown(raw, SCHEDULE_KEYS, field)
    interval = parse_range(_require(raw, Keys.INTERVAL_HOURS, field), BasicRange, f"{field}.{Keys.INTERVAL_HOURS}")
    if Keys.RESTRICT_HOURS not in raw:
        restrict_hours = WHOLE_DAY
    else:
        restrict_hours = parse_range(raw[Keys.RESTRICT_HOURS], DayHours, f"{field}.{Keys.RESTRICT_HOURS}")
    delay_up_to = raw.get(Keys.DELAY_UP_TO, 0.0)
    try:
        return Schedule(interval=interval, restrict_hours=restrict_hours, delay_up_to=delay_up_to)
    except ConfigValidationError as exc:
        located = exc.located(field)
        logger.error(str(located))
        raise located from None


def parse_trigger(raw: Any, field: str = Keys.TRIGGER) -> Trigger:
    raw = _expect_mapping(raw, field)
    _warn_unknown(raw, TRIGGER_KEYS, field)
    other = _require(raw, Keys.OTHER, field)
    if not isinstance(other, str):
        _fail(f"expected a request name, got '{type(other).__name__}'", f"{field}.{Keys.OTHER}", "type", other)
    return Trigger(other=other)


def parse_delay(raw: Any, field: str = Keys.DELAY) -> Delay:
    raw = _expect_mapping(raw, field)
    _warn_unknown(raw, DELAY_KEYS, field)
    values = {}
    for key in (Keys.MAX_HOURS, Keys.MAX_INSTANCES):
        value = _require(raw, key, field)
        if isinstance(value, bool) or not isinstance(value, int):
            _fail(f"expected an integer, got '{type(value).__name__}'", f"{field}.{key}", "type", value)
        if value < 0:
            _fail(f"expected a non-negative number, got {value}", f"{field}.{key}", "non-negative", value)
        values[key] = value
    return Delay(max_hours=values[Keys.MAX_HOURS], max_instances=values[Keys.MAX_INSTANCES])


def parse_request(raw: Any, name: str) -> Request:
    """Build a :class:`Request` from its definition; ``name`` prefixes error paths."""
    raw = _expect_mapping(raw, name)
    _warn_unknown(raw, REQUEST_KEYS, name)

    schedule = raw.get(Keys.SCHEDULE)
    if schedule is not None:
        schedule = parse_schedule(schedule, f"{name}.{Keys.SCHEDULE}")

    usage_list = _expect_list(_require(raw, Keys.USAGE, name), f"{name}.{Keys.USAGE}")
    usage = [parse_usage(item, f"{name}.{Keys.USAGE}.{i}") for i, item in enumerate(usage_list)]

    trigger_list = _expect_list(raw.get(Keys.TRIGGER, []), f"{name}.{Keys.TRIGGER}")
    trigger = [parse_trigger(item, f"{name}.{Keys.TRIGGER}.{i}") for i, item in enumerate(trigger_list)]

    delay = raw.get(Keys.DELAY)
    if delay is not None:
        delay = parse_delay(delay, f"{name}.{Keys.DELAY}")

    return Request(schedule=schedule, usage=tuple(usage), trigger=tuple(trigger), delay=delay)


def parse_requests(raw: Optional[Mapping]) -> Requests:
    """Build :class:`Requests` from a mapping of request names to definitions.

    Triggers pointing at unknown requests and trigger cycles are only reported
    as warnings here; the scheduler deals with them when they fire.
    """
    if raw is None:
        return Requests()
    raw = _expect_mapping(raw, Keys.CONSUMPTION)

    requests: Dict[str, Request] = {}
    for name, definition in raw.items():
        if not isinstance(name, str):
            _fail(f"request names must be strings, got '{type(name).__name__}'", str(name), "type", name)
        requests[name] = parse_request(definition, name)

    result = Requests(requests)
    for source, target in result.dangling_triggers():
        logger.warning(f"Request '{source}' triggers unknown request '{target}'")
    for name in result.trigger_cycles():
        logger.warning(f"Request '{name}' triggers itself through a trigger cycle")
    logger.debug(f"Loaded {len(result)} requests, {len(result.scheduled())} with a schedule")
    return result


def load_site(path: str) -> Dict[str, Any]:
    """Read a site definition from a YAML or JSON file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file type is not supported or the top level is not a mapping.
    """
    _, ext = os.path.splitext(path)
    ext = ext.lower()
    with open(path, "r", encoding="utf-8") as f:
        if ext in (".yaml", ".yml"):
            site = yaml.safe_load(f)
        elif ext == ".json":
            site = json.load(f)
        else:
            raise ValueError(f"Unsupported site definition format '{ext}' ({path}).")

    if site is None:
        site = {}
    if not isinstance(site, dict):
        raise ValueError(f"Site definition {path} must be a mapping, got '{type(site).__name__}'.")
    logger.info(f"Loaded site definition {path}")
    return site


def load_requests(path: str) -> Requests:
    """Load the ``consumption`` section of a site definition file."""
    site = load_site(path)
    return parse_requests(site.get(Keys.CONSUMPTION))
