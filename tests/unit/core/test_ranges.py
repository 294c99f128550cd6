import dataclasses
import math

import numpy as np
import pytest

from loadsched.core.errors import ConfigValidationError, ValidationError
from loadsched.core.ranges import WHOLE_DAY, BasicRange, DayHours, Range


def test_crossed_range_is_rejected():
    with pytest.raises(ConfigValidationError, match="crossed") as exc:
        Range.basic(5, 2)
    assert exc.value.rule == "crossed"


def test_negative_basic_range_is_rejected():
    with pytest.raises(ConfigValidationError) as exc:
        Range.basic(-1, 5)
    assert exc.value.rule == "non-negative"
    assert exc.value.field == "from"
    assert exc.value.value == -1


def test_day_hours_beyond_midnight_is_rejected():
    with pytest.raises(ConfigValidationError) as exc:
        Range.day_hours(10, 25)
    assert exc.value.rule == "day-hours"
    assert exc.value.field == "to"


def test_whole_day_is_accepted():
    r = Range.day_hours(0, 24)
    assert r == WHOLE_DAY
    assert r.policy is DayHours
    assert r.length == 24.0


def test_day_hours_applies_basic_rules_too():
    with pytest.raises(ConfigValidationError) as exc:
        Range.day_hours(-2, 4)
    assert exc.value.rule == "non-negative"


@pytest.mark.parametrize(
    "low, high, rule",
    [(math.nan, 1.0, "finite"), (0.0, math.inf, "finite"), (True, 2, "type"), ("1", 2, "type")],
)
def test_non_numeric_bounds_are_rejected(low, high, rule):
    with pytest.raises(ConfigValidationError) as exc:
        Range(low, high)
    assert exc.value.rule == rule


def test_validation_error_is_a_value_error():
    assert ValidationError is ConfigValidationError
    with pytest.raises(ValueError):
        Range.basic(3, 1)


def test_range_is_immutable():
    r = Range.basic(1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        r.low = 0


def test_bounds_are_stored_as_floats():
    r = Range(1, 3)
    assert isinstance(r.low, float) and isinstance(r.high, float)
    assert r.policy is BasicRange


def test_pick_is_uniform_within_half_open_interval():
    r = Range.basic(2.0, 4.0)
    rng = np.random.default_rng(0)
    values = np.array([r.pick(rng) for _ in range(2000)])
    assert np.all(values >= 2.0)
    assert np.all(values < 4.0)
    assert abs(values.mean() - 3.0) < 0.1


def test_pick_of_degenerate_range_returns_the_bound():
    assert Range.basic(2000, 2000).pick() == 2000.0


def test_pick_is_reproducible_with_seed():
    r = Range.basic(0, 100)
    first = [r.pick(np.random.default_rng(7)) for _ in range(3)]
    second = [r.pick(np.random.default_rng(7)) for _ in range(3)]
    assert first == second
