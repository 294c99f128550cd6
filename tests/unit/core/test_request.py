"""
Unit tests for request recurrence.

Most cases use fixed interval ranges so the expected start time is exact.
"""

import numpy as np
import pytest

from loadsched.core.errors import ConfigValidationError, MissingScheduleError
from loadsched.core.ranges import WHOLE_DAY, Range
from loadsched.core.request import Request, Schedule
from tests.fixtures.request_fixtures import make_request, make_usage


def test_next_after_without_schedule_fails_loudly(rng):
    request = make_request()
    with pytest.raises(MissingScheduleError) as exc:
        request.next_after(0.0, rng)
    assert str(exc.value) == "Called next_after on a request without a schedule"
    with pytest.raises(RuntimeError, match="without a schedule"):
        request.next_after(0.0, rng)


def test_schedule_defaults():
    schedule = Schedule(interval=Range.basic(1, 2))
    assert schedule.restrict_hours == WHOLE_DAY
    assert schedule.delay_up_to == 0.0


def test_next_after_whole_day(boiler, rng):
    for end_time in (0.0, 3.5, 100.0):
        start = boiler.next_after(end_time, rng)
        assert end_time + 4 <= start < end_time + 6


def test_start_before_window_is_pushed_to_window_start(rng):
    request = make_request(interval=(1, 1), restrict=(6, 10))
    assert request.next_after(0.0, rng) == pytest.approx(6.0)


def test_start_after_window_is_pushed_to_next_day(rng):
    request = make_request(interval=(1, 1), restrict=(6, 10))
    # 12:00 is past the window, next opportunity is 06:00 the following day
    assert request.next_after(11.0, rng) == pytest.approx(30.0)


def test_start_inside_window_is_kept(rng):
    request = make_request(interval=(1, 1), restrict=(6, 10))
    assert request.next_after(7.0, rng) == pytest.approx(8.0)


def test_window_bounds_are_inclusive(rng):
    request = make_request(interval=(1, 1), restrict=(6, 10))
    assert request.next_after(5.0, rng) == pytest.approx(6.0)
    assert request.next_after(9.0, rng) == pytest.approx(10.0)


def test_part_of_day_uses_euclidean_remainder(rng):
    request = make_request(interval=(1, 1), restrict=(6, 10))
    # -2 h is 22:00 of the previous day, so the start moves to 06:00
    assert request.next_after(-3.0, rng) == pytest.approx(6.0)


def test_delay_after_push_is_capped_by_delay_up_to(rng):
    request = make_request(interval=(1, 1), restrict=(6, 10), delay_up_to=2)
    starts = [request.next_after(0.0, rng) for _ in range(500)]
    assert min(starts) >= 6.0
    assert max(starts) < 8.0
    assert max(starts) > 7.5


def test_delay_after_push_is_capped_by_window_length(rng):
    request = make_request(interval=(1, 1), restrict=(6, 8), delay_up_to=10)
    starts = [request.next_after(0.0, rng) for _ in range(500)]
    assert min(starts) >= 6.0
    assert max(starts) < 8.0


def test_no_delay_without_push(rng):
    request = make_request(interval=(2, 2), restrict=(0, 24), delay_up_to=5)
    assert request.next_after(1.0, rng) == pytest.approx(3.0)


def test_next_after_is_reproducible(boiler):
    a = [boiler.next_after(t, np.random.default_rng(11)) for t in (0.0, 10.0)]
    b = [boiler.next_after(t, np.random.default_rng(11)) for t in (0.0, 10.0)]
    assert a == b


def test_restrict_hours_must_be_day_hours():
    with pytest.raises(ConfigValidationError) as exc:
        Schedule(interval=Range.basic(1, 2), restrict_hours=Range.basic(0, 30))
    assert exc.value.field == "restrict-hours.to"
    assert exc.value.rule == "day-hours"


@pytest.mark.parametrize("delay_up_to", [-1, float("nan"), "2"])
def test_invalid_delay_up_to_is_rejected(delay_up_to):
    with pytest.raises(ConfigValidationError) as exc:
        Schedule(interval=Range.basic(1, 2), delay_up_to=delay_up_to)
    assert exc.value.field == "delay-up-to"


def test_generate_consumption_keeps_segment_order(rng):
    request = Request(usage=[make_usage(power=100, duration=0.5), make_usage(power=200, duration=2)])
    consumption = request.generate_consumption(rng)
    assert [used.power for used in consumption] == [100.0, 200.0]
    assert [used.duration for used in consumption] == [0.5, 2.0]
    assert isinstance(request.usage, tuple)
