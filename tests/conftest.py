import numpy as np
import pytest

from loadsched.constants import PowerSource
from loadsched.core.randomness import RandomSource
from loadsched.core.scheduler import Requests
from tests.fixtures.request_fixtures import make_request, make_usage


@pytest.fixture
def rng():
    """Seeded random source for reproducible tests."""
    return RandomSource(np.random.default_rng(42))


@pytest.fixture
def boiler():
    return make_request(interval=(4, 6), restrict=(0, 24))


@pytest.fixture
def boiler_config():
    """Raw site definition of a boiler triggering a circulation pump."""
    return {
        "boiler": {
            "schedule": {
                "interval-hours": {"from": 4, "to": 6},
                "restrict-hours": {"from": 6, "to": 22},
                "delay-up-to": 1,
            },
            "usage": [
                {"power": {"from": 2000, "to": 2000}, "duration": {"from": 1, "to": 1}, "source": "line-1"},
            ],
            "trigger": [{"other": "pump"}],
        },
        "pump": {
            "usage": [
                {"power": {"from": 40, "to": 60}, "duration": {"from": 0.25, "to": 0.5}, "source": "random-line"},
            ],
        },
    }


@pytest.fixture
def household():
    """A few appliances with different schedules, one of them trigger-only."""
    return Requests(
        {
            "boiler": make_request(interval=(4, 6), trigger=["pump"]),
            "fridge": make_request(interval=(0.5, 1.5), usage=[make_usage(power=120, duration=0.3)]),
            "washer": make_request(
                interval=(20, 30),
                restrict=(8, 18),
                delay_up_to=2,
                usage=[make_usage(power=2200, duration=0.5), make_usage(power=300, duration=1.0)],
                trigger=["dryer"],
            ),
            "dryer": make_request(usage=[make_usage(power=1800, duration=1.5, source=PowerSource.RANDOM_LINE)]),
            "pump": make_request(usage=[make_usage(power=50, duration=0.25)]),
        }
    )
