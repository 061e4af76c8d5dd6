from datetime import date, timedelta

import pytest

from config.settings import TestingConfig
from web.app import create_app


def daily_series(costs, start=date(2024, 3, 1)):
    """Build {date, cost} observations on consecutive days"""
    return [
        {"date": (start + timedelta(days=i)).isoformat(), "cost": cost}
        for i, cost in enumerate(costs)
    ]


@pytest.fixture
def rising_history():
    return daily_series([100, 110, 120])


@pytest.fixture
def flat_history():
    return daily_series([100, 100, 100, 100, 100])


@pytest.fixture
def noisy_history():
    return daily_series([
        820, 760, 905, 870, 790, 940, 880, 915, 1010, 960,
        890, 1045, 980, 1100, 1020, 990, 1130, 1075, 1160, 1090,
    ])


@pytest.fixture
def client():
    app = create_app(TestingConfig)
    return app.test_client()
