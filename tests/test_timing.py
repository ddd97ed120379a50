from __future__ import annotations

import datetime

import numpy as np
import pytest

from vague.timing import elapsed_seconds


def test_float_time_points() -> None:
    assert elapsed_seconds(2.5, 1.0) == pytest.approx(1.5)
    assert elapsed_seconds(1.0, 2.5) == pytest.approx(-1.5)


def test_datetime_time_points() -> None:
    t0 = datetime.datetime(2024, 1, 1)
    assert elapsed_seconds(t0 + datetime.timedelta(seconds=90), t0) == pytest.approx(90.0)


def test_datetime64_time_points() -> None:
    t0 = np.datetime64('2024-01-01T00:00:00')
    t1 = np.datetime64('2024-01-01T00:00:00.250')
    assert elapsed_seconds(t1, t0) == pytest.approx(0.25)
    assert elapsed_seconds(t0, t1) == pytest.approx(-0.25)
