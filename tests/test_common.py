from datetime import timedelta
from unittest import mock

import pytest

from distsims.common import get_random_duration


def test_zero_variance_is_exact():
    assert get_random_duration(1000, 0) == timedelta(milliseconds=1000)


def test_negative_variance_treated_as_zero():
    assert get_random_duration(250, -40) == timedelta(milliseconds=250)


@pytest.mark.parametrize("base, variance", [(1000, 500), (200, 100), (1000, 250)])
def test_duration_stays_within_bounds(base, variance):
    low = timedelta(milliseconds=base - variance)
    high = timedelta(milliseconds=base + variance)
    for _ in range(300):
        value = get_random_duration(base, variance)
        assert low <= value <= high


def test_duration_is_whole_milliseconds():
    for _ in range(100):
        value = get_random_duration(1000, 500)
        assert value.microseconds % 1000 == 0


def test_jitter_extremes_are_reachable():
    with mock.patch("distsims.common.random.randint", side_effect=lambda a, b: a):
        assert get_random_duration(1000, 500) == timedelta(milliseconds=500)
    with mock.patch("distsims.common.random.randint", side_effect=lambda a, b: b):
        assert get_random_duration(1000, 500) == timedelta(milliseconds=1500)


def test_jitter_range_requested_symmetrically():
    with mock.patch("distsims.common.random.randint", return_value=0) as randint:
        result = get_random_duration(200, 100)
    randint.assert_called_once_with(-100, 100)
    assert result == timedelta(milliseconds=200)