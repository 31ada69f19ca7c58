import logging

import pytest

from rollscan.utils.timing import format_duration, timed_operation


@pytest.mark.parametrize("seconds,expected", [
    (0.0004, "0.4ms"),
    (0.25, "250.0ms"),
    (2.5, "2.50s"),
    (125, "2m 5.0s"),
    (3725, "62m 5.0s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_timed_operation_records_success():
    with timed_operation("parse") as timing:
        sum(range(1000))

    assert timing.success
    assert timing.duration_sec > 0


def test_timed_operation_records_failure_and_reraises():
    logger = logging.getLogger("rollscan.test.timing")

    with pytest.raises(ValueError):
        with timed_operation("recognize", logger) as timing:
            raise ValueError("bad page")

    assert not timing.success
    assert timing.duration_sec > 0
