"""
Tests for skewprobe.skew — elapsed time and final skew arithmetic.
"""

from datetime import datetime, timezone

import pytest

from skewprobe.outcome import (
    Failure,
    LocalClockSample,
    RemoteClockSample,
    SkewProbeResult,
)
from skewprobe.skew import calculate_skew, elapsed_seconds, sample_to_datetime


def test_sample_to_datetime_builds_utc_instant(remote_sample):
    """sample_to_datetime returns an aware UTC datetime."""
    assert sample_to_datetime(remote_sample) == datetime(
        2024, 1, 1, 0, 0, 10, tzinfo=timezone.utc
    )


def test_sample_to_datetime_none_for_missing_fields():
    """A sample with a missing field yields None."""
    assert sample_to_datetime(RemoteClockSample(2024, 1, None, 0, 0, 0)) is None
    assert sample_to_datetime(None) is None


def test_sample_to_datetime_raises_on_invalid_date():
    """Invalid field combinations raise ValueError."""
    with pytest.raises(ValueError):
        sample_to_datetime(RemoteClockSample(2024, 13, 1, 0, 0, 0))


def test_elapsed_seconds_is_node_minus_poller(remote_sample, local_sample):
    """elapsed_seconds is positive when the node is ahead."""
    assert elapsed_seconds(remote_sample, local_sample) == 5.0
    assert elapsed_seconds(
        RemoteClockSample(2024, 1, 1, 0, 0, 0), local_sample
    ) == -5.0


def test_elapsed_seconds_crosses_day_boundary():
    """Spans across midnight are computed on full instants."""
    remote = RemoteClockSample(2024, 1, 1, 0, 0, 1)
    local = LocalClockSample(2023, 12, 31, 23, 59, 59)
    assert elapsed_seconds(remote, local) == 2.0


def test_calculate_skew_subtracts_ntp_offset(remote_sample, local_sample):
    """|5 - 2| = 3, a leading '+' is harmless."""
    assert calculate_skew(remote_sample, local_sample, SkewProbeResult("+2")) == 3


def test_calculate_skew_is_absolute(remote_sample, local_sample):
    """Negative differences are reported as magnitudes."""
    assert calculate_skew(remote_sample, local_sample, SkewProbeResult("9")) == 4


def test_calculate_skew_truncates_toward_zero_after_subtraction(
    remote_sample, local_sample
):
    """5 - 1.7 = 3.3 -> 3; 5 - 7.9 = -2.9 -> -2 -> 2."""
    assert calculate_skew(remote_sample, local_sample, SkewProbeResult("1.7")) == 3
    assert calculate_skew(remote_sample, local_sample, SkewProbeResult("7.9")) == 2
    assert calculate_skew(remote_sample, local_sample, SkewProbeResult("-0.0012345")) == 5


def test_calculate_skew_null_span_is_code_70(local_sample):
    """Missing remote field gives failure 70."""
    remote = RemoteClockSample(2024, 1, 1, 0, 0, None)
    result = calculate_skew(remote, local_sample, SkewProbeResult("0"))
    assert result == Failure(70, "null result while comparing poller and node times")


def test_calculate_skew_missing_local_is_code_70(remote_sample):
    """Missing poller sample gives failure 70."""
    result = calculate_skew(remote_sample, None, SkewProbeResult("0"))
    assert result.code == 70


def test_calculate_skew_invalid_date_is_code_60(local_sample):
    """An invalid node date gives failure 60."""
    remote = RemoteClockSample(2024, 2, 30, 0, 0, 0)
    result = calculate_skew(remote, local_sample, SkewProbeResult("0"))
    assert result == Failure(60, "exception getting time span between poller and node")


def test_calculate_skew_non_numeric_offset_is_code_60(remote_sample, local_sample):
    """Offset text that is not a number gives failure 60."""
    result = calculate_skew(
        remote_sample, local_sample, SkewProbeResult("error ERROR_TIMEOUT - no respon")
    )
    assert result.code == 60


@pytest.mark.parametrize("offset", ["nan", "inf", "-inf"])
def test_calculate_skew_non_finite_offset_is_code_60(remote_sample, local_sample, offset):
    """Non-finite offsets cannot be truncated and give failure 60."""
    result = calculate_skew(remote_sample, local_sample, SkewProbeResult(offset))
    assert result.code == 60
