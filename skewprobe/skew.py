"""
Skew calculator - combine node and NTP offsets into one whole-second skew.

skew = | trunc((node_utc - poller_utc) - ntp_offset) |

The NTP offset is the reference's lead over the poller, so subtracting it
leaves the node's offset from the reference rather than from the poller.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from skewprobe.constants import (
    EXIT_SPAN_ERROR,
    EXIT_SPAN_NULL,
    MSG_SPAN_ERROR,
    MSG_SPAN_NULL,
)
from skewprobe.outcome import (
    Failure,
    LocalClockSample,
    RemoteClockSample,
    SkewProbeResult,
)

logger = logging.getLogger(__name__)


def sample_to_datetime(
    sample: RemoteClockSample | LocalClockSample | None,
) -> datetime | None:
    """
    Build an aware UTC datetime from a clock sample.

    Returns None when the sample or any of its fields is missing; raises
    ValueError when the fields do not form a valid date.
    """
    if sample is None:
        return None
    fields = sample.fields()
    if any(value is None for value in fields):
        return None
    return datetime(*fields, tzinfo=timezone.utc)


def elapsed_seconds(
    remote: RemoteClockSample | None, local: LocalClockSample | None
) -> float | None:
    """Seconds from poller time to node time (positive when the node is ahead)."""
    remote_dt = sample_to_datetime(remote)
    local_dt = sample_to_datetime(local)
    if remote_dt is None or local_dt is None:
        return None
    return (remote_dt - local_dt).total_seconds()


def calculate_skew(
    remote: RemoteClockSample | None,
    local: LocalClockSample | None,
    probe: SkewProbeResult,
) -> int | Failure:
    """
    Return the absolute node-to-NTP skew in whole seconds.

    Truncation toward zero happens after the NTP offset is subtracted.
    Failures: 60 if building the span raises, 70 if it yields nothing.
    """
    try:
        elapsed = elapsed_seconds(remote, local)
        if elapsed is None:
            logger.error(
                "Null time span comparing node sample %s with poller sample %s",
                remote,
                local,
            )
            return Failure(EXIT_SPAN_NULL, MSG_SPAN_NULL)
        ntp_offset = float(probe.ntp_offset_seconds)
        skew = abs(int(elapsed - ntp_offset))
    except (ValueError, TypeError, OverflowError) as exc:
        logger.error("Could not compute time span between poller and node: %s", exc)
        return Failure(EXIT_SPAN_ERROR, MSG_SPAN_ERROR)

    logger.debug(
        "Elapsed %.3f s, NTP offset %s s, skew %d s",
        elapsed,
        probe.ntp_offset_seconds,
        skew,
    )
    return skew
