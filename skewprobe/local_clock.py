"""
Local clock reader - the poller's own current time in UTC.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from skewprobe.constants import EXIT_POLLER_TIME_ERROR, MSG_POLLER_TIME_ERROR
from skewprobe.outcome import Failure, LocalClockSample

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def read_local_clock() -> LocalClockSample | Failure:
    """
    Capture the poller's current UTC time, dropping sub-second precision.

    The remote sample carries whole seconds only, so the local one is cut
    to match. Failure is code 50.
    """
    try:
        now = _now_utc().astimezone(timezone.utc)
        return LocalClockSample(
            now.year, now.month, now.day, now.hour, now.minute, now.second
        )
    except Exception as exc:
        logger.error("Could not read poller UTC time: %s", exc)
        return Failure(EXIT_POLLER_TIME_ERROR, MSG_POLLER_TIME_ERROR)
