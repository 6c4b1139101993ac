"""
Clock skew pipeline driver.

Stages run strictly in order: NTP probe, node clock, poller clock, skew.
The first stage to return a ``Failure`` ends the run and that failure is
the outcome. Nothing is retried.
"""

from __future__ import annotations

import logging

from skewprobe.local_clock import read_local_clock
from skewprobe.ntp import probe_ntp_skew
from skewprobe.outcome import Failure, SkewOutcome, Success
from skewprobe.remote import fetch_remote_clock
from skewprobe.skew import calculate_skew

logger = logging.getLogger(__name__)


def run_pipeline(ntp_server: str, config: dict) -> SkewOutcome:
    """Run one skew check against the configured target and return its outcome."""
    probe = probe_ntp_skew(ntp_server, config.get("ntp", {}))
    if isinstance(probe, Failure):
        return probe

    reading = fetch_remote_clock(config.get("target", {}), config.get("remote", {}))
    if isinstance(reading, Failure):
        return reading

    local = read_local_clock()
    if isinstance(local, Failure):
        return local

    skew = calculate_skew(reading.sample, local, probe)
    if isinstance(skew, Failure):
        return skew

    logger.info("Skew for %s is %d s", reading.identity, skew)
    return Success(skew, reading.identity)
