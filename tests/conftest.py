"""
Pytest configuration for Clock Skew Probe tests.

Provides a default config and clock samples; no test reaches the network,
runs w32tm, or needs a real WMI client.
"""

import copy

import pytest

from skewprobe.config import DEFAULT_CONFIG
from skewprobe.outcome import LocalClockSample, RemoteClockSample


@pytest.fixture
def config():
    """Default config with a target filled in."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    cfg["target"].update(
        {
            "address": "10.0.0.5",
            "hostname": "node01.example.com",
            "username": "EXAMPLE\\monitor",
            "password": "s3cret",
        }
    )
    return cfg


@pytest.fixture
def remote_sample():
    return RemoteClockSample(2024, 1, 1, 0, 0, 10)


@pytest.fixture
def local_sample():
    return LocalClockSample(2024, 1, 1, 0, 0, 5)
