"""
Clock Skew Probe - Result types passed between pipeline stages.

Each stage returns either its value or a ``Failure``; the driver stops at
the first ``Failure`` and hands it to the reporter unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from skewprobe.constants import FAILURE_CODES

BY_ADDRESS = "address"
BY_HOSTNAME = "hostname"


@dataclass(frozen=True)
class SkewProbeResult:
    """Poller offset from the NTP reference, kept as the text the utility printed."""

    ntp_offset_seconds: str


@dataclass(frozen=True)
class RemoteClockSample:
    year: Optional[int]
    month: Optional[int]
    day: Optional[int]
    hour: Optional[int]
    minute: Optional[int]
    second: Optional[int]

    def fields(self) -> tuple:
        return (self.year, self.month, self.day, self.hour, self.minute, self.second)


@dataclass(frozen=True)
class LocalClockSample:
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    def fields(self) -> tuple:
        return (self.year, self.month, self.day, self.hour, self.minute, self.second)


@dataclass(frozen=True)
class QueryIdentity:
    """Which network identifier reached the target: address or hostname."""

    kind: str
    value: str

    @classmethod
    def by_address(cls, ip: str) -> "QueryIdentity":
        return cls(BY_ADDRESS, ip)

    @classmethod
    def by_hostname(cls, dns: str) -> "QueryIdentity":
        return cls(BY_HOSTNAME, dns)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RemoteClockReading:
    sample: RemoteClockSample
    identity: QueryIdentity


@dataclass(frozen=True)
class Success:
    skew_seconds: int
    query_identity: QueryIdentity

    def __post_init__(self) -> None:
        if not isinstance(self.skew_seconds, int) or self.skew_seconds < 0:
            raise ValueError(
                f"skew_seconds must be a non-negative integer, got {self.skew_seconds!r}"
            )


@dataclass(frozen=True)
class Failure:
    code: int
    message: str

    def __post_init__(self) -> None:
        if self.code not in FAILURE_CODES:
            raise ValueError(f"Unknown failure code {self.code!r}")


SkewOutcome = Union[Success, Failure]
