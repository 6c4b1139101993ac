"""
Remote clock fetcher - read the monitored node's UTC clock over WMI.

The node is first queried by numeric address with the configured
credentials. Windows refuses explicit credentials when that address turns
out to be the local machine; only in that case is the query repeated by
hostname with no credentials. Any other failure of the first attempt ends
the run.
"""

from __future__ import annotations

import logging

from skewprobe.constants import (
    EXIT_ADDRESS_QUERY_ERROR,
    EXIT_HOSTNAME_QUERY_ERROR,
    LOCAL_CREDENTIAL_REJECTION,
    MSG_ADDRESS_QUERY_ERROR,
    MSG_HOSTNAME_QUERY_ERROR,
)
from skewprobe.outcome import (
    Failure,
    QueryIdentity,
    RemoteClockReading,
    RemoteClockSample,
)

try:
    import wmi
except ImportError:
    wmi = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

_SAMPLE_FIELDS = ("Year", "Month", "Day", "Hour", "Minute", "Second")


def _error_text(exc: BaseException) -> str:
    """Flatten an exception, including any wrapped COM error, to one string."""
    parts = [str(exc)]
    com_error = getattr(exc, "com_error", None)
    if com_error is not None:
        parts.append(str(com_error))
        excepinfo = getattr(com_error, "excepinfo", None)
        if excepinfo:
            parts.extend(str(item) for item in excepinfo if item)
    return " ".join(parts)


def is_local_credential_rejection(error_text: str) -> bool:
    """
    Return True if the error says credentials were refused for a local connection.

    WMI exposes no distinct error code for this, so it is a substring match
    on the message and will break if the message wording changes (including
    localised Windows installations).
    """
    return LOCAL_CREDENTIAL_REJECTION.lower() in (error_text or "").lower()


def _to_int(value) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def query_utc_time(
    computer: str,
    username: str | None = None,
    password: str | None = None,
    remote_config: dict | None = None,
) -> RemoteClockSample:
    """
    Query ``Win32_UTCTime`` on ``computer`` and return its wall-clock fields.

    Credentials are only passed when ``username`` is set. Raises whatever the
    WMI layer raises; RuntimeError if the WMI client is not available.
    """
    if wmi is None:
        raise RuntimeError("WMI client not available on this poller")
    remote_config = remote_config or {}
    kwargs = {"computer": computer}
    namespace = remote_config.get("namespace")
    if namespace:
        kwargs["namespace"] = namespace
    if username:
        kwargs["user"] = username
        kwargs["password"] = password or ""

    connection = wmi.WMI(**kwargs)
    wmi_class = remote_config.get("wmi_class") or "Win32_UTCTime"
    instances = getattr(connection, wmi_class)()
    if not instances:
        raise RuntimeError(f"{wmi_class} returned no instances on {computer}")
    utc = instances[0]
    return RemoteClockSample(
        *(_to_int(getattr(utc, field, None)) for field in _SAMPLE_FIELDS)
    )


def fetch_remote_clock(
    target: dict, remote_config: dict | None = None
) -> RemoteClockReading | Failure:
    """
    Read the node's UTC clock, by address first and by hostname as fallback.

    Failures: 40 when the address query fails for any reason other than a
    local credential rejection, 30 when the hostname fallback also fails.
    """
    address = str(target.get("address") or "").strip()
    hostname = str(target.get("hostname") or "").strip()

    # WMI reads an empty computer name as the local machine
    if not address:
        logger.error("No target address configured; not querying the local machine")
        return Failure(EXIT_ADDRESS_QUERY_ERROR, MSG_ADDRESS_QUERY_ERROR)

    try:
        sample = query_utc_time(
            address,
            username=target.get("username"),
            password=target.get("password"),
            remote_config=remote_config,
        )
        return RemoteClockReading(sample, QueryIdentity.by_address(address))
    except Exception as exc:
        error_text = _error_text(exc)
        if not is_local_credential_rejection(error_text):
            logger.error(
                "UTC time query against address %s failed: %s", address, error_text
            )
            return Failure(EXIT_ADDRESS_QUERY_ERROR, MSG_ADDRESS_QUERY_ERROR)
        logger.info(
            "Credentials rejected for local connection to %s; retrying by hostname %s",
            address,
            hostname,
        )

    if not hostname:
        logger.error("No target hostname configured for the local-connection fallback")
        return Failure(EXIT_HOSTNAME_QUERY_ERROR, MSG_HOSTNAME_QUERY_ERROR)

    try:
        sample = query_utc_time(hostname, remote_config=remote_config)
    except Exception as exc:
        logger.error(
            "UTC time query against hostname %s failed: %s", hostname, _error_text(exc)
        )
        return Failure(EXIT_HOSTNAME_QUERY_ERROR, MSG_HOSTNAME_QUERY_ERROR)
    return RemoteClockReading(sample, QueryIdentity.by_hostname(hostname))
