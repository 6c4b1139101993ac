"""
NTP skew probe - measure the poller's offset from an NTP reference.

Runs the time-sync monitor utility once against the NTP server and pulls the
offset out of its text output. With ``ntp.method: ntplib`` the server is asked
directly and the answer is rendered in the same text form, so one parser
covers both sources.
"""

from __future__ import annotations

import logging
import re
import subprocess

from skewprobe.config import NTP_METHOD_NTPLIB
from skewprobe.constants import (
    EXIT_NTP_FORMAT_ERROR,
    EXIT_NTP_QUERY_ERROR,
    MSG_NTP_FORMAT_ERROR,
    MSG_NTP_QUERY_ERROR,
    NTP_OFFSET_MARKER,
)
from skewprobe.outcome import Failure, SkewProbeResult

try:
    import ntplib
except ImportError:
    ntplib = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

# Value runs up to the unit suffix: "NTP: -1.234s" -> "-1.234"
_OFFSET_RE = re.compile(re.escape(NTP_OFFSET_MARKER) + r"([^s]+)")


def build_ntp_command(template: list[str] | str, server: str) -> list[str]:
    """
    Substitute ``{server}`` into each argument of the command template.

    A template given as one string is split on whitespace, as the
    SKEWPROBE_NTP_COMMAND variable is.
    """
    if isinstance(template, str):
        template = template.split()
    return [str(arg).replace("{server}", server) for arg in template]


def run_ntp_monitor(command: list[str]) -> str:
    """
    Run the NTP monitor utility and return its combined stdout/stderr.

    A non-zero exit status is not an error here: the utility reports
    per-server problems in its text, which the parser then rejects.
    Raises OSError or subprocess.SubprocessError if it cannot be run,
    ValueError for an empty command.
    """
    if not command:
        raise ValueError("empty NTP monitor command")
    logger.debug("Running NTP monitor: %s", " ".join(command))
    result = subprocess.run(
        command,
        capture_output=True,
        text=True,
        errors="replace",
        check=False,
    )
    if result.returncode != 0:
        logger.debug("NTP monitor exited with status %d", result.returncode)
    return (result.stdout or "") + (result.stderr or "")


def query_ntplib_offset(server: str, version: int = 3) -> str:
    """
    Query the NTP server with ntplib and render the offset as monitor text.

    Positive offset means the NTP reference is ahead of the poller.
    """
    if ntplib is None:
        raise RuntimeError("ntplib not installed")
    client = ntplib.NTPClient()
    response = client.request(server, version=version)
    return (
        f"{server}\n"
        f"    {NTP_OFFSET_MARKER}{response.offset:+.7f}s offset from local clock\n"
    )


def parse_ntp_offset(text: str) -> str | None:
    """
    Extract the offset following ``NTP: `` in the utility output.

    Returns the offset as text (sign kept, unit suffix dropped), or None if
    the marker is absent.
    """
    match = _OFFSET_RE.search(text or "")
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def probe_ntp_skew(server: str, ntp_config: dict) -> SkewProbeResult | Failure:
    """Measure poller-to-NTP offset for ``server``; failures are codes 10 and 20."""
    method = ntp_config.get("method")
    try:
        if method == NTP_METHOD_NTPLIB:
            output = query_ntplib_offset(
                server, version=int(ntp_config.get("ntplib_version", 3))
            )
        else:
            command = build_ntp_command(ntp_config.get("command") or [], server)
            output = run_ntp_monitor(command)
    except Exception as exc:
        logger.error("Could not query NTP server %s: %s", server, exc)
        return Failure(EXIT_NTP_QUERY_ERROR, MSG_NTP_QUERY_ERROR)

    offset = parse_ntp_offset(output)
    if offset is None:
        logger.warning(
            "NTP output for %s has no %r marker: %r", server, NTP_OFFSET_MARKER, output
        )
        return Failure(EXIT_NTP_FORMAT_ERROR, MSG_NTP_FORMAT_ERROR)

    logger.debug("NTP offset from %s: %s s", server, offset)
    return SkewProbeResult(offset)
