"""
Outcome reporter - the two-line stdout protocol read by the monitoring platform.

    Statistic: <integer or empty>
    Message: <text>

followed by process exit with the outcome's code.
"""

from __future__ import annotations

import sys
from typing import NoReturn, TextIO

from skewprobe.constants import (
    EXIT_SUCCESS,
    MESSAGE_PREFIX,
    NULL_STATISTIC,
    STATISTIC_PREFIX,
)
from skewprobe.outcome import Failure, SkewOutcome, Success


def format_outcome(outcome: SkewOutcome) -> tuple[str, str]:
    """Return the ``Statistic:`` and ``Message:`` lines for an outcome."""
    if isinstance(outcome, Success):
        statistic = str(outcome.skew_seconds)
        message = (
            f"Queried {outcome.query_identity} and determined skew: "
            f"{outcome.skew_seconds}"
        )
    elif isinstance(outcome, Failure):
        statistic = NULL_STATISTIC
        message = outcome.message
    else:
        raise TypeError(f"Not a skew outcome: {outcome!r}")
    return STATISTIC_PREFIX + statistic, MESSAGE_PREFIX + message


def exit_code_for(outcome: SkewOutcome) -> int:
    if isinstance(outcome, Failure):
        return outcome.code
    return EXIT_SUCCESS


def report(outcome: SkewOutcome, stream: TextIO | None = None) -> NoReturn:
    """Write the outcome lines to stdout (or ``stream``) and exit with its code."""
    stream = stream or sys.stdout
    for line in format_outcome(outcome):
        stream.write(line + "\n")
    stream.flush()
    sys.exit(exit_code_for(outcome))
