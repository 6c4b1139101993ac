"""
Tests for skewprobe.reporter — Statistic/Message lines and exit codes.
"""

import io

import pytest

from skewprobe.outcome import Failure, QueryIdentity, Success
from skewprobe.reporter import exit_code_for, format_outcome, report


def test_format_outcome_success():
    """Success prints the skew and the identity that was queried."""
    outcome = Success(3, QueryIdentity.by_address("10.0.0.5"))
    assert format_outcome(outcome) == (
        "Statistic: 3",
        "Message: Queried 10.0.0.5 and determined skew: 3",
    )


def test_format_outcome_failure_has_empty_statistic():
    """Failure prints an empty statistic and the stage message."""
    outcome = Failure(20, "result does not match expected format")
    assert format_outcome(outcome) == (
        "Statistic: ",
        "Message: result does not match expected format",
    )


def test_format_outcome_rejects_other_types():
    """Anything that is not an outcome is a TypeError."""
    with pytest.raises(TypeError):
        format_outcome("oops")


def test_exit_code_for():
    """Success exits 0, failures exit with their code."""
    assert exit_code_for(Success(0, QueryIdentity.by_hostname("node01"))) == 0
    assert exit_code_for(Failure(40, "exception running query against address")) == 40


def test_report_writes_two_lines_and_exits():
    """report writes exactly two lines then exits with the outcome code."""
    stream = io.StringIO()
    with pytest.raises(SystemExit) as excinfo:
        report(Failure(30, "exception running query against hostname"), stream)

    assert excinfo.value.code == 30
    assert stream.getvalue().splitlines() == [
        "Statistic: ",
        "Message: exception running query against hostname",
    ]


def test_report_defaults_to_stdout(capsys):
    """Without a stream, report writes to stdout."""
    with pytest.raises(SystemExit) as excinfo:
        report(Success(7, QueryIdentity.by_hostname("node01.example.com")))

    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert out == (
        "Statistic: 7\n"
        "Message: Queried node01.example.com and determined skew: 7\n"
    )


def test_success_rejects_negative_or_fractional_skew():
    """Success only holds non-negative integers."""
    identity = QueryIdentity.by_address("10.0.0.5")
    with pytest.raises(ValueError):
        Success(-1, identity)
    with pytest.raises(ValueError):
        Success(1.5, identity)


def test_failure_rejects_unknown_code():
    """Failure codes are limited to the documented set."""
    with pytest.raises(ValueError):
        Failure(99, "unknown")
