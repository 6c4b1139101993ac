"""
Clock Skew Probe - command-line entry point.

Measures how far a monitored node's clock is from an NTP reference, as seen
from this poller, and reports it as:

    Statistic: <seconds>
    Message: <text>

Exit code 0 on success; 10-70 identify the stage that failed.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from skewprobe.config import apply_target_overrides, load_config, validate_config
from skewprobe.pipeline import run_pipeline
from skewprobe.reporter import report
from skewprobe.version import VERSION


def setup_logging(config: dict) -> None:
    level_str = config.get("logging", {}).get("level", "WARNING").upper()
    level = getattr(logging, level_str, logging.WARNING)

    # stdout carries the Statistic/Message lines only
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    log_file = config.get("logging", {}).get("file", "")
    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        except OSError as exc:
            logging.getLogger(__name__).warning(
                "Could not open log file %s: %s. Logging to stderr only.",
                log_file,
                exc,
            )

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
        handlers=handlers,
        force=True,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report clock skew between a node and an NTP reference."
    )
    parser.add_argument("ntp_server", help="NTP server hostname or address")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--address", help="Node IP address")
    parser.add_argument("--hostname", help="Node DNS hostname")
    parser.add_argument("--username", help="Credential user name for the address query")
    parser.add_argument("--password", help="Credential password for the address query")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    config = load_config(args.config)
    config = apply_target_overrides(
        config,
        address=args.address,
        hostname=args.hostname,
        username=args.username,
        password=args.password,
    )
    setup_logging(config)

    logger = logging.getLogger(__name__)
    for error in validate_config(config):
        logger.warning("%s", error)

    logger.debug("Checking skew against NTP server %s", args.ntp_server)
    report(run_pipeline(args.ntp_server, config))


if __name__ == "__main__":
    main()
