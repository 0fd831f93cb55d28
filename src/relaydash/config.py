"""Command-line configuration for relaydash."""

import argparse
from dataclasses import dataclass

from relaydash.monitor import STATS_PATH

DEFAULT_BASE_URL = "http://localhost:8080/"


@dataclass(slots=True)
class DashboardConfig:
    """Settings for one dashboard session."""

    base_url: str = DEFAULT_BASE_URL
    stats_path: str = STATS_PATH
    poll_rate: float = 2.0  # Seconds
    timeout: float = 5.0  # Seconds
    accumulate: bool = False
    log_file: str | None = None
    log_level: str = "INFO"


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relaydash",
        description="Live terminal dashboard for relay service statistics.",
    )
    parser.add_argument(
        "base_url",
        nargs="?",
        default=DEFAULT_BASE_URL,
        help=f"URL the stats resource is relative to (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--path",
        dest="stats_path",
        default=STATS_PATH,
        help=f"stats resource path relative to the base URL (default: {STATS_PATH})",
    )
    parser.add_argument(
        "-i",
        "--interval",
        dest="poll_rate",
        type=_positive_float,
        default=2.0,
        help="seconds between polls (default: 2.0)",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=5.0,
        help="request timeout in seconds (default: 5.0)",
    )
    parser.add_argument(
        "--accumulate",
        action="store_true",
        help="append each snapshot below the previous ones instead of replacing them",
    )
    parser.add_argument("--log-file", help="write log messages to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level used with --log-file (default: INFO)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> DashboardConfig:
    """Parse command-line arguments into a DashboardConfig."""
    args = build_parser().parse_args(argv)
    return DashboardConfig(
        base_url=args.base_url,
        stats_path=args.stats_path,
        poll_rate=args.poll_rate,
        timeout=args.timeout,
        accumulate=args.accumulate,
        log_file=args.log_file,
        log_level=args.log_level,
    )
