import argparse
import logging
from typing import Optional, Sequence

from pydantic import ValidationError

from uptime_probe.config.config import Config, ProbeConfig
from uptime_probe.config.logging_config import setup_logging
from uptime_probe.core.errors import InvalidRequest, UsageError
from uptime_probe.core.request_builder import normalize_url
from uptime_probe.core.runner import run_probe

logger = logging.getLogger(__name__)

# ProbeConfig field -> command line flag, for usage messages
_FLAGS = {
    "method": "--request",
    "body": "--data",
    "interval_seconds": "--interval",
    "total_minutes": "--time",
    "timeout_seconds": "--max-time",
    "url": "URL",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uptime-probe",
        description="Probe a URL at a fixed interval and report the average response time.",
    )
    parser.add_argument(
        "-X", "--request", dest="method", default=Config.DEFAULT_METHOD,
        metavar="METHOD", help="Use http method METHOD",
    )
    parser.add_argument(
        "-d", "--data", default="", metavar="DATA",
        help="Send data DATA in http message body",
    )
    parser.add_argument(
        "-i", "--interval", type=int, default=Config.DEFAULT_INTERVAL,
        metavar="INTERVAL", help="Check url status every INTERVAL seconds",
    )
    parser.add_argument(
        "-t", "--time", type=int, default=Config.DEFAULT_TIME,
        metavar="MINS", help="Run for MINS minutes in total",
    )
    parser.add_argument(
        "-L", "--location", action="store_true", help="Follow redirects",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging",
    )
    parser.add_argument(
        "-m", "--max-time", type=float, default=Config.REQUEST_TIMEOUT,
        metavar="SECS", help="Give up on a single probe after SECS seconds",
    )
    parser.add_argument("url", metavar="URL", help="URL to probe")
    return parser


def config_from_args(args: argparse.Namespace) -> ProbeConfig:
    """
    Turn parsed arguments into a ProbeConfig.

    Raises:
        UsageError: If a value is out of range.
    """
    try:
        return ProbeConfig(
            url=normalize_url(args.url),
            method=args.method,
            body=args.data.encode("utf-8") if args.data else None,
            interval_seconds=args.interval,
            total_minutes=args.time,
            follow_redirects=args.location,
            verbose=args.verbose,
            timeout_seconds=args.max_time,
        )
    except ValidationError as e:
        err = e.errors()[0]
        field = err["loc"][0] if err["loc"] else ""
        raise UsageError(f"{_FLAGS.get(field, field)}: {err['msg']}") from e


def parse_args(argv: Optional[Sequence[str]] = None) -> ProbeConfig:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return config_from_args(args)
    except UsageError as e:
        parser.error(str(e))


def format_average(average: Optional[float]) -> str:
    if average is None:
        return "Average response time: n/a (no successful probes)"
    return f"Average response time: {average:.2f}s"


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = parse_args(argv)
    setup_logging(config.verbose)
    try:
        average = run_probe(config)
    except InvalidRequest as e:
        logger.error(f"Failed to create HTTP request: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted, no average reported")
        return 130
    print(format_average(average))
    return 0
