"""Command-line interface for the liquidation harness."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .config import load_config
from .logging_setup import configure_logging
from .oracles.mock_oracle import format_price
from .services import Monitor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="liquidation-harness",
        description="Health factor history recorder for lending-protocol liquidation tests",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("check", help="Observe every position once and alert on risk")

    report_parser = sub.add_parser(
        "report", help="Take observations, then send the health factor history"
    )
    report_parser.add_argument(
        "--samples",
        type=int,
        default=1,
        help="Observations to record before reporting (default: 1)",
    )
    report_parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between samples (default: monitor.poll_interval_seconds)",
    )
    report_parser.add_argument(
        "--onchain",
        action="store_true",
        help="Report the history each wrapper contract recorded instead of sampling",
    )

    monitor_parser = sub.add_parser("monitor", help="Continuous observation loop")
    monitor_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Poll interval in seconds (overrides config)",
    )

    sub.add_parser(
        "crash-price",
        help="Show the collateral price after the configured scenario drop",
    )

    return parser


async def _report(monitor: Monitor, samples: int, interval: int) -> None:
    for i in range(samples):
        if i:
            await asyncio.sleep(interval)
        await monitor.check_and_alert()
    print(await monitor.generate_report())


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    monitor = Monitor(config)
    try:
        await monitor.verify_network()
    except Exception as e:
        logger.warning("Could not verify network: %s", e)

    if args.command == "check":
        await monitor.check_and_alert()
    elif args.command == "report" and args.onchain:
        print(await monitor.generate_onchain_report())
    elif args.command == "report":
        interval = (
            config.monitor.poll_interval_seconds
            if args.interval is None
            else args.interval
        )
        await _report(monitor, max(args.samples, 1), interval)
    elif args.command == "monitor":
        await monitor.run_continuous(args.interval)
    elif args.command == "crash-price":
        current, target = await monitor.plan_price_crash()
        print(
            f"Current: {format_price(current)} ({current})\n"
            f"After {config.scenario.price_drop_percentage}% drop: "
            f"{format_price(target)} ({target})"
        )
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
