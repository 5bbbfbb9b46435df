#!/usr/bin/env python
"""CLI for tracking issue closings and untriaged issues on GitHub."""

import argparse
import asyncio
import datetime as dt
import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator

from triage_tracker.config import TrackerConfig, create_from_config, get_default_config_path, load_config
from triage_tracker.errors import RateLimitedError, TrackerError
from triage_tracker.report import render_date_report, render_range_report, render_triage_report

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["date", "range", "triaged"]
    config: Path
    verbose: bool = False
    date: dt.date | None = None
    start: dt.date | None = None
    end: dt.date | None = None
    labels: list[str] = []
    yardstick: dt.date | None = None

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


async def run(args: CLIArgs, config: TrackerConfig) -> None:
    """Execute one command with the given configuration.

    Args:
        args: Validated CLI arguments.
        config: Configuration loaded from ``args.config``.
    """
    closings, resolver, scan_logger = create_from_config(config)
    logger.debug("Config: %s", args.config)

    if args.command == "date" and args.date is not None:
        print(render_date_report(await closings.for_date(args.date)))
    elif args.command == "range" and args.start is not None and args.end is not None:
        print(render_range_report(await closings.for_range(args.start, args.end)))
    elif args.command == "triaged":
        report = await resolver.resolve(args.labels, yardstick=args.yardstick)
        logger.info(
            "Checked %d issue(s), fetched comments for %d (yardstick %s)",
            report.checked,
            report.comment_fetches,
            report.yardstick,
        )
        print(render_triage_report(report, config.github.repo))

    if scan_logger and scan_logger.last_log_path:
        logger.info("Scan log written to: %s", scan_logger.last_log_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track issue closings and triage on GitHub.")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log debug output, including every locator decision",
    )
    commands = parser.add_subparsers(dest="group", required=True)

    closings = commands.add_parser("closings", help="Track net closings of issues")
    closings_commands = closings.add_subparsers(dest="command", required=True)
    on_date = closings_commands.add_parser("date", help="Print opened and closed issues for a date")
    on_date.add_argument("date", help="Date as YYYY-MM-DD")
    in_range = closings_commands.add_parser("range", help="Print net change per day for a range of dates")
    in_range.add_argument("--start", "-s", required=True, help="First date as YYYY-MM-DD")
    in_range.add_argument("--end", "-e", required=True, help="Last date as YYYY-MM-DD")

    triaged = commands.add_parser("triaged", help="List open issues without comments since the yardstick")
    triaged.add_argument("labels", nargs="*", help="Only issues carrying all of these labels")
    triaged.add_argument("--yardstick", help="Date as YYYY-MM-DD (default: a year before today)")
    return parser


def main() -> None:
    """Entry point for the CLI."""
    ns = build_parser().parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command="triaged" if ns.group == "triaged" else ns.command,
            config=config_path,
            verbose=ns.verbose,
            date=getattr(ns, "date", None),
            start=getattr(ns, "start", None),
            end=getattr(ns, "end", None),
            labels=getattr(ns, "labels", []),
            yardstick=getattr(ns, "yardstick", None),
        )
        config = load_config(args.config)
        level = logging.DEBUG if args.verbose else config.logging.level
    except Exception as e:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
        logger.error(str(e))
        sys.exit(1)

    logging.basicConfig(level=level, format="%(message)s")

    try:
        asyncio.run(run(args, config))
    except RateLimitedError:
        logger.error("Hit GitHub rate limiting; try again later or set GITHUB_TOKEN.")
        sys.exit(2)
    except (TrackerError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
