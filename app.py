#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse
import logging
from typing import List, Optional

from core.time_format import ACCEPTED_PATTERNS, DEFAULT_PATTERN
from core.timer_engine import CountdownEngine, InvalidDuration
from domain.models import TimerConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="countdown",
        description="Simple countdown timer with pause/resume.",
    )
    parser.add_argument("--minutes", "-m", type=int, default=0, help="Minutes to count down (default: 0)")
    parser.add_argument("--seconds", "-s", type=int, default=10, help="Seconds to count down (default: 10)")
    parser.add_argument(
        "--interval",
        type=float,
        default=1.0,
        help="Seconds between ticks; non-positive means 1 (default: 1)",
    )
    parser.add_argument(
        "--pattern",
        default=DEFAULT_PATTERN,
        help=f"Display pattern, one of {', '.join(ACCEPTED_PATTERNS)} (default: {DEFAULT_PATTERN})",
    )
    parser.add_argument(
        "--background",
        action="store_true",
        help="Tick on a background thread instead of the Tk main loop",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        CountdownEngine(args.minutes, args.seconds)
    except InvalidDuration as e:
        parser.error(str(e))
    return args


def build_config(args: argparse.Namespace) -> TimerConfig:
    return TimerConfig(
        minutes=args.minutes,
        seconds=args.seconds,
        interval=args.interval,
        pattern=args.pattern,
        background=args.background,
    )


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Tk is only needed once we actually open a window
    from ui.countdown_widget import run_app

    run_app(build_config(args))


if __name__ == "__main__":
    main()
