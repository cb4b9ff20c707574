#!/usr/bin/env python
"""
Command line access to the FARS helpers.

Usage (from the directory holding accident_<year>.csv.bz2 files):
  fars summarize 2013 2014 2015 --out summary.csv
  fars map 36 2013 --out ny_2013.html
  fars --verbose summarize 2013 --data-dir data/ --workers 3
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from fars_config import FarsConfig
from fars_errors import FarsError
from fars_map import fars_map_state
from fars_summary import fars_summarize_years

_logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="fars", description="Summarize and map FARS accident files.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("summarize", help="Accident counts per month for each year")
    s.add_argument("years", nargs="+", help="Years to summarize, e.g. 2013 2014")
    s.add_argument("--data-dir", help="Directory holding the accident files (default: $FARS_DATA_DIR or .)")
    s.add_argument("--workers", type=int, help="Years loaded concurrently (default: $FARS_MAX_WORKERS or 1)")
    s.add_argument("--out", help="Optional path to save the summary CSV")

    m = sub.add_parser("map", help="Map accident locations for one state and year")
    m.add_argument("state", help="State number, e.g. 36")
    m.add_argument("year", help="Year, e.g. 2013")
    m.add_argument("--data-dir", help="Directory holding the accident files (default: $FARS_DATA_DIR or .)")
    m.add_argument("--out", help="Output HTML map path (default: fars_<state>_<year>.html)")
    return p.parse_args(argv)


def _summarize(args: argparse.Namespace, config: FarsConfig) -> int:
    summary = fars_summarize_years(
        args.years,
        data_dir=config.data_dir,
        max_workers=config.max_workers,
    )
    print(summary.to_string(index=False))
    if args.out:
        summary.to_csv(args.out, index=False)
        print(f"Summary written to {args.out}")
    return 0


def _map(args: argparse.Namespace, config: FarsConfig) -> int:
    out = args.out or f"fars_{args.state}_{args.year}.html"
    fmap = fars_map_state(args.state, args.year, data_dir=config.data_dir, out=out)
    if fmap is None:
        print("no accidents to plot")
    else:
        print(f"Map written to {out}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = FarsConfig.from_env(
            data_dir=args.data_dir,
            max_workers=getattr(args, "workers", None),
        )
        if args.command == "summarize":
            return _summarize(args, config)
        return _map(args, config)
    except (FarsError, ValueError) as exc:
        _logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
