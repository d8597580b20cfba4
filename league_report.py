#!/usr/bin/env python3
"""
League dashboard report CLI

Builds dashboard reports (power rankings, standings, playoff brackets,
draft pick ownership, season records, league history) from a saved snapshot directory or
live from the Sleeper API.

Usage:
    python league_report.py power-rankings --snapshot-dir snapshots/2025
    python league_report.py draft-picks --league-id 1313306806897881088
    python league_report.py brackets --snapshot-dir snapshots/2025 --output out/brackets.json
    python league_report.py history --snapshot-dir snapshots
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import requests

from legends.config import get_config, load_config
from legends.logging_config import setup_logging
from legends.reports import HISTORY_REPORT, REPORTS, build_report, history_report
from legends.snapshot import fetch_history, fetch_snapshot, load_history, load_snapshot
from legends.utils import save_json


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="League dashboard reports from Sleeper data")
    parser.add_argument(
        "report",
        choices=REPORTS + (HISTORY_REPORT,),
        help="Report to build (history reads every season of the league)",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--snapshot-dir", "-s",
        default=None,
        help="Directory of saved Sleeper responses (for history: one subdirectory per season)",
    )
    source.add_argument(
        "--league-id", "-l",
        default=None,
        help="Fetch live from Sleeper (defaults to the configured league)",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to league_config.json (defaults to data/league_config.json)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the report JSON here instead of stdout",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )

    args = parser.parse_args(argv)

    logger = setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_config(args.config) if args.config else get_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load config: {e}")
        return 1

    league_id = args.league_id or config.league_id
    try:
        if args.report == HISTORY_REPORT:
            history = load_history(args.snapshot_dir) if args.snapshot_dir else fetch_history(league_id)
        elif args.snapshot_dir:
            snapshot = load_snapshot(args.snapshot_dir)
        else:
            snapshot = fetch_snapshot(league_id)
    except FileNotFoundError as e:
        logger.error(f"Snapshot incomplete: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Snapshot failed validation: {e}")
        return 1
    except requests.RequestException as e:
        logger.error(f"Sleeper request failed: {e}")
        return 1

    if args.report == HISTORY_REPORT:
        logger.info(f"Building history over {len(history)} seasons")
        report = history_report(history)
    else:
        logger.info(f"Building {args.report} for {snapshot.league.name or snapshot.league.league_id} ({snapshot.league.season})")
        report = build_report(args.report, snapshot, config)

    if args.output:
        save_json(Path(args.output), report)
        logger.info(f"Wrote {args.output}")
    else:
        json.dump(report, sys.stdout, indent=2)
        sys.stdout.write("\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
