#!/usr/bin/env python3
"""Show (or submit) the daily usage report.

Prints the payload the next report would submit, built from the
configured stats database. Nothing is sent unless --report is given.

Usage:
    python scripts/show_daily_report.py [--db PATH] [--report]

Exit codes:
    0: Report printed, submitted, or not due
    1: Submission failed
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from usagestats.core.settings import ReporterSettings  # noqa: E402
from usagestats.reporter.stats_store import open_stats_store  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--db", type=Path, help="Stats database (default: USAGESTATS_DB_PATH)")
    parser.add_argument("--report", action="store_true", help="Submit the report if it is due")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = ReporterSettings.from_env()
    if args.db:
        settings.db_path = args.db

    store = open_stats_store(settings)

    if not args.report:
        snapshot = store.get_daily_snapshot()
        print(json.dumps(snapshot.report.to_payload(), indent=2))
        print(f"({snapshot.launch_count} launches since last report)")
        return 0

    status = store.report()
    print(f"Report status: {status}")
    return 1 if status == "failed" else 0


if __name__ == "__main__":
    sys.exit(main())
