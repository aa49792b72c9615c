"""Run one scan against the saved universe and print the bull/bear tables."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from fnoscan.clock import ns_to_datetime
from fnoscan.config import AppSettings
from fnoscan.errors import ScannerError
from fnoscan.logger import setup_logging
from fnoscan.scan.view import ResultsView, SortKey, qualified_rows, sort_rows
from fnoscan.services import build_services


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=None,
        help="Override the directory holding credentials, symbols, and results.",
    )
    parser.add_argument(
        "--sort",
        choices=[key.value for key in SortKey],
        default=SortKey.SYMBOL.value,
        help="Column to sort each table by (default: symbol).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = AppSettings()
    if args.state_dir is not None:
        settings.data_paths.state = args.state_dir.expanduser()
    setup_logging("fnoscan", settings.log_level, settings.log_dir)

    services = build_services(settings)
    try:
        results = services.orchestrator.run_scan()
    except ScannerError as exc:
        print(f"Scan failed: {exc}", file=sys.stderr)
        return 1

    completed_at = services.results.last_scan_time()
    if completed_at is not None:
        print(f"Scan completed at {ns_to_datetime(completed_at).isoformat()}")
    print("Counts: " + ", ".join(f"{name}={count}" for name, count in results.counts().items()))
    for view in ResultsView:
        rows = sort_rows(qualified_rows(results, view), SortKey(args.sort))
        print(f"\n{view.value.upper()} ({len(rows)})")
        for row in rows:
            print(
                f"  {row.symbol:<16} first={row.first_5min_level} day={row.day_level} "
                f"atm_oi={row.atm_oi_change} itm_oi={row.itm_oi_change} ({row.seller_pov})"
            )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
