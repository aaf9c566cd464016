# app/cli/refresh.py
"""
Refresh every registered feed from the command line (e.g. from cron).

Usage:
    python -m app.cli.refresh
    python -m app.cli.refresh --json
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict

from dotenv import load_dotenv

load_dotenv()


def main():
    parser = argparse.ArgumentParser(description="Refresh all registered feeds")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    args = parser.parse_args()

    from app.config import get_settings
    from app.logging_config import configure_logging
    from app.services.bulk_refresh import BulkRefreshDriver

    settings = get_settings()
    configure_logging(json_format=settings.LOG_JSON, level=settings.LOG_LEVEL)

    summary = asyncio.run(BulkRefreshDriver().refresh_all())

    if args.json:
        print(json.dumps(asdict(summary), indent=2))
    elif summary.message:
        print(summary.message)
    else:
        print(f"\nRefreshed {summary.successful_sources}/{summary.total_sources} feeds "
              f"({summary.failed_sources} failed)\n")
        for r in summary.per_source_results:
            if r.success:
                print(f"  OK    {r.feed_title}: {r.items_added} added, {r.items_skipped} skipped, "
                      f"{r.items_with_errors} errors")
            else:
                print(f"  FAIL  {r.feed_title}: {r.error}")

    if not summary.success:
        print(f"Error: {summary.error}")
        sys.exit(1)


if __name__ == "__main__":
    main()
