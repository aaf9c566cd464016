# app/cli/retention.py
"""
CLI commands for retention management.

Usage:
    python -m app.cli.retention status
    python -m app.cli.retention cleanup --days 30 --dry-run
    python -m app.cli.retention cleanup --days 30 --confirm
"""

import argparse
import sys

from dotenv import load_dotenv

load_dotenv()


def get_db_session():
    """Get a database session."""
    from app.database import SessionLocal

    return SessionLocal()


def cmd_status(args):
    """Show how many feed articles the current threshold would remove."""
    from app.services.retention import purge_old_articles

    db = get_db_session()
    try:
        result = purge_old_articles(db, days=args.days, dry_run=True)

        print("\n=== Retention Status ===\n")
        print(f"Threshold: {result.days} days (published before {result.threshold:%Y-%m-%d %H:%M})")
        print(f"Purgeable articles: {result.articles_matched}")
        print("Saved, transformed and undated articles are always kept.")
        print()
    finally:
        db.close()


def cmd_cleanup(args):
    """Delete old unsaved, untransformed feed articles."""
    from app.exceptions import StoreError
    from app.services.retention import purge_old_articles

    # Safety check
    if not args.dry_run and not args.confirm:
        print("Error: Cleanup requires --confirm flag for non-dry-run operations")
        print("Use --dry-run to preview what would be deleted")
        sys.exit(1)

    db = get_db_session()
    try:
        print(f"\n{'DRY RUN - ' if args.dry_run else ''}Cleaning up feed articles...\n")

        try:
            result = purge_old_articles(db, days=args.days, dry_run=args.dry_run)
        except StoreError as e:
            print(f"Error: {e}")
            sys.exit(1)

        print(f"Matched: {result.articles_matched}")
        print(f"Deleted: {result.articles_deleted}")
        print(result.message)
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(
        description="Content Collector Retention CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check how much would be removed
  python -m app.cli.retention status

  # Preview what would be purged
  python -m app.cli.retention cleanup --days 14 --dry-run

  # Purge
  python -m app.cli.retention cleanup --days 14 --confirm
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # status command
    status_parser = subparsers.add_parser("status", help="Show retention status")
    status_parser.add_argument("--days", type=int, default=None, help="Days threshold (default: RETENTION_DAYS)")
    status_parser.set_defaults(func=cmd_status)

    # cleanup command
    cleanup_parser = subparsers.add_parser("cleanup", help="Delete old unsaved, untransformed feed articles")
    cleanup_parser.add_argument("--days", type=int, default=None, help="Days threshold (default: RETENTION_DAYS)")
    cleanup_parser.add_argument("--dry-run", action="store_true", help="Preview only, don't purge")
    cleanup_parser.add_argument("--confirm", action="store_true", help="Confirm purge operation")
    cleanup_parser.set_defaults(func=cmd_cleanup)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
