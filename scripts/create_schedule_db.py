#!/usr/bin/env python3
"""
Build the schedule database used by the bot.

This script:
1. Reads a schedule JSON file (stations and trains with their stops)
2. Normalizes stop times to HH:MM
3. Writes trains, stations and times tables into a SQLite file

Usage:
    python scripts/create_schedule_db.py [--schedule FILE] [--db FILE] [--recreate]
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trainbot.schedule.loader import load_schedule_file
from trainbot.utils.config import get_settings
from trainbot.utils.logger import setup_logger, get_logger

# Initialize logger
setup_logger()
logger = get_logger()


def main():
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Create the train schedule database from a JSON file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Load the bundled sample schedule into the configured database
  python scripts/create_schedule_db.py

  # Replace an existing database
  python scripts/create_schedule_db.py --schedule my_schedule.json --recreate
        """
    )
    parser.add_argument(
        "--schedule",
        default=str(Path(__file__).parent.parent / "data" / "sample_schedule.json"),
        help="Schedule JSON file",
    )
    parser.add_argument(
        "--db",
        default=settings.db_path,
        help=f"SQLite database file (default: {settings.db_path})",
    )
    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Delete the existing database first",
    )
    args = parser.parse_args()

    db_path = Path(args.db)
    if db_path.exists():
        if not args.recreate:
            logger.error(f"Database {db_path} already exists (use --recreate to replace it)")
            return 1
        logger.warning(f"Removing existing database: {db_path}")
        db_path.unlink()

    try:
        counts = load_schedule_file(args.schedule, db_path)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load schedule: {e}")
        return 1

    logger.info(
        f"✓ Created {db_path}: {counts['stations']} stations, "
        f"{counts['trains']} trains, {counts['stops']} stops"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
