#!/usr/bin/env python
"""Create the database schema and optionally purge expired sessions.

Usage:
    python src/scripts/migrate_database.py [--database-url URL] [--purge-sessions]
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adapter.sql.connection import DATABASE_URL, Database
from adapter.sql.session_store import SqlSessionStore
from services.session_service import purge_expired_sessions
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run database migrations")
    parser.add_argument("--database-url", default=DATABASE_URL, help="SQLAlchemy database URL")
    parser.add_argument("--purge-sessions", action="store_true", help="Delete expired sessions after migrating")
    return parser.parse_args(argv)


def migrate(database_url: str, purge_sessions: bool = False) -> int:
    """Return a process exit code."""
    db = None
    try:
        logger.info("Running database migrations...")
        db = Database(database_url)
        db.create_all()
        if purge_sessions:
            purge_expired_sessions(SqlSessionStore(db))
        logger.info("Database migration completed successfully")
        return 0
    except Exception:
        logger.exception("Database migration failed")
        return 1
    finally:
        if db is not None:
            db.dispose()


def main(argv: list[str] | None = None) -> int:
    setup_structured_logging()
    args = parse_args(argv)
    return migrate(args.database_url, purge_sessions=args.purge_sessions)


if __name__ == "__main__":
    sys.exit(main())
