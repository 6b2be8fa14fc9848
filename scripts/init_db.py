#!/usr/bin/env python3
"""
Database initialization script.

Creates all tables and the default notification settings row.
Run this script to initialize a fresh database.
"""

import sys
import os

# Add the parent directory to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db.base import Base
from db.session import engine, SessionLocal
import db.models  # noqa: F401  (registers tables on Base.metadata)
from services.keyword_store import KeywordStore


def create_tables():
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created successfully")


def seed_settings():
    """Insert the default notification settings if missing."""
    db = SessionLocal()
    try:
        settings = KeywordStore(db).get_settings()
        print(f"✓ Notification settings ready ({len(settings.agency_emails)} recipients)")
    finally:
        db.close()


def main():
    """Initialize the database with all tables and default settings."""
    print("=" * 50)
    print("Database Initialization")
    print("=" * 50)

    try:
        create_tables()
        seed_settings()
        print("=" * 50)
        print("✓ Database initialized successfully!")
        print("=" * 50)
    except Exception as e:
        print(f"✗ Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
