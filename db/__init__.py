"""
Database package for the keyword tracker.

Provides SQLAlchemy models, session management, and database utilities.
"""

from db.base import Base
from db.session import get_db, engine, SessionLocal

__all__ = ["Base", "get_db", "engine", "SessionLocal"]
