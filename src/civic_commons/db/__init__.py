"""Database configuration and utilities."""

from .session import Base, SessionLocal, create_tables, get_db
from .time import new_id, utcnow

__all__ = ["Base", "SessionLocal", "create_tables", "get_db", "new_id", "utcnow"]
