"""
Database init - Exports for routes
"""

from .base import Base, TimestampMixin, OwnedMixin
from maintrack.database import engine, SessionLocal, get_db

__all__ = ["Base", "TimestampMixin", "OwnedMixin", "engine", "SessionLocal", "get_db"]
