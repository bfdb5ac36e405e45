"""Database module for SQLAlchemy session management."""

from paywire_service.db.session import (
    AsyncSessionLocal,
    Base,
    engine,
    get_db,
)

__all__ = ["AsyncSessionLocal", "Base", "engine", "get_db"]
