"""Storage layer: PostgreSQL connection pool management."""

from src.storage.database import Database, StoreUnavailable

__all__ = ["Database", "StoreUnavailable"]
