"""SQLite storage for weight entries and goals."""

from __future__ import annotations

from weighttrack.db.connection import DatabaseConnection, get_db, set_db

__all__ = ["DatabaseConnection", "get_db", "set_db"]
