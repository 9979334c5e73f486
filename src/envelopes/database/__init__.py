"""Database layer for envelopes application."""

from envelopes.database.base import Database
from envelopes.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
