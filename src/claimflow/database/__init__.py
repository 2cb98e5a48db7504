"""Database layer for claimflow application."""

from claimflow.database.base import Database
from claimflow.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
