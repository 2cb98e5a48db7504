"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from claimflow.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "CLAIMFLOW_DB_PATH"
DEFAULT_DB_PATH = Path.home() / ".claimflow" / "claimflow.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file: explicit path, then CLAIMFLOW_DB_PATH, then the default.

    A leading ``~`` is expanded.
    """
    chosen = database_path or os.environ.get(DB_PATH_ENV)
    if chosen is None:
        return DEFAULT_DB_PATH
    return Path(chosen).expanduser()


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    The parent directory of the database file is created when missing.

    Args:
        database_path: Path to SQLite database file. If None, checks CLAIMFLOW_DB_PATH
            environment variable, then defaults to ~/.claimflow/claimflow.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Using claim database at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
