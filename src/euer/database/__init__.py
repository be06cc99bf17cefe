"""Database layer for euer application."""

from euer.database.base import Database
from euer.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
