##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
SQLite connection context manager for the SQLite repositories.

This module defines the `SQLiteConnection` class, which opens a configured
connection to a database file (WAL mode, foreign keys on, name-based row
access, autocommit) and guarantees it is closed on exit.
"""

import logging
import sqlite3
import sys
from pathlib import Path
from types import TracebackType
from typing import Type


LOG = logging.getLogger(__name__)


class SQLiteConnection:
    """
    Context manager for establishing and safely closing a SQLite database connection.

    Attributes:
        db_path (str): The path to the database file.
        conn (sqlite3.Connection): The active SQLite connection used within the context.

    Methods:
        __enter__: Opens and configures the SQLite connection when entering the context.
        __exit__: Closes the SQLite connection when exiting the context.
    """

    def __init__(self, db_path: str):
        """
        Initialize the SQLiteConnection context manager.

        Args:
            db_path: The path to the database file. Parent directories are created as needed.
        """
        self.db_path: str = db_path
        self.conn: sqlite3.Connection = None

    def __enter__(self) -> sqlite3.Connection:
        """
        Enters the runtime context related to this object and creates a sqlite connection.

        Returns:
            A sqlite connection.
        """
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        connection_kwargs = {"check_same_thread": False}
        if sys.version_info < (3, 12):  # Autocommit wasn't added until python 3.12
            connection_kwargs["isolation_level"] = None
        else:
            connection_kwargs["autocommit"] = True

        self.conn = sqlite3.connect(self.db_path, **connection_kwargs)

        # Enable WAL mode for better concurrent access
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")

        # This enables name-based access to columns
        self.conn.row_factory = sqlite3.Row

        return self.conn

    def __exit__(self, exc_type: Type[Exception], exc_value: Exception, traceback: TracebackType):
        """
        Exits the runtime context and closes the connection if it's still open.

        Args:
            exc_type: The exception type raised, if any.
            exc_value: The exception instance raised, if any.
            traceback: The traceback object, if an exception was raised.
        """
        if self.conn:
            self.conn.close()
