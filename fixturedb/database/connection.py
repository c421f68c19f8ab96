"""Scoped SQLite connections.

Every database call opens its own connection, runs on a worker thread and
closes the connection before the worker returns. When the awaiting task is
cancelled (for example by a harness timeout) the running statement is
interrupted, and a call cancelled while still opening never runs its statement;
the worker owns and closes the connection either way.
"""

import asyncio
import sqlite3
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from fixturedb.log import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

# SQLite VM instructions between cancellation checks
PROGRESS_STEPS = 1000


class SQLiteConnection:
    """Opens configured sqlite3 connections to one database file."""

    def __init__(self, db_path: Path, busy_timeout: float = 60.0) -> None:
        """Initialize SQLite connection factory.

        Args:
            db_path: Path to SQLite database file
            busy_timeout: Seconds to wait on a locked database before failing
        """
        self.db_path = Path(db_path)
        self.busy_timeout = busy_timeout

    def open(self) -> sqlite3.Connection:
        """Open and configure a new connection."""
        connection = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=self.busy_timeout,
        )
        connection.row_factory = sqlite3.Row
        try:
            self._configure_connection(connection)
        except sqlite3.Error:
            connection.close()
            raise
        logger.debug(f"Opened SQLite connection: {self.db_path}")
        return connection

    def _configure_connection(self, connection: sqlite3.Connection) -> None:
        # Committed state lives in the main file, so stage copies are complete
        connection.execute("PRAGMA journal_mode = DELETE")
        connection.execute("PRAGMA foreign_keys = ON")

    async def run(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        """Run ``operation`` on a fresh connection in a worker thread.

        Args:
            operation: Blocking callable receiving the open connection

        Returns:
            Whatever ``operation`` returns
        """
        lock = threading.Lock()
        cancelled = threading.Event()
        active: list[sqlite3.Connection] = []

        def worker() -> T:
            connection = self.open()
            with lock:
                if cancelled.is_set():
                    # Cancelled while waiting for the file lock in open()
                    connection.close()
                    logger.debug(f"Closed SQLite connection unused: {self.db_path}")
                    raise sqlite3.OperationalError("interrupted")
                active.append(connection)
            # Aborts statements started after an interrupt() that came too early
            connection.set_progress_handler(
                lambda: 1 if cancelled.is_set() else 0, PROGRESS_STEPS
            )
            try:
                return operation(connection)
            finally:
                with lock:
                    active.clear()
                connection.close()
                logger.debug(f"Closed SQLite connection: {self.db_path}")

        try:
            return await asyncio.to_thread(worker)
        except asyncio.CancelledError:
            with lock:
                cancelled.set()
                if active:
                    logger.warning(f"Interrupting cancelled query on {self.db_path}")
                    active[0].interrupt()
            raise
