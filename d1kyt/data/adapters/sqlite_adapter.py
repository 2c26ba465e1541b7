"""D1Database implementation backed by the standard sqlite3 module.

Lets compiled queries and generated migrations run against a local
SQLite file (or ``:memory:``) with the same calls used for D1.
"""

import sqlite3
import time
from typing import Any, Optional, Sequence

from d1kyt.data.executor import D1Meta, D1Result
from d1kyt.domain.exceptions import ExecutionError
from d1kyt.log import logger

logger = logger.getChild(__name__)


class SQLitePreparedStatement:
    """Statement text plus bound parameters.

    ``bind`` returns a new statement, so a prepared statement can be
    bound several times with different values.

    Attributes:
        _db: Owning SQLiteDatabase.
        sql: Statement text.
        params: Bound positional parameters.
    """

    def __init__(
        self, db: "SQLiteDatabase", sql: str, params: tuple = ()
    ) -> None:
        self._db = db
        self.sql = sql
        self.params = params

    def bind(self, *values: Any) -> "SQLitePreparedStatement":
        return SQLitePreparedStatement(self._db, self.sql, values)

    def all(self) -> D1Result:
        return self._db.execute(self)

    def first(self) -> Optional[dict]:
        rows = self._db.execute(self).results
        return rows[0] if rows else None

    def run(self) -> D1Result:
        return self._db.execute(self)


class SQLiteDatabase:
    """Concrete D1Database backed by a single SQLite connection.

    Attributes:
        _db_path: Path to SQLite database file (or ':memory:').
        _conn: Lazy-initialized SQLite connection.
    """

    def __init__(self, db_path: str = ":memory:") -> None:
        """Initialize with database path.

        Args:
            db_path: Path to SQLite database file.
                     Use ':memory:' for in-memory testing.
        """
        self._db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Lazy-initialize and return the database connection."""
        if self._conn is None:
            # Autocommit mode; batch() opens its own transaction.
            self._conn = sqlite3.connect(self._db_path, isolation_level=None)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys=ON")
        return self._conn

    def prepare(self, sql: str) -> SQLitePreparedStatement:
        return SQLitePreparedStatement(self, sql)

    def execute(self, statement: SQLitePreparedStatement) -> D1Result:
        """Run one prepared statement and collect rows and statistics.

        Raises:
            ExecutionError: If SQLite rejects the statement.
        """
        logger.debug("Executing %s %r", statement.sql, statement.params)
        start = time.perf_counter()
        try:
            cur = self.conn.execute(statement.sql, statement.params)
            rows = [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            raise ExecutionError(statement.sql, str(exc)) from exc
        duration = (time.perf_counter() - start) * 1000

        changes = max(cur.rowcount, 0)
        meta = D1Meta(
            duration=duration,
            rows_read=len(rows),
            rows_written=changes,
            last_row_id=cur.lastrowid or 0,
            changed_db=changes > 0,
            changes=changes,
        )
        return D1Result(results=rows, success=True, meta=meta)

    def batch(
        self, statements: Sequence[SQLitePreparedStatement]
    ) -> list[D1Result]:
        """Run statements in order inside a single transaction.

        Any failure rolls back the whole batch.

        Raises:
            ExecutionError: If any statement fails.
        """
        conn = self.conn
        conn.execute("BEGIN")
        try:
            results = [self.execute(stmt) for stmt in statements]
        except ExecutionError:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
        return results

    def exec(self, script: str) -> None:
        """Run a multi-statement SQL script, e.g. a built migration.

        Raises:
            ExecutionError: If SQLite rejects the script.
        """
        try:
            self.conn.executescript(script)
        except sqlite3.Error as exc:
            raise ExecutionError(script, str(exc)) from exc

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
