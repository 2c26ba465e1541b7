"""Run compiled queries against a D1-style database.

The database is anything satisfying the D1Database protocol:
``prepare(sql).bind(*params)`` followed by ``all()``, ``first()`` or
``run()``, plus ``batch(statements)``. SQLiteDatabase in
``d1kyt.data.adapters.sqlite_adapter`` is the bundled implementation.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from d1kyt.data.query_builder import CompiledQuery


@dataclass(frozen=True)
class D1Meta:
    """Execution statistics reported for a statement."""

    duration: float = 0.0
    rows_read: int = 0
    rows_written: int = 0
    last_row_id: int = 0
    changed_db: bool = False
    changes: int = 0


@dataclass(frozen=True)
class D1Result:
    """Raw result of ``all()``, ``run()`` or one ``batch()`` entry.

    Attributes:
        results: Returned rows, or None when the statement returned none.
        success: Whether the statement succeeded.
        meta: Execution statistics.
    """

    results: Optional[list] = None
    success: bool = True
    meta: D1Meta = field(default_factory=D1Meta)


@dataclass(frozen=True)
class D1RunResult:
    """Outcome of a mutating statement, without rows."""

    success: bool
    meta: D1Meta


@runtime_checkable
class D1PreparedStatement(Protocol):
    """A prepared statement, optionally bound to parameters."""

    def bind(self, *values: Any) -> "D1PreparedStatement":
        ...

    def all(self) -> D1Result:
        ...

    def first(self) -> Optional[Any]:
        ...

    def run(self) -> D1Result:
        ...


@runtime_checkable
class D1Database(Protocol):
    """Minimal database contract used by the query helpers."""

    def prepare(self, sql: str) -> D1PreparedStatement:
        ...

    def batch(self, statements: Sequence[D1PreparedStatement]) -> list[D1Result]:
        ...


def _bound(db: D1Database, query: CompiledQuery) -> D1PreparedStatement:
    return db.prepare(query.sql).bind(*query.parameters)


def query_all(db: D1Database, query: CompiledQuery) -> list:
    """Execute a query and return all rows.

    Example::

        users = query_all(db, qb.select_from("User").select_all().compile())
    """
    result = _bound(db, query).all()
    return result.results or []


def query_first(db: D1Database, query: CompiledQuery) -> Optional[Any]:
    """Execute a query and return the first row, or None."""
    return _bound(db, query).first()


def query_run(db: D1Database, query: CompiledQuery) -> D1RunResult:
    """Execute a statement that returns no rows (INSERT/UPDATE/DELETE).

    Returns:
        D1RunResult with success flag and execution statistics,
        e.g. ``query_run(db, q).meta.changes``.
    """
    result = _bound(db, query).run()
    return D1RunResult(success=result.success, meta=result.meta)


def query_batch(
    db: D1Database, queries: Sequence[CompiledQuery]
) -> list[D1RunResult]:
    """Execute several statements in one batch.

    Args:
        db: Target database.
        queries: Compiled queries, executed in order.

    Returns:
        One D1RunResult per query, in the same order.
    """
    statements = [_bound(db, q) for q in queries]
    results = db.batch(statements)
    return [D1RunResult(success=r.success, meta=r.meta) for r in results]
