"""d1-kyt: SQLite/D1 schema DSL, query builder and migration toolkit."""

__version__ = "0.1.4"

from d1kyt.data.executor import (  # noqa: E402
    D1Database,
    D1RunResult,
    query_all,
    query_batch,
    query_first,
    query_run,
)
from d1kyt.data.query_builder import CompiledQuery, create_query_builder  # noqa: E402

__all__ = [
    "CompiledQuery",
    "D1Database",
    "D1RunResult",
    "create_query_builder",
    "query_all",
    "query_batch",
    "query_first",
    "query_run",
]
