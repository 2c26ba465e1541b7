"""Single-statement generators for indexes, columns and table drops.

Each function is pure string templating: none checks that the table
or columns referenced actually exist.
"""

from typing import Callable, Optional, Sequence, Union

from d1kyt.domain.value_objects import ColumnDef, Table
from d1kyt.migrate.columns import ColumnBuilder, col, column_sql
from d1kyt.migrate.tables import trigger_name

TableRef = Union[Table, str]

INDEX_SUFFIX = "idx"
UNIQUE_INDEX_SUFFIX = "uq"


def _table_name(table: TableRef) -> str:
    return table.name if isinstance(table, Table) else table


def index_name(table: TableRef, columns: Sequence[str], unique: bool = False) -> str:
    """Synthesize ``<table>_<col1>_<col2>..._<idx|uq>``."""
    suffix = UNIQUE_INDEX_SUFFIX if unique else INDEX_SUFFIX
    return "_".join([_table_name(table), *columns, suffix])


def create_index(
    table: TableRef,
    columns: Sequence[str],
    unique: bool = False,
    name: Optional[str] = None,
) -> str:
    """Create an index on a table.

    Args:
        table: Table reference or table name.
        columns: Indexed columns, in index order.
        unique: Emit CREATE UNIQUE INDEX.
        name: Explicit index name; synthesized when omitted.

    Returns:
        CREATE [UNIQUE ]INDEX statement.

    Raises:
        ValueError: If ``columns`` is empty.
    """
    if not columns:
        raise ValueError("create_index requires at least one column")
    table_name = _table_name(table)
    if name is None:
        name = index_name(table_name, columns, unique)
    column_list = ", ".join(f'"{c}"' for c in columns)
    keyword = "UNIQUE INDEX" if unique else "INDEX"
    return f'CREATE {keyword} "{name}" ON "{table_name}"({column_list});'


def drop_index(name: str) -> str:
    return f'DROP INDEX "{name}";'


def add_column(
    table: TableRef,
    column: str,
    fn: Callable[[ColumnBuilder], ColumnDef],
) -> str:
    """Add a column to an existing table.

    Args:
        table: Table reference or table name.
        column: New column name.
        fn: Callback receiving the column builder, returning one ColumnDef.

    Returns:
        ALTER TABLE ... ADD COLUMN statement.
    """
    definition = column_sql(column, fn(col))
    return f'ALTER TABLE "{_table_name(table)}" ADD COLUMN {definition};'


def drop_table(table: TableRef, updated_at_column: str = "updatedAt") -> list[str]:
    """Drop a table and its update trigger.

    The trigger is dropped with IF EXISTS because callers cannot always
    know whether the table was defined with one.

    Args:
        table: Table reference or table name.
        updated_at_column: Update timestamp column name the table was
            defined with.

    Returns:
        DROP TABLE statement followed by DROP TRIGGER IF EXISTS.
    """
    name = _table_name(table)
    return [
        f'DROP TABLE "{name}";',
        f'DROP TRIGGER IF EXISTS "{trigger_name(name, updated_at_column)}";',
    ]
