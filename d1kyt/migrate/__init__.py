"""Migration DSL: declarative tables compiled to SQLite DDL."""

from d1kyt.domain.value_objects import (
    DEFAULT_TABLE_OPTIONS,
    ColumnDef,
    DefinedTable,
    Table,
    TableOptions,
)
from d1kyt.migrate.columns import ColumnBuilder, col
from d1kyt.migrate.statements import (
    add_column,
    create_index,
    drop_index,
    drop_table,
)
from d1kyt.migrate.tables import create_use_table, define_table, use_table

__all__ = [
    "DEFAULT_TABLE_OPTIONS",
    "ColumnBuilder",
    "ColumnDef",
    "DefinedTable",
    "Table",
    "TableOptions",
    "add_column",
    "col",
    "create_index",
    "create_use_table",
    "define_table",
    "drop_index",
    "drop_table",
    "use_table",
]
