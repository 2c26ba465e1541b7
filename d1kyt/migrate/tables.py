"""Compile table declarations into CREATE TABLE / CREATE TRIGGER SQL.

A declaration is a callback that receives the column builder and
returns a mapping of column name to ColumnDef. Mapping order is the
rendering order. Auto-generated columns (surrogate key, creation and
update timestamps) are controlled by TableOptions.
"""

from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from funcy import first

from d1kyt.domain.exceptions import EmptyTableError
from d1kyt.domain.value_objects import (
    DEFAULT_TABLE_OPTIONS,
    ColumnDef,
    DefinedTable,
    Table,
    TableOptions,
)
from d1kyt.log import logger
from d1kyt.migrate.columns import ColumnBuilder, col, column_sql

logger = logger.getChild(__name__)

TableDefFn = Callable[[ColumnBuilder], Mapping[str, ColumnDef]]

TIMESTAMP_COLUMN_SQL = "TEXT NOT NULL DEFAULT (datetime('now'))"


def trigger_name(table: str, updated_at_column: str) -> str:
    return f"{table}_{updated_at_column}_trg"


def define_table(
    name: str,
    fn: TableDefFn,
    options: Optional[TableOptions] = None,
    **overrides: Any,
) -> DefinedTable:
    """Define a table with configurable auto-generated columns.

    By default the table gets an ``id`` surrogate key plus ``createdAt``
    and ``updatedAt`` timestamps, and a trigger that refreshes
    ``updatedAt`` after every row update.

    Args:
        name: Table name, used verbatim and case-sensitively.
        fn: Callback returning the user columns in rendering order.
        options: Base options; ``DEFAULT_TABLE_OPTIONS`` when omitted.
        **overrides: Individual TableOptions fields to replace.

    Returns:
        DefinedTable whose ``sql`` holds the CREATE TABLE statement and,
        when an update trigger applies, the CREATE TRIGGER statement.

    Raises:
        EmptyTableError: If no user column is declared and every
            auto-generated column is disabled.
        TypeError: If an override names an unknown option.
    """
    opts = replace(options or DEFAULT_TABLE_OPTIONS, **overrides)
    columns = dict(fn(col))

    column_defs: list[str] = []
    if opts.primary_key:
        column_defs.append(
            f'"{opts.primary_key_column}" INTEGER PRIMARY KEY AUTOINCREMENT'
        )
    for column_name, column in columns.items():
        column_defs.append(column_sql(column_name, column))
    if opts.created_at:
        column_defs.append(f'"{opts.created_at_column}" {TIMESTAMP_COLUMN_SQL}')
    if opts.updated_at:
        column_defs.append(f'"{opts.updated_at_column}" {TIMESTAMP_COLUMN_SQL}')

    if not column_defs:
        raise EmptyTableError(name)

    body = ",\n".join(f"  {line}" for line in column_defs)
    statements = [f'CREATE TABLE "{name}" (\n{body}\n);']

    if opts.updated_at:
        # Without a surrogate key the first declared column correlates rows.
        key = opts.primary_key_column if opts.primary_key else first(columns)
        if key is not None:
            statements.append(
                _update_trigger_sql(name, opts.updated_at_column, key)
            )
        else:
            logger.debug("No key column on %s, skipping update trigger", name)

    logger.debug(
        "Defined table %s with %d column(s), %d statement(s)",
        name,
        len(column_defs),
        len(statements),
    )
    return DefinedTable(name=name, sql=tuple(statements))


def _update_trigger_sql(table: str, updated_at_column: str, key: str) -> str:
    return (
        f'CREATE TRIGGER "{trigger_name(table, updated_at_column)}"\n'
        f'AFTER UPDATE ON "{table}"\n'
        "FOR EACH ROW\n"
        "BEGIN\n"
        f'  UPDATE "{table}" SET "{updated_at_column}" = datetime(\'now\') '
        f'WHERE "{key}" = NEW."{key}";\n'
        "END;"
    )


def use_table(name: str) -> Table:
    """Reference a table declared elsewhere.

    Annotate the result for static checking, e.g.
    ``place: Table[PlaceRow] = use_table("Place")``.
    """
    return Table(name=name)


def create_use_table() -> Callable[[str], Table]:
    """Return a ``use_table`` function for one database schema.

    Meant to be created once per project and imported by migrations::

        use_table = create_use_table()
        place = use_table("Place")
    """

    def _use_table(name: str) -> Table:
        return Table(name=name)

    return _use_table
