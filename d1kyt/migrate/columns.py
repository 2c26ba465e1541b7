"""Column factories for table and alter declarations."""

from d1kyt.domain.enums import SqliteType
from d1kyt.domain.value_objects import ColumnDef


class ColumnBuilder:
    """Creates fresh column definitions, one factory per SQLite type.

    There is deliberately no raw-type escape hatch: a column can only
    be one of TEXT, INTEGER, REAL or BLOB.
    """

    def text(self) -> ColumnDef:
        return ColumnDef(SqliteType.TEXT)

    def integer(self) -> ColumnDef:
        return ColumnDef(SqliteType.INTEGER)

    def real(self) -> ColumnDef:
        return ColumnDef(SqliteType.REAL)

    def blob(self) -> ColumnDef:
        return ColumnDef(SqliteType.BLOB)


col = ColumnBuilder()


def column_sql(name: str, column: ColumnDef) -> str:
    """Render ``"<name>" <TYPE>[ NOT NULL][ DEFAULT <expr>]``."""
    return f'"{name}" {column.render()}'
