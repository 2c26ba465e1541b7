from dataclasses import dataclass, replace
from typing import Generic, Optional, TypeVar

from d1kyt.domain.enums import SqliteType

T = TypeVar("T")


@dataclass(frozen=True)
class ColumnDef:
    """Immutable DDL fragment for a single column.

    Only NOT NULL and DEFAULT are expressible; uniqueness, references
    and checks are left out so generated DDL stays plain and reviewable.

    Attributes:
        type: SQLite storage class of the column.
        is_not_null: Whether the column is declared NOT NULL.
        default_value: Raw SQL expression used verbatim as DEFAULT.
    """

    type: SqliteType
    is_not_null: bool = False
    default_value: Optional[str] = None

    def not_null(self) -> "ColumnDef":
        """Return a copy of this column marked NOT NULL."""
        return replace(self, is_not_null=True)

    def default(self, value: str) -> "ColumnDef":
        """Return a copy of this column with a DEFAULT expression.

        The value is emitted as-is, so text literals must carry their own
        quotes (e.g. ``"'draft'"``).

        Args:
            value: Raw SQL literal or expression.

        Returns:
            New ColumnDef with ``default_value`` replaced.
        """
        return replace(self, default_value=value)

    def render(self) -> str:
        """Render the type and constraints, without the column name."""
        sql = self.type.value
        if self.is_not_null:
            sql += " NOT NULL"
        if self.default_value is not None:
            sql += f" DEFAULT {self.default_value}"
        return sql


@dataclass(frozen=True)
class TableOptions:
    """Controls the auto-generated columns of ``define_table``.

    Attributes:
        primary_key: Add an INTEGER PRIMARY KEY AUTOINCREMENT column.
        created_at: Add a creation timestamp column.
        updated_at: Add an update timestamp column and its trigger.
        primary_key_column: Name of the surrogate key column.
        created_at_column: Name of the creation timestamp column.
        updated_at_column: Name of the update timestamp column.
    """

    primary_key: bool = True
    created_at: bool = True
    updated_at: bool = True
    primary_key_column: str = "id"
    created_at_column: str = "createdAt"
    updated_at_column: str = "updatedAt"


DEFAULT_TABLE_OPTIONS = TableOptions()


@dataclass(frozen=True)
class Table(Generic[T]):
    """Reference to a table by name.

    The type parameter describes the row shape for static checkers
    only; nothing about it exists at runtime.

    Attributes:
        name: Table name, used verbatim in every generated identifier.
    """

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class DefinedTable(Table[T]):
    """Table reference produced by ``define_table``.

    Attributes:
        sql: CREATE TABLE statement, followed by the CREATE TRIGGER
             statement when one was generated.
    """

    sql: tuple[str, ...] = ()
