class D1KytError(Exception):
    """Base exception for all d1-kyt errors."""


class EmptyTableError(D1KytError):
    """Raised when a table would be created without any column.

    Attributes:
        table: Name of the table being defined.
    """

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(
            f"Table {table} has no columns: declare at least one column "
            "or enable an auto-generated column"
        )


class QueryBuilderError(D1KytError):
    """Raised when a query cannot be compiled."""


class ExecutionError(D1KytError):
    """Raised when a statement fails against the database.

    Attributes:
        sql: The statement text that failed.
    """

    def __init__(self, sql: str, reason: str) -> None:
        self.sql = sql
        self.reason = reason
        super().__init__(f"Failed to execute {sql!r}: {reason}")


class ConfigError(D1KytError):
    """Raised when the project config cannot be loaded.

    Attributes:
        path: Path of the offending config file.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")


class NotInitializedError(D1KytError):
    """Raised when a command needs a project that was never initialized."""

    def __init__(self) -> None:
        super().__init__('d1-kyt not initialized. Run "d1-kyt init" first.')


class MigrationBuildError(D1KytError):
    """Raised when a migration module fails to produce SQL.

    Attributes:
        filename: Migration module file name.
    """

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Error building {filename}: {reason}")
