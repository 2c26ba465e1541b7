from enum import Enum


class SqliteType(str, Enum):
    """Storage classes a declared column may use."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"
    REAL = "REAL"
    BLOB = "BLOB"


class NamingStrategy(str, Enum):
    """How new migration files are prefixed."""

    SEQUENTIAL = "sequential"
    TIMESTAMP = "timestamp"
