"""Shared fixtures for d1-kyt unit tests."""

import pytest

from d1kyt.config import define_config
from d1kyt.data.adapters.sqlite_adapter import SQLiteDatabase
from d1kyt.data.query_builder import create_query_builder
from d1kyt.migrate import define_table


# ── Database Fixtures ─────────────────────────────────────────


@pytest.fixture
def db():
    """In-memory SQLiteDatabase for isolated tests.

    Yields:
        SQLiteDatabase connected to ':memory:'.
        Automatically closed after test.
    """
    d = SQLiteDatabase(":memory:")
    yield d
    d.close()


@pytest.fixture
def qb():
    """Compile-only query builder."""
    return create_query_builder()


# ── Table Fixtures ────────────────────────────────────────────


@pytest.fixture
def place():
    """A Place table with default auto columns.

    Returns:
        DefinedTable with name, cityId, status columns.
    """
    return define_table(
        "Place",
        lambda col: {
            "name": col.text().not_null(),
            "cityId": col.integer().not_null(),
            "status": col.text().not_null().default("'draft'"),
        },
    )


@pytest.fixture
def place_db(db, place):
    """In-memory database with the Place table created."""
    db.exec("\n".join(place.sql))
    return db


# ── Project Fixtures ──────────────────────────────────────────


@pytest.fixture
def project(tmp_path):
    """An initialized project directory with default config.

    Returns:
        Path to the project root.
    """
    (tmp_path / "d1-kyt" / "migrations").mkdir(parents=True)
    (tmp_path / "d1-kyt" / "config.py").write_text(
        "from d1kyt.config import define_config\n\n"
        'config = define_config(migrations_dir="db/migrations")\n'
    )
    return tmp_path


@pytest.fixture
def config():
    """Default config with sequential naming."""
    return define_config()
