"""Tests for MigrationBuilder create/build."""

import sys
from datetime import datetime, timezone

import pytest

from d1kyt.app.builder import MigrationBuilder
from d1kyt.config import define_config
from d1kyt.data.adapters.sqlite_adapter import SQLiteDatabase
from d1kyt.domain.exceptions import MigrationBuildError

FIXED_TIME = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

PLACE_MIGRATION = '''\
from d1kyt.migrate import create_index, define_table


def migration():
    place = define_table("Place", lambda col: {
        "name": col.text().not_null(),
        "cityId": col.integer().not_null(),
    })
    return [*place.sql, create_index(place, ["cityId"])]
'''


@pytest.fixture
def builder(project, config):
    """MigrationBuilder for the temporary project."""
    return MigrationBuilder(project, config)


def write_migration(builder, filename, content):
    path = builder.src_dir / filename
    path.write_text(content)
    return path


class TestCreate:
    """Verify migration module creation."""

    def test_sequential_name(self, builder):
        """First migration gets 0001 and a snake_case name."""
        path = builder.create("createUsers", FIXED_TIME)
        assert path.name == "0001_create_users.py"
        assert path.parent == builder.src_dir

    def test_increments(self, builder):
        """Existing sources and built files count."""
        builder.create("first", FIXED_TIME)
        builder.out_dir.mkdir(parents=True)
        (builder.out_dir / "0002_second.sql").write_text("")
        assert builder.create("third", FIXED_TIME).name == "0003_third.py"

    def test_timestamp_strategy(self, project):
        """Timestamp strategy uses the creation time."""
        b = MigrationBuilder(project, define_config(naming_strategy="timestamp"))
        assert b.create("add posts", FIXED_TIME).name == "20250115120000_add_posts.py"

    def test_template_content(self, builder):
        """Template names the migration and returns no statements."""
        content = builder.create("create_users", FIXED_TIME).read_text()
        assert "# Migration: create_users" in content
        assert "# Created: 2025-01-15" in content
        assert "def migration():" in content

    def test_template_builds_as_empty(self, builder):
        """A fresh template is a valid, empty migration."""
        path = builder.create("create_users", FIXED_TIME)
        assert builder.load_statements(path) == []


class TestBuild:
    """Verify building .sql files."""

    def test_no_sources(self, builder):
        """Nothing to build reports no sources."""
        report = builder.build(FIXED_TIME)
        assert report.sources == []
        assert report.built == []

    def test_builds_sql(self, builder):
        """Statements are joined by blank lines under a header."""
        write_migration(builder, "0001_places.py", PLACE_MIGRATION)
        report = builder.build(FIXED_TIME)

        assert report.built == [builder.out_dir / "0001_places.sql"]
        content = report.built[0].read_text()
        lines = content.splitlines()
        assert lines[0] == "-- Generated by d1-kyt from 0001_places.py"
        assert lines[1] == "-- 2025-01-15T12:00:00+00:00"
        assert lines[2] == ""
        assert lines[3] == 'CREATE TABLE "Place" ('
        assert '\n\nCREATE TRIGGER "Place_updatedAt_trg"' in content
        assert content.endswith(
            '\n\nCREATE INDEX "Place_cityId_idx" ON "Place"("cityId");\n'
        )

    def test_built_sql_applies(self, builder):
        """The built file is an executable SQLite script."""
        write_migration(builder, "0001_places.py", PLACE_MIGRATION)
        path = builder.build(FIXED_TIME).built[0]

        db = SQLiteDatabase(":memory:")
        db.exec(path.read_text())
        row = db.prepare(
            "SELECT name FROM sqlite_master WHERE type = 'index'"
        ).first()
        assert row == {"name": "Place_cityId_idx"}
        db.close()

    def test_skips_existing(self, builder):
        """Existing .sql files are not rebuilt."""
        write_migration(builder, "0001_places.py", PLACE_MIGRATION)
        builder.build(FIXED_TIME)
        report = builder.build(FIXED_TIME)
        assert report.sources == ["0001_places.py"]
        assert report.built == []

    def test_skips_empty(self, builder):
        """Empty migrations produce no file."""
        builder.create("nothing", FIXED_TIME)
        report = builder.build(FIXED_TIME)
        assert report.empty == ["0001_nothing.py"]
        assert not (builder.out_dir / "0001_nothing.sql").exists()

    def test_sorted_order(self, builder):
        """Sources build in file name order; others are ignored."""
        write_migration(builder, "0002_b.py", "def migration():\n    return ['SELECT 2;']\n")
        write_migration(builder, "0001_a.py", "def migration():\n    return ['SELECT 1;']\n")
        write_migration(builder, "helpers.py", "X = 1\n")
        report = builder.build(FIXED_TIME)
        assert report.sources == ["0001_a.py", "0002_b.py"]

    def test_failing_migration(self, builder):
        """Errors raise MigrationBuildError naming the file."""
        write_migration(builder, "0001_bad.py", "def migration():\n    raise ValueError('boom')\n")
        with pytest.raises(MigrationBuildError, match="0001_bad.py"):
            builder.build(FIXED_TIME)

    def test_missing_migration_callable(self, builder):
        """Modules without migration() fail."""
        write_migration(builder, "0001_bad.py", "X = 1\n")
        with pytest.raises(MigrationBuildError):
            builder.build(FIXED_TIME)

    def test_non_string_statements(self, builder):
        """Non-string statements fail."""
        write_migration(builder, "0001_bad.py", "def migration():\n    return [1]\n")
        with pytest.raises(MigrationBuildError, match="expected SQL strings"):
            builder.build(FIXED_TIME)

    def test_bare_string_return(self, builder):
        """A single statement returned without a list fails."""
        write_migration(
            builder,
            "0001_idx.py",
            "from d1kyt.migrate import create_index\n\n"
            "def migration():\n"
            "    return create_index('Place', ['cityId'])\n",
        )
        with pytest.raises(MigrationBuildError, match="must return a list"):
            builder.build(FIXED_TIME)
        assert not (builder.out_dir / "0001_idx.sql").exists()

    def test_tuple_return(self, builder):
        """Tuples of statements are accepted."""
        write_migration(
            builder, "0001_t.py", "def migration():\n    return ('SELECT 1;',)\n"
        )
        report = builder.build(FIXED_TIME)
        assert report.built == [builder.out_dir / "0001_t.sql"]


class TestProjectImports:
    """Verify migrations can import project modules."""

    @pytest.fixture(autouse=True)
    def forget_project_modules(self):
        yield
        for name in [n for n in sys.modules if n == "db" or n.startswith("db.")]:
            del sys.modules[name]

    def test_imports_tables_helper(self, builder, project):
        """The project root is importable while a migration loads."""
        (project / "db").mkdir()
        (project / "db" / "tables.py").write_text(
            "from d1kyt.migrate import create_use_table\n\n"
            "use_table = create_use_table()\n"
        )
        write_migration(
            builder,
            "0001_idx.py",
            "from d1kyt.migrate import create_index\n"
            "from db.tables import use_table\n\n"
            "def migration():\n"
            "    return [create_index(use_table('Place'), ['cityId'])]\n",
        )
        builder.build(FIXED_TIME)

        sql = (builder.out_dir / "0001_idx.sql").read_text()
        assert 'CREATE INDEX "Place_cityId_idx" ON "Place"("cityId");' in sql
        assert str(project.resolve()) not in sys.path
