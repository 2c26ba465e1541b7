"""Create migration modules and build them into ``.sql`` files.

Migration sources are Python modules in ``d1-kyt/migrations/`` that
expose a ``migration()`` callable returning a list of SQL statements.
Building imports each module whose ``.sql`` counterpart is missing
and writes that file into the configured migrations directory.
"""

import importlib.util
import re
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from d1kyt.config import D1_KYT_DIR, MIGRATIONS_SUBDIR, D1KytConfig
from d1kyt.domain.exceptions import MigrationBuildError
from d1kyt.log import logger
from d1kyt.naming import generate_migration_prefix, to_snake_name

logger = logger.getChild(__name__)

# Sequential (3-4 digit) and timestamp (14 digit) prefixes.
SOURCE_PATTERN = re.compile(r"^\d{3,14}_.*\.py$")

MIGRATION_TEMPLATE = '''\
from d1kyt.migrate import create_index, define_table

# Migration: {name}
# Created: {date}


def migration():
    # Example:
    # user = define_table("User", lambda col: {{
    #     "email": col.text().not_null(),
    #     "name": col.text(),
    # }})
    #
    # return [
    #     *user.sql,
    #     create_index(user, ["email"], unique=True),
    # ]

    return []
'''


@dataclass
class BuildReport:
    """What a build run did.

    Attributes:
        sources: Migration modules found, in build order.
        built: ``.sql`` files written.
        empty: Modules skipped because they returned no statements.
    """

    sources: list[str] = field(default_factory=list)
    built: list[Path] = field(default_factory=list)
    empty: list[str] = field(default_factory=list)


class MigrationBuilder:
    """Creates and builds migrations for one project.

    Attributes:
        _root: Project root directory.
        _config: Loaded project config.
    """

    def __init__(self, root: Path, config: D1KytConfig) -> None:
        self._root = Path(root)
        self._config = config

    @property
    def src_dir(self) -> Path:
        return self._root / D1_KYT_DIR / MIGRATIONS_SUBDIR

    @property
    def out_dir(self) -> Path:
        return self._root / self._config.migrations_dir

    def _existing_files(self) -> list[str]:
        names = []
        for directory in (self.out_dir, self.src_dir):
            if directory.is_dir():
                names.extend(p.name for p in directory.iterdir())
        return names

    def create(self, name: str, date: Optional[datetime] = None) -> Path:
        """Write a new migration module from the template.

        Args:
            name: Migration name, converted to snake_case.
            date: Creation time; now (UTC) when omitted.

        Returns:
            Path of the new module.
        """
        date = date or datetime.now(timezone.utc)
        prefix = generate_migration_prefix(
            self._config.naming_strategy, self._existing_files(), date
        )
        snake_name = to_snake_name(name)
        path = self.src_dir / f"{prefix}_{snake_name}.py"

        self.src_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(
            MIGRATION_TEMPLATE.format(
                name=snake_name, date=date.strftime("%Y-%m-%d")
            ),
            encoding="utf-8",
        )
        logger.debug("Created migration %s", path)
        return path

    def sources(self) -> list[Path]:
        """Return migration modules sorted by file name."""
        if not self.src_dir.is_dir():
            return []
        return sorted(
            (p for p in self.src_dir.iterdir() if SOURCE_PATTERN.match(p.name)),
            key=lambda p: p.name,
        )

    @contextmanager
    def _import_path(self):
        """Make project modules such as ``db.tables`` importable."""
        root = str(self._root.resolve())
        sys.path.insert(0, root)
        try:
            yield
        finally:
            sys.path.remove(root)

    def load_statements(self, path: Path) -> list[str]:
        """Import a migration module and return its statements.

        The project root is on ``sys.path`` while the module runs.

        Raises:
            MigrationBuildError: If the module fails to import, has no
                ``migration`` callable, or does not return a list of strings.
        """
        spec = importlib.util.spec_from_file_location(
            f"d1kyt_migration_{path.stem}", path
        )
        module = importlib.util.module_from_spec(spec)
        try:
            with self._import_path():
                spec.loader.exec_module(module)
                migration = getattr(module, "migration")
                statements = migration()
        except Exception as exc:
            raise MigrationBuildError(path.name, str(exc)) from exc

        if not isinstance(statements, (list, tuple)):
            raise MigrationBuildError(
                path.name,
                "migration() must return a list of SQL strings, "
                f"got {type(statements).__name__}",
            )

        for statement in statements:
            if not isinstance(statement, str):
                raise MigrationBuildError(
                    path.name,
                    f"expected SQL strings, got {type(statement).__name__}",
                )
        return list(statements)

    def build(self, now: Optional[datetime] = None) -> BuildReport:
        """Build every migration module that has no ``.sql`` file yet.

        Args:
            now: Timestamp written into file headers; now (UTC) if omitted.

        Returns:
            BuildReport describing found, built and empty migrations.

        Raises:
            MigrationBuildError: On the first migration that fails.
        """
        report = BuildReport()
        self.out_dir.mkdir(parents=True, exist_ok=True)

        for source in self.sources():
            report.sources.append(source.name)
            target = self.out_dir / f"{source.stem}.sql"
            if target.exists():
                continue

            statements = self.load_statements(source)
            if not statements:
                report.empty.append(source.name)
                continue

            stamp = (now or datetime.now(timezone.utc)).isoformat()
            body = "\n\n".join(statements)
            target.write_text(
                f"-- Generated by d1-kyt from {source.name}\n"
                f"-- {stamp}\n\n{body}\n",
                encoding="utf-8",
            )
            logger.debug("Built %s from %s", target, source.name)
            report.built.append(target)
        return report
