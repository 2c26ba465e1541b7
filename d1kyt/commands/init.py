"""``d1-kyt init``: scaffold the d1-kyt folder, config and table helper."""

from pathlib import Path

from d1kyt.cli.command import CmdBase
from d1kyt.config import (
    CONFIG_FILE,
    D1_KYT_DIR,
    DEFAULT_DB_DIR,
    DEFAULT_MIGRATIONS_DIR,
    MIGRATIONS_SUBDIR,
    read_wrangler_config,
)
from d1kyt.log import logger

logger = logger.getChild(__name__)

CONFIG_TEMPLATE = '''\
from d1kyt.config import define_config

config = define_config(
    migrations_dir="{migrations_dir}",
    db_dir="{db_dir}",
    naming_strategy="sequential",
)
'''

TABLES_TEMPLATE = '''\
from d1kyt.migrate import create_use_table

use_table = create_use_table()
'''

TABLES_FILE = "tables.py"


class CmdInit(CmdBase):
    """Initialize a project for d1-kyt."""

    def _mkdir(self, path: Path) -> None:
        from d1kyt.ui import ui

        if not path.exists():
            path.mkdir(parents=True)
            ui.write(f"Created: {path.relative_to(self.root).as_posix()}/")

    def _write(self, path: Path, content: str) -> None:
        from d1kyt.ui import ui

        relpath = path.relative_to(self.root).as_posix()
        if path.exists():
            ui.write(f"Skipped: {relpath} (already exists)")
            return
        path.write_text(content, encoding="utf-8")
        ui.write(f"Created: {relpath}")

    def run(self):
        from d1kyt.ui import ui

        logger.debug("Initializing d1-kyt in %s", self.root)
        db_dir = self.args.db_dir
        migrations_dir = read_wrangler_config(self.root)
        if migrations_dir:
            ui.write(f"Detected wrangler migrations_dir: {migrations_dir}")
        else:
            migrations_dir = DEFAULT_MIGRATIONS_DIR

        d1_kyt_dir = self.root / D1_KYT_DIR
        self._mkdir(d1_kyt_dir)
        self._mkdir(d1_kyt_dir / MIGRATIONS_SUBDIR)
        self._write(
            d1_kyt_dir / CONFIG_FILE,
            CONFIG_TEMPLATE.format(migrations_dir=migrations_dir, db_dir=db_dir),
        )

        abs_db_dir = self.root / db_dir
        self._mkdir(abs_db_dir)
        self._write(abs_db_dir / TABLES_FILE, TABLES_TEMPLATE)

        ui.write("\nNext steps:")
        ui.write("  1. Create migration: d1-kyt migrate:create <name>")
        ui.write("  2. Build migrations: d1-kyt migrate:build")
        ui.write(
            "  3. Apply migrations: wrangler d1 migrations apply <db> --local"
        )
        return 0


def add_parser(subparsers, parent_parser):
    """Register ``d1-kyt init``."""
    INIT_HELP = "Initialize d1-kyt/ folder and config."

    init_parser = subparsers.add_parser(
        "init",
        parents=[parent_parser],
        description=INIT_HELP,
        help=INIT_HELP,
    )
    init_parser.add_argument(
        "--db-dir",
        default=DEFAULT_DB_DIR,
        help=f"Directory for {TABLES_FILE} (default: {DEFAULT_DB_DIR}).",
    )
    init_parser.set_defaults(func=CmdInit)
