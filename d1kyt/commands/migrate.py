"""``d1-kyt migrate:*`` commands for creating and building migrations."""

from d1kyt.app.builder import MigrationBuilder
from d1kyt.cli.command import CmdProjectBase
from d1kyt.config import D1_KYT_DIR, MIGRATIONS_SUBDIR


class CmdMigrateCreate(CmdProjectBase):
    """Create a new migration module."""

    def run(self):
        from d1kyt.ui import ui

        builder = MigrationBuilder(self.root, self.config)
        path = builder.create(self.args.name)
        ui.write(f"Created: {D1_KYT_DIR}/{MIGRATIONS_SUBDIR}/{path.name}")
        ui.write("\nEdit the file, then run: d1-kyt migrate:build")
        return 0


class CmdMigrateBuild(CmdProjectBase):
    """Compile migration modules to .sql files."""

    def run(self):
        from d1kyt.ui import ui

        builder = MigrationBuilder(self.root, self.config)
        report = builder.build()

        if not report.sources:
            ui.write("No migration files to build.")
            return 0

        for name in report.empty:
            ui.write(f"Skipped: {name} (empty migration)")
        for path in report.built:
            ui.write(f"Built: {self.config.migrations_dir}/{path.name}")

        if not report.built:
            ui.write("All migrations already built.")
        else:
            ui.write(
                f"\nBuilt {len(report.built)} migration(s). "
                "Run: wrangler d1 migrations apply <db> --local"
            )
        return 0


def add_parser(subparsers, parent_parser):
    """Register ``d1-kyt migrate:create`` and ``d1-kyt migrate:build``."""
    create_parser = subparsers.add_parser(
        "migrate:create",
        parents=[parent_parser],
        help="Create a new migration file.",
    )
    create_parser.add_argument("name", help="Migration name.")
    create_parser.set_defaults(func=CmdMigrateCreate)

    build_parser = subparsers.add_parser(
        "migrate:build",
        parents=[parent_parser],
        help="Compile migrations to .sql.",
    )
    build_parser.set_defaults(func=CmdMigrateBuild)
