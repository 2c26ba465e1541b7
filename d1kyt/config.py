"""Project configuration for d1-kyt.

The config lives in ``d1-kyt/config.py`` inside the project root and
exposes a module-level ``config`` built with ``define_config``::

    from d1kyt.config import define_config

    config = define_config(migrations_dir="migrations")
"""

import importlib.util
import json
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from d1kyt.domain.enums import NamingStrategy
from d1kyt.domain.exceptions import ConfigError
from d1kyt.log import logger

logger = logger.getChild(__name__)

D1_KYT_DIR = "d1-kyt"
CONFIG_FILE = "config.py"
MIGRATIONS_SUBDIR = "migrations"
DEFAULT_MIGRATIONS_DIR = "db/migrations"
DEFAULT_DB_DIR = "db"

WRANGLER_FILES = ("wrangler.jsonc", "wrangler.json", "wrangler.toml")

_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)


@dataclass(frozen=True)
class D1KytConfig:
    """Project settings.

    Attributes:
        migrations_dir: Where built ``.sql`` migrations are written,
                        relative to the project root.
        naming_strategy: How new migration files are prefixed.
        db_dir: Directory holding the project's table helpers.
    """

    migrations_dir: str = DEFAULT_MIGRATIONS_DIR
    naming_strategy: NamingStrategy = NamingStrategy.SEQUENTIAL
    db_dir: str = DEFAULT_DB_DIR


def define_config(
    migrations_dir: str = DEFAULT_MIGRATIONS_DIR,
    naming_strategy: Union[NamingStrategy, str] = NamingStrategy.SEQUENTIAL,
    db_dir: str = DEFAULT_DB_DIR,
) -> D1KytConfig:
    """Build a config, validating the naming strategy.

    Raises:
        ValueError: If ``naming_strategy`` is not a known strategy.
    """
    return D1KytConfig(
        migrations_dir=migrations_dir,
        naming_strategy=NamingStrategy(naming_strategy),
        db_dir=db_dir,
    )


def config_path(root: Path) -> Path:
    return Path(root) / D1_KYT_DIR / CONFIG_FILE


def load_config(root: Path) -> Optional[D1KytConfig]:
    """Import ``d1-kyt/config.py`` under ``root`` and return its config.

    Args:
        root: Project root directory.

    Returns:
        The module's ``config`` object, or None if the file is missing.

    Raises:
        ConfigError: If the module fails to import or defines no config.
    """
    path = config_path(root)
    if not path.exists():
        return None

    spec = importlib.util.spec_from_file_location("d1kyt_project_config", path)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ConfigError(str(path), str(exc)) from exc

    config = getattr(module, "config", None)
    if not isinstance(config, D1KytConfig):
        raise ConfigError(str(path), "no D1KytConfig named 'config'")
    logger.debug("Loaded config from %s: %s", path, config)
    return config


def read_wrangler_config(root: Path) -> Optional[str]:
    """Find the D1 ``migrations_dir`` declared in a wrangler config.

    Checks ``wrangler.jsonc``, ``wrangler.json`` and ``wrangler.toml``
    in that order and uses the first D1 database entry found.

    Args:
        root: Project root directory.

    Returns:
        The migrations directory, or None if none is declared.
    """
    for filename in WRANGLER_FILES:
        path = Path(root) / filename
        if not path.exists():
            continue

        content = path.read_text(encoding="utf-8")
        try:
            if filename.endswith(".toml"):
                data = tomllib.loads(content)
            else:
                content = _BLOCK_COMMENT.sub("", _LINE_COMMENT.sub("", content))
                data = json.loads(content)
        except ValueError as exc:
            logger.warning("Ignoring unreadable %s: %s", filename, exc)
            continue

        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected an object at top level", filename)
            continue

        databases = data.get("d1_databases")
        if not isinstance(databases, list) or not databases:
            continue
        database = databases[0]
        if not isinstance(database, dict):
            continue
        migrations_dir = database.get("migrations_dir")
        if isinstance(migrations_dir, str) and migrations_dir:
            return migrations_dir
    return None
