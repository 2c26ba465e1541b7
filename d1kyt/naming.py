"""Prefixes for new migration files."""

import re
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from funcy import keep

from d1kyt.domain.enums import NamingStrategy

SEQUENTIAL_PATTERN = re.compile(r"^(\d{4})_.*\.(py|sql)$")


def generate_timestamp_prefix(date: Optional[datetime] = None) -> str:
    """Return ``YYYYMMDDHHMMSS`` for ``date`` (now when omitted), in UTC."""
    date = date or datetime.now(timezone.utc)
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    return date.strftime("%Y%m%d%H%M%S")


def _sequence_number(filename: str) -> Optional[int]:
    match = SEQUENTIAL_PATTERN.match(filename)
    return int(match.group(1)) if match else None


def generate_sequential_prefix(existing_files: Iterable[str]) -> str:
    """Return the next 4-digit prefix after the highest numbered file.

    Only ``NNNN_<name>.py`` and ``NNNN_<name>.sql`` files count; gaps
    are not filled.
    """
    numbers = list(keep(_sequence_number, existing_files))
    return f"{max(numbers, default=0) + 1:04d}"


def generate_migration_prefix(
    strategy: Union[NamingStrategy, str],
    existing_files: Iterable[str],
    date: Optional[datetime] = None,
) -> str:
    if NamingStrategy(strategy) is NamingStrategy.TIMESTAMP:
        return generate_timestamp_prefix(date)
    return generate_sequential_prefix(existing_files)


def to_snake_name(name: str) -> str:
    """Convert ``createUsers`` / ``create users`` / ``create-users`` to snake_case."""
    name = re.sub(r"([a-z])([A-Z])", r"\1_\2", name)
    name = re.sub(r"[\s-]+", "_", name)
    return name.lower()
