"""Console output for CLI commands, kept apart from logging."""

import sys
from typing import Optional, TextIO


class Console:
    """Writes user-facing text to stdout/stderr.

    Attributes:
        _out: Stream for regular output (defaults to ``sys.stdout``).
        _err: Stream for errors (defaults to ``sys.stderr``).
    """

    def __init__(
        self, out: Optional[TextIO] = None, err: Optional[TextIO] = None
    ) -> None:
        self._out = out
        self._err = err

    def write(self, *objects: object, sep: str = " ") -> None:
        print(*objects, sep=sep, file=self._out or sys.stdout)

    def error_write(self, *objects: object, sep: str = " ") -> None:
        print(*objects, sep=sep, file=self._err or sys.stderr)


ui = Console()
