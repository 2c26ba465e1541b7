import os
from abc import ABC, abstractmethod
from pathlib import Path

from d1kyt.config import D1KytConfig, load_config
from d1kyt.domain.exceptions import NotInitializedError


class CmdBase(ABC):
    """Base class for CLI commands.

    Attributes:
        args: Parsed argparse namespace.
        root: Project root the command operates on.
    """

    def __init__(self, args) -> None:
        self.args = args
        self.root = Path(getattr(args, "cd", None) or os.getcwd())

    def do_run(self) -> int:
        return self.run()

    @abstractmethod
    def run(self) -> int:
        pass


class CmdProjectBase(CmdBase):
    """Command that needs an initialized project."""

    def __init__(self, args) -> None:
        super().__init__(args)
        self._config = None

    @property
    def config(self) -> D1KytConfig:
        """Load the project config on first access.

        Raises:
            NotInitializedError: If ``d1-kyt/config.py`` does not exist.
        """
        if self._config is None:
            self._config = load_config(self.root)
            if self._config is None:
                raise NotInitializedError()
        return self._config
