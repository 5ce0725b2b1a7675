"""Manifest storage interface.

The add command only needs to load and save POMs; keeping that behind a
small interface lets tests run the command against an in-memory store.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .pom_models import PomModel
from .pom_parser import parse_pom
from .pom_writer import write_pom


class PomStore(ABC):
    """Loads and saves :class:`PomModel` instances by path."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Return whether a POM is stored at ``path``."""

    @abstractmethod
    def load(self, path: Path) -> PomModel:
        """Read the POM at ``path``.

        Raises:
            OSError: If the POM cannot be read.
        """

    @abstractmethod
    def save(self, model: PomModel, path: Path) -> None:
        """Write ``model`` to ``path``, replacing what was there."""


class XmlPomStore(PomStore):
    """Stores POMs as ``pom.xml`` files on the local filesystem."""

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def load(self, path: Path) -> PomModel:
        return parse_pom(path)

    def save(self, model: PomModel, path: Path) -> None:
        write_pom(model, path)
