"""
Location of the basis reflection tables.

The three basis tables are looked up in a single directory. The directory is
resolved once per evaluation with the following precedence:

1. An explicit directory passed by the caller.
2. The ``XSDIR`` string stored in the host metadata.
3. The current working directory (bare file names) when neither is set.
"""

import os
from dataclasses import dataclass
from typing import NamedTuple, Optional, TYPE_CHECKING

from stokes_disc.constants import (
    UNPOLARIZED_TABLE,
    HORIZONTAL_TABLE,
    DIAGONAL_TABLE,
    TABLE_DIRECTORY_KEY,
)

if TYPE_CHECKING:
    from stokes_disc.metadata import MetadataStore


class BasisTablePaths(NamedTuple):
    """Resolved paths of the unpolarized, horizontal and diagonal tables."""

    unpolarized: str
    horizontal: str
    diagonal: str


@dataclass(frozen=True)
class TableConfig:
    """
    Immutable basis table configuration.

    Attributes
    ----------
    directory : str
        Directory holding the tables. Empty means the current directory.
    unpolarized : str
        File name of the unpolarized-illumination table.
    horizontal : str
        File name of the horizontally polarized illumination table.
    diagonal : str
        File name of the 45 deg polarized illumination table.
    """

    directory: str = ""
    unpolarized: str = UNPOLARIZED_TABLE
    horizontal: str = HORIZONTAL_TABLE
    diagonal: str = DIAGONAL_TABLE

    @classmethod
    def from_metadata(
        cls,
        store: Optional["MetadataStore"] = None,
        directory: Optional[str] = None,
    ) -> "TableConfig":
        """
        Resolve the table directory.

        Parameters
        ----------
        store : MetadataStore, optional
            Host metadata; its ``XSDIR`` string is used when no explicit
            directory is given.
        directory : str, optional
            Explicit directory override.

        Returns
        -------
        TableConfig
            Configuration with the resolved directory.
        """
        if directory is None:
            directory = store.read_string(TABLE_DIRECTORY_KEY) if store else ""
        return cls(directory=directory or "")

    def resolve_paths(self) -> BasisTablePaths:
        """
        Build the full paths of the three basis tables.

        Returns
        -------
        BasisTablePaths
            Bare file names when no directory is configured, otherwise the
            file names joined to the directory (a trailing ``/`` is not
            doubled).
        """
        return BasisTablePaths(
            unpolarized=self._join(self.unpolarized),
            horizontal=self._join(self.horizontal),
            diagonal=self._join(self.diagonal),
        )

    def _join(self, filename: str) -> str:
        if not self.directory:
            return filename
        return os.path.join(self.directory, filename)
