"""
Energy grids.

An energy grid is an array of N+1 strictly increasing bin edges defining N
bins ``[edge_i, edge_{i+1})``. Model outputs are per bin and, like the basis
tables, integrated over the bin (photon number flux per bin).
"""

from dataclasses import dataclass
from typing import Union, Sequence
import numpy as np

from stokes_disc.constants import DEFAULT_E_MIN, DEFAULT_E_MAX, DEFAULT_N_BINS


@dataclass(frozen=True, eq=False)
class EnergyGrid:
    """
    Bin edges of an energy grid.

    Attributes
    ----------
    edges : ndarray
        Bin edge energies [keV], strictly increasing, length N+1.
    """

    edges: np.ndarray

    def __post_init__(self):
        """Validate the edges and store them as a read-only float array."""
        edges = np.array(self.edges, dtype=float)
        if edges.ndim != 1 or edges.size < 2:
            raise ValueError(
                f"Energy grid needs at least 2 edges in a 1-D array, got shape {edges.shape}"
            )
        if not np.all(np.isfinite(edges)):
            raise ValueError("Energy grid edges must be finite")
        if np.any(np.diff(edges) <= 0):
            raise ValueError("Energy grid edges must be strictly increasing")
        edges.flags.writeable = False
        object.__setattr__(self, "edges", edges)

    @classmethod
    def from_edges(cls, edges: Union["EnergyGrid", Sequence[float], np.ndarray]) -> "EnergyGrid":
        """Return ``edges`` unchanged if already a grid, otherwise wrap it."""
        if isinstance(edges, cls):
            return edges
        return cls(np.asarray(edges, dtype=float))

    @classmethod
    def logspace(
        cls,
        e_min: float = DEFAULT_E_MIN,
        e_max: float = DEFAULT_E_MAX,
        n_bins: int = DEFAULT_N_BINS,
    ) -> "EnergyGrid":
        """
        Logarithmically spaced grid.

        Parameters
        ----------
        e_min : float, optional
            Lowest edge [keV]. Default is 1.
        e_max : float, optional
            Highest edge [keV]. Default is 100.
        n_bins : int, optional
            Number of bins. Default is 200.

        Returns
        -------
        EnergyGrid
            Grid with edges ``e_min * (e_max / e_min) ** (i / n_bins)``.
        """
        if e_min <= 0 or e_max <= e_min:
            raise ValueError(f"Need 0 < e_min < e_max, got {e_min}, {e_max}")
        if n_bins < 1:
            raise ValueError(f"n_bins must be positive, got {n_bins}")
        i = np.arange(n_bins + 1)
        return cls(e_min * (e_max / e_min) ** (i / n_bins))

    @property
    def n_bins(self) -> int:
        """Number of bins N."""
        return self.edges.size - 1

    @property
    def widths(self) -> np.ndarray:
        """Bin widths ``edge_{i+1} - edge_i``."""
        return np.diff(self.edges)

    @property
    def midpoints(self) -> np.ndarray:
        """Bin centers ``0.5 * (edge_i + edge_{i+1})``."""
        return 0.5 * (self.edges[:-1] + self.edges[1:])

    def __len__(self) -> int:
        return self.n_bins
