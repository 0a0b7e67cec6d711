"""
Basis reflection spectra.

The reflection tables are FITS additive table models, one per illumination
state of the primary (unpolarized, horizontally polarized, polarized at 45°),
each holding the I, Q and U spectra selected through the ``Stokes`` filter.
Reading and interpolating these tables is the job of the host's table
engine, reached through :class:`TableInterpolator`.

Every evaluation requests fresh spectra; nothing is cached, so edited tables
or changed parameters are always picked up.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Tuple
import numpy as np

from stokes_disc.config import BasisTablePaths
from stokes_disc.constants import STOKES_FILTER, N_CONTINUUM_PARAMETERS
from stokes_disc.energy import EnergyGrid
from stokes_disc.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Basis(IntEnum):
    """Illumination state of the primary radiation in a reflection table."""

    UNPOLARIZED = 0
    HORIZONTAL = 1
    DIAGONAL = 2


class StokesChannel(IntEnum):
    """Value of the ``Stokes`` table filter."""

    I = 0
    Q = 1
    U = 2


class TableInterpolator(ABC):
    """Port to the host's table model interpolation engine."""

    @abstractmethod
    def interpolate(
        self,
        energies: np.ndarray,
        parameters: Sequence[float],
        table_file: str,
        filter_name: str,
        filter_value: float,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Interpolate one spectrum of a table model onto an energy grid.

        Parameters
        ----------
        energies : ndarray
            Bin edges, length N+1.
        parameters : sequence of float
            Continuum parameters (size, photon index, cos_incl, redshift).
        table_file : str
            Path of the table file.
        filter_name : str
            Name of the spectrum filter.
        filter_value : float
            Filter value selecting the spectrum.

        Returns
        -------
        flux : ndarray
            Interpolated spectrum, length N.
        error : ndarray
            Interpolated uncertainty, length N.
        """


@dataclass(frozen=True, eq=False)
class BasisSpectrumSet:
    """
    Interpolated basis spectra of one evaluation.

    Attributes
    ----------
    spectra : ndarray
        Read-only array of shape (3, 3, N) indexed by [Basis, StokesChannel,
        bin]. For an unpolarized set only [UNPOLARIZED, I] is filled.
    polarized : bool
        True if all nine spectra were loaded.
    """

    spectra: np.ndarray
    polarized: bool = True

    def __post_init__(self):
        spectra = np.array(self.spectra, dtype=float)
        if spectra.ndim != 3 or spectra.shape[:2] != (3, 3):
            raise ValueError(f"Basis spectra must have shape (3, 3, N), got {spectra.shape}")
        spectra.flags.writeable = False
        object.__setattr__(self, "spectra", spectra)

    @property
    def n_bins(self) -> int:
        return self.spectra.shape[2]

    def get(self, basis: Basis, channel: StokesChannel) -> np.ndarray:
        """Spectrum of one basis state and Stokes channel."""
        return self.spectra[basis, channel]


def _request(
    interpolator: TableInterpolator,
    grid: EnergyGrid,
    continuum: Tuple[float, ...],
    table_file: str,
    channel: StokesChannel,
) -> np.ndarray:
    logger.debug("Interpolating %s with %s=%d", table_file, STOKES_FILTER, channel)
    try:
        flux, _ = interpolator.interpolate(
            grid.edges, continuum, table_file, STOKES_FILTER, float(channel)
        )
    except (OSError, ValueError, KeyError) as err:
        raise ConfigurationError(
            f"Cannot interpolate {STOKES_FILTER}={int(channel)} from table {table_file}: {err}"
        ) from err

    flux = np.asarray(flux, dtype=float)
    if flux.shape != (grid.n_bins,):
        raise ConfigurationError(
            f"Table {table_file} returned {flux.shape} values for {grid.n_bins} bins"
        )
    if not np.all(np.isfinite(flux)):
        raise ConfigurationError(f"Table {table_file} returned non-finite values")
    return flux


def load_basis_spectra(
    grid: EnergyGrid,
    continuum: Sequence[float],
    paths: BasisTablePaths,
    interpolator: TableInterpolator,
    polarized: bool = True,
) -> BasisSpectrumSet:
    """
    Load the basis reflection spectra for one evaluation.

    Parameters
    ----------
    grid : EnergyGrid
        Energy grid to interpolate onto.
    continuum : sequence of float
        Continuum parameters (size, photon index, cos_incl, redshift).
    paths : BasisTablePaths
        Resolved table paths.
    interpolator : TableInterpolator
        Host table engine.
    polarized : bool, optional
        If True (default) request all nine spectra, otherwise only the
        unpolarized Stokes I spectrum.

    Returns
    -------
    BasisSpectrumSet
        The loaded spectra.

    Raises
    ------
    ConfigurationError
        If any table cannot be read or interpolated. No partial set is
        returned.
    """
    continuum = tuple(float(p) for p in continuum)
    if len(continuum) != N_CONTINUUM_PARAMETERS:
        raise ValueError(
            f"Expected {N_CONTINUUM_PARAMETERS} continuum parameters, got {len(continuum)}"
        )

    spectra = np.zeros((3, 3, grid.n_bins))
    if not polarized:
        spectra[Basis.UNPOLARIZED, StokesChannel.I] = _request(
            interpolator, grid, continuum, paths.unpolarized, StokesChannel.I
        )
        return BasisSpectrumSet(spectra, polarized=False)

    # All nine spectra are needed to rebuild an arbitrary primary polarization
    for basis, table_file in zip(Basis, paths):
        for channel in StokesChannel:
            spectra[basis, channel] = _request(
                interpolator, grid, continuum, table_file, channel
            )
    return BasisSpectrumSet(spectra, polarized=True)
