"""
STOKES Disc Reflection Model
============================

Polarized reflection from a distant, axially symmetric neutral disc
illuminated by an (un)polarized power-law primary, computed from the
reflection tables of the STOKES Monte Carlo code.

This module provides the primary interface: it ties together the basis
table loading, the polarization synthesis, the rotation into the observer
frame, the derived quantities and the output selection.

References
----------
.. [1] Podgorny, J., Marin, F., and Dovčiak, M. (2022). X-ray polarization
       properties of partially ionized equatorial obscurers around
       accreting compact objects. MNRAS, 510, 4723-4735.

.. [2] Dovčiak, M., Karas, V., and Yaqoob, T. (2004). An extended scheme for
       fitting X-ray data with accretion disk spectra in the strong
       gravity regime. ApJS, 153, 205-221.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union
import numpy as np

from stokes_disc.angles import DerivedQuantities, compute_derived_quantities
from stokes_disc.config import TableConfig
from stokes_disc.constants import STOKES_TAG
from stokes_disc.diagnostics import (
    STOKES_DUMP,
    PARAMETER_DUMP,
    write_stokes_dump,
    write_parameter_dump,
)
from stokes_disc.energy import EnergyGrid
from stokes_disc.metadata import MetadataStore, DictMetadataStore, publish_inclination
from stokes_disc.output import OutputMode, resolve_output_mode, select_output
from stokes_disc.parameters import ModelParameters
from stokes_disc.polarization import StokesVector, synthesize_stokes, rotate_stokes
from stokes_disc.tables import TableInterpolator, load_basis_spectra

logger = logging.getLogger(__name__)


@dataclass
class ModelResult:
    """
    Results of one model evaluation.

    Attributes
    ----------
    grid : EnergyGrid
        Energy grid of the evaluation.
    mode : OutputMode
        Resolved output mode.
    stokes : StokesVector
        Observer-frame Stokes vector per bin. Only I is meaningful when
        polarization is switched off.
    derived : DerivedQuantities or None
        Degree and angles of polarization; None when polarization is off.
    output : ndarray
        Array selected by ``mode``.
    inclination : float
        Observer inclination [degrees].
    """

    grid: EnergyGrid
    mode: OutputMode
    stokes: StokesVector
    derived: Optional[DerivedQuantities]
    output: np.ndarray
    inclination: float

    @property
    def polarized(self) -> bool:
        return self.derived is not None

    def to_dataset(self):
        """
        Per-bin results as an ``xarray.Dataset``.

        Returns
        -------
        xarray.Dataset
            Variables ``I``, ``Q``, ``U``, ``V`` and, when polarized,
            ``degree``, ``psi`` and ``beta`` on the ``energy`` coordinate
            (bin midpoints), plus ``e_lo`` / ``e_hi`` bin edges.
        """
        import xarray as xr

        data_vars = {
            "e_lo": ("energy", self.grid.edges[:-1]),
            "e_hi": ("energy", self.grid.edges[1:]),
            "I": ("energy", self.stokes.I),
            "Q": ("energy", self.stokes.Q),
            "U": ("energy", self.stokes.U),
            "V": ("energy", self.stokes.V),
            "output": ("energy", self.output),
        }
        if self.derived is not None:
            data_vars["degree"] = ("energy", self.derived.degree)
            data_vars["psi"] = ("energy", self.derived.psi, {"units": "deg"})
            data_vars["beta"] = ("energy", self.derived.beta, {"units": "deg"})

        return xr.Dataset(
            data_vars,
            coords={"energy": ("energy", self.grid.midpoints, {"units": "keV"})},
            attrs={"mode": self.mode.name, "inc_degrees": self.inclination},
        )


class StokesDiscModel:
    """
    Polarized disc reflection model.

    Each evaluation is independent: the basis spectra are requested again
    from the table engine every time and no state is carried between calls.

    Parameters
    ----------
    interpolator : TableInterpolator
        Host engine interpolating the reflection tables.
    metadata : MetadataStore, optional
        Host metadata. Used to resolve the automatic output mode and the
        table directory, and to publish the inclination. Defaults to an
        empty in-memory store.
    table_directory : str, optional
        Directory of the reflection tables, overriding ``XSDIR``.
    diagnostics_dir : str or Path, optional
        If set, ``parameters.txt`` is written there after every evaluation
        and ``stokes.dat`` after every polarized one.

    Examples
    --------
    >>> from stokes_disc import StokesDiscModel, EnergyGrid, ModelParameters
    >>> model = StokesDiscModel(interpolator)
    >>> grid = EnergyGrid.logspace(1.0, 100.0, 200)
    >>> result = model.evaluate(grid, ModelParameters(pol_deg=0.5, stokes=5))
    >>> print(result.derived.degree)

    Notes
    -----
    An evaluation follows these steps:

    1. Validate the parameters
    2. Resolve the output mode (``AUTO`` from the ``Stokes`` data tag)
    3. Resolve the table paths
    4. Load the basis spectra (nine if polarized, one otherwise)
    5. Synthesize the local Stokes vector for the primary polarization
    6. Rotate it by the position angle
    7. Compute degree and angles of polarization
    8. Select the output array
    9. Publish the inclination, write diagnostics
    """

    def __init__(
        self,
        interpolator: TableInterpolator,
        metadata: Optional[MetadataStore] = None,
        table_directory: Optional[str] = None,
        diagnostics_dir: Optional[Union[str, Path]] = None,
    ):
        self.interpolator = interpolator
        self.metadata = metadata if metadata is not None else DictMetadataStore()
        self.table_directory = table_directory
        self.diagnostics_dir = Path(diagnostics_dir) if diagnostics_dir is not None else None

    def evaluate(
        self,
        energies: Union[EnergyGrid, Sequence[float], np.ndarray],
        params: Union[ModelParameters, Sequence[float]],
    ) -> ModelResult:
        """
        Evaluate the model on an energy grid.

        Parameters
        ----------
        energies : EnergyGrid or array_like
            Bin edges, N+1 strictly increasing energies [keV].
        params : ModelParameters or sequence of float
            Model parameters, or the eight-element host parameter vector.

        Returns
        -------
        ModelResult
            Output array together with the intermediate quantities.

        Raises
        ------
        ParameterOutOfRangeError
            If a parameter lies outside its domain.
        ConfigurationError
            If a reflection table cannot be read or interpolated.
        """
        grid = EnergyGrid.from_edges(energies)
        if not isinstance(params, ModelParameters):
            params = ModelParameters.from_sequence(params)
        params.validate()

        mode = resolve_output_mode(
            params.mode, lambda: self.metadata.read_tag(STOKES_TAG)
        )
        polarized = mode.polarized
        logger.debug("Evaluating %d bins, output %s", grid.n_bins, mode.name)

        config = TableConfig.from_metadata(self.metadata, self.table_directory)
        basis = load_basis_spectra(
            grid,
            params.continuum,
            config.resolve_paths(),
            self.interpolator,
            polarized=polarized,
        )

        local = synthesize_stokes(basis, params.pol_deg, params.chi)
        derived = None
        if polarized:
            stokes = rotate_stokes(local, params.pos_ang)
            derived = compute_derived_quantities(stokes)
        else:
            stokes = local

        output = select_output(mode, grid, stokes, derived, polarized=polarized)
        inclination = publish_inclination(self.metadata, params.cos_incl)

        if self.diagnostics_dir is not None:
            self._write_diagnostics(grid, params, stokes, derived, inclination)

        return ModelResult(
            grid=grid,
            mode=mode,
            stokes=stokes,
            derived=derived,
            output=output,
            inclination=inclination,
        )

    def __call__(
        self,
        energies: Union[EnergyGrid, Sequence[float], np.ndarray],
        params: Union[ModelParameters, Sequence[float]],
    ) -> np.ndarray:
        """Evaluate the model and return only the output array."""
        return self.evaluate(energies, params).output

    def _write_diagnostics(
        self,
        grid: EnergyGrid,
        params: ModelParameters,
        stokes: StokesVector,
        derived: Optional[DerivedQuantities],
        inclination: float,
    ):
        self.diagnostics_dir.mkdir(parents=True, exist_ok=True)
        write_parameter_dump(self.diagnostics_dir / PARAMETER_DUMP, params, inclination)
        if derived is not None:
            write_stokes_dump(self.diagnostics_dir / STOKES_DUMP, grid, stokes, derived)


def stokes_disc(
    energies: Union[EnergyGrid, Sequence[float], np.ndarray],
    params: Union[ModelParameters, Sequence[float]],
    interpolator: TableInterpolator,
    metadata: Optional[MetadataStore] = None,
    table_directory: Optional[str] = None,
) -> np.ndarray:
    """
    Evaluate the disc reflection model once.

    Parameters
    ----------
    energies : EnergyGrid or array_like
        Bin edges [keV].
    params : ModelParameters or sequence of float
        Model parameters.
    interpolator : TableInterpolator
        Host table engine.
    metadata : MetadataStore, optional
        Host metadata.
    table_directory : str, optional
        Directory of the reflection tables.

    Returns
    -------
    ndarray
        Output array of length N.
    """
    model = StokesDiscModel(interpolator, metadata, table_directory)
    return model(energies, params)
