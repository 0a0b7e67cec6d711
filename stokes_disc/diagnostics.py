"""
Diagnostic output.

Optional text dumps of an evaluation, not read back by the model:

- ``stokes.dat``: one tab-separated line per energy bin with the bin
  midpoint, the I, Q, U and V densities (per unit energy), the degree of
  polarization and the two angles.
- ``parameters.txt``: the parameters of the evaluation and the derived
  inclination.
"""

import logging
from pathlib import Path
from typing import Union
import numpy as np

from stokes_disc.angles import DerivedQuantities
from stokes_disc.energy import EnergyGrid
from stokes_disc.parameters import ModelParameters
from stokes_disc.polarization import StokesVector

logger = logging.getLogger(__name__)

#: File name of the per-bin dump
STOKES_DUMP: str = "stokes.dat"

#: File name of the parameter dump
PARAMETER_DUMP: str = "parameters.txt"


def write_stokes_dump(
    path: Union[str, Path],
    grid: EnergyGrid,
    stokes: StokesVector,
    derived: DerivedQuantities,
) -> Path:
    """
    Write the per-bin Stokes densities, degree and angles.

    Parameters
    ----------
    path : str or Path
        Output file, overwritten.
    grid : EnergyGrid
        Energy grid.
    stokes : StokesVector
        Observer-frame Stokes vector (per bin).
    derived : DerivedQuantities
        Degree and angles.

    Returns
    -------
    Path
        The file written.
    """
    path = Path(path)
    width = grid.widths
    table = np.column_stack([
        grid.midpoints,
        stokes.I / width,
        stokes.Q / width,
        stokes.U / width,
        stokes.V / width,
        derived.degree,
        derived.psi,
        derived.beta,
    ])
    np.savetxt(path, table, fmt="%E", delimiter="\t")
    logger.debug("Wrote %d bins to %s", grid.n_bins, path)
    return path


def write_parameter_dump(
    path: Union[str, Path],
    params: ModelParameters,
    inc_degrees: float,
) -> Path:
    """
    Write the evaluation parameters and the inclination.

    Parameters
    ----------
    path : str or Path
        Output file, overwritten.
    params : ModelParameters
        Parameters of the evaluation.
    inc_degrees : float
        Observer inclination [degrees].

    Returns
    -------
    Path
        The file written.
    """
    path = Path(path)
    rows = [
        ("Size", params.size),
        ("PhoIndex", params.photon_index),
        ("cos_incl", params.cos_incl),
        ("poldeg", params.pol_deg),
        ("chi", params.chi),
        ("pos_ang", params.pos_ang),
        ("zshift", params.zshift),
    ]
    with open(path, "w") as f:
        for name, value in rows:
            f.write(f"{name:<16}{value:12.6f}\n")
        f.write(f"{'Stokes':<16}{int(params.stokes):12d}\n")
        f.write(f"{'inc_degrees':<16}{inc_degrees:12.6f}\n")
    logger.debug("Wrote parameters to %s", path)
    return path
