"""
Output Selection
================

Maps the requested output mode to the per-bin array returned to the host.

Stokes I, Q, U and V are returned as they come out of the synthesis, i.e.
integrated over each energy bin. The degree of polarization, the two angles
and the reduced Stokes parameters are intensive quantities; they are
multiplied by the bin width so that the host, which divides every model
output by the bin width, recovers the plain per-bin values.

Output modes
------------
====  ==================  ==========================================
 -1   AUTO                resolved from the ``Stokes`` metadata tag
  0   FLUX_UNPOLARIZED    photon flux, polarization switched off
  1   FLUX                photon flux (Stokes I), polarization on
  2   Q                   Stokes Q
  3   U                   Stokes U
  4   V                   Stokes V (identically zero)
  5   DEGREE              degree of polarization
  6   ANGLE_PSI           polarization angle psi = 0.5 atan2(U, Q)
  7   ANGLE_BETA          "Stokes" angle beta = 0.5 asin(V / |P|)
  8   Q_OVER_I            Q / I
  9   U_OVER_I            U / I
 10   V_OVER_I            V / I
====  ==================  ==========================================
"""

import logging
from enum import IntEnum
from typing import Callable, Optional, Union
import numpy as np

from stokes_disc.constants import EPSILON
from stokes_disc.energy import EnergyGrid
from stokes_disc.polarization import StokesVector
from stokes_disc.angles import DerivedQuantities

logger = logging.getLogger(__name__)


class OutputMode(IntEnum):
    """Quantity written to the output array."""

    AUTO = -1
    FLUX_UNPOLARIZED = 0
    FLUX = 1
    Q = 2
    U = 3
    V = 4
    DEGREE = 5
    ANGLE_PSI = 6
    ANGLE_BETA = 7
    Q_OVER_I = 8
    U_OVER_I = 9
    V_OVER_I = 10

    @property
    def polarized(self) -> bool:
        """True if this mode needs the full polarization computation."""
        return self is not OutputMode.FLUX_UNPOLARIZED

    @classmethod
    def from_tag(cls, tag: Union[int, float, None]) -> Optional["OutputMode"]:
        """
        Output mode encoded by a ``Stokes`` data tag.

        Tag 0 is photon flux, 1 is Stokes Q and 2 is Stokes U.

        Returns
        -------
        OutputMode or None
            None if the tag is missing or not one of 0, 1, 2.
        """
        if tag is None:
            return None
        try:
            value = float(tag)
        except (TypeError, ValueError):
            return None
        if value not in (0.0, 1.0, 2.0):
            return None
        return cls(1 + int(value))


TagReader = Callable[[], Union[int, float, None]]


def resolve_output_mode(
    mode: Union[OutputMode, int],
    tag_reader: Optional[TagReader] = None,
) -> OutputMode:
    """
    Resolve the automatic output mode.

    Parameters
    ----------
    mode : OutputMode or int
        Requested mode.
    tag_reader : callable, optional
        Returns the ``Stokes`` data tag of the spectrum being fitted, or
        None when the spectrum has none. Only called for ``AUTO``.

    Returns
    -------
    OutputMode
        ``mode`` itself unless it is ``AUTO``. An ``AUTO`` request with a
        missing or invalid tag falls back to ``FLUX_UNPOLARIZED`` with a
        warning.
    """
    mode = OutputMode(mode)
    if mode is not OutputMode.AUTO:
        return mode

    tag = tag_reader() if tag_reader is not None else None
    resolved = OutputMode.from_tag(tag)
    if resolved is None:
        logger.warning("stokes: no or wrong information on data type (counts, q, u)")
        logger.warning("stokes: stokes = par8 = 0 (i.e. counts) will be used")
        return OutputMode.FLUX_UNPOLARIZED
    return resolved


def select_output(
    mode: Union[OutputMode, int],
    grid: EnergyGrid,
    stokes: StokesVector,
    derived: Optional[DerivedQuantities] = None,
    polarized: bool = True,
) -> np.ndarray:
    """
    Fill the output array for a resolved mode.

    Parameters
    ----------
    mode : OutputMode or int
        Resolved output mode (not ``AUTO``).
    grid : EnergyGrid
        Energy grid of the evaluation.
    stokes : StokesVector
        Observer-frame Stokes vector.
    derived : DerivedQuantities, optional
        Degree and angles. Required for modes 5-7 when polarized.
    polarized : bool, optional
        False when only the unpolarized flux was computed; every mode then
        degrades to the flux.

    Returns
    -------
    ndarray
        New array of length N.

    Raises
    ------
    ValueError
        If ``mode`` is ``AUTO`` or derived quantities are missing.
    """
    mode = OutputMode(mode)
    if mode is OutputMode.AUTO:
        raise ValueError("Output mode AUTO must be resolved before selection")

    if not polarized or mode is OutputMode.FLUX_UNPOLARIZED:
        if mode not in (OutputMode.FLUX, OutputMode.FLUX_UNPOLARIZED):
            logger.debug("Polarization disabled, output %s degrades to flux", mode.name)
        return np.array(stokes.I, dtype=float)

    raw = {
        OutputMode.FLUX: stokes.I,
        OutputMode.Q: stokes.Q,
        OutputMode.U: stokes.U,
        OutputMode.V: stokes.V,
    }
    if mode in raw:
        return np.array(raw[mode], dtype=float)

    width = grid.widths
    ratio = {
        OutputMode.Q_OVER_I: stokes.Q,
        OutputMode.U_OVER_I: stokes.U,
        OutputMode.V_OVER_I: stokes.V,
    }
    if mode in ratio:
        return ratio[mode] / (stokes.I + EPSILON) * width

    if derived is None:
        raise ValueError(f"Output mode {mode.name} needs derived quantities")
    intensive = {
        OutputMode.DEGREE: derived.degree,
        OutputMode.ANGLE_PSI: derived.psi,
        OutputMode.ANGLE_BETA: derived.beta,
    }
    return intensive[mode] * width
