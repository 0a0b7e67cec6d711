"""
Constants and model parameter definitions for the STOKES disc reflection model.

This module contains constants used throughout the polarization synthesis,
including:

- Numerical regularization
- Basis reflection table file names
- Keys used to talk to the host (filters and metadata)
- The model parameter table (names, defaults and allowed domains)

References
----------
.. [1] Podgorny, J., Marin, F., and Dovčiak, M. (2022). MNRAS, 510, 4723-4735.
"""

from typing import Dict, Optional, Tuple

# =============================================================================
# Numerical Constants
# =============================================================================

#: Regularization added to denominators to avoid division by exact zero
EPSILON: float = 1e-99

#: Period of the polarization angle [degrees]
ANGLE_PERIOD: float = 180.0

#: Largest jump allowed between adjacent unwrapped angles [degrees]
ANGLE_HALF_PERIOD: float = 90.0

# =============================================================================
# Basis Reflection Tables
# =============================================================================

#: Reflection table for unpolarized primary illumination
UNPOLARIZED_TABLE: str = "stokes-neutral-iso-UNPOL-disc.fits"

#: Reflection table for horizontally (0 deg) polarized primary illumination
HORIZONTAL_TABLE: str = "stokes-neutral-iso-HRPOL-disc.fits"

#: Reflection table for diagonally (45 deg) polarized primary illumination
DIAGONAL_TABLE: str = "stokes-neutral-iso-45DEG-disc.fits"

# =============================================================================
# Host Keys
# =============================================================================

#: Name of the interpolation filter selecting the Stokes channel (0=I, 1=Q, 2=U)
STOKES_FILTER: str = "Stokes"

#: Metadata tag read to resolve the automatic output mode
STOKES_TAG: str = "Stokes"

#: Metadata key under which the observer inclination is published
INCLINATION_KEY: str = "inc_degrees"

#: Metadata key holding the basis table directory
TABLE_DIRECTORY_KEY: str = "XSDIR"

#: printf-style format of the published inclination
INCLINATION_FORMAT: str = "%12.6f"

# =============================================================================
# Model Parameters
# =============================================================================

#: Model parameters in host order: name -> (default, lower, upper, unit).
#: A bound of None means the domain is left to the interpolation tables.
MODEL_PARAMETERS: Dict[str, Tuple[float, Optional[float], Optional[float], str]] = {
    "Size": (0.3, None, None, ""),
    "PhoIndex": (2.0, None, None, ""),
    "cos_incl": (0.775, 0.0, 1.0, ""),
    "pol_deg": (0.0, 0.0, 1.0, ""),
    "chi": (0.0, -90.0, 90.0, "deg"),
    "pos_ang": (0.0, -90.0, 90.0, "deg"),
    "zshift": (0.0, None, None, ""),
    "Stokes": (1.0, -1.0, 10.0, ""),
}

#: Parameters whose domain excludes both bounds (angles degenerate by 180 deg)
OPEN_INTERVAL_PARAMETERS: Tuple[str, ...] = ("chi", "pos_ang")

#: Number of continuum parameters passed to the table interpolation
N_CONTINUUM_PARAMETERS: int = 4

# =============================================================================
# Default Energy Grid
# =============================================================================

#: Lower edge of the default logarithmic energy grid [keV]
DEFAULT_E_MIN: float = 1.0

#: Upper edge of the default logarithmic energy grid [keV]
DEFAULT_E_MAX: float = 100.0

#: Number of bins of the default energy grid
DEFAULT_N_BINS: int = 200


def get_parameter_default(name: str) -> float:
    """
    Get the default value of a model parameter.

    Parameters
    ----------
    name : str
        Parameter name as listed in :data:`MODEL_PARAMETERS`.

    Returns
    -------
    float
        Default value.

    Raises
    ------
    ValueError
        If the parameter is not known.
    """
    if name not in MODEL_PARAMETERS:
        raise ValueError(
            f"Unknown parameter: {name}. "
            f"Supported: {', '.join(MODEL_PARAMETERS)}"
        )
    return MODEL_PARAMETERS[name][0]
