"""
Derived polarization quantities.

From the observer-frame Stokes vector this module computes, per energy bin,

- the degree of polarization  p = sqrt(Q² + U² + V²) / I
- the polarization angle      ψ = ½ atan2(U, Q)
- the "Stokes" angle          β = ½ asin(V / sqrt(Q² + U² + V²))

Both angles are defined modulo 180°. To give continuous curves across the
energy grid they are unwrapped, starting from the highest-energy bin, and
then shifted as a whole by 180° if the unwrapped curve drifted away from
the [-90°, 90°] band.
"""

from dataclasses import dataclass
import numpy as np

from stokes_disc.constants import EPSILON, ANGLE_PERIOD, ANGLE_HALF_PERIOD
from stokes_disc.polarization import StokesVector


@dataclass
class DerivedQuantities:
    """
    Degree and angles of polarization per energy bin.

    Attributes
    ----------
    degree : ndarray
        Degree of polarization, 0 to 1.
    psi : ndarray
        Polarization angle [degrees], unwrapped and re-centered.
    beta : ndarray
        Stokes angle [degrees], unwrapped and re-centered.
    """

    degree: np.ndarray
    psi: np.ndarray
    beta: np.ndarray


def unwrap_angles(angles: np.ndarray) -> np.ndarray:
    """
    Make a 180°-periodic angle sequence continuous.

    Bins are processed from the last (highest energy) to the first. Each
    angle is shifted by multiples of 180° until it lies within 90° of the
    already unwrapped angle of the next bin. A jump of exactly 90° is kept.

    Parameters
    ----------
    angles : array_like
        Angles [degrees].

    Returns
    -------
    ndarray
        Unwrapped angles; adjacent values differ by at most 90°.
    """
    unwrapped = np.array(angles, dtype=float)
    for i in range(unwrapped.size - 2, -1, -1):
        while unwrapped[i] - unwrapped[i + 1] > ANGLE_HALF_PERIOD:
            unwrapped[i] -= ANGLE_PERIOD
        while unwrapped[i + 1] - unwrapped[i] > ANGLE_HALF_PERIOD:
            unwrapped[i] += ANGLE_PERIOD
    return unwrapped


def recenter_angles(angles: np.ndarray) -> np.ndarray:
    """
    Shift an unwrapped angle sequence by 180° towards the ±90° band.

    Parameters
    ----------
    angles : array_like
        Unwrapped angles [degrees].

    Returns
    -------
    ndarray
        ``angles - 180`` if max + min > 180, ``angles + 180`` if
        max + min < -180, a copy of ``angles`` otherwise.
    """
    angles = np.array(angles, dtype=float)
    if angles.size == 0:
        return angles
    centre = angles.max() + angles.min()
    if centre > ANGLE_PERIOD:
        angles -= ANGLE_PERIOD
    elif centre < -ANGLE_PERIOD:
        angles += ANGLE_PERIOD
    return angles


def compute_derived_quantities(stokes: StokesVector) -> DerivedQuantities:
    """
    Degree of polarization, polarization angle and Stokes angle.

    Parameters
    ----------
    stokes : StokesVector
        Observer-frame Stokes vector.

    Returns
    -------
    DerivedQuantities
        Per-bin degree and continuous angles. Bins with no flux yield a
        degree of 0 rather than NaN.
    """
    Q, U, V = stokes.Q, stokes.U, stokes.V
    norm2 = Q**2 + U**2 + V**2

    psi = np.rad2deg(0.5 * np.arctan2(U, Q))
    beta = np.rad2deg(0.5 * np.arcsin(V / np.sqrt(norm2 + EPSILON)))

    return DerivedQuantities(
        degree=stokes.degree_of_polarization,
        psi=recenter_angles(unwrap_angles(psi)),
        beta=recenter_angles(unwrap_angles(beta)),
    )
