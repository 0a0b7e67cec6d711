"""
Polarization Synthesis
======================

Combination of the basis reflection spectra into the Stokes vector of the
reflected radiation, and rotation of that vector into the observer frame.

Theory
------
The state of polarization is described by the Stokes vector [I, Q, U, V]ᵀ,
where:

- I is the total photon flux
- Q specifies linear polarization parallel/perpendicular to the projected
  rotation axis of the system
- U specifies linear polarization at ±45° to that axis
- V specifies circular polarization (zero for reflection from a neutral
  slab illuminated by linearly polarized or unpolarized light)

The reflection tables are computed for three illumination states of the
primary power law: unpolarized (U), 100% polarized along the axis (H) and
100% polarized at 45° (D). Since H and D span the plane of linear
polarization, the response to primary radiation with polarization degree p
and angle χ is, for each channel c in {I, Q, U},

    S_c = U_c + p · [ -(H_c - U_c) cos 2χ + (D_c - U_c) sin 2χ ]

The observer measures Q and U with respect to a reference direction rotated
by the position angle θ of the system axis:

    Q' = Q cos 2θ - U sin 2θ
    U' = U cos 2θ + Q sin 2θ

References
----------
.. [1] Podgorny, J., et al. (2022). MNRAS, 510, 4723-4735.

.. [2] Chandrasekhar, S. (1960). Radiative Transfer. Dover, New York.
"""

from dataclasses import dataclass, field
from typing import Union
import numpy as np

from stokes_disc.constants import EPSILON
from stokes_disc.tables import Basis, BasisSpectrumSet, StokesChannel


@dataclass
class StokesVector:
    """
    Stokes vector of the reflected radiation, per energy bin.

    Attributes
    ----------
    I : ndarray
        Photon flux per bin (Stokes I).
    Q : ndarray
        Linear polarization along/across the reference direction.
    U : ndarray
        Linear polarization at ±45° to the reference direction.
    V : ndarray
        Circular polarization. Always zero in this model.
    """

    I: np.ndarray
    Q: np.ndarray
    U: np.ndarray
    V: np.ndarray = field(default=None)

    def __post_init__(self):
        """Default V to zeros shaped like I."""
        if self.V is None:
            self.V = np.zeros_like(np.asarray(self.I, dtype=float))

    def as_array(self) -> np.ndarray:
        """Return Stokes vector as a (4, N) array."""
        return np.array([self.I, self.Q, self.U, self.V], dtype=float)

    @classmethod
    def from_array(cls, stokes: np.ndarray) -> "StokesVector":
        """Build from a (4, N) array."""
        return cls(I=stokes[0], Q=stokes[1], U=stokes[2], V=stokes[3])

    @property
    def polarized_flux(self) -> np.ndarray:
        """Polarized flux sqrt(Q² + U² + V²)."""
        return np.sqrt(self.Q**2 + self.U**2 + self.V**2)

    @property
    def degree_of_polarization(self) -> np.ndarray:
        """
        Total degree of polarization.

        Returns
        -------
        ndarray
            sqrt(Q² + U² + V²) / I, regularized so that empty bins give 0.
        """
        return self.polarized_flux / (self.I + EPSILON)


def synthesize_stokes(
    basis: BasisSpectrumSet,
    pol_deg: float,
    chi: float,
) -> StokesVector:
    """
    Combine the basis spectra into the local-frame Stokes vector.

    Parameters
    ----------
    basis : BasisSpectrumSet
        Interpolated basis reflection spectra.
    pol_deg : float
        Polarization degree of the primary radiation, 0 to 1.
    chi : float
        Polarization angle of the primary radiation [degrees].

    Returns
    -------
    StokesVector
        Stokes vector in the frame of the system axis. For an unpolarized
        basis set only I is filled; Q, U and V are zero.
    """
    unpol = basis.spectra[Basis.UNPOLARIZED]
    if not basis.polarized:
        zeros = np.zeros_like(unpol[StokesChannel.I])
        return StokesVector(
            I=unpol[StokesChannel.I].copy(),
            Q=zeros,
            U=zeros.copy(),
            V=zeros.copy(),
        )

    # Marginal response to polarized illumination, shape (3, N)
    delta_h = basis.spectra[Basis.HORIZONTAL] - unpol
    delta_d = basis.spectra[Basis.DIAGONAL] - unpol

    chi_rad = np.deg2rad(chi)
    c2x = np.cos(2 * chi_rad)
    s2x = np.sin(2 * chi_rad)

    iqu = unpol + pol_deg * (-delta_h * c2x + delta_d * s2x)

    return StokesVector(
        I=iqu[StokesChannel.I],
        Q=iqu[StokesChannel.Q],
        U=iqu[StokesChannel.U],
    )


def rotation_matrix(theta: Union[float, np.ndarray]) -> np.ndarray:
    """
    Compute the Stokes vector rotation matrix R(θ).

    Rotates the reference direction for Q and U by the position angle θ.

    Parameters
    ----------
    theta : float
        Position angle of the system rotation axis [degrees].

    Returns
    -------
    ndarray
        4×4 rotation matrix.

    Notes
    -----
    The rotation matrix is:

    .. math::

        R(\\theta) = \\begin{bmatrix}
            1 & 0 & 0 & 0 \\\\
            0 & \\cos(2\\theta) & -\\sin(2\\theta) & 0 \\\\
            0 & \\sin(2\\theta) & \\cos(2\\theta) & 0 \\\\
            0 & 0 & 0 & 1
        \\end{bmatrix}
    """
    theta_rad = np.deg2rad(theta)
    c2t = np.cos(2 * theta_rad)
    s2t = np.sin(2 * theta_rad)

    R = np.array([
        [1.0, 0.0, 0.0, 0.0],
        [0.0, c2t, -s2t, 0.0],
        [0.0, s2t, c2t, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])

    return R


def rotate_stokes(
    stokes: StokesVector,
    theta: float,
) -> StokesVector:
    """
    Rotate a Stokes vector into the observer frame.

    Parameters
    ----------
    stokes : StokesVector
        Stokes vector in the frame of the system axis.
    theta : float
        Position angle of the system rotation axis [degrees].

    Returns
    -------
    StokesVector
        New Stokes vector; its arrays never alias those of ``stokes``.
    """
    s_in = stokes.as_array()
    if theta == 0.0:
        return StokesVector.from_array(s_in)

    s_out = rotation_matrix(theta) @ s_in
    return StokesVector.from_array(s_out)
