"""
Model parameters.

The model takes eight parameters, in this order:

====  =========  ==============================================================
  1   Size       upper limit of the cosine of the incident angle integration,
                 i.e. the size of the corona illuminating the disc
  2   PhoIndex   photon index of the primary power law
  3   cos_incl   cosine of the observer inclination (1 = pole, 0 = disc)
  4   pol_deg    polarization degree of the primary radiation
  5   chi        polarization angle of the primary radiation [deg],
                 degenerate by 180 deg
  6   pos_ang    position angle of the system rotation axis [deg],
                 degenerate by 180 deg
  7   zshift     overall Doppler shift
  8   Stokes     output mode, see :class:`stokes_disc.output.OutputMode`
====  =========  ==============================================================
"""

from dataclasses import dataclass, astuple
from typing import Sequence, Tuple, Union
import numpy as np

from stokes_disc.constants import (
    MODEL_PARAMETERS,
    OPEN_INTERVAL_PARAMETERS,
    get_parameter_default,
)
from stokes_disc.exceptions import ParameterOutOfRangeError
from stokes_disc.output import OutputMode


@dataclass(frozen=True)
class ModelParameters:
    """
    Parameters of one model evaluation.

    Attributes
    ----------
    size : float
        Corona size (upper limit of the incident cosine).
    photon_index : float
        Photon index of the primary power law.
    cos_incl : float
        Cosine of the observer inclination.
    pol_deg : float
        Primary polarization degree, 0 to 1.
    chi : float
        Primary polarization angle [degrees], strictly between -90 and 90.
    pos_ang : float
        Position angle of the system axis [degrees], strictly between -90 and 90.
    zshift : float
        Redshift.
    stokes : OutputMode or int
        Output mode.
    """

    size: float = get_parameter_default("Size")
    photon_index: float = get_parameter_default("PhoIndex")
    cos_incl: float = get_parameter_default("cos_incl")
    pol_deg: float = get_parameter_default("pol_deg")
    chi: float = get_parameter_default("chi")
    pos_ang: float = get_parameter_default("pos_ang")
    zshift: float = get_parameter_default("zshift")
    stokes: Union[OutputMode, int] = OutputMode.FLUX

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "ModelParameters":
        """
        Build from a host parameter vector.

        Parameters
        ----------
        values : sequence of float
            The eight parameters in host order. The output mode is given as
            a float, as hosts store every parameter as one.

        Returns
        -------
        ModelParameters
        """
        values = list(values)
        if len(values) != len(MODEL_PARAMETERS):
            raise ParameterOutOfRangeError(
                f"Expected {len(MODEL_PARAMETERS)} parameters, got {len(values)}"
            )
        *physical, stokes = values
        return cls(*(float(v) for v in physical), stokes=_as_mode(stokes))

    @property
    def mode(self) -> OutputMode:
        return _as_mode(self.stokes)

    @property
    def continuum(self) -> Tuple[float, float, float, float]:
        """Parameters handed to the table interpolation."""
        return (self.size, self.photon_index, self.cos_incl, self.zshift)

    def validate(self) -> "ModelParameters":
        """
        Check the parameters against their documented domains.

        Returns
        -------
        ModelParameters
            ``self``, for chaining.

        Raises
        ------
        ParameterOutOfRangeError
            If a value is not finite or outside its domain, or the output
            mode is not defined.
        """
        for name, value in zip(MODEL_PARAMETERS, astuple(self)):
            _, lower, upper, unit = MODEL_PARAMETERS[name]
            if not np.isfinite(float(value)):
                raise ParameterOutOfRangeError(f"{name} must be finite, got {value}")
            if lower is None:
                continue
            unit = f" {unit}" if unit else ""
            if name in OPEN_INTERVAL_PARAMETERS:
                if not lower < value < upper:
                    raise ParameterOutOfRangeError(
                        f"{name}={value}{unit} outside ({lower}, {upper}){unit}"
                    )
            elif not lower <= value <= upper:
                raise ParameterOutOfRangeError(
                    f"{name}={value}{unit} outside [{lower}, {upper}]{unit}"
                )
        _as_mode(self.stokes)
        return self


def _as_mode(value: Union[OutputMode, int, float]) -> OutputMode:
    try:
        if float(value) != int(value):
            raise ValueError(value)
        return OutputMode(int(value))
    except (TypeError, ValueError, OverflowError) as err:
        raise ParameterOutOfRangeError(f"Undefined output mode: {value}") from err
