"""
stokes_disc: Polarized Reflection from Distant Accretion Discs
===============================================================

A Python implementation of the STOKES disc reflection model: the
polarization (Stokes I, Q, U, V) of X-rays reflected off a distant, neutral,
axially symmetric disc illuminated by a power-law corona, computed from
tabulated reflection spectra for three illumination states of the primary.

This package implements the model described in:

    Podgorny, J., Marin, F., and Dovčiak, M. (2022).
    MNRAS, 510, 4723-4735.

Main Classes
------------
StokesDiscModel
    Main class evaluating the model on an energy grid.

Modules
-------
tables
    Loading of the basis reflection spectra through the host table engine.
polarization
    Synthesis of the Stokes vector and rotation into the observer frame.
angles
    Degree of polarization and unwrapped polarization angles.
output
    Output modes and output array selection.
metadata
    Host metadata access and inclination publishing.
config
    Location of the reflection tables.
diagnostics
    Optional text dumps of an evaluation.

Example
-------
>>> from stokes_disc import StokesDiscModel, EnergyGrid, ModelParameters
>>> model = StokesDiscModel(interpolator)
>>> flux = model(EnergyGrid.logspace(), ModelParameters(pol_deg=0.3, chi=20.0))
"""

__version__ = "0.1.0"
__author__ = "stokes-disc developers"

from stokes_disc.model import StokesDiscModel, ModelResult, stokes_disc
from stokes_disc.energy import EnergyGrid
from stokes_disc.parameters import ModelParameters
from stokes_disc.output import OutputMode
from stokes_disc.tables import TableInterpolator
from stokes_disc.metadata import MetadataStore, DictMetadataStore
from stokes_disc.exceptions import (
    StokesDiscError,
    ConfigurationError,
    ParameterOutOfRangeError,
)

__all__ = [
    "StokesDiscModel",
    "ModelResult",
    "stokes_disc",
    "EnergyGrid",
    "ModelParameters",
    "OutputMode",
    "TableInterpolator",
    "MetadataStore",
    "DictMetadataStore",
    "StokesDiscError",
    "ConfigurationError",
    "ParameterOutOfRangeError",
    "__version__",
]
