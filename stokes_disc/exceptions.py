"""
Exceptions raised by the STOKES disc reflection model.
"""


class StokesDiscError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(StokesDiscError):
    """
    A basis table is missing or unreadable, or the interpolation engine
    rejected the requested parameters.

    Fatal for the evaluation: no output is produced.
    """


class ParameterOutOfRangeError(StokesDiscError, ValueError):
    """A model parameter lies outside its documented domain."""
