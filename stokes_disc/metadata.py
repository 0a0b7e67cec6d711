"""
Host metadata.

The model reads two things from its host (the ``Stokes`` data tag of the
spectrum being fitted and the ``XSDIR`` table directory) and publishes one:
the observer inclination in degrees, so that it can be shown next to the fit
parameters.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Union
import numpy as np

from stokes_disc.constants import INCLINATION_KEY, INCLINATION_FORMAT

logger = logging.getLogger(__name__)


class MetadataStore(ABC):
    """Port to the host's parameter and data-tag storage."""

    @abstractmethod
    def read_tag(self, key: str) -> Optional[float]:
        """Numeric data tag ``key`` of the current spectrum, or None."""

    @abstractmethod
    def read_string(self, key: str) -> str:
        """String value stored under ``key``; empty string if unset."""

    @abstractmethod
    def write_string(self, key: str, value: str) -> None:
        """Store a string value under ``key``."""


class DictMetadataStore(MetadataStore):
    """
    In-memory metadata store.

    Parameters
    ----------
    tags : dict, optional
        Numeric data tags, e.g. ``{"Stokes": 1}``.
    strings : dict, optional
        String values, e.g. ``{"XSDIR": "/data/tables"}``.
    """

    def __init__(
        self,
        tags: Optional[Dict[str, float]] = None,
        strings: Optional[Dict[str, str]] = None,
    ):
        self.tags: Dict[str, float] = dict(tags or {})
        self.strings: Dict[str, str] = dict(strings or {})

    def read_tag(self, key: str) -> Optional[float]:
        return self.tags.get(key)

    def read_string(self, key: str) -> str:
        return self.strings.get(key, "")

    def write_string(self, key: str, value: str) -> None:
        self.strings[key] = value


def inclination_degrees(cos_incl: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Observer inclination from its cosine.

    Parameters
    ----------
    cos_incl : float or ndarray
        Cosine of the inclination (1 = pole-on, 0 = edge-on).

    Returns
    -------
    float or ndarray
        Inclination [degrees].
    """
    return np.rad2deg(np.arccos(cos_incl))


def publish_inclination(store: MetadataStore, cos_incl: float) -> float:
    """
    Publish the observer inclination in degrees.

    Parameters
    ----------
    store : MetadataStore
        Host metadata.
    cos_incl : float
        Cosine of the inclination.

    Returns
    -------
    float
        The published inclination [degrees].
    """
    inc = float(inclination_degrees(cos_incl))
    store.write_string(INCLINATION_KEY, INCLINATION_FORMAT % inc)
    logger.debug("Published %s=%.6f", INCLINATION_KEY, inc)
    return inc
