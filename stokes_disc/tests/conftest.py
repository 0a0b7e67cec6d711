"""
Pytest configuration and shared fixtures for stokes_disc tests.
"""

import os

import numpy as np
import pytest

from stokes_disc.constants import UNPOLARIZED_TABLE, HORIZONTAL_TABLE, DIAGONAL_TABLE
from stokes_disc.energy import EnergyGrid
from stokes_disc.tables import TableInterpolator, BasisSpectrumSet


class FakeInterpolator(TableInterpolator):
    """
    Table engine serving fixed spectra.

    Tables are looked up by file name, so any directory prefix is accepted.
    Every request is recorded in ``calls``.
    """

    def __init__(self, tables):
        self.tables = {name: np.asarray(t, dtype=float) for name, t in tables.items()}
        self.calls = []

    def interpolate(self, energies, parameters, table_file, filter_name, filter_value):
        self.calls.append((table_file, filter_name, filter_value, tuple(parameters)))
        name = os.path.basename(table_file)
        if name not in self.tables:
            raise FileNotFoundError(f"No such table: {table_file}")
        flux = self.tables[name][int(filter_value)].copy()
        return flux, np.zeros_like(flux)


def make_tables(unpolarized, horizontal, diagonal):
    """Map the default table file names to (3, N) I/Q/U arrays."""
    return {
        UNPOLARIZED_TABLE: np.asarray(unpolarized, dtype=float),
        HORIZONTAL_TABLE: np.asarray(horizontal, dtype=float),
        DIAGONAL_TABLE: np.asarray(diagonal, dtype=float),
    }


@pytest.fixture
def grid():
    """Scenario grid with edges [1, 2, 4, 8] keV (3 bins)."""
    return EnergyGrid(np.array([1.0, 2.0, 4.0, 8.0]))


@pytest.fixture
def basis_arrays():
    """I/Q/U spectra of the three basis tables on the 3-bin grid."""
    unpolarized = [
        [10.0, 6.0, 3.0],
        [0.5, -0.3, 0.2],
        [0.1, 0.2, -0.1],
    ]
    horizontal = [
        [11.0, 6.5, 3.2],
        [3.0, 1.5, 0.9],
        [0.4, -0.2, 0.1],
    ]
    diagonal = [
        [10.5, 6.2, 3.1],
        [0.2, 0.1, 0.3],
        [2.5, 1.8, 0.8],
    ]
    return unpolarized, horizontal, diagonal


@pytest.fixture
def fake_interpolator():
    """The FakeInterpolator class, for tests building their own tables."""
    return FakeInterpolator


@pytest.fixture
def interpolator(basis_arrays):
    """Fake table engine serving ``basis_arrays``."""
    return FakeInterpolator(make_tables(*basis_arrays))


@pytest.fixture
def symmetric_interpolator():
    """Fake table engine whose unpolarized table has no Q or U."""
    unpolarized = [[10.0, 6.0, 3.0], [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]
    horizontal = [[11.0, 6.5, 3.2], [3.0, 1.5, 0.9], [0.0, 0.0, 0.0]]
    diagonal = [[10.0, 6.0, 3.0], [0.0, 0.0, 0.0], [2.5, 1.8, 0.8]]
    return FakeInterpolator(make_tables(unpolarized, horizontal, diagonal))


@pytest.fixture
def basis_set(basis_arrays):
    """Loaded polarized basis set built from ``basis_arrays``."""
    return BasisSpectrumSet(np.array(basis_arrays), polarized=True)

