"""
Tests for the diagnostics module.
"""

import numpy as np

from stokes_disc.angles import compute_derived_quantities
from stokes_disc.diagnostics import write_stokes_dump, write_parameter_dump
from stokes_disc.parameters import ModelParameters
from stokes_disc.polarization import StokesVector


class TestStokesDump:
    """Tests for the per-bin dump."""

    def test_columns(self, grid, tmp_path):
        """One row per bin with eight tab-separated columns."""
        stokes = StokesVector(
            I=np.array([2.0, 4.0, 8.0]),
            Q=np.array([0.2, 0.4, -0.8]),
            U=np.array([0.0, 0.4, 0.8]),
        )
        derived = compute_derived_quantities(stokes)
        path = write_stokes_dump(tmp_path / "stokes.dat", grid, stokes, derived)

        lines = path.read_text().splitlines()
        assert len(lines) == 3
        assert all(len(line.split("\t")) == 8 for line in lines)

        table = np.loadtxt(path)
        np.testing.assert_allclose(table[:, 0], grid.midpoints)
        np.testing.assert_allclose(table[:, 1], stokes.I / grid.widths, rtol=1e-6)
        np.testing.assert_allclose(table[:, 2], stokes.Q / grid.widths, rtol=1e-6)
        np.testing.assert_allclose(table[:, 3], stokes.U / grid.widths, rtol=1e-6)
        np.testing.assert_array_equal(table[:, 4], 0.0)
        np.testing.assert_allclose(table[:, 5], derived.degree, rtol=1e-6)
        np.testing.assert_allclose(table[:, 6], derived.psi, rtol=1e-6, atol=1e-12)
        np.testing.assert_allclose(table[:, 7], derived.beta, atol=1e-12)

    def test_exponent_format(self, grid, tmp_path):
        """Values are written in exponent notation."""
        stokes = StokesVector(I=np.ones(3), Q=np.zeros(3), U=np.zeros(3))
        derived = compute_derived_quantities(stokes)
        path = write_stokes_dump(tmp_path / "stokes.dat", grid, stokes, derived)
        assert path.read_text().splitlines()[0].startswith("1.500000E+00")


class TestParameterDump:
    """Tests for the parameter dump."""

    def test_contents(self, tmp_path):
        """Every parameter and the inclination are listed."""
        params = ModelParameters(pol_deg=0.5, chi=30.0, stokes=5)
        path = write_parameter_dump(tmp_path / "parameters.txt", params, 39.193)

        lines = path.read_text().splitlines()
        names = [line.split()[0] for line in lines]
        assert names == [
            "Size", "PhoIndex", "cos_incl", "poldeg", "chi",
            "pos_ang", "zshift", "Stokes", "inc_degrees",
        ]
        values = {line.split()[0]: line.split()[1] for line in lines}
        assert values["chi"] == "30.000000"
        assert values["poldeg"] == "0.500000"
        assert values["Stokes"] == "5"
        assert values["inc_degrees"] == "39.193000"
