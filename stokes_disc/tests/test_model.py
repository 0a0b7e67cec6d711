"""
Tests for the model module.

End-to-end evaluations of the disc reflection model against a fake table
engine.
"""

import numpy as np
import pytest

from stokes_disc import (
    StokesDiscModel,
    ModelParameters,
    OutputMode,
    DictMetadataStore,
    ConfigurationError,
    ParameterOutOfRangeError,
    stokes_disc,
)
from stokes_disc.constants import UNPOLARIZED_TABLE

STOKES_ATOL = 1e-12


EDGES = [1.0, 2.0, 4.0, 8.0]


class TestEvaluate:
    """Tests for complete model evaluations."""

    def test_unpolarized_primary(self, symmetric_interpolator):
        """An unpolarized primary reproduces the unpolarized table."""
        model = StokesDiscModel(symmetric_interpolator)
        result = model.evaluate(EDGES, ModelParameters(pos_ang=30.0))

        np.testing.assert_allclose(result.output, [10.0, 6.0, 3.0])
        np.testing.assert_allclose(result.stokes.Q, 0.0, atol=STOKES_ATOL)
        np.testing.assert_allclose(result.stokes.U, 0.0, atol=STOKES_ATOL)
        np.testing.assert_array_equal(result.stokes.V, 0.0)
        np.testing.assert_allclose(result.derived.degree, 0.0, atol=STOKES_ATOL)
        assert len(symmetric_interpolator.calls) == 9

    def test_diagonal_primary(self, symmetric_interpolator):
        """A fully polarized primary at 45 deg gives the diagonal table."""
        model = StokesDiscModel(symmetric_interpolator)
        params = ModelParameters(pol_deg=1.0, chi=45.0, stokes=OutputMode.U)
        result = model.evaluate(EDGES, params)

        np.testing.assert_allclose(result.output, [2.5, 1.8, 0.8])
        np.testing.assert_allclose(result.stokes.I, [10.0, 6.0, 3.0])
        np.testing.assert_allclose(result.stokes.Q, 0.0, atol=1e-9)

    def test_position_angle_turns_u_into_q(self, symmetric_interpolator):
        """A 45 deg position angle maps U onto -Q."""
        model = StokesDiscModel(symmetric_interpolator)
        params = ModelParameters(pol_deg=1.0, chi=45.0, pos_ang=45.0, stokes=OutputMode.Q)
        result = model.evaluate(EDGES, params)

        np.testing.assert_allclose(result.output, [-2.5, -1.8, -0.8])
        np.testing.assert_allclose(result.stokes.U, 0.0, atol=1e-9)

    def test_boundary_angle_rejected(self, symmetric_interpolator):
        """Angles of exactly 90 deg lie outside the open domain."""
        model = StokesDiscModel(symmetric_interpolator)
        with pytest.raises(ParameterOutOfRangeError):
            model.evaluate(EDGES, ModelParameters(pol_deg=1.0, chi=90.0))
        with pytest.raises(ParameterOutOfRangeError):
            model.evaluate(EDGES, ModelParameters(pos_ang=-90.0))
        assert symmetric_interpolator.calls == []

    def test_degree_scaled_by_width(self, interpolator, grid):
        """Degree output is the degree times the bin width."""
        model = StokesDiscModel(interpolator)
        params = ModelParameters(pol_deg=0.6, chi=25.0, pos_ang=-10.0, stokes=OutputMode.DEGREE)
        result = model.evaluate(grid, params)

        np.testing.assert_allclose(result.output, result.derived.degree * grid.widths)
        assert np.all(result.derived.degree >= 0.0)
        assert np.all(result.derived.degree <= 1.0)

    def test_v_is_zero(self, interpolator):
        """Circular polarization is never produced."""
        model = StokesDiscModel(interpolator)
        params = ModelParameters(pol_deg=0.8, chi=-40.0, pos_ang=60.0, stokes=OutputMode.V)
        result = model.evaluate(EDGES, params)

        np.testing.assert_array_equal(result.output, 0.0)
        np.testing.assert_array_equal(result.derived.beta, 0.0)

    def test_host_vector(self, interpolator):
        """The eight-element host vector is accepted."""
        model = StokesDiscModel(interpolator)
        from_vector = model.evaluate(EDGES, [0.3, 2.0, 0.775, 0.4, 10.0, 5.0, 0.0, 3.0])
        from_params = model.evaluate(
            EDGES, ModelParameters(pol_deg=0.4, chi=10.0, pos_ang=5.0, stokes=3)
        )

        assert from_vector.mode is OutputMode.U
        np.testing.assert_array_equal(from_vector.output, from_params.output)

    def test_call_returns_output(self, interpolator):
        """Calling the model returns the output array."""
        model = StokesDiscModel(interpolator)
        params = ModelParameters(pol_deg=0.3, stokes=OutputMode.ANGLE_PSI)
        np.testing.assert_array_equal(
            model(EDGES, params), model.evaluate(EDGES, params).output
        )

    def test_repeatable(self, interpolator):
        """Evaluations are independent and repeatable."""
        model = StokesDiscModel(interpolator)
        params = ModelParameters(pol_deg=0.5, chi=45.0, stokes=OutputMode.ANGLE_PSI)
        first = model(EDGES, params)
        second = model(EDGES, params)

        np.testing.assert_array_equal(first, second)
        assert len(interpolator.calls) == 18

    def test_function_interface(self, interpolator):
        """stokes_disc evaluates the model once."""
        params = ModelParameters(pol_deg=0.2, stokes=OutputMode.Q_OVER_I)
        expected = StokesDiscModel(interpolator)(EDGES, params)
        np.testing.assert_array_equal(stokes_disc(EDGES, params, interpolator), expected)


class TestOutputModeResolution:
    """Tests for the automatic output mode."""

    def test_auto_from_tag(self, interpolator):
        """The Stokes data tag selects the output."""
        metadata = DictMetadataStore(tags={"Stokes": 1})
        model = StokesDiscModel(interpolator, metadata)
        result = model.evaluate(EDGES, ModelParameters(pol_deg=0.5, stokes=OutputMode.AUTO))

        assert result.mode is OutputMode.Q
        np.testing.assert_array_equal(result.output, result.stokes.Q)

    def test_auto_without_tag(self, interpolator, basis_arrays):
        """Without a tag the unpolarized flux is computed."""
        model = StokesDiscModel(interpolator)
        result = model.evaluate(EDGES, ModelParameters(pol_deg=0.5, stokes=OutputMode.AUTO))

        assert result.mode is OutputMode.FLUX_UNPOLARIZED
        assert not result.polarized
        np.testing.assert_array_equal(result.output, basis_arrays[0][0])
        assert len(interpolator.calls) == 1

    def test_unpolarized_mode(self, interpolator, basis_arrays):
        """Mode 0 requests only the unpolarized flux."""
        model = StokesDiscModel(interpolator)
        params = ModelParameters(pol_deg=1.0, chi=30.0, pos_ang=45.0, stokes=0)
        result = model.evaluate(EDGES, params)

        np.testing.assert_array_equal(result.output, basis_arrays[0][0])
        assert result.derived is None
        assert [call[0] for call in interpolator.calls] == [UNPOLARIZED_TABLE]


class TestErrors:
    """Tests for failing evaluations."""

    def test_invalid_parameters(self, interpolator):
        """Parameters are checked before any table request."""
        model = StokesDiscModel(interpolator)
        with pytest.raises(ParameterOutOfRangeError):
            model.evaluate(EDGES, ModelParameters(chi=120.0))
        assert interpolator.calls == []

    def test_invalid_grid(self, interpolator):
        """Decreasing energies are rejected."""
        model = StokesDiscModel(interpolator)
        with pytest.raises(ValueError):
            model.evaluate([4.0, 2.0, 1.0], ModelParameters())

    def test_missing_tables(self, fake_interpolator):
        """A missing table aborts without publishing the inclination."""
        metadata = DictMetadataStore()
        model = StokesDiscModel(fake_interpolator({}), metadata)
        with pytest.raises(ConfigurationError):
            model.evaluate(EDGES, ModelParameters())
        assert "inc_degrees" not in metadata.strings


class TestHostInteraction:
    """Tests for metadata and table locations."""

    def test_inclination_published(self, interpolator):
        """The inclination is written to the metadata store."""
        metadata = DictMetadataStore()
        model = StokesDiscModel(interpolator, metadata)
        result = model.evaluate(EDGES, ModelParameters(cos_incl=0.5))

        assert np.isclose(result.inclination, 60.0)
        assert metadata.strings["inc_degrees"] == "   60.000000"

    def test_table_directory_from_host(self, interpolator):
        """Tables are read from XSDIR."""
        metadata = DictMetadataStore(strings={"XSDIR": "/host/tables"})
        StokesDiscModel(interpolator, metadata)(EDGES, ModelParameters())
        assert all(call[0].startswith("/host/tables/") for call in interpolator.calls)

    def test_table_directory_override(self, interpolator):
        """An explicit directory wins over XSDIR."""
        metadata = DictMetadataStore(strings={"XSDIR": "/host/tables"})
        model = StokesDiscModel(interpolator, metadata, table_directory="/local/")
        model(EDGES, ModelParameters())
        assert all(call[0].startswith("/local/") for call in interpolator.calls)
        assert not any("//" in call[0] for call in interpolator.calls)

    def test_diagnostics_written(self, interpolator, tmp_path):
        """Polarized evaluations dump the Stokes table and parameters."""
        out = tmp_path / "diag"
        model = StokesDiscModel(interpolator, diagnostics_dir=out)
        model(EDGES, ModelParameters(pol_deg=0.5, stokes=OutputMode.DEGREE))

        assert np.loadtxt(out / "stokes.dat").shape == (3, 8)
        assert (out / "parameters.txt").read_text().startswith("Size")

    def test_no_stokes_dump_unpolarized(self, interpolator, tmp_path):
        """Unpolarized evaluations only dump the parameters."""
        model = StokesDiscModel(interpolator, diagnostics_dir=tmp_path)
        model(EDGES, ModelParameters(stokes=0))
        assert not (tmp_path / "stokes.dat").exists()
        assert (tmp_path / "parameters.txt").exists()


class TestModelResult:
    """Tests for the result container."""

    def test_to_dataset(self, interpolator, grid):
        """Results convert to an xarray Dataset on bin midpoints."""
        model = StokesDiscModel(interpolator)
        result = model.evaluate(grid, ModelParameters(pol_deg=0.5, cos_incl=0.5, stokes=6))
        ds = result.to_dataset()

        np.testing.assert_array_equal(ds["energy"].values, grid.midpoints)
        np.testing.assert_array_equal(ds["psi"].values, result.derived.psi)
        np.testing.assert_array_equal(ds["output"].values, result.output)
        assert ds.attrs["mode"] == "ANGLE_PSI"
        assert np.isclose(ds.attrs["inc_degrees"], 60.0)

    def test_to_dataset_unpolarized(self, interpolator):
        """Unpolarized results carry no angle variables."""
        result = StokesDiscModel(interpolator).evaluate(EDGES, ModelParameters(stokes=0))
        ds = result.to_dataset()
        assert "psi" not in ds
        assert "I" in ds
