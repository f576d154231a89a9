"""
SRF Pipeline Integration Tests

End-to-end runs of compute_srf on the reference sphere, the cylinder limit
and failure paths.
"""

from __future__ import annotations

import numpy as np
import pytest
import yaml

from solenoid_srf.physics.constants import VACUUM_PERMEABILITY_H_M
from solenoid_srf.presets import get_preset_parameters, preset_to_config
from solenoid_srf.simulation.coil_geometry import generate_coil_points
from solenoid_srf.simulation.pipeline import (
    SRFResult,
    compute_srf,
    compute_srf_from_config,
)
from solenoid_srf.validation.errors import GeometricOverlapError, InvalidGeometryConfig


@pytest.fixture(scope="module")
def reference_result() -> SRFResult:
    """N = 5, N1 = 10, R = 5 cm, r_w = 0.5 mm, s = 200 on a 2 mm grid."""
    return compute_srf(5, 10.0, 1e6, 5e-4, 0.05, 200, 0.002, margin=0.01)


@pytest.fixture(scope="module")
def quick_params() -> dict:
    return get_preset_parameters("quick_check")


class TestReferenceSphere:
    """Test the reference five-turn spherical solenoid."""

    def test_positive_results(self, reference_result) -> None:
        L, C, f_res = reference_result

        assert 1e-8 < L < 1e-4
        assert 1e-15 < C < 1e-9
        assert 1e6 < f_res < 1e10

    def test_resonance_identity(self, reference_result) -> None:
        """f_res * 2 * pi * sqrt(L * C) = 1."""
        L, C, f_res = reference_result

        assert np.isclose(f_res * 2 * np.pi * np.sqrt(L * C), 1.0, rtol=1e-12)

    def test_breakdown_consistent(self, reference_result) -> None:
        result = reference_result

        assert result.inductance.flux_wb.shape == (5,)
        assert np.all(result.inductance.flux_wb > 0)
        assert np.isclose(result.inductance_h, result.inductance.total_h)
        assert np.isclose(result.capacitance_f, result.capacitance.total_f)
        assert result.capacitance.nn_capacitances.shape == (4,)
        assert result.capacitance.second_capacitances.shape == (3,)

    def test_no_clamped_columns(self, reference_result) -> None:
        """The 1 cm margin keeps every turn surface inside the grid."""
        for surface in reference_result.inductance.surfaces:
            assert surface.n_clamped == 0
            assert surface.n_columns > 0

    def test_wire_length(self, reference_result) -> None:
        """Turn speed R * sqrt(cos^2 + 1/N1^2) bounds the wire length."""
        upper = 2 * np.pi * 0.05 * 5 * np.sqrt(1 + 1 / 10.0**2)

        assert 0 < reference_result.wire_length_m < upper
        assert reference_result.dc_resistance_ohm > 0

    def test_summary(self, reference_result) -> None:
        summary = reference_result.summary()

        assert summary["srf_hz"] == reference_result.srf_hz
        assert summary["n_singular"] == reference_result.n_singular
        assert set(summary) >= {"inductance_h", "capacitance_f", "wire_length_m"}


class TestCylinderLimit:
    """Test the near-cylindrical coil against Wheeler's formula."""

    def test_wheeler_agreement(self) -> None:
        """
        Large N1 keeps the winding near the equator.

        Wheeler: L = mu_0 * N^2 * pi * a^2 / (l + 0.9 * a)
        """
        params = get_preset_parameters("cylinder_limit")
        result = compute_srf(**params)

        points = generate_coil_points(
            params["n_turns"], params["tapering_factor"], params["radius"], params["n_segments"]
        )
        a = np.mean(np.hypot(points[:, 0], points[:, 1]))
        length = points[:, 2].max() - points[:, 2].min()
        n = params["n_turns"]
        wheeler = VACUUM_PERMEABILITY_H_M * n**2 * np.pi * a**2 / (length + 0.9 * a)

        assert abs(result.inductance_h / wheeler - 1) < 0.05


class TestPipelineBehaviour:
    """Test determinism, configuration entry point and failure paths."""

    def test_idempotent(self, quick_params) -> None:
        """Identical inputs give bit-identical outputs."""
        first = compute_srf(**quick_params)
        second = compute_srf(**quick_params)

        assert first.inductance_h == second.inductance_h
        assert first.capacitance_f == second.capacitance_f
        assert first.srf_hz == second.srf_hz

    def test_from_config_matches_direct_call(self, quick_params) -> None:
        direct = compute_srf(**quick_params)
        from_config = compute_srf_from_config(preset_to_config("quick_check"))

        assert from_config.srf_hz == direct.srf_hz

    def test_from_partial_config_uses_defaults(self) -> None:
        """Missing keys fall back to the built-in defaults."""
        config = preset_to_config("quick_check")
        del config["discretization"]["chunk_size"]
        del config["excitation"]

        result = compute_srf_from_config(config)

        assert result.srf_hz > 0

    def test_verbose_progress(self, quick_params, capsys) -> None:
        compute_srf(**quick_params, verbose=True)

        out = capsys.readouterr().out
        assert "Field grid" in out
        assert "Inductance" in out
        assert "SRF:" in out

    def test_overlapping_turns_rejected(self) -> None:
        """N1 = 2 folds turn 3 onto turn 1 before any field is computed."""
        with pytest.raises(GeometricOverlapError, match="Turns 1 and 3"):
            compute_srf(5, 2.0, 1e6, 5e-4, 0.05, 200, 0.002)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"n_turns": 1},
            {"n_segments": 205},
            {"radius": 0.0},
            {"wire_radius": -1e-4},
            {"step": 0.0},
            {"frequency_hz": 0.0},
            {"singularity_policy": "clamp"},
        ],
    )
    def test_invalid_parameters_rejected(self, quick_params, overrides) -> None:
        with pytest.raises(InvalidGeometryConfig):
            compute_srf(**{**quick_params, **overrides})

    @pytest.mark.parametrize(
        "config",
        [
            [1, 2],
            {"coil": None, "excitation": {"frequency_hz": 1e6}},
            {"discretization": [200, 0.002]},
        ],
    )
    def test_non_mapping_config_rejected(self, config) -> None:
        """A list at the top or a section without keys is a config error."""
        with pytest.raises(InvalidGeometryConfig, match="mapping"):
            compute_srf_from_config(config)


class TestDemoScript:
    """Test the command-line demo entry point."""

    def test_list_presets(self, capsys) -> None:
        from run_demo import main

        assert main(["--list"]) == 0
        assert "quick_check" in capsys.readouterr().out

    def test_quick_check_run(self, capsys) -> None:
        from run_demo import main

        assert main(["--preset", "quick_check", "--quiet"]) == 0
        assert "f_res" in capsys.readouterr().out

    def test_unknown_preset(self, capsys) -> None:
        from run_demo import main

        assert main(["--preset", "no_such_coil", "--quiet"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_config_file_run(self, tmp_path, capsys) -> None:
        from run_demo import main

        path = tmp_path / "coil.yaml"
        path.write_text(yaml.safe_dump(preset_to_config("quick_check")), encoding="utf-8")

        assert main(["--config", str(path), "--quiet"]) == 0
        assert "f_res" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "text, reason",
        [
            ("coil:\nexcitation:\n  frequency_hz: 1000000.0\n", "INVALID SECTION"),
            ("- 1\n- 2\n", "INVALID CONFIG STRUCTURE"),
        ],
    )
    def test_malformed_config_file(self, tmp_path, capsys, text, reason) -> None:
        """Badly shaped YAML is reported and exits with status 1."""
        from run_demo import main

        path = tmp_path / "coil.yaml"
        path.write_text(text, encoding="utf-8")

        assert main(["--config", str(path), "--quiet"]) == 1
        assert reason in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
