"""
Flux Integrator Unit Tests

Validates the inclined turn surfaces and the per-turn flux linkage using
synthetic fields with known flux.
"""

from __future__ import annotations

import numpy as np
import pytest

from solenoid_srf.physics.biot_savart import FieldGrid, build_grid_axis
from solenoid_srf.physics.constants import VACUUM_PERMEABILITY_H_M
from solenoid_srf.physics.inductance import (
    compute_inductance,
    compute_internal_inductance,
    compute_turn_surface,
    compute_wire_parameters,
    integrate_turn_flux,
)
from solenoid_srf.simulation.coil_geometry import generate_coil
from solenoid_srf.validation.errors import NumericalSingularity


def make_field_grid(axis: np.ndarray, bz: np.ndarray) -> FieldGrid:
    """Wrap a synthetic B_z array in a FieldGrid."""
    return FieldGrid(
        x=axis,
        y=axis.copy(),
        z=axis.copy(),
        b_magnitude=np.abs(bz),
        bz=bz,
        step=float(axis[1] - axis[0]),
    )


def uniform_field_grid(radius: float, step: float, margin: float, b0: float) -> FieldGrid:
    axis = build_grid_axis(radius, step, margin)
    return make_field_grid(axis, np.full((axis.size,) * 3, b0))


class TestInternalInductance:
    """Test the internal wire inductance."""

    def test_formula(self) -> None:
        """L_int = mu_0 * l / (8 * pi) = 5e-8 H per metre."""
        lengths = np.array([0.5, 1.0, 2.0])

        L_int = compute_internal_inductance(lengths)

        np.testing.assert_allclose(L_int, VACUUM_PERMEABILITY_H_M * lengths / (8 * np.pi))
        assert np.isclose(L_int[1], 5e-8)

    def test_relative_permeability_scales(self) -> None:
        L_1 = compute_internal_inductance(np.array([1.0]))
        L_3 = compute_internal_inductance(np.array([1.0]), relative_permeability=3.0)

        assert np.isclose(L_3[0], 3 * L_1[0])


class TestWireParameters:
    """Test where each turn's wire crosses a given azimuth."""

    azimuths = np.linspace(-np.pi + 0.05, np.pi - 0.05, 25)

    def test_direct_window_below_poles(self) -> None:
        """With cos(t/N1) > 0 on the whole coil, t = t_start + (phi - t_start) mod 2*pi."""
        coil = generate_coil(3, 6.0, 0.05, 60)

        for i, t_start in enumerate(coil.turn_start_parameters):
            t_wire = compute_wire_parameters(coil, i, self.azimuths)

            np.testing.assert_allclose(
                t_wire, t_start + np.mod(self.azimuths - t_start, 2 * np.pi)
            )

    @pytest.mark.parametrize("turn_index", [0, 3])
    def test_wire_point_at_column_azimuth_past_pole(self, turn_index) -> None:
        """
        N = 4, N1 = 3: turns 1 and 4 lie wholly past a pole.

        There R * cos(t/N1) < 0, so the wire at parameter t sits at azimuth
        t + pi; the returned parameter must still land on the given azimuth.
        """
        radius, n1 = 0.05, 3.0
        coil = generate_coil(4, n1, radius, 96)
        t_start = coil.turn_start_parameters[turn_index]

        t_wire = compute_wire_parameters(coil, turn_index, self.azimuths)

        assert np.all(np.cos(t_wire / n1) < 0)
        assert np.all((t_wire >= t_start) & (t_wire < t_start + 2 * np.pi))
        wire_x = radius * np.cos(t_wire / n1) * np.cos(t_wire)
        wire_y = radius * np.cos(t_wire / n1) * np.sin(t_wire)
        offset = np.angle(np.exp(1j * (np.arctan2(wire_y, wire_x) - self.azimuths)))
        np.testing.assert_allclose(offset, 0.0, atol=1e-9)

    def test_surface_past_pole_spans_wire_heights(self) -> None:
        """Inside columns of a past-pole turn interpolate between z_O and its wire."""
        radius = 0.05
        coil = generate_coil(4, 3.0, radius, 96)
        axis = build_grid_axis(radius, 0.005, 0.01)
        wire_z = coil.points[72:97, 2]

        surface = compute_turn_surface(coil, 3, axis, axis, axis, 5e-4)
        heights = surface.heights[surface.mask]

        assert surface.n_columns > 0
        assert np.all(heights >= min(wire_z.min(), surface.axial_offset) - 1e-12)
        assert np.all(heights <= max(wire_z.max(), surface.axial_offset) + 1e-12)


class TestTurnSurface:
    """Test the inclined integration surface of a turn."""

    def test_flat_loop_mask_area(self) -> None:
        """A flat turn's inside columns cover ~pi * (R - r_w)^2."""
        radius, wire_radius, step = 0.05, 5e-4, 0.005
        coil = generate_coil(1, 1e9, radius, 64)
        axis = build_grid_axis(radius, step, 0.01)

        surface = compute_turn_surface(coil, 0, axis, axis, axis, wire_radius)

        area = surface.n_columns * step**2
        expected = np.pi * (radius - wire_radius) ** 2
        assert abs(area / expected - 1) < 0.15
        assert surface.mask.shape == (axis.size, axis.size)
        assert surface.n_clamped == 0

    def test_origin_column_inside(self) -> None:
        radius = 0.05
        coil = generate_coil(1, 1e9, radius, 64)
        axis = build_grid_axis(radius, 0.005, 0.01)
        centre = axis.size // 2

        surface = compute_turn_surface(coil, 0, axis, axis, axis, 5e-4)

        assert np.isclose(axis[centre], 0.0)
        assert surface.mask[centre, centre]

    def test_axial_offset(self) -> None:
        """Surface centre sits at z_O = R * sin(t_mid / N1)."""
        coil = generate_coil(3, 6.0, 0.05, 60)
        axis = build_grid_axis(0.05, 0.005, 0.01)

        for i, t_mid in enumerate(np.pi * np.array([-2, 0, 2])):
            surface = compute_turn_surface(coil, i, axis, axis, axis, 5e-4)
            assert np.isclose(surface.axial_offset, 0.05 * np.sin(t_mid / 6.0))
            assert np.isclose(surface.mid_parameter, t_mid)

    def test_selected_sample_is_first_at_or_above_surface(self) -> None:
        """Each column reads the lowest z-sample not below its surface height."""
        coil = generate_coil(3, 6.0, 0.05, 60)
        axis = build_grid_axis(0.05, 0.004, 0.01)
        step = 0.004

        for i in range(3):
            surface = compute_turn_surface(coil, i, axis, axis, axis, 5e-4)
            chosen = axis[surface.z_indices][surface.mask]
            heights = surface.heights[surface.mask]

            assert surface.n_columns > 0
            assert np.all(chosen >= heights - 1e-12)
            assert np.all(chosen - heights < step + 1e-12)

    def test_surface_above_grid_is_clamped(self) -> None:
        """Columns whose surface lies above the top sample use the top sample."""
        coil = generate_coil(3, 6.0, 0.05, 60)
        axis = build_grid_axis(0.05, 0.005, 0.01)
        low_z = axis[axis < 0.0]

        surface = compute_turn_surface(coil, 2, axis, axis, low_z, 5e-4)

        assert surface.n_clamped > 0
        assert surface.z_indices.max() == low_z.size - 1

    def test_turn_index_out_of_range(self) -> None:
        coil = generate_coil(2, 10.0, 0.05, 40)
        axis = build_grid_axis(0.05, 0.01, 0.0)

        with pytest.raises(IndexError):
            compute_turn_surface(coil, 2, axis, axis, axis, 5e-4)


class TestFluxIntegration:
    """Test flux and inductance from synthetic fields."""

    def test_uniform_field_flux(self) -> None:
        """A uniform B_z gives flux = B_z * (inside columns) * step^2."""
        b0 = 2e-3
        coil = generate_coil(1, 1e9, 0.05, 64)
        grid = uniform_field_grid(0.05, 0.005, 0.01, b0)
        surface = compute_turn_surface(coil, 0, grid.x, grid.y, grid.z, 5e-4)

        flux = integrate_turn_flux(surface, grid)

        assert np.isclose(flux, b0 * surface.n_columns * grid.step**2)

    def test_flux_reads_selected_layer(self) -> None:
        """With B_z equal to the height, flux sums the chosen z-samples."""
        coil = generate_coil(3, 6.0, 0.05, 60)
        axis = build_grid_axis(0.05, 0.005, 0.01)
        bz = np.broadcast_to(axis, (axis.size, axis.size, axis.size)).copy()
        grid = make_field_grid(axis, bz)
        surface = compute_turn_surface(coil, 2, axis, axis, axis, 5e-4)

        flux = integrate_turn_flux(surface, grid)

        expected = np.sum(axis[surface.z_indices][surface.mask]) * grid.step**2
        assert np.isclose(flux, expected)

    def test_inductance_uniform_field(self) -> None:
        """Total = sum of flux / mid current plus internal inductance."""
        coil = generate_coil(2, 10.0, 0.05, 8)
        grid = uniform_field_grid(0.05, 0.005, 0.01, 1e-4)
        currents = np.ones(8)

        result = compute_inductance(coil, grid, currents, 5e-4)

        assert result.flux_wb.shape == (2,)
        assert np.all(result.flux_wb > 0)
        np.testing.assert_allclose(result.flux_inductance_h, result.flux_wb)
        expected_total = result.flux_wb.sum() + compute_internal_inductance(coil.turn_lengths).sum()
        assert np.isclose(result.total_h, expected_total)
        assert np.isclose(result.total_flux_wb, result.flux_wb.sum())
        assert len(result.surfaces) == 2

    def test_mid_segment_current(self) -> None:
        """Turn i is normalized by the current on segment (2i + 1) * s / (2N)."""
        coil = generate_coil(2, 10.0, 0.05, 8)
        grid = uniform_field_grid(0.05, 0.005, 0.01, 1e-4)
        currents = np.arange(1.0, 9.0)

        result = compute_inductance(coil, grid, currents, 5e-4)

        np.testing.assert_allclose(result.mid_currents, [3.0, 7.0])
        np.testing.assert_allclose(result.flux_inductance_h, result.flux_wb / [3.0, 7.0])

    def test_zero_mid_current_raises(self) -> None:
        coil = generate_coil(2, 10.0, 0.05, 8)
        grid = uniform_field_grid(0.05, 0.005, 0.01, 1e-4)
        currents = np.ones(8)
        currents[6] = 0.0

        with pytest.raises(NumericalSingularity, match="Turn 2"):
            compute_inductance(coil, grid, currents, 5e-4)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
