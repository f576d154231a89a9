"""
Current Model Unit Tests
"""

from __future__ import annotations

import numpy as np
import pytest

from solenoid_srf.physics.constants import WAVE_SPEED_M_S
from solenoid_srf.simulation.coil_geometry import generate_coil
from solenoid_srf.simulation.current_model import (
    compute_segment_currents,
    compute_wavelength,
)
from solenoid_srf.validation.errors import InvalidGeometryConfig


class TestWavelength:
    """Test the excitation wavelength."""

    def test_one_megahertz(self):
        """lambda = c / f1 = 300 m at 1 MHz."""
        assert np.isclose(compute_wavelength(1e6), 300.0)

    @pytest.mark.parametrize("frequency", [0.0, -1e6])
    def test_non_positive_frequency_rejected(self, frequency):
        with pytest.raises(InvalidGeometryConfig):
            compute_wavelength(frequency)


class TestSegmentCurrents:
    """Test the traveling-wave current snapshot."""

    def test_first_segment_unit_current(self):
        """The first segment always carries unit current."""
        segments = np.ones((10, 3))
        currents = compute_segment_currents(segments, 1e8, time_s=1.3e-9, phase_rad=0.7)

        assert currents[0] == 1.0

    def test_phase_follows_path_length(self):
        """I_k = cos(-l_k / lambda) with l_k the length before segment k."""
        segments = np.tile([1.0, 0.0, 0.0], (6, 1))
        frequency = WAVE_SPEED_M_S / 100.0

        currents = compute_segment_currents(segments, frequency)

        np.testing.assert_allclose(currents, np.cos(np.arange(6) / 100.0), rtol=1e-12)

    def test_path_length_uses_full_segment_length(self):
        """Segments along z travel the same path as segments along x."""
        frequency = WAVE_SPEED_M_S / 50.0
        along_x = compute_segment_currents(np.tile([2.0, 0.0, 0.0], (5, 1)), frequency)
        along_z = compute_segment_currents(np.tile([0.0, 0.0, 2.0], (5, 1)), frequency)

        np.testing.assert_allclose(along_x, along_z)

    def test_nearly_uniform_when_electrically_short(self):
        """A ~1.5 m wire at 1 MHz (lambda = 300 m) carries near-uniform current."""
        coil = generate_coil(5, 10.0, 0.05, 200)
        currents = compute_segment_currents(coil.segments, 1e6)

        assert currents.shape == (200,)
        assert np.all(currents > 0.9999)
        assert np.all(currents <= 1.0)

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError):
            compute_segment_currents(np.ones((4, 2)), 1e6)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
