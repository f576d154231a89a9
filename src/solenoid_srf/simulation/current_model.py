"""
Current Model - Traveling-Wave Current Snapshot Along the Coil

The coil current is modeled as a wave traveling along the wire. Each
segment carries the instantaneous current at its accumulated path length:

    I_k = cos(2*pi*f1*t - l_k/lambda + phi0),   lambda = c / f1

with l_k the summed length of all preceding segments. The first segment
carries unit current. At low f1 the coil is electrically short and the
current is nearly uniform.
"""

from __future__ import annotations

import numpy as np

from solenoid_srf.physics.constants import WAVE_SPEED_M_S
from solenoid_srf.validation.errors import InvalidGeometryConfig


def compute_wavelength(frequency_hz: float, wave_speed: float = WAVE_SPEED_M_S) -> float:
    """Wavelength in m of the excitation at ``frequency_hz``."""
    if frequency_hz <= 0:
        raise InvalidGeometryConfig(f"frequency_hz must be positive, got {frequency_hz}")
    return wave_speed / frequency_hz


def compute_segment_currents(
    segments: np.ndarray,
    frequency_hz: float,
    time_s: float = 0.0,
    phase_rad: float = 0.0,
    wave_speed: float = WAVE_SPEED_M_S,
) -> np.ndarray:
    """
    Instantaneous current on every coil segment.

    Parameters
    ----------
    segments : np.ndarray
        Segment vectors with shape (n_segments, 3) in m.
    frequency_hz : float
        Excitation frequency f1 in Hz.
    time_s : float, optional
        Snapshot instant. Default is 0.
    phase_rad : float, optional
        Initial phase phi0. Default is 0.
    wave_speed : float, optional
        Propagation speed in m/s. Default is 3e8.

    Returns
    -------
    np.ndarray
        Currents with shape (n_segments,) in A (unit amplitude).

    Examples
    --------
    >>> segs = np.array([[1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    >>> compute_segment_currents(segs, 1e6).shape
    (2,)
    """
    segments = np.asarray(segments, dtype=np.float64)
    if segments.ndim != 2 or segments.shape[1] != 3:
        raise ValueError(f"segments must have shape (n, 3), got {segments.shape}")

    wavelength = compute_wavelength(frequency_hz, wave_speed)

    # Path length travelled before reaching each segment
    lengths = np.linalg.norm(segments, axis=1)
    travelled = np.concatenate([[0.0], np.cumsum(lengths[:-1])])

    currents = np.cos(2.0 * np.pi * frequency_hz * time_s - travelled / wavelength + phase_rad)
    currents[0] = 1.0
    return currents
