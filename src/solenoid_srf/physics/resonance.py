"""
Resonance - Self-Resonant Frequency of an LC Pair

    f_res = 1 / (2 * pi * sqrt(L * C))
"""

from __future__ import annotations

import numpy as np

from solenoid_srf.physics.constants import COPPER_RESISTIVITY_OHM_M
from solenoid_srf.validation.errors import InvalidGeometryConfig, NonPhysicalResult


def compute_resonant_frequency(inductance_h: float, capacitance_f: float) -> float:
    """
    LC resonant frequency.

    Parameters
    ----------
    inductance_h : float
        Inductance in H (must be positive).
    capacitance_f : float
        Capacitance in F (must be positive).

    Returns
    -------
    float
        Resonant frequency in Hz.

    Raises
    ------
    NonPhysicalResult
        If L or C is not a positive finite number.

    Examples
    --------
    >>> f = compute_resonant_frequency(1e-6, 1e-12)
    >>> np.isclose(f * 2 * np.pi * np.sqrt(1e-6 * 1e-12), 1.0)
    True
    """
    if not np.isfinite(inductance_h) or inductance_h <= 0:
        raise NonPhysicalResult(f"Inductance must be positive, got {inductance_h} H")
    if not np.isfinite(capacitance_f) or capacitance_f <= 0:
        raise NonPhysicalResult(f"Capacitance must be positive, got {capacitance_f} F")

    return float(1.0 / (2.0 * np.pi * np.sqrt(inductance_h * capacitance_f)))


def compute_dc_resistance(
    wire_length_m: float,
    wire_radius_m: float,
    resistivity_ohm_m: float = COPPER_RESISTIVITY_OHM_M,
) -> float:
    """DC resistance rho * l / (pi * r_w^2) of a round wire (copper by default)."""
    if wire_radius_m <= 0:
        raise InvalidGeometryConfig(f"wire_radius_m must be positive, got {wire_radius_m}")
    return float(resistivity_ohm_m * wire_length_m / (np.pi * wire_radius_m**2))
