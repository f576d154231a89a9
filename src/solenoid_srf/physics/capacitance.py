"""
Capacitance Network - Inter-Turn Electrostatic Coupling

Turns are modeled as pairs of coaxial rings. Two rings of mean radius Rc
with center-to-center pitch p, made of wire of diameter d, have

    C = 2 * pi^2 * eps_0 * Rc / acosh(p / d)

Nearest-neighbour (NN) pairs (k, k+1) and 2nd-nearest-neighbour pairs
(k, k+2) each form a series chain; the two chains act in parallel:

    1 / C_NN  = sum_k 1 / C_NN,k
    1 / C_2NN = sum_k 1 / C_2NN,k
    C         = C_NN + C_2NN

An empty chain (no 2nd-NN pairs for N = 2) contributes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from solenoid_srf.physics.constants import VACUUM_PERMITTIVITY_F_M
from solenoid_srf.validation.errors import GeometricOverlapError, InvalidGeometryConfig

if TYPE_CHECKING:
    from solenoid_srf.simulation.coil_geometry import CoilGeometry


@dataclass
class CapacitanceResult:
    """
    Capacitance of the coil and its pairwise breakdown.

    Attributes
    ----------
    turn_radii : np.ndarray
        Radius of each turn at its middle plane in m, shape (n_turns,).
    nn_radii, nn_pitches, nn_capacitances : np.ndarray
        Radius (m), pitch (m) and capacitance (F) of the N-1 NN pairs.
    second_radii, second_pitches, second_capacitances : np.ndarray
        Same for the N-2 2nd-NN pairs.
    nn_total_f : float
        Series capacitance of the NN chain in F.
    second_total_f : float
        Series capacitance of the 2nd-NN chain in F.
    """

    turn_radii: np.ndarray
    nn_radii: np.ndarray
    nn_pitches: np.ndarray
    nn_capacitances: np.ndarray
    second_radii: np.ndarray
    second_pitches: np.ndarray
    second_capacitances: np.ndarray
    nn_total_f: float
    second_total_f: float

    @property
    def total_f(self) -> float:
        """Total coil capacitance in F."""
        return self.nn_total_f + self.second_total_f


def compute_pair_capacitance(
    radius: float | np.ndarray,
    pitch: float | np.ndarray,
    wire_diameter: float,
) -> float | np.ndarray:
    """
    Capacitance between two coaxial wire rings.

    Parameters
    ----------
    radius : float or np.ndarray
        Shared ring radius in m.
    pitch : float or np.ndarray
        Center-to-center separation in m.
    wire_diameter : float
        Wire diameter d in m.

    Returns
    -------
    float or np.ndarray
        Capacitance in F.

    Raises
    ------
    GeometricOverlapError
        If pitch / d <= 1 (touching or overlapping wires).

    Examples
    --------
    >>> c_close = compute_pair_capacitance(0.05, 0.002, 0.001)
    >>> c_far = compute_pair_capacitance(0.05, 0.004, 0.001)
    >>> c_close > c_far
    True
    """
    if wire_diameter <= 0:
        raise InvalidGeometryConfig(f"wire_diameter must be positive, got {wire_diameter}")

    ratio = np.asarray(pitch, dtype=np.float64) / wire_diameter
    if np.any(ratio <= 1.0):
        raise GeometricOverlapError(
            f"pitch / wire diameter = {float(np.min(ratio)):.4g} <= 1: turns overlap"
        )

    return 2.0 * VACUUM_PERMITTIVITY_F_M * np.pi**2 * radius / np.arccosh(ratio)


def series_capacitance(capacitances: np.ndarray) -> float:
    """Series combination of a chain of capacitors (0 for an empty chain)."""
    capacitances = np.asarray(capacitances, dtype=np.float64)
    if capacitances.size == 0:
        return 0.0
    return float(1.0 / np.sum(1.0 / capacitances))


def compute_turn_radii(geometry: CoilGeometry) -> np.ndarray:
    """Distance of each turn's middle-plane wire point from the coil axis."""
    return np.abs(
        geometry.radius * np.cos(geometry.turn_mid_parameters / geometry.tapering_factor)
    )


def _neighbour_pairs(
    turn_radii: np.ndarray,
    boundary_points: np.ndarray,
    offset: int,
    wire_diameter: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Radii, pitches and capacitances of the (k, k + offset) turn pairs."""
    n_turns = turn_radii.size
    n_pairs = max(n_turns - offset, 0)

    radii = np.zeros(n_pairs, dtype=np.float64)
    pitches = np.zeros(n_pairs, dtype=np.float64)
    capacitances = np.zeros(n_pairs, dtype=np.float64)

    for k in range(n_pairs):
        radii[k] = 0.5 * (turn_radii[k] + turn_radii[k + offset])
        pitches[k] = 0.5 * (
            np.linalg.norm(boundary_points[k + offset] - boundary_points[k])
            + np.linalg.norm(boundary_points[k + offset + 1] - boundary_points[k + 1])
        )
        try:
            capacitances[k] = compute_pair_capacitance(radii[k], pitches[k], wire_diameter)
        except GeometricOverlapError as e:
            raise GeometricOverlapError(
                f"Turns {k + 1} and {k + 1 + offset}: pitch {pitches[k]:.4g} m vs "
                f"wire diameter {wire_diameter:.4g} m ({e})"
            ) from e

    return radii, pitches, capacitances


def compute_capacitance(
    geometry: CoilGeometry,
    wire_radius: float,
    verbose: bool = False,
) -> CapacitanceResult:
    """
    Total coil capacitance from the NN and 2nd-NN turn-pair chains.

    Parameters
    ----------
    geometry : CoilGeometry
        Sampled coil.
    wire_radius : float
        Wire radius r_w in m (d = 2 * r_w).
    verbose : bool, optional
        Print chain totals. Default is False.

    Returns
    -------
    CapacitanceResult

    Raises
    ------
    GeometricOverlapError
        If any pair pitch does not exceed the wire diameter.
    """
    if wire_radius <= 0:
        raise InvalidGeometryConfig(f"wire_radius must be positive, got {wire_radius}")

    wire_diameter = 2.0 * wire_radius
    turn_radii = compute_turn_radii(geometry)
    boundary_points = geometry.turn_boundary_points

    nn_radii, nn_pitches, nn_caps = _neighbour_pairs(
        turn_radii, boundary_points, 1, wire_diameter
    )
    second_radii, second_pitches, second_caps = _neighbour_pairs(
        turn_radii, boundary_points, 2, wire_diameter
    )

    result = CapacitanceResult(
        turn_radii=turn_radii,
        nn_radii=nn_radii,
        nn_pitches=nn_pitches,
        nn_capacitances=nn_caps,
        second_radii=second_radii,
        second_pitches=second_pitches,
        second_capacitances=second_caps,
        nn_total_f=series_capacitance(nn_caps),
        second_total_f=series_capacitance(second_caps),
    )

    if verbose:
        print(f"  NN chain: {nn_caps.size} pairs, {result.nn_total_f * 1e12:.4g} pF")
        print(f"  2nd-NN chain: {second_caps.size} pairs, {result.second_total_f * 1e12:.4g} pF")
        print(f"  Capacitance: {result.total_f * 1e12:.4g} pF")

    return result
