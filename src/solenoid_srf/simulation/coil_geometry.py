"""
Coil Geometry Module - Spherical Solenoid Parametric Curve

Generates the sampled 3-D curve of a spherical (tapered) solenoid and the
per-turn wire lengths used by the inductance and capacitance models.

Physics: a spiral of latitude on a sphere of radius R,

    x(t) = R * cos(t/N1) * cos(t)
    y(t) = R * cos(t/N1) * sin(t)
    z(t) = R * sin(t/N1)

with t in [-N*pi, N*pi]. Each turn is one 2*pi interval of t. For large N1
the curve tends to a cylindrical helix of pitch 2*pi*R/N1, and in the limit
to a planar circle of radius R.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np
from scipy import integrate

from solenoid_srf.physics.constants import (
    ARC_LENGTH_EPSREL,
    ARC_LENGTH_QUAD_LIMIT,
    MIN_SEGMENT_LENGTH_M,
)
from solenoid_srf.validation.errors import InvalidGeometryConfig

# (func, lower, upper) -> definite integral
Integrator = Callable[[Callable[[float], float], float, float], float]


def quad_integrator(
    func: Callable[[float], float],
    lower: float,
    upper: float,
) -> float:
    """Definite integral of ``func`` over [lower, upper] via scipy.integrate.quad."""
    value, _ = integrate.quad(
        func,
        lower,
        upper,
        epsabs=0.0,
        epsrel=ARC_LENGTH_EPSREL,
        limit=ARC_LENGTH_QUAD_LIMIT,
    )
    return float(value)


def _check_curve_parameters(radius: float, tapering_factor: float) -> None:
    if tapering_factor <= 0:
        raise InvalidGeometryConfig(
            f"tapering_factor must be positive, got {tapering_factor}"
        )
    if radius <= 0:
        raise InvalidGeometryConfig(f"radius must be positive, got {radius}")


# =============================================================================
# Arc Length
# =============================================================================


def arc_length_speed(
    t: float | np.ndarray,
    radius: float,
    tapering_factor: float,
) -> float | np.ndarray:
    """
    Speed |dr/dt| of the spherical helix at parameter t.

    Parameters
    ----------
    t : float or np.ndarray
        Curve parameter (rad).
    radius : float
        Sphere radius R in m.
    tapering_factor : float
        Tapering factor N1.

    Returns
    -------
    float or np.ndarray
        sqrt(x'(t)^2 + y'(t)^2 + z'(t)^2) in m/rad.
    """
    lat = t / tapering_factor
    x_d = -radius * (np.sin(lat) * np.cos(t) / tapering_factor + np.cos(lat) * np.sin(t))
    y_d = radius * (np.cos(lat) * np.cos(t) - np.sin(lat) * np.sin(t) / tapering_factor)
    z_d = radius * np.cos(lat) / tapering_factor
    return np.sqrt(x_d**2 + y_d**2 + z_d**2)


def compute_arc_length(
    radius: float,
    tapering_factor: float,
    t_start: float,
    t_stop: float,
    integrator: Integrator = quad_integrator,
) -> float:
    """
    Arc length of the spherical helix between two curve parameters.

    Parameters
    ----------
    radius : float
        Sphere radius R in m.
    tapering_factor : float
        Tapering factor N1 (must be positive).
    t_start, t_stop : float
        Parameter interval.
    integrator : callable, optional
        Definite-integral evaluator ``(func, lower, upper) -> float``.
        Default is scipy.integrate.quad with epsrel = 1e-10.

    Returns
    -------
    float
        Arc length in m.

    Examples
    --------
    >>> length = compute_arc_length(0.05, 1e9, 0.0, 2 * np.pi)
    >>> np.isclose(length, 2 * np.pi * 0.05)
    True
    """
    _check_curve_parameters(radius, tapering_factor)

    def speed(t: float) -> float:
        return float(arc_length_speed(t, radius, tapering_factor))

    return integrator(speed, t_start, t_stop)


def compute_turn_lengths(
    radius: float,
    tapering_factor: float,
    n_turns: int,
    integrator: Integrator = quad_integrator,
) -> np.ndarray:
    """
    Wire length of every turn of an N-turn spherical solenoid.

    Turn i covers t in [-N*pi + 2*pi*i, -N*pi + 2*pi*(i+1)].

    Returns
    -------
    np.ndarray
        Turn lengths with shape (n_turns,) in m.
    """
    if n_turns < 1:
        raise InvalidGeometryConfig(f"n_turns must be >= 1, got {n_turns}")

    t_first = -n_turns * np.pi
    lengths = np.empty(n_turns, dtype=np.float64)
    for i in range(n_turns):
        t_start = t_first + 2.0 * np.pi * i
        lengths[i] = compute_arc_length(
            radius, tapering_factor, t_start, t_start + 2.0 * np.pi, integrator
        )
    return lengths


# =============================================================================
# Curve Sampling
# =============================================================================


def generate_coil_points(
    n_turns: int,
    tapering_factor: float,
    radius: float,
    n_segments: int,
) -> np.ndarray:
    """
    Sample the coil curve at s+1 uniformly spaced parameters.

    Parameters
    ----------
    n_turns : int
        Number of turns N.
    tapering_factor : float
        Tapering factor N1.
    radius : float
        Sphere radius R in m.
    n_segments : int
        Number of segments s.

    Returns
    -------
    np.ndarray
        Curve points with shape (n_segments + 1, 3) in m.
    """
    _check_curve_parameters(radius, tapering_factor)
    if n_turns < 1:
        raise InvalidGeometryConfig(f"n_turns must be >= 1, got {n_turns}")
    if n_segments < 1:
        raise InvalidGeometryConfig(f"n_segments must be >= 1, got {n_segments}")

    # Index-based parameters avoid the drift of an accumulated float range
    t = -n_turns * np.pi + (2.0 * n_turns * np.pi / n_segments) * np.arange(n_segments + 1)
    lat = t / tapering_factor

    points = np.column_stack([
        radius * np.cos(lat) * np.cos(t),
        radius * np.cos(lat) * np.sin(t),
        radius * np.sin(lat),
    ])
    return points


def compute_segment_vectors(points: np.ndarray) -> np.ndarray:
    """
    Displacement vectors between consecutive curve points.

    Raises
    ------
    InvalidGeometryConfig
        If any segment has (near) zero length.
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"points must have shape (n, 3), got {points.shape}")

    segments = points[1:] - points[:-1]
    lengths = np.linalg.norm(segments, axis=1)

    degenerate = np.where(lengths <= MIN_SEGMENT_LENGTH_M)[0]
    if degenerate.size > 0:
        raise InvalidGeometryConfig(
            f"Zero-length coil segment at index {degenerate[0]} "
            f"({degenerate.size} degenerate segments). Increase n_segments or "
            "check the tapering factor."
        )
    return segments


@dataclass
class CoilGeometry:
    """
    Sampled spherical solenoid.

    Attributes
    ----------
    points : np.ndarray
        Curve samples, shape (n_segments + 1, 3) in m.
    segments : np.ndarray
        Segment vectors, shape (n_segments, 3) in m.
    n_turns : int
        Number of turns N.
    tapering_factor : float
        Tapering factor N1.
    radius : float
        Sphere radius R in m.
    turn_lengths : np.ndarray
        Wire length per turn, shape (n_turns,) in m.
    """

    points: np.ndarray
    segments: np.ndarray
    n_turns: int
    tapering_factor: float
    radius: float
    turn_lengths: np.ndarray

    @property
    def n_segments(self) -> int:
        return self.segments.shape[0]

    @property
    def segments_per_turn(self) -> int:
        return self.n_segments // self.n_turns

    @property
    def segment_midpoints(self) -> np.ndarray:
        """Midpoint of every segment, shape (n_segments, 3)."""
        return 0.5 * (self.points[1:] + self.points[:-1])

    @property
    def segment_lengths(self) -> np.ndarray:
        return np.linalg.norm(self.segments, axis=1)

    @property
    def turn_start_parameters(self) -> np.ndarray:
        """Curve parameter at which each turn begins."""
        return -self.n_turns * np.pi + 2.0 * np.pi * np.arange(self.n_turns)

    @property
    def turn_mid_parameters(self) -> np.ndarray:
        """Curve parameter of each turn's transverse middle plane."""
        return -(self.n_turns - 1) * np.pi + 2.0 * np.pi * np.arange(self.n_turns)

    @property
    def turn_boundary_points(self) -> np.ndarray:
        """First sample of each turn plus the end of the wire, shape (N + 1, 3)."""
        starts = self.points[: self.n_segments : self.segments_per_turn]
        return np.vstack([starts, self.points[-1]])

    @property
    def total_wire_length(self) -> float:
        return float(np.sum(self.turn_lengths))


def generate_coil(
    n_turns: int,
    tapering_factor: float,
    radius: float,
    n_segments: int,
    integrator: Integrator = quad_integrator,
) -> CoilGeometry:
    """
    Build the complete sampled coil.

    Parameters
    ----------
    n_turns : int
        Number of turns N (>= 1).
    tapering_factor : float
        Tapering factor N1.
    radius : float
        Sphere radius R in m.
    n_segments : int
        Number of segments s. Must be a multiple of 2*N so each turn and
        each half-turn starts on a segment boundary.
    integrator : callable, optional
        Definite-integral evaluator for the turn lengths.

    Returns
    -------
    CoilGeometry

    Examples
    --------
    >>> coil = generate_coil(5, 10.0, 0.05, 200)
    >>> coil.points.shape
    (201, 3)
    >>> coil.turn_lengths.shape
    (5,)
    """
    if n_turns < 1:
        raise InvalidGeometryConfig(f"n_turns must be >= 1, got {n_turns}")
    if n_segments % (2 * n_turns) != 0:
        raise InvalidGeometryConfig(
            f"n_segments ({n_segments}) must be a multiple of 2 * n_turns "
            f"({2 * n_turns})"
        )

    points = generate_coil_points(n_turns, tapering_factor, radius, n_segments)
    segments = compute_segment_vectors(points)
    turn_lengths = compute_turn_lengths(radius, tapering_factor, n_turns, integrator)

    return CoilGeometry(
        points=points,
        segments=segments,
        n_turns=n_turns,
        tapering_factor=float(tapering_factor),
        radius=float(radius),
        turn_lengths=turn_lengths,
    )
