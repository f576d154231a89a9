"""
Flux Integrator - Per-Turn Flux Linkage and Coil Inductance

For every turn the flux is integrated over an inclined "turn surface": a
disk bounded by the turn's own wire, tilted to follow the local coil pitch.

Turn Surface
------------
Turn i spans t in [t_start, t_start + 2*pi] with t_start = -N*pi + 2*pi*i
and has its transverse middle plane at t_mid = t_start + pi, at height

    z_O = R * sin(t_mid / N1)

For a grid column (x, y) at azimuth phi, the wire of turn i passes at
parameter t = t_start + ((phi - t_start) mod 2*pi), or at phi + pi in place
of phi where the turn has wound past a pole (cos(t/N1) < 0), at radius
Rc = |R * cos(t/N1)| and height z_R = R * sin(t/N1). The column lies inside
the turn when x^2 + y^2 <= (Rc - r_w)^2, and its surface height is the
linear interpolation

    z1 = (z_R - z_O) * sqrt(x^2 + y^2) / Rc + z_O

Flux and Inductance
-------------------
    Phi_i = sum over inside columns of B_z(x, y, z >= z1) * step^2
    L_i   = Phi_i / I_mid,i + mu_0 * l_i / (8 * pi)

where I_mid,i is the current on the middle segment of turn i and l_i the
turn's wire length (internal inductance of a straight round wire).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from solenoid_srf.physics.biot_savart import FieldGrid
from solenoid_srf.physics.constants import (
    RELATIVE_PERMEABILITY,
    VACUUM_PERMEABILITY_H_M,
)
from solenoid_srf.validation.errors import InvalidGeometryConfig, NumericalSingularity

if TYPE_CHECKING:
    from solenoid_srf.simulation.coil_geometry import CoilGeometry

# Mid-turn currents below this cannot normalize the flux
_MIN_MID_CURRENT_A = 1e-12


@dataclass
class TurnSurface:
    """
    Flux integration surface of one turn.

    Attributes
    ----------
    turn_index : int
        Zero-based turn index.
    mid_parameter : float
        Curve parameter of the turn's middle plane.
    axial_offset : float
        Height z_O of the surface centre in m.
    mask : np.ndarray
        Boolean (nx, ny), True for columns inside the turn.
    heights : np.ndarray
        Surface height z1 per column in m, shape (nx, ny).
    z_indices : np.ndarray
        Index of the first z-sample at or above z1, shape (nx, ny).
    n_clamped : int
        Inside columns whose z1 lies above the grid (topmost sample used).
    """

    turn_index: int
    mid_parameter: float
    axial_offset: float
    mask: np.ndarray
    heights: np.ndarray
    z_indices: np.ndarray
    n_clamped: int = 0

    @property
    def n_columns(self) -> int:
        """Number of grid columns contributing to the flux."""
        return int(np.count_nonzero(self.mask))


@dataclass
class InductanceResult:
    """
    Inductance of the coil and its per-turn breakdown.

    Attributes
    ----------
    flux_wb : np.ndarray
        Flux through each turn surface in Wb, shape (n_turns,).
    mid_currents : np.ndarray
        Current on each turn's middle segment, shape (n_turns,).
    flux_inductance_h : np.ndarray
        Flux / current per turn in H.
    internal_inductance_h : np.ndarray
        Internal wire inductance per turn in H.
    surfaces : list[TurnSurface]
        Integration surfaces used.
    """

    flux_wb: np.ndarray
    mid_currents: np.ndarray
    flux_inductance_h: np.ndarray
    internal_inductance_h: np.ndarray
    surfaces: list[TurnSurface] = field(default_factory=list)

    @property
    def turn_inductance_h(self) -> np.ndarray:
        return self.flux_inductance_h + self.internal_inductance_h

    @property
    def total_h(self) -> float:
        """Total coil inductance in H."""
        return float(np.sum(self.turn_inductance_h))

    @property
    def total_flux_wb(self) -> float:
        return float(np.sum(self.flux_wb))


def compute_internal_inductance(
    turn_lengths: np.ndarray,
    relative_permeability: float = RELATIVE_PERMEABILITY,
) -> np.ndarray:
    """
    Low-frequency internal inductance mu * l / (8 * pi) of each turn's wire.

    Examples
    --------
    >>> L_int = compute_internal_inductance(np.array([1.0]))
    >>> np.isclose(L_int[0], 5e-8)
    True
    """
    turn_lengths = np.asarray(turn_lengths, dtype=np.float64)
    return relative_permeability * VACUUM_PERMEABILITY_H_M * turn_lengths / (8.0 * np.pi)


def compute_wire_parameters(
    geometry: CoilGeometry,
    turn_index: int,
    azimuth: np.ndarray,
) -> np.ndarray:
    """
    Curve parameter t at which turn i's wire crosses each azimuth phi.

    Where cos(t/N1) >= 0 the wire point lies at azimuth t, past a pole
    (cos(t/N1) < 0) it lies at t + pi. Of the two windowed candidates

        t_a = t_start + ((phi - t_start) mod 2*pi)        needs cos(t_a/N1) >= 0
        t_b = t_start + ((phi + pi - t_start) mod 2*pi)   needs cos(t_b/N1) < 0

    the consistent one is used. A turn that crosses a pole can have both or
    neither; those azimuths take the candidate on the side of the turn's
    middle plane, t_a when neither fits.
    """
    n1 = geometry.tapering_factor
    t_start = geometry.turn_start_parameters[turn_index]
    t_mid = geometry.turn_mid_parameters[turn_index]
    azimuth = np.asarray(azimuth, dtype=np.float64)

    t_direct = t_start + np.mod(azimuth - t_start, 2.0 * np.pi)
    t_flipped = t_start + np.mod(azimuth + np.pi - t_start, 2.0 * np.pi)

    direct_fits = np.cos(t_direct / n1) >= 0.0
    flipped_fits = np.cos(t_flipped / n1) < 0.0
    prefer_flipped = np.cos(t_mid / n1) < 0.0

    use_flipped = flipped_fits & (~direct_fits | prefer_flipped)
    return np.where(use_flipped, t_flipped, t_direct)


def compute_turn_surface(
    geometry: CoilGeometry,
    turn_index: int,
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    wire_radius: float,
) -> TurnSurface:
    """
    Inclined flux surface of a single turn on the grid's (x, y) columns.

    Parameters
    ----------
    geometry : CoilGeometry
        Sampled coil.
    turn_index : int
        Zero-based turn index.
    x, y, z : np.ndarray
        Grid axes in m.
    wire_radius : float
        Wire radius r_w in m.

    Returns
    -------
    TurnSurface
    """
    if not 0 <= turn_index < geometry.n_turns:
        raise IndexError(
            f"turn_index {turn_index} out of range for {geometry.n_turns} turns"
        )

    radius = geometry.radius
    n1 = geometry.tapering_factor
    t_mid = geometry.turn_mid_parameters[turn_index]
    z_offset = radius * np.sin(t_mid / n1)

    grid_x, grid_y = np.meshgrid(x, y, indexing="ij")
    rho = np.hypot(grid_x, grid_y)
    azimuth = np.arctan2(grid_y, grid_x)

    t_wire = compute_wire_parameters(geometry, turn_index, azimuth)
    boundary_radius = np.abs(radius * np.cos(t_wire / n1))
    boundary_z = radius * np.sin(t_wire / n1)

    mask = (boundary_radius > wire_radius) & (rho**2 <= (boundary_radius - wire_radius) ** 2)

    safe_radius = np.where(boundary_radius > 0.0, boundary_radius, 1.0)
    heights = np.where(
        mask,
        (boundary_z - z_offset) * rho / safe_radius + z_offset,
        z_offset,
    )

    z_indices = np.searchsorted(z, heights, side="left")
    above_grid = z_indices >= z.size
    n_clamped = int(np.count_nonzero(above_grid & mask))
    z_indices = np.minimum(z_indices, z.size - 1)

    return TurnSurface(
        turn_index=turn_index,
        mid_parameter=float(t_mid),
        axial_offset=float(z_offset),
        mask=mask,
        heights=heights,
        z_indices=z_indices,
        n_clamped=n_clamped,
    )


def integrate_turn_flux(surface: TurnSurface, field_grid: FieldGrid) -> float:
    """
    Flux of B_z through a turn surface.

    Each inside column contributes B_z at its first z-sample at or above
    the surface, times the cell area step^2.
    """
    bz_surface = np.take_along_axis(
        field_grid.bz, surface.z_indices[..., np.newaxis], axis=2
    )[..., 0]
    return float(np.sum(bz_surface[surface.mask]) * field_grid.step**2)


def compute_inductance(
    geometry: CoilGeometry,
    field_grid: FieldGrid,
    currents: np.ndarray,
    wire_radius: float,
    verbose: bool = False,
) -> InductanceResult:
    """
    Total inductance from per-turn flux linkage plus internal inductance.

    Parameters
    ----------
    geometry : CoilGeometry
        Sampled coil (n_segments a multiple of 2 * n_turns).
    field_grid : FieldGrid
        Field sampled with the same currents.
    currents : np.ndarray
        Segment currents, shape (n_segments,).
    wire_radius : float
        Wire radius r_w in m.
    verbose : bool, optional
        Print per-turn results. Default is False.

    Returns
    -------
    InductanceResult

    Raises
    ------
    NumericalSingularity
        If a turn's middle-segment current is (near) zero.
    """
    currents = np.asarray(currents, dtype=np.float64)
    if currents.shape != (geometry.n_segments,):
        raise ValueError(
            f"currents must have shape ({geometry.n_segments},), got {currents.shape}"
        )
    if wire_radius <= 0:
        raise InvalidGeometryConfig(f"wire_radius must be positive, got {wire_radius}")

    n_turns = geometry.n_turns
    n_segments = geometry.n_segments

    flux = np.zeros(n_turns, dtype=np.float64)
    mid_currents = np.zeros(n_turns, dtype=np.float64)
    surfaces = []

    for i in range(n_turns):
        surface = compute_turn_surface(
            geometry, i, field_grid.x, field_grid.y, field_grid.z, wire_radius
        )
        surfaces.append(surface)
        flux[i] = integrate_turn_flux(surface, field_grid)

        mid_currents[i] = currents[(2 * i + 1) * n_segments // (2 * n_turns)]
        if abs(mid_currents[i]) < _MIN_MID_CURRENT_A:
            raise NumericalSingularity(
                f"Turn {i + 1}: middle-segment current {mid_currents[i]:.3g} A is "
                "too small to normalize the flux. Lower the excitation frequency."
            )

        if verbose:
            clamped = f", {surface.n_clamped} clamped" if surface.n_clamped else ""
            print(
                f"    Turn {i + 1}: {surface.n_columns} columns{clamped}, "
                f"flux = {flux[i]:.4g} Wb"
            )

    result = InductanceResult(
        flux_wb=flux,
        mid_currents=mid_currents,
        flux_inductance_h=flux / mid_currents,
        internal_inductance_h=compute_internal_inductance(geometry.turn_lengths),
        surfaces=surfaces,
    )

    if verbose:
        print(f"  Inductance: {result.total_h * 1e6:.4g} uH")

    return result
