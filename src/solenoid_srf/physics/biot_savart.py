"""
Biot-Savart Field Sampler - Magnetic Field of the Coil on a 3-D Grid

Every coil segment is treated as a straight current element located at its
midpoint. The field at a point p is the superposition

    B(p) = mu_0 / (4 * pi) * sum_k I_k * (dl_k x r_k) / |r_k|^3

where r_k = p - m_k and m_k is the midpoint of segment k.

Singularity Handling
--------------------
When a grid point lies within ``singularity_threshold`` of a segment
midpoint the contribution diverges. Two policies are supported:

- "skip":  the contribution is dropped and counted in FieldGrid.n_singular
- "raise": NumericalSingularity is raised with the grid coordinate

A non-finite field after summation always raises NumericalSingularity.

Performance
-----------
Grid points are evaluated in fixed-size chunks against all segments with
numpy broadcasting. The cost is O(n_grid_points * n_segments); memory per
chunk is O(chunk_size * n_segments). Chunk order is fixed, so repeated runs
are bit-identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from solenoid_srf.physics.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_SINGULARITY_POLICY,
    GRID_MARGIN_M,
    SINGULARITY_POLICIES,
    SINGULARITY_THRESHOLD_M,
    VACUUM_PERMEABILITY_H_M,
)
from solenoid_srf.validation.errors import InvalidGeometryConfig, NumericalSingularity


@dataclass
class FieldGrid:
    """
    Sampled magnetic field of the coil.

    Attributes
    ----------
    x, y, z : np.ndarray
        Grid axes in m, shapes (nx,), (ny,), (nz,).
    b_magnitude : np.ndarray
        |B| in T, shape (nx, ny, nz).
    bz : np.ndarray
        Vertical field component B_z in T, shape (nx, ny, nz).
    step : float
        Grid spacing in m.
    n_singular : int
        Number of skipped singular segment contributions.
    """

    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    b_magnitude: np.ndarray
    bz: np.ndarray
    step: float
    n_singular: int = 0

    @property
    def shape(self) -> tuple[int, int, int]:
        return self.bz.shape

    @property
    def n_points(self) -> int:
        return self.bz.size


def build_grid_axis(
    radius: float,
    step: float,
    margin: float = GRID_MARGIN_M,
) -> np.ndarray:
    """
    Sample positions along one grid axis.

    The axis starts at -(radius + margin) and advances by ``step`` up to and
    including +(radius + margin) when the extent is a multiple of the step.

    Examples
    --------
    >>> build_grid_axis(0.05, 0.01, margin=0.0).shape
    (11,)
    """
    if step <= 0:
        raise InvalidGeometryConfig(f"step must be positive, got {step}")
    if margin < 0:
        raise InvalidGeometryConfig(f"margin must be non-negative, got {margin}")

    extent = radius + margin
    n_samples = int(np.floor(2.0 * extent / step + 1e-9)) + 1
    return -extent + step * np.arange(n_samples)


def compute_field_at_points(
    points: np.ndarray,
    coil_points: np.ndarray,
    segments: np.ndarray,
    currents: np.ndarray,
    singularity_threshold: float = SINGULARITY_THRESHOLD_M,
    singularity_policy: str = DEFAULT_SINGULARITY_POLICY,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> tuple[np.ndarray, int]:
    """
    Biot-Savart field of a segmented wire at arbitrary points.

    Parameters
    ----------
    points : np.ndarray
        Evaluation points with shape (n_points, 3) in m.
    coil_points : np.ndarray
        Curve samples with shape (n_segments + 1, 3) in m.
    segments : np.ndarray
        Segment vectors with shape (n_segments, 3) in m.
    currents : np.ndarray
        Segment currents with shape (n_segments,) in A.
    singularity_threshold : float, optional
        Distance below which a contribution is singular. Default 1e-9 m.
    singularity_policy : str, optional
        "skip" or "raise". Default is "skip".
    chunk_size : int, optional
        Points per vectorized batch.

    Returns
    -------
    field : np.ndarray
        B vectors with shape (n_points, 3) in T.
    n_singular : int
        Number of skipped singular contributions.

    Raises
    ------
    NumericalSingularity
        With policy "raise" when a point coincides with a segment.
    """
    points = np.asarray(points, dtype=np.float64)
    coil_points = np.asarray(coil_points, dtype=np.float64)
    segments = np.asarray(segments, dtype=np.float64)
    currents = np.asarray(currents, dtype=np.float64)

    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"points must have shape (N, 3), got {points.shape}")
    if segments.ndim != 2 or segments.shape[1] != 3:
        raise ValueError(f"segments must have shape (S, 3), got {segments.shape}")
    if coil_points.shape != (segments.shape[0] + 1, 3):
        raise ValueError(
            f"coil_points must have shape ({segments.shape[0] + 1}, 3), "
            f"got {coil_points.shape}"
        )
    if currents.shape != (segments.shape[0],):
        raise ValueError(
            f"currents must have shape ({segments.shape[0]},), got {currents.shape}"
        )
    if singularity_policy not in SINGULARITY_POLICIES:
        raise InvalidGeometryConfig(
            f"Unknown singularity_policy '{singularity_policy}'. "
            f"Use one of {SINGULARITY_POLICIES}."
        )
    if chunk_size < 1:
        raise InvalidGeometryConfig(f"chunk_size must be >= 1, got {chunk_size}")

    midpoints = 0.5 * (coil_points[1:] + coil_points[:-1])
    prefactor = VACUUM_PERMEABILITY_H_M / (4.0 * np.pi)

    n_points = points.shape[0]
    field = np.zeros((n_points, 3), dtype=np.float64)
    n_singular = 0

    for start in range(0, n_points, chunk_size):
        chunk = points[start:start + chunk_size]

        # r: (chunk, S, 3) from every segment midpoint to every point
        r = chunk[:, np.newaxis, :] - midpoints[np.newaxis, :, :]
        distances = np.linalg.norm(r, axis=2)

        singular = distances < singularity_threshold
        if np.any(singular):
            if singularity_policy == "raise":
                p_idx, seg_idx = np.argwhere(singular)[0]
                x, y, z = chunk[p_idx]
                raise NumericalSingularity(
                    f"Evaluation point ({x:.6g}, {y:.6g}, {z:.6g}) m coincides with "
                    f"coil segment {seg_idx} (distance {distances[p_idx, seg_idx]:.3g} m "
                    f"< {singularity_threshold:.3g} m)"
                )
            n_singular += int(np.count_nonzero(singular))

        safe_distances = np.where(singular, 1.0, distances)
        weights = np.where(singular, 0.0, currents[np.newaxis, :] / safe_distances**3)

        cross = np.cross(segments[np.newaxis, :, :], r)
        field[start:start + chunk.shape[0]] = prefactor * np.einsum("ps,psk->pk", weights, cross)

    return field, n_singular


def sample_field_grid(
    coil_points: np.ndarray,
    segments: np.ndarray,
    currents: np.ndarray,
    radius: float,
    step: float,
    margin: float = GRID_MARGIN_M,
    singularity_threshold: float = SINGULARITY_THRESHOLD_M,
    singularity_policy: str = DEFAULT_SINGULARITY_POLICY,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    verbose: bool = False,
) -> FieldGrid:
    """
    Sample the coil field over the cubic grid enclosing the coil.

    Parameters
    ----------
    coil_points : np.ndarray
        Curve samples with shape (n_segments + 1, 3) in m.
    segments : np.ndarray
        Segment vectors with shape (n_segments, 3) in m.
    currents : np.ndarray
        Segment currents with shape (n_segments,).
    radius : float
        Coil (sphere) radius R in m.
    step : float
        Grid spacing in m.
    margin : float, optional
        Extra space beyond R on every side. Default 0.01 m.
    singularity_threshold, singularity_policy, chunk_size
        See compute_field_at_points.
    verbose : bool, optional
        Print progress messages. Default is False.

    Returns
    -------
    FieldGrid
        Field magnitude and B_z over the grid.

    Raises
    ------
    NumericalSingularity
        If the summed field contains Inf/NaN, or with policy "raise" when a
        grid point coincides with a segment.
    """
    axis = build_grid_axis(radius, step, margin)
    n_axis = axis.size

    grid_x, grid_y, grid_z = np.meshgrid(axis, axis, axis, indexing="ij")
    grid_points = np.column_stack([grid_x.ravel(), grid_y.ravel(), grid_z.ravel()])
    n_points = grid_points.shape[0]

    if verbose:
        print(f"  Field grid: {n_axis}^3 = {n_points:,} points @ {step * 1e3:.3g} mm")
        print(f"  Coil segments: {segments.shape[0]}")

    # Sweep in ~10 blocks so progress can be reported between them
    block_size = max(chunk_size, int(np.ceil(n_points / 10 / chunk_size)) * chunk_size)
    field = np.empty((n_points, 3), dtype=np.float64)
    n_singular = 0

    for start in range(0, n_points, block_size):
        stop = min(start + block_size, n_points)
        field[start:stop], block_singular = compute_field_at_points(
            grid_points[start:stop],
            coil_points,
            segments,
            currents,
            singularity_threshold=singularity_threshold,
            singularity_policy=singularity_policy,
            chunk_size=chunk_size,
        )
        n_singular += block_singular

        if verbose:
            print(f"    Progress: {100 * stop / n_points:.0f}%")

    finite = np.all(np.isfinite(field), axis=1)
    if not np.all(finite):
        x, y, z = grid_points[np.argmin(finite)]
        raise NumericalSingularity(
            f"Non-finite magnetic field at grid point ({x:.6g}, {y:.6g}, {z:.6g}) m"
        )

    if verbose and n_singular > 0:
        print(f"  Skipped {n_singular} singular contributions")

    field = field.reshape(n_axis, n_axis, n_axis, 3)

    return FieldGrid(
        x=axis,
        y=axis.copy(),
        z=axis.copy(),
        b_magnitude=np.linalg.norm(field, axis=3),
        bz=field[..., 2].copy(),
        step=float(step),
        n_singular=n_singular,
    )


def validate_field_grid(field_grid: FieldGrid) -> dict[str, Any]:
    """
    Diagnostic summary of a sampled field.

    Returns
    -------
    dict
        - is_valid: bool
        - shape: tuple
        - has_infinities: bool
        - has_nans: bool
        - max_magnitude: float
        - n_singular: int
        - errors: list of str
    """
    errors = []

    has_infinities = bool(np.any(np.isinf(field_grid.b_magnitude)))
    has_nans = bool(np.any(np.isnan(field_grid.b_magnitude)))

    if has_infinities:
        errors.append("Field contains infinite values")
    if has_nans:
        errors.append("Field contains NaN values")
    if field_grid.bz.shape != field_grid.b_magnitude.shape:
        errors.append(
            f"Shape mismatch: bz {field_grid.bz.shape} vs "
            f"b_magnitude {field_grid.b_magnitude.shape}"
        )

    return {
        "is_valid": len(errors) == 0,
        "shape": field_grid.shape,
        "has_infinities": has_infinities,
        "has_nans": has_nans,
        "max_magnitude": float(np.max(field_grid.b_magnitude)) if field_grid.n_points > 0 else None,
        "n_singular": field_grid.n_singular,
        "errors": errors,
    }
