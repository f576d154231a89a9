"""
SRF Pipeline - Self-Resonant Frequency of a Spherical Solenoid

Single entry point chaining the whole numerical model:

    validate -> geometry -> capacitance -> currents -> field grid
             -> flux / inductance -> f_res = 1 / (2*pi*sqrt(L*C))

Capacitance is evaluated before the Biot-Savart sweep so overlapping
geometries fail before the expensive part of the computation.

Usage:
    from solenoid_srf.simulation.pipeline import compute_srf

    L, C, f_res = compute_srf(5, 10.0, 1e6, 5e-4, 0.05, 200, 0.002)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Iterator

from solenoid_srf.physics.biot_savart import sample_field_grid
from solenoid_srf.physics.capacitance import CapacitanceResult, compute_capacitance
from solenoid_srf.physics.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_SINGULARITY_POLICY,
    GRID_MARGIN_M,
    SINGULARITY_THRESHOLD_M,
)
from solenoid_srf.physics.inductance import InductanceResult, compute_inductance
from solenoid_srf.physics.resonance import compute_dc_resistance, compute_resonant_frequency
from solenoid_srf.simulation.coil_geometry import Integrator, generate_coil, quad_integrator
from solenoid_srf.simulation.current_model import compute_segment_currents
from solenoid_srf.validation.errors import InvalidGeometryConfig
from solenoid_srf.validation.input_validators import (
    REQUIRED_CONFIG_SECTIONS,
    CoilValidationResult,
    require_valid_coil_parameters,
)


@dataclass
class SRFResult:
    """
    Outcome of one SRF computation.

    Unpacks as ``L, C, f_res = result``.

    Attributes
    ----------
    inductance_h : float
        Total inductance L in H.
    capacitance_f : float
        Total capacitance C in F.
    srf_hz : float
        Self-resonant frequency in Hz.
    inductance : InductanceResult
        Per-turn flux and inductance breakdown.
    capacitance : CapacitanceResult
        Per-pair capacitance breakdown.
    wire_length_m : float
        Total wire length in m.
    dc_resistance_ohm : float
        DC resistance of the (copper) wire in Ohm.
    n_singular : int
        Singular Biot-Savart contributions skipped.
    validation : CoilValidationResult
        Parameter validation report (warnings included).
    elapsed_sec : float
        Wall-clock duration of the computation.
    """

    inductance_h: float
    capacitance_f: float
    srf_hz: float
    inductance: InductanceResult
    capacitance: CapacitanceResult
    wire_length_m: float
    dc_resistance_ohm: float
    n_singular: int
    validation: CoilValidationResult
    elapsed_sec: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.inductance_h, self.capacitance_f, self.srf_hz))

    def summary(self) -> dict[str, Any]:
        """Scalar results as a plain dictionary."""
        return {
            "inductance_h": self.inductance_h,
            "capacitance_f": self.capacitance_f,
            "srf_hz": self.srf_hz,
            "wire_length_m": self.wire_length_m,
            "dc_resistance_ohm": self.dc_resistance_ohm,
            "total_flux_wb": self.inductance.total_flux_wb,
            "n_singular": self.n_singular,
            "elapsed_sec": self.elapsed_sec,
        }


def compute_srf(
    n_turns: int,
    tapering_factor: float,
    frequency_hz: float,
    wire_radius: float,
    radius: float,
    n_segments: int,
    step: float,
    margin: float = GRID_MARGIN_M,
    singularity_threshold: float = SINGULARITY_THRESHOLD_M,
    singularity_policy: str = DEFAULT_SINGULARITY_POLICY,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    integrator: Integrator = quad_integrator,
    verbose: bool = False,
) -> SRFResult:
    """
    Inductance, capacitance and self-resonant frequency of a spherical solenoid.

    Parameters
    ----------
    n_turns : int
        Number of turns N (>= 2).
    tapering_factor : float
        Tapering factor N1 (> 0).
    frequency_hz : float
        Low excitation frequency f1 used for the current phase delay.
    wire_radius : float
        Wire radius r_w in m.
    radius : float
        Coil radius R in m.
    n_segments : int
        Number of coil segments s (multiple of 2 * N).
    step : float
        Field grid spacing in m.
    margin : float, optional
        Grid extension beyond R in m. Default is 0.01.
    singularity_threshold : float, optional
        Biot-Savart singularity distance in m. Default is 1e-9.
    singularity_policy : str, optional
        "skip" (default) or "raise".
    chunk_size : int, optional
        Grid points per vectorized Biot-Savart batch.
    integrator : callable, optional
        Definite-integral evaluator for the turn lengths.
    verbose : bool, optional
        Print progress messages. Default is False.

    Returns
    -------
    SRFResult
        Unpacks as (L [H], C [F], f_res [Hz]).

    Raises
    ------
    InvalidGeometryConfig
        Parameters rejected before computation.
    GeometricOverlapError
        Adjacent or skip-adjacent turns overlap.
    NumericalSingularity
        Singular field evaluation (policy "raise") or non-finite field.
    NonPhysicalResult
        L or C is not positive.

    Examples
    --------
    >>> L, C, f_res = compute_srf(5, 10.0, 1e6, 5e-4, 0.05, 200, 0.002)
    >>> L > 0 and C > 0 and f_res > 0
    True
    """
    t_begin = time.perf_counter()

    validation = require_valid_coil_parameters(
        n_turns,
        tapering_factor,
        frequency_hz,
        wire_radius,
        radius,
        n_segments,
        step,
        margin=margin,
        singularity_policy=singularity_policy,
        chunk_size=chunk_size,
    )

    if verbose:
        print(f"  Coil: N={n_turns}, N1={tapering_factor}, R={radius * 1e3:.4g} mm, "
              f"r_w={wire_radius * 1e3:.4g} mm")
        for warning in validation.warnings:
            print(f"  WARNING: {warning}")

    # Step 1: Geometry and per-turn wire lengths
    geometry = generate_coil(n_turns, tapering_factor, radius, n_segments, integrator)
    wire_length = geometry.total_wire_length

    if verbose:
        print(f"  Wire length: {wire_length:.4g} m over {n_segments} segments")

    # Step 2: Capacitance (cheap, fails fast on overlapping turns)
    capacitance = compute_capacitance(geometry, wire_radius, verbose=verbose)

    # Step 3: Current snapshot along the wire
    currents = compute_segment_currents(geometry.segments, frequency_hz)

    # Step 4: Biot-Savart field over the grid
    field_grid = sample_field_grid(
        geometry.points,
        geometry.segments,
        currents,
        radius,
        step,
        margin=margin,
        singularity_threshold=singularity_threshold,
        singularity_policy=singularity_policy,
        chunk_size=chunk_size,
        verbose=verbose,
    )

    # Step 5: Flux linkage per turn
    inductance = compute_inductance(
        geometry, field_grid, currents, wire_radius, verbose=verbose
    )

    # Step 6: Resonance
    srf = compute_resonant_frequency(inductance.total_h, capacitance.total_f)

    elapsed = time.perf_counter() - t_begin
    if verbose:
        print(f"  SRF: {srf / 1e6:.4g} MHz ({elapsed:.1f} s)")

    return SRFResult(
        inductance_h=inductance.total_h,
        capacitance_f=capacitance.total_f,
        srf_hz=srf,
        inductance=inductance,
        capacitance=capacitance,
        wire_length_m=wire_length,
        dc_resistance_ohm=compute_dc_resistance(wire_length, wire_radius),
        n_singular=field_grid.n_singular,
        validation=validation,
        elapsed_sec=elapsed,
    )


def compute_srf_from_config(
    config: dict[str, Any] | None = None,
    verbose: bool = False,
) -> SRFResult:
    """
    Run compute_srf with parameters from a configuration dictionary.

    Parameters
    ----------
    config : dict, optional
        Configuration as returned by load_config(). If None, the default
        config file (or built-in defaults) is used.
    verbose : bool, optional
        Print progress messages.

    Returns
    -------
    SRFResult

    Raises
    ------
    InvalidGeometryConfig
        The config or one of its sections is not a mapping (e.g. a YAML
        list, or a section header with nothing under it).
    """
    from solenoid_srf.config import get_default_config, load_config

    if config is None:
        config = load_config()

    if not isinstance(config, dict):
        raise InvalidGeometryConfig(
            f"Config must be a mapping of sections, got {type(config).__name__}"
        )
    for section in REQUIRED_CONFIG_SECTIONS:
        if section in config and not isinstance(config[section], dict):
            raise InvalidGeometryConfig(
                f"Config section '{section}' must be a mapping, "
                f"got {type(config[section]).__name__}"
            )

    defaults = get_default_config()
    coil = {**defaults["coil"], **config.get("coil", {})}
    excitation = {**defaults["excitation"], **config.get("excitation", {})}
    discretization = {**defaults["discretization"], **config.get("discretization", {})}

    return compute_srf(
        n_turns=coil["n_turns"],
        tapering_factor=coil["tapering_factor"],
        frequency_hz=excitation["frequency_hz"],
        wire_radius=coil["wire_radius_m"],
        radius=coil["coil_radius_m"],
        n_segments=discretization["n_segments"],
        step=discretization["grid_step_m"],
        margin=discretization["grid_margin_m"],
        singularity_threshold=discretization["singularity_threshold_m"],
        singularity_policy=discretization["singularity_policy"],
        chunk_size=discretization["chunk_size"],
        verbose=verbose,
    )
