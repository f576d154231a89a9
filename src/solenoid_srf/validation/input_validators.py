"""
Input Validators for the Spherical Solenoid SRF Pipeline

Provides validation for:
- Coil geometry and discretization parameters
- Field-sampling cost (grid points x segments)
- YAML configuration file parsing

Validators return result dataclasses with errors, warnings and recovery
suggestions; ``require_valid_coil_parameters`` turns errors into an
InvalidGeometryConfig before any computation starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from solenoid_srf.physics.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_SINGULARITY_POLICY,
    GRID_MARGIN_M,
    SINGULARITY_POLICIES,
    WAVE_SPEED_M_S,
)
from solenoid_srf.validation.errors import InvalidGeometryConfig

# Above this many point-segment evaluations the field sweep takes minutes
FIELD_EVALUATION_WARNING: float = 1e9

# Fraction of the wavelength beyond which the coil is electrically long
ELECTRICALLY_SHORT_FRACTION: float = 0.1

MIN_SEGMENTS_PER_TURN: int = 16


# =============================================================================
# Validation Result Types
# =============================================================================


@dataclass
class CoilValidationResult:
    """Result of coil parameter validation.

    Attributes
    ----------
    is_valid : bool
        True if the pipeline can run with these parameters.
    n_grid_points : int
        Number of field grid points (0 if the grid is undefined).
    n_field_evaluations : float
        Grid points x segments, the cost of the Biot-Savart sweep.
    warnings : list[str]
        Non-fatal warnings (e.g., coarse grid).
    errors : list[str]
        Fatal errors (e.g., indivisible segment count).
    recovery_suggestions : list[str]
        Actionable suggestions for fixing issues.
    """

    is_valid: bool
    n_grid_points: int
    n_field_evaluations: float
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    recovery_suggestions: list[str] = field(default_factory=list)


@dataclass
class ConfigValidationResult:
    """Result of YAML configuration file validation.

    Attributes
    ----------
    is_valid : bool
        True if config loaded and validated successfully.
    config : dict | None
        Loaded configuration (None if load failed).
    file_path : Path | None
        Path to the config file (None if using defaults).
    warnings : list[str]
        Non-fatal warnings (e.g., missing optional fields).
    errors : list[str]
        Fatal errors (e.g., parse failures).
    recovery_suggestions : list[str]
        Actionable suggestions for fixing issues.
    """

    is_valid: bool
    config: dict[str, Any] | None
    file_path: Path | None
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    recovery_suggestions: list[str] = field(default_factory=list)


# =============================================================================
# Coil Parameter Validation
# =============================================================================


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_positive_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float, np.integer, np.floating))
        and not isinstance(value, bool)
        and bool(np.isfinite(value))
        and value > 0
    )


def estimate_field_evaluations(
    radius: float,
    step: float,
    n_segments: int,
    margin: float = GRID_MARGIN_M,
) -> tuple[int, float]:
    """
    Size of the Biot-Savart sweep.

    Returns
    -------
    tuple[int, float]
        (number of grid points, grid points x segments).
    """
    n_axis = int(np.floor(2.0 * (radius + margin) / step + 1e-9)) + 1
    n_points = n_axis**3
    return n_points, float(n_points) * n_segments


def validate_coil_parameters(
    n_turns: int,
    tapering_factor: float,
    frequency_hz: float,
    wire_radius: float,
    radius: float,
    n_segments: int,
    step: float,
    margin: float = GRID_MARGIN_M,
    singularity_policy: str = DEFAULT_SINGULARITY_POLICY,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> CoilValidationResult:
    """
    Check coil and discretization parameters before computation.

    Parameters
    ----------
    n_turns : int
        Number of turns N (>= 2).
    tapering_factor : float
        Tapering factor N1 (> 0).
    frequency_hz : float
        Excitation frequency f1 (> 0).
    wire_radius : float
        Wire radius r_w in m (> 0).
    radius : float
        Coil radius R in m (> 0).
    n_segments : int
        Segment count s, a multiple of 2 * N.
    step : float
        Grid spacing in m (> 0).
    margin : float, optional
        Grid margin beyond R in m (>= 0).
    singularity_policy : str, optional
        "skip" or "raise".
    chunk_size : int, optional
        Grid points per vectorized batch (>= 1).

    Returns
    -------
    CoilValidationResult

    Examples
    --------
    >>> result = validate_coil_parameters(5, 10.0, 1e6, 5e-4, 0.05, 200, 0.002)
    >>> result.is_valid
    True

    >>> result = validate_coil_parameters(5, 10.0, 1e6, 5e-4, 0.05, 205, 0.002)
    >>> result.is_valid
    False
    """
    errors = []
    warnings = []
    suggestions = []

    if not _is_integer(n_turns) or n_turns < 2:
        errors.append(f"INVALID TURN COUNT: n_turns must be an integer >= 2, got {n_turns!r}.")

    if not _is_integer(n_segments) or n_segments < 1:
        errors.append(
            f"INVALID SEGMENT COUNT: n_segments must be a positive integer, got {n_segments!r}."
        )
    elif _is_integer(n_turns) and n_turns >= 2 and n_segments % (2 * n_turns) != 0:
        errors.append(
            f"INDIVISIBLE SEGMENT COUNT: n_segments ({n_segments}) must be a multiple "
            f"of 2 * n_turns ({2 * n_turns})."
        )
        lower = (n_segments // (2 * n_turns)) * 2 * n_turns
        upper = lower + 2 * n_turns
        suggestions.append(
            f"Use n_segments = {upper}" + (f" or {lower}." if lower > 0 else ".")
        )

    for name, value in (
        ("tapering_factor", tapering_factor),
        ("frequency_hz", frequency_hz),
        ("wire_radius", wire_radius),
        ("radius", radius),
        ("step", step),
    ):
        if not _is_positive_number(value):
            errors.append(f"NON-POSITIVE PARAMETER: {name} must be > 0, got {value!r}.")

    if not isinstance(margin, (int, float)) or isinstance(margin, bool) or margin < 0:
        errors.append(f"INVALID MARGIN: margin must be >= 0, got {margin!r}.")

    if singularity_policy not in SINGULARITY_POLICIES:
        errors.append(
            f"UNKNOWN SINGULARITY POLICY: '{singularity_policy}'. "
            f"Use one of {SINGULARITY_POLICIES}."
        )

    if not _is_integer(chunk_size) or chunk_size < 1:
        errors.append(f"INVALID CHUNK SIZE: chunk_size must be an integer >= 1, got {chunk_size!r}.")

    n_points = 0
    n_evaluations = 0.0

    if not errors:
        n_points, n_evaluations = estimate_field_evaluations(radius, step, n_segments, margin)

        if 2.0 * wire_radius >= radius:
            errors.append(
                f"WIRE TOO THICK: wire diameter ({2 * wire_radius:.4g} m) must be "
                f"smaller than the coil radius ({radius:.4g} m)."
            )

        if step > radius / 5.0:
            warnings.append(
                f"COARSE GRID: step ({step:.4g} m) exceeds R/5 ({radius / 5:.4g} m). "
                "Flux integration will be inaccurate."
            )
            suggestions.append(f"Use step <= {radius / 20:.4g} m for percent-level accuracy.")

        segments_per_turn = n_segments / n_turns
        if segments_per_turn < MIN_SEGMENTS_PER_TURN:
            warnings.append(
                f"FEW SEGMENTS: {segments_per_turn:.0f} segments per turn "
                f"(recommended >= {MIN_SEGMENTS_PER_TURN})."
            )

        wavelength = WAVE_SPEED_M_S / frequency_hz
        approx_length = 2.0 * np.pi * radius * n_turns
        if approx_length > ELECTRICALLY_SHORT_FRACTION * wavelength:
            warnings.append(
                f"ELECTRICALLY LONG COIL: wire length (~{approx_length:.3g} m) exceeds "
                f"{ELECTRICALLY_SHORT_FRACTION:.0%} of the wavelength ({wavelength:.3g} m). "
                "The current is no longer uniform."
            )
            suggestions.append("Lower frequency_hz; the inductance model assumes a low f1.")

        if n_evaluations > FIELD_EVALUATION_WARNING:
            warnings.append(
                f"LARGE FIELD SWEEP: {n_evaluations:.3g} point-segment evaluations "
                f"({n_points:,} grid points)."
            )
            suggestions.append("Increase step or reduce margin to shorten the run.")

    return CoilValidationResult(
        is_valid=len(errors) == 0,
        n_grid_points=n_points,
        n_field_evaluations=n_evaluations,
        warnings=warnings,
        errors=errors,
        recovery_suggestions=suggestions,
    )


def require_valid_coil_parameters(*args: Any, **kwargs: Any) -> CoilValidationResult:
    """
    Validate coil parameters and raise on any error.

    Takes the same arguments as validate_coil_parameters.

    Raises
    ------
    InvalidGeometryConfig
        With all error messages joined.
    """
    result = validate_coil_parameters(*args, **kwargs)
    if not result.is_valid:
        raise InvalidGeometryConfig(" ".join(result.errors))
    return result


# =============================================================================
# Configuration File Validation
# =============================================================================

# Required sections in config
REQUIRED_CONFIG_SECTIONS = ["coil", "excitation", "discretization"]

# Type specifications for validation
CONFIG_TYPE_SPECS = {
    "coil": {
        "n_turns": (int, 2, 1000),
        "tapering_factor": (float, 1e-3, 1e9),
        "coil_radius_m": (float, 1e-4, 10.0),
        "wire_radius_m": (float, 1e-6, 0.1),
    },
    "excitation": {
        "frequency_hz": (float, 1.0, 1e10),
    },
    "discretization": {
        "n_segments": (int, 4, 1_000_000),
        "grid_step_m": (float, 1e-6, 1.0),
        "grid_margin_m": (float, 0.0, 10.0),
        "singularity_threshold_m": (float, 0.0, 1e-3),
        "chunk_size": (int, 1, 1_000_000),
    },
}


def validate_config_file(
    config_path: Path | str | None = None,
    strict: bool = False,
) -> ConfigValidationResult:
    """
    Load and validate YAML configuration file.

    Provides graceful error handling with helpful messages for:
    - Missing files (falls back to defaults)
    - Malformed YAML (syntax errors)
    - Invalid parameter values (type/range checks)

    Parameters
    ----------
    config_path : Path or str, optional
        Path to YAML config file. If None, uses default_coil.yaml.
    strict : bool
        If True, treat warnings as errors. Default False.

    Returns
    -------
    ConfigValidationResult
        Validation result with loaded config and any issues found.
    """
    from solenoid_srf.config import DEFAULT_CONFIG_PATH, get_default_config

    warnings = []
    errors = []
    suggestions = []

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = Path(config_path)

    config = None
    file_exists = config_path.exists()

    if not file_exists:
        warnings.append(
            f"CONFIG FILE NOT FOUND: '{config_path}' does not exist. "
            "Using built-in defaults."
        )
        suggestions.append(
            f"Create config file at '{config_path}' or use load_config() without path."
        )
        config = get_default_config()
    else:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            if config is None:
                warnings.append(
                    f"CONFIG FILE EMPTY: '{config_path}' contains no data. "
                    "Using built-in defaults."
                )
                config = get_default_config()
        except yaml.YAMLError as e:
            errors.append(f"YAML PARSE ERROR in '{config_path}': {str(e)}")
            suggestions.append(
                "Check YAML syntax: proper indentation (2 spaces), "
                "colons after keys, no tabs."
            )
            config = get_default_config()
        except IOError as e:
            errors.append(f"FILE READ ERROR for '{config_path}': {str(e)}")
            suggestions.append("Check file permissions and path.")
            config = get_default_config()

    if not isinstance(config, dict):
        errors.append(
            f"INVALID CONFIG STRUCTURE: top level of '{config_path}' must be a mapping, "
            f"got {type(config).__name__}."
        )
        config = get_default_config()

    defaults = get_default_config()

    for section in REQUIRED_CONFIG_SECTIONS:
        if section not in config:
            if strict:
                errors.append(f"MISSING REQUIRED SECTION: '{section}' not found in config.")
            else:
                warnings.append(f"MISSING SECTION: '{section}' not found. Using defaults.")
            config[section] = defaults[section]
        elif not isinstance(config[section], dict):
            errors.append(
                f"INVALID SECTION: '{section}' must be a mapping, "
                f"got {type(config[section]).__name__}. Using defaults."
            )
            config[section] = defaults[section]

    for section, specs in CONFIG_TYPE_SPECS.items():
        for param, (expected_type, min_val, max_val) in specs.items():
            if param not in config[section]:
                continue
            value = config[section][param]

            # Integers are acceptable where floats are expected
            accepted = (int, float) if expected_type is float else (int,)
            if isinstance(value, bool) or not isinstance(value, accepted):
                if strict:
                    errors.append(
                        f"TYPE ERROR: {section}.{param} should be {expected_type.__name__}, "
                        f"got {type(value).__name__}."
                    )
                    continue
                warnings.append(
                    f"TYPE WARNING: {section}.{param} should be {expected_type.__name__}, "
                    f"got {type(value).__name__}. Attempting conversion."
                )
                try:
                    value = expected_type(value)
                    config[section][param] = value
                except (ValueError, TypeError):
                    errors.append(
                        f"CONVERSION FAILED: Cannot convert {section}.{param} "
                        f"value '{value}' to {expected_type.__name__}."
                    )
                    continue

            if value < min_val or value > max_val:
                warnings.append(
                    f"RANGE WARNING: {section}.{param}={value} is outside "
                    f"expected range [{min_val}, {max_val}]."
                )

    policy = config["discretization"].get("singularity_policy", DEFAULT_SINGULARITY_POLICY)
    if policy not in SINGULARITY_POLICIES:
        errors.append(
            f"UNKNOWN SINGULARITY POLICY: discretization.singularity_policy='{policy}'. "
            f"Use one of {SINGULARITY_POLICIES}."
        )

    is_valid = len(errors) == 0
    if strict:
        is_valid = is_valid and len(warnings) == 0

    return ConfigValidationResult(
        is_valid=is_valid,
        config=config,
        file_path=config_path if file_exists else None,
        warnings=warnings,
        errors=errors,
        recovery_suggestions=suggestions,
    )
