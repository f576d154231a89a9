"""
Coil Presets for the Spherical Solenoid SRF Pipeline

Pre-configured coil geometries and discretizations for common use cases.
Each preset holds the keyword arguments of compute_srf plus a display
name and description.

Usage:
    from solenoid_srf.presets import REFERENCE_SPHERE, get_preset

    # Use preset directly
    params = REFERENCE_SPHERE

    # Or load by name
    params = get_preset("reference_sphere")
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Preset Definitions
# =============================================================================


REFERENCE_SPHERE: dict[str, Any] = {
    "name": "Reference Spherical Solenoid",
    "description": (
        "Five-turn coil wound pole to pole on a 50 mm sphere. "
        "Grid and segmentation of the published model."
    ),
    # Geometry
    "n_turns": 5,
    "tapering_factor": 10.0,
    "radius": 0.05,
    "wire_radius": 5e-4,
    # Excitation
    "frequency_hz": 1e6,
    # Discretization
    "n_segments": 200,
    "step": 0.002,
    "margin": 0.01,
}


QUICK_CHECK: dict[str, Any] = {
    "name": "Quick Check",
    "description": (
        "Small four-turn sphere on a coarse grid. Runs in seconds; "
        "useful for smoke tests, not for accurate results."
    ),
    # Geometry
    "n_turns": 4,
    "tapering_factor": 8.0,
    "radius": 0.03,
    "wire_radius": 3e-4,
    # Excitation
    "frequency_hz": 1e6,
    # Discretization
    "n_segments": 96,
    "step": 0.004,
    "margin": 0.006,
}


CYLINDER_LIMIT: dict[str, Any] = {
    "name": "Cylinder Limit",
    "description": (
        "Large tapering factor: the latitude stays within 18 degrees of the "
        "equator and the coil is close to a short cylindrical solenoid."
    ),
    # Geometry
    "n_turns": 8,
    "tapering_factor": 80.0,
    "radius": 0.02,
    "wire_radius": 2.5e-4,
    # Excitation
    "frequency_hz": 1e6,
    # Discretization
    "n_segments": 320,
    "step": 0.001,
    "margin": 0.005,
}


# =============================================================================
# Preset Registry
# =============================================================================


PRESETS: dict[str, dict[str, Any]] = {
    "reference_sphere": REFERENCE_SPHERE,
    "quick_check": QUICK_CHECK,
    "cylinder_limit": CYLINDER_LIMIT,
}

# Keys that are descriptive rather than compute_srf arguments
_DISPLAY_KEYS = ("name", "description")


def list_presets() -> list[str]:
    """
    List all available preset names.

    Examples
    --------
    >>> list_presets()
    ['reference_sphere', 'quick_check', 'cylinder_limit']
    """
    return list(PRESETS.keys())


def get_preset(name: str) -> dict[str, Any]:
    """
    Get a preset by name.

    Parameters
    ----------
    name : str
        Preset name (case-insensitive, underscores optional).

    Returns
    -------
    dict
        Copy of the preset parameter dictionary.

    Raises
    ------
    KeyError
        If preset name not found.

    Examples
    --------
    >>> get_preset("Quick Check")["n_turns"]
    4
    """
    normalized = name.lower().replace(" ", "_").replace("-", "_")

    if normalized not in PRESETS:
        available = ", ".join(list_presets())
        raise KeyError(
            f"Preset '{name}' not found. Available presets: {available}"
        )

    return dict(PRESETS[normalized])


def get_preset_parameters(name: str) -> dict[str, Any]:
    """Keyword arguments of compute_srf for a preset."""
    preset = get_preset(name)
    return {key: value for key, value in preset.items() if key not in _DISPLAY_KEYS}


def preset_to_config(name: str) -> dict[str, Any]:
    """
    Convert a preset into the YAML configuration layout.

    The result can be written with yaml.safe_dump() and run with
    compute_srf_from_config().
    """
    from solenoid_srf.config import get_default_config

    params = get_preset_parameters(name)
    config = get_default_config()

    config["coil"].update({
        "n_turns": params["n_turns"],
        "tapering_factor": params["tapering_factor"],
        "coil_radius_m": params["radius"],
        "wire_radius_m": params["wire_radius"],
    })
    config["excitation"]["frequency_hz"] = params["frequency_hz"]
    config["discretization"].update({
        "n_segments": params["n_segments"],
        "grid_step_m": params["step"],
        "grid_margin_m": params["margin"],
    })
    return config


def get_preset_names_and_descriptions() -> list[tuple[str, str, str]]:
    """
    Get all preset names with their display names and descriptions.

    Returns
    -------
    list[tuple[str, str, str]]
        List of (key, display_name, description) tuples.
    """
    result = []
    for key, preset in PRESETS.items():
        result.append((key, preset["name"], preset["description"]))
    return result
