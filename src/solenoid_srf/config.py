"""
Configuration Management for Spherical Solenoid SRF

Loads coil and discretization parameters from YAML config files with
fallback to hardcoded defaults in physics.constants.

Usage:
    from solenoid_srf.config import load_config, get_config_path

    cfg = load_config()  # Load default config
    cfg = load_config("configs/custom.yaml")  # Load custom config

    # Access parameters
    n_turns = cfg["coil"]["n_turns"]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

# Determine project root (works both installed and development mode)
# File is at: src/solenoid_srf/config.py
# Project root: src/solenoid_srf -> src -> project_root
_THIS_FILE = Path(__file__)
PROJECT_ROOT = _THIS_FILE.parent.parent.parent

DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "default_coil.yaml"


def get_config_path(config_name: str = "default_coil.yaml") -> Path:
    """
    Get the full path to a config file.

    Parameters
    ----------
    config_name : str
        Name of the config file (with or without .yaml extension).

    Returns
    -------
    Path
        Full path to the config file.
    """
    if not config_name.endswith(".yaml"):
        config_name = f"{config_name}.yaml"
    return PROJECT_ROOT / "configs" / config_name


def get_default_config() -> dict[str, Any]:
    """
    Return hardcoded default configuration.

    Used as fallback when config file is missing.
    """
    # Import here to avoid circular imports
    from solenoid_srf.physics.constants import (
        DEFAULT_CHUNK_SIZE,
        DEFAULT_COIL_RADIUS_M,
        DEFAULT_FREQUENCY_HZ,
        DEFAULT_GRID_STEP_M,
        DEFAULT_N_SEGMENTS,
        DEFAULT_N_TURNS,
        DEFAULT_SINGULARITY_POLICY,
        DEFAULT_TAPERING_FACTOR,
        DEFAULT_WIRE_RADIUS_M,
        GRID_MARGIN_M,
        SINGULARITY_THRESHOLD_M,
    )

    return {
        "coil": {
            "n_turns": DEFAULT_N_TURNS,
            "tapering_factor": DEFAULT_TAPERING_FACTOR,
            "coil_radius_m": DEFAULT_COIL_RADIUS_M,
            "wire_radius_m": DEFAULT_WIRE_RADIUS_M,
        },
        "excitation": {
            "frequency_hz": DEFAULT_FREQUENCY_HZ,
        },
        "discretization": {
            "n_segments": DEFAULT_N_SEGMENTS,
            "grid_step_m": DEFAULT_GRID_STEP_M,
            "grid_margin_m": GRID_MARGIN_M,
            "singularity_threshold_m": SINGULARITY_THRESHOLD_M,
            "singularity_policy": DEFAULT_SINGULARITY_POLICY,
            "chunk_size": DEFAULT_CHUNK_SIZE,
        },
    }


def load_config_safe(
    config_path: str | Path | None = None,
) -> tuple[dict[str, Any], list[str]]:
    """
    Load a config file and report everything that was replaced by defaults.

    The file goes through validation.validate_config_file(), so a top level
    or section that is not a mapping is swapped for the built-in defaults
    instead of reaching the pipeline.

    Returns
    -------
    tuple[dict, list[str]]
        (config_dict, messages). Errors come first, then warnings; the list
        is empty when the file loaded cleanly.
    """
    # Import here to avoid circular imports
    from solenoid_srf.validation.input_validators import validate_config_file

    result = validate_config_file(config_path)
    return result.config, result.errors + result.warnings


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file with fallback to defaults.

    Never raises. Missing, empty, malformed or wrongly shaped files give the
    built-in defaults (per section where only a section is bad); use
    load_config_safe() to see what was replaced.

    Examples
    --------
    >>> cfg = load_config()
    >>> cfg["coil"]["n_turns"]
    5
    """
    config, _ = load_config_safe(config_path)
    return config
