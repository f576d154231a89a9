"""
Coil Presets for the Spherical Solenoid SRF Pipeline

Pre-configured coil geometries for common use cases.
"""

from __future__ import annotations

from solenoid_srf.presets.coil_presets import (
    CYLINDER_LIMIT,
    PRESETS,
    QUICK_CHECK,
    REFERENCE_SPHERE,
    get_preset,
    get_preset_names_and_descriptions,
    get_preset_parameters,
    list_presets,
    preset_to_config,
)

__all__ = [
    "REFERENCE_SPHERE",
    "QUICK_CHECK",
    "CYLINDER_LIMIT",
    "PRESETS",
    "get_preset",
    "get_preset_parameters",
    "get_preset_names_and_descriptions",
    "list_presets",
    "preset_to_config",
]
