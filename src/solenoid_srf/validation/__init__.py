"""
Validation Module for the Spherical Solenoid SRF Pipeline

Provides the pipeline's error types, coil parameter checks and YAML
configuration validation.
"""

from __future__ import annotations

from solenoid_srf.validation.errors import (
    GeometricOverlapError,
    InvalidGeometryConfig,
    NonPhysicalResult,
    NumericalSingularity,
    SRFError,
)
from solenoid_srf.validation.input_validators import (
    CoilValidationResult,
    ConfigValidationResult,
    require_valid_coil_parameters,
    validate_coil_parameters,
    validate_config_file,
)

__all__ = [
    "SRFError",
    "InvalidGeometryConfig",
    "NumericalSingularity",
    "GeometricOverlapError",
    "NonPhysicalResult",
    "CoilValidationResult",
    "ConfigValidationResult",
    "validate_coil_parameters",
    "require_valid_coil_parameters",
    "validate_config_file",
]
