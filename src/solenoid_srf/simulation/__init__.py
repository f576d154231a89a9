"""
Simulation Module

Contains the coil curve generator, the traveling-wave current model and
the end-to-end SRF pipeline.
"""

from .coil_geometry import (
    CoilGeometry,
    compute_arc_length,
    compute_segment_vectors,
    compute_turn_lengths,
    generate_coil,
    generate_coil_points,
)
from .current_model import compute_segment_currents, compute_wavelength
from .pipeline import SRFResult, compute_srf, compute_srf_from_config

__all__ = [
    "CoilGeometry",
    "compute_arc_length",
    "compute_turn_lengths",
    "generate_coil_points",
    "compute_segment_vectors",
    "generate_coil",
    "compute_segment_currents",
    "compute_wavelength",
    "SRFResult",
    "compute_srf",
    "compute_srf_from_config",
]
