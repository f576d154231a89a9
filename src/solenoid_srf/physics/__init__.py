"""
Physics Module

Contains the Biot-Savart field sampler, flux-linkage inductance model,
inter-turn capacitance network and LC resonance for spherical solenoids.
"""

from .constants import *
from .biot_savart import (
    FieldGrid,
    build_grid_axis,
    compute_field_at_points,
    sample_field_grid,
    validate_field_grid,
)
from .capacitance import (
    CapacitanceResult,
    compute_capacitance,
    compute_pair_capacitance,
    series_capacitance,
)
from .inductance import (
    InductanceResult,
    TurnSurface,
    compute_inductance,
    compute_internal_inductance,
)
from .resonance import compute_dc_resistance, compute_resonant_frequency
