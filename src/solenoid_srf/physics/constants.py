"""
Physical Constants for Spherical Solenoid SRF Calculations

All constants include units in their names. Values follow the inductance /
capacitance model of Zhou & Huang, "An accurate model for fast calculating
the resonant frequency of an irregular solenoid".
"""

from __future__ import annotations

import numpy as np

# Electromagnetic Constants
VACUUM_PERMEABILITY_H_M: float = 4.0 * np.pi * 1e-7  # H/m, classical definition
VACUUM_PERMITTIVITY_F_M: float = 8.854187817e-12  # F/m
RELATIVE_PERMEABILITY: float = 1.0  # Air core

# Propagation speed used for the current phase delay. Rounded on purpose,
# the current model is calibrated against c = 3e8 m/s.
WAVE_SPEED_M_S: float = 3e8

# Conductor (copper)
COPPER_RESISTIVITY_OHM_M: float = 1.72e-8
COPPER_CONDUCTIVITY_S_M: float = 5.96e7

# =============================================================================
# Default Coil Geometry
# =============================================================================

DEFAULT_N_TURNS: int = 5
DEFAULT_TAPERING_FACTOR: float = 10.0  # t / N1 spans pole to pole for N = 5
DEFAULT_COIL_RADIUS_M: float = 0.05
DEFAULT_WIRE_RADIUS_M: float = 5e-4

# Low excitation frequency, coil is electrically short
DEFAULT_FREQUENCY_HZ: float = 1e6

# =============================================================================
# Discretization Parameters
# =============================================================================

DEFAULT_N_SEGMENTS: int = 200
DEFAULT_GRID_STEP_M: float = 0.002

# Free space around the coil included in the field grid
GRID_MARGIN_M: float = 0.01

# Biot-Savart contributions closer than this are treated as singular
SINGULARITY_THRESHOLD_M: float = 1e-9
SINGULARITY_POLICIES: tuple[str, ...] = ("skip", "raise")
DEFAULT_SINGULARITY_POLICY: str = "skip"

# Segments shorter than this are considered coincident points
MIN_SEGMENT_LENGTH_M: float = 1e-15

# Grid points evaluated per vectorized Biot-Savart batch
DEFAULT_CHUNK_SIZE: int = 2048

# Relative tolerance handed to scipy.integrate.quad for turn lengths
ARC_LENGTH_EPSREL: float = 1e-10
ARC_LENGTH_QUAD_LIMIT: int = 200
