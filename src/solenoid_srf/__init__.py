"""
Spherical Solenoid SRF - Core Production Code

This package computes the self-resonant frequency of spherical (tapered)
solenoid coils:
- Physics: Biot-Savart field sampling, flux-linkage inductance,
  inter-turn capacitance network, LC resonance
- Simulation: Coil curve generation, current model, end-to-end pipeline
- Validation: Error types, parameter and config checks
- Presets: Named coil geometries

Usage:
    # After installing with: pip install -e .
    from solenoid_srf.simulation.pipeline import compute_srf
    from solenoid_srf.physics.biot_savart import sample_field_grid
    from solenoid_srf.presets import get_preset_parameters
    from solenoid_srf.config import load_config

    L, C, f_res = compute_srf(5, 10.0, 1e6, 5e-4, 0.05, 200, 0.002)
"""

__version__ = "0.1.0"
__all__ = ["physics", "simulation", "validation", "presets", "config"]
