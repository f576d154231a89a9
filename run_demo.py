#!/usr/bin/env python
"""
Spherical Solenoid SRF - One-Click Demo

Computes inductance, capacitance and self-resonant frequency for a named
coil preset (default: "reference_sphere") or a YAML config file.

Usage:
    python run_demo.py
    python run_demo.py --preset quick_check
    python run_demo.py --config configs/default_coil.yaml
    python run_demo.py --list

Requirements:
    - numpy, scipy (standard scientific stack)
    - pyyaml
"""

from __future__ import annotations

import argparse
import sys

from solenoid_srf.presets import (
    get_preset,
    get_preset_names_and_descriptions,
    get_preset_parameters,
)
from solenoid_srf.simulation.pipeline import compute_srf, compute_srf_from_config
from solenoid_srf.validation import SRFError, validate_config_file


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Self-resonant frequency of a spherical solenoid coil"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--preset", default="reference_sphere",
        help="Coil preset name (default: reference_sphere)",
    )
    source.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--list", action="store_true", help="List presets and exit")
    parser.add_argument("--quiet", action="store_true", help="Only print the results")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the SRF pipeline for a preset or config file."""
    args = parse_args(argv)

    if args.list:
        for key, name, description in get_preset_names_and_descriptions():
            print(f"  {key:<18} {name}")
            print(f"  {'':<18} {description}")
        return 0

    verbose = not args.quiet

    if verbose:
        print()
        print("=" * 60)
        print("  SPHERICAL SOLENOID SRF")
        print("=" * 60)
        print()

    try:
        if args.config:
            loaded = validate_config_file(args.config)
            for warning in loaded.warnings:
                print(f"  WARNING: {warning}")
            if not loaded.is_valid:
                for error in loaded.errors:
                    print(f"Error: {error}")
                for suggestion in loaded.recovery_suggestions:
                    print(f"  Hint: {suggestion}")
                return 1
            if verbose:
                print(f"  Loading config: {args.config}")
            result = compute_srf_from_config(loaded.config, verbose=verbose)
        else:
            if verbose:
                print(f"  Loading preset: {get_preset(args.preset)['name']}")
            result = compute_srf(**get_preset_parameters(args.preset), verbose=verbose)
    except KeyError as e:
        print(f"Error: {e}")
        return 1
    except SRFError as e:
        print(f"Error ({type(e).__name__}): {e}")
        return 1

    print()
    print(f"  L     = {result.inductance_h * 1e6:.6g} uH")
    print(f"  C     = {result.capacitance_f * 1e12:.6g} pF")
    print(f"  f_res = {result.srf_hz / 1e6:.6g} MHz")
    print(f"  Wire: {result.wire_length_m:.4g} m, R_dc = {result.dc_resistance_ohm * 1e3:.4g} mOhm")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
