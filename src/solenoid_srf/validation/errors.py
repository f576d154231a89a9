"""
Error Types for the SRF Pipeline

Every failure of the pipeline is raised as one of these types, carrying the
offending turn index or grid coordinate in its message. No partial results
are returned.
"""

from __future__ import annotations


class SRFError(Exception):
    """Base class for all SRF pipeline errors."""


class InvalidGeometryConfig(SRFError, ValueError):
    """Coil or discretization parameters rejected before computation."""


class NumericalSingularity(SRFError, ArithmeticError):
    """A field or flux evaluation hit a near-zero denominator."""


class GeometricOverlapError(SRFError, ValueError):
    """Turn pitch does not exceed the wire diameter (turns overlap)."""


class NonPhysicalResult(SRFError, ArithmeticError):
    """Inductance or capacitance is not strictly positive."""
