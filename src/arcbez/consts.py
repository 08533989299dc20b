"""Central module containing calibration constants for arc-length handling"""

from __future__ import annotations

# Number of Gauss-Legendre nodes used to integrate the speed of a segment
GAUSS_LEGENDRE_ORDER: int = 24
GAUSS_LEGENDRE_MIN_ORDER: int = 16
GAUSS_LEGENDRE_MAX_ORDER: int = 64

# Length-to-parameter search: residual tolerance relative to max(total_length, 1)
T2LENGTH_TOLERANCE: float = 1.0e-9
T2LENGTH_MAX_ITERATIONS: int = 100

# Default absolute tolerance for approximate point comparison
POINT_EQUALITY_TOLERANCE: float = 1.0e-9
