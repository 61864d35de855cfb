"""Shared numeric constants used across the model and operations."""

import math

PRECISION: float = 1e-3
"""Absolute tolerance for every floating-point comparison."""

PHI: float = (1 + math.sqrt(5)) / 2
"""The golden ratio."""

SNUB_FACE_COUNTS: frozenset[int] = frozenset({20, 38, 92})
"""Face counts of the snub solids (icosahedron, snub cube, snub dodecahedron)."""
