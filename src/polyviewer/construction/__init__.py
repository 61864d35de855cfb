"""Solid construction: seed coordinates, hull faces and the catalog.

The catalog itself lives in :mod:`polyviewer.construction.catalog`; it
builds on the operations and is imported on first use.
"""

from polyviewer.construction.hull import faces_from_points
from polyviewer.construction.solids import (
    antiprism,
    apothem,
    circumradius,
    cupola,
    prism,
    pyramid,
)

__all__ = [
    "antiprism",
    "apothem",
    "circumradius",
    "cupola",
    "faces_from_points",
    "prism",
    "pyramid",
]
