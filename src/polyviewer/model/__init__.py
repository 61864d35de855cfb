"""Core data model for polyviewer: the immutable polyhedron and its facets.

Everything is re-exported here so that ``from polyviewer.model import
Polyhedron`` works.
"""

from polyviewer.model.facets import Edge, Face, Vertex
from polyviewer.model.polyhedron import Polyhedron, PolyhedronBuilder

__all__ = [
    "Edge",
    "Face",
    "Polyhedron",
    "PolyhedronBuilder",
    "Vertex",
]
