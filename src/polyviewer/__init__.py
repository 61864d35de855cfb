"""Polyviewer: operations on the Johnson solids and their relatives.

Polyviewer holds a catalog of regular-faced convex solids (Platonic,
Archimedean, prisms, antiprisms and Johnson solids) and the operations
that turn one into another: augment, diminish, gyrate, elongate,
truncate, rectify, expand, snub and their inverses.

Example usage::

    from polyviewer import apply_operation, initial_state

    state = initial_state()                  # tetrahedron
    state = apply_operation(state, "rectify")
    print(state.name)                        # octahedron
"""

from polyviewer.config import ViewerConfig, load_config, save_config
from polyviewer.construction.catalog import available_solids, get, is_valid_solid
from polyviewer.errors import (
    AmbiguousTransitionError,
    MalformedPolyhedronError,
    PolyhedronError,
    UnknownOperationError,
    UnknownSolidError,
)
from polyviewer.model import Edge, Face, Polyhedron, Vertex
from polyviewer.names import from_notation, to_notation
from polyviewer.operations.registry import (
    INVALID,
    OPERATIONS,
    Operation,
    OperationKind,
    get_operation,
)
from polyviewer.relations import (
    POLYHEDRA_GRAPH,
    get_inverse_operation,
    get_next_polyhedron,
)
from polyviewer.state import (
    ViewerState,
    apply_operation,
    initial_state,
    set_polyhedron,
)

__all__ = [
    "AmbiguousTransitionError",
    "Edge",
    "Face",
    "INVALID",
    "MalformedPolyhedronError",
    "OPERATIONS",
    "Operation",
    "OperationKind",
    "POLYHEDRA_GRAPH",
    "Polyhedron",
    "PolyhedronError",
    "UnknownOperationError",
    "UnknownSolidError",
    "Vertex",
    "ViewerConfig",
    "ViewerState",
    "apply_operation",
    "available_solids",
    "from_notation",
    "get",
    "get_inverse_operation",
    "get_next_polyhedron",
    "get_operation",
    "initial_state",
    "is_valid_solid",
    "load_config",
    "save_config",
    "set_polyhedron",
    "to_notation",
]
