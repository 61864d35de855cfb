"""Vertex, face and edge views into a :class:`Polyhedron`.

Facets hold only their owning polyhedron and an index.  Derived geometry
(centroids, normals, adjacency) is computed on first access and cached on
the facet; the owning polyhedron is immutable, so a cached value never
goes stale.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

import numpy as np

from polyviewer._constants import PRECISION
from polyviewer.geometry import Plane, get_centroid, get_plane, rotation_matrix

if TYPE_CHECKING:
    from polyviewer.model.polyhedron import Polyhedron


class Vertex:
    """A vertex of a polyhedron, identified by index."""

    def __init__(self, polyhedron: Polyhedron, index: int) -> None:
        self.polyhedron = polyhedron
        self.index = index

    def __repr__(self) -> str:
        return f"Vertex({self.index})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vertex):
            return NotImplemented
        return self.polyhedron is other.polyhedron and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.polyhedron), self.index))

    @property
    def position(self) -> np.ndarray:
        return self.polyhedron.vertices[self.index]

    @cached_property
    def adjacent_faces(self) -> tuple[Face, ...]:
        """Faces around this vertex in cyclic order.

        The order runs counter-clockwise seen from outside the solid:
        each face is followed by the face sharing the edge from this
        vertex to its predecessor in the current face.
        """
        poly = self.polyhedron
        unordered = poly._vertex_face_indices[self.index]
        if not unordered:
            return ()
        ordered = [unordered[0]]
        while len(ordered) < len(unordered):
            face = poly.faces[ordered[-1]]
            prev = face[face.index(self.index) - 1]
            nxt = poly._directed_edges.get((self.index, prev))
            if nxt is None or nxt == ordered[0] or nxt not in unordered:
                # Open fan (malformed input): keep the remaining faces in
                # index order rather than loop forever.
                rest = [f for f in unordered if f not in ordered]
                ordered.extend(rest)
                break
            ordered.append(nxt)
        return tuple(poly.face(f) for f in ordered)

    @cached_property
    def adjacent_vertices(self) -> tuple[Vertex, ...]:
        """Neighbouring vertices, in the same cyclic order as the faces."""
        result = []
        for face in self.adjacent_faces:
            indices = face.vertex_indices
            nxt = indices[(indices.index(self.index) + 1) % len(indices)]
            result.append(self.polyhedron.vertex(nxt))
        return tuple(result)


class Face:
    """A face of a polyhedron, identified by index.

    Vertex indices run counter-clockwise when seen from outside, so the
    right-hand normal points outward.
    """

    def __init__(self, polyhedron: Polyhedron, index: int) -> None:
        self.polyhedron = polyhedron
        self.index = index

    def __repr__(self) -> str:
        return f"Face({self.index}, {list(self.vertex_indices)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Face):
            return NotImplemented
        return self.polyhedron is other.polyhedron and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.polyhedron), self.index))

    @property
    def vertex_indices(self) -> tuple[int, ...]:
        return self.polyhedron.faces[self.index]

    @property
    def num_sides(self) -> int:
        return len(self.vertex_indices)

    @property
    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self.polyhedron.vertex(i) for i in self.vertex_indices)

    @property
    def positions(self) -> np.ndarray:
        return self.polyhedron.vertices[list(self.vertex_indices)]

    @cached_property
    def edges(self) -> tuple[Edge, ...]:
        """Edges of the face, in boundary order."""
        ids = self.vertex_indices
        return tuple(
            Edge(self.polyhedron, a, b)
            for a, b in zip(ids, ids[1:] + ids[:1])
        )

    @cached_property
    def centroid(self) -> np.ndarray:
        return get_centroid(self.positions)

    @cached_property
    def plane(self) -> Plane:
        return get_plane(self.positions)

    @cached_property
    def normal(self) -> np.ndarray:
        """Outward unit normal."""
        return self.plane.normal

    @cached_property
    def side_length(self) -> float:
        pos = self.positions
        return float(np.linalg.norm(pos[1] - pos[0]))

    @cached_property
    def distance_to_center(self) -> float:
        """Distance from the face centroid to the polyhedron centroid."""
        return float(np.linalg.norm(self.centroid - self.polyhedron.centroid))

    @cached_property
    def adjacent_faces(self) -> tuple[Face, ...]:
        """Faces sharing an edge with this one, in edge order."""
        poly = self.polyhedron
        ids = self.vertex_indices
        return tuple(
            poly.face(poly._directed_edges[(b, a)])
            for a, b in zip(ids, ids[1:] + ids[:1])
        )

    @cached_property
    def vertex_adjacent_faces(self) -> tuple[Face, ...]:
        """Faces sharing at least one vertex with this one, including itself."""
        seen: dict[int, Face] = {}
        for v in self.vertices:
            for f in v.adjacent_faces:
                seen.setdefault(f.index, f)
        return tuple(seen.values())

    @cached_property
    def is_valid(self) -> bool:
        """Whether the face is a regular polygon within tolerance."""
        pos = self.positions
        sides = np.linalg.norm(pos - np.roll(pos, -1, axis=0), axis=1)
        radii = np.linalg.norm(pos - self.centroid, axis=1)
        return bool(
            np.all(np.abs(sides - sides[0]) <= PRECISION)
            and np.all(np.abs(radii - radii[0]) <= PRECISION)
        )

    def in_set(self, faces) -> bool:
        return any(self == f for f in faces)

    def rotate_normal(self, angle: float) -> np.ndarray:
        """Rotation matrix for a turn of *angle* about this face's normal."""
        return rotation_matrix(self.normal, angle)

    def translate_normal(self, amount: float) -> np.ndarray:
        """Offset moving a point *amount* along this face's normal."""
        return self.normal * amount

    def contains_point(self, point, tol: float = PRECISION) -> bool:
        """Whether *point* lies on this face's plane inside its boundary."""
        point = np.asarray(point, dtype=float)
        if not self.plane.contains(point, tol):
            return False
        pos = self.positions
        for a, b in zip(pos, np.roll(pos, -1, axis=0)):
            if np.dot(np.cross(b - a, point - a), self.normal) < -tol:
                return False
        return True


class Edge:
    """An edge between two vertices.

    ``a -> b`` is the direction in which the first adjacent face
    traverses the edge; the second adjacent face traverses ``b -> a``.
    """

    def __init__(self, polyhedron: Polyhedron, a: int, b: int) -> None:
        self.polyhedron = polyhedron
        self.a = a
        self.b = b

    def __repr__(self) -> str:
        return f"Edge({self.a}, {self.b})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return (
            self.polyhedron is other.polyhedron
            and {self.a, self.b} == {other.a, other.b}
        )

    def __hash__(self) -> int:
        return hash((id(self.polyhedron), frozenset((self.a, self.b))))

    @property
    def key(self) -> tuple[int, int]:
        return (min(self.a, self.b), max(self.a, self.b))

    @property
    def vertices(self) -> tuple[Vertex, Vertex]:
        return self.polyhedron.vertex(self.a), self.polyhedron.vertex(self.b)

    def adjacent_faces(self) -> tuple[Face, Face]:
        poly = self.polyhedron
        return (
            poly.face(poly._directed_edges[(self.a, self.b)]),
            poly.face(poly._directed_edges[(self.b, self.a)]),
        )

    @property
    def midpoint(self) -> np.ndarray:
        verts = self.polyhedron.vertices
        return (verts[self.a] + verts[self.b]) / 2

    @property
    def length(self) -> float:
        verts = self.polyhedron.vertices
        return float(np.linalg.norm(verts[self.b] - verts[self.a]))
