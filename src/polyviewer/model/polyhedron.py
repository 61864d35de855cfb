"""The immutable :class:`Polyhedron` and its structural-edit builder."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import cached_property

import numpy as np
from scipy.spatial.distance import pdist

from polyviewer.errors import MalformedPolyhedronError
from polyviewer.geometry import approx_equal
from polyviewer.model.facets import Edge, Face, Vertex


def _freeze_vertices(vertices) -> np.ndarray:
    arr = np.array(vertices, dtype=float).reshape(-1, 3)
    arr.setflags(write=False)
    return arr


def _freeze_faces(faces) -> tuple[tuple[int, ...], ...]:
    return tuple(tuple(int(i) for i in face) for face in faces)


@dataclass(frozen=True, eq=False)
class Polyhedron:
    """A closed polyhedral surface.

    Instances are immutable: every structural edit returns a new
    polyhedron.  Adjacency (edges, vertex-to-face and face-to-face
    lookups) and the facet objects themselves are built lazily and
    cached, so sharing one instance between readers shares the caches.

    Attributes:
        vertices: Read-only array of shape ``(n_vertices, 3)``.
        faces: One tuple of vertex indices per face, ordered
            counter-clockwise when seen from outside the solid.
    """

    vertices: np.ndarray
    faces: tuple[tuple[int, ...], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", _freeze_vertices(self.vertices))
        object.__setattr__(self, "faces", _freeze_faces(self.faces))

    def __repr__(self) -> str:
        return (
            f"Polyhedron(n_vertices={self.num_vertices}, "
            f"n_faces={self.num_faces})"
        )

    @classmethod
    def get(cls, name: str) -> Polyhedron:
        """Load a canonical solid by hyphenated name or notation.

        Raises:
            UnknownSolidError: If *name* is not in the catalog.
        """
        from polyviewer.construction.catalog import get

        return get(name)

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    # ---- facets ----------------------------------------------------------

    @cached_property
    def vertex_list(self) -> tuple[Vertex, ...]:
        return tuple(Vertex(self, i) for i in range(self.num_vertices))

    @cached_property
    def face_list(self) -> tuple[Face, ...]:
        return tuple(Face(self, i) for i in range(self.num_faces))

    def vertex(self, index: int = 0) -> Vertex:
        return self.vertex_list[index]

    def face(self, index: int = 0) -> Face:
        return self.face_list[index]

    @cached_property
    def edges(self) -> tuple[Edge, ...]:
        """Every edge once, oriented as traversed by its first face."""
        seen: set[tuple[int, int]] = set()
        result = []
        for face in self.faces:
            for a, b in zip(face, face[1:] + face[:1]):
                key = (min(a, b), max(a, b))
                if key not in seen:
                    seen.add(key)
                    result.append(Edge(self, a, b))
        return tuple(result)

    @cached_property
    def centroid(self) -> np.ndarray:
        return self.vertices.mean(axis=0)

    @cached_property
    def _directed_edges(self) -> dict[tuple[int, int], int]:
        """Map ``(a, b)`` to the face traversing the edge from a to b."""
        result: dict[tuple[int, int], int] = {}
        for fi, face in enumerate(self.faces):
            for a, b in zip(face, face[1:] + face[:1]):
                result[(a, b)] = fi
        return result

    @cached_property
    def _vertex_face_indices(self) -> list[list[int]]:
        result: list[list[int]] = [[] for _ in range(self.num_vertices)]
        for fi, face in enumerate(self.faces):
            for v in face:
                if v < len(result):
                    result[v].append(fi)
        return result

    # ---- queries ---------------------------------------------------------

    def faces_with_sides(self, n_sides: int) -> list[Face]:
        return [f for f in self.face_list if f.num_sides == n_sides]

    def largest_face(self) -> Face:
        return max(self.face_list, key=lambda f: f.num_sides)

    def face_counts(self) -> dict[int, int]:
        """Number of faces per side count, e.g. ``{3: 8, 4: 6}``."""
        return dict(sorted(Counter(len(f) for f in self.faces).items()))

    def signature(self) -> tuple[int, int, tuple[tuple[int, int], ...]]:
        """Combinatorial fingerprint: vertex, edge and face-type counts."""
        return (
            self.num_vertices,
            len(self.edges),
            tuple(self.face_counts().items()),
        )

    def is_same(self, other: Polyhedron) -> bool:
        """Whether both polyhedra have identical faces and positions
        within tolerance."""
        return (
            self.faces == other.faces
            and self.vertices.shape == other.vertices.shape
            and approx_equal(self.vertices, other.vertices)
        )

    def is_congruent(self, other: Polyhedron, tol: float = 1e-2) -> bool:
        """Whether *other* is a rigid motion or reflection of this solid, up to scale.

        Compares the sorted vertex-to-vertex distances, in units of the
        mean edge length.
        """
        if self.signature() != other.signature():
            return False

        def distances(solid: Polyhedron) -> np.ndarray:
            scale = np.mean([e.length for e in solid.edges])
            return np.sort(pdist(solid.vertices)) / scale

        return bool(np.allclose(distances(self), distances(other), atol=tol))

    def hit_face(self, point) -> Face:
        """Return the face a picked *point* lies on.

        The face whose plane is closest to *point* wins; ties (points on
        an edge) go to the face with the nearest centroid.
        """
        point = np.asarray(point, dtype=float)
        return min(
            self.face_list,
            key=lambda f: (
                round(abs(f.plane.distance_to(point)), 6),
                float(np.linalg.norm(f.centroid - point)),
            ),
        )

    def validate(self) -> None:
        """Check the closed-manifold invariants.

        Raises:
            MalformedPolyhedronError: If a face references a missing
                vertex, has fewer than three distinct vertices, a vertex
                is unused, or an edge does not belong to exactly two
                faces.
        """
        n = self.num_vertices
        directed: Counter[tuple[int, int]] = Counter()
        used: set[int] = set()
        for fi, face in enumerate(self.faces):
            if len(set(face)) < 3 or len(set(face)) != len(face):
                raise MalformedPolyhedronError(
                    f"face {fi} has repeated or too few vertices: {list(face)}"
                )
            for v in face:
                if not 0 <= v < n:
                    raise MalformedPolyhedronError(
                        f"face {fi} references missing vertex {v}"
                    )
            used.update(face)
            for a, b in zip(face, face[1:] + face[:1]):
                directed[(a, b)] += 1
        if len(used) != n:
            missing = sorted(set(range(n)) - used)
            raise MalformedPolyhedronError(
                f"vertices not used by any face: {missing}"
            )
        for (a, b), count in directed.items():
            if count != 1 or directed.get((b, a)) != 1:
                raise MalformedPolyhedronError(
                    f"edge ({a}, {b}) does not belong to exactly two faces"
                )

    def is_valid(self) -> bool:
        try:
            self.validate()
        except MalformedPolyhedronError:
            return False
        return True

    # ---- structural edits ------------------------------------------------

    def with_vertices(self, vertices) -> Polyhedron:
        """New polyhedron with replaced positions and the same faces."""
        return Polyhedron(vertices, self.faces)

    def with_faces(self, faces: Iterable[Sequence[int]]) -> Polyhedron:
        """New polyhedron with replaced faces and the same positions."""
        return Polyhedron(self.vertices, faces)

    def add_vertices(self, vertices) -> Polyhedron:
        extra = np.asarray(vertices, dtype=float).reshape(-1, 3)
        return Polyhedron(np.vstack([self.vertices, extra]), self.faces)

    def add_faces(self, faces: Iterable[Sequence[int]]) -> Polyhedron:
        return Polyhedron(self.vertices, self.faces + _freeze_faces(faces))

    def map_faces(self, fn: Callable[[Face], Sequence[int]]) -> Polyhedron:
        """New polyhedron whose faces are ``fn(face)`` for every face."""
        return Polyhedron(self.vertices, [fn(f) for f in self.face_list])

    def with_changes(
        self, fn: Callable[[PolyhedronBuilder], PolyhedronBuilder],
    ) -> Polyhedron:
        """Apply several structural edits as one step.

        Example::

            poly.with_changes(lambda s: s.with_vertices(v).add_faces(f))
        """
        return fn(PolyhedronBuilder(self)).build()

    def scaled(self, factor: float) -> Polyhedron:
        """Copy scaled about the centroid."""
        c = self.centroid
        return self.with_vertices(c + (self.vertices - c) * factor)

    def centred(self) -> Polyhedron:
        """Copy translated so the centroid is at the origin."""
        return self.with_vertices(self.vertices - self.centroid)

    def to_dict(self) -> dict:
        """Serialise to a JSON-compatible mesh description."""
        return {
            "vertices": self.vertices.tolist(),
            "faces": [list(f) for f in self.faces],
        }

    @classmethod
    def from_dict(cls, d: dict) -> Polyhedron:
        return cls(vertices=d["vertices"], faces=d["faces"])


class PolyhedronBuilder:
    """Accumulates structural edits for :meth:`Polyhedron.with_changes`.

    Vertices and faces are held as plain values; an intermediate
    polyhedron is only materialised when :meth:`map_faces` needs facets
    to hand to its callback.
    """

    def __init__(self, source: Polyhedron) -> None:
        self._vertices: np.ndarray = source.vertices
        self._faces: tuple[tuple[int, ...], ...] = source.faces
        self._current: Polyhedron | None = source

    def with_vertices(self, vertices) -> PolyhedronBuilder:
        self._vertices = np.asarray(vertices, dtype=float).reshape(-1, 3)
        self._current = None
        return self

    def add_vertices(self, vertices) -> PolyhedronBuilder:
        extra = np.asarray(vertices, dtype=float).reshape(-1, 3)
        return self.with_vertices(np.vstack([self._vertices, extra]))

    def with_faces(self, faces: Iterable[Sequence[int]]) -> PolyhedronBuilder:
        self._faces = _freeze_faces(faces)
        self._current = None
        return self

    def add_faces(self, faces: Iterable[Sequence[int]]) -> PolyhedronBuilder:
        return self.with_faces(self._faces + _freeze_faces(faces))

    def map_faces(
        self, fn: Callable[[Face], Sequence[int]],
    ) -> PolyhedronBuilder:
        current = self._materialise()
        return self.with_faces([fn(f) for f in current.face_list])

    def _materialise(self) -> Polyhedron:
        if self._current is None:
            self._current = Polyhedron(self._vertices, self._faces)
        return self._current

    def build(self) -> Polyhedron:
        return self._materialise()
