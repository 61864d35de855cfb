"""Truncate, rectify, cumulate and dual.

Each operation builds the face structure of its result from the source
solid and hands it to :func:`~polyviewer.operations.uniform.realize_uniform`
together with the direction each new face inherits: a face of the
source keeps its normal, and a face cut at a vertex points along that
vertex.
"""

from __future__ import annotations

import numpy as np

from polyviewer.geometry import normalize
from polyviewer.model import Polyhedron
from polyviewer.operations.uniform import intersect_face_planes, realize_uniform


def _vertex_direction(polyhedron: Polyhedron, index: int) -> np.ndarray:
    return normalize(polyhedron.vertices[index] - polyhedron.centroid)


def _realize(
    polyhedron: Polyhedron, faces: list[list[int]], n_vertices: int,
    directions: dict[int, np.ndarray],
) -> Polyhedron:
    topology = Polyhedron(np.zeros((n_vertices, 3)), faces)
    return realize_uniform(
        topology, directions,
        edge_length=polyhedron.face().side_length,
        centre=polyhedron.centroid,
    )


def truncate(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Cut every vertex off, turning each n-gon into a 2n-gon.

    The new vertex near ``v`` on edge ``v-u`` is indexed by the directed
    pair ``(v, u)``.  Faces of the source come first in the result,
    followed by one face per source vertex.
    """
    index: dict[tuple[int, int], int] = {}
    for v in polyhedron.vertex_list:
        for u in v.adjacent_vertices:
            index[(v.index, u.index)] = len(index)

    faces: list[list[int]] = []
    directions: dict[int, np.ndarray] = {}
    for face in polyhedron.face_list:
        ids = face.vertex_indices
        n = len(ids)
        new_face = []
        for i, v in enumerate(ids):
            new_face.append(index[(v, ids[i - 1])])
            new_face.append(index[(v, ids[(i + 1) % n])])
        directions[len(faces)] = face.normal
        faces.append(new_face)
    for v in polyhedron.vertex_list:
        directions[len(faces)] = _vertex_direction(polyhedron, v.index)
        faces.append([index[(v.index, u.index)] for u in v.adjacent_vertices])
    return _realize(polyhedron, faces, len(index), directions)


def rectify(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Cut every vertex down to the edge midpoints."""
    index = {edge.key: i for i, edge in enumerate(polyhedron.edges)}

    def key(a: int, b: int) -> int:
        return index[(min(a, b), max(a, b))]

    faces: list[list[int]] = []
    directions: dict[int, np.ndarray] = {}
    for face in polyhedron.face_list:
        directions[len(faces)] = face.normal
        faces.append([key(e.a, e.b) for e in face.edges])
    for v in polyhedron.vertex_list:
        directions[len(faces)] = _vertex_direction(polyhedron, v.index)
        faces.append([key(v.index, u.index) for u in v.adjacent_vertices])
    return _realize(polyhedron, faces, len(index), directions)


def dual(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Swap faces and vertices."""
    faces: list[list[int]] = []
    directions: dict[int, np.ndarray] = {}
    for v in polyhedron.vertex_list:
        directions[len(faces)] = _vertex_direction(polyhedron, v.index)
        faces.append([f.index for f in v.adjacent_faces])
    return _realize(polyhedron, faces, polyhedron.num_faces, directions)


def is_quasi_regular(polyhedron: Polyhedron) -> bool:
    """Whether every edge separates faces with different side counts."""
    return all(
        f1.num_sides != f2.num_sides
        for f1, f2 in (edge.adjacent_faces() for edge in polyhedron.edges)
    )


def cumulate(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Undo a truncation or rectification by growing faces of one kind.

    Config keys:
        face_sides: Side count of the faces to keep.  Defaults to every
            face except those with the fewest sides.

    Returns *polyhedron* unchanged if too few faces are kept to bound a
    solid.
    """
    config = config or {}
    counts = polyhedron.face_counts()
    if config.get("face_sides") is not None:
        keep = polyhedron.faces_with_sides(config["face_sides"])
    else:
        fewest = min(counts)
        keep = [f for f in polyhedron.face_list if f.num_sides != fewest]
    if len(keep) < 4 or len(keep) == polyhedron.num_faces:
        return polyhedron
    return intersect_face_planes(polyhedron, keep)


def cumulate_search_options(polyhedron: Polyhedron) -> list[dict]:
    if not is_quasi_regular(polyhedron):
        return []
    return [{"face_sides": n} for n in polyhedron.face_counts()]
