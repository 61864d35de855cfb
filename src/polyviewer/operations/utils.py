"""Geometric routines shared by several operations."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import StrEnum

import numpy as np

from polyviewer._constants import PRECISION, SNUB_FACE_COUNTS
from polyviewer.geometry import (
    angle_between,
    approx_equal,
    get_plane,
    rotate_around,
)
from polyviewer.model import Edge, Face, Polyhedron, Vertex


class Twist(StrEnum):
    """Chirality of a snub-type operation."""

    LEFT = "left"
    RIGHT = "right"


class ExpansionType(StrEnum):
    CANTELLATE = "cantellate"
    SNUB = "snub"


_EDGE_SHAPE = {
    ExpansionType.SNUB: 3,
    ExpansionType.CANTELLATE: 4,
}


def deduplicate_vertices(polyhedron: Polyhedron) -> Polyhedron:
    """Merge vertices that coincide within tolerance.

    Faces are remapped through the merge with consecutive repeats
    removed, faces left with fewer than three vertices are dropped, and
    vertices no longer used by any face are removed.
    """
    unique: list[int] = []
    old_to_new: dict[int, int] = {}
    verts = polyhedron.vertices
    for index, position in enumerate(verts):
        match = next(
            (u for u in unique if approx_equal(verts[u], position)), None,
        )
        if match is None:
            unique.append(index)
            old_to_new[index] = index
        else:
            old_to_new[index] = match

    new_faces = []
    for face in polyhedron.faces:
        mapped = _drop_repeats([old_to_new[v] for v in face])
        if len(mapped) >= 3:
            new_faces.append(mapped)

    return remove_extraneous_vertices(polyhedron.with_faces(new_faces))


def _drop_repeats(cycle: Sequence[int]) -> list[int]:
    """Remove repeated vertices from a face loop, keeping first occurrences."""
    result: list[int] = []
    for v in cycle:
        if v not in result:
            result.append(v)
    return result


def remove_extraneous_vertices(polyhedron: Polyhedron) -> Polyhedron:
    """Remove vertices not referenced by any face and compact indices.

    Rather than re-index everything, each trailing vertex that is kept
    is moved into the slot of a removed vertex, so the remaining
    vertices keep their indices wherever possible.
    """
    in_faces = {v for face in polyhedron.faces for v in face}
    to_remove = [i for i in range(polyhedron.num_vertices) if i not in in_faces]
    num_to_remove = len(to_remove)
    if num_to_remove == 0:
        return polyhedron

    # Kept vertices among the last `num_to_remove` slots fill the removed
    # slots below them, in order.
    tail = range(polyhedron.num_vertices - num_to_remove, polyhedron.num_vertices)
    movers = [i for i in tail if i in in_faces]
    old_to_new = dict(zip(movers, to_remove))
    new_to_old = {new: old for old, new in old_to_new.items()}

    n_kept = polyhedron.num_vertices - num_to_remove
    new_vertices = [
        polyhedron.vertices[new_to_old.get(i, i)] for i in range(n_kept)
    ]
    return polyhedron.with_changes(
        lambda s: s.with_vertices(new_vertices).map_faces(
            lambda face: [old_to_new.get(v, v) for v in face.vertex_indices]
        )
    )


def _edge_face_paths(
    edge: Edge, twist: Twist | None,
) -> list[list[tuple[int, int]]]:
    """(face, vertex) paths of the faces bridging *edge* after duplication."""
    v1, v2 = edge.a, edge.b
    f1, f2 = (f.index for f in edge.adjacent_faces())
    if twist == Twist.RIGHT:
        return [
            [(f1, v1), (f2, v2), (f1, v2)],
            [(f1, v1), (f2, v1), (f2, v2)],
        ]
    if twist == Twist.LEFT:
        return [
            [(f1, v2), (f1, v1), (f2, v1)],
            [(f2, v1), (f2, v2), (f1, v2)],
        ]
    return [[(f1, v2), (f1, v1), (f2, v1), (f2, v2)]]


def duplicate_vertices(
    polyhedron: Polyhedron, twist: Twist | str | None = None,
) -> Polyhedron:
    """Give every face its own copy of each of its vertices.

    Each vertex with ``k`` adjacent faces becomes ``k`` coincident
    copies.  The result gains one face per original vertex (joining its
    copies) and, per original edge, either one quadrilateral (no twist)
    or two triangles (left or right twist) bridging the copies of the
    two faces on either side.  All vertices are assumed to have the
    same number of adjacent faces.
    """
    twist = Twist(twist) if twist is not None else None
    count = len(polyhedron.vertex().adjacent_faces)

    mapping: dict[tuple[int, int], int] = {}
    for v in polyhedron.vertex_list:
        for i, f in enumerate(v.adjacent_faces):
            mapping[(f.index, v.index)] = v.index * count + i

    new_vertices = np.repeat(polyhedron.vertices, count, axis=0)
    vertex_faces = [
        list(range(v.index * count, (v.index + 1) * count))
        for v in polyhedron.vertex_list
    ]
    edge_faces = [
        [mapping[path] for path in face]
        for edge in polyhedron.edges
        for face in _edge_face_paths(edge, twist)
    ]
    return polyhedron.with_changes(
        lambda s: s.with_vertices(new_vertices)
        .map_faces(
            lambda face: [mapping[(face.index, v)] for v in face.vertex_indices]
        )
        .add_faces(vertex_faces)
        .add_faces(edge_faces)
    )


def get_mapped_vertices(
    faces: Sequence[Face],
    iteratee: Callable[[Vertex, Face], np.ndarray],
) -> np.ndarray:
    """New vertex positions with ``iteratee(vertex, face)`` applied to
    every vertex of every face in *faces*.

    A vertex shared by several of the faces takes the value from the
    last face that contains it.
    """
    result = np.array(faces[0].polyhedron.vertices, dtype=float)
    for face in faces:
        for v in face.vertices:
            result[v.index] = iteratee(v, face)
    return result


def get_resized_vertices(
    faces: Sequence[Face], resized_length: float, angle: float = 0.0,
) -> np.ndarray:
    """Push *faces* along their normals to a new distance from the centre.

    *resized_length* is the target face-to-centre distance in units of
    the face's side length; each vertex is optionally first rotated by
    *angle* about its face's normal through the face centroid.
    """
    f0 = faces[0]
    side_length = f0.side_length
    base_length = f0.distance_to_center / side_length
    scale = (resized_length - base_length) * side_length

    def resize(v: Vertex, face: Face) -> np.ndarray:
        position = v.position
        if angle != 0:
            position = rotate_around(position, face.centroid, face.normal, angle)
        return position + face.normal * scale

    return get_mapped_vertices(faces, resize)


def expansion_type(polyhedron: Polyhedron) -> ExpansionType:
    """Classify an expanded solid as snub or cantellated by face count."""
    if polyhedron.num_faces in SNUB_FACE_COUNTS:
        return ExpansionType.SNUB
    return ExpansionType.CANTELLATE


def is_expanded_face(
    polyhedron: Polyhedron, face: Face, n_sides: int | None = None,
) -> bool:
    """Whether *face* is one of the faces pushed out by an expansion.

    Such faces are regular and surrounded entirely by triangles (snub)
    or squares (cantellated).
    """
    kind = expansion_type(polyhedron)
    if n_sides is not None and face.num_sides != n_sides:
        return False
    if not face.is_valid:
        return False
    return all(f.num_sides == _EDGE_SHAPE[kind] for f in face.adjacent_faces)


def expanded_faces(
    polyhedron: Polyhedron, n_sides: int | None = None,
) -> list[Face]:
    return [
        f for f in polyhedron.face_list
        if is_expanded_face(polyhedron, f, n_sides)
    ]


def get_snub_angle(polyhedron: Polyhedron, n_sides: int) -> float:
    """Rotation of the expanded *n_sides* faces of a snub solid relative
    to their cantellated position.

    The angle is measured at the first expanded face between its first
    edge midpoint and that midpoint projected onto the plane through
    the face centroid, the nearest non-adjacent expanded face centroid
    and the solid's centre.  Positive angles are counter-clockwise
    about the face normal.
    """
    candidates = expanded_faces(polyhedron, n_sides)
    face0 = candidates[0] if candidates else polyhedron.face()

    face0_adjacent = face0.vertex_adjacent_faces
    face_centroid = face0.centroid
    snub_faces = [f for f in candidates if not f.in_set(face0_adjacent)]
    midpoint = face0.edges[0].midpoint
    face1 = min(
        snub_faces, key=lambda f: float(np.linalg.norm(midpoint - f.centroid)),
    )
    plane = get_plane([face_centroid, face1.centroid, polyhedron.centroid])
    norm_midpoint = midpoint - face_centroid
    projected = plane.project_point(midpoint) - face_centroid
    angle = angle_between(norm_midpoint, projected)
    cross = np.cross(norm_midpoint, projected)
    if np.linalg.norm(cross) < PRECISION:
        return 0.0
    cross = cross / np.linalg.norm(cross)
    sign = -1 if approx_equal(cross, face0.normal) else 1
    return angle * sign
