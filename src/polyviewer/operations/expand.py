"""Expand, contract, snub and twist.

Expansion pulls every face of a regular solid apart, filling the gaps at
edges with squares (cantellation) or pairs of triangles (snub).  Faces
of the source keep their direction in the result, and so do the faces
that open up at the source's vertices; these are the *expanded* faces
that contraction later pushes back together.

Expanded faces only ever move along their normals and turn about them,
so positions come from :func:`~polyviewer.operations.utils.get_resized_vertices`.
Cantellation has a closed-form distance; snub and twist also need the
turning angle, which is fitted so that every edge has the source length.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
from scipy.optimize import least_squares

from polyviewer._constants import PRECISION
from polyviewer.geometry import angle_between, are_coplanar
from polyviewer.model import Face, Polyhedron
from polyviewer.operations.uniform import intersect_face_planes
from polyviewer.operations.utils import (
    ExpansionType,
    Twist,
    duplicate_vertices,
    expanded_faces,
    expansion_type,
    get_resized_vertices,
    get_snub_angle,
)

logger = logging.getLogger(__name__)

_TURN_GUESSES = (0.2, -0.2, 0.4, -0.4, 0.6, -0.6)


def _cantellated_length(polyhedron: Polyhedron) -> float:
    """Face-to-centre distance, in side lengths, of the expanded faces
    that leave unit squares between neighbours."""
    face = polyhedron.face()
    gap = angle_between(face.normal, face.adjacent_faces[0].normal)
    return face.distance_to_center / face.side_length + 1 / (2 * math.sin(gap / 2))


def _is_regular_solid(solid: Polyhedron) -> bool:
    centre = solid.centroid
    return all(
        f.is_valid
        and are_coplanar(solid.vertices[list(f.vertex_indices)])
        and float(np.dot(f.normal, f.centroid - centre)) > 0
        for f in solid.face_list
    )


def _fit_faces(
    topology: Polyhedron,
    faces: Sequence[Face],
    length: float,
    angles: Sequence[float],
) -> Polyhedron:
    """Move and turn *faces* until every edge of *topology* has their
    side length.

    Args:
        topology: Faces of the result; *faces* must own every vertex.
        faces: Faces of *topology* to move, all alike.
        length: Starting face-to-centre distance, in side lengths.
        angles: Starting turns to try.

    Raises:
        ValueError: If no fit gives a regular-faced solid.
    """
    edges = np.array([edge.key for edge in topology.edges])
    side = faces[0].side_length

    def residuals(params: np.ndarray) -> np.ndarray:
        positions = get_resized_vertices(faces, params[0], params[1])
        lengths = np.linalg.norm(
            positions[edges[:, 0]] - positions[edges[:, 1]], axis=1,
        )
        return lengths / side - 1

    fits = sorted(
        (least_squares(residuals, [length, angle]) for angle in angles),
        key=lambda fit: fit.cost,
    )
    for fit in fits:
        if np.abs(fit.fun).max() > PRECISION:
            continue
        result = topology.with_vertices(get_resized_vertices(faces, *fit.x))
        if _is_regular_solid(result):
            logger.debug(
                "faces at distance %.6f turned by %.6f", fit.x[0], fit.x[1],
            )
            return result
    raise ValueError("faces cannot all be made regular")


def expand(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Cantellate: separate every face, bridging each edge with a square.

    Returns *polyhedron* unchanged unless its faces are all alike.
    """
    if len(polyhedron.face_counts()) != 1:
        return polyhedron
    topology = duplicate_vertices(polyhedron)
    faces = topology.face_list[:polyhedron.num_faces]
    return topology.with_vertices(
        get_resized_vertices(faces, _cantellated_length(polyhedron))
    )


def snub(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Separate and twist every face, bridging each edge with two triangles.

    Config keys:
        twist: ``"left"`` or ``"right"``; defaults to ``"left"``.

    Returns *polyhedron* unchanged unless its faces are all alike.
    """
    if len(polyhedron.face_counts()) != 1:
        return polyhedron
    config = config or {}
    twist = Twist(config.get("twist") or Twist.LEFT)
    topology = duplicate_vertices(polyhedron, twist)
    faces = topology.face_list[:polyhedron.num_faces]
    return _fit_faces(
        topology, faces, _cantellated_length(polyhedron), _TURN_GUESSES,
    )


def snub_search_options(polyhedron: Polyhedron) -> list[dict]:
    return [{"twist": str(t)} for t in Twist]


def _independent_faces(faces: list[Face]) -> list[Face]:
    """Largest set of *faces*, including the first, sharing no vertex.

    The search stops early once the chosen faces cover every vertex of
    *faces*.
    """
    sets = [set(f.vertex_indices) for f in faces]
    covered = set().union(*sets)
    best: list[int] = []

    def extend(chosen: list[int], start: int, used: set[int]) -> bool:
        nonlocal best
        if len(chosen) > len(best):
            best = list(chosen)
        if used == covered:
            return True
        for i in range(start, len(faces)):
            if len(chosen) + len(faces) - i <= len(best):
                break
            if not sets[i] & used:
                chosen.append(i)
                if extend(chosen, i + 1, used | sets[i]):
                    return True
                chosen.pop()
        return False

    if faces:
        extend([0], 1, sets[0])
    return [faces[i] for i in best]


def contract(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Push the expanded faces of one kind back together.

    Config keys:
        face_sides: Side count of the expanded faces to keep.  Defaults
            to the largest.

    Returns *polyhedron* unchanged if it has no such expanded faces.
    """
    config = config or {}
    candidates = expanded_faces(polyhedron)
    if not candidates:
        return polyhedron
    n_sides = config.get("face_sides") or max(f.num_sides for f in candidates)
    keep = _independent_faces([f for f in candidates if f.num_sides == n_sides])
    if len(keep) < 4:
        logger.debug("too few %d-sided expanded faces to contract", n_sides)
        return polyhedron
    return intersect_face_planes(polyhedron, keep)


def contract_search_options(polyhedron: Polyhedron) -> list[dict]:
    sides = sorted({f.num_sides for f in expanded_faces(polyhedron)})
    return [{"face_sides": n} for n in sides]


def _split_bridge(
    face: Face, anchor: set[int], twist: Twist,
) -> list[list[int]]:
    """Split a bridging square into two triangles.

    *anchor* holds the vertices of one expanded face the square touches;
    the diagonal leaving that face's edge at its first or second end is
    chosen by *twist*.
    """
    ids = face.vertex_indices
    n = len(ids)
    start = next(
        i for i in range(n) if ids[i] in anchor and ids[(i + 1) % n] in anchor
    )
    if twist == Twist.RIGHT:
        start += 1
    a, b, c, d = (ids[(start + k) % n] for k in range(4))
    return [[a, b, c], [a, c, d]]


def twist(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Turn a cantellated solid into a snub one, or back.

    Config keys:
        twist: ``"left"`` or ``"right"`` (cantellated source only);
            defaults to ``"left"``.
    """
    config = config or {}
    anchors = expanded_faces(polyhedron)
    if not anchors:
        return polyhedron
    anchor_ids = {f.index for f in anchors}
    kind = max(f.num_sides for f in anchors)

    if expansion_type(polyhedron) == ExpansionType.CANTELLATE:
        chirality = Twist(config.get("twist") or Twist.LEFT)
        # One expanded face kind drives every split, so all bridges turn
        # the same way.
        faces: list[list[int]] = []
        for face in polyhedron.face_list:
            if face.index in anchor_ids:
                faces.append(list(face.vertex_indices))
                continue
            touching = [
                f for f in face.adjacent_faces
                if f.index in anchor_ids and f.num_sides == kind
            ]
            if face.num_sides != 4 or not touching:
                return polyhedron
            faces.extend(
                _split_bridge(face, set(touching[0].vertex_indices), chirality)
            )
    else:
        faces = _merge_bridges(polyhedron, anchor_ids)
        if faces is None:
            return polyhedron

    topology = Polyhedron(polyhedron.vertices, faces)
    largest = [f for f in anchors if f.num_sides == kind]
    moved = [f for f in topology.face_list if _matches_anchor(f, largest)]
    length = moved[0].distance_to_center / moved[0].side_length
    if expansion_type(polyhedron) == ExpansionType.CANTELLATE:
        angles = _TURN_GUESSES
    else:
        turn = get_snub_angle(polyhedron, kind)
        angles = (-turn, turn, 0.0)
    return _fit_faces(topology, moved, length, angles)


def twist_search_options(polyhedron: Polyhedron) -> list[dict]:
    if expansion_type(polyhedron) != ExpansionType.CANTELLATE:
        return []
    return [{"twist": str(t)} for t in Twist]


def _matches_anchor(face: Face, anchors: list[Face]) -> bool:
    ids = set(face.vertex_indices)
    return any(ids == set(a.vertex_indices) for a in anchors)


def _merge_bridges(
    polyhedron: Polyhedron, anchor_ids: set[int],
) -> list[list[int]] | None:
    """Join the bridging triangles of a snub solid back into squares.

    Two bridging triangles belong together when they share an edge
    whose ends lie on different expanded faces of the larger kind.
    """
    kind = max(len(polyhedron.faces[fi]) for fi in anchor_ids)
    owner: dict[int, int] = {}
    for fi in anchor_ids:
        if len(polyhedron.faces[fi]) == kind:
            for v in polyhedron.faces[fi]:
                owner[v] = fi
    faces: list[list[int]] = []
    used: set[int] = set()
    for face in polyhedron.face_list:
        if face.index in anchor_ids:
            faces.append(list(face.vertex_indices))
            continue
        if face.index in used:
            continue
        ids = face.vertex_indices
        for i, (a, b) in enumerate(zip(ids, ids[1:] + ids[:1])):
            other = polyhedron._directed_edges[(b, a)]
            if other in anchor_ids or other in used:
                continue
            if owner.get(a) == owner.get(b):
                continue
            mate = polyhedron.faces[other]
            c = ids[(i + 2) % 3]
            d = next(v for v in mate if v not in (a, b))
            faces.append([c, a, d, b])
            used.update((face.index, other))
            break
        else:
            return None
    return faces
