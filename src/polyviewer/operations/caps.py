"""Detection of removable caps: pyramids, cupolae, fastigia and rotundae.

A cap is a group of faces around a *top* (a vertex, edge or face) that
sits on a flat polygonal base.  Removing the cap's inner vertices and
closing the base polygon is a diminishment; re-attaching a cap the other
way round is a gyration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from functools import cached_property

import numpy as np

from polyviewer.geometry import are_coplanar, get_centroid
from polyviewer.model import Polyhedron

logger = logging.getLogger(__name__)


class CapType(StrEnum):
    PYRAMID = "pyramid"
    CUPOLA = "cupola"
    FASTIGIUM = "fastigium"
    ROTUNDA = "rotunda"


class Alignment(StrEnum):
    """How a cap sits relative to the faces across its base.

    ``ORTHO`` means some triangle of the cap meets a triangle across the
    base (looking through a prism band if the base sits on one);
    ``GYRO`` means none does.
    """

    ORTHO = "ortho"
    GYRO = "gyro"

    def opposite(self) -> Alignment:
        return Alignment.GYRO if self is Alignment.ORTHO else Alignment.ORTHO


_BASE_SIZES = {
    CapType.PYRAMID: (3, 4, 5),
    CapType.CUPOLA: (6, 8, 10),
    CapType.FASTIGIUM: (4,),
    CapType.ROTUNDA: (10,),
}


@dataclass(frozen=True, eq=False)
class Cap:
    """A cap on a polyhedron.

    Attributes:
        polyhedron: The polyhedron the cap belongs to.
        kind: Cap type.
        inner: Vertices removed when the cap is removed.
        faces: Indices of the faces making up the cap.
        base: The base polygon, ordered as a face of the polyhedron
            left behind when the cap is removed.
    """

    polyhedron: Polyhedron
    kind: CapType
    inner: tuple[int, ...]
    faces: tuple[int, ...]
    base: tuple[int, ...]

    @cached_property
    def top_point(self) -> np.ndarray:
        return get_centroid(self.polyhedron.vertices[list(self.inner)])

    @cached_property
    def base_centroid(self) -> np.ndarray:
        return get_centroid(self.polyhedron.vertices[list(self.base)])

    def alignment(self) -> Alignment | None:
        """Ortho/gyro alignment of the cap, or ``None`` for pyramids."""
        if self.kind == CapType.PYRAMID:
            return None
        return base_alignment(self.polyhedron, self.base)

    def removal_is_valid(self) -> bool:
        """Whether removing the cap leaves a closed solid."""
        remaining = self.polyhedron.num_faces - len(self.faces)
        if remaining + 1 < 4:
            return False
        base = set(self.base)
        return not any(
            set(face) == base
            for i, face in enumerate(self.polyhedron.faces)
            if i not in self.faces
        )


def _beyond_square(
    polyhedron: Polyhedron, square: tuple[int, ...], a: int, b: int,
) -> tuple[int, ...]:
    """The face across the edge of *square* opposite its edge ``a -> b``."""
    i = square.index(a)
    c, d = square[(i + 2) % 4], square[(i + 3) % 4]
    return polyhedron.faces[polyhedron._directed_edges[(d, c)]]


def base_alignment(polyhedron: Polyhedron, base) -> Alignment:
    """Alignment of whatever sits on *base*.

    *base* runs the same way as the faces on the cap side of it.
    """
    poly = polyhedron
    edges = list(zip(base, base[1:] + base[:1]))
    outside = [poly.faces[poly._directed_edges[(b, a)]] for a, b in edges]
    if all(len(f) == 4 for f in outside):
        outside = [
            _beyond_square(poly, f, b, a) for f, (a, b) in zip(outside, edges)
        ]
    for (a, b), other in zip(edges, outside):
        inside = poly.faces[poly._directed_edges[(a, b)]]
        if len(inside) == 3 and len(other) == 3:
            return Alignment.ORTHO
    return Alignment.GYRO


def _build_cap(
    polyhedron: Polyhedron, kind: CapType, inner: set[int],
) -> Cap | None:
    """Assemble a cap from its inner vertices, or ``None`` if the faces
    around them do not sit on a flat base of the right size."""
    faces = sorted({
        f.index
        for v in inner
        for f in polyhedron.vertex(v).adjacent_faces
    })
    boundary: set[int] = set()
    for fi in faces:
        boundary.update(v for v in polyhedron.faces[fi] if v not in inner)
    if len(boundary) not in _BASE_SIZES[kind]:
        return None
    if not are_coplanar(polyhedron.vertices[sorted(boundary)]):
        return None

    # Boundary edges of the cap chain into the base polygon.
    nxt: dict[int, int] = {}
    for fi in faces:
        face = polyhedron.faces[fi]
        for a, b in zip(face, face[1:] + face[:1]):
            if a in boundary and b in boundary:
                nxt[a] = b
    if len(nxt) != len(boundary):
        return None
    start = min(boundary)
    base = [start]
    while len(base) < len(boundary):
        following = nxt.get(base[-1])
        if following is None or following in base:
            return None
        base.append(following)
    if nxt.get(base[-1]) != start:
        return None

    return Cap(
        polyhedron=polyhedron,
        kind=kind,
        inner=tuple(sorted(inner)),
        faces=tuple(faces),
        base=tuple(base),
    )


def _pyramid_caps(polyhedron: Polyhedron) -> list[Cap]:
    caps = []
    for v in polyhedron.vertex_list:
        adjacent = v.adjacent_faces
        if len(adjacent) not in (3, 4, 5):
            continue
        if any(f.num_sides != 3 for f in adjacent):
            continue
        cap = _build_cap(polyhedron, CapType.PYRAMID, {v.index})
        if cap is not None:
            caps.append(cap)
    return caps


def _cupola_caps(polyhedron: Polyhedron) -> list[Cap]:
    caps = []
    for face in polyhedron.face_list:
        if face.num_sides not in (3, 4, 5):
            continue
        if any(f.num_sides != 4 for f in face.adjacent_faces):
            continue
        cap = _build_cap(polyhedron, CapType.CUPOLA, set(face.vertex_indices))
        if cap is not None:
            caps.append(cap)
    return caps


def _fastigium_caps(polyhedron: Polyhedron) -> list[Cap]:
    caps = []
    for edge in polyhedron.edges:
        f1, f2 = edge.adjacent_faces()
        if f1.num_sides != 4 or f2.num_sides != 4:
            continue
        ends = edge.vertices
        if any(len(v.adjacent_faces) != 3 for v in ends):
            continue
        cap = _build_cap(polyhedron, CapType.FASTIGIUM, {edge.a, edge.b})
        if cap is not None:
            caps.append(cap)
    return caps


def _rotunda_caps(polyhedron: Polyhedron) -> list[Cap]:
    caps = []
    for face in polyhedron.face_list:
        if face.num_sides != 5:
            continue
        neighbours = face.adjacent_faces
        if any(f.num_sides != 3 for f in neighbours):
            continue
        inner = set(face.vertex_indices)
        for f in neighbours:
            inner.update(f.vertex_indices)
        if len(inner) != 10:
            continue
        cap = _build_cap(polyhedron, CapType.ROTUNDA, inner)
        if cap is not None:
            caps.append(cap)
    return caps


def get_caps(polyhedron: Polyhedron) -> list[Cap]:
    """Every cap that can be removed from *polyhedron*."""
    caps = (
        _pyramid_caps(polyhedron)
        + _cupola_caps(polyhedron)
        + _fastigium_caps(polyhedron)
        + _rotunda_caps(polyhedron)
    )
    caps = [cap for cap in caps if cap.removal_is_valid()]
    logger.debug("found %d caps on %r", len(caps), polyhedron)
    return caps


def find_cap(polyhedron: Polyhedron, point) -> Cap | None:
    """The cap containing the face at *point* whose top is nearest to it."""
    face = polyhedron.hit_face(point)
    containing = [cap for cap in get_caps(polyhedron) if face.index in cap.faces]
    if not containing:
        return None
    point = np.asarray(point, dtype=float)
    return min(
        containing,
        key=lambda cap: float(np.linalg.norm(cap.top_point - point)),
    )