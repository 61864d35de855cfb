"""Elongate, gyroelongate and shorten: inserting and removing bands.

A *band* is a ring of squares (prism) or alternating triangles
(antiprism) between two parallel regular polygons.  Elongation opens the
solid along a polygon (a face, or the base of a cap that is not itself a
face) and inserts a band; shortening collapses an existing band.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

from polyviewer._constants import PRECISION
from polyviewer.geometry import approx_equal, get_centroid, get_plane, rotate_around
from polyviewer.model import Face, Polyhedron
from polyviewer.operations.caps import get_caps
from polyviewer.operations.utils import deduplicate_vertices

logger = logging.getLogger(__name__)


class BandType(StrEnum):
    PRISM = "prism"
    ANTIPRISM = "antiprism"


@dataclass(frozen=True, eq=False)
class Band:
    """A prism or antiprism band.

    Attributes:
        polyhedron: The polyhedron the band belongs to.
        kind: Prism or antiprism.
        faces: Indices of the band faces.
        lower: Vertices of the ring that stays put when shortening.
        upper: Vertices of the ring that is collapsed onto *lower*.
        normal: Unit vector from the lower ring towards the upper ring.
        height: Distance between the two rings.
    """

    polyhedron: Polyhedron
    kind: BandType
    faces: tuple[int, ...]
    lower: tuple[int, ...]
    upper: tuple[int, ...]
    normal: np.ndarray
    height: float


def _band_geometry(
    positions: np.ndarray, antiprism: bool,
) -> tuple[np.ndarray, np.ndarray, float, float]:
    """Centre, normal, twist angle and height of a band on a ring."""
    n = len(positions)
    centre = get_centroid(positions)
    normal = get_plane(positions).normal
    side = float(np.linalg.norm(positions[1] - positions[0]))
    if not antiprism:
        return centre, normal, 0.0, side
    radius = float(np.linalg.norm(positions[0] - centre))
    chord = 2 * radius * math.sin(math.pi / (2 * n))
    return centre, normal, math.pi / n, math.sqrt(side ** 2 - chord ** 2)


def insert_band(
    polyhedron: Polyhedron,
    ring: Sequence[int],
    top_faces: Sequence[int],
    moved: Sequence[int],
    kind: BandType,
) -> Polyhedron:
    """Open *polyhedron* along *ring* and insert a band.

    Args:
        polyhedron: Solid to elongate.
        ring: Regular polygon to open along, ordered counter-clockwise
            about the direction the band grows in.
        top_faces: Faces on the far side of the ring.  Their ring
            vertices are replaced by the band's new top ring.
        moved: Vertices beyond the ring that travel with the top faces.
        kind: Prism or antiprism band.
    """
    n = len(ring)
    positions = polyhedron.vertices[list(ring)]
    centre, normal, angle, height = _band_geometry(
        positions, kind == BandType.ANTIPRISM,
    )

    def lift(point: np.ndarray) -> np.ndarray:
        return rotate_around(point, centre, normal, angle) + normal * height

    vertices = np.array(polyhedron.vertices)
    for v in moved:
        vertices[v] = lift(vertices[v])
    first = polyhedron.num_vertices
    top = {v: first + i for i, v in enumerate(ring)}
    lifted = np.array([lift(p) for p in positions])

    top_set = set(top_faces)
    faces = [
        [top.get(v, v) for v in face] if i in top_set else list(face)
        for i, face in enumerate(polyhedron.faces)
    ]
    for i in range(n):
        r0, r1 = ring[i], ring[(i + 1) % n]
        g0, g1 = top[r0], top[r1]
        if kind == BandType.PRISM:
            faces.append([r0, r1, g1, g0])
        else:
            faces.append([r0, r1, g0])
            faces.append([g0, r1, g1])
    return Polyhedron(np.vstack([vertices, lifted]), faces)


def _default_opening(
    polyhedron: Polyhedron,
) -> tuple[list[int], list[int], list[int]] | None:
    """Where to elongate when no face is given.

    The unique largest face if there is one, otherwise the base of a cap
    (splitting a bipyramid or bicupola at its equator), otherwise any
    face of a solid whose faces all have the same number of sides.
    """
    largest = polyhedron.largest_face()
    if len(polyhedron.faces_with_sides(largest.num_sides)) == 1:
        return _face_opening(largest)
    caps = get_caps(polyhedron)
    if caps:
        cap = caps[0]
        return list(cap.base), list(cap.faces), list(cap.inner)
    if len(polyhedron.face_counts()) == 1:
        return _face_opening(polyhedron.face())
    return None


def _face_opening(face: Face) -> tuple[list[int], list[int], list[int]]:
    return list(face.vertex_indices), [face.index], []


def _elongate(
    polyhedron: Polyhedron, config: dict | None, kind: BandType,
) -> Polyhedron:
    config = config or {}
    if "face" in config:
        if not 0 <= config["face"] < polyhedron.num_faces:
            return polyhedron
        face = polyhedron.face(config["face"])
        if not face.is_valid:
            return polyhedron
        opening = _face_opening(face)
    else:
        opening = _default_opening(polyhedron)
    if opening is None:
        logger.debug("no polygon to %s %r along", kind, polyhedron)
        return polyhedron
    ring, top_faces, moved = opening
    return insert_band(polyhedron, ring, top_faces, moved, kind)


def elongate(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Insert a prism.

    Config keys:
        face: Index of the face to elongate at.  Defaults to the unique
            largest face, or the equator of a bipyramid or bicupola.
    """
    return _elongate(polyhedron, config, BandType.PRISM)


def gyroelongate(
    polyhedron: Polyhedron, config: dict | None = None,
) -> Polyhedron:
    """Insert an antiprism; config keys as for :func:`elongate`."""
    return _elongate(polyhedron, config, BandType.ANTIPRISM)


# ---- shortening --------------------------------------------------------

def _candidate_normals(polyhedron: Polyhedron) -> list[np.ndarray]:
    normals: list[np.ndarray] = []
    planes = [f.normal for f in polyhedron.face_list]
    planes += [
        get_plane(polyhedron.vertices[list(cap.base)]).normal
        for cap in get_caps(polyhedron)
    ]
    for normal in planes:
        if not any(abs(float(np.dot(normal, m))) > 1 - 1e-6 for m in normals):
            normals.append(normal)
    return normals


def _ring_order(polyhedron: Polyhedron, ring: set[int], normal) -> list[int]:
    """Vertices of *ring* sorted by angle about *normal*."""
    positions = polyhedron.vertices[sorted(ring)]
    centre = get_centroid(positions)
    x = positions[0] - centre
    y = np.cross(normal, x)
    return [
        v for _, v in sorted(
            (math.atan2(np.dot(p - centre, y), np.dot(p - centre, x)), v)
            for v, p in zip(sorted(ring), positions)
        )
    ]


def _band_between(
    polyhedron: Polyhedron, lower: set[int], upper: set[int], normal,
    height: float,
) -> Band | None:
    n = len(lower)
    both = lower | upper
    faces = [
        f.index for f in polyhedron.face_list
        if set(f.vertex_indices) <= both
        and set(f.vertex_indices) & lower and set(f.vertex_indices) & upper
    ]
    sides = {len(polyhedron.faces[f]) for f in faces}
    if sides == {4} and len(faces) == n:
        kind = BandType.PRISM
    elif sides == {3} and len(faces) == 2 * n:
        kind = BandType.ANTIPRISM
    else:
        return None
    if not all(polyhedron.face(f).is_valid for f in faces):
        return None
    return Band(
        polyhedron=polyhedron,
        kind=kind,
        faces=tuple(faces),
        lower=tuple(_ring_order(polyhedron, lower, normal)),
        upper=tuple(_ring_order(polyhedron, upper, normal)),
        normal=np.asarray(normal, dtype=float),
        height=height,
    )


def get_bands(polyhedron: Polyhedron) -> list[Band]:
    """Every band whose removal leaves a valid solid."""
    bands: list[Band] = []
    for normal in _candidate_normals(polyhedron):
        heights = polyhedron.vertices @ normal
        levels: list[tuple[float, set[int]]] = []
        for v in np.argsort(heights):
            h = float(heights[v])
            if levels and abs(h - levels[-1][0]) <= PRECISION:
                levels[-1][1].add(int(v))
            else:
                levels.append((h, {int(v)}))
        for (h0, lower), (h1, upper) in zip(levels, levels[1:]):
            if len(lower) != len(upper) or len(lower) < 3:
                continue
            band = _band_between(polyhedron, lower, upper, normal, h1 - h0)
            if band is not None and collapse_band(band) is not polyhedron:
                bands.append(band)
    return bands


def collapse_band(band: Band) -> Polyhedron:
    """Remove *band*, or return its polyhedron unchanged if the result
    would not be a valid solid."""
    polyhedron = band.polyhedron
    heights = polyhedron.vertices @ band.normal
    top = float(heights[band.upper[0]])
    moving = [
        v for v in range(polyhedron.num_vertices)
        if heights[v] >= top - PRECISION
    ]
    centre = get_centroid(polyhedron.vertices[list(band.lower)])
    targets = polyhedron.vertices[list(band.lower)]

    twist = math.pi / len(band.lower) if band.kind == BandType.ANTIPRISM else 0.0
    for angle in (-twist, twist):
        vertices = np.array(polyhedron.vertices)
        for v in moving:
            vertices[v] = rotate_around(
                vertices[v] - band.normal * band.height,
                centre, band.normal, angle,
            )
        landed = vertices[list(band.upper)]
        if all(any(approx_equal(p, t) for t in targets) for p in landed):
            break
    else:
        return polyhedron

    result = deduplicate_vertices(polyhedron.with_vertices(vertices))
    face_sets = [frozenset(f) for f in result.faces]
    if (
        result.num_faces < 4
        or len(set(face_sets)) != len(face_sets)
        or not result.is_valid()
    ):
        return polyhedron
    return result


def find_band(polyhedron: Polyhedron, face_index: int) -> Band | None:
    """The band containing, or bounded by, face *face_index*."""
    if not 0 <= face_index < polyhedron.num_faces:
        return None
    face = set(polyhedron.faces[face_index])
    for band in get_bands(polyhedron):
        if face_index in band.faces:
            return band
        if face <= set(band.lower) | set(band.upper):
            return band
    for band in get_bands(polyhedron):
        if face & (set(band.lower) | set(band.upper)):
            return band
    return None


def shorten(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Remove a prism or antiprism band.

    Config keys:
        band: A :class:`Band` of *polyhedron*, or
        face: A face in or next to the band.

    Without either, the first band found is removed.  Returns
    *polyhedron* unchanged if it has no removable band.
    """
    config = config or {}
    band = config.get("band")
    if band is not None and band.polyhedron is not polyhedron:
        band = None
    if band is None and "face" in config:
        band = find_band(polyhedron, config["face"])
    if band is None and "band" not in config and "face" not in config:
        bands = get_bands(polyhedron)
        band = bands[0] if bands else None
    if band is None:
        return polyhedron
    return collapse_band(band)


def shorten_apply_args(polyhedron: Polyhedron, point) -> dict | None:
    face = polyhedron.hit_face(point)
    band = find_band(polyhedron, face.index)
    if band is None:
        return None
    return {"band": band}


def band_symbol(band: Band) -> str:
    """Graph symbol of the shortening that removes *band*."""
    return "~P" if band.kind == BandType.PRISM else "~A"
