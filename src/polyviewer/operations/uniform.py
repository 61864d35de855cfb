"""Regular-faced realisation of uniform solids from their face structure.

Every vertex of a Platonic or Archimedean solid lies on one sphere, and
every face is a regular polygon, so a face with ``n`` unit sides sits at
distance ``sqrt(R**2 - circumradius(n)**2)`` from the centre.  Given the
faces of a result and the outward direction of (some of) them, the only
unknown is the radius ``R``; it is found by minimising the spread of the
edge lengths.

Vertices lying on three or more *anchor* faces are the least-squares
intersection of their planes.  Vertices on only two anchors (the corners
of a truncation) lie where the line shared by both planes meets the
sphere; the side of the line is picked per solid to give the smaller
spread.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

import numpy as np
from scipy.optimize import minimize_scalar
from scipy.spatial import HalfspaceIntersection, QhullError

from polyviewer._constants import PRECISION
from polyviewer.construction.hull import faces_from_points
from polyviewer.geometry import Plane, normalize, plane_intersection
from polyviewer.model import Face, Polyhedron

logger = logging.getLogger(__name__)

_GRID_POINTS = 240
_PENALTY = 1e6


def _circumradius(n: int) -> float:
    return 1 / (2 * math.sin(math.pi / n))


def _face_distance(n: int, radius: float) -> float | None:
    square = radius ** 2 - _circumradius(n) ** 2
    if square < 0:
        return None
    return math.sqrt(square)


def _on_two_planes(
    first: Plane, second: Plane, radius: float, sign: int,
) -> np.ndarray | None:
    """Point on both planes at distance *radius* from the origin."""
    a, b = first.normal, second.normal
    ab = float(np.dot(a, b))
    det = 1 - ab ** 2
    if det < 1e-12:
        return None
    alpha = (first.offset - ab * second.offset) / det
    beta = (second.offset - ab * first.offset) / det
    base = alpha * a + beta * b
    square = radius ** 2 - float(np.dot(base, base))
    if square < 0:
        return None
    return base + sign * math.sqrt(square) * normalize(np.cross(a, b))


class _Layout:
    """Vertex placement for one face structure and set of anchor faces."""

    def __init__(
        self, topology: Polyhedron, directions: Mapping[int, np.ndarray],
    ) -> None:
        self.topology = topology
        self.directions = {f: normalize(d) for f, d in directions.items()}
        self.anchors: list[list[int]] = []
        for v in range(topology.num_vertices):
            faces = [
                f for f in topology._vertex_face_indices[v]
                if f in self.directions
            ]
            faces.sort(key=lambda f: (len(topology.faces[f]), f))
            if len(faces) < 2:
                raise ValueError(f"vertex {v} lies on fewer than two anchor faces")
            self.anchors.append(faces)
        self.edges = np.array([edge.key for edge in topology.edges])
        self.min_radius = max(
            _circumradius(len(topology.faces[f])) for f in self.directions
        )

    def place(self, radius: float, sign: int) -> np.ndarray | None:
        positions = np.empty((self.topology.num_vertices, 3))
        for v, faces in enumerate(self.anchors):
            planes = []
            for f in faces:
                distance = _face_distance(len(self.topology.faces[f]), radius)
                if distance is None:
                    return None
                planes.append(Plane(self.directions[f], distance))
            if len(planes) >= 3:
                positions[v] = plane_intersection(planes)
            else:
                point = _on_two_planes(planes[0], planes[1], radius, sign)
                if point is None:
                    return None
                positions[v] = point
        return positions

    def spread(self, radius: float, sign: int) -> float:
        positions = self.place(radius, sign)
        if positions is None:
            return _PENALTY
        lengths = np.linalg.norm(
            positions[self.edges[:, 0]] - positions[self.edges[:, 1]], axis=1,
        )
        mean = float(lengths.mean())
        if mean < 1e-9:
            return _PENALTY
        return float(lengths.std()) / mean


def realize_uniform(
    topology: Polyhedron,
    directions: Mapping[int, np.ndarray],
    edge_length: float = 1.0,
    centre=(0.0, 0.0, 0.0),
) -> Polyhedron:
    """Place the vertices of *topology* to make every face regular.

    Args:
        topology: Faces of the result; vertex positions are ignored.
        directions: Outward direction of each anchor face, by face index.
        edge_length: Edge length of the result.
        centre: Centre of the result.

    Returns:
        A polyhedron with the faces of *topology*.

    Raises:
        ValueError: If no radius gives equal edge lengths.
    """
    layout = _Layout(topology, directions)
    lo = layout.min_radius + 1e-9
    hi = 4 * lo + 2
    grid = np.linspace(lo, hi, _GRID_POINTS)
    step = grid[1] - grid[0]

    best: tuple[float, float, int] | None = None
    for sign in (1, -1):
        values = [layout.spread(r, sign) for r in grid]
        start = float(grid[int(np.argmin(values))])
        result = minimize_scalar(
            lambda r: layout.spread(r, sign),
            bounds=(max(lo, start - step), min(hi, start + step)),
            method="bounded",
            options={"xatol": 1e-12},
        )
        candidate = (float(result.fun), float(result.x), sign)
        if best is None or candidate[0] < best[0]:
            best = candidate

    spread, radius, sign = best
    if spread > PRECISION:
        raise ValueError(
            f"faces cannot all be made regular (edge length spread {spread:.3g})"
        )
    logger.debug("uniform realisation at radius %.6f (sign %+d)", radius, sign)
    positions = layout.place(radius, sign)
    # With a single face type the spread is scale-free, so any radius fits.
    lengths = np.linalg.norm(
        positions[layout.edges[:, 0]] - positions[layout.edges[:, 1]], axis=1,
    )
    positions = positions / float(lengths.mean())
    return Polyhedron(
        positions * edge_length + np.asarray(centre, dtype=float),
        topology.faces,
    )


def intersect_face_planes(
    polyhedron: Polyhedron, faces: Sequence[Face],
) -> Polyhedron:
    """The solid bounded by the planes of *faces*, made regular-faced.

    The planes are intersected as half-spaces to find the structure of
    the result, which is then realised with each face keeping the
    direction of the plane it came from.

    Raises:
        ValueError: If the planes do not bound a solid.
    """
    centre = polyhedron.centroid
    halfspaces = np.array([
        [*f.normal, -float(np.dot(f.normal, f.centroid - centre))]
        for f in faces
    ])
    try:
        hs = HalfspaceIntersection(halfspaces, np.zeros(3))
    except QhullError as exc:
        raise ValueError(f"face planes do not bound a solid: {exc}") from exc

    points = hs.intersections
    _, keep = np.unique(np.round(points, 6), axis=0, return_index=True)
    points = points[np.sort(keep)]
    topology = Polyhedron(points, faces_from_points(points))

    directions: dict[int, np.ndarray] = {}
    for result_face in topology.face_list:
        source = max(
            faces, key=lambda f: float(np.dot(f.normal, result_face.normal)),
        )
        directions[result_face.index] = source.normal
    return realize_uniform(
        topology, directions,
        edge_length=polyhedron.face().side_length,
        centre=centre,
    )
