"""Closed-form vertex coordinates for the seed solids.

Each function returns an ``(n, 3)`` array of vertex positions.  Faces are
recovered from the convex hull (see :mod:`polyviewer.construction.hull`)
and scale is normalised by the catalog, so the coordinates here use
whatever scale makes them simplest.
"""

from __future__ import annotations

import itertools
import math

import numpy as np
from scipy.optimize import least_squares

from polyviewer._constants import PHI
from polyviewer.construction.hull import faces_from_points


def _sign_variants(point) -> list[tuple[float, ...]]:
    """Every sign combination of the non-zero components of *point*."""
    choices = [(c, -c) if c != 0 else (0.0,) for c in point]
    return [tuple(p) for p in itertools.product(*choices)]


def _cyclic(point) -> list[tuple[float, ...]]:
    x, y, z = point
    return [(x, y, z), (y, z, x), (z, x, y)]


def _unique(points) -> np.ndarray:
    arr = np.asarray(points, dtype=float)
    _, idx = np.unique(np.round(arr, 9), axis=0, return_index=True)
    return arr[np.sort(idx)]


def _even_permutations(*points) -> np.ndarray:
    """Cyclic permutations of every sign variant of *points*."""
    result = []
    for point in points:
        for variant in _sign_variants(point):
            result.extend(_cyclic(variant))
    return _unique(result)


def _all_permutations(*points) -> np.ndarray:
    result = []
    for point in points:
        for variant in _sign_variants(point):
            result.extend(itertools.permutations(variant))
    return _unique(result)


def _polygon(n: int, radius: float, z: float, phase: float = 0.0) -> np.ndarray:
    angles = phase + 2 * math.pi * np.arange(n) / n
    return np.column_stack([
        radius * np.cos(angles),
        radius * np.sin(angles),
        np.full(n, z),
    ])


def circumradius(n: int) -> float:
    """Circumradius of a regular *n*-gon with unit sides."""
    return 1 / (2 * math.sin(math.pi / n))


def apothem(n: int) -> float:
    """Inradius of a regular *n*-gon with unit sides."""
    return 1 / (2 * math.tan(math.pi / n))


# ---- Platonic --------------------------------------------------------------

def tetrahedron() -> np.ndarray:
    return np.array([
        [1.0, 1.0, 1.0],
        [1.0, -1.0, -1.0],
        [-1.0, 1.0, -1.0],
        [-1.0, -1.0, 1.0],
    ])


def cube() -> np.ndarray:
    return _unique(_sign_variants((1.0, 1.0, 1.0)))


def octahedron() -> np.ndarray:
    return _all_permutations((1.0, 0.0, 0.0))


def icosahedron() -> np.ndarray:
    return _even_permutations((0.0, 1.0, PHI))


def dodecahedron() -> np.ndarray:
    return _unique(np.vstack([
        cube(),
        _even_permutations((0.0, 1 / PHI, PHI)),
    ]))


# ---- Archimedean solids not reachable by a single operation ----------------

def truncated_cuboctahedron() -> np.ndarray:
    r2 = math.sqrt(2)
    return _all_permutations((1.0, 1 + r2, 1 + 2 * r2))


def truncated_icosidodecahedron() -> np.ndarray:
    return _even_permutations(
        (1 / PHI, 1 / PHI, 3 + PHI),
        (2 / PHI, PHI, 1 + 2 * PHI),
        (1 / PHI, PHI ** 2, -1 + 3 * PHI),
        (2 * PHI - 1, 2.0, 2 + PHI),
        (PHI, 3.0, 2 * PHI),
    )


def icosidodecahedron() -> np.ndarray:
    return _even_permutations(
        (0.0, 0.0, PHI),
        (0.5, PHI / 2, PHI ** 2 / 2),
    )


# ---- prisms, pyramids, cupolae ---------------------------------------------

def prism(n: int) -> np.ndarray:
    r = circumradius(n)
    return np.vstack([_polygon(n, r, 0.5), _polygon(n, r, -0.5)])


def antiprism(n: int) -> np.ndarray:
    r = circumradius(n)
    chord = 2 * r * math.sin(math.pi / (2 * n))
    h = math.sqrt(1 - chord ** 2)
    return np.vstack([
        _polygon(n, r, h / 2),
        _polygon(n, r, -h / 2, phase=math.pi / n),
    ])


def pyramid(n: int) -> np.ndarray:
    """Regular *n*-gonal pyramid with unit edges (n = 3, 4, 5)."""
    if n not in (3, 4, 5):
        raise ValueError(f"no regular-faced pyramid with a {n}-gon base")
    r = circumradius(n)
    apex = np.array([[0.0, 0.0, math.sqrt(1 - r ** 2)]])
    return np.vstack([_polygon(n, r, 0.0), apex])


def cupola(n: int) -> np.ndarray:
    """Regular *n*-gonal cupola with unit edges (n = 3, 4, 5).

    Each top edge sits above every other edge of the 2n-gon base.
    """
    if n not in (3, 4, 5):
        raise ValueError(f"no regular-faced cupola with an {n}-gon top")
    step = math.pi / n
    offset = apothem(2 * n) - apothem(n)
    h = math.sqrt(1 - offset ** 2)
    base = _polygon(2 * n, circumradius(2 * n), 0.0, phase=step / 2)
    top = _polygon(n, circumradius(n), h)
    return np.vstack([base, top])


def pentagonal_rotunda() -> np.ndarray:
    """Half of an icosidodecahedron, cut through a decagonal equator."""
    coords = icosidodecahedron()
    pentagon = next(f for f in faces_from_points(coords) if len(f) == 5)
    axis = coords[pentagon].mean(axis=0)
    axis /= np.linalg.norm(axis)
    return coords[coords @ axis >= -1e-9]


# ---- J84 to J92 --------------------------------------------------------------
#
# These have no construction from simpler solids.  Each is written down
# with its symmetry built in, leaving a few free parameters that are
# fitted to unit edges from a nearby starting point.

def _fitted(place, pairs, guess, lengths=None) -> np.ndarray:
    """Positions from *place* with every pair in *pairs* the right
    distance apart.

    *place* maps a parameter vector to an ``(n, 3)`` array; the
    parameters start at *guess*.  Pairs are unit length apart unless
    *lengths* says otherwise.
    """
    pairs = np.asarray(pairs)
    targets = np.ones(len(pairs)) if lengths is None else np.asarray(lengths, dtype=float)

    def residuals(params: np.ndarray) -> np.ndarray:
        coords = place(params)
        return np.linalg.norm(
            coords[pairs[:, 0]] - coords[pairs[:, 1]], axis=1,
        ) - targets

    fit = least_squares(residuals, guess, xtol=1e-15, ftol=1e-15, gtol=1e-15)
    if np.abs(fit.fun).max() > 1e-8:
        raise ValueError("no unit-edge solution near the starting point")
    return place(fit.x)


def _turned(points, steps: int, n: int = 3) -> np.ndarray:
    """*points* rotated by ``steps`` n-th turns about the z axis."""
    angle = 2 * math.pi * steps / n
    c, s = math.cos(angle), math.sin(angle)
    turn = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
    return np.asarray(points, dtype=float) @ turn.T


def _mirrored(*points) -> np.ndarray:
    """Every reflection of *points* in the xz and yz planes."""
    result = []
    for x, y, z in points:
        for sx, sy in itertools.product((1, -1), repeat=2):
            result.append((sx * x, sy * y, z))
    return _unique(result)


def snub_disphenoid() -> np.ndarray:
    """J84: two opposite edges, one above the other, and a belt of four."""
    def place(params):
        p, z1, z2 = params
        return np.array([
            [0.5, 0, z1], [-0.5, 0, z1], [0, 0.5, -z1], [0, -0.5, -z1],
            [p, 0, -z2], [-p, 0, -z2], [0, p, z2], [0, -p, z2],
        ])

    return _fitted(place, [(0, 6), (0, 4), (6, 4)], [0.645, 0.784, 0.206])


def snub_square_antiprism() -> np.ndarray:
    """J85: two squares, each ringed by triangles, joined by a zigzag."""
    r1 = circumradius(4)
    quarter = math.pi / 2

    def place(params):
        r2, h1, h2 = params
        return np.vstack([
            _polygon(4, r1, h1),
            _polygon(4, r2, h2, phase=quarter / 2),
            _polygon(4, r2, -h2),
            _polygon(4, r1, -h1, phase=quarter / 2),
        ])

    return _fitted(place, [(0, 4), (0, 8), (4, 8)], [1.213, 0.675, 0.185])


def sphenocorona() -> np.ndarray:
    """J86, with edge length 2 before normalisation."""
    roots = np.roots([60, -48, -100, 56, 23])
    k = min(r.real for r in roots if abs(r.imag) < 1e-9 and r.real > 0)
    h = math.sqrt(1 - k ** 2)
    return _mirrored(
        (0.0, 1.0, 2 * h),
        (2 * k, 1.0, 0.0),
        (0.0, 1 + math.sqrt(3 - 4 * k ** 2) / h, (1 - 2 * k ** 2) / h),
        (1.0, 0.0, -math.sqrt(2 + 4 * k - 4 * k ** 2)),
    )


def sphenomegacorona() -> np.ndarray:
    """J88: a lune of two squares over a crown of four vertices."""
    def place(params):
        k, h, e, z_end, d, z_side, z_low = params
        return np.array([
            [0, 0.5, h], [0, -0.5, h],
            [k, 0.5, 0], [k, -0.5, 0], [-k, 0.5, 0], [-k, -0.5, 0],
            [0, e, z_end], [0, -e, z_end],
            [0.5, 0, z_low], [-0.5, 0, z_low],
            [0, d, z_side], [0, -d, z_side],
        ])

    pairs = [(0, 2), (0, 6), (2, 6), (2, 10), (6, 10), (2, 8), (8, 10)]
    guess = [0.5946, 0.804, 1.283, 0.182, 0.855, -0.722, -0.861]
    return _fitted(place, pairs, guess)


def hebesphenomegacorona() -> np.ndarray:
    """J89: three squares in a row over a crown of four vertices."""
    def place(params):
        f, g, e, z_end, d, z_side, z_low = params
        return np.array([
            [0.5, 0.5, 0], [0.5, -0.5, 0], [-0.5, 0.5, 0], [-0.5, -0.5, 0],
            [f, 0.5, -g], [f, -0.5, -g], [-f, 0.5, -g], [-f, -0.5, -g],
            [0, e, z_end], [0, -e, z_end],
            [0.5, 0, z_low], [-0.5, 0, z_low],
            [0, d, z_side], [0, -d, z_side],
        ])

    pairs = [(0, 4), (8, 0), (8, 4), (4, 10), (4, 12), (8, 12), (10, 12)]
    guess = [0.72, 0.975, 1.10, -0.625, 0.835, -1.585, -1.81]
    return _fitted(place, pairs, guess)


def disphenocingulum() -> np.ndarray:
    """J90: two crossed lunes joined by a belt of triangles."""
    # A quarter turn with a flip through z = 0 swaps the two lunes.
    swap = np.array([[0.0, 1.0, 0.0], [-1.0, 0.0, 0.0], [0.0, 0.0, -1.0]])

    def place(params):
        a, b, z1, z2, z3 = params
        top = np.array([
            [0.5, 0, z1], [-0.5, 0, z1],
            [0.5, a, z2], [0.5, -a, z2], [-0.5, a, z2], [-0.5, -a, z2],
            [b, 0, z3], [-b, 0, z3],
        ])
        return np.vstack([top, top @ swap.T])

    pairs = [(0, 2), (0, 6), (2, 6), (2, 12), (2, 15)]
    return _fitted(place, pairs, [0.768, 1.125, 1.103, 0.463, 0.322])


def bilunabirotunda() -> np.ndarray:
    """J91: pentagon pairs above and below, lunes at either side."""
    return np.vstack([
        _sign_variants((0.0, 0.5, PHI ** 2 / 2)),
        _sign_variants((0.5, PHI / 2, 0.5)),
        _sign_variants((PHI / 2, 0.0, 0.0)),
    ])


def triangular_hebesphenorotunda() -> np.ndarray:
    """J92: a triangle among three pentagons, over a hexagon."""
    def place(params):
        y, z, z_top, r_apex, z_apex = params
        top = np.array([[0, 1 / math.sqrt(3), z_top]])
        corners = np.array([[0.5, y, z], [-0.5, y, z]])
        apex = np.array([[0, -r_apex, z_apex]])
        return np.vstack([
            np.vstack([_turned(top, k) for k in range(3)]),
            np.vstack([_turned(corners, k) for k in range(3)]),
            np.vstack([_turned(apex, k) for k in range(3)]),
            _polygon(6, 1.0, 0.0),
        ])

    pairs = [(3, 13), (0, 3), (7, 6), (1, 7), (7, 9), (2, 9), (9, 16)]
    lengths = [1, 1, PHI, PHI, 1, PHI, 1]
    guess = [1.2228, 0.9342, 1.5117, 1.511, 0.580]
    return _fitted(place, pairs, guess, lengths)
