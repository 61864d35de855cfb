"""The canonical solid catalog.

Seed solids are built from vertex coordinates; every other solid is
built by a short recipe of operations applied to a seed.  Results are
centred on the origin, scaled to unit edge length and cached, so repeated
lookups return the same instance.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Sequence

import numpy as np

from polyviewer.construction import solids
from polyviewer.construction.hull import faces_from_points
from polyviewer.errors import UnknownSolidError
from polyviewer.geometry import normalize
from polyviewer.model import Face, Polyhedron
from polyviewer.names import NOTATION_TO_NAME, from_notation, to_notation
from polyviewer.operations.augment import augment, diminish, gyrate
from polyviewer.operations.caps import Cap, CapType, get_caps
from polyviewer.operations.elongate import elongate, gyroelongate
from polyviewer.operations.expand import expand, snub
from polyviewer.operations.truncate import rectify, truncate

logger = logging.getLogger(__name__)

# Dot products between the directions of two positions that are neither
# adjacent nor opposite.
_META_PENTAGONAL = -1 / np.sqrt(5)
_META_HEXAGONAL = -0.5
_META_DECAGONAL_PRISM = np.cos(4 * np.pi / 5)
_PARA = -1.0


def _from_points(coords) -> Polyhedron:
    coords = np.asarray(coords, dtype=float)
    return Polyhedron(coords, faces_from_points(coords))


def _normalize(polyhedron: Polyhedron) -> Polyhedron:
    """Centre on the origin and scale to unit mean edge length."""
    lengths = [edge.length for edge in polyhedron.edges]
    centred = polyhedron.vertices - polyhedron.centroid
    return polyhedron.with_vertices(centred / np.mean(lengths))


# ---- picking positions by direction ------------------------------------

def _spread(directions: Sequence[np.ndarray], count: int, dot: float) -> list[np.ndarray]:
    """*count* directions, starting with the first, whose pairwise dot
    products all equal *dot*."""
    chosen = [directions[0]]
    for d in directions[1:]:
        if len(chosen) == count:
            break
        if all(abs(float(np.dot(d, c)) - dot) < 1e-2 for c in chosen):
            chosen.append(d)
    if len(chosen) < count:
        raise ValueError(f"cannot place {count} positions {dot:.3f} apart")
    return chosen


def _face_directions(polyhedron: Polyhedron, n_sides: int) -> list[np.ndarray]:
    return [normalize(f.centroid) for f in polyhedron.faces_with_sides(n_sides)]


def _face_towards(polyhedron: Polyhedron, direction, n_sides: int) -> Face:
    return max(
        polyhedron.faces_with_sides(n_sides),
        key=lambda f: float(np.dot(normalize(f.centroid), direction)),
    )


def _cap_towards(polyhedron: Polyhedron, direction, kind: CapType) -> Cap:
    return max(
        (cap for cap in get_caps(polyhedron) if cap.kind == kind),
        key=lambda cap: float(np.dot(normalize(cap.top_point), direction)),
    )


def _augmented(
    base: str, n_sides: int, count: int = 1, dot: float = _PARA, **config,
) -> Polyhedron:
    """*base* augmented on *count* of its *n_sides* faces."""
    polyhedron = get(base)
    targets = _spread(_face_directions(polyhedron, n_sides), count, dot)
    for direction in targets:
        face = _face_towards(polyhedron, direction, n_sides)
        polyhedron = augment(polyhedron, {"face": face.index, **config})
    return polyhedron


def _capped(base: str, n_sides: int, **config) -> Callable[[], Polyhedron]:
    """Recipe augmenting the unique *n_sides* face of *base*."""
    def recipe() -> Polyhedron:
        polyhedron = get(base)
        face = polyhedron.faces_with_sides(n_sides)[0]
        return augment(polyhedron, {"face": face.index, **config})
    return recipe


def _reworked(
    base: str, kind: CapType, steps: str, dot: float = _META_PENTAGONAL,
) -> Polyhedron:
    """*base* with a cap gyrated (``g``) or removed (``-``) per step.

    Caps are chosen at positions mutually *dot* apart, or opposite one
    another for a two-step ``para`` recipe.
    """
    polyhedron = get(base)
    tops = [normalize(cap.top_point) for cap in get_caps(polyhedron) if cap.kind == kind]
    for step, direction in zip(steps, _spread(tops, len(steps), dot)):
        cap = _cap_towards(polyhedron, direction, kind)
        operation = gyrate if step == "g" else diminish
        polyhedron = operation(polyhedron, {"cap": cap})
    return polyhedron


def _diminished_icosahedron(count: int) -> Polyhedron:
    polyhedron = get("I")
    tops = [normalize(v.position) for v in polyhedron.vertex_list]
    for direction in _spread(tops, count, _META_PENTAGONAL):
        cap = _cap_towards(polyhedron, direction, CapType.PYRAMID)
        polyhedron = diminish(polyhedron, {"cap": cap})
    return polyhedron


def _augmented_tridiminished_icosahedron() -> Polyhedron:
    polyhedron = get("J63")
    face = next(
        f for f in polyhedron.faces_with_sides(3)
        if all(g.num_sides == 5 for g in f.adjacent_faces)
    )
    return augment(polyhedron, {"face": face.index})


# ---- the catalog ---------------------------------------------------------

_SEEDS: dict[str, Callable[[], np.ndarray]] = {
    "T": solids.tetrahedron,
    "C": solids.cube,
    "O": solids.octahedron,
    "D": solids.dodecahedron,
    "I": solids.icosahedron,
    "aD": solids.icosidodecahedron,
    "bC": solids.truncated_cuboctahedron,
    "bD": solids.truncated_icosidodecahedron,
    "J1": lambda: solids.pyramid(4),
    "J2": lambda: solids.pyramid(5),
    "J3": lambda: solids.cupola(3),
    "J4": lambda: solids.cupola(4),
    "J5": lambda: solids.cupola(5),
    "J6": solids.pentagonal_rotunda,
    "J84": solids.snub_disphenoid,
    "J85": solids.snub_square_antiprism,
    "J86": solids.sphenocorona,
    "J88": solids.sphenomegacorona,
    "J89": solids.hebesphenomegacorona,
    "J90": solids.disphenocingulum,
    "J91": solids.bilunabirotunda,
    "J92": solids.triangular_hebesphenorotunda,
    **{f"P{n}": functools.partial(solids.prism, n) for n in (3, 5, 6, 8, 10)},
    **{f"A{n}": functools.partial(solids.antiprism, n) for n in (4, 5, 6, 8, 10)},
}


def _of(operation, base: str, config: dict | None = None) -> Callable[[], Polyhedron]:
    return lambda: operation(get(base), config)


_RECIPES: dict[str, Callable[[], Polyhedron]] = {
    # Archimedean
    "tT": _of(truncate, "T"),
    "tC": _of(truncate, "C"),
    "tO": _of(truncate, "O"),
    "tD": _of(truncate, "D"),
    "tI": _of(truncate, "I"),
    "aC": _of(rectify, "C"),
    "eC": _of(expand, "C"),
    "eD": _of(expand, "D"),
    "sC": _of(snub, "C"),
    "sD": _of(snub, "D"),
    # elongated and gyroelongated pyramids
    "J7": _of(elongate, "T"),
    "J8": _of(elongate, "J1"),
    "J9": _of(elongate, "J2"),
    "J10": _of(gyroelongate, "J1"),
    "J11": _of(gyroelongate, "J2"),
    # bipyramids
    "J12": _capped("T", 3),
    "J13": _capped("J2", 5),
    "J14": _of(elongate, "J12"),
    "J15": _of(elongate, "O"),
    "J16": _of(elongate, "J13"),
    "J17": _of(gyroelongate, "O"),
    # elongated cupolae and rotunda
    "J18": _of(elongate, "J3"),
    "J19": _of(elongate, "J4"),
    "J20": _of(elongate, "J5"),
    "J21": _of(elongate, "J6"),
    "J22": _of(gyroelongate, "J3"),
    "J23": _of(gyroelongate, "J4"),
    "J24": _of(gyroelongate, "J5"),
    "J25": _of(gyroelongate, "J6"),
    # bicupolae and birotundae
    "J26": _capped("P3", 4, block="fastigium"),
    "J27": _capped("J3", 6, gyrate="ortho"),
    "J28": _capped("J4", 8, gyrate="ortho"),
    "J29": _capped("J4", 8, gyrate="gyro"),
    "J30": _capped("J5", 10, block="cupola", gyrate="ortho"),
    "J31": _capped("J5", 10, block="cupola", gyrate="gyro"),
    "J32": _capped("J5", 10, block="rotunda", gyrate="ortho"),
    "J33": _capped("J5", 10, block="rotunda", gyrate="gyro"),
    "J34": _capped("J6", 10, block="rotunda", gyrate="ortho"),
    "J35": _capped("J18", 6, gyrate="ortho"),
    "J36": _capped("J18", 6, gyrate="gyro"),
    "J37": _capped("J19", 8, gyrate="gyro"),
    "J38": _capped("J20", 10, block="cupola", gyrate="ortho"),
    "J39": _capped("J20", 10, block="cupola", gyrate="gyro"),
    "J40": _capped("J20", 10, block="rotunda", gyrate="ortho"),
    "J41": _capped("J20", 10, block="rotunda", gyrate="gyro"),
    "J42": _capped("J21", 10, block="rotunda", gyrate="ortho"),
    "J43": _capped("J21", 10, block="rotunda", gyrate="gyro"),
    "J44": _capped("J22", 6),
    "J45": _capped("J23", 8),
    "J46": _capped("J24", 10, block="cupola"),
    "J47": _capped("J24", 10, block="rotunda"),
    "J48": _capped("J25", 10, block="rotunda"),
    # augmented prisms
    "J49": lambda: _augmented("P3", 4),
    "J50": lambda: _augmented("P3", 4, 2, dot=-0.5),
    "J51": lambda: _augmented("P3", 4, 3, dot=-0.5),
    "J52": lambda: _augmented("P5", 4),
    "J53": lambda: _augmented("P5", 4, 2, dot=_META_DECAGONAL_PRISM),
    "J54": lambda: _augmented("P6", 4),
    "J55": lambda: _augmented("P6", 4, 2),
    "J56": lambda: _augmented("P6", 4, 2, dot=_META_HEXAGONAL),
    "J57": lambda: _augmented("P6", 4, 3, dot=_META_HEXAGONAL),
    # augmented dodecahedra
    "J58": lambda: _augmented("D", 5),
    "J59": lambda: _augmented("D", 5, 2),
    "J60": lambda: _augmented("D", 5, 2, dot=_META_PENTAGONAL),
    "J61": lambda: _augmented("D", 5, 3, dot=_META_PENTAGONAL),
    # diminished icosahedra
    "J62": lambda: _diminished_icosahedron(2),
    "J63": lambda: _diminished_icosahedron(3),
    "J64": _augmented_tridiminished_icosahedron,
    # augmented truncated solids
    "J65": lambda: _augmented("tT", 6),
    "J66": lambda: _augmented("tC", 8),
    "J67": lambda: _augmented("tC", 8, 2),
    "J68": lambda: _augmented("tD", 10, block="cupola"),
    "J69": lambda: _augmented("tD", 10, 2, block="cupola"),
    "J70": lambda: _augmented("tD", 10, 2, dot=_META_PENTAGONAL, block="cupola"),
    "J71": lambda: _augmented("tD", 10, 3, dot=_META_PENTAGONAL, block="cupola"),
    # gyrate and diminished rhombicosidodecahedra
    "J72": lambda: _reworked("eD", CapType.CUPOLA, "g"),
    "J73": lambda: _reworked("eD", CapType.CUPOLA, "gg", dot=_PARA),
    "J74": lambda: _reworked("eD", CapType.CUPOLA, "gg"),
    "J75": lambda: _reworked("eD", CapType.CUPOLA, "ggg"),
    "J76": lambda: _reworked("eD", CapType.CUPOLA, "-"),
    "J77": lambda: _reworked("eD", CapType.CUPOLA, "-g", dot=_PARA),
    "J78": lambda: _reworked("eD", CapType.CUPOLA, "-g"),
    "J79": lambda: _reworked("eD", CapType.CUPOLA, "-gg"),
    "J80": lambda: _reworked("eD", CapType.CUPOLA, "--", dot=_PARA),
    "J81": lambda: _reworked("eD", CapType.CUPOLA, "--"),
    "J82": lambda: _reworked("eD", CapType.CUPOLA, "--g"),
    "J83": lambda: _reworked("eD", CapType.CUPOLA, "---"),
    "J87": lambda: _augmented("J86", 4),
}


@functools.cache
def _build(notation: str) -> Polyhedron:
    if notation in _SEEDS:
        polyhedron = _from_points(_SEEDS[notation]())
    else:
        polyhedron = _RECIPES[notation]()
    logger.debug("built %s: %r", notation, polyhedron)
    return _normalize(polyhedron)


def is_valid_solid(name: str) -> bool:
    """Whether *name* (hyphenated or notation) has a catalog entry."""
    try:
        notation = to_notation(name)
    except UnknownSolidError:
        return False
    return notation in _SEEDS or notation in _RECIPES


def available_solids() -> list[str]:
    """Hyphenated names of every solid in the catalog."""
    return [
        from_notation(notation) for notation in NOTATION_TO_NAME
        if notation in _SEEDS or notation in _RECIPES
    ]


def get(name: str) -> Polyhedron:
    """The canonical solid for a hyphenated name or notation.

    Raises:
        UnknownSolidError: If *name* is not in the catalog.
    """
    if not is_valid_solid(name):
        raise UnknownSolidError(name)
    return _build(to_notation(name))
