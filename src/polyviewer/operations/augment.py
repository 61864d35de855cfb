"""Augment, diminish and gyrate: attaching and removing caps."""

from __future__ import annotations

import logging
import math

import numpy as np

from polyviewer.geometry import align_frames, get_plane, rotate_around
from polyviewer.model import Face, Polyhedron
from polyviewer.operations.caps import (
    Alignment,
    Cap,
    CapType,
    base_alignment,
    find_cap,
)
from polyviewer.operations.utils import remove_extraneous_vertices

logger = logging.getLogger(__name__)

# Block solid attached for each (cap type, base side count).
_BLOCKS: dict[tuple[CapType, int], str] = {
    (CapType.PYRAMID, 3): "tetrahedron",
    (CapType.PYRAMID, 4): "square-pyramid",
    (CapType.PYRAMID, 5): "pentagonal-pyramid",
    (CapType.CUPOLA, 6): "triangular-cupola",
    (CapType.CUPOLA, 8): "square-cupola",
    (CapType.CUPOLA, 10): "pentagonal-cupola",
    (CapType.ROTUNDA, 10): "pentagonal-rotunda",
    (CapType.FASTIGIUM, 4): "triangular-prism",
}


def block_types(n_sides: int) -> list[CapType]:
    """Cap types that fit on a face with *n_sides* sides, default first."""
    return [kind for kind, n in _BLOCKS if n == n_sides]


def _block_base(block: Polyhedron, n_sides: int) -> Face:
    """The face of *block* that is glued to the augmented face."""
    # Every block has a single face of this size, except the tetrahedron
    # and the prism, where any one will do.
    return block.faces_with_sides(n_sides)[0]


def _attach(
    polyhedron: Polyhedron, face: Face, kind: CapType, offset: int,
) -> Polyhedron:
    """Glue the block for *kind* onto *face*, rotated by *offset* steps."""
    from polyviewer.construction.catalog import get

    n = face.num_sides
    block = get(_BLOCKS[(kind, n)])
    base = _block_base(block, n)

    # Seen from the augmented solid, the block base runs the other way.
    base_ids = base.vertex_indices[::-1]
    target_ids = face.vertex_indices
    target_ref = polyhedron.vertices[target_ids[offset % n]]

    scale = face.side_length / base.side_length
    rotation, translation = align_frames(
        base.centroid * scale, -base.normal, block.vertices[base_ids[0]] * scale,
        face.centroid, face.normal, target_ref,
    )
    placed = (block.vertices * scale) @ rotation.T + translation

    index_map: dict[int, int] = {
        b: target_ids[(offset + i) % n] for i, b in enumerate(base_ids)
    }
    new_positions = []
    for i in range(block.num_vertices):
        if i not in index_map:
            index_map[i] = polyhedron.num_vertices + len(new_positions)
            new_positions.append(placed[i])

    new_faces = [
        [index_map[v] for v in f]
        for fi, f in enumerate(block.faces) if fi != base.index
    ]
    return polyhedron.with_changes(
        lambda s: s.add_vertices(np.array(new_positions))
        .with_faces([f for i, f in enumerate(polyhedron.faces) if i != face.index])
        .add_faces(new_faces)
    )


def _attached_alignment(result: Polyhedron, face: Face) -> Alignment:
    """Alignment of the block just attached in place of *face*."""
    return base_alignment(result, face.vertex_indices)


def can_augment(face: Face, block: CapType | None = None) -> bool:
    if not face.is_valid:
        return False
    kinds = block_types(face.num_sides)
    return bool(kinds) and (block is None or block in kinds)


def augment(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Attach a pyramid, cupola, rotunda or fastigium to a face.

    Config keys:
        face: Index of the face to augment.
        block: Cap type to attach; defaults to the first that fits.
        gyrate: ``"ortho"`` or ``"gyro"`` for blocks that can sit
            either way; defaults to ``"gyro"``.

    Returns *polyhedron* unchanged if the face cannot be augmented.
    """
    config = config or {}
    if not 0 <= config.get("face", -1) < polyhedron.num_faces:
        return polyhedron
    face = polyhedron.face(config["face"])
    kind = CapType(config["block"]) if config.get("block") else None
    if not can_augment(face, kind):
        logger.debug("cannot augment face %d with %s", face.index, kind)
        return polyhedron
    kind = kind or block_types(face.num_sides)[0]

    if kind == CapType.PYRAMID:
        return _attach(polyhedron, face, kind, 0)

    wanted = Alignment(config.get("gyrate") or Alignment.GYRO)
    first = _attach(polyhedron, face, kind, 0)
    if _attached_alignment(first, face) == wanted:
        return first
    return _attach(polyhedron, face, kind, 1)


def augment_search_options(polyhedron: Polyhedron) -> list[dict]:
    """Distinct block/alignment choices available on *polyhedron*."""
    options: list[dict] = []
    sides = sorted({f.num_sides for f in polyhedron.face_list if f.is_valid})
    for n in sides:
        for kind in block_types(n):
            if kind == CapType.PYRAMID:
                choices = [{"block": str(kind)}]
            else:
                choices = [
                    {"block": str(kind), "gyrate": str(a)} for a in Alignment
                ]
            for choice in choices:
                if choice not in options:
                    options.append(choice)
    return options


def augment_apply_args(polyhedron: Polyhedron, point) -> dict | None:
    face = polyhedron.hit_face(point)
    if not can_augment(face):
        return None
    return {"face": face.index}


def remove_cap(polyhedron: Polyhedron, cap: Cap) -> Polyhedron:
    """Remove *cap* and close its base with a new last face."""
    removed = set(cap.faces)
    kept = [f for i, f in enumerate(polyhedron.faces) if i not in removed]
    return remove_extraneous_vertices(
        polyhedron.with_faces(kept + [list(cap.base)])
    )


def _resolve_cap(polyhedron: Polyhedron, config: dict) -> Cap | None:
    cap = config.get("cap")
    if cap is not None:
        return cap if cap.polyhedron is polyhedron else None
    if "point" in config:
        return find_cap(polyhedron, config["point"])
    return None


def diminish(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Remove a cap.

    Config keys:
        cap: A :class:`Cap` of *polyhedron*, or
        point: A picked point used to locate one.

    Returns *polyhedron* unchanged if no removable cap is selected.
    """
    cap = _resolve_cap(polyhedron, config or {})
    if cap is None or not cap.removal_is_valid():
        return polyhedron
    return remove_cap(polyhedron, cap)


def cap_apply_args(polyhedron: Polyhedron, point) -> dict | None:
    cap = find_cap(polyhedron, point)
    if cap is None:
        return None
    return {"cap": cap}


def rotate_cap(polyhedron: Polyhedron, cap: Cap) -> Polyhedron:
    """Turn *cap* by one step of its base polygon.

    The base runs counter-clockwise about its normal, so a vertex at
    ``base[i]`` lands on ``base[i + 1]``.
    """
    base = cap.base
    m = len(base)
    normal = get_plane(polyhedron.vertices[list(base)]).normal
    centre = cap.base_centroid
    angle = 2 * math.pi / m

    vertices = np.array(polyhedron.vertices)
    for v in cap.inner:
        vertices[v] = rotate_around(vertices[v], centre, normal, angle)
    shift = {base[i]: base[(i + 1) % m] for i in range(m)}
    in_cap = set(cap.faces)
    faces = [
        [shift.get(v, v) for v in face] if i in in_cap else list(face)
        for i, face in enumerate(polyhedron.faces)
    ]
    return Polyhedron(vertices, faces)


def gyrate(polyhedron: Polyhedron, config: dict | None = None) -> Polyhedron:
    """Turn a cupola or rotunda cap to its other alignment.

    Config keys are as for :func:`diminish`.  Pyramid and fastigium
    caps cannot be gyrated and leave *polyhedron* unchanged.
    """
    cap = _resolve_cap(polyhedron, config or {})
    if cap is None or cap.kind not in (CapType.CUPOLA, CapType.ROTUNDA):
        return polyhedron
    return rotate_cap(polyhedron, cap)


def gyrate_apply_args(polyhedron: Polyhedron, point) -> dict | None:
    cap = find_cap(polyhedron, point)
    if cap is None or cap.kind not in (CapType.CUPOLA, CapType.ROTUNDA):
        return None
    return {"cap": cap}
