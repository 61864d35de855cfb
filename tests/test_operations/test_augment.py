"""Tests for polyviewer.operations.caps and operations.augment."""

import numpy as np
import pytest

from polyviewer import get
from polyviewer.operations.augment import (
    augment,
    augment_apply_args,
    augment_search_options,
    block_types,
    can_augment,
    cap_apply_args,
    diminish,
    gyrate,
    gyrate_apply_args,
    remove_cap,
)
from polyviewer.operations.caps import Alignment, CapType, find_cap, get_caps


def _caps_of_kind(polyhedron, kind):
    return [cap for cap in get_caps(polyhedron) if cap.kind == kind]


class TestCaps:
    def test_icosahedron_pyramids(self):
        caps = get_caps(get("icosahedron"))
        assert len(caps) == 12
        assert all(cap.kind == CapType.PYRAMID for cap in caps)
        assert all(len(cap.base) == 5 for cap in caps)

    def test_square_pyramid_cap_not_removable(self):
        assert get_caps(get("square-pyramid")) == []

    def test_rhombicosidodecahedron_cupolae(self):
        caps = get_caps(get("rhombicosidodecahedron"))
        assert len(caps) == 12
        assert all(cap.kind == CapType.CUPOLA for cap in caps)
        assert all(len(cap.base) == 10 for cap in caps)
        assert all(len(cap.faces) == 11 for cap in caps)

    def test_rotunda(self):
        caps = _caps_of_kind(get("pentagonal-orthobirotunda"), CapType.ROTUNDA)
        assert len(caps) == 2
        assert all(len(cap.inner) == 10 for cap in caps)

    def test_fastigium(self):
        caps = _caps_of_kind(get("gyrobifastigium"), CapType.FASTIGIUM)
        assert len(caps) == 2

    def test_base_is_closing_face(self):
        solid = get("icosahedron")
        cap = get_caps(solid)[0]
        result = remove_cap(solid, cap)
        result.validate()
        assert result.faces[-1] == cap.base
        # The closing face's normal points toward the removed apex.
        normal = result.face(result.num_faces - 1).normal
        assert np.dot(normal, cap.top_point - cap.base_centroid) > 0

    def test_alignment(self):
        ortho = _caps_of_kind(get("square-orthobicupola"), CapType.CUPOLA)
        gyro = _caps_of_kind(get("square-gyrobicupola"), CapType.CUPOLA)
        assert {cap.alignment() for cap in ortho} == {Alignment.ORTHO}
        assert {cap.alignment() for cap in gyro} == {Alignment.GYRO}
        assert Alignment.ORTHO.opposite() == Alignment.GYRO

    def test_alignment_through_prism_band(self):
        caps = _caps_of_kind(get("elongated-square-gyrobicupola"), CapType.CUPOLA)
        assert {cap.alignment() for cap in caps} == {Alignment.GYRO}
        caps = _caps_of_kind(get("rhombicuboctahedron"), CapType.CUPOLA)
        assert Alignment.ORTHO in {cap.alignment() for cap in caps}

    def test_pyramid_has_no_alignment(self):
        assert get_caps(get("icosahedron"))[0].alignment() is None

    def test_find_cap(self):
        solid = get("icosahedron")
        apex = solid.vertices[0]
        cap = find_cap(solid, apex * 0.999)
        assert cap is not None
        assert cap.inner == (0,)

    def test_find_cap_on_capless_solid(self):
        cube = get("cube")
        assert find_cap(cube, cube.face().centroid) is None


class TestAugment:
    def test_block_types(self):
        assert block_types(4) == [CapType.PYRAMID, CapType.FASTIGIUM]
        assert block_types(10) == [CapType.CUPOLA, CapType.ROTUNDA]
        assert block_types(7) == []

    def test_tetrahedron_to_triangular_bipyramid(self, tetrahedron):
        result = augment(tetrahedron, {"face": 0})
        assert result.face_counts() == {3: 6}
        result.validate()
        assert all(f.is_valid for f in result.face_list)
        assert result.signature() == get("triangular-bipyramid").signature()

    def test_augment_then_diminish_round_trip(self, tetrahedron):
        augmented = augment(tetrahedron, {"face": 2})
        cap = min(
            get_caps(augmented),
            key=lambda c: np.linalg.norm(
                c.top_point - tetrahedron.face(2).centroid
            ),
        )
        restored = diminish(augmented, {"cap": cap})
        assert restored.signature() == tetrahedron.signature()
        restored.validate()

    def test_existing_vertices_unchanged(self, tetrahedron):
        result = augment(tetrahedron, {"face": 0})
        np.testing.assert_allclose(result.vertices[:4], tetrahedron.vertices)

    def test_cupola_alignment_choice(self):
        cupola = get("square-cupola")
        octagon = cupola.faces_with_sides(8)[0].index
        ortho = augment(cupola, {"face": octagon, "gyrate": "ortho"})
        gyro = augment(cupola, {"face": octagon, "gyrate": "gyro"})
        assert ortho.face_counts() == gyro.face_counts() == {3: 8, 4: 10}
        assert not ortho.is_same(gyro)

    def test_rotunda_block(self):
        cupola = get("pentagonal-cupola")
        decagon = cupola.faces_with_sides(10)[0].index
        result = augment(cupola, {"face": decagon, "block": "rotunda"})
        assert result.face_counts() == {3: 15, 4: 5, 5: 7}

    def test_invalid_face_returns_input(self):
        cube = get("cube")
        assert augment(cube, {"face": 0, "block": "cupola"}) is cube
        assert augment(cube, {}) is cube

    def test_face_out_of_range_returns_input(self):
        cube = get("cube")
        assert augment(cube, {"face": cube.num_faces}) is cube
        assert augment(cube, {"face": -1}) is cube

    def test_can_augment(self):
        cube = get("cube")
        assert can_augment(cube.face())
        assert can_augment(cube.face(), CapType.FASTIGIUM)
        assert not can_augment(cube.face(), CapType.ROTUNDA)
        assert can_augment(get("hexagonal-prism").faces_with_sides(6)[0])

    def test_irregular_face_cannot_augment(self, cube):
        box = cube.with_vertices(cube.vertices * [1, 1, 2])
        assert not can_augment(box.face(2))
        assert augment_apply_args(box, box.face(2).centroid) is None

    def test_apply_args(self):
        cube = get("cube")
        face = cube.face(3)
        assert augment_apply_args(cube, face.centroid) == {"face": 3}

    def test_search_options(self):
        options = augment_search_options(get("square-cupola"))
        assert {"block": "pyramid"} in options
        assert {"block": "cupola", "gyrate": "ortho"} in options
        assert {"block": "cupola", "gyrate": "gyro"} in options


class TestDiminish:
    def test_icosahedron(self):
        solid = get("icosahedron")
        cap = get_caps(solid)[0]
        result = diminish(solid, {"cap": cap})
        assert result.face_counts() == {3: 15, 5: 1}
        assert result.signature() == get("gyroelongated-pentagonal-pyramid").signature()

    def test_rhombicosidodecahedron(self):
        solid = get("rhombicosidodecahedron")
        point = solid.faces_with_sides(5)[0].centroid
        args = cap_apply_args(solid, point)
        result = diminish(solid, args)
        assert result.face_counts() == {3: 15, 4: 25, 5: 11, 10: 1}

    def test_by_point(self):
        solid = get("icosahedron")
        result = diminish(solid, {"point": solid.vertices[3] * 0.99})
        assert result.num_vertices == 11

    def test_cap_of_another_solid_ignored(self):
        solid = get("icosahedron")
        other = get("pentagonal-bipyramid")
        cap = get_caps(other)[0]
        assert diminish(solid, {"cap": cap}) is solid

    def test_no_cap_returns_input(self):
        cube = get("cube")
        assert diminish(cube, {}) is cube
        assert cap_apply_args(cube, cube.face().centroid) is None


class TestGyrate:
    def test_gyrate_swaps_alignment(self):
        ortho = get("square-orthobicupola")
        cap = _caps_of_kind(ortho, CapType.CUPOLA)[0]
        result = gyrate(ortho, {"cap": cap})
        result.validate()
        assert all(f.is_valid for f in result.face_list)
        assert {c.alignment() for c in _caps_of_kind(result, CapType.CUPOLA)} == {
            Alignment.GYRO
        }

    def test_gyrate_rhombicosidodecahedron(self):
        solid = get("rhombicosidodecahedron")
        cap = get_caps(solid)[0]
        result = gyrate(solid, {"cap": cap})
        assert result.face_counts() == solid.face_counts()
        assert not result.is_same(solid)
        assert all(f.is_valid for f in result.face_list)

    def test_pyramid_cannot_gyrate(self):
        solid = get("icosahedron")
        assert gyrate(solid, {"cap": get_caps(solid)[0]}) is solid
        assert gyrate_apply_args(solid, solid.vertices[0] * 0.99) is None

    def test_apply_args(self):
        solid = get("rhombicosidodecahedron")
        args = gyrate_apply_args(solid, solid.faces_with_sides(5)[0].centroid)
        assert args["cap"].kind == CapType.CUPOLA
