"""Tests for polyviewer.operations.expand."""

import math

import numpy as np
import pytest

from polyviewer import get
from polyviewer.operations.expand import (
    contract,
    contract_search_options,
    expand,
    snub,
    snub_search_options,
    twist,
    twist_search_options,
)


def _assert_regular(solid):
    solid.validate()
    assert all(f.is_valid for f in solid.face_list)
    np.testing.assert_allclose([e.length for e in solid.edges], 1.0, atol=1e-3)


class TestExpand:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("tetrahedron", "cuboctahedron"),
            ("cube", "rhombicuboctahedron"),
            ("dodecahedron", "rhombicosidodecahedron"),
        ],
    )
    def test_platonic(self, source, expected):
        result = expand(get(source))
        _assert_regular(result)
        assert result.signature() == get(expected).signature()

    def test_source_faces_keep_direction(self, cube):
        result = expand(cube)
        for before, after in zip(cube.face_list, result.face_list):
            np.testing.assert_allclose(after.normal, before.normal, atol=1e-9)

    def test_faces_pushed_to_cantellated_distance(self):
        result = expand(get("cube"))
        distances = [f.distance_to_center for f in result.face_list[:6]]
        np.testing.assert_allclose(distances, (1 + math.sqrt(2)) / 2, atol=1e-9)

    def test_keeps_edge_length(self, cube):
        big = cube.with_vertices(cube.vertices * 2.0)
        result = expand(big)
        np.testing.assert_allclose([e.length for e in result.edges], 2.0, atol=1e-9)
        np.testing.assert_allclose(result.centroid, big.centroid, atol=1e-9)


class TestSnub:
    @pytest.mark.parametrize(
        "source, counts",
        [
            ("tetrahedron", {3: 20}),
            ("cube", {3: 32, 4: 6}),
            ("dodecahedron", {3: 80, 5: 12}),
        ],
    )
    def test_platonic(self, source, counts):
        result = snub(get(source))
        _assert_regular(result)
        assert result.face_counts() == counts

    def test_chiral_pair(self):
        left = snub(get("cube"), {"twist": "left"})
        right = snub(get("cube"), {"twist": "right"})
        assert left.signature() == right.signature()
        assert not left.is_same(right)

    def test_faces_only_turn(self):
        cube = get("cube")
        result = snub(cube)
        for before, after in zip(cube.face_list, result.face_list):
            np.testing.assert_allclose(after.normal, before.normal, atol=1e-6)
            assert after.side_length == pytest.approx(before.side_length)

    def test_keeps_centre(self):
        solid = get("dodecahedron")
        moved = solid.with_vertices(solid.vertices + [1.0, -2.0, 0.5])
        result = snub(moved)
        np.testing.assert_allclose(result.centroid, [1.0, -2.0, 0.5], atol=1e-6)

    def test_mixed_faces_unchanged(self):
        solid = get("A4")
        assert snub(solid) is solid
        assert expand(solid) is solid

    def test_search_options(self):
        assert snub_search_options(get("cube")) == [
            {"twist": "left"},
            {"twist": "right"},
        ]


class TestContract:
    @pytest.mark.parametrize(
        "sides, counts", [(None, {5: 12}), (5, {5: 12}), (3, {3: 20})],
    )
    def test_rhombicosidodecahedron(self, sides, counts):
        result = contract(get("rhombicosidodecahedron"), {"face_sides": sides})
        _assert_regular(result)
        assert result.face_counts() == counts

    def test_snub_cube(self):
        result = contract(get("snub-cube"))
        _assert_regular(result)
        assert result.face_counts() == {4: 6}

    def test_cube_cannot_contract(self, cube):
        assert contract(cube) is cube

    def test_no_expanded_faces(self):
        solid = get("truncated-octahedron")
        assert contract(solid) is solid

    def test_search_options(self):
        assert contract_search_options(get("rhombicuboctahedron")) == [
            {"face_sides": 3},
            {"face_sides": 4},
        ]


class TestTwist:
    def test_cantellated_to_snub(self):
        result = twist(get("rhombicuboctahedron"))
        _assert_regular(result)
        assert result.face_counts() == {3: 32, 4: 6}

    def test_snub_to_cantellated(self):
        result = twist(get("snub-cube"))
        _assert_regular(result)
        assert result.face_counts() == {3: 8, 4: 18}

    def test_round_trip(self):
        solid = get("rhombicuboctahedron")
        snubbed = twist(solid)
        assert snubbed.is_congruent(get("snub-cube"))
        restored = twist(snubbed)
        _assert_regular(restored)
        assert restored.is_congruent(solid)

    def test_snub_dodecahedron_back(self):
        result = twist(get("snub-dodecahedron"))
        _assert_regular(result)
        assert result.is_congruent(get("rhombicosidodecahedron"))

    def test_chirality(self):
        solid = get("rhombicosidodecahedron")
        left = twist(solid, {"twist": "left"})
        right = twist(solid, {"twist": "right"})
        assert left.face_counts() == right.face_counts() == {3: 80, 5: 12}
        assert left.faces != right.faces

    def test_search_options(self):
        assert twist_search_options(get("rhombicuboctahedron")) == [
            {"twist": "left"},
            {"twist": "right"},
        ]
        assert twist_search_options(get("snub-cube")) == []
