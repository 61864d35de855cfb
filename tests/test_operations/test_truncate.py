"""Tests for polyviewer.operations.truncate."""

import numpy as np
import pytest

from polyviewer import get
from polyviewer.operations.truncate import (
    cumulate,
    cumulate_search_options,
    dual,
    is_quasi_regular,
    rectify,
    truncate,
)


def _assert_regular(solid, edge=1.0):
    solid.validate()
    assert all(f.is_valid for f in solid.face_list)
    np.testing.assert_allclose([e.length for e in solid.edges], edge, atol=1e-3)


class TestTruncate:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("tetrahedron", "truncated-tetrahedron"),
            ("cube", "truncated-cube"),
            ("octahedron", "truncated-octahedron"),
            ("dodecahedron", "truncated-dodecahedron"),
            ("icosahedron", "truncated-icosahedron"),
        ],
    )
    def test_platonic(self, source, expected):
        result = truncate(get(source))
        _assert_regular(result)
        assert result.signature() == get(expected).signature()

    def test_keeps_edge_length_and_centre(self, cube):
        result = truncate(cube)
        _assert_regular(result)
        np.testing.assert_allclose(result.centroid, cube.centroid, atol=1e-9)

    def test_source_faces_come_first(self, cube):
        result = truncate(cube)
        assert [len(f) for f in result.faces[:6]] == [8] * 6
        assert [len(f) for f in result.faces[6:]] == [3] * 8


class TestRectify:
    def test_tetrahedron_gives_octahedron(self, tetrahedron):
        result = rectify(tetrahedron)
        _assert_regular(result)
        assert result.face_counts() == {3: 8}

    @pytest.mark.parametrize("source", ["cube", "octahedron"])
    def test_cuboctahedron(self, source):
        result = rectify(get(source))
        _assert_regular(result)
        assert result.face_counts() == {3: 8, 4: 6}

    def test_icosidodecahedron(self, dodecahedron):
        result = rectify(dodecahedron)
        assert result.face_counts() == {3: 20, 5: 12}

    def test_keeps_source_edge_length(self, tetrahedron):
        source = tetrahedron.with_vertices(tetrahedron.vertices * 2.0)
        result = rectify(source)
        np.testing.assert_allclose([e.length for e in result.edges], 2.0, atol=1e-3)

    def test_one_vertex_per_edge(self, cube):
        assert rectify(cube).num_vertices == len(cube.edges)


class TestDual:
    @pytest.mark.parametrize(
        "source, counts",
        [
            ("tetrahedron", {3: 4}),
            ("cube", {3: 8}),
            ("octahedron", {4: 6}),
            ("dodecahedron", {3: 20}),
            ("icosahedron", {5: 12}),
        ],
    )
    def test_platonic(self, source, counts):
        result = dual(get(source))
        _assert_regular(result)
        assert result.face_counts() == counts


class TestCumulate:
    def test_truncated_cube(self):
        result = cumulate(get("truncated-cube"))
        _assert_regular(result)
        assert result.face_counts() == {4: 6}

    @pytest.mark.parametrize("sides, counts", [(3, {3: 8}), (4, {4: 6})])
    def test_cuboctahedron(self, sides, counts):
        result = cumulate(get("cuboctahedron"), {"face_sides": sides})
        _assert_regular(result)
        assert result.face_counts() == counts

    def test_single_face_kind_returns_input(self, cube):
        assert cumulate(cube) is cube

    def test_too_few_faces_returns_input(self):
        solid = get("truncated-tetrahedron")
        assert cumulate(solid, {"face_sides": 5}) is solid

    def test_quasi_regular(self):
        assert is_quasi_regular(get("cuboctahedron"))
        assert is_quasi_regular(get("icosidodecahedron"))
        assert not is_quasi_regular(get("truncated-cube"))

    def test_search_options(self):
        assert cumulate_search_options(get("cuboctahedron")) == [
            {"face_sides": 3},
            {"face_sides": 4},
        ]
        assert cumulate_search_options(get("truncated-cube")) == []
