"""Tests for polyviewer.construction.hull and construction.solids."""

import math

import numpy as np
import pytest

from polyviewer.construction import (
    antiprism,
    apothem,
    circumradius,
    cupola,
    faces_from_points,
    prism,
    pyramid,
)
from polyviewer.construction.solids import pentagonal_rotunda
from polyviewer.model import Polyhedron


def _solid(coords) -> Polyhedron:
    return Polyhedron(coords, faces_from_points(coords))


class TestFacesFromPoints:
    def test_cube_faces_merged(self):
        coords = np.array(
            [[x, y, z] for x in (0, 1) for y in (0, 1) for z in (0, 1)],
            dtype=float,
        )
        solid = _solid(coords)
        assert solid.face_counts() == {4: 6}
        solid.validate()

    def test_faces_oriented_outward(self):
        solid = _solid(prism(6))
        centre = solid.centroid
        for face in solid.face_list:
            assert np.dot(face.normal, face.centroid - centre) > 0

    def test_flat_points_rejected(self):
        flat = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]], dtype=float)
        with pytest.raises(ValueError, match="span a solid"):
            faces_from_points(flat)


class TestSeedCoordinates:
    def test_polygon_radii(self):
        assert circumradius(6) == pytest.approx(1.0)
        assert apothem(4) == pytest.approx(0.5)

    @pytest.mark.parametrize("n", [3, 5, 6, 8, 10])
    def test_prism(self, n):
        solid = _solid(prism(n))
        assert solid.face_counts() == {4: n, n: 2}
        assert all(f.is_valid for f in solid.face_list)

    @pytest.mark.parametrize("n", [4, 5, 6, 8, 10])
    def test_antiprism(self, n):
        solid = _solid(antiprism(n))
        assert solid.face_counts() == {3: 2 * n, n: 2}
        assert all(f.is_valid for f in solid.face_list)

    @pytest.mark.parametrize("n", [3, 4, 5])
    def test_pyramid(self, n):
        solid = _solid(pyramid(n))
        assert solid.num_vertices == n + 1
        assert all(e.length == pytest.approx(1.0) for e in solid.edges)

    def test_pyramid_needs_small_base(self):
        with pytest.raises(ValueError, match="6-gon"):
            pyramid(6)

    @pytest.mark.parametrize("n", [3, 4, 5])
    def test_cupola(self, n):
        solid = _solid(cupola(n))
        assert solid.face_counts()[2 * n] == 1
        assert all(e.length == pytest.approx(1.0) for e in solid.edges)

    def test_cupola_height(self):
        coords = cupola(4)
        height = coords[:, 2].max() - coords[:, 2].min()
        assert height == pytest.approx(1 / math.sqrt(2))

    def test_pentagonal_rotunda(self):
        solid = _solid(pentagonal_rotunda())
        assert solid.num_vertices == 20
        assert solid.face_counts() == {3: 10, 5: 6, 10: 1}
        assert all(f.is_valid for f in solid.face_list)
