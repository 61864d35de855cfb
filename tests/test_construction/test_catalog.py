"""Tests for polyviewer.construction.catalog — the canonical solids."""

import numpy as np
import pytest

from polyviewer import UnknownSolidError
from polyviewer.construction.catalog import available_solids, get, is_valid_solid

EXPECTED_FACES = {
    "T": {3: 4},
    "C": {4: 6},
    "O": {3: 8},
    "D": {5: 12},
    "I": {3: 20},
    "tT": {3: 4, 6: 4},
    "aC": {3: 8, 4: 6},
    "tC": {3: 8, 8: 6},
    "tO": {4: 6, 6: 8},
    "eC": {3: 8, 4: 18},
    "bC": {4: 12, 6: 8, 8: 6},
    "sC": {3: 32, 4: 6},
    "aD": {3: 20, 5: 12},
    "tD": {3: 20, 10: 12},
    "tI": {5: 12, 6: 20},
    "eD": {3: 20, 4: 30, 5: 12},
    "bD": {4: 30, 6: 20, 10: 12},
    "sD": {3: 80, 5: 12},
    "P3": {3: 2, 4: 3},
    "P10": {4: 10, 10: 2},
    "A4": {3: 8, 4: 2},
    "A10": {3: 20, 10: 2},
    "J1": {3: 4, 4: 1},
    "J2": {3: 5, 5: 1},
    "J3": {3: 4, 4: 3, 6: 1},
    "J4": {3: 4, 4: 5, 8: 1},
    "J5": {3: 5, 4: 5, 5: 1, 10: 1},
    "J6": {3: 10, 5: 6, 10: 1},
    "J7": {3: 4, 4: 3},
    "J8": {3: 4, 4: 5},
    "J9": {3: 5, 4: 5, 5: 1},
    "J10": {3: 12, 4: 1},
    "J11": {3: 15, 5: 1},
    "J12": {3: 6},
    "J13": {3: 10},
    "J14": {3: 6, 4: 3},
    "J15": {3: 8, 4: 4},
    "J16": {3: 10, 4: 5},
    "J17": {3: 16},
    "J18": {3: 4, 4: 9, 6: 1},
    "J19": {3: 4, 4: 13, 8: 1},
    "J20": {3: 5, 4: 15, 5: 1, 10: 1},
    "J21": {3: 10, 4: 10, 5: 6, 10: 1},
    "J22": {3: 16, 4: 3, 6: 1},
    "J23": {3: 20, 4: 5, 8: 1},
    "J24": {3: 25, 4: 5, 5: 1, 10: 1},
    "J25": {3: 30, 5: 6, 10: 1},
    "J26": {3: 4, 4: 4},
    "J27": {3: 8, 4: 6},
    "J28": {3: 8, 4: 10},
    "J29": {3: 8, 4: 10},
    "J30": {3: 10, 4: 10, 5: 2},
    "J31": {3: 10, 4: 10, 5: 2},
    "J32": {3: 15, 4: 5, 5: 7},
    "J33": {3: 15, 4: 5, 5: 7},
    "J34": {3: 20, 5: 12},
    "J35": {3: 8, 4: 12},
    "J36": {3: 8, 4: 12},
    "J37": {3: 8, 4: 18},
    "J38": {3: 10, 4: 20, 5: 2},
    "J39": {3: 10, 4: 20, 5: 2},
    "J40": {3: 15, 4: 15, 5: 7},
    "J41": {3: 15, 4: 15, 5: 7},
    "J42": {3: 20, 4: 10, 5: 12},
    "J43": {3: 20, 4: 10, 5: 12},
    "J44": {3: 20, 4: 6},
    "J45": {3: 24, 4: 10},
    "J46": {3: 30, 4: 10, 5: 2},
    "J47": {3: 35, 4: 5, 5: 7},
    "J48": {3: 40, 5: 12},
    "J49": {3: 6, 4: 2},
    "J50": {3: 10, 4: 1},
    "J51": {3: 14},
    "J52": {3: 4, 4: 4, 5: 2},
    "J53": {3: 8, 4: 3, 5: 2},
    "J54": {3: 4, 4: 5, 6: 2},
    "J55": {3: 8, 4: 4, 6: 2},
    "J56": {3: 8, 4: 4, 6: 2},
    "J57": {3: 12, 4: 3, 6: 2},
    "J58": {3: 5, 5: 11},
    "J59": {3: 10, 5: 10},
    "J60": {3: 10, 5: 10},
    "J61": {3: 15, 5: 9},
    "J62": {3: 10, 5: 2},
    "J63": {3: 5, 5: 3},
    "J64": {3: 7, 5: 3},
    "J65": {3: 8, 4: 3, 6: 3},
    "J66": {3: 12, 4: 5, 8: 5},
    "J67": {3: 16, 4: 10, 8: 4},
    "J68": {3: 25, 4: 5, 5: 1, 10: 11},
    "J69": {3: 30, 4: 10, 5: 2, 10: 10},
    "J70": {3: 30, 4: 10, 5: 2, 10: 10},
    "J71": {3: 35, 4: 15, 5: 3, 10: 9},
    "J72": {3: 20, 4: 30, 5: 12},
    "J73": {3: 20, 4: 30, 5: 12},
    "J74": {3: 20, 4: 30, 5: 12},
    "J75": {3: 20, 4: 30, 5: 12},
    "J76": {3: 15, 4: 25, 5: 11, 10: 1},
    "J77": {3: 15, 4: 25, 5: 11, 10: 1},
    "J78": {3: 15, 4: 25, 5: 11, 10: 1},
    "J79": {3: 15, 4: 25, 5: 11, 10: 1},
    "J80": {3: 10, 4: 20, 5: 10, 10: 2},
    "J81": {3: 10, 4: 20, 5: 10, 10: 2},
    "J82": {3: 10, 4: 20, 5: 10, 10: 2},
    "J83": {3: 5, 4: 15, 5: 9, 10: 3},
    "J84": {3: 12},
    "J85": {3: 24, 4: 2},
    "J86": {3: 12, 4: 2},
    "J87": {3: 16, 4: 1},
    "J88": {3: 16, 4: 2},
    "J89": {3: 18, 4: 3},
    "J90": {3: 20, 4: 4},
    "J91": {3: 8, 4: 2, 5: 4},
    "J92": {3: 13, 4: 3, 5: 3, 6: 1},
}


class TestCatalogSolids:
    @pytest.mark.parametrize("notation", sorted(EXPECTED_FACES))
    def test_face_counts(self, notation):
        assert get(notation).face_counts() == EXPECTED_FACES[notation]

    @pytest.mark.parametrize("notation", sorted(EXPECTED_FACES))
    def test_closed_regular_unit_edges(self, notation):
        solid = get(notation)
        solid.validate()
        assert all(f.is_valid for f in solid.face_list)
        lengths = [e.length for e in solid.edges]
        np.testing.assert_allclose(lengths, 1.0, atol=1e-3)
        np.testing.assert_allclose(solid.centroid, 0.0, atol=1e-9)

    @pytest.mark.parametrize(
        "notation",
        ["D", "tI", "J20", "J64", "J83", "J84", "J85", "J88", "J89", "J90", "J92"],
    )
    def test_convex(self, notation):
        solid = get(notation)
        for face in solid.face_list:
            distances = solid.vertices @ face.normal - face.plane.offset
            assert np.all(distances <= 1e-6)

    def test_euler_characteristic(self):
        for notation in EXPECTED_FACES:
            solid = get(notation)
            assert solid.num_vertices - len(solid.edges) + solid.num_faces == 2


class TestCatalogLookup:
    def test_cached(self):
        assert get("cube") is get("C")

    def test_alias(self):
        assert get("P4") is get("cube")

    def test_gyro_and_ortho_forms_differ(self):
        ortho, gyro = get("J28"), get("J29")
        assert ortho.face_counts() == gyro.face_counts()
        assert not ortho.is_same(gyro)

    def test_unknown(self):
        with pytest.raises(UnknownSolidError, match="not-a-solid"):
            get("not-a-solid")

    def test_last_johnson_solids_available(self):
        assert is_valid_solid("snub-disphenoid")
        assert get("J84") is get("snub-disphenoid")
        assert get("J87").num_vertices == get("J86").num_vertices + 1

    def test_available_solids(self):
        names = available_solids()
        assert "tetrahedron" in names
        assert "triangular-bipyramid" in names
        assert "triangular-hebesphenorotunda" in names
        assert len(names) == len(EXPECTED_FACES) + 6
