"""Tests for polyviewer.state — applying operations to the viewer state."""

import logging

import numpy as np
import pytest

from polyviewer import AmbiguousTransitionError, ViewerConfig, get
from polyviewer.names import from_notation
from polyviewer.operations.registry import get_operation
from polyviewer.state import (
    ViewerState,
    apply_operation,
    initial_state,
    set_polyhedron,
)


def _pick(state, operation, point):
    return get_operation(operation).get_apply_args(state.data, point)


class TestInitialState:
    def test_default(self):
        state = initial_state()
        assert state.name == "tetrahedron"
        assert state.notation == "T"
        assert state.data is get("tetrahedron")

    def test_configured_by_notation(self):
        state = initial_state(ViewerConfig(initial_solid="C"))
        assert state.name == "cube"

    def test_frozen(self):
        state = initial_state()
        with pytest.raises(AttributeError):
            state.name = "cube"


class TestSetPolyhedron:
    def test_known_solid(self):
        state = set_polyhedron(initial_state(), "J12")
        assert state.name == "triangular-bipyramid"
        assert state.data is get("J12")

    def test_unknown_solid_leaves_state(self, caplog):
        state = initial_state()
        with caplog.at_level(logging.WARNING, logger="polyviewer.state"):
            assert set_polyhedron(state, "hypercube") is state
        assert "hypercube" in caplog.text

    def test_snub_disphenoid(self):
        state = set_polyhedron(initial_state(), "snub-disphenoid")
        assert state.name == "snub-disphenoid"
        assert state.data.face_counts() == {3: 12}


class TestApplyOperation:
    def test_augment_then_diminish(self):
        state = initial_state()
        face = state.data.face(0)
        augmented = apply_operation(
            state, "augment", _pick(state, "augment", face.centroid),
        )
        assert augmented.name == "triangular-bipyramid"
        assert augmented.data.num_vertices == 5

        apex = augmented.data.vertices[-1]
        point = apex + 0.01 * (augmented.data.centroid - apex)
        restored = apply_operation(
            augmented, "diminish", _pick(augmented, "diminish", point),
        )
        assert restored.name == "tetrahedron"
        assert restored.data.signature() == state.data.signature()

    def test_rectify_twice(self):
        state = apply_operation(initial_state(), "rectify")
        assert state.name == "octahedron"
        state = apply_operation(state, "r")
        assert state.name == "cuboctahedron"
        np.testing.assert_allclose(
            [e.length for e in state.data.edges], 1.0, atol=1e-3,
        )

    def test_expand_then_diminish(self):
        state = set_polyhedron(initial_state(), "dodecahedron")
        state = apply_operation(state, "expand")
        assert state.name == "rhombicosidodecahedron"
        point = state.data.faces_with_sides(5)[0].centroid
        state = apply_operation(state, "diminish", _pick(state, "-", point))
        assert state.name == "diminished-rhombicosidodecahedron"
        assert state.data.face_counts() == {3: 15, 4: 25, 5: 11, 10: 1}

    def test_settings_choose_square_block(self):
        prism = set_polyhedron(initial_state(), "triangular-prism")
        square = prism.data.faces_with_sides(4)[0].index
        triangle = prism.data.faces_with_sides(3)[0].index

        assert apply_operation(prism, "+", {"face": square}).name == from_notation("J49")
        assert apply_operation(prism, "+", {"face": triangle}).name == from_notation("J7")

        fastigium = ViewerState(
            prism.name, prism.data, ViewerConfig(square_block="fastigium"),
        )
        result = apply_operation(fastigium, "+", {"face": square})
        assert result.name == "gyrobifastigium"
        assert result.settings is fastigium.settings

    def test_explicit_block_beats_settings(self):
        prism = set_polyhedron(initial_state(), "triangular-prism")
        square = prism.data.faces_with_sides(4)[0].index
        result = apply_operation(prism, "+", {"face": square, "block": "fastigium"})
        assert result.name == "gyrobifastigium"

    @staticmethod
    def _squares_by_distance_from_apex(state):
        apex = next(
            v for v in state.data.vertex_list
            if all(f.num_sides == 3 for f in v.adjacent_faces)
        )
        return sorted(
            state.data.faces_with_sides(4),
            key=lambda f: float(np.linalg.norm(f.centroid - apex.position)),
        )

    def test_same_signature_resolved_by_shape(self):
        state = set_polyhedron(initial_state(), "augmented-hexagonal-prism")
        squares = self._squares_by_distance_from_apex(state)
        opposite = apply_operation(state, "augment", {"face": squares[-1].index})
        assert opposite.name == "parabiaugmented-hexagonal-prism"
        meta = apply_operation(state, "augment", {"face": squares[2].index})
        assert meta.name == "metabiaugmented-hexagonal-prism"

    @pytest.mark.parametrize(
        "gyrate, expected",
        [("ortho", "triangular-orthobicupola"), ("gyro", "cuboctahedron")],
    )
    def test_cupola_alignment_picks_result(self, gyrate, expected):
        state = set_polyhedron(initial_state(), "triangular-cupola")
        hexagon = state.data.faces_with_sides(6)[0].index
        result = apply_operation(
            state, "augment",
            {"face": hexagon, "block": "cupola", "gyrate": gyrate},
        )
        assert result.name == expected

    def test_ambiguous_result(self, monkeypatch):
        state = set_polyhedron(initial_state(), "augmented-hexagonal-prism")
        square = state.data.faces_with_sides(4)[0].index
        monkeypatch.setattr(
            "polyviewer.model.Polyhedron.is_congruent", lambda self, other: True,
        )
        with pytest.raises(AmbiguousTransitionError):
            apply_operation(state, "augment", {"face": square})

    def test_face_out_of_range(self):
        state = set_polyhedron(initial_state(), "triangular-prism")
        assert apply_operation(state, "augment", {"face": 99}) is state
        assert apply_operation(state, "elongate", {"face": 99}) is state

    def test_unknown_result_name(self, caplog):
        state = set_polyhedron(initial_state(), "triangular-prism")
        square = state.data.faces_with_sides(4)[0].index
        with caplog.at_level(logging.WARNING, logger="polyviewer.state"):
            result = apply_operation(
                state, "augment", {"face": square, "result": "hypercube"},
            )
        assert result is state
        assert "hypercube" in caplog.text

    def test_result_resolves_ambiguity(self):
        state = set_polyhedron(initial_state(), "augmented-hexagonal-prism")
        square = state.data.faces_with_sides(4)[0].index
        result = apply_operation(
            state, "augment", {"face": square, "result": "J55"},
        )
        assert result.name == from_notation("J55")

    def test_unknown_operation(self, caplog):
        state = initial_state()
        with caplog.at_level(logging.WARNING, logger="polyviewer.state"):
            assert apply_operation(state, "frobnicate") is state
        assert "frobnicate" in caplog.text

    def test_operation_not_applicable(self, caplog):
        state = set_polyhedron(initial_state(), "cube")
        with caplog.at_level(logging.WARNING, logger="polyviewer.state"):
            assert apply_operation(state, "gyrate") is state
        assert "does not apply" in caplog.text

    def test_operation_without_effect(self, caplog):
        state = set_polyhedron(initial_state(), "triangular-bipyramid")
        with caplog.at_level(logging.WARNING, logger="polyviewer.state"):
            assert apply_operation(state, "diminish", {}) is state
        assert "unchanged" in caplog.text

    def test_validation_enabled(self):
        state = initial_state(ViewerConfig(validate=True))
        state = apply_operation(state, "truncate")
        assert state.name == "truncated-tetrahedron"

    def test_input_state_untouched(self):
        state = initial_state()
        apply_operation(state, "truncate")
        assert state.name == "tetrahedron"
        assert state.data is get("tetrahedron")
