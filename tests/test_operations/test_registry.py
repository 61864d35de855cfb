"""Tests for polyviewer.operations.registry."""

import pytest

from polyviewer import UnknownOperationError, get
from polyviewer.operations.registry import (
    INVALID,
    OPERATIONS,
    Operation,
    OperationKind,
    get_operation,
)


class TestLookup:
    def test_every_kind_registered(self):
        assert set(OPERATIONS) == set(OperationKind)
        assert all(isinstance(op, Operation) for op in OPERATIONS.values())

    @pytest.mark.parametrize(
        "name, kind",
        [
            ("t", OperationKind.TRUNCATE),
            ("truncate", OperationKind.TRUNCATE),
            (" Rectify ", OperationKind.RECTIFY),
            ("~P", OperationKind.SHORTEN),
            ("~A", OperationKind.SHORTEN),
            ("-", OperationKind.DIMINISH),
            ("~s", OperationKind.CONTRACT),
            ("x", OperationKind.TWIST),
            (OperationKind.DUAL, OperationKind.DUAL),
        ],
    )
    def test_by_name_or_symbol(self, name, kind):
        assert get_operation(name).kind == kind

    def test_unknown(self):
        with pytest.raises(UnknownOperationError, match="frobnicate"):
            get_operation("frobnicate")

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            OPERATIONS[OperationKind.DUAL] = None


class TestSelection:
    def test_selection_operations(self):
        selecting = {op.kind for op in OPERATIONS.values() if op.needs_selection}
        assert selecting == {
            OperationKind.AUGMENT,
            OperationKind.DIMINISH,
            OperationKind.GYRATE,
            OperationKind.SHORTEN,
        }

    def test_no_selection_gives_empty_config(self, cube):
        assert get_operation("truncate").get_apply_args(cube, [0, 0, 0]) == {}

    def test_diminish_pick_on_cube_is_invalid(self, cube):
        args = get_operation("diminish").get_apply_args(cube, cube.face().centroid)
        assert args is INVALID
        assert not args
        assert repr(args) == "INVALID"

    def test_augment_pick(self):
        solid = get("tetrahedron")
        args = get_operation("+").get_apply_args(solid, solid.face(1).centroid)
        assert args == {"face": 1}

    def test_search_options_fall_back_to_empty_config(self, cube):
        assert get_operation("dual").get_search_options(cube) == [{}]
        assert get_operation("contract").get_search_options(cube) == [
            {"face_sides": 4}
        ]
        assert get_operation("cumulate").get_search_options(cube) == [{}]
