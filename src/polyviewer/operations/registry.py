"""The closed set of operations and how each is applied and selected."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from polyviewer.errors import UnknownOperationError
from polyviewer.model import Polyhedron
from polyviewer.operations.augment import (
    augment,
    augment_apply_args,
    augment_search_options,
    cap_apply_args,
    diminish,
    gyrate,
    gyrate_apply_args,
)
from polyviewer.operations.elongate import (
    elongate,
    gyroelongate,
    shorten,
    shorten_apply_args,
)
from polyviewer.operations.expand import (
    contract,
    contract_search_options,
    expand,
    snub,
    snub_search_options,
    twist,
    twist_search_options,
)
from polyviewer.operations.truncate import (
    cumulate,
    cumulate_search_options,
    dual,
    rectify,
    truncate,
)


class OperationKind(StrEnum):
    AUGMENT = "augment"
    DIMINISH = "diminish"
    GYRATE = "gyrate"
    ELONGATE = "elongate"
    GYROELONGATE = "gyroelongate"
    SHORTEN = "shorten"
    TRUNCATE = "truncate"
    CUMULATE = "cumulate"
    RECTIFY = "rectify"
    EXPAND = "expand"
    CONTRACT = "contract"
    SNUB = "snub"
    TWIST = "twist"
    DUAL = "dual"


class _Invalid:
    """Marker returned when a pick does not select anything usable."""

    _instance: _Invalid | None = None

    def __new__(cls) -> _Invalid:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INVALID"

    def __bool__(self) -> bool:
        return False


INVALID = _Invalid()

ApplyFn = Callable[[Polyhedron, "dict | None"], Polyhedron]
ApplyArgsFn = Callable[[Polyhedron, object], "dict | None"]
SearchOptionsFn = Callable[[Polyhedron], "list[dict]"]


@dataclass(frozen=True)
class Operation:
    """One operation of the catalog.

    Attributes:
        kind: Which operation this is.
        symbols: Graph symbols the operation resolves through.
        apply: Applies the operation to a polyhedron with a config.
        apply_args: Turns a picked point into a config, or ``None`` when
            the pick selects nothing.  ``None`` for operations that take
            no selection.
        search_options: Lists the configs worth trying when looking for
            a particular result.
    """

    kind: OperationKind
    symbols: tuple[str, ...]
    apply: ApplyFn
    apply_args: ApplyArgsFn | None = None
    search_options: SearchOptionsFn | None = None

    @property
    def name(self) -> str:
        return str(self.kind)

    @property
    def needs_selection(self) -> bool:
        return self.apply_args is not None

    def get_apply_args(self, polyhedron: Polyhedron, point) -> dict | _Invalid:
        """Config for a pick at *point*, or :data:`INVALID`."""
        if self.apply_args is None:
            return {}
        args = self.apply_args(polyhedron, point)
        return INVALID if args is None else args

    def get_search_options(self, polyhedron: Polyhedron) -> list[dict]:
        if self.search_options is None:
            return [{}]
        return self.search_options(polyhedron) or [{}]


def _operations() -> dict[OperationKind, Operation]:
    K = OperationKind
    return {
        op.kind: op for op in (
            Operation(K.AUGMENT, ("+",), augment, augment_apply_args,
                      augment_search_options),
            Operation(K.DIMINISH, ("-",), diminish, cap_apply_args),
            Operation(K.GYRATE, ("g",), gyrate, gyrate_apply_args),
            Operation(K.ELONGATE, ("P",), elongate),
            Operation(K.GYROELONGATE, ("A",), gyroelongate),
            Operation(K.SHORTEN, ("~P", "~A"), shorten, shorten_apply_args),
            Operation(K.TRUNCATE, ("t",), truncate),
            Operation(K.CUMULATE, ("~t", "~r"), cumulate,
                      search_options=cumulate_search_options),
            Operation(K.RECTIFY, ("r",), rectify),
            Operation(K.EXPAND, ("e",), expand),
            Operation(K.CONTRACT, ("~e", "~s"), contract,
                      search_options=contract_search_options),
            Operation(K.SNUB, ("s",), snub, search_options=snub_search_options),
            Operation(K.TWIST, ("x", "~x"), twist,
                      search_options=twist_search_options),
            Operation(K.DUAL, ("d",), dual),
        )
    }


OPERATIONS: MappingProxyType[OperationKind, Operation] = MappingProxyType(_operations())

_BY_SYMBOL: dict[str, Operation] = {
    symbol: op for op in OPERATIONS.values() for symbol in op.symbols
}


def get_operation(name: str | OperationKind) -> Operation:
    """Look up an operation by name (``"truncate"``) or symbol (``"t"``).

    Raises:
        UnknownOperationError: If *name* is neither.
    """
    if name in _BY_SYMBOL:
        return _BY_SYMBOL[name]
    try:
        return OPERATIONS[OperationKind(str(name).strip().lower())]
    except ValueError:
        raise UnknownOperationError(str(name)) from None
