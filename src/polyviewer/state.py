"""Viewer state and the two requests that change it.

A :class:`ViewerState` pairs the name of the solid on display with its
polyhedron.  :func:`apply_operation` and :func:`set_polyhedron` return a
new state, or the same state when the request is ignored; neither ever
mutates a state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from polyviewer.config import ViewerConfig
from polyviewer.construction.catalog import get, is_valid_solid
from polyviewer.errors import (
    AmbiguousTransitionError,
    UnknownOperationError,
    UnknownSolidError,
)
from polyviewer.model import Polyhedron
from polyviewer.names import from_notation, to_notation
from polyviewer.operations.registry import Operation, OperationKind, get_operation
from polyviewer.relations import get_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewerState:
    """The solid on display.

    Attributes:
        name: Hyphenated name of the solid.
        data: Its polyhedron.
        settings: Session configuration.
    """

    name: str
    data: Polyhedron
    settings: ViewerConfig = field(default_factory=ViewerConfig)

    @property
    def notation(self) -> str:
        return to_notation(self.name)


def initial_state(settings: ViewerConfig | None = None) -> ViewerState:
    """State showing the configured initial solid."""
    settings = settings or ViewerConfig()
    name = from_notation(to_notation(settings.initial_solid))
    return ViewerState(name, get(name), settings)


def set_polyhedron(state: ViewerState, name: str) -> ViewerState:
    """Show the catalog solid *name*.

    Unknown names leave *state* unchanged.
    """
    if not is_valid_solid(name):
        logger.warning("ignoring unknown solid %r", name)
        return state
    name = from_notation(to_notation(name))
    logger.info("showing %s", name)
    return ViewerState(name, get(name), state.settings)


def _with_preferences(
    operation: Operation, state: ViewerState, config: dict,
) -> dict:
    """Fill augment defaults from the session settings."""
    if operation.kind != OperationKind.AUGMENT or "face" not in config:
        return config
    if not 0 <= config["face"] < state.data.num_faces:
        return config
    n_sides = state.data.face(config["face"]).num_sides
    block = state.settings.block_for(n_sides)
    if block is not None:
        config.setdefault("block", str(block))
    config.setdefault("gyrate", str(state.settings.alignment))
    return config


def _candidates(state: ViewerState, operation: Operation) -> list[str]:
    result: list[str] = []
    for symbol in operation.symbols:
        for notation in get_candidates(state.notation, symbol):
            if notation not in result:
                result.append(notation)
    return result


def apply_operation(
    state: ViewerState, operation: str, config: dict | None = None,
) -> ViewerState:
    """Apply *operation* to the solid on display.

    Args:
        state: Current state.
        operation: Operation name (``"augment"``) or symbol (``"+"``).
        config: Operation config, e.g. the output of
            :meth:`~polyviewer.operations.registry.Operation.get_apply_args`.
            An optional ``"result"`` entry names the intended solid when
            the operation could lead to several.

    Returns:
        The new state, or *state* itself when the operation is unknown,
        does not apply to this solid, or leaves the polyhedron unchanged.

    Raises:
        AmbiguousTransitionError: If several solids match the result and
            ``"result"`` does not pick one.
        MalformedPolyhedronError: If validation is enabled and the result
            is not a closed solid.
    """
    try:
        op = get_operation(operation)
    except UnknownOperationError:
        logger.warning("ignoring unknown operation %r", operation)
        return state

    config = dict(config or {})
    wanted = config.pop("result", None)
    config = _with_preferences(op, state, config)

    candidates = _candidates(state, op)
    if wanted is not None:
        try:
            wanted = to_notation(wanted)
        except UnknownSolidError:
            logger.warning("ignoring unknown result %r", wanted)
            return state
        candidates = [c for c in candidates if c == wanted]
    if not candidates:
        logger.warning("%s does not apply to %s", op.name, state.name)
        return state

    data = op.apply(state.data, config)
    if data is state.data:
        logger.warning("%s left %s unchanged", op.name, state.name)
        return state

    signature = data.signature()
    matches = [
        c for c in candidates
        if is_valid_solid(c) and get(c).signature() == signature
    ]
    if not matches:
        logger.warning(
            "%s of %s gave no known solid (candidates %s)",
            op.name, state.name, candidates,
        )
        return state
    if len(matches) > 1:
        congruent = [c for c in matches if data.is_congruent(get(c))]
        if len(congruent) == 1:
            matches = congruent
    if len(matches) > 1:
        raise AmbiguousTransitionError(
            state.name, op.name, [from_notation(c) for c in matches],
        )

    if state.settings.validate:
        data.validate()
    name = from_notation(matches[0])
    logger.info("%s: %s -> %s", op.name, state.name, name)
    return ViewerState(name, data, state.settings)
