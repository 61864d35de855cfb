"""The transformation graph between solids.

Solids are nodes, addressed by notation (see :mod:`polyviewer.names`),
and each edge is labelled with an operation symbol:

=====  =============================  =====  ==========================
``t``  truncate                       ``+``  augment
``r``  rectify                        ``-``  diminish
``e``  expand                         ``g``  gyrate
``s``  snub                           ``P``  elongate
``x``  twist                          ``A``  gyroelongate
``d``  dual
=====  =============================  =====  ==========================

The reverse of an operation is written with a leading ``~`` (``~t`` is
cumulate, ``~e`` contract, ``~P`` shorten), except that dual and gyrate
are their own reverse and augment and diminish reverse each other.

The graph is declared as six tables, merged by concatenating the result
lists of repeated entries, and closed so every edge has its reverse.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from polyviewer.errors import AmbiguousTransitionError
from polyviewer.names import from_notation, to_notation

logger = logging.getLogger(__name__)

Graph = dict[str, dict[str, list[str]]]

# Snub separates and twists the faces of a regular solid, so every snub
# edge in this table starts from one: T gives I and O gives sC.
# ``x`` (twist) links each cantellated solid to its snub form, and aC and
# aD have no snub edge.
ARCHIMEDEAN: dict = {
    "T": {"d": "T", "t": "tT", "r": "O", "s": "I"},
    "C": {"d": "O", "t": "tC", "r": "aC", "e": "eC", "s": "sC"},
    "O": {"t": "tO", "r": "aC", "e": "eC", "s": "sC"},
    "aC": {"t": "bC", "r": "eC"},
    "D": {"d": "I", "t": "tD", "r": "aD", "e": "eD", "s": "sD"},
    "I": {"t": "tI", "r": "aD", "e": "eD", "s": "sD"},
    "aD": {"t": "bD", "r": "eD"},
    "eC": {"x": "sC"},
    "eD": {"x": "sD"},
}

# Columns: base, elongated, gyroelongated, bi-, elongated bi-,
# gyroelongated bi-.  Paired entries are ortho and gyro forms.
PYRAMIDS_CUPOLAE: tuple[tuple, ...] = (
    ("T", "J7", None, "J12", "J14", None),
    ("J1", "J8", "J10", "O", "J15", "J17"),
    ("J2", "J9", "J11", "J13", "J16", "I"),
    ("P3", None, None, "J26", None, None),
    ("J3", "J18", "J22", ("J27", "aC"), ("J35", "J36"), "J44"),
    ("J4", "J19", "J23", ("J28", "J29"), ("eC", "J37"), "J45"),
    ("J5", "J20", "J24", ("J30", "J31"), ("J38", "J39"), "J46"),
    (None, None, None, ("J32", "J33"), ("J40", "J41"), "J47"),
    ("J6", "J21", "J25", ("J34", "aD"), ("J42", "J43"), "J48"),
)

# Prism and antiprism of each base polygon.
PRISMS: tuple[tuple[str, str], ...] = (
    ("P3", "O"),
    ("C", "A4"),
    ("P5", "A5"),
    ("P6", "A6"),
    ("P8", "A8"),
    ("P10", "A10"),
)

# Solid, then its singly, doubly and triply augmented forms.
AUGMENTATIONS: tuple[tuple, ...] = (
    ("P3", "J49", "J50", "J51"),
    ("P5", "J52", "J53", None),
    ("P6", "J54", ("J55", "J56"), "J57"),
    ("D", "J58", ("J59", "J60"), "J61"),
    ("tT", "J65", None, None),
    ("tC", "J66", "J67", None),
    ("tD", "J68", ("J69", "J70"), "J71"),
)

DIMINISHED_ICOSAHEDRA: dict = {
    "J63": {"+": ["J62", "J64"]},
    "J62": {"+": "J11"},
}

RHOMBICOSIDODECAHEDRA: dict = {
    "eD": {"g": "J72", "-": "J76"},
    "J72": {"g": ["J73", "J74"], "-": ["J76", "J77", "J78"]},
    "J73": {"-": "J77"},
    "J74": {"g": "J75", "-": ["J78", "J79"]},
    "J75": {"-": ["J79"]},
    "J76": {"g": ["J77", "J78"], "-": ["J80", "J81"]},
    "J77": {"-": "J80"},
    "J78": {"-": ["J81", "J82"]},
    "J79": {"-": ["J82"]},
    "J81": {"g": "J82", "-": "J83"},
    "J82": {"-": "J83"},
}

OTHERS: dict = {
    "A4": {"s": "J85"},
    "J86": {"+": "J87"},
}


def _flatten(value) -> list[str]:
    """Result list of a table entry, without gaps."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    result: list[str] = []
    for item in value:
        result.extend(_flatten(item))
    return result


def normalize(graph: Mapping) -> Graph:
    """Copy *graph* with every result as a list and empty entries dropped."""
    return {
        source: {op: _flatten(sinks) for op, sinks in ops.items()}
        for source, ops in graph.items()
        if source is not None
    }


def graph_merge(*graphs: Mapping) -> Graph:
    """Merge graphs, concatenating the result lists of shared entries."""
    result: Graph = {}
    for graph in graphs:
        for source, ops in graph.items():
            if source is None:
                continue
            target = result.setdefault(source, {})
            for op, sinks in ops.items():
                target.setdefault(op, []).extend(_flatten(sinks))
    return result


def get_inverse_operation(operation: str) -> str:
    """The operation that undoes *operation*."""
    if operation in ("d", "g"):
        return operation
    if operation == "+":
        return "-"
    if operation == "-":
        return "+"
    if operation.startswith("~"):
        return operation[1:]
    return f"~{operation}"


def make_bidirectional(graph: Mapping[str, Mapping[str, Iterable[str]]]) -> Graph:
    """Add the reverse of every edge that is not a self-loop."""
    reverse: Graph = {}
    for source, ops in graph.items():
        for op, sinks in ops.items():
            for sink in sinks:
                inverse = reverse.setdefault(sink, {}).setdefault(
                    get_inverse_operation(op), [],
                )
                if sink != source:
                    inverse.append(source)
    return graph_merge(reverse, graph)


def _pyramids_cupolae_graph() -> Graph:
    rows = PYRAMIDS_CUPOLAE
    cupola_rotunda = rows[7]

    def pyramid_row(index: int) -> tuple:
        return rows[index + 1 if index > 2 else index]

    def augmentations(index: int, column: int) -> list[str]:
        result = _flatten(rows[index][column])
        if index in (6, 8):
            result += _flatten(cupola_rotunda[column])
        return result

    graph: Graph = {}
    for index, (prism, antiprism) in enumerate(PRISMS):
        row = pyramid_row(index)
        graph = graph_merge(graph, {
            prism: {"+": row[1]},
            antiprism: {"+": row[2]},
        })

    for index, row in enumerate(rows):
        graph = graph_merge(graph, {
            row[0]: {"P": row[1], "A": row[2], "+": augmentations(index, 3)},
            row[1]: {"+": augmentations(index, 4)},
            row[2]: {"+": augmentations(index, 5)},
            row[5]: {"g": row[5]},
        })
        if isinstance(row[3], tuple):
            graph = graph_merge(graph, {
                row[3][0]: {"P": row[4][0], "A": row[5]},
                row[3][1]: {"P": row[4][1], "A": row[5]},
            })
        else:
            graph = graph_merge(graph, {row[3]: {"P": row[4], "A": row[5]}})
        for cell in row:
            if isinstance(cell, tuple):
                graph = graph_merge(graph, {cell[0]: {"g": cell[1]}})
    return graph


def _augmentations_graph() -> Graph:
    graph: Graph = {}
    for base, once, twice, thrice in AUGMENTATIONS:
        meta = twice[1] if isinstance(twice, tuple) else twice
        graph = graph_merge(graph, {
            base: {"+": once},
            once: {"+": twice},
            meta: {"+": thrice},
        })
    return graph


def build_graph() -> Graph:
    """Build the closed transformation graph from the declared tables."""
    tables = [
        ARCHIMEDEAN,
        _pyramids_cupolae_graph(),
        _augmentations_graph(),
        DIMINISHED_ICOSAHEDRA,
        RHOMBICOSIDODECAHEDRA,
        OTHERS,
    ]
    merged = graph_merge(*(normalize(table) for table in tables))
    return make_bidirectional(merged)


def _freeze(graph: Graph) -> MappingProxyType:
    return MappingProxyType({
        source: MappingProxyType({op: tuple(sinks) for op, sinks in ops.items()})
        for source, ops in graph.items()
    })


POLYHEDRA_GRAPH: Mapping[str, Mapping[str, tuple[str, ...]]] = _freeze(build_graph())


def get_candidates(solid: str, operation: str) -> tuple[str, ...]:
    """Distinct notations reachable from *solid* by *operation*."""
    sinks = POLYHEDRA_GRAPH.get(to_notation(solid), {}).get(operation, ())
    return tuple(dict.fromkeys(sinks))


def get_next_polyhedron(
    solid: str, operation: str, result: str | None = None,
) -> str | None:
    """Name of the solid reached from *solid* by *operation*.

    Args:
        solid: Name or notation of the current solid.
        operation: Operation symbol.
        result: Name or notation of the intended result, used to choose
            between several candidates.

    Returns:
        The hyphenated name of the result, or ``None`` if *operation*
        does not apply to *solid* (or does not lead to *result*).

    Raises:
        AmbiguousTransitionError: If there are several candidates and
            *result* does not pick one.
        UnknownSolidError: If *solid* or *result* is not a known name.
    """
    candidates = get_candidates(solid, operation)
    if result is not None:
        wanted = to_notation(result)
        return from_notation(wanted) if wanted in candidates else None
    if not candidates:
        return None
    if len(candidates) > 1:
        raise AmbiguousTransitionError(
            solid, operation, [from_notation(c) for c in candidates],
        )
    logger.debug("%s --%s--> %s", solid, operation, candidates[0])
    return from_notation(candidates[0])
