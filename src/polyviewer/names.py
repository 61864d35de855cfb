"""Solid names and their compact notation.

Solids are addressed either by a hyphenated English name
(``"triangular-bipyramid"``) or by a short notation used internally by
the transformation graph: Conway-style letters for the Platonic and
Archimedean solids (``"T"``, ``"tC"``, ``"eD"``), ``P<n>``/``A<n>`` for
prisms and antiprisms, and ``J<n>`` for the Johnson solids.
"""

from __future__ import annotations

from types import MappingProxyType

from polyviewer.errors import UnknownSolidError

PLATONIC: dict[str, str] = {
    "T": "tetrahedron",
    "C": "cube",
    "O": "octahedron",
    "D": "dodecahedron",
    "I": "icosahedron",
}

ARCHIMEDEAN: dict[str, str] = {
    "tT": "truncated-tetrahedron",
    "aC": "cuboctahedron",
    "tC": "truncated-cube",
    "tO": "truncated-octahedron",
    "eC": "rhombicuboctahedron",
    "bC": "truncated-cuboctahedron",
    "sC": "snub-cube",
    "aD": "icosidodecahedron",
    "tD": "truncated-dodecahedron",
    "tI": "truncated-icosahedron",
    "eD": "rhombicosidodecahedron",
    "bD": "truncated-icosidodecahedron",
    "sD": "snub-dodecahedron",
}

_POLYGON_PREFIXES: dict[int, str] = {
    3: "triangular",
    4: "square",
    5: "pentagonal",
    6: "hexagonal",
    8: "octagonal",
    10: "decagonal",
}

PRISMS: dict[str, str] = {
    f"P{n}": f"{prefix}-prism"
    for n, prefix in _POLYGON_PREFIXES.items() if n != 4
}

ANTIPRISMS: dict[str, str] = {
    f"A{n}": f"{prefix}-antiprism"
    for n, prefix in _POLYGON_PREFIXES.items() if n != 3
}

# The square prism is the cube and the triangular antiprism the
# octahedron; both spellings resolve to the Platonic notation.
NOTATION_ALIASES: dict[str, str] = {"P4": "C", "A3": "O"}

_JOHNSON_NAMES = (
    "square-pyramid",
    "pentagonal-pyramid",
    "triangular-cupola",
    "square-cupola",
    "pentagonal-cupola",
    "pentagonal-rotunda",
    "elongated-triangular-pyramid",
    "elongated-square-pyramid",
    "elongated-pentagonal-pyramid",
    "gyroelongated-square-pyramid",
    "gyroelongated-pentagonal-pyramid",
    "triangular-bipyramid",
    "pentagonal-bipyramid",
    "elongated-triangular-bipyramid",
    "elongated-square-bipyramid",
    "elongated-pentagonal-bipyramid",
    "gyroelongated-square-bipyramid",
    "elongated-triangular-cupola",
    "elongated-square-cupola",
    "elongated-pentagonal-cupola",
    "elongated-pentagonal-rotunda",
    "gyroelongated-triangular-cupola",
    "gyroelongated-square-cupola",
    "gyroelongated-pentagonal-cupola",
    "gyroelongated-pentagonal-rotunda",
    "gyrobifastigium",
    "triangular-orthobicupola",
    "square-orthobicupola",
    "square-gyrobicupola",
    "pentagonal-orthobicupola",
    "pentagonal-gyrobicupola",
    "pentagonal-orthocupolarotunda",
    "pentagonal-gyrocupolarotunda",
    "pentagonal-orthobirotunda",
    "elongated-triangular-orthobicupola",
    "elongated-triangular-gyrobicupola",
    "elongated-square-gyrobicupola",
    "elongated-pentagonal-orthobicupola",
    "elongated-pentagonal-gyrobicupola",
    "elongated-pentagonal-orthocupolarotunda",
    "elongated-pentagonal-gyrocupolarotunda",
    "elongated-pentagonal-orthobirotunda",
    "elongated-pentagonal-gyrobirotunda",
    "gyroelongated-triangular-bicupola",
    "gyroelongated-square-bicupola",
    "gyroelongated-pentagonal-bicupola",
    "gyroelongated-pentagonal-cupolarotunda",
    "gyroelongated-pentagonal-birotunda",
    "augmented-triangular-prism",
    "biaugmented-triangular-prism",
    "triaugmented-triangular-prism",
    "augmented-pentagonal-prism",
    "biaugmented-pentagonal-prism",
    "augmented-hexagonal-prism",
    "parabiaugmented-hexagonal-prism",
    "metabiaugmented-hexagonal-prism",
    "triaugmented-hexagonal-prism",
    "augmented-dodecahedron",
    "parabiaugmented-dodecahedron",
    "metabiaugmented-dodecahedron",
    "triaugmented-dodecahedron",
    "metabidiminished-icosahedron",
    "tridiminished-icosahedron",
    "augmented-tridiminished-icosahedron",
    "augmented-truncated-tetrahedron",
    "augmented-truncated-cube",
    "biaugmented-truncated-cube",
    "augmented-truncated-dodecahedron",
    "parabiaugmented-truncated-dodecahedron",
    "metabiaugmented-truncated-dodecahedron",
    "triaugmented-truncated-dodecahedron",
    "gyrate-rhombicosidodecahedron",
    "parabigyrate-rhombicosidodecahedron",
    "metabigyrate-rhombicosidodecahedron",
    "trigyrate-rhombicosidodecahedron",
    "diminished-rhombicosidodecahedron",
    "paragyrate-diminished-rhombicosidodecahedron",
    "metagyrate-diminished-rhombicosidodecahedron",
    "bigyrate-diminished-rhombicosidodecahedron",
    "parabidiminished-rhombicosidodecahedron",
    "metabidiminished-rhombicosidodecahedron",
    "gyrate-bidiminished-rhombicosidodecahedron",
    "tridiminished-rhombicosidodecahedron",
    "snub-disphenoid",
    "snub-square-antiprism",
    "sphenocorona",
    "augmented-sphenocorona",
    "sphenomegacorona",
    "hebesphenomegacorona",
    "disphenocingulum",
    "bilunabirotunda",
    "triangular-hebesphenorotunda",
)

JOHNSON: dict[str, str] = {
    f"J{i}": name for i, name in enumerate(_JOHNSON_NAMES, start=1)
}

NOTATION_TO_NAME: MappingProxyType[str, str] = MappingProxyType({
    **PLATONIC, **ARCHIMEDEAN, **PRISMS, **ANTIPRISMS, **JOHNSON,
})
NAME_TO_NOTATION: MappingProxyType[str, str] = MappingProxyType({
    name: notation for notation, name in NOTATION_TO_NAME.items()
})


def escape_name(name: str) -> str:
    """Replace spaces with hyphens: ``"square pyramid"`` -> ``"square-pyramid"``."""
    return name.strip().lower().replace(" ", "-")


def unescape_name(name: str) -> str:
    return name.replace("-", " ")


def is_known_name(name: str) -> bool:
    """Whether *name* is a known hyphenated name or notation."""
    try:
        to_notation(name)
    except UnknownSolidError:
        return False
    return True


def to_notation(name: str) -> str:
    """Translate a hyphenated name to notation.

    Notation passes through unchanged (aliases are resolved), so the
    function can be applied to either name space.

    Raises:
        UnknownSolidError: If *name* is not a known solid.
    """
    if name in NOTATION_ALIASES:
        return NOTATION_ALIASES[name]
    if name in NOTATION_TO_NAME:
        return name
    escaped = escape_name(name)
    if escaped in NAME_TO_NOTATION:
        return NAME_TO_NOTATION[escaped]
    raise UnknownSolidError(name)


def from_notation(notation: str) -> str:
    """Translate notation to the hyphenated name.

    Hyphenated names pass through unchanged.

    Raises:
        UnknownSolidError: If *notation* is not a known solid.
    """
    notation = NOTATION_ALIASES.get(notation, notation)
    if notation in NOTATION_TO_NAME:
        return NOTATION_TO_NAME[notation]
    escaped = escape_name(notation)
    if escaped in NAME_TO_NOTATION:
        return escaped
    raise UnknownSolidError(notation)
