"""Operations that turn one regular-faced solid into another."""

from polyviewer.operations.augment import augment, diminish, gyrate
from polyviewer.operations.caps import Alignment, Cap, CapType, find_cap, get_caps
from polyviewer.operations.elongate import (
    Band,
    BandType,
    elongate,
    get_bands,
    gyroelongate,
    shorten,
)
from polyviewer.operations.expand import contract, expand, snub, twist
from polyviewer.operations.registry import (
    INVALID,
    OPERATIONS,
    Operation,
    OperationKind,
    get_operation,
)
from polyviewer.operations.truncate import cumulate, dual, rectify, truncate
from polyviewer.operations.utils import (
    ExpansionType,
    Twist,
    deduplicate_vertices,
    duplicate_vertices,
    remove_extraneous_vertices,
)

__all__ = [
    "Alignment",
    "Band",
    "BandType",
    "Cap",
    "CapType",
    "ExpansionType",
    "INVALID",
    "OPERATIONS",
    "Operation",
    "OperationKind",
    "Twist",
    "augment",
    "contract",
    "cumulate",
    "deduplicate_vertices",
    "diminish",
    "dual",
    "duplicate_vertices",
    "elongate",
    "expand",
    "find_cap",
    "get_bands",
    "get_caps",
    "get_operation",
    "gyrate",
    "gyroelongate",
    "rectify",
    "remove_extraneous_vertices",
    "shorten",
    "snub",
    "truncate",
    "twist",
]
