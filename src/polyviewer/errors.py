"""Exception types raised by polyviewer."""

from __future__ import annotations


class PolyhedronError(Exception):
    """Base class for all polyviewer errors."""


class UnknownSolidError(PolyhedronError, KeyError):
    """A solid name is not part of the canonical catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown solid: {self.name!r}"


class UnknownOperationError(PolyhedronError, KeyError):
    """An operation name or symbol is not part of the operation catalog."""

    def __init__(self, operation: str) -> None:
        super().__init__(operation)
        self.operation = operation

    def __str__(self) -> str:
        return f"unknown operation: {self.operation!r}"


class AmbiguousTransitionError(PolyhedronError, ValueError):
    """An operation leads to more than one solid and nothing narrowed it."""

    def __init__(self, solid: str, operation: str, candidates) -> None:
        self.solid = solid
        self.operation = operation
        self.candidates = tuple(candidates)
        super().__init__(
            f"applying {operation!r} to {solid!r} is ambiguous: "
            f"candidates {list(self.candidates)}"
        )


class MalformedPolyhedronError(PolyhedronError, ValueError):
    """A polyhedron violates a structural invariant."""
