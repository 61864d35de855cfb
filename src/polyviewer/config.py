"""Viewer configuration and its JSON file format."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from polyviewer._util import _field_defaults
from polyviewer.construction.catalog import is_valid_solid
from polyviewer.operations.caps import Alignment, CapType

_SQUARE_BLOCKS = (CapType.PYRAMID, CapType.FASTIGIUM)
_DECAGON_BLOCKS = (CapType.CUPOLA, CapType.ROTUNDA)
_ENUM_FIELDS = {
    "square_block": CapType,
    "decagon_block": CapType,
    "alignment": Alignment,
}


@dataclass(frozen=True)
class ViewerConfig:
    """Settings for a viewing session.

    Attributes:
        initial_solid: Solid shown when a session starts, by hyphenated
            name or notation.
        validate: Whether to check every operation result for
            structural consistency.
        square_block: Block attached to a square face when an augment
            does not name one.
        decagon_block: Block attached to a decagonal face when an
            augment does not name one.
        alignment: Alignment used when an augment does not name one.
    """

    initial_solid: str = "tetrahedron"
    validate: bool = False
    square_block: CapType = CapType.PYRAMID
    decagon_block: CapType = CapType.CUPOLA
    alignment: Alignment = Alignment.GYRO

    def __post_init__(self) -> None:
        for name, enum in _ENUM_FIELDS.items():
            value = getattr(self, name)
            try:
                object.__setattr__(self, name, enum(value))
            except ValueError:
                raise ValueError(
                    f"{name} must be one of {[str(e) for e in enum]}, "
                    f"got {value!r}"
                ) from None
        if not is_valid_solid(self.initial_solid):
            raise ValueError(
                f"initial_solid must name a catalog solid, got {self.initial_solid!r}"
            )
        if self.square_block not in _SQUARE_BLOCKS:
            raise ValueError(
                f"square_block must be one of {[str(b) for b in _SQUARE_BLOCKS]}, "
                f"got {str(self.square_block)!r}"
            )
        if self.decagon_block not in _DECAGON_BLOCKS:
            raise ValueError(
                f"decagon_block must be one of {[str(b) for b in _DECAGON_BLOCKS]}, "
                f"got {str(self.decagon_block)!r}"
            )

    def block_for(self, n_sides: int) -> CapType | None:
        """Preferred block for a face with *n_sides* sides, if there is a choice."""
        if n_sides == 4:
            return self.square_block
        if n_sides == 10:
            return self.decagon_block
        return None

    def to_dict(self) -> dict:
        """Serialise to a JSON-compatible dictionary.

        Fields at their default values are omitted.
        """
        d: dict = {}
        for field_name, default in _field_defaults(type(self)).items():
            val = getattr(self, field_name)
            if val != default:
                d[field_name] = str(val) if field_name in _ENUM_FIELDS else val
        return d

    @classmethod
    def from_dict(cls, d: dict) -> ViewerConfig:
        """Deserialise from a dictionary.

        Raises:
            ValueError: If *d* contains unknown keys.
        """
        defaults = _field_defaults(cls)
        unknown = set(d) - set(defaults)
        if unknown:
            raise ValueError(f"unknown configuration keys: {sorted(unknown)}")
        return cls(**{key: d[key] for key in defaults if key in d})


def save_config(path: str | Path, config: ViewerConfig) -> None:
    """Save *config* to a JSON file.

    Only non-default settings are written.  The file is human-readable
    with two-space indentation.
    """
    Path(path).write_text(json.dumps(config.to_dict(), indent=2) + "\n")


def load_config(path: str | Path) -> ViewerConfig:
    """Load a configuration from a JSON file.

    Missing settings take their defaults.

    Raises:
        ValueError: If the file contains unknown keys or invalid values.
    """
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(
            f"configuration file must hold a JSON object, got {type(data).__name__}"
        )
    return ViewerConfig.from_dict(data)
