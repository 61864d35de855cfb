"""Helpers for the settings dataclasses."""

from __future__ import annotations

import dataclasses
import functools
from types import MappingProxyType


@functools.cache
def _field_defaults(cls: type) -> MappingProxyType:
    """Plain default value of each field of the dataclass *cls*.

    Fields without a default, or with a ``default_factory``, are left
    out.  ``to_dict()`` compares against this mapping so that settings
    files only carry what differs from the defaults.
    """
    return MappingProxyType({
        f.name: f.default
        for f in dataclasses.fields(cls)
        if f.default is not dataclasses.MISSING
    })
