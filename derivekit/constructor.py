"""A ``new`` constructor taking every field positionally."""

from __future__ import annotations

import dataclasses
from typing import Any

from derivekit.fields import DeriveError, fields_of


def constructor(cls: type) -> type:
    """Add a ``new(*values)`` classmethod building ``cls`` from its fields in order."""
    if not dataclasses.is_dataclass(cls):
        raise DeriveError("Only structs can derive a constructor")
    names = [f.name for f in fields_of(cls)]

    def new(klass: type, *values: Any) -> Any:
        if len(values) != len(names):
            raise TypeError(
                f"{klass.__name__}.new() takes {len(names)} arguments "
                f"({len(values)} given)"
            )
        return klass(**dict(zip(names, values)))

    cls.new = classmethod(new)
    return cls