"""Dereferencing a struct to its single enabled field."""

from __future__ import annotations

from typing import Any

from derivekit.fields import DeriveError, FieldInfo, fields_of


def _select(cls: type, trait: str, forward: bool) -> tuple[FieldInfo, bool]:
    fs = fields_of(cls)
    enabled = [f for f in fs if f.marked(trait)] or [
        f for f in fs if not f.ignored(trait)
    ]
    if len(enabled) != 1:
        raise DeriveError(
            f"derive({trait}) needs exactly one enabled field, "
            f"{cls.__name__} has {len(enabled)}"
        )
    chosen = enabled[0]
    return chosen, forward or "forward" in (chosen.options(trait) or ())


def _forwarded(value: Any, method: str) -> Any:
    bound = getattr(value, method, None)
    if bound is None:
        raise TypeError(f"{type(value).__name__} does not support {method}")
    return bound


def deref(cls: type | None = None, *, forward: bool = False) -> Any:
    """Add ``deref()`` returning the field (or its own target when forwarding).

    Unknown attributes on instances are looked up on the deref target.
    """
    if cls is None:
        return lambda c: deref(c, forward=forward)
    chosen, fwd = _select(cls, "deref", forward)
    name = chosen.name

    def deref_(self: Any) -> Any:
        value = getattr(self, name)
        return _forwarded(value, "deref")() if fwd else value

    def __getattr__(self: Any, attribute: str) -> Any:
        if attribute == name or attribute.startswith("__"):
            raise AttributeError(attribute)
        return getattr(self.deref(), attribute)

    cls.deref = deref_
    cls.__getattr__ = __getattr__
    return cls


def deref_mut(cls: type | None = None, *, forward: bool = False) -> Any:
    """Add ``deref_mut()`` and ``set_deref(value)`` for the single enabled field."""
    if cls is None:
        return lambda c: deref_mut(c, forward=forward)
    chosen, fwd = _select(cls, "deref_mut", forward)
    name = chosen.name

    def deref_mut_(self: Any) -> Any:
        value = getattr(self, name)
        return _forwarded(value, "deref_mut")() if fwd else value

    def set_deref(self: Any, value: Any) -> None:
        if fwd:
            _forwarded(getattr(self, name), "set_deref")(value)
        else:
            setattr(self, name, value)

    cls.deref_mut = deref_mut_
    cls.set_deref = set_deref
    return cls