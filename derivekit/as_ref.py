"""Borrowing a struct as one of its fields, chosen by type or name."""

from __future__ import annotations

from typing import Any

from derivekit.fields import DeriveError, FieldInfo, fields_of


def _targets(cls: type, trait: str, forward: bool) -> list[tuple[FieldInfo, bool]]:
    fs = fields_of(cls)
    chosen = [f for f in fs if f.marked(trait)]
    if not chosen:
        chosen = [f for f in fs if not f.ignored(trait)]
        if len(chosen) != 1:
            raise DeriveError(
                f"derive({trait}) on {cls.__name__} needs exactly one field "
                f"or fields marked with attr({trait!r})"
            )
    return [(f, forward or "forward" in (f.options(trait) or ())) for f in chosen]


def _matches(info: FieldInfo, target: Any) -> bool:
    if info.name == target or info.type is target:
        return True
    return isinstance(info.type, str) and info.type == getattr(target, "__name__", None)


def _install(cls: type, method: str, forward: bool) -> type:
    targets = _targets(cls, method, forward)

    def lookup(target: Any) -> tuple[FieldInfo, bool]:
        if target is None:
            if len(targets) == 1:
                return targets[0]
            raise TypeError(f"{cls.__name__}.{method}() needs a target type")
        for info, fwd in targets:
            if not fwd and _matches(info, target):
                return info, fwd
        forwarded = [t for t in targets if t[1]]
        if len(forwarded) == 1:
            return forwarded[0]
        raise TypeError(f"{cls.__name__} cannot be viewed as {target!r}")

    def view(self: Any, target: Any = None) -> Any:
        info, fwd = lookup(target)
        value = getattr(self, info.name)
        if not fwd:
            return value
        inner = getattr(value, method, None)
        if inner is None:
            raise TypeError(f"{type(value).__name__} does not support {method}")
        return inner() if target is None else inner(target)

    view.__name__ = method
    setattr(cls, method, view)
    return cls


def as_ref(cls: type | None = None, *, forward: bool = False) -> Any:
    """Add ``as_ref(target=None)`` returning the matching field."""
    if cls is None:
        return lambda c: as_ref(c, forward=forward)
    return _install(cls, "as_ref", forward)


def as_mut(cls: type | None = None, *, forward: bool = False) -> Any:
    """Add ``as_mut(target=None)`` returning the matching field for mutation."""
    if cls is None:
        return lambda c: as_mut(c, forward=forward)
    return _install(cls, "as_mut", forward)