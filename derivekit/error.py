"""Deriving error behaviour: locating the source and backtrace fields."""

from __future__ import annotations

import dataclasses
import traceback
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from derivekit.fields import (
    DeriveError,
    FieldInfo,
    fields_of,
    is_tuple_like,
    variants_of,
)

_TRAIT = "error"
_ALLOWED_OPTIONS = frozenset(
    {"ignore", "source", "backtrace", "not_source", "not_backtrace"}
)


class Backtrace:
    """A captured call stack."""

    def __init__(self, frames: Iterable[traceback.FrameSummary] | None = None) -> None:
        if frames is None:
            frames = traceback.extract_stack()[:-1]
        self.frames = traceback.StackSummary.from_list(list(frames))

    @classmethod
    def capture(cls) -> Backtrace:
        """Capture the stack of the caller."""
        return cls(traceback.extract_stack()[:-1])

    def __len__(self) -> int:
        return len(self.frames)

    def __str__(self) -> str:
        return "".join(self.frames.format())

    def __repr__(self) -> str:
        return f"Backtrace({len(self.frames)} frames)"


@dataclass(frozen=True)
class _Plan:
    source: str | None
    backtrace: str | None


def _explicit(info: FieldInfo, attribute: str) -> bool | None:
    opts = info.options(_TRAIT) or frozenset()
    if attribute in opts:
        return True
    if f"not_{attribute}" in opts:
        return False
    return None


def _is_backtrace_type(ty: Any) -> bool:
    """True for a plain (non-generic) type whose last path segment is Backtrace."""
    if isinstance(ty, str):
        text = ty.strip()
        if not text or any(ch in text for ch in "[|( "):
            return False
        return text.rsplit(".", 1)[-1] == "Backtrace"
    if getattr(ty, "__args__", None):
        return False
    return isinstance(ty, type) and ty.__name__ == "Backtrace"


def _single(items: list[FieldInfo], message: str) -> FieldInfo | None:
    if len(items) > 1:
        raise DeriveError(message)
    return items[0] if items else None


def _pick(
    enabled: list[FieldInfo],
    attribute: str,
    default_ok: Callable[[str, FieldInfo], bool],
) -> FieldInfo | None:
    explicit = [f for f in enabled if _explicit(f, attribute) is True]
    chosen = _single(
        explicit,
        f"Multiple `{attribute}` attributes specified. "
        "Single attribute per struct/enum variant allowed.",
    )
    if chosen is not None:
        return chosen
    inferred = [
        f
        for f in enabled
        if _explicit(f, attribute) is None and default_ok(attribute, f)
    ]
    return _single(
        inferred,
        "Conflicting fields found. Consider specifying some "
        "`attr('error', ...)` attributes to resolve conflict.",
    )


def _parse(cls: type) -> _Plan:
    fields = fields_of(cls)
    for f in fields:
        unknown = (f.options(_TRAIT) or frozenset()) - _ALLOWED_OPTIONS
        if unknown:
            raise DeriveError(
                f"unknown error attribute(s) on {cls.__name__}.{f.name}: "
                + ", ".join(sorted(unknown))
            )
    enabled = [f for f in fields if not f.ignored(_TRAIT)]
    total = len(fields)
    tuple_like = is_tuple_like(cls)

    def default_ok(attribute: str, f: FieldInfo) -> bool:
        if tuple_like:
            if attribute == "source":
                return total == 1 and not _is_backtrace_type(f.type)
            return _is_backtrace_type(f.type)
        if attribute == "source":
            return f.name == "source"
        return f.name == "backtrace" or _is_backtrace_type(f.type)

    source = _pick(enabled, "source", default_ok)
    backtrace = _pick(enabled, "backtrace", default_ok)

    if tuple_like and total == 2 and source is None and backtrace is not None:
        other = fields[(backtrace.index + 1) % 2]
        if _explicit(other, "source") is not False and not other.ignored(_TRAIT):
            source = other

    return _Plan(
        source.name if source is not None else None,
        backtrace.name if backtrace is not None else None,
    )


def source_field(cls: type) -> str | None:
    """Name of the field acting as the error source of a struct or variant."""
    return _parse(cls).source


def backtrace_field(cls: type) -> str | None:
    """Name of the field holding the backtrace of a struct or variant."""
    return _parse(cls).backtrace


def _backtrace_of(value: Any) -> Any:
    request = getattr(value, "request_backtrace", None)
    return request() if callable(request) else None


def error(cls: type) -> type:
    """Add ``error_source()`` and ``request_backtrace()`` to a struct or enum.

    For an enum base, apply this after its variant subclasses are defined.
    """
    is_struct = dataclasses.is_dataclass(cls)
    plans: dict[type, _Plan] = {}

    def plan_for(kind: type) -> _Plan:
        plan = plans.get(kind)
        if plan is None:
            plan = _parse(kind) if dataclasses.is_dataclass(kind) else _Plan(None, None)
            plans[kind] = plan
        return plan

    if is_struct:
        plan_for(cls)
    else:
        for variant in variants_of(cls):
            plan_for(variant)

    def _plan(self: Any) -> _Plan:
        return plan_for(cls if is_struct else type(self))

    def error_source(self: Any) -> Any:
        plan = _plan(self)
        return None if plan.source is None else getattr(self, plan.source)

    def request_backtrace(self: Any) -> Any:
        plan = _plan(self)
        if plan.backtrace is None:
            return None
        if plan.backtrace != plan.source:
            return getattr(self, plan.backtrace)
        return _backtrace_of(getattr(self, plan.source))

    cls.error_source = error_source
    cls.request_backtrace = request_backtrace
    return cls