"""Field and variant inspection shared by the derive helpers."""

from __future__ import annotations

import dataclasses
import gc
import operator
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

_ATTR_PREFIX = "derivekit."

_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "div": operator.truediv,
    "rem": operator.mod,
    "bitand": operator.and_,
    "bitor": operator.or_,
    "bitxor": operator.xor,
    "shl": operator.lshift,
    "shr": operator.rshift,
    "add_assign": operator.iadd,
    "sub_assign": operator.isub,
    "mul_assign": operator.imul,
    "div_assign": operator.itruediv,
    "rem_assign": operator.imod,
    "bitand_assign": operator.iand,
    "bitor_assign": operator.ior,
    "bitxor_assign": operator.ixor,
    "shl_assign": operator.ilshift,
    "shr_assign": operator.irshift,
}


class DeriveError(TypeError):
    """Raised when a derive cannot be applied to a class."""


def attr(trait_name: str, *args: str) -> dict[str, frozenset[str]]:
    """Build dataclass field metadata marking a field for ``trait_name``.

    Results for several traits can be merged with ``|``.
    """
    return {_ATTR_PREFIX + trait_name: frozenset(args)}


@dataclass(frozen=True)
class FieldInfo:
    """One field of a struct-like dataclass."""

    name: str
    index: int
    type: Any
    attributes: Mapping[str, frozenset[str]]

    def options(self, trait_name: str) -> frozenset[str] | None:
        """Options given with ``attr(trait_name, ...)``, or None if unmarked."""
        return self.attributes.get(trait_name)

    def ignored(self, trait_name: str) -> bool:
        opts = self.options(trait_name)
        return opts is not None and ("ignore" in opts or "skip" in opts)

    def marked(self, trait_name: str) -> bool:
        """True when the field carries an enabling attribute for the trait."""
        return self.options(trait_name) is not None and not self.ignored(trait_name)


def fields_of(cls: type) -> tuple[FieldInfo, ...]:
    """Return the fields of a dataclass in declaration order."""
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise DeriveError(f"{getattr(cls, '__name__', cls)!s} is not a struct")
    result = []
    for index, f in enumerate(dataclasses.fields(cls)):
        attributes = {
            key[len(_ATTR_PREFIX):]: frozenset(value)
            for key, value in f.metadata.items()
            if isinstance(key, str) and key.startswith(_ATTR_PREFIX)
        }
        result.append(FieldInfo(f.name, index, f.type, attributes))
    return tuple(result)


def is_tuple_like(cls: type) -> bool:
    """True when the fields are named ``_0``, ``_1``, ... in order."""
    fs = fields_of(cls)
    return bool(fs) and all(f.name == f"_{f.index}" for f in fs)


def _candidate_subtypes(cls: type) -> Iterator[type]:
    """Types that hold a reference to ``cls``, directly or via a bases tuple."""
    for referrer in gc.get_referrers(cls):
        if isinstance(referrer, type):
            yield referrer
        elif isinstance(referrer, tuple):
            yield from (r for r in gc.get_referrers(referrer) if isinstance(r, type))


def variants_of(cls: type) -> list[type]:
    """Return the dataclass subclasses that act as variants of an enum base."""
    if dataclasses.is_dataclass(cls):
        raise DeriveError(f"{cls.__name__} is a struct, not an enum")
    variants: list[type] = []
    for candidate in _candidate_subtypes(cls):
        if (
            candidate is not cls
            and cls in candidate.__bases__
            and dataclasses.is_dataclass(candidate)
            and candidate not in variants
        ):
            variants.append(candidate)
    return variants


def combine_fields(left: Any, right: Any, method_name: str) -> dict[str, Any]:
    """Apply the named operation field by field, returning name -> result."""
    try:
        op = _OPERATORS[method_name]
    except KeyError:
        raise DeriveError(f"unknown operation: {method_name}") from None
    return {
        f.name: op(getattr(left, f.name), getattr(right, f.name))
        for f in fields_of(type(left))
    }