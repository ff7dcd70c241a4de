"""Field-wise binary operators for structs and enums."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any

from derivekit.fields import DeriveError, combine_fields, fields_of

_DUNDERS = {
    "add": "add",
    "sub": "sub",
    "mul": "mul",
    "div": "truediv",
    "rem": "mod",
    "bitand": "and",
    "bitor": "or",
    "bitxor": "xor",
    "shl": "lshift",
    "shr": "rshift",
}


class BinaryError(ArithmeticError):
    """An enum binary operation could not produce a value."""

    def __init__(self, operation_name: str, message: str) -> None:
        super().__init__(message)
        self.operation_name = operation_name


class UnitError(BinaryError):
    """Both operands were the same unit variant."""

    def __init__(self, operation_name: str) -> None:
        super().__init__(operation_name, f"Cannot {operation_name}() unit variants")


class WrongVariantError(BinaryError):
    """The operands were different variants."""

    def __init__(self, operation_name: str) -> None:
        super().__init__(
            operation_name, f"Trying to {operation_name}() mismatched enum variants"
        )


def _method_for(trait_name: str) -> str:
    method = trait_name.lower()
    if method not in _DUNDERS:
        raise DeriveError(f"unsupported operator trait: {trait_name}")
    return method


def expand_add_like(cls: type, trait_name: str) -> type:
    """Install a field-wise binary operator (e.g. ``Add``) on ``cls``."""
    trait = trait_name.removesuffix("Self")
    method = _method_for(trait)
    dunder = f"__{_DUNDERS[method]}__"

    if dataclasses.is_dataclass(cls):
        if not fields_of(cls):
            raise DeriveError(f"Unit structs cannot use derive({trait})")

        def operation(self: Any, rhs: Any) -> Any:
            if not isinstance(rhs, cls):
                return NotImplemented
            return cls(**combine_fields(self, rhs, method))

    else:

        def operation(self: Any, rhs: Any) -> Any:
            if not isinstance(rhs, cls):
                return NotImplemented
            variant = type(self)
            if variant is not type(rhs):
                raise WrongVariantError(method)
            if not fields_of(variant):
                raise UnitError(method)
            return variant(**combine_fields(self, rhs, method))

    operation.__name__ = dunder
    setattr(cls, dunder, operation)
    return cls


def expand_add_assign_like(cls: type, trait_name: str) -> type:
    """Install a field-wise in-place operator (e.g. ``AddAssign``) on ``cls``."""
    method = _method_for(trait_name.removesuffix("Assign"))
    dunder = f"__i{_DUNDERS[method]}__"
    if not dataclasses.is_dataclass(cls):
        raise DeriveError(f"Only structs can use derive({trait_name})")
    if not fields_of(cls):
        raise DeriveError(f"Unit structs cannot use derive({trait_name})")

    def operation(self: Any, rhs: Any) -> Any:
        if not isinstance(rhs, cls):
            return NotImplemented
        for name, value in combine_fields(self, rhs, f"{method}_assign").items():
            setattr(self, name, value)
        return self

    operation.__name__ = dunder
    setattr(cls, dunder, operation)
    return cls


def add_like(trait_name: str) -> Callable[[type], type]:
    """Class decorator form of :func:`expand_add_like`."""
    return lambda cls: expand_add_like(cls, trait_name)


def add_assign_like(trait_name: str) -> Callable[[type], type]:
    """Class decorator form of :func:`expand_add_assign_like`."""
    return lambda cls: expand_add_assign_like(cls, trait_name)