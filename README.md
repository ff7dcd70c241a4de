# derivekit

Class decorators that add boilerplate methods to dataclasses, worked out from
their fields at decoration time: field-wise operators, a positional `new`
constructor, dereferencing to an inner field, typed views of fields, and
error-source lookup.

## Installation

```
pip install derivekit
```

To run the test suite:

```
pip install "derivekit[test]"
pytest
```

## Structs and enums

A *struct* is any dataclass. A struct whose fields are named `_0`, `_1`, …
in order counts as tuple-like (`fields.is_tuple_like`).

An *enum* is a plain (non-dataclass) base class whose variants are dataclass
subclasses of it; `fields.variants_of(base)` finds them. A variant with no
fields is a unit variant.

Per-field options are given through dataclass metadata built with
`fields.attr(trait_name, *options)`; results for several traits can be merged
with `|`:

```python
from dataclasses import dataclass, field
from derivekit.fields import attr

@dataclass
class Numbers:
    numbers: list = field(metadata=attr("deref") | attr("as_ref"))
    useless: bool = field(default=False, metadata=attr("deref", "ignore"))
```

An option of `"ignore"` or `"skip"` disables the field for that trait; any
other use of `attr(trait)` marks it as selected. Whenever a decorator cannot
be applied, `fields.DeriveError` (a `TypeError`) is raised.

## Modules

### `derivekit.arithmetic`

- `add_like(trait_name)` returns a class decorator installing a binary
  operator; `trait_name` is one of `"Add"`, `"Sub"`, `"Mul"`, `"Div"`, `"Rem"`,
  `"BitAnd"`, `"BitOr"`, `"BitXor"`, `"Shl"`, `"Shr"` (a trailing `"Self"` is
  dropped). The result is built field by field from two instances of the same
  class; any other right operand gives `NotImplemented`.
  - On a struct, the result is a new instance. A struct with no fields raises
    `DeriveError`.
  - On an enum base, both operands must be the same variant, else
    `WrongVariantError` is raised; two unit variants raise `UnitError`. Both
    derive from `BinaryError` (an `ArithmeticError`) and carry `operation_name`.
- `add_assign_like(trait_name)` does the same for in-place operators
  (`"AddAssign"`, `"SubAssign"`, …), updating the fields of the left operand.
  Only structs with at least one field are accepted.
- `expand_add_like(cls, trait_name)` and `expand_add_assign_like(cls,
  trait_name)` apply the same directly to a class.

### `derivekit.constructor`

`constructor(cls)` adds a class method `new(*values)` taking every field in
declaration order; a wrong number of values raises `TypeError`.

### `derivekit.deref`

- `deref(cls, *, forward=False)` picks the single field marked with
  `attr("deref")`, or else the single field not ignored, and adds `deref()`
  returning it. With `forward=True` (or the `"forward"` option on the field)
  it returns `field.deref()` instead. Attribute lookups that fail on the
  instance (other than dunder names) go to the deref target.
- `deref_mut(cls, *, forward=False)` picks a field the same way under
  `"deref_mut"` and adds `deref_mut()` and `set_deref(value)`; when
  forwarding, these call the field's own `deref_mut()` and `set_deref()`.

Both work as `@deref` or `@deref(forward=True)`.

### `derivekit.as_ref`

`as_ref(cls, *, forward=False)` and `as_mut(cls, *, forward=False)` add
`as_ref(target=None)` / `as_mut(target=None)`. The fields offered are those
marked with `attr("as_ref")` / `attr("as_mut")`, or else the only non-ignored
field. `target` selects a field by name, by its type, or by a string
annotation equal to the type's name; with one field it may be omitted.
Forwarded fields pass the call on to the field's own `as_ref`/`as_mut`.

### `derivekit.error`

- `source_field(cls)` and `backtrace_field(cls)` return the name of the field
  acting as the error source and the one carrying a backtrace, or `None`.
  Fields may be chosen with `attr("error", "source")`,
  `attr("error", "backtrace")`, excluded with `"not_source"`,
  `"not_backtrace"` or `"ignore"`. Without options, a named struct uses a
  field called `source`, and a field called `backtrace` or annotated with a
  non-generic `Backtrace` type; a tuple-like struct uses its only field as the
  source, a `Backtrace`-typed field as backtrace, and with exactly two fields
  the other one as source. Two explicit or two inferred candidates, or an
  unknown option, raise `DeriveError`.
- `error(cls)` adds `error_source()` and `request_backtrace()` to a struct or
  an enum base (decorate the base after its variants are defined). When the
  source field is also the backtrace field, `request_backtrace()` asks the
  source for its own.
- `Backtrace` holds a captured call stack; `Backtrace.capture()` records the
  caller's stack, `len()` gives the frame count and `str()` the formatted
  frames.

### `derivekit.fields`

Shared helpers: `fields_of`, `is_tuple_like`, `variants_of`,
`combine_fields(left, right, method_name)`, `attr`, `FieldInfo` and
`DeriveError`.

## Example

```python
from dataclasses import dataclass

from derivekit.arithmetic import WrongVariantError, add_assign_like, add_like
from derivekit.constructor import constructor


@constructor
@add_assign_like("AddAssign")
@add_like("Add")
@dataclass
class Point2D:
    x: int
    y: int


p = Point2D.new(1, 2) + Point2D(3, 4)
assert p == Point2D(4, 6)
p += Point2D(1, 1)
assert p == Point2D(5, 7)


@add_like("Add")
class Shape:
    pass


@dataclass
class Circle(Shape):
    r: int


@dataclass
class Square(Shape):
    side: int


assert Circle(1) + Circle(2) == Circle(3)
try:
    Circle(1) + Square(2)
except WrongVariantError:
    pass
```

## What it does not do

The decorators add methods to live classes at runtime; they do not write
source code. Only the derives listed above exist: there is no formatting
(`__str__`/`__repr__`) derive, no conversion derives, and operators only
combine two values of the same class, never a value with a scalar. There is
no command-line tool.