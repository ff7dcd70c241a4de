from dataclasses import dataclass, field

import pytest

from derivekit.error import (
    Backtrace,
    backtrace_field,
    error,
    source_field,
)
from derivekit.fields import DeriveError, attr


@dataclass
class NamedSource:
    source: ValueError
    message: str


@dataclass
class NamedBacktraceByName:
    message: str
    backtrace: object


@dataclass
class NamedBacktraceByType:
    message: str
    trace: Backtrace


@dataclass
class StringAnnotated:
    trace: "Backtrace"
    other: "list[Backtrace]"


@dataclass
class TupleSource:
    _0: ValueError


@dataclass
class TupleBacktraceOnly:
    _0: Backtrace


@dataclass
class TupleInferred:
    _0: OSError
    _1: Backtrace


@dataclass
class TupleNotSource:
    _0: OSError = field(metadata=attr("error", "not_source"))
    _1: Backtrace = None


@dataclass
class TupleTwoPlain:
    _0: int
    _1: int


@dataclass
class IgnoredSource:
    source: ValueError = field(metadata=attr("error", "ignore"))


@dataclass
class ExplicitSource:
    cause: ValueError = field(metadata=attr("error", "source"))
    source: ValueError = None


def test_named_field_called_source():
    assert source_field(NamedSource) == "source"
    assert backtrace_field(NamedSource) is None


def test_named_backtrace_by_name_and_type():
    assert backtrace_field(NamedBacktraceByName) == "backtrace"
    assert backtrace_field(NamedBacktraceByType) == "trace"
    assert source_field(NamedBacktraceByType) is None


def test_string_annotations_and_generic_types():
    assert backtrace_field(StringAnnotated) == "trace"


def test_tuple_single_field_is_source():
    assert source_field(TupleSource) == "_0"


def test_tuple_single_backtrace_is_not_source():
    assert source_field(TupleBacktraceOnly) is None
    assert backtrace_field(TupleBacktraceOnly) == "_0"


def test_tuple_two_fields_infers_other_as_source():
    assert source_field(TupleInferred) == "_0"
    assert backtrace_field(TupleInferred) == "_1"


def test_tuple_not_source_blocks_inference():
    assert source_field(TupleNotSource) is None
    assert backtrace_field(TupleNotSource) == "_1"


def test_tuple_two_plain_fields_have_nothing():
    assert source_field(TupleTwoPlain) is None
    assert backtrace_field(TupleTwoPlain) is None


def test_ignored_field_is_not_source():
    assert source_field(IgnoredSource) is None


def test_explicit_source_wins_over_name():
    assert source_field(ExplicitSource) == "cause"


def test_multiple_explicit_sources_raise():
    @dataclass
    class Twice:
        a: ValueError = field(metadata=attr("error", "source"))
        b: ValueError = field(metadata=attr("error", "source"))

    with pytest.raises(DeriveError, match="Multiple `source`"):
        source_field(Twice)


def test_conflicting_inferred_backtraces_raise():
    @dataclass
    class TwoTraces:
        first: Backtrace
        second: Backtrace

    with pytest.raises(DeriveError, match="Conflicting fields"):
        backtrace_field(TwoTraces)


def test_unknown_option_raises():
    @dataclass
    class Bad:
        source: ValueError = field(metadata=attr("error", "bogus"))

    with pytest.raises(DeriveError):
        error(Bad)


def test_non_dataclass_is_rejected():
    with pytest.raises(DeriveError):
        source_field(int)


def test_struct_error_source_returns_field():
    decorated = error(NamedSource)
    cause = ValueError("boom")
    item = decorated(cause, "msg")
    assert item.error_source() is cause
    assert item.request_backtrace() is None


def test_struct_without_source():
    @dataclass
    class Plain:
        message: str

    plain = error(Plain)
    assert plain("x").error_source() is None


def test_distinct_backtrace_is_own_field():
    @error
    @dataclass
    class WithBoth:
        _0: OSError
        _1: Backtrace

    trace = Backtrace.capture()
    item = WithBoth(OSError("io"), trace)
    assert item.request_backtrace() is trace
    assert isinstance(item.error_source(), OSError)


def test_same_field_backtrace_delegates_to_source():
    @error
    @dataclass
    class Inner:
        trace: Backtrace

    @error
    @dataclass
    class Outer:
        inner: Inner = field(metadata=attr("error", "source", "backtrace"))

    trace = Backtrace.capture()
    outer = Outer(Inner(trace))
    assert outer.error_source().trace is trace
    assert outer.request_backtrace() is trace


def test_same_field_backtrace_without_support_is_none():
    @dataclass
    class Outer:
        inner: ValueError = field(metadata=attr("error", "source", "backtrace"))

    outer = error(Outer)
    assert outer(ValueError("x")).request_backtrace() is None


def test_enum_variants():
    class Failure:
        pass

    @dataclass
    class Io(Failure):
        _0: OSError

    @dataclass
    class Traced(Failure):
        source: ValueError
        backtrace: Backtrace

    @dataclass
    class Empty(Failure):
        pass

    error(Failure)
    io_error = OSError("disk")
    assert Io(io_error).error_source() is io_error
    trace = Backtrace.capture()
    traced = Traced(ValueError("v"), trace)
    assert traced.request_backtrace() is trace
    assert Empty().error_source() is None
    assert Empty().request_backtrace() is None


def test_enum_conflict_raises_at_derive_time():
    class Broken:
        pass

    @dataclass
    class Variant(Broken):
        a: Backtrace
        b: Backtrace

    with pytest.raises(DeriveError):
        error(Broken)


def test_backtrace_capture_records_caller():
    trace = Backtrace.capture()
    assert len(trace) > 0
    assert trace.frames[-1].name == "test_backtrace_capture_records_caller"
    assert "test_backtrace_capture_records_caller" in str(trace)