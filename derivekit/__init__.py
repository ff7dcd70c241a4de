"""Class decorators that derive operators, constructors, dereferencing, field views and error sources from a dataclass's fields."""

__version__ = "0.1.0"
__all__ = ["arithmetic", "as_ref", "constructor", "deref", "error", "fields"]