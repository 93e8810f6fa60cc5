"""
Value conversion registry.

A flag's bound field has a type hint; the hint decides how the raw string of an
occurrence becomes a Python value.

Resolution order
- capability: a type defining `__convert__(self, value)` converts itself. A fresh
  instance is built (see construct()) and asked to absorb the string.
- registry: an exact-type lookup in a Registry. Built-ins cover bool, str, int and
  the Help marker; callers can register more.

Notes
- The capability instance is stored even when `__convert__` raises; the flag layer
  reports the failure after the store. Callers that need the previous value must
  keep a copy themselves.
"""
import re
import types
import typing

from .faults import HelpRequest
from .utils import Unset


class Help:
    """
    marker type for the help field of a record.

    a field annotated with Help turns into the help flag (-h/--help unless the
    annotation names others). specifying it raises HelpRequest.
    """
    __slots__ = ()

    def __repr__(self):
        return "Help()"

    def __eq__(self, other):
        return isinstance(other, Help)

    def __hash__(self):
        return hash(Help)


class Registry:
    """
    Mapping from an exact field type to a `converter(value) -> object` callable.

    Converters raise on bad input; any exception becomes a ConversionError at the
    flag layer (HelpRequest excepted).
    """

    def __init__(self, converters=(), /):
        self._converters = dict(converters)

    def register(self, kind, converter=Unset, /):
        """
        register a converter for `kind`; without a converter, return a decorator.
        """
        if converter is Unset:
            def wrapper(converter):
                return self.register(kind, converter)
            return wrapper
        if not isinstance(kind, type):
            raise TypeError("register() first argument must be a type")
        if not callable(converter):
            raise TypeError("register() converter must be callable")
        self._converters[kind] = converter
        return converter

    def lookup(self, kind, /):
        return self._converters[kind]

    def copy(self):
        return type(self)(self._converters)

    def __contains__(self, kind):
        return kind in self._converters

    def __repr__(self):
        return "Registry(%s)" % ", ".join(kind.__name__ for kind in self._converters)


converters = Registry()


@converters.register(bool)
def _bool(value):
    return True


@converters.register(str)
def _str(value):
    return value


@converters.register(int)
def _int(value):
    if not re.fullmatch(r"[+-]?[0-9]+", value):
        raise ValueError("invalid literal for int() with base 10: %r" % value)
    return int(value, 10)


@converters.register(Help)
def _help(value):
    raise HelpRequest()


def unwrap(hint, /):
    """
    strip one optional layer: `T | None` and `Optional[T]` resolve to T.
    """
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        arguments = [argument for argument in typing.get_args(hint) if argument is not types.NoneType]
        if len(arguments) == 1:
            return arguments[0]
    return hint


def element(hint, /):
    """
    the single-value kind of a field: T for list[T], otherwise the unwrapped hint.
    """
    if typing.get_origin(hint) is list:
        arguments = typing.get_args(hint)
        return unwrap(arguments[0]) if arguments else str
    return unwrap(hint)


def convertible(kind, /):
    return isinstance(kind, type) and callable(getattr(kind, "__convert__", None))


def supported(kind, /, registry=converters):
    return convertible(kind) or kind in registry


def construct(kind, /):
    """
    build the fresh instance a self-converting type parses into.
    """
    return kind()


def convert(kind, value, store, /, registry=converters):
    """
    convert `value` for a field of single-value `kind` and hand the result to `store`.

    - capability types: store the fresh instance whatever `__convert__` does,
      then let its exception (if any) propagate.
    - registered types: store the converter's result.
    - KeyError when `kind` is neither; callers check supported() first.
    """
    if convertible(kind):
        object = construct(kind)
        try:
            object.__convert__(value)
        finally:
            store(object)
        return
    store(registry.lookup(kind)(value))


def zero(hint, /):
    """
    zero value for a field that the record left unset.
    """
    if typing.get_origin(hint) is list:
        return []
    if unwrap(hint) is not hint:
        return None
    return {
        bool: False,
        str: "",
        int: 0,
    }.get(hint, Help() if hint is Help else None)


__all__ = (
    "Help",
    "Registry",
    "converters",
    "unwrap",
    "element",
    "convertible",
    "supported",
    "construct",
    "convert",
    "zero",
)
