"""
Pennant flag descriptor.

A Flag is the runtime form of one declared flag: its names and metadata (parsed
from an annotation by pennant.tags) plus a binding to the record field it writes
into. The flag never owns the record; it holds (target, attribute, hint) and
writes with setattr for the duration of a parse.

Matching
- short tokens ("-x", "-xyz") match on the first character after the dash.
- long tokens ("--name") match on the whole suffix.

Consumption (parse)
- one occurrence is consumed from the front of a deque of tokens per call.
- short clusters ("-abc") eat one character per call; the rest of the cluster is
  written back to the front of the deque as "-bc" and re-dispatched by the flag set.
- value-bearing flags take the next token verbatim as their value; a value-bearing
  flag inside a cluster is rejected rather than guessed.

Kinds
- bool, str, int, list[T], Help, registered types, and self-converting types
  (`__convert__`). See pennant.conversions.
"""
import re
import typing

from .conversions import Help, converters, convert, element, supported, unwrap
from .faults import *
from .logger import logger
from .utils import Unset, isshort, islong, mirror, ordinal


class Flag:
    """
    Named switch bound to a record field.

    Metadata (read-only)
    - shorts: tuple[str, ...], single characters, declaration order (first is canonical).
    - longs: tuple[str, ...], declaration order (first is canonical).
    - description: str, help text ("" when absent).
    - obligatory: bool, must be specified in every parse.
    - mutexgroup: str, label shared by mutually exclusive flags ("" for none).
    - accumulate: bool, int fields only; each short occurrence adds one.

    State
    - specified: bool, set once the flag has been consumed.

    Equality compares metadata only, so two parses of one annotation are equal.
    """

    __introspectable__ = (
        "shorts",
        "longs",
        "description",
        "obligatory",
        "mutexgroup",
        "accumulate",
    )

    shorts = mirror("shorts")
    longs = mirror("longs")
    description = mirror("description")
    obligatory = mirror("obligatory")
    mutexgroup = mirror("mutexgroup")
    accumulate = mirror("accumulate")

    def __init__(self, *names, description="", obligatory=False, mutexgroup="", accumulate=False):
        """
        Parameters
        - names: "-x" and "--long" spellings, at least one.
        - description, obligatory, mutexgroup, accumulate: see class docstring.

        Raises
        - FlagDefinitionError: no names, or a name that is neither "-x" nor "--long".
        - DuplicateNameError: the same spelling twice.
        - TypeError: non-string names or metadata.
        """
        if not names:
            raise FlagDefinitionError("flag must specify at least one name")

        shorts = []
        longs = []
        for name in names:
            if not isinstance(name, str):
                raise TypeError("flag names must be strings")
            if re.fullmatch(r"--[\w-]+", name, re.ASCII):
                bucket, name = longs, name[2:]
            elif re.fullmatch(r"-\w", name, re.ASCII):
                bucket, name = shorts, name[1:]
            else:
                raise FlagDefinitionError("flag name %r must be a single-character '-x' or a '--long' name" % name)
            if name in bucket:
                raise DuplicateNameError("flag name %r is declared twice" % (("--" if bucket is longs else "-") + name))
            bucket.append(name)

        if not isinstance(description, str):
            raise TypeError("flag 'description' must be a string")
        if not isinstance(mutexgroup, str):
            raise TypeError("flag 'mutexgroup' must be a string")

        self._shorts = tuple(shorts)
        self._longs = tuple(longs)
        self._description = description
        self._obligatory = bool(obligatory)
        self._mutexgroup = mutexgroup
        self._accumulate = bool(accumulate)

        self.specified = False

        self._target = Unset
        self._attribute = Unset
        self._hint = Unset
        self._registry = converters

    @property
    def name(self):
        """
        display name: the first long name, then the first short name.
        """
        if self._longs:
            return "--" + self._longs[0]
        if self._shorts:
            return "-" + self._shorts[0]
        return "<unspecified>"

    @property
    def names(self):
        return tuple("-" + name for name in self._shorts) + tuple("--" + name for name in self._longs)

    # --- binding ---

    def bind(self, target, attribute, hint, /, registry=converters):
        """
        attach the flag to `target.attribute`, whose declared type is `hint`.

        Raises
        - FlagDefinitionError when accumulate is used on a non-int field.
        """
        if self._accumulate and unwrap(hint) is not int:
            raise FlagDefinitionError("flag %r uses 'accumulate' but field %r is not an int" % (self.name, attribute))
        self._target = target
        self._attribute = attribute
        self._hint = hint
        self._registry = registry
        return self

    @property
    def bound(self):
        return self._target is not Unset

    @property
    def attribute(self):
        return self._attribute

    @property
    def hint(self):
        return self._hint

    @property
    def kind(self):
        """
        single-value kind of the bound field (T for list[T]).
        """
        return element(self._hint)

    @property
    def multi(self):
        return typing.get_origin(self._hint) is list

    @property
    def helper(self):
        return self.kind is Help

    @property
    def value(self):
        return getattr(self._target, self._attribute)

    # --- matching ---

    def handles(self, token, /):
        if islong(token):
            return token[2:] in self._longs
        if isshort(token):
            return token[1:2] in self._shorts
        return False

    def needs_extra_value(self, token=Unset, /):
        """
        whether an occurrence takes the following token as its value.

        accumulate flags take no value in short form; without a token the
        answer describes the long form.
        """
        kind = self.kind
        if kind is bool or kind is Help:
            return False
        if self._accumulate and token is not Unset and isshort(token):
            return False
        return True

    # --- consumption ---

    def parse(self, tokens, /, *, index=1):
        """
        consume one occurrence from the front of `tokens` (a deque) and assign it.

        `index` is the 1-based position of the front token, used in messages.
        """
        token = tokens[0]
        extra = self.needs_extra_value(token)
        cluster = isshort(token) and len(token) > 2

        if extra and (len(tokens) < 2 or cluster):
            if cluster:
                hint = "pass '-%s' as its own token followed by a value (for example: -%s <value>)" % (
                    token[1], token[1]
                )
            else:
                hint = "add a value after %r (for example: %s <value>)" % (token, token)
            raise NeedsArgumentError(
                "flag %r at %s position needs an argument" % (self.name, ordinal(index)),
                title="missing argument",
                code=FaultCode.NEEDS_ARGUMENT,
                hint=hint,
                flag=self,
                token=token,
                index=index,
            )

        if self.specified and not self.multi and not self._accumulate:
            raise AlreadySpecifiedError(
                "flag %r at %s position can only be specified once" % (self.name, ordinal(index)),
                title="flag specified twice",
                code=FaultCode.ALREADY_SPECIFIED,
                hint="remove the repeated %r" % self.name,
                flag=self,
                token=token,
                index=index,
            )

        value = ""
        if cluster:
            tokens[0] = "-" + token[2:]
        elif extra:
            tokens.popleft()
            value = tokens.popleft()
        else:
            tokens.popleft()

        self.specified = True
        logger.debug("flag %s consumed %r at position %d", self.name, token, index)
        self._assign(token, value, index)

    def _assign(self, token, value, index):
        if self._target is Unset:
            raise RuntimeError("flag %r is not bound to a field" % self.name)

        if self._accumulate and isshort(token):
            setattr(self._target, self._attribute, (getattr(self._target, self._attribute) or 0) + 1)
            return

        kind = self.kind
        if not supported(kind, self._registry):
            raise UnsupportedTypeError(
                "unsupported flag type %r for flag %r" % (getattr(kind, "__name__", kind), self.name),
                title="unsupported flag type",
                code=FaultCode.UNSUPPORTED_TYPE,
                hint="implement __convert__ on the type or register a converter for it",
                flag=self,
                token=token,
                index=index,
            )

        try:
            convert(kind, value, self._append if self.multi else self._store, self._registry)
        except HelpRequest:
            raise
        except Exception as exception:
            raise ConversionError(
                "invalid value %r for flag %r at %s position" % (value, self.name, ordinal(index)),
                title="invalid value",
                code=FaultCode.CONVERSION_FAILED,
                hint="%s (%s)" % (str(exception) or type(exception).__name__, getattr(kind, "__name__", kind)),
                flag=self,
                token=token,
                value=value,
                index=index,
            ) from exception

    def _store(self, object):
        setattr(self._target, self._attribute, object)

    def _append(self, object):
        if (values := getattr(self._target, self._attribute, None)) is None:
            setattr(self._target, self._attribute, values := [])
        values.append(object)

    # --- representation ---

    def __eq__(self, other):
        if not isinstance(other, Flag):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in self.__introspectable__))

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "flag(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "Flag",
)
