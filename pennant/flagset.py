"""
Pennant flag sets: records in, populated fields out.

What this module provides
- Verbs: base class of a record-of-records. Each of its fields is one verb whose
  own record is parsed by a nested FlagSet.
- FlagSet: the flags discovered on one record (plus its verbs), the argument
  consumption loop, and the obligatory/mutex checks.

Declaring a record
    class Status:
        all: Annotated[bool, "-a, --all, description='Show everything'"]

    class Commands(Verbs):
        status: Annotated[Status, "status"]

    class Options:
        server: Annotated[str, "-s, --server, obligatory, description='Server to connect to'"]
        verbose: Annotated[int, "-v, --verbose, accumulate"]
        help: Help
        verbs: Commands

    options = Options()
    FlagSet("tool", options).parse(["-s", "example.org", "-vv", "status", "--all"])

Discovery rules
- fields annotated as Annotated[T, "<tag>"] become flags (grammar in pennant.tags).
- a Help field without a tag becomes "-h, --help".
- one field typed with a Verbs subclass declares the verbs; verb names come from
  the string in Annotated[Record, "<name>"] or fall back to the field name.
- other fields are left alone; unset flag fields get a zero value.

Parsing
- tokens not starting with '-' select a verb (or fail when there are no verbs);
  the rest of the tokens belong to that verb and the loop stops.
- other tokens go to the first declared flag that handles them.
- every fault is raised at once; no partial recovery.
- after the loop: obligatory flags, then mutex groups.
- the help flag raises HelpRequest, which skips both checks.
"""
import copy
import difflib
import re
import typing
from collections import defaultdict, deque
from types import MappingProxyType

from .conversions import Help, converters, zero
from .faults import *
from .helps import default_help
from .logger import logger
from .tags import parse_tag
from .utils import Unset, coalesce, ordinal

_HELP_TAG = "-h, --help, description='Show this help'"


class Verbs:
    """
    Base class of the verbs field.

    Subclass it and declare one field per verb; after a parse, `selected` holds
    the name of the verb given on the command line (None when no verb was given).
    """
    selected = None


def _annotation(hint):
    """
    split a type hint into (type, tag); tag is Unset when no string metadata is present.
    """
    if typing.get_origin(hint) is typing.Annotated:
        hint, *metadata = typing.get_args(hint)
        return hint, next((item for item in metadata if isinstance(item, str)), Unset)
    return hint, Unset


def _fields(kind):
    """
    yield (attribute, hint) pairs of a record class in declaration order.
    """
    for attribute, hint in typing.get_type_hints(kind, include_extras=True).items():
        if typing.get_origin(hint) is typing.ClassVar:
            continue
        yield attribute, hint


class FlagSet:
    """
    Flags and verbs built from one record instance.

    Attributes
    - name: program or verb display name.
    - record: the caller-owned record the flags write into.
    - flags: tuple[Flag, ...] in declaration order.
    - verbs: read-only mapping of verb name to nested FlagSet.
    - help: callback(file, flagset) rendering help; replaceable.
    - selected: the verb chosen by the last parse, or None.

    Lifecycle
    - built once per record, parsed once, then discarded.
    """

    def __init__(self, name, record, /, *, help=Unset, registry=converters):
        """
        Raises
        - TagSyntaxError: an annotation does not follow the grammar.
        - DuplicateNameError: two flags (or two verbs) share a name.
        - FlagDefinitionError: more than one verbs field, bad verb name,
          accumulate on a non-int field.
        """
        if not isinstance(name, str):
            raise TypeError("flag set name must be a string")

        self._name = name
        self._record = record
        self._flags = []
        self._verbs = {}
        self._holder = Unset
        self._parsed = False

        self.help = coalesce(help, default_help)
        self.selected = None

        for attribute, hint in _fields(type(record)):
            hint, tag = _annotation(hint)

            if isinstance(hint, type) and issubclass(hint, Verbs):
                self._mount(attribute, hint, registry)
                continue

            if hint is Help and tag is Unset:
                tag = _HELP_TAG
            if tag is Unset:
                continue

            flag = parse_tag(tag)
            self._prepare(attribute, hint)
            self._flags.append(flag.bind(record, attribute, hint, registry))

        seen = {}
        for flag in self._flags:
            for spelling in flag.names:
                if (other := seen.setdefault(spelling, flag)) is not flag:
                    raise DuplicateNameError("flag name %r is declared by both field %r and field %r" % (
                        spelling, other.attribute, flag.attribute
                    ))

        logger.debug("flag set %r built with %d flags and %d verbs", name, len(self._flags), len(self._verbs))

    def _prepare(self, attribute, hint):
        """
        give an unset field its zero value; copy class-level list defaults so
        appends stay on this record.
        """
        try:
            value = getattr(self._record, attribute)
        except AttributeError:
            setattr(self._record, attribute, zero(hint))
            return
        if typing.get_origin(hint) is list and value is getattr(type(self._record), attribute, Unset):
            setattr(self._record, attribute, list(value))

    def _mount(self, attribute, kind, registry):
        if self._holder is not Unset:
            raise FlagDefinitionError("record %r declares more than one verbs field" % type(self._record).__name__)

        if (holder := getattr(self._record, attribute, None)) is None:
            setattr(self._record, attribute, holder := kind())
        self._holder = holder

        for field, hint in _fields(kind):
            hint, name = _annotation(hint)
            name = coalesce(name, field)
            if not re.fullmatch(r"[\w][\w-]*", name, re.ASCII):
                raise FlagDefinitionError("verb name %r must be a word and cannot start with '-'" % name)
            if name in self._verbs:
                raise DuplicateNameError("verb name %r is declared twice" % name)
            if (record := getattr(holder, field, None)) is None:
                setattr(holder, field, record := hint())
            self._verbs[name] = FlagSet(name, record, help=self.help, registry=registry)

    # --- introspection ---

    @property
    def name(self):
        return self._name

    @property
    def record(self):
        return self._record

    @property
    def flags(self):
        return tuple(self._flags)

    @property
    def verbs(self):
        return MappingProxyType(self._verbs)

    @property
    def helpflag(self):
        return next((flag for flag in self._flags if flag.helper), None)

    def flag(self, name, /):
        """
        look up a flag by one of its spellings ("-x" or "--long").
        """
        for flag in self._flags:
            if name in flag.names:
                return flag
        raise KeyError(name)

    # --- parsing ---

    def parse(self, args, /, *, index=1):
        """
        consume `args` (an iterable of strings) into the record.

        `index` is the 1-based position of the first token, used in messages.

        Raises
        - HelpRequest: the help flag was given (flagset points to the owner).
        - FlagException subclasses: see pennant.faults.
        - RuntimeError: the flag set was parsed before.
        """
        if self._parsed:
            raise RuntimeError("flag set %r was already parsed" % self._name)
        self._parsed = True

        tokens = deque(args)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        try:
            self._consume(tokens, index)
            self._check()
        except HelpRequest as request:
            if request.flagset is None:
                request.flagset = self
            raise
        except FlagException as fault:
            if "flagset" in fault.options:
                raise
            raise copy.replace(fault, flagset=self) from fault.__cause__

    def _consume(self, tokens, index):
        total = len(tokens)
        while tokens:
            token = tokens[0]
            position = index + total - len(tokens)

            if not token.startswith("-"):
                self._dispatch(tokens, position)
                return

            for flag in self._flags:
                if flag.handles(token):
                    break
            else:
                spellings = [spelling for flag in self._flags for spelling in flag.names]
                suggestions = difflib.get_close_matches(token, spellings, 5)
                try:
                    hint = "did you mean %r?" % suggestions[0]
                except IndexError:
                    hint = "known flags: %s" % (", ".join(spellings) or "none")
                raise UnknownFlagError(
                    "unknown flag %r at %s position" % (token, ordinal(position)),
                    title="unknown flag",
                    code=FaultCode.UNKNOWN_FLAG,
                    hint=hint,
                    token=token,
                    index=position,
                    suggestions=suggestions,
                )

            flag.parse(tokens, index=position)

    def _dispatch(self, tokens, position):
        token = tokens[0]

        if not self._verbs:
            raise UnexpectedArgumentError(
                "unexpected argument %r at %s position" % (token, ordinal(position)),
                title="unexpected argument",
                code=FaultCode.UNEXPECTED_ARGUMENT,
                hint="%r takes flags only; values go right after the flag that needs them" % self._name,
                token=token,
                index=position,
            )

        try:
            verb = self._verbs[token]
        except KeyError:
            suggestions = difflib.get_close_matches(token, self._verbs.keys(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "known verbs: %s" % ", ".join(self._verbs)
            raise UnknownVerbError(
                "unknown verb %r at %s position" % (token, ordinal(position)),
                title="unknown verb",
                code=FaultCode.UNKNOWN_VERB,
                hint=hint,
                token=token,
                index=position,
                suggestions=suggestions,
            ) from None

        tokens.popleft()
        self.selected = self._holder.selected = token
        logger.debug("flag set %r dispatching to verb %r", self._name, token)
        verb.parse(tokens, index=position + 1)

    def _check(self):
        for flag in self._flags:
            if flag.obligatory and not flag.specified:
                raise ObligatoryFlagError(
                    "flag %r is obligatory" % flag.name,
                    title="missing obligatory flag",
                    code=FaultCode.OBLIGATORY_FLAG,
                    hint="add %s%s" % (flag.name, " <value>" if flag.needs_extra_value() else ""),
                    flag=flag,
                )

        groups = defaultdict(list)
        for flag in self._flags:
            if flag.mutexgroup and flag.specified:
                groups[flag.mutexgroup].append(flag)

        for group, flags in groups.items():
            if len(flags) > 1:
                raise MutexConflictError(
                    "flags %s are mutually exclusive (mutex group %r)" % (
                        ", ".join(repr(flag.name) for flag in flags), group
                    ),
                    title="mutually exclusive flags",
                    code=FaultCode.MUTEX_CONFLICT,
                    hint="keep only one of %s" % ", ".join(flag.name for flag in flags),
                    group=group,
                    flags=tuple(flags),
                )

    # --- help & representation ---

    def print_help(self, file=None, /):
        """
        render help through the help callback (to stderr when file is None).
        """
        self.help(file, self)

    def __rich_repr__(self):
        yield "name", self._name
        yield "flags", self.flags
        yield "verbs", dict(self._verbs)

    def __repr__(self):
        return "flagset(name=%r, flags=%r, verbs=%r)" % (self._name, self.flags, tuple(self._verbs))


__all__ = (
    "Verbs",
    "FlagSet",
)
