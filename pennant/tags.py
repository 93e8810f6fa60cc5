r"""
Pennant annotation grammar.

One annotation string declares one flag:

    "-n, --name, description='User name', obligatory"

Tokens (comma-separated, surrounding whitespace ignored)
- "-x"                 short name x (exactly one character)
- "--name"             long name (ASCII word characters and dashes)
- "accumulate"         int fields count short occurrences instead of taking a value
- "obligatory"         the flag must be specified
- "description='...'"  help text; backslash escapes are honored (\' and \\)
- "mutexgroup='...'"   mutual-exclusion label

Tokens are consumed left to right with one anchored pattern whose alternatives
are tried in order (dash flag, bare word, quoted key/value), each followed by a
comma or the end of the string. Repeated name tokens accumulate in declaration
order; the first one is canonical for display.

Errors are raised as TagSyntaxError (a FlagDefinitionError, hence a ValueError)
carrying the whole annotation and the remainder that failed to parse.
"""
import functools
import re

from .faults import TagSyntaxError
from .flags import Flag

_FLAG_PATTERN = r"--?[\w-]+"
_BOOL_OPTION_PATTERN = r"[\w-]+"
_QUOTED_STRING_PATTERN = r"'((?:\\.|[^'])+)'"
_VALUE_OPTION_PATTERN = r"[\w-]+=" + _QUOTED_STRING_PATTERN

_OPTION = re.compile(
    r"(%s)(?:,|$)" % "|".join((_FLAG_PATTERN, _BOOL_OPTION_PATTERN, _VALUE_OPTION_PATTERN)),
    re.ASCII,
)


def _unescape(value):
    return re.sub(r"\\(.)", r"\1", value)


@functools.cache
def _scan(tag):
    """
    split an annotation into (names, options) or raise TagSyntaxError.

    cached per annotation string: the result is immutable and flags are built
    fresh from it on every call.
    """
    names = []
    options = {}
    remainder = tag
    while remainder := remainder.strip():
        if not (match := _OPTION.match(remainder)):
            raise TagSyntaxError(
                "could not find a valid flag definition at the beginning of %r" % remainder,
                tag=tag,
                remainder=remainder,
            )
        option = match[1]
        remainder = remainder[match.end():]

        if option.startswith("--"):
            if not re.fullmatch(r"--[\w-]+", option, re.ASCII):
                raise TagSyntaxError(
                    "long name %r must not be empty" % option,
                    tag=tag,
                    remainder=option + remainder,
                )
            names.append(option)
        elif option.startswith("-"):
            if len(option) != 2:
                raise TagSyntaxError(
                    "short name %r must be a single character" % option,
                    tag=tag,
                    remainder=option + remainder,
                )
            names.append(option)
        elif match[2] is not None:
            key = option[:option.index("=")]
            if key not in ("description", "mutexgroup"):
                raise TagSyntaxError("unknown option %r" % key, tag=tag, remainder=option + remainder)
            options[key] = _unescape(match[2])
        elif option in ("accumulate", "obligatory"):
            options[option] = True
        else:
            raise TagSyntaxError("unknown option %r" % option, tag=tag, remainder=option + remainder)

    if not names:
        raise TagSyntaxError("flag definition %r does not declare any name" % tag, tag=tag)

    return tuple(names), tuple(options.items())


def parse_tag(tag, /):
    """
    Turn one annotation string into an unbound Flag.

    Raises
    - TypeError: tag is not a string.
    - TagSyntaxError: unknown option, malformed token, multi-character short
      name, or no name at all.
    - DuplicateNameError: the same name declared twice in one tag.
    """
    if not isinstance(tag, str):
        raise TypeError("parse_tag() argument must be a string")
    names, options = _scan(tag)
    return Flag(*names, **dict(options))


__all__ = (
    "parse_tag",
)
