"""
Process-level convenience entry points.

- parse(record): build a flag set for the record and parse the process arguments
  (sys.argv[1:]) into it. The flag set is returned as an explicit handle; on
  failure the fault carries it in `fault.options["flagset"]` (and HelpRequest in
  `request.flagset`), so callers can still render help.
- print_help(flagset): render the default (or configured) help to stderr.
- must(record): parse, and turn every parse failure into an exit. Help requests
  print help and exit with 0; faults print help plus the rendered fault and exit
  with 1. Definition errors are programming errors and propagate unchanged.

Example
    class Options:
        name: Annotated[str, "-n, --name, obligatory, description='User name'"]
        help: Help

    if __name__ == "__main__":
        options = Options()
        must(options)
        print("hello", options.name)
"""
import os.path
import sys

from .conversions import converters
from .faults import FlagException, HelpRequest, trigger
from .flagset import FlagSet
from .logger import logger
from .utils import Unset, coalesce


def parse(record, args=Unset, /, *, name=Unset, help=Unset, registry=converters):
    """
    Build a FlagSet for `record` and parse `args` (default: sys.argv[1:]).

    Parameters
    - record: the caller-owned record instance.
    - args: Unset | Iterable[str]
    - name: program name (default: basename of sys.argv[0]).
    - help, registry: forwarded to FlagSet.

    Returns
    - the parsed FlagSet.
    """
    flagset = FlagSet(
        coalesce(name, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "program"),
        record,
        help=help,
        registry=registry,
    )
    flagset.parse(sys.argv[1:] if args is Unset else args)
    return flagset


def print_help(flagset, file=None, /):
    """
    render the help of `flagset` to `file` (stderr when None).
    """
    flagset.print_help(file)


def must(record, args=Unset, /, *, name=Unset, help=Unset, registry=converters, colorful=True, fancy=False):
    """
    Like parse(), but a parse that does not succeed ends the process.

    - HelpRequest: help of the requesting flag set (the verb's when given after a
      verb) is printed to stderr; exit status 0.
    - FlagException: help of the failing flag set, then the fault rendered with
      rich (colorful/fancy); exit status 1.
    """
    try:
        return parse(record, args, name=name, help=help, registry=registry)
    except HelpRequest as request:
        logger.debug("help requested for %r", request.flagset.name)
        request.flagset.print_help()
        sys.exit(0)
    except FlagException as fault:
        logger.debug("parse failed: %s", fault)
        if (flagset := fault.options.get("flagset")) is not None:
            flagset.print_help()
        trigger(fault, shell=True, colorful=colorful, fancy=fancy)


__all__ = (
    "parse",
    "print_help",
    "must",
)
