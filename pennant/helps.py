"""
Help rendering for flag sets.

A help callback has the shape `help(file, flagset)` and writes text to `file`
(a text stream) or, when `file` is None, to the stderr console.

Templates are jinja2 sources rendered with
- name:    the flag set name (program or verb),
- flags:   the flags in declaration order,
- verbs:   mapping of verb name to nested flag set,
- flagset: the flag set itself.

Each distinct template source is compiled once per process and shared by every
callback using it.

The default help renders DEFAULT_TEMPLATE and aligns its tab-separated cells
into columns with tabulate().
"""
import functools
import threading

import jinja2
from rich.console import Console

from .utils import rename

console = Console(stderr=True)

DEFAULT_TEMPLATE = """\

Usage: {{ name }} [global options] {% if verbs %}<verb> [verb options]{% endif %}

Global options:{% for flag in flags %}
\t{% if flag.shorts %}-{{ flag.shorts[0] }},{% endif %}\t{% if flag.longs %}--{{ flag.longs[0] }}{% endif %}\t{{ flag.description }}{% if flag.obligatory %} (*){% endif %}{% endfor %}

{% if verbs %}Verbs:{% for verbname, verb in verbs | dictsort %}
\t{{ verbname }}:{% for flag in verb.flags %}
\t\t{% if flag.shorts %}-{{ flag.shorts[0] }},{% endif %}\t{% if flag.longs %}--{{ flag.longs[0] }}{% endif %}\t{{ flag.description }}{% if flag.obligatory %} (*){% endif %}{% endfor %}{% endfor %}{% endif %}
"""

_lock = threading.Lock()


@functools.cache
def _compile(source):
    return jinja2.Template(source, keep_trailing_newline=True)


def compile_template(source, /):
    """
    compile a template source, at most once per distinct source.
    """
    if not isinstance(source, str):
        raise TypeError("compile_template() argument must be a string")
    with _lock:
        return _compile(source)


def render(source, flagset, /):
    return compile_template(source).render(
        name=flagset.name,
        flags=flagset.flags,
        verbs=flagset.verbs,
        flagset=flagset,
    )


def tabulate(text, /, *, minwidth=4, padding=1):
    """
    align tab-terminated cells into columns.

    a column is a block of consecutive lines that all have a tab-terminated cell
    at that index; its width is the widest cell plus `padding`, at least
    `minwidth`. the last cell of a line is not part of any column. cells are
    padded with spaces.
    """
    lines = [line.split("\t") for line in text.split("\n")]
    output = []

    def write(start, stop, widths):
        for line in lines[start:stop]:
            output.append("".join(
                cell.ljust(widths[column]) if column < len(widths) else cell
                for column, cell in enumerate(line)
            ))

    def block(start, stop, widths):
        column = len(widths)
        this = start
        while this < stop:
            if column >= len(lines[this]) - 1:
                this += 1
                continue
            write(start, this, widths)
            start = this
            width = minwidth
            while this < stop and column < len(lines[this]) - 1:
                width = max(width, len(lines[this][column]) + padding)
                this += 1
            block(start, this, widths + [width])
            start = this
        write(start, stop, widths)

    block(0, len(lines), [])
    return "\n".join(output)


def _write(file, text):
    if file is None:
        console.print(text, end="", markup=False, highlight=False, soft_wrap=True)
    else:
        file.write(text)


def templated_help(source, /):
    """
    build a help callback rendering `source` (a jinja2 template) as-is.
    """
    compile_template(source)

    @rename("help")
    def help(file, flagset):
        _write(file, render(source, flagset))

    return help


def default_help(file, flagset):
    """
    render DEFAULT_TEMPLATE, align its columns, and write it out.
    """
    _write(file, tabulate(render(DEFAULT_TEMPLATE, flagset)))


__all__ = (
    "DEFAULT_TEMPLATE",
    "compile_template",
    "render",
    "tabulate",
    "templated_help",
    "default_help",
)
