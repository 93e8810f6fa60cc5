from typing import Annotated

from rich.pretty import pprint

from pennant import *


class Status:
    all: Annotated[bool, "-a, --all, description='Show everything'"]
    help: Help


class Commands(Verbs):
    status: Annotated[Status, "status"]


class Options:
    server: Annotated[str, "-s, --server, obligatory, description='Server to connect to'"]
    verbose: Annotated[int, "-v, --verbose, accumulate, description='More output'"]
    help: Help
    verbs: Commands


if __name__ == '__main__':
    options = Options()
    pprint(must(options))
    pprint(vars(options))
