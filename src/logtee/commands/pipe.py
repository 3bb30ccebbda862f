"""logtee pipe — tee standard input, line by line, into the configured sinks.

    make 2>&1 | logtee --prefix iso --tee build.log pipe --level info
"""

import sys

from logtee.levels import parse_level
from logtee.manager import get_tee


def register(subparsers, parents):
    """Register the 'pipe' subcommand."""
    p = subparsers.add_parser(
        "pipe",
        parents=parents,
        help="Log every line read from stdin",
    )
    p.set_defaults(func=run)


def run(args, stdin=None):
    tee = get_tee()
    try:
        level = parse_level(args.level)
    except ValueError:
        tee.error("pipe: unknown level '{}'.\n", args.level)
        return 2

    source = stdin if stdin is not None else sys.stdin
    count = 0
    for line in source:
        tee.emit(level, line)
        count += 1
    tee.debug("pipe: {} lines.\n", count)
    return 0
