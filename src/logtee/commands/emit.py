"""logtee emit — log a single message through the configured Tee.

    logtee --tee app.log emit --level warning "disk almost full"
    logtee emit --level error --errno 13 "open /etc/shadow"
    logtee emit --level fatal "cannot continue"      # exits 1
"""

import argparse

from logtee.levels import FATAL, parse_level
from logtee.manager import get_tee


def register(subparsers, parents):
    """Register the 'emit' subcommand."""
    p = subparsers.add_parser(
        "emit",
        parents=parents,
        help="Log one message at a given level",
        description=(
            "Log one message to every sink whose threshold is at or below\n"
            "the message level. A fatal message makes logtee exit with 1."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("message", nargs="+", help="Message text (words are joined)")
    p.add_argument("--errno", type=int, metavar="N", default=None,
                   help="Append the description of OS error N, perror()-style")
    p.set_defaults(func=run)


def run(args):
    tee = get_tee()
    try:
        level = parse_level(args.level)
    except ValueError:
        tee.error("emit: unknown level '{}'.\n", args.level)
        return 2

    message = " ".join(args.message)
    newline = "" if tee.terminator else "\n"

    if args.errno is not None:
        if level == FATAL:
            tee.pfatal(message, err=args.errno)
        tee.pemit(level, message, err=args.errno)
    else:
        if level == FATAL:
            tee.fatal(message + newline)
        tee.emit(level, message + newline)
    return 0
