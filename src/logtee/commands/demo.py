"""logtee demo — walk through the Tee behavior on stderr.

Replaces whatever sinks are configured with its own, then shows:
  - formatted messages with an epoch prefix
  - one, two and three copies of a line as stderr is teed at rising thresholds
  - silence after reset
  - a perror()-style line
  - a fatal line, after which the process exits with status 1
"""

import os

from logtee.manager import get_tee
from logtee.prefixes import epoch_prefix


def register(subparsers, parents):
    """Register the 'demo' subcommand."""
    p = subparsers.add_parser(
        "demo",
        help="Run the Tee demonstration (ends with a fatal exit)",
    )
    p.add_argument("--log-file", metavar="PATH", default=None,
                   help="Also tee the second half of the demo into PATH")
    p.set_defaults(func=run)


def run(args):
    tee = get_tee()
    tee.reset()

    tee.add_sink_path(None, 0)
    tee.set_prefix_callback(epoch_prefix)

    tee.info("{}, {}!\n", "Hello", "World")
    tee.error("Nooo!\n")
    tee.warning("Hmm...\n")

    tee.add_sink_path(None, 1)
    tee.add_sink_path(None, 2)
    tee.info("Info 2\n")   # 1 copy
    tee.warning("Warn 2\n")  # 2 copies
    tee.error("Err 2\n")   # 3 copies

    tee.reset()
    tee.info("What?\n")    # 0 copies

    tee.add_sink_path(None, 0)
    if args.log_file:
        tee.add_sink_path(args.log_file, 0)

    try:
        os.unlink("/")
    except OSError:
        tee.perror("unlink")

    tee.info("Info 3\n")
    tee.fatal("Fatal\n")
    tee.info("Not reached\n")
