"""Main CLI entry point for logtee.

Implements a two-pass argument parser:
  1. First pass: extract global flags (--tee, --prefix, --add-level, ...)
     and build the process-wide TeeLogger from them plus config files
  2. Second pass: dispatch to subcommand with shared parent args

Global flags can appear before OR after the subcommand:
  logtee --tee app.log:1 emit hello      # works
  logtee emit hello --tee app.log:1      # also works

Subcommands self-register via register(subparsers, parents) convention.
"""

import argparse
import sys

from logtee._version import BASE_VERSION, VERSION
from logtee.errors import InvalidConfiguration


# ---------------------------------------------------------------------------
# Global flags (can precede or follow the subcommand)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--tee": {"aliases": ["-t"], "action": "append", "dest": "sinks",
              "metavar": "PATH[:LEVEL]",
              "help": "Add a sink ('-' = stdout, empty = stderr); repeatable"},
    "--prefix": {"metavar": "NAME", "default": None,
                 "help": "Line prefix provider: epoch, iso, pid"},
    "--add-level": {"action": "append", "dest": "levels",
                    "metavar": "LEVEL:PREFIX",
                    "help": "Register an extra level prefix; repeatable"},
    "--line-max": {"type": int, "metavar": "N", "default": None,
                   "help": "Maximum formatted line length (default: 2048)"},
    "--config": {"metavar": "PATH", "default": None,
                 "help": "Config file (default: nearest .logtee.json)"},
    "--dump": {"action": "store_true", "default": False,
               "help": "Print logger state to stderr before running"},
}

# Used when neither the command line nor a config file names a sink
DEFAULT_SINKS = [{"path": None, "level": 0}]


def _add_flags(parser, flags):
    for flag, kwargs in flags.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        parser.add_argument(flag, *kwargs.get("aliases", []), **kw)


def _extract_global_flags(argv):
    """Two-pass parse: pull global flags from anywhere in argv.

    Returns (global_namespace, remaining_argv).
    """
    global_parser = argparse.ArgumentParser(add_help=False)
    _add_flags(global_parser, GLOBAL_FLAGS)
    global_args, remaining = global_parser.parse_known_args(argv)
    return global_args, remaining


# ---------------------------------------------------------------------------
# Shared parent parser (inherited by message-producing subcommands)
# ---------------------------------------------------------------------------
def _build_common_parser():
    """Build the shared argument parser for message flags."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--level", "-l", metavar="LEVEL", default="info",
                        help="Message level: debug, info, warning, error, "
                             "fatal or any integer (default: info)")
    return common


# ---------------------------------------------------------------------------
# Subcommand discovery and registration
# ---------------------------------------------------------------------------
def _discover_commands():
    """Import and return all command modules.

    Each module in logtee.commands must export:
      register(subparsers, parents) — add itself to the subparser
      run(args) — execute the command
    """
    from logtee.commands import demo, emit, levels, pipe
    return [emit, pipe, levels, demo]


def _build_parser(commands, common_parser):
    """Build the main argparse parser with subcommand dispatch."""
    parser = argparse.ArgumentParser(
        prog="logtee",
        description="logtee — tee leveled log lines to thresholded sinks",
        epilog=(
            "Run 'logtee <command> --help' for details on a specific command.\n"
            "\n"
            "Global flags (--tee, --prefix, --add-level, ...) can appear\n"
            "before or after the subcommand."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"logtee {BASE_VERSION} ({VERSION})",
    )

    # Add global flags to main parser too (for --help display)
    _add_flags(parser, GLOBAL_FLAGS)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_module in commands:
        cmd_module.register(subparsers, parents=[common_parser])

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for logtee CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success, 1 = fatal message logged, 2 = bad config).
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pass 1: extract global flags from anywhere in the arg list
    global_args, remaining = _extract_global_flags(argv)

    from logtee.config import configure_tee, resolve_config
    cfg = resolve_config(global_args)
    if not cfg.get("sinks"):
        cfg["sinks"] = DEFAULT_SINKS
    try:
        tee = configure_tee(cfg)
    except InvalidConfiguration as e:
        print(f"logtee: {e}", file=sys.stderr)
        return 2

    if global_args.dump:
        tee.dump()

    # Pass 2: parse subcommand + shared/specific args
    common_parser = _build_common_parser()
    commands = _discover_commands()
    parser = _build_parser(commands, common_parser)

    if not remaining:
        if not global_args.dump:
            parser.print_help()
        return 0

    args = parser.parse_args(remaining)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    # Merge global args into the namespace for convenience
    for key, value in vars(global_args).items():
        if key not in vars(args) or getattr(args, key) is None:
            setattr(args, key, value)

    # Dispatch
    try:
        return args.func(args) or 0
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())
