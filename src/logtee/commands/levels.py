"""logtee levels — list the level table (built-ins plus --add-level entries)."""

from logtee.manager import get_tee


def register(subparsers, parents):
    """Register the 'levels' subcommand."""
    p = subparsers.add_parser(
        "levels",
        help="List known levels and their prefixes",
    )
    p.set_defaults(func=run)


def format_level_table(table) -> str:
    """Format level table entries in registration order."""
    lines = ["Levels:"]
    for level, prefix in table:
        lines.append(f"  {level:>4}  {prefix!r}")
    return "\n".join(lines)


def run(args):
    table = get_tee().levels
    table.initialize()
    print(format_level_table(table))
    return 0
