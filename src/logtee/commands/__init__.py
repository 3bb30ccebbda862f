"""logtee subcommands. Each module exports register(subparsers, parents) and run(args)."""
