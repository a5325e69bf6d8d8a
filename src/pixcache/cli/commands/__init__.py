"""CLI subcommands that render Rich tables."""
