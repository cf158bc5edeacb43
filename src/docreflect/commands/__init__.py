"""CLI subcommands, loaded lazily by :mod:`docreflect.cli`."""
