"""Personal to-do list on the command line, backed by a local SQLite file."""

__version__ = "0.1.0"
