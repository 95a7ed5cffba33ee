"""Browser-facing SQLite viewer/editor backend."""

__version__ = "0.1.0"
