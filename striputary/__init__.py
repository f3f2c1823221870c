"""Record streamed albums and cut them into tagged per-song files."""

__version__ = "0.1.0"