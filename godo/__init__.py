"""godo: a command line todo client and server rolled together."""

__version__ = "1.0.0"
