"""reltag - create release tags from the command line."""

__version__ = "0.1.0"
