"""planimport command-line interface."""

from planimport import __version__

__all__ = ["__version__"]
