"""Command line interfaces for smorse."""

from .smorse_cli import main

__all__ = ["main"]
