"""Command-line interface for humidi."""

from .main import cli

__all__ = ["cli"]
