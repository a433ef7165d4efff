"""Frontends for driving the simulation."""

from .cli import CLIGameOfLife

__all__ = ["CLIGameOfLife"]
