"""Typer command-line host."""

from .app import app

__all__ = ["app"]
