"""Shared output formatting for the CLI."""

from .format import format_response, render_cli

__all__ = ["format_response", "render_cli"]
