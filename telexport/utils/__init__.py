"""Utility functions."""

from .formatting import format_elapsed_time

__all__ = ["format_elapsed_time"]
