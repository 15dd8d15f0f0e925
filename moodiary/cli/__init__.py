"""CLI commands for Moodiary.

This package provides the command-line interface for writing entries
and reviewing moods, streaks and quotes.
"""

from moodiary.cli.main import cli, main

__all__ = ["cli", "main"]
