"""Moodiary - a mood-tagged personal diary with daily writing streaks."""

__version__ = "0.1.0"
