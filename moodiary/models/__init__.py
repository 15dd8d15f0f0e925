"""Data models for Moodiary."""

from moodiary.models.entry import (
    ALLOWED_IMAGE_TYPES,
    DEFAULT_THEME,
    MAX_IMAGE_SIZE,
    MAX_IMAGES,
    MAX_TITLE_LENGTH,
    MOOD_EMOJIS,
    THEME_NAMES,
    Entry,
    EntryInput,
    EntrySummary,
    Mood,
)
from moodiary.models.quote import Quote, QuoteCard
from moodiary.models.user import StreakResult, UserProfile

__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "DEFAULT_THEME",
    "MAX_IMAGE_SIZE",
    "MAX_IMAGES",
    "MAX_TITLE_LENGTH",
    "MOOD_EMOJIS",
    "THEME_NAMES",
    "Entry",
    "EntryInput",
    "EntrySummary",
    "Mood",
    "Quote",
    "QuoteCard",
    "StreakResult",
    "UserProfile",
]
