"""Entry data models."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


MAX_TITLE_LENGTH = 200
MAX_IMAGES = 10
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

THEME_NAMES = ("pastel-pink", "midnight-blue", "soft-yellow", "mint-green", "cloud-white")
DEFAULT_THEME = "pastel-pink"


class Mood(str, Enum):
    """Mood tag attached to every entry."""

    HAPPY = "happy"
    SAD = "sad"
    PRODUCTIVE = "productive"
    ROMANTIC = "romantic"
    ANXIOUS = "anxious"
    CALM = "calm"
    NEUTRAL = "neutral"

    @classmethod
    def values(cls) -> list[str]:
        """Return the wire values in declaration order."""
        return [mood.value for mood in cls]


MOOD_EMOJIS = {
    Mood.HAPPY: "😊",
    Mood.SAD: "😢",
    Mood.PRODUCTIVE: "💪",
    Mood.ROMANTIC: "💕",
    Mood.ANXIOUS: "😰",
    Mood.CALM: "😌",
    Mood.NEUTRAL: "😐",
}


class EntryInput(BaseModel):
    """Fields a caller submits when saving an entry.

    Deliberately lax: rule checks live in ``moodiary.validation`` so that
    every failing field is reported at once.
    """

    title: Any = Field(default=None, description="Entry title")
    content: Any = Field(default=None, description="Rich content document")
    mood: Any = Field(default=None, description="Mood value")
    images: Optional[list[Any]] = Field(default=None, description="Image URLs")
    drawing_url: Any = Field(default=None, description="Drawing URL")
    theme: Any = Field(default=DEFAULT_THEME, description="Theme identifier")
    date: Any = Field(default=None, description="Entry date")


class Entry(BaseModel):
    """Represents a stored diary entry."""

    id: str = Field(..., description="Store-assigned identifier")
    user_id: str = Field(..., min_length=1, description="Owning user")
    date: datetime = Field(..., description="Entry date")
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH, description="Title")
    content: Any = Field(default=None, description="Rich content document")
    mood: Mood = Field(..., description="Mood tag")
    images: list[str] = Field(default_factory=list, max_length=MAX_IMAGES, description="Image URLs")
    drawing_url: Optional[str] = Field(default=None, description="Drawing URL")
    theme: str = Field(default=DEFAULT_THEME, description="Theme identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {"frozen": True}


class EntrySummary(BaseModel):
    """Short form of an entry used by calendar and dashboard listings."""

    entry_id: str = Field(..., description="Entry identifier")
    date: datetime = Field(..., description="Entry date")
    title: str = Field(..., description="Title")
    mood: Mood = Field(..., description="Mood tag")

    model_config = {"frozen": True}
