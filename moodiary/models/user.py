"""User profile and streak models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from moodiary.models.entry import DEFAULT_THEME


class UserProfile(BaseModel):
    """Per-user profile document, including streak bookkeeping."""

    id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(default="", description="Display name")
    email: str = Field(default="", description="Email address")
    theme: str = Field(default=DEFAULT_THEME, description="Preferred theme")
    dark_mode: bool = Field(default=False, description="Dark mode flag")
    streak: int = Field(default=0, ge=0, description="Current streak in days")
    longest_streak: int = Field(default=0, ge=0, description="Longest streak ever")
    last_entry_date: Optional[datetime] = Field(
        default=None, description="Date of the last new entry, None if never written"
    )
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")

    model_config = {"frozen": True}


class StreakResult(BaseModel):
    """Outcome of a streak computation."""

    new_streak: int = Field(..., ge=0, description="Streak after the new entry")

    model_config = {"frozen": True}
