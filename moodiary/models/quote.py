"""Quote data models."""

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """A quote shown on the dashboard."""

    id: str = Field(..., min_length=1, description="Quote identifier")
    text: str = Field(..., description="Quote text")
    author: str = Field(default="Unknown", description="Author")
    category: str = Field(default="general", description="Category")

    model_config = {"frozen": True}


class QuoteCard(Quote):
    """A quote paired with the background color it is displayed on."""

    background_color: str = Field(..., description="Hex background color")
