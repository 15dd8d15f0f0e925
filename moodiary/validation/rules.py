"""Validation rules for diary entry input.

Each rule returns a ValidationResult instead of raising, so that
``validate_entry_input`` can collect every failing message.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from moodiary.models import MAX_IMAGES, MAX_TITLE_LENGTH, EntryInput, Mood


class ValidationResult(BaseModel):
    """Outcome of one or more validation rules."""

    valid: bool = Field(..., description="True when every rule passed")
    error: Optional[str] = Field(default=None, description="Message of a single failing rule")
    errors: list[str] = Field(default_factory=list, description="All failing messages")

    model_config = {"frozen": True}

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error, errors=[error])


def validate_title(title: Any) -> ValidationResult:
    """Title must be a string of 1-200 characters after trimming."""
    if not isinstance(title, str) or not title.strip():
        return ValidationResult.fail("Title is required")
    if len(title.strip()) > MAX_TITLE_LENGTH:
        return ValidationResult.fail(f"Title must be {MAX_TITLE_LENGTH} characters or less")
    return ValidationResult.ok()


def validate_mood(mood: Any) -> ValidationResult:
    """Mood must be one of the seven Mood values."""
    if isinstance(mood, Mood) or mood in Mood.values():
        return ValidationResult.ok()
    return ValidationResult.fail(f"Mood must be one of: {', '.join(Mood.values())}")


def validate_images(images: Any) -> ValidationResult:
    """Images must be a list of at most 10 non-empty strings."""
    if not isinstance(images, (list, tuple)):
        return ValidationResult.fail("Images must be a list")
    if len(images) > MAX_IMAGES:
        return ValidationResult.fail(f"Maximum {MAX_IMAGES} images allowed")
    for index, image in enumerate(images):
        if not isinstance(image, str) or not image.strip():
            return ValidationResult.fail(f"Image at index {index} must be a non-empty string")
    return ValidationResult.ok()


def validate_theme(theme: Any) -> ValidationResult:
    """Theme is optional; when given it must be a string."""
    if theme is None or isinstance(theme, str):
        return ValidationResult.ok()
    return ValidationResult.fail("Theme must be a string")


def validate_drawing_url(drawing_url: Any) -> ValidationResult:
    """Drawing URL is optional; when given it must be a non-empty string."""
    if drawing_url is None:
        return ValidationResult.ok()
    if not isinstance(drawing_url, str) or not drawing_url.strip():
        return ValidationResult.fail("Drawing URL must be a non-empty string")
    return ValidationResult.ok()


def parse_entry_date(value: Any) -> Optional[datetime]:
    """Coerce a date, datetime or ISO-8601 string to a datetime.

    Returns:
        The datetime, or None if the value is not a real calendar date.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        try:
            text = value.strip()
            # fromisoformat only accepts a Z suffix from Python 3.11
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def validate_entry_date(value: Any, now: Optional[datetime] = None) -> ValidationResult:
    """Date must be a real calendar date no later than now.

    Args:
        value: Date to check.
        now: Reference time, defaults to the current time in the value's timezone.
            A naive reference is taken as local time when the value is aware.
    """
    parsed = parse_entry_date(value)
    if parsed is None:
        return ValidationResult.fail("Date must be a valid date")
    if now is None:
        now = datetime.now(parsed.tzinfo)
    elif parsed.tzinfo is not None and now.tzinfo is None:
        # Naive reference times are local time
        now = now.astimezone(parsed.tzinfo)
    elif parsed.tzinfo is None and now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    if parsed > now:
        return ValidationResult.fail("Entry date cannot be in the future")
    return ValidationResult.ok()


def validate_entry_input(entry_input: Any, now: Optional[datetime] = None) -> ValidationResult:
    """Run every entry rule and collect all failing messages.

    Args:
        entry_input: An EntryInput or a mapping with the same keys.
        now: Reference time for the date rule.

    Returns:
        ValidationResult whose ``errors`` lists every failure.
    """
    if isinstance(entry_input, EntryInput):
        fields = entry_input.model_dump()
    elif isinstance(entry_input, Mapping):
        fields = dict(entry_input)
    else:
        fields = {}

    images = fields.get("images")
    results = [
        validate_title(fields.get("title")),
        validate_mood(fields.get("mood")),
        validate_images([] if images is None else images),
        validate_entry_date(fields.get("date"), now=now),
        validate_theme(fields.get("theme")),
        validate_drawing_url(fields.get("drawing_url")),
    ]

    errors = [result.error for result in results if not result.valid]
    if errors:
        return ValidationResult(valid=False, errors=errors)
    return ValidationResult.ok()
