"""Entry input validation."""

from moodiary.validation.rules import (
    ValidationResult,
    parse_entry_date,
    validate_drawing_url,
    validate_entry_date,
    validate_entry_input,
    validate_images,
    validate_mood,
    validate_theme,
    validate_title,
)

__all__ = [
    "ValidationResult",
    "parse_entry_date",
    "validate_drawing_url",
    "validate_entry_date",
    "validate_entry_input",
    "validate_images",
    "validate_mood",
    "validate_theme",
    "validate_title",
]
