"""Streak engine.

Pure functions, no I/O. A streak counts consecutive calendar days with at
least one new entry.
"""

from datetime import date, datetime
from typing import Optional, Union

from moodiary.models import StreakResult, UserProfile

DateLike = Union[date, datetime]


def start_of_day(value: DateLike) -> date:
    """Truncate a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def compute_streak(
    last_entry_date: Optional[DateLike],
    current_date: DateLike,
    current_streak: int,
) -> StreakResult:
    """Calculate the streak after writing an entry dated ``current_date``.

    Time of day is ignored on both dates.

    Args:
        last_entry_date: Date of the user's previous new entry, or None if
            the user has never written.
        current_date: Date of the entry being written.
        current_streak: The user's current streak (>= 0).

    Returns:
        StreakResult with the new streak. An entry on the same day as the
        last one leaves the streak unchanged, even when it is 0.
    """
    if last_entry_date is None:
        return StreakResult(new_streak=1)

    diff_days = (start_of_day(current_date) - start_of_day(last_entry_date)).days

    if diff_days == 0:
        return StreakResult(new_streak=current_streak)
    if diff_days == 1:
        return StreakResult(new_streak=current_streak + 1)
    # Gap of more than a day, or an entry dated before the last one
    return StreakResult(new_streak=1)


def advance_streak(profile: UserProfile, entry_date: datetime) -> dict:
    """Build the profile update produced by a new entry.

    Args:
        profile: The user's profile before the entry.
        entry_date: Date of the new entry.

    Returns:
        Dictionary with ``streak``, ``longest_streak`` and ``last_entry_date``.
    """
    result = compute_streak(profile.last_entry_date, entry_date, profile.streak)
    return {
        "streak": result.new_streak,
        "longest_streak": max(profile.longest_streak, result.new_streak),
        "last_entry_date": entry_date,
    }
