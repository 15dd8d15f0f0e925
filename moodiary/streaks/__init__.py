"""Daily writing streak calculation."""

from moodiary.streaks.engine import advance_streak, compute_streak, start_of_day

__all__ = [
    "advance_streak",
    "compute_streak",
    "start_of_day",
]
