from progression.infrastructure.streak.schemas import StreakData, StreakDisplay, StreakMessage
from progression.infrastructure.streak.streak_tracker import (
    StreakTracker,
    compute_new_streak,
    describe_streak,
    has_session_today,
    streak_message,
)

__all__ = [
    "StreakData",
    "StreakDisplay",
    "StreakMessage",
    "StreakTracker",
    "compute_new_streak",
    "describe_streak",
    "has_session_today",
    "streak_message",
]
