# backend/app/analytics/streaks.py
from dataclasses import dataclass
from datetime import date
from typing import Iterable


@dataclass(frozen=True)
class StreakSummary:
    current_streak: int
    max_streak: int

    def to_dict(self):
        return {
            "current_streak": self.current_streak,
            "max_streak": self.max_streak,
        }


def compute_streaks(activity_dates: Iterable[date], today: date) -> StreakSummary:
    """
    Consecutive-day streaks over a user's activity dates.

    Duplicates are collapsed. The running streak only counts as current when
    the last activity was today or yesterday; max_streak is historical and
    never lapses.
    """
    days = sorted(set(activity_dates))
    if not days:
        return StreakSummary(current_streak=0, max_streak=0)

    running = 1
    max_streak = 1
    for prev, day in zip(days, days[1:]):
        if (day - prev).days == 1:
            running += 1
        else:
            running = 1
        max_streak = max(max_streak, running)

    current = running if (today - days[-1]).days <= 1 else 0
    return StreakSummary(current_streak=current, max_streak=max_streak)
