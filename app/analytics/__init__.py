# backend/app/analytics/__init__.py
from .errors import (
    AnalyticsError,
    ConcurrentCompletionConflict,
    StoreUnavailable,
    TemplateNotFound,
    WorkoutNotFound,
)
from .leaderboard import LeaderboardEntry, VolumeRow, rank_leaderboard
from .records import RecordResult, detect_personal_record
from .scoring import CompletionScore, ScoringPolicy, score_workout
from .streaks import StreakSummary, compute_streaks

__all__ = [
    "AnalyticsError",
    "CompletionScore",
    "ConcurrentCompletionConflict",
    "LeaderboardEntry",
    "RecordResult",
    "ScoringPolicy",
    "StoreUnavailable",
    "StreakSummary",
    "TemplateNotFound",
    "VolumeRow",
    "WorkoutNotFound",
    "compute_streaks",
    "detect_personal_record",
    "rank_leaderboard",
    "score_workout",
]
