# backend/app/analytics/service.py
"""
Fetch -> compute -> persist sequences run by the request handlers.

Each multi-step write runs inside store.transaction(), so a failure at any
step leaves the database as it was before the call.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from .errors import ConcurrentCompletionConflict, TemplateNotFound, WorkoutNotFound
from .leaderboard import LEADERBOARD_LIMIT, rank_leaderboard
from .records import REP_PR_MIN_REPS, RecordResult, detect_personal_record
from .scoring import DEFAULT_POLICY, ScoringPolicy, score_workout, workout_duration_minutes
from .store import AnalyticsStore, TemplateExerciseInput
from .streaks import StreakSummary, compute_streaks

logger = logging.getLogger(__name__)

ACTIVITY_LOOKBACK_DAYS = 365


@dataclass(frozen=True)
class LoggedSet:
    workout_set: object
    record: RecordResult

    def to_dict(self):
        return {"set": self.workout_set.to_dict(), **self.record.to_dict()}


@dataclass(frozen=True)
class CompletionResult:
    workout_id: int
    ended_at: datetime
    duration_minutes: float
    calories: int
    badges: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.workout_id,
            "end_time": self.ended_at.isoformat(),
            "duration_minutes": self.duration_minutes,
            "calories_burned": self.calories,
            "badges": list(self.badges),
        }


def log_set(
    store: AnalyticsStore,
    workout_id: int,
    exercise_id: int,
    weight_kg: float,
    reps: int,
    rpe: Optional[float] = None,
    min_reps: int = REP_PR_MIN_REPS,
) -> LoggedSet:
    """
    Insert a set and classify it against the lifter's earlier sets.

    Baselines are read before the insert, with the owner's row locked, in
    the same transaction, so two concurrent sets on the same exercise can't
    both be measured against history that excludes the other.
    """
    with store.transaction():
        user_id = store.fetch_workout_owner(workout_id)
        if user_id is None:
            raise WorkoutNotFound(workout_id)

        store.lock_user(user_id)
        prior_weight = store.fetch_prior_max_weight(user_id, exercise_id)
        prior_reps = store.fetch_prior_max_reps_at_weight(user_id, exercise_id, weight_kg)
        workout_set = store.insert_set(workout_id, exercise_id, weight_kg, reps, rpe)
        record = detect_personal_record(
            weight_kg, reps, prior_weight, prior_reps, min_reps=min_reps
        )

    if record.is_new_max_weight or record.is_new_rep_pr:
        logger.info(
            "personal record user=%s exercise=%s weight=%s reps=%s max_weight=%s rep_pr=%s",
            user_id,
            exercise_id,
            weight_kg,
            reps,
            record.is_new_max_weight,
            record.is_new_rep_pr,
        )
    return LoggedSet(workout_set=workout_set, record=record)


def complete_workout(
    store: AnalyticsStore,
    workout_id: int,
    now: datetime,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> CompletionResult:
    """
    Stamp the end time and calories and award badges, all or nothing.

    Raises ConcurrentCompletionConflict when the workout already has an end
    time, including when another request completed it between our read and
    our write.
    """
    with store.transaction():
        aggregate = store.fetch_workout_aggregate(workout_id)
        if aggregate is None:
            raise WorkoutNotFound(workout_id)
        if aggregate.ended_at is not None:
            raise ConcurrentCompletionConflict(workout_id, aggregate.ended_at)

        duration = workout_duration_minutes(aggregate.started_at, now, policy)
        score = score_workout(
            duration,
            aggregate.total_volume,
            aggregate.set_count,
            aggregate.body_weight_kg,
            policy,
        )

        if not store.persist_workout_completion(workout_id, now, score.calories):
            raise ConcurrentCompletionConflict(workout_id)

        for badge in score.badges:
            store.persist_badge(aggregate.user_id, workout_id, badge)

    logger.info(
        "workout %s completed: %.0f min, volume=%.1f, calories=%s, badges=%s",
        workout_id,
        duration,
        aggregate.total_volume,
        score.calories,
        score.badges,
    )
    return CompletionResult(
        workout_id=workout_id,
        ended_at=now,
        duration_minutes=duration,
        calories=score.calories,
        badges=score.badges,
    )


def user_streaks(
    store: AnalyticsStore,
    user_id: int,
    today: date,
    lookback_days: int = ACTIVITY_LOOKBACK_DAYS,
) -> StreakSummary:
    since = today - timedelta(days=lookback_days)
    return compute_streaks(store.fetch_activity_dates(user_id, since), today)


def leaderboard(store: AnalyticsStore, limit: int = LEADERBOARD_LIMIT):
    return rank_leaderboard(store.fetch_volume_by_user(), limit=limit)


def replace_template_exercises(
    store: AnalyticsStore,
    template_id: int,
    exercises: Sequence[TemplateExerciseInput],
):
    """Swap a template's whole exercise list; the old list survives any failure."""
    with store.transaction():
        if not store.template_exists(template_id):
            raise TemplateNotFound(template_id)
        return store.replace_template_exercises(template_id, exercises)
