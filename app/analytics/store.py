# backend/app/analytics/store.py
"""
Data access for the analytics engine.

AnalyticsStore is the contract the engine is written against;
SqlAlchemyStore implements it on the Flask-SQLAlchemy session. Any database
failure comes out as StoreUnavailable. An empty result is a valid answer
and is returned as None / empty, never raised.
"""
import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import ContextManager, List, Optional, Protocol, Sequence, Set

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .. import db
from ..models.badge import UserBadge
from ..models.template import TemplateExercise, WorkoutTemplate
from ..models.user import User
from ..models.workout import Workout, WorkoutSet
from .errors import StoreUnavailable
from .leaderboard import VolumeRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkoutAggregate:
    workout_id: int
    user_id: int
    started_at: Optional[datetime]
    ended_at: Optional[datetime]
    body_weight_kg: Optional[float]
    total_volume: float
    set_count: int


@dataclass(frozen=True)
class TemplateExerciseInput:
    exercise_id: int
    order_index: int
    target_sets: int
    target_reps: int
    target_weight_kg: Optional[float] = None


class AnalyticsStore(Protocol):
    """Everything the analytics engine reads from or writes to the database."""

    def transaction(self) -> ContextManager:
        """Commit on clean exit, roll back and re-raise on any exception."""
        ...

    def fetch_workout_owner(self, workout_id: int) -> Optional[int]:
        ...

    def lock_user(self, user_id: int) -> None:
        """Hold a row lock on the user until the transaction ends."""
        ...

    def fetch_activity_dates(self, user_id: int, since: date) -> Set[date]:
        ...

    def fetch_prior_max_weight(self, user_id: int, exercise_id: int) -> Optional[float]:
        ...

    def fetch_prior_max_reps_at_weight(
        self, user_id: int, exercise_id: int, min_weight: float
    ) -> Optional[int]:
        ...

    def insert_set(
        self,
        workout_id: int,
        exercise_id: int,
        weight_kg: float,
        reps: int,
        rpe: Optional[float] = None,
    ):
        ...

    def fetch_workout_aggregate(self, workout_id: int) -> Optional[WorkoutAggregate]:
        ...

    def fetch_volume_by_user(self) -> List[VolumeRow]:
        ...

    def persist_badge(self, user_id: int, workout_id: int, badge_name: str) -> None:
        """No-op when the (user, workout, badge) row already exists."""
        ...

    def persist_workout_completion(
        self, workout_id: int, end_time: datetime, calories: int
    ) -> bool:
        """False when the workout was already completed."""
        ...

    def template_exists(self, template_id: int) -> bool:
        ...

    def replace_template_exercises(
        self, template_id: int, exercises: Sequence[TemplateExerciseInput]
    ) -> list:
        ...


def _store_call(operation: str):
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            try:
                return fn(self, *args, **kwargs)
            except IntegrityError:
                raise
            except SQLAlchemyError as exc:
                logger.exception("store failure in %s", operation)
                raise StoreUnavailable(operation, exc) from exc

        return wrapper

    return decorator


class SqlAlchemyStore:
    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            if isinstance(exc, IntegrityError):
                raise
            logger.exception("transaction rolled back")
            raise StoreUnavailable("transaction", exc) from exc
        except Exception:
            self.session.rollback()
            raise

    @_store_call("fetch_workout_owner")
    def fetch_workout_owner(self, workout_id):
        return self.session.execute(
            select(Workout.user_id).where(Workout.id == workout_id)
        ).scalar_one_or_none()

    @_store_call("lock_user")
    def lock_user(self, user_id):
        # FOR UPDATE serializes per user on postgres/mysql; sqlite drops it
        self.session.execute(
            select(User.id).where(User.id == user_id).with_for_update()
        ).scalar_one_or_none()

    @_store_call("fetch_activity_dates")
    def fetch_activity_dates(self, user_id, since):
        since_dt = datetime.combine(since, time.min)
        rows = self.session.execute(
            select(Workout.started_at)
            .join(WorkoutSet, WorkoutSet.workout_id == Workout.id)
            .where(Workout.user_id == user_id, Workout.started_at >= since_dt)
            .distinct()
        ).scalars()
        return {started.date() for started in rows if started is not None}

    @_store_call("fetch_prior_max_weight")
    def fetch_prior_max_weight(self, user_id, exercise_id):
        value = self.session.execute(
            select(func.max(WorkoutSet.weight_kg))
            .join(Workout, WorkoutSet.workout_id == Workout.id)
            .where(WorkoutSet.exercise_id == exercise_id, Workout.user_id == user_id)
        ).scalar()
        return float(value) if value is not None else None

    @_store_call("fetch_prior_max_reps_at_weight")
    def fetch_prior_max_reps_at_weight(self, user_id, exercise_id, min_weight):
        value = self.session.execute(
            select(func.max(WorkoutSet.reps))
            .join(Workout, WorkoutSet.workout_id == Workout.id)
            .where(
                WorkoutSet.exercise_id == exercise_id,
                Workout.user_id == user_id,
                WorkoutSet.weight_kg >= min_weight,
            )
        ).scalar()
        return int(value) if value is not None else None

    @_store_call("insert_set")
    def insert_set(self, workout_id, exercise_id, weight_kg, reps, rpe=None):
        workout_set = WorkoutSet(
            workout_id=workout_id,
            exercise_id=exercise_id,
            weight_kg=weight_kg,
            reps=reps,
            rpe=rpe,
            created_at=datetime.utcnow(),
        )
        self.session.add(workout_set)
        self.session.flush()
        return workout_set

    @_store_call("fetch_workout_aggregate")
    def fetch_workout_aggregate(self, workout_id):
        row = self.session.execute(
            select(
                Workout.id,
                Workout.user_id,
                Workout.started_at,
                Workout.ended_at,
                User.current_weight_kg,
                func.coalesce(func.sum(WorkoutSet.weight_kg * WorkoutSet.reps), 0).label(
                    "volume"
                ),
                func.count(WorkoutSet.id).label("set_count"),
            )
            .join(User, User.id == Workout.user_id)
            .outerjoin(WorkoutSet, WorkoutSet.workout_id == Workout.id)
            .where(Workout.id == workout_id)
            .group_by(
                Workout.id,
                Workout.user_id,
                Workout.started_at,
                Workout.ended_at,
                User.current_weight_kg,
            )
        ).one_or_none()

        if row is None:
            return None

        return WorkoutAggregate(
            workout_id=row.id,
            user_id=row.user_id,
            started_at=row.started_at,
            ended_at=row.ended_at,
            body_weight_kg=float(row.current_weight_kg)
            if row.current_weight_kg is not None
            else None,
            total_volume=float(row.volume or 0),
            set_count=int(row.set_count or 0),
        )

    @_store_call("fetch_volume_by_user")
    def fetch_volume_by_user(self):
        rows = self.session.execute(
            select(
                User.id,
                User.username,
                func.coalesce(func.sum(WorkoutSet.weight_kg * WorkoutSet.reps), 0).label(
                    "volume"
                ),
            )
            .outerjoin(Workout, Workout.user_id == User.id)
            .outerjoin(WorkoutSet, WorkoutSet.workout_id == Workout.id)
            .group_by(User.id, User.username)
        ).all()
        return [
            VolumeRow(user_id=r.id, username=r.username, total_volume=float(r.volume or 0))
            for r in rows
        ]

    @_store_call("persist_badge")
    def persist_badge(self, user_id, workout_id, badge_name):
        table = UserBadge.__table__
        values = {
            "user_id": user_id,
            "workout_id": workout_id,
            "badge_name": badge_name,
            "awarded_at": datetime.utcnow(),
        }
        dialect = self.session.get_bind().dialect.name

        if dialect == "postgresql":
            stmt = pg_insert(table).values(**values).on_conflict_do_nothing()
        elif dialect == "sqlite":
            stmt = sqlite_insert(table).values(**values).on_conflict_do_nothing()
        elif dialect in ("mysql", "mariadb"):
            stmt = table.insert().values(**values).prefix_with("IGNORE")
        else:
            # no native conflict clause: let the unique constraint reject it
            # inside a savepoint so the outer transaction survives
            try:
                with self.session.begin_nested():
                    self.session.execute(table.insert().values(**values))
            except IntegrityError:
                logger.debug(
                    "badge %r already awarded for workout %s", badge_name, workout_id
                )
            return

        self.session.execute(stmt)

    @_store_call("persist_workout_completion")
    def persist_workout_completion(self, workout_id, end_time, calories):
        result = self.session.execute(
            update(Workout)
            .where(Workout.id == workout_id, Workout.ended_at.is_(None))
            .values(ended_at=end_time, calories_burned=calories)
        )
        return result.rowcount == 1

    @_store_call("template_exists")
    def template_exists(self, template_id):
        return (
            self.session.execute(
                select(WorkoutTemplate.id).where(WorkoutTemplate.id == template_id)
            ).scalar_one_or_none()
            is not None
        )

    @_store_call("replace_template_exercises")
    def replace_template_exercises(self, template_id, exercises):
        self.session.execute(
            delete(TemplateExercise).where(TemplateExercise.template_id == template_id)
        )
        rows = [
            TemplateExercise(
                template_id=template_id,
                exercise_id=ex.exercise_id,
                order_index=ex.order_index,
                target_sets=ex.target_sets,
                target_reps=ex.target_reps,
                target_weight_kg=ex.target_weight_kg,
            )
            for ex in exercises
        ]
        self.session.add_all(rows)
        self.session.flush()
        return rows
