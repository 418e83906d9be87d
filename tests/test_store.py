"""
SqlAlchemyStore against an in-memory sqlite database.
"""
from datetime import date, timedelta

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app import db
from app.analytics import service
from app.analytics.errors import ConcurrentCompletionConflict, StoreUnavailable
from app.analytics.store import SqlAlchemyStore, TemplateExerciseInput
from app.models.badge import UserBadge
from app.models.exercise import Exercise
from app.models.template import TemplateExercise, WorkoutTemplate
from app.models.user import User
from app.models.workout import Workout, WorkoutSet


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def seeded(ctx, now):
    alice = User(email="alice@example.com", username="alice", password_hash="x", current_weight_kg=80)
    bob = User(email="bob@example.com", username="bob", password_hash="x")
    squat = Exercise(name="Back Squat")
    bench = Exercise(name="Bench Press")
    db.session.add_all([alice, bob, squat, bench])
    db.session.flush()

    workout = Workout(user_id=alice.id, name="Legs", started_at=now - timedelta(minutes=60))
    empty = Workout(user_id=bob.id, name="Rest", started_at=now - timedelta(minutes=45))
    db.session.add_all([workout, empty])
    db.session.commit()

    return {
        "alice": alice.id,
        "bob": bob.id,
        "squat": squat.id,
        "bench": bench.id,
        "workout": workout.id,
        "empty": empty.id,
    }


@pytest.fixture
def store(ctx):
    return SqlAlchemyStore()


def add_set(workout_id, exercise_id, weight_kg, reps):
    db.session.add(
        WorkoutSet(workout_id=workout_id, exercise_id=exercise_id, weight_kg=weight_kg, reps=reps)
    )
    db.session.commit()


# =============================================================================
# Reads
# =============================================================================


def test_baselines_absent_without_history(store, seeded):
    assert store.fetch_prior_max_weight(seeded["alice"], seeded["squat"]) is None
    assert store.fetch_prior_max_reps_at_weight(seeded["alice"], seeded["squat"], 50) is None


def test_baselines(store, seeded):
    add_set(seeded["workout"], seeded["squat"], 100.0, 3)
    add_set(seeded["workout"], seeded["squat"], 90.0, 6)
    add_set(seeded["workout"], seeded["squat"], 60.0, 15)
    add_set(seeded["workout"], seeded["bench"], 120.0, 20)

    assert store.fetch_prior_max_weight(seeded["alice"], seeded["squat"]) == 100.0
    assert store.fetch_prior_max_reps_at_weight(seeded["alice"], seeded["squat"], 90.0) == 6
    assert store.fetch_prior_max_reps_at_weight(seeded["alice"], seeded["squat"], 95.0) == 3
    assert store.fetch_prior_max_reps_at_weight(seeded["bob"], seeded["squat"], 0) is None


def test_workout_aggregate_coalesces_empty_workout(store, seeded):
    aggregate = store.fetch_workout_aggregate(seeded["empty"])
    assert aggregate.total_volume == 0.0
    assert aggregate.set_count == 0
    assert aggregate.body_weight_kg is None
    assert aggregate.ended_at is None


def test_workout_aggregate(store, seeded):
    add_set(seeded["workout"], seeded["squat"], 100.0, 5)
    add_set(seeded["workout"], seeded["bench"], 62.5, 8)

    aggregate = store.fetch_workout_aggregate(seeded["workout"])
    assert aggregate.user_id == seeded["alice"]
    assert aggregate.total_volume == pytest.approx(1000.0)
    assert aggregate.set_count == 2
    assert aggregate.body_weight_kg == 80.0


def test_workout_aggregate_missing(store, seeded):
    assert store.fetch_workout_aggregate(9999) is None


def test_activity_dates_only_count_workouts_with_sets(store, seeded, now):
    add_set(seeded["workout"], seeded["squat"], 100.0, 5)
    old = Workout(user_id=seeded["alice"], started_at=now - timedelta(days=3))
    db.session.add(old)
    db.session.commit()

    dates = store.fetch_activity_dates(seeded["alice"], now.date() - timedelta(days=365))
    assert dates == {(now - timedelta(minutes=60)).date()}


def test_volume_by_user_includes_everyone(store, seeded):
    add_set(seeded["workout"], seeded["squat"], 100.0, 5)
    volumes = {row.username: row.total_volume for row in store.fetch_volume_by_user()}
    assert volumes == {"alice": 500.0, "bob": 0.0}


# =============================================================================
# Writes
# =============================================================================


def test_badge_issued_twice_is_stored_once(store, seeded):
    with store.transaction():
        store.persist_badge(seeded["alice"], seeded["workout"], "Titan Volume")
    with store.transaction():
        store.persist_badge(seeded["alice"], seeded["workout"], "Titan Volume")

    rows = UserBadge.query.filter_by(user_id=seeded["alice"], workout_id=seeded["workout"]).all()
    assert [r.badge_name for r in rows] == ["Titan Volume"]


def test_completion_update_is_conditional(store, seeded, now):
    with store.transaction():
        assert store.persist_workout_completion(seeded["workout"], now, 300) is True
    with store.transaction():
        assert store.persist_workout_completion(seeded["workout"], now + timedelta(hours=1), 999) is False

    workout = db.session.get(Workout, seeded["workout"])
    assert workout.ended_at == now
    assert workout.calories_burned == 300


def test_complete_workout_end_to_end(store, seeded, now):
    for _ in range(20):
        add_set(seeded["workout"], seeded["squat"], 100.0, 5)  # 10000 kg, 20 sets

    result = service.complete_workout(store, seeded["workout"], now)
    assert result.badges == ["Titan Volume", "Volume Warrior"]

    with pytest.raises(ConcurrentCompletionConflict):
        service.complete_workout(store, seeded["workout"], now + timedelta(minutes=5))

    assert UserBadge.query.filter_by(workout_id=seeded["workout"]).count() == 2
    workout = db.session.get(Workout, seeded["workout"])
    assert workout.calories_burned == result.calories
    assert workout.ended_at == now


def test_log_set_sees_only_earlier_sets(store, seeded):
    first = service.log_set(store, seeded["workout"], seeded["squat"], 100.0, 5)
    second = service.log_set(store, seeded["workout"], seeded["squat"], 100.0, 5)
    assert first.record.is_new_max_weight is True
    assert second.record.is_new_max_weight is False
    assert WorkoutSet.query.count() == 2


# =============================================================================
# Templates
# =============================================================================


def make_template(user_id, exercise_id):
    template = WorkoutTemplate(user_id=user_id, name="5x5")
    db.session.add(template)
    db.session.flush()
    db.session.add(
        TemplateExercise(
            template_id=template.id,
            exercise_id=exercise_id,
            order_index=0,
            target_sets=5,
            target_reps=5,
        )
    )
    db.session.commit()
    return template.id


def test_replace_template_exercises(store, seeded):
    template_id = make_template(seeded["alice"], seeded["squat"])
    service.replace_template_exercises(
        store,
        template_id,
        [
            TemplateExerciseInput(seeded["bench"], 0, 3, 8, 60.0),
            TemplateExerciseInput(seeded["squat"], 1, 3, 10),
        ],
    )
    rows = (
        TemplateExercise.query.filter_by(template_id=template_id)
        .order_by(TemplateExercise.order_index)
        .all()
    )
    assert [(r.exercise_id, r.target_reps) for r in rows] == [
        (seeded["bench"], 8),
        (seeded["squat"], 10),
    ]


def test_failed_replacement_keeps_previous_list(store, seeded):
    template_id = make_template(seeded["alice"], seeded["squat"])
    broken = TemplateExerciseInput(seeded["bench"], 0, None, 8)

    with pytest.raises(IntegrityError):
        service.replace_template_exercises(store, template_id, [broken])

    rows = TemplateExercise.query.filter_by(template_id=template_id).all()
    assert [(r.exercise_id, r.target_sets) for r in rows] == [(seeded["squat"], 5)]


# =============================================================================
# Failures
# =============================================================================


class UnreachableSession:
    def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("server has gone away"))

    def rollback(self):
        pass


def test_database_errors_become_store_unavailable(seeded):
    store = SqlAlchemyStore(session=UnreachableSession())

    with pytest.raises(StoreUnavailable) as excinfo:
        store.fetch_activity_dates(seeded["alice"], date(2025, 1, 1))
    assert excinfo.value.operation == "fetch_activity_dates"
    assert isinstance(excinfo.value.cause, OperationalError)
