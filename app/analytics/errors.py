# backend/app/analytics/errors.py
"""
Typed failures raised by the analytics engine.

A missing baseline or a zero-length workout is not an error; both have
defined fallbacks. Everything here is something the caller has to decide on.
"""


class AnalyticsError(Exception):
    """Base class for analytics failures."""


class StoreUnavailable(AnalyticsError):
    """
    The store could not answer. Raised instead of returning an empty result
    so an outage never reads as "no data".
    """

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"store unavailable during {operation}: {cause}")


class WorkoutNotFound(AnalyticsError):
    def __init__(self, workout_id):
        self.workout_id = workout_id
        super().__init__(f"workout {workout_id} not found")


class TemplateNotFound(AnalyticsError):
    def __init__(self, template_id):
        self.template_id = template_id
        super().__init__(f"template {template_id} not found")


class ConcurrentCompletionConflict(AnalyticsError):
    """
    The workout already has an end time. Callers may treat this as
    "already done" rather than as a failure.
    """

    def __init__(self, workout_id, ended_at=None):
        self.workout_id = workout_id
        self.ended_at = ended_at
        super().__init__(f"workout {workout_id} is already completed")
