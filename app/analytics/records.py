# backend/app/analytics/records.py
from dataclasses import dataclass
from typing import Optional

REP_PR_MIN_REPS = 5


@dataclass(frozen=True)
class RecordResult:
    is_new_max_weight: bool
    is_new_rep_pr: bool

    def to_dict(self):
        return {
            "is_new_max_weight": self.is_new_max_weight,
            "is_new_rep_pr": self.is_new_rep_pr,
        }


def detect_personal_record(
    weight_kg: float,
    reps: int,
    prior_max_weight: Optional[float],
    prior_max_reps: Optional[int],
    min_reps: int = REP_PR_MIN_REPS,
) -> RecordResult:
    """
    Classify a new set against the user's history on the same exercise.

    prior_max_weight is the heaviest earlier set at any rep count;
    prior_max_reps is the most reps done earlier at weight >= weight_kg.
    Both must exclude the set being classified. None means no history.

    A rep record is only reported when the weight is not a record, and only
    above min_reps.
    """
    prior_weight = prior_max_weight or 0.0
    prior_reps = prior_max_reps or 0

    is_new_max_weight = weight_kg > prior_weight
    is_new_rep_pr = (
        not is_new_max_weight
        and reps > prior_reps
        and reps > min_reps
    )
    return RecordResult(
        is_new_max_weight=is_new_max_weight,
        is_new_rep_pr=is_new_rep_pr,
    )
