# backend/app/analytics/scoring.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

BADGE_TITAN_VOLUME = "Titan Volume"
BADGE_HEAVY_LIFTER = "Heavy Lifter"
BADGE_MARATHONER = "Marathoner"
BADGE_SPEED_DEMON = "Speed Demon"
BADGE_VOLUME_WARRIOR = "Volume Warrior"


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Constants behind the calorie estimate and badge rules.
    Built from the ANALYTICS_* config keys by from_config().
    """
    default_body_weight_kg: float = 75.0
    default_duration_minutes: float = 60.0
    fallback_intensity: float = 1.0
    met_base: float = 3.0
    met_cap: float = 8.0

    titan_volume_kg: float = 10000.0
    heavy_lifter_volume_kg: float = 5000.0
    marathoner_minutes: float = 90.0
    speed_demon_minutes: float = 30.0
    speed_demon_volume_kg: float = 2000.0
    volume_warrior_sets: int = 20

    @classmethod
    def from_config(cls, config) -> "ScoringPolicy":
        return cls(
            default_body_weight_kg=float(
                config.get("ANALYTICS_DEFAULT_BODY_WEIGHT_KG", cls.default_body_weight_kg)
            ),
            default_duration_minutes=float(
                config.get(
                    "ANALYTICS_DEFAULT_DURATION_MINUTES", cls.default_duration_minutes
                )
            ),
        )


DEFAULT_POLICY = ScoringPolicy()


@dataclass(frozen=True)
class CompletionScore:
    duration_minutes: float
    met: float
    calories: int
    badges: List[str] = field(default_factory=list)


def workout_duration_minutes(
    started_at: Optional[datetime],
    now: datetime,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> float:
    """Whole minutes elapsed; the policy default when there is no start time."""
    if started_at is None:
        return policy.default_duration_minutes
    elapsed = int((now - started_at).total_seconds() / 60)
    # a start time in the future (clock skew) counts as zero minutes
    return float(max(elapsed, 0))


def estimate_calories(
    duration_minutes: float,
    volume_kg: float,
    body_weight_kg: Optional[float],
    policy: ScoringPolicy = DEFAULT_POLICY,
):
    """
    MET-based estimate. Intensity is volume moved per minute, scaled down by
    100; MET is capped at policy.met_cap.

    Returns (met, calories) with calories truncated to an int.
    """
    weight = (
        float(body_weight_kg)
        if body_weight_kg is not None
        else policy.default_body_weight_kg
    )
    if duration_minutes > 0:
        intensity_factor = (volume_kg / duration_minutes) / 100.0
    else:
        intensity_factor = policy.fallback_intensity

    met = min(policy.met_base + intensity_factor, policy.met_cap)
    calories = int(met * weight * (duration_minutes / 60.0))
    return met, calories


def evaluate_badges(
    duration_minutes: float,
    volume_kg: float,
    set_count: int,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> List[str]:
    badges = []

    if volume_kg >= policy.titan_volume_kg:
        badges.append(BADGE_TITAN_VOLUME)
    elif volume_kg >= policy.heavy_lifter_volume_kg:
        badges.append(BADGE_HEAVY_LIFTER)

    if duration_minutes >= policy.marathoner_minutes:
        badges.append(BADGE_MARATHONER)
    elif (
        duration_minutes <= policy.speed_demon_minutes
        and volume_kg > policy.speed_demon_volume_kg
    ):
        badges.append(BADGE_SPEED_DEMON)

    if set_count >= policy.volume_warrior_sets:
        badges.append(BADGE_VOLUME_WARRIOR)

    return badges


def score_workout(
    duration_minutes: float,
    volume_kg: float,
    set_count: int,
    body_weight_kg: Optional[float],
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> CompletionScore:
    met, calories = estimate_calories(
        duration_minutes, volume_kg, body_weight_kg, policy
    )
    return CompletionScore(
        duration_minutes=duration_minutes,
        met=met,
        calories=calories,
        badges=evaluate_badges(duration_minutes, volume_kg, set_count, policy),
    )
