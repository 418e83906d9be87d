# backend/app/analytics/leaderboard.py
from dataclasses import dataclass
from typing import Iterable, List, Optional

LEADERBOARD_LIMIT = 10


@dataclass(frozen=True)
class VolumeRow:
    user_id: int
    username: str
    total_volume: Optional[float]


@dataclass(frozen=True)
class LeaderboardEntry:
    username: str
    total_volume_kg: float
    rank: int

    def to_dict(self):
        return {
            "username": self.username,
            "total_volume_kg": self.total_volume_kg,
            "rank": self.rank,
        }


def rank_leaderboard(
    rows: Iterable[VolumeRow], limit: int = LEADERBOARD_LIMIT
) -> List[LeaderboardEntry]:
    """
    Rank users by total volume, highest first, with SQL RANK() semantics:
    tied volumes share a rank and the next distinct volume skips by the
    number of ties ([100, 100, 80] -> [1, 1, 3]).

    Users without sets rank with zero volume. Ties are listed by username,
    then user id. Ranks are assigned over every row before cutting to limit.
    """
    ordered = sorted(
        rows,
        key=lambda r: (-float(r.total_volume or 0.0), r.username, r.user_id),
    )

    entries = []
    prev_volume = None
    rank = 0
    for position, row in enumerate(ordered, start=1):
        volume = float(row.total_volume or 0.0)
        if volume != prev_volume:
            rank = position
            prev_volume = volume
        entries.append(
            LeaderboardEntry(username=row.username, total_volume_kg=volume, rank=rank)
        )

    return entries[:limit]
