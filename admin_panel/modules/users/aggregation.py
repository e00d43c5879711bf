"""
In-memory step aggregation and search for the users screen.

Both collections are fully materialized; every function is a single pass.
"""

from typing import Dict, Iterable, List, Optional
from admin_panel.modules.users.schemas import StepRecord, UserResponse, UserWithSteps, UsersSummary


def aggregate_steps(users: Iterable[UserResponse], step_records: Iterable[StepRecord]) -> List[UserWithSteps]:
    """Attach summed steps, calories and distance to each user. Users keep their order."""
    totals: Dict[str, Dict[str, float]] = {}
    for record in step_records:
        if record.user_id is None:
            continue
        bucket = totals.setdefault(record.user_id, {"steps": 0, "calories": 0, "distance": 0})
        bucket["steps"] += record.steps or 0
        bucket["calories"] += record.calories_burned or 0
        bucket["distance"] += record.distance_meters or 0

    result = []
    for user in users:
        bucket = totals.get(user.id, {})
        result.append(UserWithSteps(
            **user.model_dump(),
            total_steps=bucket.get("steps", 0),
            total_calories=bucket.get("calories", 0),
            total_distance=bucket.get("distance", 0),
        ))
    return result


def summarize(users: Iterable[UserWithSteps]) -> UsersSummary:
    summary = UsersSummary()
    for user in users:
        summary.total_users += 1
        summary.total_steps += user.total_steps
        summary.total_calories += user.total_calories
        summary.total_distance += user.total_distance
    return summary


def filter_users(users: Iterable[UserResponse], query: Optional[str]) -> List[UserResponse]:
    """Case-insensitive substring match against name or email."""
    users = list(users)
    needle = (query or "").strip().lower()
    if not needle:
        return users
    return [
        u for u in users
        if needle in (u.name or "").lower() or needle in (u.email or "").lower()
    ]


def initials(name: Optional[str], email: Optional[str]) -> str:
    if name and name.strip():
        return "".join(part[0] for part in name.split()).upper()[:2]
    if email:
        return email[0].upper()
    return "U"
