"""Date Projection - Pure functions relating daily budgets to goal dates.

All functions are pure: same input always produces same output, no side effects.
Forward (budget -> date) and inverse (date -> budget) share the same
7700 kcal/kg constant and the same maintenance baseline so that
date -> budget -> date is stable to day-level rounding.
"""

import math
from datetime import date, timedelta

from .daily import calculate_progress, latest_known_weight
from .energy import KCAL_PER_KG, gender_floor, maintenance, round_kcal
from .models import PlanSummary, Profile, Snapshot


# Smallest deficit used for projections; keeps the horizon finite
MIN_DEFICIT_KCAL = 100
MAX_SAFE_DEFICIT_KCAL = 1000


def _kcal_to_lose(profile: Profile, latest_weight: float) -> float:
    return (latest_weight - profile.target_weight) * KCAL_PER_KG


def target_date(
    profile: Profile,
    daily_intake_goal: float,
    latest_weight: float,
    today: date | None = None,
) -> date:
    """Project the date the target weight is reached at a given daily intake.

    Args:
        profile: Profile with target weight, height and birth year
        daily_intake_goal: Planned daily intake in kcal
        latest_weight: Current (latest known) weight in kg
        today: Projection start (defaults to today)

    Returns:
        Projected goal date; today if the goal is already met
    """
    if today is None:
        today = date.today()

    if latest_weight <= profile.target_weight:
        return today

    deficit = maintenance(profile, latest_weight, today) - daily_intake_goal
    effective_deficit = max(deficit, MIN_DEFICIT_KCAL)
    days_needed = math.ceil(_kcal_to_lose(profile, latest_weight) / effective_deficit)
    return today + timedelta(days=days_needed)


def min_safe_date(profile: Profile, latest_weight: float, today: date | None = None) -> date:
    """Earliest goal date reachable without exceeding the safe deficit.

    The deficit is capped at min(1000, maintenance - safety floor). When the
    maintenance is at or under the floor the cap falls back to the minimum
    projection deficit.

    Args:
        profile: Profile with target weight and gender
        latest_weight: Current (latest known) weight in kg
        today: Projection start (defaults to today)

    Returns:
        Earliest safe goal date; today if the goal is already met
    """
    if today is None:
        today = date.today()

    if profile.target_weight >= latest_weight:
        return today

    headroom = maintenance(profile, latest_weight, today) - gender_floor(profile.gender)
    max_deficit = max(min(MAX_SAFE_DEFICIT_KCAL, headroom), MIN_DEFICIT_KCAL)
    days_needed = math.ceil(_kcal_to_lose(profile, latest_weight) / max_deficit)
    return today + timedelta(days=days_needed)


def budget_from_date(
    profile: Profile,
    goal_date: date,
    latest_weight: float,
    today: date | None = None,
) -> int:
    """Solve the forward projection for the daily budget.

    Args:
        profile: Profile with target weight, gender, height and birth year
        goal_date: Desired date of reaching the target weight
        latest_weight: Current (latest known) weight in kg
        today: Projection start (defaults to today)

    Returns:
        Daily budget in kcal, never under the safety floor
    """
    if today is None:
        today = date.today()

    baseline = maintenance(profile, latest_weight, today)
    kcal_to_lose = max(_kcal_to_lose(profile, latest_weight), 0)
    days = max((goal_date - today).days, 1)

    budget = round_kcal(baseline - kcal_to_lose / days)
    return max(budget, gender_floor(profile.gender))


def summarize_plan(snapshot: Snapshot, today: date | None = None) -> PlanSummary:
    """Build the dashboard view of the plan for the current snapshot."""
    if today is None:
        today = date.today()

    profile = snapshot.profile
    weight = latest_known_weight(snapshot.daily_logs, profile.start_weight)
    baseline = maintenance(profile, weight, today)

    return PlanSummary(
        latest_weight=weight,
        maintenance_kcal=round_kcal(baseline),
        daily_budget=profile.daily_budget,
        daily_deficit_kcal=round_kcal(baseline - profile.daily_budget),
        projected_date=target_date(profile, profile.daily_budget, weight, today),
        min_safe_date=min_safe_date(profile, weight, today),
        progress=calculate_progress(profile, snapshot.daily_logs),
    )
