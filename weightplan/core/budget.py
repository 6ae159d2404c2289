"""Budget Derivation - Pure functions turning a pace or date into a daily budget.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date

from .energy import KCAL_PER_KG, gender_floor, maintenance, round_kcal
from .models import Pace, Profile
from .projection import budget_from_date, min_safe_date


# Weekly weight-loss rate in kg per pace
PACE_RATES = {
    Pace.SLOW: 0.25,
    Pace.AVERAGE: 0.5,
    Pace.FAST: 1.0,
}


class TargetDateTooEarlyError(ValueError):
    """A custom target date precedes the minimum safe date."""

    def __init__(self, requested: date, earliest: date) -> None:
        super().__init__(
            f"Target date {requested.isoformat()} is too early; "
            f"the earliest safe date is {earliest.isoformat()}"
        )
        self.requested = requested
        self.earliest = earliest


def daily_deficit_for_pace(pace: Pace) -> float:
    """kcal per day needed to lose the pace's weekly rate. 0 for custom."""
    return PACE_RATES.get(pace, 0) * KCAL_PER_KG / 7


def derive_budget(profile: Profile, latest_weight: float, today: date | None = None) -> int:
    """Derive the daily budget from the profile's pace or custom date.

    The baseline is the maintenance without logged activity at the latest
    known weight. A custom pace without a date keeps the current budget.

    Args:
        profile: Profile to derive for
        latest_weight: Latest known weight in kg
        today: Reference date (defaults to today)

    Returns:
        Daily budget in kcal, never under the gender floor
    """
    if today is None:
        today = date.today()

    floor = gender_floor(profile.gender)

    if profile.pace == Pace.CUSTOM:
        if profile.custom_target_date is None:
            return max(profile.daily_budget, floor)
        return budget_from_date(profile, profile.custom_target_date, latest_weight, today)

    baseline = maintenance(profile, latest_weight, today)
    budget = round_kcal(baseline - daily_deficit_for_pace(profile.pace))
    return max(budget, floor)


def check_custom_target_date(
    profile: Profile,
    requested: date,
    latest_weight: float,
    today: date | None = None,
) -> None:
    """Reject a custom target date earlier than the minimum safe date.

    Raises:
        TargetDateTooEarlyError: If requested precedes the minimum safe date
    """
    earliest = min_safe_date(profile, latest_weight, today)
    if requested < earliest:
        raise TargetDateTooEarlyError(requested, earliest)
