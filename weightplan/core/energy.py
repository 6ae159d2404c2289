"""Energy Model - Pure functions for energy expenditure math.

All functions are pure: same input always produces same output, no side effects.
Every function is total: odd inputs (zero, negative, NaN) give a defined
number instead of raising.
"""

import math
from datetime import date
from typing import Any

from .catalog import find_activity_type
from .models import ActivityType, ActivityUnit, Gender, Profile


KCAL_PER_KG = 7700
LIGHT_ACTIVITY_PAL = 1.375
MINUTES_PER_KM = 12  # 5 km/h walking pace

# Lowest daily budget allowed, whatever the pace or date
SAFETY_FLOORS = {
    Gender.MALE: 1500,
    Gender.FEMALE: 1200,
}


def gender_floor(gender: Gender) -> int:
    return SAFETY_FLOORS[gender]


def round_kcal(value: float) -> int:
    """Round half up to a whole kcal.

    Python's round() rounds halves to even; kcal figures round 0.5 up.
    Infinite or NaN values give 0.
    """
    if not math.isfinite(value):
        return 0
    return math.floor(value + 0.5)


def positive_or_zero(value: Any) -> float:
    """Coerce a user-supplied amount to a finite positive float, else 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number <= 0:
        return 0.0
    return number


def age_in(profile: Profile, today: date | None = None) -> int:
    """Age as calendar year minus birth year."""
    if today is None:
        today = date.today()
    return today.year - profile.birth_year


def basal_metabolic_rate(weight_kg: float, height_cm: float, age_years: float) -> float:
    """Calculate Basal Metabolic Rate using the Mifflin-St Jeor equation.

    The +5 constant is applied regardless of gender; gender only selects the
    budget safety floor.

    Args:
        weight_kg: Body weight in kg
        height_cm: Height in cm
        age_years: Age in years

    Returns:
        BMR in kcal per day
    """
    return 10 * weight_kg + 6.25 * height_cm - 5 * age_years + 5


def total_daily_energy_expenditure(
    profile: Profile,
    logged_activity_burn: float,
    weight_kg: float,
    today: date | None = None,
) -> float:
    """Calculate TDEE: BMR times the lightly-active PAL plus logged exercise.

    The multiplier is fixed at 1.375; profile.activity_level is not used.

    Args:
        profile: Profile providing height and birth year
        logged_activity_burn: kcal burned by logged activities
        weight_kg: Body weight to evaluate BMR at
        today: Reference date for the age (defaults to today)

    Returns:
        TDEE in kcal per day
    """
    bmr = basal_metabolic_rate(weight_kg, profile.height, age_in(profile, today))
    return bmr * LIGHT_ACTIVITY_PAL + logged_activity_burn


def maintenance(profile: Profile, weight_kg: float, today: date | None = None) -> float:
    """TDEE without any logged activity - the baseline for budgets and dates."""
    return total_daily_energy_expenditure(profile, 0, weight_kg, today)


def activity_burn(
    activity_type_id: str,
    value: Any,
    body_weight_kg: float,
    custom_activities: list[ActivityType],
) -> int:
    """Calculate kcal burned by one activity.

    km-based activities are converted to minutes first. MET-based types burn
    MET x weight x hours; custom types burn a flat kcal per hour.

    Args:
        activity_type_id: Built-in or custom activity id
        value: Minutes (or km for distance-based types)
        body_weight_kg: Weight known for the day of the activity
        custom_activities: User-added activity types

    Returns:
        Whole kcal, 0 for unknown ids and non-positive or non-numeric values
    """
    activity = find_activity_type(activity_type_id, custom_activities)
    if activity is None:
        return 0

    minutes = positive_or_zero(value)
    if activity.unit == ActivityUnit.KM:
        minutes *= MINUTES_PER_KM
    hours = minutes / 60

    if activity.kcal_per_hour is not None:
        burn = activity.kcal_per_hour * hours
    else:
        burn = (activity.met or 0) * positive_or_zero(body_weight_kg) * hours

    return max(round_kcal(burn), 0)
