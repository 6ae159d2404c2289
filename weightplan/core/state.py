"""State Transitions - Pure functions from one snapshot to the next.

Every transition takes the current Snapshot and returns a new one; the input
is never mutated. Invalid edits raise ValueError before anything changes.
Removing an id that is not present returns the snapshot unchanged.
"""

import math
import uuid
from datetime import date
from typing import Any, Optional

from .budget import check_custom_target_date, derive_budget
from .catalog import (
    CATEGORY_MOMENTS,
    CUSTOM_ACTIVITY_PREFIX,
    CUSTOM_OPTION_PREFIX,
    MEAL_MOMENTS,
    find_meal_option,
)
from .daily import get_log, latest_known_weight, weight_for_date
from .energy import activity_burn, positive_or_zero, round_kcal
from .models import (
    ActivityType,
    DailyLog,
    Language,
    LoggedActivity,
    LoggedMealItem,
    MealOption,
    Pace,
    Profile,
    Snapshot,
    new_id,
)


PROFILE_FIELDS = {
    "gender",
    "birth_year",
    "height",
    "start_weight",
    "target_weight",
    "pace",
    "custom_target_date",
    "activity_level",
}

# Edits to these fields re-run budget derivation
BUDGET_FIELDS = PROFILE_FIELDS - {"activity_level"}


def initial_snapshot() -> Snapshot:
    """Default state for a first run or after a reset."""
    return Snapshot()


def new_custom_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:9]}"


def _normalize_date(log_date: str) -> str:
    return date.fromisoformat(log_date).isoformat()


def _check_moment(moment: str) -> None:
    if moment not in MEAL_MOMENTS:
        raise ValueError(f"Unknown meal moment: {moment}")


def _whole_kcal(kcal: Any) -> int:
    """Rounded kcal for an entered amount, negative values clamped to 0.

    Raises:
        ValueError: If kcal is not a finite number
    """
    value = float(kcal)
    if not math.isfinite(value):
        raise ValueError(f"kcal must be a finite number, got {kcal}")
    return max(round_kcal(value), 0)


def _rederive(snapshot: Snapshot, today: date | None) -> Snapshot:
    weight = latest_known_weight(snapshot.daily_logs, snapshot.profile.start_weight)
    budget = derive_budget(snapshot.profile, weight, today)
    snapshot.profile = snapshot.profile.model_copy(update={"daily_budget": budget})
    return snapshot


def rederive_budget(snapshot: Snapshot, today: date | None = None) -> Snapshot:
    """Copy of snapshot with the daily budget derived from its own profile.

    Used for snapshots that come from outside the transitions (loaded or
    imported), whose stored budget may break the gender floor.
    """
    return _rederive(snapshot.model_copy(deep=True), today)


def _edit_log(snapshot: Snapshot, log_date: str) -> tuple[Snapshot, DailyLog]:
    """Deep-copy the snapshot and return it with the (created) log for log_date."""
    log_date = _normalize_date(log_date)
    result = snapshot.model_copy(deep=True)
    log = get_log(result.daily_logs, log_date)
    result.daily_logs[log_date] = log
    return result, log


# ==================== Profile ====================


def update_profile(
    snapshot: Snapshot, updates: dict[str, Any], today: date | None = None
) -> Snapshot:
    """Apply profile field edits and re-derive the budget when needed.

    Setting a custom target date switches the pace to custom; any other pace
    clears the custom date. Passing a custom date together with a non-custom
    pace is contradictory and rejected. A custom date earlier than the minimum safe date
    is rejected before anything changes.

    Args:
        snapshot: Current state
        updates: Field name to new value
        today: Reference date (defaults to today)

    Returns:
        New snapshot

    Raises:
        ValueError: Unknown field, invalid value, or a custom date with a
            non-custom pace
        TargetDateTooEarlyError: Custom date before the minimum safe date
    """
    unknown = set(updates) - PROFILE_FIELDS
    if unknown:
        raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

    data = snapshot.profile.model_dump()
    data.update(updates)
    candidate = Profile.model_validate(data)

    if "custom_target_date" in updates and candidate.custom_target_date is not None:
        if "pace" in updates and candidate.pace != Pace.CUSTOM:
            raise ValueError(
                f"A custom target date cannot be combined with the {candidate.pace.value} pace"
            )
        candidate = candidate.model_copy(update={"pace": Pace.CUSTOM})
    if candidate.pace != Pace.CUSTOM and candidate.custom_target_date is not None:
        candidate = candidate.model_copy(update={"custom_target_date": None})

    if "custom_target_date" in updates and candidate.custom_target_date is not None:
        weight = latest_known_weight(snapshot.daily_logs, candidate.start_weight)
        check_custom_target_date(candidate, candidate.custom_target_date, weight, today)

    result = snapshot.model_copy(deep=True)
    result.profile = candidate

    if set(updates) & BUDGET_FIELDS:
        result = _rederive(result, today)
    return result


def set_daily_weight(
    snapshot: Snapshot,
    log_date: str,
    weight: Optional[float],
    today: date | None = None,
) -> Snapshot:
    """Set or clear the manual weight for a date.

    None clears the entry. The budget is re-derived when the latest known
    weight changes.

    Raises:
        ValueError: If weight is not a positive number
    """
    value = None
    if weight is not None:
        value = positive_or_zero(weight)
        if value == 0:
            raise ValueError(f"Weight must be a positive number, got {weight}")

    before = latest_known_weight(snapshot.daily_logs, snapshot.profile.start_weight)

    result, log = _edit_log(snapshot, log_date)
    log.weight = value

    after = latest_known_weight(result.daily_logs, result.profile.start_weight)
    if after != before:
        result = _rederive(result, today)
    return result


# ==================== Meals ====================


def add_meal_item(
    snapshot: Snapshot,
    log_date: str,
    moment: str,
    name: str,
    kcal: float,
    quantity: float = 1,
    meal_id: Optional[str] = None,
    item_id: Optional[str] = None,
) -> Snapshot:
    """Append a meal item to a meal moment. kcal is the resolved total."""
    _check_moment(moment)
    item = LoggedMealItem(
        id=item_id or new_id(),
        meal_id=meal_id,
        name=name,
        kcal=_whole_kcal(kcal),
        quantity=quantity,
    )

    result, log = _edit_log(snapshot, log_date)
    log.meals[moment] = [*log.meals.get(moment, []), item]
    return result


def log_catalog_item(
    snapshot: Snapshot,
    log_date: str,
    moment: str,
    option_id: str,
    quantity: float = 1,
    item_id: Optional[str] = None,
) -> Snapshot:
    """Log a catalog food, resolving kcal as kcal per unit times quantity."""
    option = find_meal_option(option_id, snapshot.custom_options)
    if option is None:
        raise ValueError(f"Unknown catalog item: {option_id}")
    if positive_or_zero(quantity) == 0:
        raise ValueError("Quantity must be positive")

    return add_meal_item(
        snapshot,
        log_date,
        moment,
        name=option.name,
        kcal=option.kcal * quantity,
        quantity=quantity,
        meal_id=option.id,
        item_id=item_id,
    )


def update_meal_item(
    snapshot: Snapshot,
    log_date: str,
    moment: str,
    item_id: str,
    kcal: Optional[float] = None,
    name: Optional[str] = None,
) -> Snapshot:
    """Edit a logged meal item. kcal is clamped to a minimum of 0.

    Raises:
        ValueError: If the item is not logged under that date and moment
    """
    log = snapshot.daily_logs.get(_normalize_date(log_date))
    items = log.meals.get(moment, []) if log else []
    if not any(item.id == item_id for item in items):
        raise ValueError(f"Meal item not found: {item_id}")

    updates: dict[str, Any] = {}
    if kcal is not None:
        updates["kcal"] = _whole_kcal(kcal)
    if name is not None:
        updates["name"] = name

    result, log = _edit_log(snapshot, log_date)
    log.meals[moment] = [
        LoggedMealItem.model_validate({**item.model_dump(), **updates})
        if item.id == item_id
        else item
        for item in log.meals[moment]
    ]
    return result


def remove_meal_item(snapshot: Snapshot, log_date: str, moment: str, item_id: str) -> Snapshot:
    log = snapshot.daily_logs.get(_normalize_date(log_date))
    if log is None or not any(item.id == item_id for item in log.meals.get(moment, [])):
        return snapshot

    result, log = _edit_log(snapshot, log_date)
    log.meals[moment] = [item for item in log.meals[moment] if item.id != item_id]
    return result


# ==================== Activities ====================


def add_activity(
    snapshot: Snapshot,
    log_date: str,
    type_id: str,
    value: Any,
    activity_id: Optional[str] = None,
) -> Snapshot:
    """Log an activity, freezing its burn at the weight known for that date.

    Unknown activity types are logged with a burn of 0.
    """
    log_date = _normalize_date(log_date)
    weight = weight_for_date(snapshot.daily_logs, log_date, snapshot.profile.start_weight)
    burn = activity_burn(type_id, value, weight, snapshot.custom_activities)

    activity = LoggedActivity(
        id=activity_id or new_id(),
        type_id=type_id,
        value=positive_or_zero(value),
        burned_kcal=burn,
    )

    result, log = _edit_log(snapshot, log_date)
    log.activities = [*log.activities, activity]
    return result


def remove_activity(snapshot: Snapshot, log_date: str, activity_id: str) -> Snapshot:
    log = snapshot.daily_logs.get(_normalize_date(log_date))
    if log is None or not any(a.id == activity_id for a in log.activities):
        return snapshot

    result, log = _edit_log(snapshot, log_date)
    log.activities = [a for a in log.activities if a.id != activity_id]
    return result


# ==================== Catalog ====================


def add_custom_option(
    snapshot: Snapshot,
    name: str,
    kcal: float,
    categories: list[str],
    grams: Optional[float] = None,
    option_id: Optional[str] = None,
) -> Snapshot:
    """Add a custom food to every meal moment of the chosen categories.

    Raises:
        ValueError: No categories, or an unknown category
    """
    if not categories:
        raise ValueError("Choose at least one category")
    unknown = [c for c in categories if c not in CATEGORY_MOMENTS]
    if unknown:
        raise ValueError(f"Unknown categories: {', '.join(unknown)}")

    display_name = f"{name} ({grams:g}g)" if grams else name
    option = MealOption(
        id=option_id or new_custom_id(CUSTOM_OPTION_PREFIX),
        name=display_name,
        kcal=_whole_kcal(kcal),
        is_custom=True,
    )

    moments = [m for category in categories for m in CATEGORY_MOMENTS[category]]
    result = snapshot.model_copy(deep=True)
    for moment in dict.fromkeys(moments):
        result.custom_options[moment] = [option, *result.custom_options.get(moment, [])]
    return result


def remove_custom_option(snapshot: Snapshot, option_id: str) -> Snapshot:
    """Remove a custom food from every meal moment it was added to."""
    result = snapshot.model_copy(deep=True)
    result.custom_options = {
        moment: [o for o in options if o.id != option_id]
        for moment, options in result.custom_options.items()
    }
    return result


def add_custom_activity(
    snapshot: Snapshot,
    name: str,
    kcal_per_hour: float,
    activity_id: Optional[str] = None,
) -> Snapshot:
    """Add a custom activity burning a flat kcal per 60 minutes."""
    activity = ActivityType(
        id=activity_id or new_custom_id(CUSTOM_ACTIVITY_PREFIX),
        name=name,
        kcal_per_hour=positive_or_zero(kcal_per_hour),
        is_custom=True,
    )

    result = snapshot.model_copy(deep=True)
    result.custom_activities = [activity, *result.custom_activities]
    return result


def remove_custom_activity(snapshot: Snapshot, activity_id: str) -> Snapshot:
    result = snapshot.model_copy(deep=True)
    result.custom_activities = [a for a in result.custom_activities if a.id != activity_id]
    return result


def set_language(snapshot: Snapshot, language: str) -> Snapshot:
    result = snapshot.model_copy(deep=True)
    result.language = Language(language)
    return result
