"""Daily Log Aggregation - Pure functions over the date-indexed log history.

All functions are pure: same input always produces same output, no side effects.
Dates are ISO strings, so string comparison is chronological comparison.
A date without a stored log is an empty day, never an error.
"""

from .models import CalorieStatus, DailyLog, DailyTotals, Profile, Progress


NEAR_BUDGET_PERCENT = 85


def get_log(daily_logs: dict[str, DailyLog], log_date: str) -> DailyLog:
    """Return the stored log for a date, or an empty one."""
    log = daily_logs.get(log_date)
    if log is None:
        return DailyLog(date=log_date)
    return log


def latest_known_weight(daily_logs: dict[str, DailyLog], start_weight: float) -> float:
    """Weight from the most recent date that has a manual entry.

    Args:
        daily_logs: Logs keyed by ISO date
        start_weight: Fallback when no weight was ever logged

    Returns:
        Latest logged weight in kg
    """
    for log_date in sorted(daily_logs, reverse=True):
        weight = daily_logs[log_date].weight
        if weight:
            return weight
    return start_weight


def weight_for_date(
    daily_logs: dict[str, DailyLog], log_date: str, start_weight: float
) -> float:
    """Weight known as of a date, carried forward from earlier entries.

    Entries after log_date are never considered.

    Args:
        daily_logs: Logs keyed by ISO date
        log_date: ISO date to resolve
        start_weight: Fallback when nothing was logged on or before log_date

    Returns:
        Weight in kg
    """
    for entry_date in sorted(daily_logs, reverse=True):
        if entry_date > log_date:
            continue
        weight = daily_logs[entry_date].weight
        if weight:
            return weight
    return start_weight


def calculate_consumed(log: DailyLog) -> int:
    return sum(item.kcal for items in log.meals.values() for item in items)


def calculate_activity_burn(log: DailyLog) -> int:
    """Sum of burns frozen on the logged activities."""
    return sum(activity.burned_kcal for activity in log.activities)


def classify_intake(consumed: int, adjusted_goal: int, percent: float) -> CalorieStatus:
    if consumed > adjusted_goal:
        return CalorieStatus.OVER
    if percent > NEAR_BUDGET_PERCENT:
        return CalorieStatus.NEAR
    return CalorieStatus.ON_TRACK


def calculate_daily_totals(log: DailyLog, daily_budget: int) -> DailyTotals:
    """Calculate consumption and activity totals for one day.

    Args:
        log: The day's log (may be empty)
        daily_budget: Profile daily budget in kcal

    Returns:
        DailyTotals with adjusted goal, percent, remaining kcal and status
    """
    consumed = calculate_consumed(log)
    burn = calculate_activity_burn(log)
    adjusted_goal = daily_budget + burn
    percent = consumed / adjusted_goal * 100 if adjusted_goal > 0 else 0.0

    return DailyTotals(
        log_date=log.date,
        consumed_kcal=consumed,
        activity_burn_kcal=burn,
        adjusted_goal_kcal=adjusted_goal,
        percent=round(percent, 1),
        remaining_kcal=adjusted_goal - consumed,
        status=classify_intake(consumed, adjusted_goal, percent),
    )


def calculate_progress(profile: Profile, daily_logs: dict[str, DailyLog]) -> Progress:
    """Calculate weight lost so far and progress towards the target.

    Percent is clamped to [0, 100]; a net gain reads 0 and an overshoot 100.
    A plan whose start equals its target counts as complete.
    """
    current = latest_known_weight(daily_logs, profile.start_weight)
    lost = profile.start_weight - current
    journey = abs(profile.start_weight - profile.target_weight)

    percent = lost / journey * 100 if journey > 0 else 100.0

    return Progress(
        start_weight=profile.start_weight,
        current_weight=current,
        target_weight=profile.target_weight,
        lost_kg=round(lost, 1),
        percent=round(min(max(percent, 0.0), 100.0), 1),
    )
