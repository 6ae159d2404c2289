"""Report Generation - Pure functions for generating reports.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date, timedelta

from .daily import calculate_activity_burn, calculate_consumed
from .models import DailyLog, DaySummary, Profile, WeeklyReport


def generate_day_summary(log: DailyLog, daily_budget: int) -> DaySummary:
    """Generate a summary for a single day's log.

    Args:
        log: The daily log to summarize
        daily_budget: Profile daily budget in kcal

    Returns:
        DaySummary with totals for the day
    """
    burn = calculate_activity_burn(log)

    return DaySummary(
        log_date=log.date,
        consumed_kcal=calculate_consumed(log),
        activity_burn_kcal=burn,
        adjusted_goal_kcal=daily_budget + burn,
        item_count=sum(len(items) for items in log.meals.values()),
        activity_count=len(log.activities),
        weight=log.weight,
    )


def generate_weekly_report(
    daily_logs: dict[str, DailyLog],
    profile: Profile,
    week_start: date | None = None,
) -> WeeklyReport:
    """Generate a weekly report from daily logs.

    Days without a stored log are not counted as logged days. The net
    balance compares consumption with the activity-adjusted goal of each
    logged day, using the current budget.

    Args:
        daily_logs: Logs keyed by ISO date (any range)
        profile: Profile providing the daily budget
        week_start: Start date of the week (defaults to 7 days ago)

    Returns:
        WeeklyReport with daily summaries and aggregate metrics
    """
    if week_start is None:
        week_start = date.today() - timedelta(days=6)

    week_end = week_start + timedelta(days=6)
    first, last = week_start.isoformat(), week_end.isoformat()

    week_logs = [
        daily_logs[log_date]
        for log_date in sorted(daily_logs)
        if first <= log_date <= last
    ]

    daily_summaries = [generate_day_summary(log, profile.daily_budget) for log in week_logs]

    total_consumed = sum(s.consumed_kcal for s in daily_summaries)
    total_burn = sum(s.activity_burn_kcal for s in daily_summaries)
    total_goal = sum(s.adjusted_goal_kcal for s in daily_summaries)
    days_logged = len(daily_summaries)

    avg_daily_consumed = total_consumed / days_logged if days_logged > 0 else 0

    return WeeklyReport(
        week_start=week_start,
        week_end=week_end,
        daily_summaries=daily_summaries,
        total_consumed_kcal=total_consumed,
        total_activity_burn_kcal=total_burn,
        avg_daily_consumed_kcal=round(avg_daily_consumed, 1),
        net_balance_kcal=total_consumed - total_goal,
        days_logged=days_logged,
        weights={s.log_date: s.weight for s in daily_summaries if s.weight},
    )
