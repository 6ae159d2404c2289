"""Unit tests for report generation - pure functions, no mocks needed."""

from datetime import date

from weightplan.core.models import DailyLog, LoggedActivity, LoggedMealItem, Profile
from weightplan.core.reports import generate_day_summary, generate_weekly_report


def make_log(log_date, kcal=0, burn=0, weight=None):
    return DailyLog(
        date=log_date,
        meals={"Dinner": [LoggedMealItem(name="Dinner", kcal=kcal)]} if kcal else {},
        activities=[LoggedActivity(type_id="cycling", value=45, burned_kcal=burn)] if burn else [],
        weight=weight,
    )


PROFILE = Profile(start_weight=86, target_weight=76, daily_budget=1800)


class TestGenerateDaySummary:
    """Tests for generate_day_summary."""

    def test_empty_log(self):
        """Empty log returns zero totals and the plain budget."""
        summary = generate_day_summary(DailyLog(date="2025-06-01"), 1800)

        assert summary.log_date == "2025-06-01"
        assert summary.consumed_kcal == 0
        assert summary.adjusted_goal_kcal == 1800
        assert summary.item_count == 0
        assert summary.activity_count == 0

    def test_log_with_entries(self):
        """Activity burn raises the goal for that day."""
        summary = generate_day_summary(make_log("2025-06-01", 1500, 300, 85.5), 1800)

        assert summary.consumed_kcal == 1500
        assert summary.activity_burn_kcal == 300
        assert summary.adjusted_goal_kcal == 2100
        assert summary.item_count == 1
        assert summary.activity_count == 1
        assert summary.weight == 85.5


class TestGenerateWeeklyReport:
    """Tests for generate_weekly_report."""

    def test_empty_week(self):
        """Empty week returns zeros."""
        report = generate_weekly_report({}, PROFILE, week_start=date(2025, 6, 1))

        assert report.week_start == date(2025, 6, 1)
        assert report.week_end == date(2025, 6, 7)
        assert report.days_logged == 0
        assert report.total_consumed_kcal == 0
        assert report.net_balance_kcal == 0
        assert report.avg_daily_consumed_kcal == 0

    def test_partial_week(self):
        """Net balance compares consumption with each day's adjusted goal."""
        logs = {
            "2025-06-02": make_log("2025-06-02", kcal=1600),
            "2025-06-03": make_log("2025-06-03", kcal=2100, burn=200, weight=85),
        }
        report = generate_weekly_report(logs, PROFILE, week_start=date(2025, 6, 1))

        assert report.days_logged == 2
        assert report.total_consumed_kcal == 3700
        assert report.total_activity_burn_kcal == 200
        assert report.avg_daily_consumed_kcal == 1850
        # 3700 - (1800 + 2000) = -100
        assert report.net_balance_kcal == -100
        assert report.weights == {"2025-06-03": 85}

    def test_logs_outside_week_excluded(self):
        """Logs outside the requested week are excluded."""
        logs = {
            "2025-05-31": make_log("2025-05-31", kcal=5000),
            "2025-06-04": make_log("2025-06-04", kcal=1700),
            "2025-06-08": make_log("2025-06-08", kcal=5000),
        }
        report = generate_weekly_report(logs, PROFILE, week_start=date(2025, 6, 1))

        assert report.days_logged == 1
        assert report.total_consumed_kcal == 1700

    def test_daily_summaries_sorted_by_date(self):
        """Daily summaries are sorted by date."""
        logs = {
            "2025-06-05": make_log("2025-06-05", kcal=300),
            "2025-06-02": make_log("2025-06-02", kcal=100),
            "2025-06-03": make_log("2025-06-03", kcal=200),
        }
        report = generate_weekly_report(logs, PROFILE, week_start=date(2025, 6, 1))

        dates = [s.log_date for s in report.daily_summaries]
        assert dates == ["2025-06-02", "2025-06-03", "2025-06-05"]
