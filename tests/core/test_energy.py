"""Unit tests for the energy model - pure functions, no mocks needed."""

from datetime import date

import pytest

from weightplan.core.energy import (
    activity_burn,
    age_in,
    basal_metabolic_rate,
    gender_floor,
    maintenance,
    round_kcal,
    total_daily_energy_expenditure,
)
from weightplan.core.models import ActivityLevel, ActivityType, Gender, Profile


TODAY = date(2025, 6, 1)


def make_profile(**overrides) -> Profile:
    data = {
        "gender": "male",
        "birth_year": 1980,
        "height": 170,
        "start_weight": 86,
        "target_weight": 76,
    }
    data.update(overrides)
    return Profile(**data)


class TestBasalMetabolicRate:
    """Tests for basal_metabolic_rate."""

    def test_reference_profile(self):
        """10*86 + 6.25*170 - 5*45 + 5 = 1702.5."""
        assert basal_metabolic_rate(86, 170, 45) == 1702.5

    def test_same_constant_for_everyone(self):
        """Gender is not an input; the +5 constant always applies."""
        assert basal_metabolic_rate(60, 160, 30) == 600 + 1000 - 150 + 5


class TestTotalDailyEnergyExpenditure:
    """Tests for total_daily_energy_expenditure and maintenance."""

    def test_age_from_birth_year(self):
        """Age is the calendar year minus the birth year."""
        assert age_in(make_profile(), TODAY) == 45

    def test_maintenance_without_activity(self):
        """Maintenance is BMR times the fixed 1.375 multiplier."""
        assert maintenance(make_profile(), 86, TODAY) == pytest.approx(2340.9375)

    def test_logged_activity_is_added(self):
        """Logged burn is added on top of the baseline."""
        tdee = total_daily_energy_expenditure(make_profile(), 300, 86, TODAY)
        assert tdee == pytest.approx(2640.9375)

    def test_activity_level_is_ignored(self):
        """The multiplier does not follow the activity level field."""
        light = maintenance(make_profile(activity_level=ActivityLevel.LIGHT), 86, TODAY)
        heavy = maintenance(make_profile(activity_level=ActivityLevel.HEAVY), 86, TODAY)
        assert light == heavy


class TestActivityBurn:
    """Tests for activity_burn."""

    def test_met_based_activity(self):
        """MET 8.3 at 80 kg for 60 minutes burns 664 kcal."""
        assert activity_burn("running", 60, 80, []) == 664

    def test_partial_hour(self):
        """Walking 30 minutes at 80 kg: 4.5 * 80 * 0.5 = 180."""
        assert activity_burn("walking", 30, 80, []) == 180

    def test_distance_based_activity(self):
        """Kilometres convert to minutes at 12 min/km."""
        assert activity_burn("walking_km", 5, 80, []) == 360

    def test_custom_activity_uses_flat_rate(self):
        """Custom types burn kcal per hour regardless of body weight."""
        custom = [ActivityType(id="ca_rowing", name="Rowing", kcal_per_hour=600, is_custom=True)]
        assert activity_burn("ca_rowing", 30, 80, custom) == 300
        assert activity_burn("ca_rowing", 30, 120, custom) == 300

    def test_unknown_activity(self):
        """Unknown ids burn nothing."""
        assert activity_burn("does_not_exist", 60, 80, []) == 0

    @pytest.mark.parametrize("value", [0, -30, "abc", None, float("nan"), float("inf")])
    def test_invalid_durations(self, value):
        """Non-positive or non-numeric durations burn nothing."""
        assert activity_burn("running", value, 80, []) == 0

    def test_numeric_string_duration(self):
        """Numeric strings are accepted."""
        assert activity_burn("running", "60", 80, []) == 664


class TestHelpers:
    """Tests for rounding and safety floors."""

    def test_round_half_up(self):
        """Halves round up, unlike round()."""
        assert round_kcal(1790.5) == 1791
        assert round_kcal(1791.5) == 1792
        assert round_kcal(1790.4) == 1790

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_round_non_finite(self, value):
        """Infinite or NaN values round to 0 instead of raising."""
        assert round_kcal(value) == 0

    def test_huge_duration_is_total(self):
        """A burn that overflows to infinity still gives a number."""
        assert activity_burn("walking_km", 1e307, 80, []) == 0

    def test_gender_floors(self):
        """1500 for men, 1200 for women."""
        assert gender_floor(Gender.MALE) == 1500
        assert gender_floor(Gender.FEMALE) == 1200
