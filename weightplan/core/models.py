"""Core Data Models - Pydantic models for type safety.

Persisted models (profile, logs, catalog entries, snapshot) serialize with
camelCase aliases so an exported document keeps the app's key names.
Derived models are recomputed on every read and never persisted.
"""

from datetime import date as DateType
from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Pace(str, Enum):
    SLOW = "slow"
    AVERAGE = "average"
    FAST = "fast"
    CUSTOM = "custom"


class ActivityLevel(str, Enum):
    """Captured on the profile; the energy formulas do not read it."""

    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


class ActivityUnit(str, Enum):
    MINUTES = "minutes"
    KM = "km"


class Language(str, Enum):
    NL = "nl"
    EN = "en"
    ES = "es"
    DE = "de"
    PT = "pt"
    ZH = "zh"
    JA = "ja"
    KO = "ko"
    HI = "hi"
    AR = "ar"


class CalorieStatus(str, Enum):
    ON_TRACK = "on_track"
    NEAR = "near"
    OVER = "over"


class SnapshotModel(BaseModel):
    """Base for everything stored in the snapshot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def new_id() -> str:
    return str(uuid.uuid4())


class Profile(SnapshotModel):
    """Biometric profile and plan settings."""

    gender: Gender = Gender.MALE
    birth_year: int = Field(default=1970, ge=1900, le=2100)
    height: float = Field(default=194, gt=0, description="Height in cm")
    start_weight: float = Field(default=92, gt=0, description="Reference weight for progress, kg")
    target_weight: float = Field(default=80, gt=0, description="Goal weight, kg")
    daily_budget: int = Field(default=1800, ge=0, description="Derived daily intake budget, kcal")
    pace: Pace = Pace.AVERAGE
    custom_target_date: Optional[DateType] = Field(
        default=None, description="Only set when pace is custom"
    )
    activity_level: ActivityLevel = ActivityLevel.LIGHT


class LoggedMealItem(SnapshotModel):
    """A meal item logged on a day. kcal is already multiplied by quantity."""

    id: str = Field(default_factory=new_id)
    meal_id: Optional[str] = Field(default=None, description="Catalog item this was picked from")
    name: str = Field(min_length=1)
    kcal: int = Field(ge=0)
    quantity: float = Field(default=1, gt=0)


class LoggedActivity(SnapshotModel):
    """An activity logged on a day with its burn frozen at log time."""

    id: str = Field(default_factory=new_id)
    type_id: str
    value: float = Field(description="Minutes or km, depending on the activity unit")
    burned_kcal: int = Field(ge=0)


class DailyLog(SnapshotModel):
    """Everything logged for one calendar date."""

    date: str = Field(description="ISO date (YYYY-MM-DD)")
    meals: dict[str, list[LoggedMealItem]] = Field(default_factory=dict)
    activities: list[LoggedActivity] = Field(default_factory=list)
    weight: Optional[float] = Field(default=None, gt=0)


class MealOption(SnapshotModel):
    """A selectable food in the catalog."""

    id: str
    name: str = Field(min_length=1)
    kcal: int = Field(ge=0, description="kcal per unit")
    unit_name: Optional[str] = None
    is_custom: bool = False


class ActivityType(SnapshotModel):
    """A selectable activity.

    Built-in types carry a MET coefficient; custom types carry a flat
    kcal per 60 minutes instead.
    """

    id: str
    name: str = Field(min_length=1)
    unit: ActivityUnit = ActivityUnit.MINUTES
    met: Optional[float] = Field(default=None, ge=0)
    kcal_per_hour: Optional[float] = Field(default=None, ge=0)
    is_custom: bool = False


class Snapshot(SnapshotModel):
    """The whole persisted application state."""

    profile: Profile = Field(default_factory=Profile)
    daily_logs: dict[str, DailyLog] = Field(default_factory=dict)
    custom_options: dict[str, list[MealOption]] = Field(default_factory=dict)
    custom_activities: list[ActivityType] = Field(default_factory=list)
    language: Language = Language.EN


class DailyTotals(BaseModel):
    """Consumption and activity totals for one date."""

    log_date: str
    consumed_kcal: int = Field(ge=0)
    activity_burn_kcal: int = Field(ge=0)
    adjusted_goal_kcal: int = Field(description="Daily budget plus activity burn")
    percent: float = Field(ge=0)
    remaining_kcal: int = Field(description="Negative if over goal")
    status: CalorieStatus


class Progress(BaseModel):
    """Weight progress towards the target."""

    start_weight: float
    current_weight: float
    target_weight: float
    lost_kg: float = Field(description="Negative on a net gain")
    percent: float = Field(ge=0, le=100)


class PlanSummary(BaseModel):
    """Budget, maintenance and dates for the current profile."""

    latest_weight: float
    maintenance_kcal: int
    daily_budget: int
    daily_deficit_kcal: int
    projected_date: DateType
    min_safe_date: DateType
    progress: Progress


class DaySummary(BaseModel):
    """Summary for a single day in the weekly report."""

    log_date: str
    consumed_kcal: int
    activity_burn_kcal: int
    adjusted_goal_kcal: int
    item_count: int
    activity_count: int
    weight: Optional[float] = None


class WeeklyReport(BaseModel):
    """Seven-day window of daily summaries."""

    week_start: DateType
    week_end: DateType
    daily_summaries: list[DaySummary]
    total_consumed_kcal: int
    total_activity_burn_kcal: int
    avg_daily_consumed_kcal: float
    net_balance_kcal: int = Field(
        description="Consumed minus adjusted goals over logged days. Negative = under budget."
    )
    days_logged: int
    weights: dict[str, float] = Field(default_factory=dict)
