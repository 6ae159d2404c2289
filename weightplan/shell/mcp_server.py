"""MCP Server - Tool definitions for the weight-loss planner.

Each tool forwards one user edit to the session or renders a read-only view
computed fresh from the current snapshot.
"""

import logging
import os
from datetime import date, timedelta

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core import state
from ..core.budget import TargetDateTooEarlyError
from ..core.catalog import (
    ACTIVITY_TYPES,
    CUSTOM_ACTIVITY_PREFIX,
    CUSTOM_OPTION_PREFIX,
    MEAL_MOMENTS,
    options_for_moment,
)
from ..core.daily import calculate_daily_totals, get_log, latest_known_weight, weight_for_date
from ..core.energy import age_in
from ..core.models import Snapshot
from ..core.projection import summarize_plan
from ..core.reports import generate_weekly_report
from .session import PlanSession
from .store import FirestoreConfig, SnapshotFirestoreStore


logger = logging.getLogger(__name__)

# Hosts accepted by the MCP transport, comma separated
transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=os.environ.get(
        "ALLOWED_HOSTS", "localhost:*,127.0.0.1:*,*.run.app:*,*.run.app"
    ).split(","),
)

mcp = FastMCP(
    "weightplan",
    instructions="""Weightplan - Personal weight-loss planner.

Use these tools to keep the user's profile up to date, log meals, activities
and body weight per day, and report the daily calorie budget, the projected
goal date and progress.

Dates are YYYY-MM-DD and default to today.
After logging, always show the updated day with get_day.""",
    stateless_http=True,
    transport_security=transport_security,
)

_session: PlanSession | None = None


def get_session() -> PlanSession:
    """Get or create the planner session."""
    global _session
    if _session is None:
        config = FirestoreConfig(
            project_id=os.environ.get("FIRESTORE_PROJECT"),
            database=os.environ.get("FIRESTORE_DATABASE", "weightplan"),
            collection=os.environ.get("FIRESTORE_COLLECTION", "appState"),
        )
        logger.info("Using Firestore database %s", config.database)
        _session = PlanSession(SnapshotFirestoreStore(config))
    return _session


def _resolve_date(date_str: str | None) -> str:
    """ISO date for a tool argument, today when omitted.

    Raises:
        ValueError: If date_str is not YYYY-MM-DD
    """
    if date_str is None:
        return date.today().isoformat()
    return date.fromisoformat(date_str).isoformat()


def _day_view(snapshot: Snapshot, log_date: str) -> dict:
    log = get_log(snapshot.daily_logs, log_date)
    totals = calculate_daily_totals(log, snapshot.profile.daily_budget)

    return {
        "date": log_date,
        "meals": {
            moment: [item.model_dump() for item in log.meals.get(moment, [])]
            for moment in MEAL_MOMENTS
        },
        "activities": [a.model_dump() for a in log.activities],
        "weight": log.weight,
        "weight_for_date": weight_for_date(
            snapshot.daily_logs, log_date, snapshot.profile.start_weight
        ),
        "totals": totals.model_dump(mode="json"),
    }


# ==================== Profile Tools ====================


@mcp.tool()
def get_profile() -> dict:
    """Retrieve the user's profile, derived budget and latest weight.

    Returns:
        Dictionary with all profile fields, age and latest known weight
    """
    snapshot = get_session().snapshot
    profile = snapshot.profile

    return {
        **profile.model_dump(mode="json"),
        "age": age_in(profile),
        "latest_weight": latest_known_weight(snapshot.daily_logs, profile.start_weight),
        "language": snapshot.language.value,
    }


@mcp.tool()
def update_profile(
    gender: str | None = None,
    birth_year: int | None = None,
    height: float | None = None,
    start_weight: float | None = None,
    target_weight: float | None = None,
    pace: str | None = None,
    custom_target_date: str | None = None,
    activity_level: str | None = None,
) -> dict:
    """Update profile fields. Only provided fields are changed.

    The daily budget is re-derived automatically. Setting custom_target_date
    switches the pace to "custom"; combining it with another pace is an
    error. Dates earlier than the minimum safe date are rejected.

    Args:
        gender: "male" or "female"
        birth_year: Year of birth
        height: Height in cm
        start_weight: Starting weight in kg
        target_weight: Goal weight in kg
        pace: "slow", "average", "fast" or "custom"
        custom_target_date: Desired goal date (YYYY-MM-DD)
        activity_level: "light", "moderate" or "heavy"

    Returns:
        Updated profile and plan summary
    """
    candidates = {
        "gender": gender,
        "birth_year": birth_year,
        "height": height,
        "start_weight": start_weight,
        "target_weight": target_weight,
        "pace": pace,
        "custom_target_date": custom_target_date,
        "activity_level": activity_level,
    }
    updates = {k: v for k, v in candidates.items() if v is not None}

    if not updates:
        return {"error": "No updates provided."}

    try:
        snapshot = get_session().apply(state.update_profile, updates)
    except TargetDateTooEarlyError as e:
        logger.info("Rejected target date %s", e.requested)
        return {"error": str(e), "earliest_date": e.earliest.isoformat()}
    except ValueError as e:
        return {"error": f"Invalid profile update: {e}"}

    return {
        "profile": snapshot.profile.model_dump(mode="json"),
        "plan": summarize_plan(snapshot).model_dump(mode="json"),
    }


@mcp.tool()
def set_language(language: str) -> dict:
    """Store the user's preferred language code (e.g. "en", "nl").

    Args:
        language: Two-letter language code

    Returns:
        Confirmation with the stored language
    """
    try:
        snapshot = get_session().apply(state.set_language, language)
    except ValueError:
        return {"error": f"Unsupported language: {language}"}
    return {"language": snapshot.language.value}


# ==================== Query Tools ====================


@mcp.tool()
def get_plan() -> dict:
    """Get the plan overview: maintenance, budget, deficit, goal dates, progress.

    Returns:
        Dictionary with the plan summary
    """
    return summarize_plan(get_session().snapshot).model_dump(mode="json")


@mcp.tool()
def get_day(date_str: str | None = None) -> dict:
    """Get a day's meals, activities, weight and calorie totals.

    Args:
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        Dictionary with the day's entries and totals
    """
    try:
        log_date = _resolve_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    return _day_view(get_session().snapshot, log_date)


@mcp.tool()
def get_weekly_report() -> dict:
    """Generate a report of the last 7 days.

    The net balance is consumption minus activity-adjusted goals over the
    logged days. Negative values mean the user stayed under budget.

    Returns:
        Dictionary with daily summaries and weekly totals
    """
    snapshot = get_session().snapshot
    start_date = date.today() - timedelta(days=6)
    report = generate_weekly_report(snapshot.daily_logs, snapshot.profile, start_date)

    return {
        **report.model_dump(mode="json"),
        "interpretation": (
            f"{abs(report.net_balance_kcal)} kcal "
            f"{'over' if report.net_balance_kcal > 0 else 'under'} budget "
            f"over {report.days_logged} days"
        ),
    }


# ==================== Logging Tools ====================


@mcp.tool()
def log_meal(
    moment: str,
    option_id: str | None = None,
    quantity: float = 1,
    name: str | None = None,
    kcal: float | None = None,
    date_str: str | None = None,
) -> dict:
    """Log a meal item, either from the catalog or as a free entry.

    Args:
        moment: Meal moment (e.g. "Breakfast", "Lunch", "Evening snack")
        option_id: Catalog item ID; kcal is its kcal per unit times quantity
        quantity: Number of units
        name: Name for a free entry (used when option_id is omitted)
        kcal: Total kcal for a free entry
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The updated day
    """
    try:
        log_date = _resolve_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    session = get_session()
    try:
        if option_id is not None:
            snapshot = session.apply(
                state.log_catalog_item, log_date, moment, option_id, quantity
            )
        elif name and kcal is not None:
            snapshot = session.apply(
                state.add_meal_item, log_date, moment, name, kcal, quantity
            )
        else:
            return {"error": "Provide option_id, or name and kcal."}
    except ValueError as e:
        return {"error": str(e)}

    return _day_view(snapshot, log_date)


@mcp.tool()
def update_meal(
    moment: str,
    item_id: str,
    kcal: float | None = None,
    name: str | None = None,
    date_str: str | None = None,
) -> dict:
    """Update a logged meal item. Negative kcal values are stored as 0.

    Args:
        moment: Meal moment the item was logged under
        item_id: ID of the logged item
        kcal: New kcal total (optional)
        name: New name (optional)
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The updated day
    """
    if kcal is None and name is None:
        return {"error": "No updates provided."}

    try:
        log_date = _resolve_date(date_str)
        snapshot = get_session().apply(
            state.update_meal_item, log_date, moment, item_id, kcal=kcal, name=name
        )
    except ValueError as e:
        return {"error": str(e)}

    return _day_view(snapshot, log_date)


@mcp.tool()
def remove_meal(moment: str, item_id: str, date_str: str | None = None) -> dict:
    """Remove a logged meal item.

    Args:
        moment: Meal moment the item was logged under
        item_id: ID of the logged item
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The updated day
    """
    try:
        log_date = _resolve_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    snapshot = get_session().apply(state.remove_meal_item, log_date, moment, item_id)
    return _day_view(snapshot, log_date)


@mcp.tool()
def log_activity(type_id: str, value: float, date_str: str | None = None) -> dict:
    """Log an activity. The burn uses the body weight known for that date.

    Args:
        type_id: Activity type ID from list_catalog
        value: Minutes, or km for distance-based activities
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The updated day
    """
    try:
        log_date = _resolve_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    snapshot = get_session().apply(state.add_activity, log_date, type_id, value)
    return _day_view(snapshot, log_date)


@mcp.tool()
def remove_activity(activity_id: str, date_str: str | None = None) -> dict:
    """Remove a logged activity.

    Args:
        activity_id: ID of the logged activity
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The updated day
    """
    try:
        log_date = _resolve_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    snapshot = get_session().apply(state.remove_activity, log_date, activity_id)
    return _day_view(snapshot, log_date)


@mcp.tool()
def log_weight(weight: float | None, date_str: str | None = None) -> dict:
    """Record the body weight for a date, or clear it with null.

    Args:
        weight: Weight in kg (positive), or null to clear the entry
        date_str: Date in YYYY-MM-DD format (defaults to today)

    Returns:
        The updated day and plan summary
    """
    try:
        log_date = _resolve_date(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    try:
        snapshot = get_session().apply(state.set_daily_weight, log_date, weight)
    except ValueError as e:
        return {"error": str(e)}
    return {
        "day": _day_view(snapshot, log_date),
        "plan": summarize_plan(snapshot).model_dump(mode="json"),
    }


# ==================== Catalog Tools ====================


@mcp.tool()
def list_catalog(moment: str | None = None) -> dict:
    """List selectable foods per meal moment and all activity types.

    Args:
        moment: Only list foods for this meal moment (optional)

    Returns:
        Dictionary with "foods" per moment and "activities"
    """
    snapshot = get_session().snapshot
    moments = [moment] if moment else MEAL_MOMENTS

    return {
        "foods": {
            m: [o.model_dump() for o in options_for_moment(m, snapshot.custom_options)]
            for m in moments
        },
        "activities": [
            a.model_dump() for a in [*ACTIVITY_TYPES, *snapshot.custom_activities]
        ],
    }


@mcp.tool()
def add_custom_food(
    name: str,
    kcal: float,
    categories: list[str],
    grams: float | None = None,
) -> dict:
    """Add a custom food to the catalog.

    Args:
        name: Name of the food
        kcal: kcal per unit
        categories: Any of "Breakfast", "Lunch", "Dinner", "Snacks"
        grams: Portion size shown in the name (optional)

    Returns:
        The created catalog item ID
    """
    option_id = state.new_custom_id(CUSTOM_OPTION_PREFIX)
    try:
        get_session().apply(
            state.add_custom_option, name, kcal, categories, grams, option_id=option_id
        )
    except ValueError as e:
        return {"error": str(e)}
    return {"id": option_id, "name": name}


@mcp.tool()
def remove_custom_food(option_id: str) -> dict:
    """Remove a custom food from every meal moment.

    Args:
        option_id: ID of the custom food

    Returns:
        Confirmation
    """
    get_session().apply(state.remove_custom_option, option_id)
    return {"success": True}


@mcp.tool()
def add_custom_activity(name: str, kcal_per_hour: float) -> dict:
    """Add a custom activity with a flat burn per 60 minutes.

    Args:
        name: Name of the activity
        kcal_per_hour: kcal burned per 60 minutes

    Returns:
        The created activity type ID
    """
    activity_id = state.new_custom_id(CUSTOM_ACTIVITY_PREFIX)
    try:
        get_session().apply(
            state.add_custom_activity, name, kcal_per_hour, activity_id=activity_id
        )
    except ValueError as e:
        return {"error": str(e)}
    return {"id": activity_id, "name": name}


@mcp.tool()
def remove_custom_activity(activity_id: str) -> dict:
    """Remove a custom activity type.

    Args:
        activity_id: ID of the custom activity

    Returns:
        Confirmation
    """
    get_session().apply(state.remove_custom_activity, activity_id)
    return {"success": True}


# ==================== Data Tools ====================


@mcp.tool()
def export_data() -> dict:
    """Export all data as a JSON document.

    Returns:
        Dictionary with a dated filename and the document text
    """
    filename, document = get_session().export_document()
    return {"filename": filename, "document": document}


@mcp.tool()
def import_data(document: str) -> dict:
    """Replace all data with a previously exported JSON document.

    Args:
        document: Exported document text

    Returns:
        Confirmation, or an error if the document is not a valid export
    """
    if not get_session().import_document(document):
        return {"error": "Import failed. The document is not a valid export."}
    return {"success": True}


@mcp.tool()
def reset_data(confirm: bool = False) -> dict:
    """Delete all data and start over. Requires confirm=true.

    Args:
        confirm: Must be true to proceed

    Returns:
        Confirmation
    """
    if not confirm:
        return {"error": "Pass confirm=true to delete all data."}
    get_session().reset()
    return {"success": True}
