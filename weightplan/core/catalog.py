"""Catalog reference data - built-in meal moments, foods and activities.

Custom entries added by the user live in the snapshot and use their own id
prefixes so they can never collide with the built-in ids below.
"""

from typing import Optional

from .models import ActivityType, ActivityUnit, MealOption


CUSTOM_OPTION_PREFIX = "c_"
CUSTOM_ACTIVITY_PREFIX = "ca_"

MEAL_MOMENTS: list[str] = [
    "Breakfast",
    "Morning snack",
    "Lunch",
    "Afternoon snack",
    "Dinner",
    "Evening snack",
]

SNACK_MOMENTS: list[str] = ["Morning snack", "Afternoon snack", "Evening snack"]

# Categories offered when adding a custom food; "Snacks" fans out to every snack moment
CATEGORY_MOMENTS: dict[str, list[str]] = {
    "Breakfast": ["Breakfast"],
    "Lunch": ["Lunch"],
    "Dinner": ["Dinner"],
    "Snacks": SNACK_MOMENTS,
}

_SNACK_OPTIONS: list[MealOption] = [
    MealOption(id="t1_1", name="Apple (with skin)", kcal=80, unit_name="pieces"),
    MealOption(id="t1_2", name="Mandarin", kcal=25, unit_name="pieces"),
    MealOption(id="t1_3", name="Banana (medium)", kcal=105, unit_name="pieces"),
    MealOption(id="t1_p", name="Pear", kcal=85, unit_name="pieces"),
    MealOption(id="t1_k", name="Kiwi", kcal=45, unit_name="pieces"),
    MealOption(id="t1_4", name="Handful of almonds (15g)", kcal=90, unit_name="handfuls"),
    MealOption(id="t1_5", name="Handful of walnuts (15g)", kcal=100, unit_name="handfuls"),
    MealOption(id="t2_1", name="Cherry tomatoes (100g)", kcal=30, unit_name="portion"),
    MealOption(id="t2_2", name="Cucumber (half)", kcal=20, unit_name="portion"),
    MealOption(id="t1_6", name="Plain rice cake", kcal=30, unit_name="pieces"),
    MealOption(id="t2_4", name="Protein bar (small)", kcal=140, unit_name="pieces"),
    MealOption(id="t2_5", name="Low-fat quark (150g)", kcal=85, unit_name="tub"),
    MealOption(id="t2_6", name="Boiled egg", kcal=75, unit_name="pieces"),
    MealOption(id="a1", name="Mint or ginger tea", kcal=2, unit_name="glass"),
    MealOption(id="a2", name="Dark chocolate square (85%)", kcal=55, unit_name="square"),
]

MEAL_OPTIONS: dict[str, list[MealOption]] = {
    "Breakfast": [
        MealOption(id="o1", name="Low-fat quark (per 100g)", kcal=55, unit_name="100g"),
        MealOption(id="o1_s", name="Plain skyr (per 100g)", kcal=63, unit_name="100g"),
        MealOption(id="o1_g", name="Greek yoghurt 0% (per 100g)", kcal=52, unit_name="100g"),
        MealOption(id="o2", name="Boiled egg", kcal=75, unit_name="pieces"),
        MealOption(id="o3", name="Wholegrain crispbread", kcal=35, unit_name="pieces"),
        MealOption(id="o4", name="Protein shake (per scoop)", kcal=110, unit_name="scoops"),
        MealOption(id="o5", name="Oats (per 10g dry)", kcal=38, unit_name="portion"),
    ],
    "Morning snack": _SNACK_OPTIONS,
    "Lunch": [
        MealOption(id="l_b1", name="Wholegrain bread slice", kcal=85, unit_name="slice"),
        MealOption(id="l_b3", name="Multigrain roll", kcal=150, unit_name="pieces"),
        MealOption(id="l_w1", name="Wholegrain wrap", kcal=160, unit_name="pieces"),
        MealOption(id="l_be1", name="Chicken breast topping (slice)", kcal=15, unit_name="slice"),
        MealOption(id="l_be5", name="30+ cheese (slice)", kcal=60, unit_name="slice"),
        MealOption(id="l_s1", name="Tuna salad", kcal=220, unit_name="portion"),
        MealOption(id="l_so1", name="Tomato soup (bowl)", kcal=100, unit_name="bowl"),
    ],
    "Afternoon snack": _SNACK_OPTIONS,
    "Dinner": [
        MealOption(id="d1", name="Stir-fry vegetables (500g)", kcal=160, unit_name="bag"),
        MealOption(id="d2", name="Italian vegetables (500g)", kcal=140, unit_name="bag"),
        MealOption(id="d_p1", name="Diced chicken breast (150g)", kcal=165, unit_name="portion"),
        MealOption(id="d_p2", name="Cod or white fish (150g)", kcal=130, unit_name="portion"),
        MealOption(id="d_p3", name="Lean minced beef (125g)", kcal=210, unit_name="portion"),
        MealOption(id="d_c1", name="Brown rice (cooked, 100g)", kcal=125, unit_name="portion"),
        MealOption(id="d_c3", name="Boiled potatoes (150g)", kcal=125, unit_name="portion"),
    ],
    "Evening snack": _SNACK_OPTIONS,
}

ACTIVITY_TYPES: list[ActivityType] = [
    ActivityType(id="walking", name="Walking (time)", met=4.5, unit=ActivityUnit.MINUTES),
    ActivityType(id="walking_km", name="Walking (distance)", met=4.5, unit=ActivityUnit.KM),
    ActivityType(id="swimming", name="Recreational swimming", met=6.0, unit=ActivityUnit.MINUTES),
    ActivityType(id="padel", name="Padel", met=8.0, unit=ActivityUnit.MINUTES),
    ActivityType(id="cycling", name="Cycling (15-20 km/h)", met=6.0, unit=ActivityUnit.MINUTES),
    ActivityType(id="running", name="Running (8 km/h)", met=8.3, unit=ActivityUnit.MINUTES),
    ActivityType(id="strength", name="Strength training", met=5.0, unit=ActivityUnit.MINUTES),
]


def find_activity_type(
    activity_type_id: str, custom_activities: list[ActivityType]
) -> Optional[ActivityType]:
    """Look up an activity type among built-in and custom entries.

    Returns None for unknown ids.
    """
    for activity in [*ACTIVITY_TYPES, *custom_activities]:
        if activity.id == activity_type_id:
            return activity
    return None


def options_for_moment(
    moment: str, custom_options: dict[str, list[MealOption]]
) -> list[MealOption]:
    """Custom entries first, then the built-ins for the moment."""
    return [*custom_options.get(moment, []), *MEAL_OPTIONS.get(moment, [])]


def find_meal_option(
    option_id: str, custom_options: dict[str, list[MealOption]]
) -> Optional[MealOption]:
    for moment in MEAL_MOMENTS:
        for option in options_for_moment(moment, custom_options):
            if option.id == option_id:
                return option
    return None
