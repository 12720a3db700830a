"""
Distance unit conversion.

Driving distances are stored in miles and every other activity type in
kilometers, whatever unit the user prefers for display. Entry converts
display -> canonical and reads convert canonical -> display.
"""

from ridewitus.domain.models import ActivityType, DistanceUnit


MILES_TO_KM = 1.60934

CANONICAL_UNITS = {
    ActivityType.WALKING: DistanceUnit.KM,
    ActivityType.RUNNING: DistanceUnit.KM,
    ActivityType.BIKING: DistanceUnit.KM,
    ActivityType.DRIVING: DistanceUnit.MILES,
}


def convert(value: float, from_unit: DistanceUnit, to_unit: DistanceUnit) -> float:
    """Convert a distance between miles and kilometers."""
    from_unit = DistanceUnit(from_unit)
    to_unit = DistanceUnit(to_unit)
    if from_unit == to_unit:
        return value
    if from_unit == DistanceUnit.MILES:
        return value * MILES_TO_KM
    return value / MILES_TO_KM


def canonical_unit(activity_type: ActivityType) -> DistanceUnit:
    """Unit an activity type's distance is persisted in."""
    return CANONICAL_UNITS[ActivityType(activity_type)]


def to_canonical(value: float, activity_type: ActivityType, display_unit: DistanceUnit) -> float:
    return convert(value, display_unit, canonical_unit(activity_type))


def to_display(value: float, activity_type: ActivityType, display_unit: DistanceUnit) -> float:
    return convert(value, canonical_unit(activity_type), display_unit)


def format_distance(value: float, unit: DistanceUnit) -> str:
    """Format a distance with one decimal, e.g. ``3.1 km``."""
    return f"{value:.1f} {DistanceUnit(unit).value}"
