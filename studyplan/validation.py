"""
studyplan.validation
---------

Clamping and coercion helpers used at the boundary of the scheduling core.

Upstream section data is machine-extracted and frequently imperfect, so these
helpers never reject a value: anything malformed falls back to a default and
anything out of range is clamped.
"""

from __future__ import annotations
import math
from datetime import date, datetime
from numbers import Real
from typing import Any


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def coerce_number(value: Any, default: float) -> float:
    """
    Returns ``value`` as a finite float, or ``default`` when it is missing or not a number.
    """

    if isinstance(value, bool) or value is None:
        return default

    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return default

    if not isinstance(value, Real) or not math.isfinite(value):
        return default

    return float(value)


def clamp_int(value: Any, lower: int, upper: int, default: int | None = None) -> int:
    """
    Floors ``value`` to an integer within [lower, upper].

    Args:
        value: The raw value; may be missing or malformed.
        lower: Smallest allowed result.
        upper: Largest allowed result.
        default: Used when ``value`` is not a number. Defaults to ``lower``.
    """

    if default is None:
        default = lower

    number = coerce_number(value, default)

    return int(clamp(math.floor(number), lower, upper))


def coerce_date(value: Any) -> date | None:
    """
    Returns a date for a date, datetime or ISO-8601 string, or None if it cannot be read.
    """

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None

    return None


def round_half_up(value: float) -> int:
    """
    Rounds halves away from zero for positive values (10.5 -> 11), unlike the built-in round.
    """

    return math.floor(value + 0.5)


def truncate(value: Any, max_length: int) -> str:
    text = "" if value is None else str(value)
    return text[:max_length]


def validate_schedule_inputs(today: date, exam_date: date | None) -> list[str]:
    """
    Checks the dates a plan is requested for.

    Args:
        today: The first day of the plan.
        exam_date: The exam date, or None for an open-ended plan.

    Returns:
        A list of human-readable problems; empty when the inputs can be scheduled.
    """

    errors = []

    if exam_date is not None and exam_date < today:
        errors.append(
            f"Exam date {exam_date.isoformat()} is before the start date {today.isoformat()}."
        )

    return errors


__all__ = [
    "clamp",
    "coerce_number",
    "clamp_int",
    "coerce_date",
    "round_half_up",
    "truncate",
    "validate_schedule_inputs",
]
