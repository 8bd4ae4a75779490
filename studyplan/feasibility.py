"""
studyplan.feasibility
---------

Checks whether a workload fits the available study time.
"""

from __future__ import annotations
from collections.abc import Iterable
from dataclasses import dataclass
from studyplan.calendar import DaySlot

SUGGESTIONS = (
    "Increase daily study time",
    "Reduce revision intensity",
    "Extend the study period",
)


@dataclass(frozen=True)
class FeasibilityReport:
    """
    The outcome of comparing a workload with the available capacity.

    Attributes:
        feasible: Whether the workload fits.
        deficit: Minutes by which the workload exceeds the capacity, 0 when it fits.
        capacity: Total usable minutes of the calendar.
        suggestions: Remediation hints, empty when the workload fits.
    """

    feasible: bool
    deficit: int
    capacity: int
    suggestions: tuple[str, ...] = ()


def check_feasibility(total_minutes: int, day_slots: Iterable[DaySlot]) -> FeasibilityReport:
    """
    Compares the requested minutes with the total usable capacity of the day slots.

    This only reports; it never adjusts the plan.
    """

    capacity = sum(day.usable_capacity for day in day_slots)
    feasible = total_minutes <= capacity

    return FeasibilityReport(
        feasible=feasible,
        deficit=max(0, total_minutes - capacity),
        capacity=capacity,
        suggestions=() if feasible else SUGGESTIONS,
    )


__all__ = ["FeasibilityReport", "check_feasibility", "SUGGESTIONS"]
