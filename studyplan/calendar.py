"""
studyplan.calendar
---------

This module builds the day-by-day study capacity a plan is packed into.

Classes:
    AvailabilityConfig: The learner's study-time availability.
    DaySlot: One calendar day's study-time budget during a scheduling run.

Functions:
    build_day_capacities: Builds the day slots between today and a horizon date.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, timedelta
import json
from typing import Any, TypedDict
from typing_extensions import Self
from studyplan.config import (
    DEFAULT_CONFIG,
    MAX_CATCH_UP_BUFFER_PERCENT,
    PlannerConfig,
)
from studyplan.validation import clamp_int, coerce_date

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

MAX_EXCLUDED_DATES = 365


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


class AvailabilityConfigDict(TypedDict):
    """
    JSON-serializable dictionary representation of an AvailabilityConfig object.
    """

    default_minutes_per_day: int | None
    per_day_overrides: dict[str, int]
    excluded_dates: list[str]
    catch_up_buffer_percent: int | None


@dataclass(frozen=True)
class AvailabilityConfig:
    """
    The learner's study-time availability.

    Construct it through ``from_dict`` when the values come from user input: that is where
    malformed values are defaulted and out-of-range values clamped.

    Attributes:
        default_minutes_per_day: Study minutes on a day without an override, or None for the planner default.
        per_day_overrides: Study minutes keyed by lowercase weekday name.
        excluded_dates: Days on which nothing is scheduled.
        catch_up_buffer_percent: Share of each day (0-50) withheld to absorb overdue work, or None for the planner default.
    """

    default_minutes_per_day: int | None = None
    per_day_overrides: dict[str, int] = field(default_factory=dict)
    excluded_dates: frozenset[date] = frozenset()
    catch_up_buffer_percent: int | None = None

    @classmethod
    def from_dict(
        cls, source_dict: dict[str, Any] | None, config: PlannerConfig = DEFAULT_CONFIG
    ) -> Self:
        """
        Creates a clamped AvailabilityConfig from user-supplied settings.

        Args:
            source_dict: The raw settings. Missing, malformed or unknown entries are ignored.
            config: The planner bounds to clamp against.

        Returns:
            An AvailabilityConfig whose values are all within bounds.
        """

        source_dict = source_dict or {}

        default_minutes = source_dict.get("default_minutes_per_day")
        if default_minutes is not None:
            default_minutes = clamp_int(
                default_minutes,
                config.min_daily_minutes,
                config.max_daily_minutes,
                default=config.default_minutes_per_day,
            )

        overrides = {}
        raw_overrides = source_dict.get("per_day_overrides")
        if isinstance(raw_overrides, dict):
            for weekday, minutes in raw_overrides.items():
                weekday = str(weekday).strip().lower()
                if weekday in WEEKDAYS and minutes is not None:
                    overrides[weekday] = clamp_int(
                        minutes, 0, config.max_daily_minutes, default=0
                    )

        excluded = []
        raw_excluded = source_dict.get("excluded_dates")
        if isinstance(raw_excluded, (list, tuple, set, frozenset)):
            for raw_date in list(raw_excluded)[:MAX_EXCLUDED_DATES]:
                excluded_date = coerce_date(raw_date)
                if excluded_date is not None:
                    excluded.append(excluded_date)

        buffer_percent = source_dict.get("catch_up_buffer_percent")
        if buffer_percent is not None:
            buffer_percent = clamp_int(
                buffer_percent,
                0,
                MAX_CATCH_UP_BUFFER_PERCENT,
                default=config.default_catch_up_buffer_percent,
            )

        return cls(
            default_minutes_per_day=default_minutes,
            per_day_overrides=overrides,
            excluded_dates=frozenset(excluded),
            catch_up_buffer_percent=buffer_percent,
        )

    def to_dict(self) -> AvailabilityConfigDict:
        """
        Returns a JSON-serializable dictionary representation of the AvailabilityConfig object.
        """

        return {
            "default_minutes_per_day": self.default_minutes_per_day,
            "per_day_overrides": dict(self.per_day_overrides),
            "excluded_dates": sorted(day.isoformat() for day in self.excluded_dates),
            "catch_up_buffer_percent": self.catch_up_buffer_percent,
        }

    def to_json(self, indent: int | str | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass
class DaySlot:
    """
    One calendar day's study-time budget during a scheduling run.

    Attributes:
        date: The calendar day.
        usable_capacity: Minutes available after the catch-up buffer.
        remaining: Minutes not yet allocated; never more than usable_capacity.
    """

    date: date
    usable_capacity: int
    remaining: int

    def copy(self) -> DaySlot:
        return DaySlot(
            date=self.date,
            usable_capacity=self.usable_capacity,
            remaining=self.remaining,
        )


def build_day_capacities(
    today: date,
    horizon_date: date | None = None,
    availability: AvailabilityConfig | dict[str, Any] | None = None,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> list[DaySlot]:
    """
    Builds the day slots of a plan, from today through the horizon date.

    The walk stops after ``config.max_schedule_days`` calendar days. Excluded dates are skipped
    but still count toward that cap.

    Args:
        today: The first day of the plan.
        horizon_date: The last day of the plan (usually the exam date), or None for the default study period.
        availability: The learner's availability; a raw dictionary is clamped through AvailabilityConfig.from_dict.
        config: The planner bounds.

    Returns:
        list[DaySlot]: The retained days in date order, each with ``remaining == usable_capacity``.
    """

    if availability is None:
        availability = AvailabilityConfig()
    elif isinstance(availability, dict):
        availability = AvailabilityConfig.from_dict(availability, config=config)

    if horizon_date is None:
        horizon_date = today + timedelta(days=config.default_study_period_days)

    default_minutes = clamp_int(
        availability.default_minutes_per_day,
        config.min_daily_minutes,
        config.max_daily_minutes,
        default=config.default_minutes_per_day,
    )
    buffer_percent = clamp_int(
        availability.catch_up_buffer_percent,
        0,
        MAX_CATCH_UP_BUFFER_PERCENT,
        default=config.default_catch_up_buffer_percent,
    )

    days = []
    for offset in range(config.max_schedule_days):
        day = today + timedelta(days=offset)
        if day > horizon_date:
            break

        if day in availability.excluded_dates:
            continue

        override = availability.per_day_overrides.get(weekday_name(day))
        if override is not None:
            capacity = clamp_int(override, 0, config.max_daily_minutes)
        else:
            capacity = default_minutes

        usable = capacity * (100 - buffer_percent) // 100
        days.append(DaySlot(date=day, usable_capacity=usable, remaining=usable))

    return days


__all__ = [
    "AvailabilityConfig",
    "DaySlot",
    "build_day_capacities",
    "weekday_name",
    "WEEKDAYS",
]
