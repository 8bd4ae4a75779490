"""
studyplan.catch_up
---------

Spreads overdue work over the next few days.

Classes:
    OverdueItem: An overdue TODO task awaiting a new date.
    RedistributedTask: The new date and priority of an overdue task.

Functions:
    distribute_overdue: Assigns new dates to overdue tasks.
"""

from __future__ import annotations
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any
import math
from studyplan.calendar import DaySlot
from studyplan.config import CATCH_UP_SPAN_DAYS

CATCH_UP_PRIORITY = 1
DEFAULT_ITEM_MINUTES = 15


@dataclass(frozen=True)
class OverdueItem:
    """
    An overdue TODO task.

    Attributes:
        ref: Opaque reference the caller uses to update the task.
        est_minutes: Expected length of the task, or None when unknown.
    """

    ref: Any
    est_minutes: int | None = None


@dataclass(frozen=True)
class RedistributedTask:
    """
    The new schedule of an overdue task.

    Attributes:
        ref: The reference of the original item.
        new_date: The day the task is moved to.
        day_offset: Days between today and ``new_date``.
        priority: Always elevated so catch-up work surfaces first.
    """

    ref: Any
    new_date: date
    day_offset: int
    priority: int = CATCH_UP_PRIORITY


def _even_split_offsets(count: int, span_days: int) -> list[int]:
    # fixed-size buckets of ceil(count / span_days) items, filled from the first day
    per_day = math.ceil(count / span_days)
    return [index // per_day + 1 for index in range(count)]


def distribute_overdue(
    items: Sequence[OverdueItem],
    today: date,
    span_days: int = CATCH_UP_SPAN_DAYS,
    day_capacities: Sequence[DaySlot] | None = None,
) -> list[RedistributedTask]:
    """
    Assigns new dates to overdue tasks, keeping their order.

    With day capacities, each item goes to the first day from a forward-only cursor with enough
    remaining time, and items that fit nowhere pile onto the last day. Without them, the items are
    split into buckets of ``ceil(len(items) / span_days)`` over the days after today.

    Args:
        items: The overdue tasks, in the order they should be caught up.
        today: The current day.
        span_days: How many days after today the even split spreads over.
        day_capacities: The catch-up window's day slots; copied, never mutated.

    Returns:
        list[RedistributedTask]: One entry per item, in input order.
    """

    if len(items) == 0:
        return []

    if day_capacities:
        days = [day.copy() for day in day_capacities]
        cursor = 0
        redistributed = []

        for item in items:
            minutes = item.est_minutes or DEFAULT_ITEM_MINUTES
            while cursor < len(days) and days[cursor].remaining < minutes:
                cursor += 1

            if cursor < len(days):
                day = days[cursor]
                day.remaining -= minutes
            else:
                day = days[-1]

            redistributed.append(
                RedistributedTask(
                    ref=item.ref,
                    new_date=day.date,
                    day_offset=(day.date - today).days,
                )
            )

        return redistributed

    span_days = max(1, int(span_days))
    offsets = _even_split_offsets(len(items), span_days)

    return [
        RedistributedTask(
            ref=item.ref,
            new_date=today + timedelta(days=day_offset),
            day_offset=day_offset,
        )
        for item, day_offset in zip(items, offsets)
    ]


__all__ = ["OverdueItem", "RedistributedTask", "distribute_overdue"]
