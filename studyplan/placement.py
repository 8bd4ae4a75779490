"""
studyplan.placement
---------

Assigns work units to days: a first-fit bin-packing pass for study and question work followed by
anchoring each review at its offset from the day its section was studied.

Classes:
    PlacementResult: The tasks placed by a run, the units it dropped and the post-run day slots.

Functions:
    place_tasks: Places work units onto day slots.
"""

from __future__ import annotations
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
import math
from loguru import logger
from studyplan.calendar import DaySlot
from studyplan.config import DEFAULT_CONFIG, PlannerConfig
from studyplan.task import PlacedTask, TaskType, WorkUnit

DEFAULT_REVIEW_OFFSET_DAYS = 1


@dataclass
class PlacementResult:
    """
    The outcome of a placement run.

    Attributes:
        placed: Tasks with their due date and intra-day order.
        skipped: Units (or chunks of units) that could not be placed anywhere.
        days: Snapshot of the run's day slots after placement; the caller's slots are left untouched.
    """

    placed: list[PlacedTask] = field(default_factory=list)
    skipped: list[WorkUnit] = field(default_factory=list)
    days: list[DaySlot] = field(default_factory=list)


def split_work_unit(unit: WorkUnit, max_minutes: int) -> list[WorkUnit]:
    """
    Splits a unit longer than ``max_minutes`` into "(Part N)" chunks no longer than ``max_minutes``.
    """

    if max_minutes <= 0 or unit.est_minutes <= max_minutes:
        return [unit]

    part_count = math.ceil(unit.est_minutes / max_minutes)
    minutes_left = unit.est_minutes

    chunks = []
    for part in range(1, part_count + 1):
        minutes = min(max_minutes, minutes_left)
        minutes_left -= minutes
        chunks.append(
            replace(unit, title=f"{unit.title} (Part {part})", est_minutes=minutes)
        )

    return chunks


def _first_fit(days: Sequence[DaySlot], start: int, minutes: int) -> int | None:
    for index in range(start, len(days)):
        if days[index].remaining >= minutes:
            return index

    return None


def _roomiest(days: Sequence[DaySlot], start: int) -> int | None:
    best = None
    for index in range(start, len(days)):
        if days[index].remaining > 0 and (
            best is None or days[index].remaining > days[best].remaining
        ):
            best = index

    return best


def place_tasks(
    work_units: Iterable[WorkUnit],
    day_slots: Iterable[DaySlot],
    config: PlannerConfig = DEFAULT_CONFIG,
    force_overflow: bool = True,
) -> PlacementResult:
    """
    Places work units onto day slots.

    STUDY and QUESTIONS units are taken in course order (hardest first among equals), split when
    longer than the largest day, and put on the first day from a moving cursor with enough room.
    When no such day exists, a chunk is forced onto the day with the most remaining time from the
    cursor on. Forced placements, here and in the review fallback below, are the only cases in which
    a day receives more minutes than its usable capacity.
    A chunk is dropped when no day has any time left. The cursor moves forward once the current
    day has less than ``config.min_daily_minutes`` remaining.

    REVIEW units are anchored ``review_offset_days`` after the last day their section is studied
    (clamped to the last day), moved forward to the first day with room, or put on the last day.
    A REVIEW unit whose section has no placed STUDY task is dropped.

    Args:
        work_units: The units to place.
        day_slots: The calendar of the run; copied, never mutated.
        config: Supplies the minimum daily minutes that decide when a day is full.
        force_overflow: When False, a chunk that fits no day is dropped instead of forced onto the
            roomiest day, so no day is ever overfilled.

    Returns:
        PlacementResult: The placed tasks, the dropped units and the post-run day slots.
    """

    days = [day.copy() for day in day_slots]
    result = PlacementResult(days=days)
    tasks_per_day = [0] * len(days)

    def put(unit: WorkUnit, index: int) -> None:
        day = days[index]
        result.placed.append(
            PlacedTask.from_work_unit(
                unit, due_date=day.date, order_index=tasks_per_day[index]
            )
        )
        tasks_per_day[index] += 1
        day.remaining = max(0, day.remaining - unit.est_minutes)

    units = list(work_units)
    study_units = [unit for unit in units if unit.type != TaskType.REVIEW]
    review_units = [unit for unit in units if unit.type == TaskType.REVIEW]
    study_units.sort(key=lambda unit: (unit.source_order, -unit.difficulty))

    largest_day = max((day.usable_capacity for day in days), default=0)
    study_day_index: dict[str, int] = {}
    cursor = 0

    for unit in study_units:
        for chunk in split_work_unit(unit, largest_day):
            index = _first_fit(days, cursor, chunk.est_minutes)

            if index is None:
                index = _roomiest(days, cursor) if force_overflow else None
                if index is None:
                    logger.debug(f"No capacity left for '{chunk.title}', dropping it")
                    result.skipped.append(chunk)
                    continue

                logger.debug(
                    f"Forcing '{chunk.title}' ({chunk.est_minutes} min) onto {days[index].date} "
                    f"with {days[index].remaining} min remaining"
                )

            put(chunk, index)

            if chunk.type == TaskType.STUDY:
                study_day_index[chunk.section_id] = max(
                    index, study_day_index.get(chunk.section_id, index)
                )

            while cursor < len(days) and days[cursor].remaining < config.min_daily_minutes:
                cursor += 1

    last_index = len(days) - 1

    for unit in review_units:
        study_index = study_day_index.get(unit.section_id)
        if study_index is None:
            result.skipped.append(unit)
            continue

        offset = unit.review_offset_days
        if offset is None:
            offset = DEFAULT_REVIEW_OFFSET_DAYS

        target = min(study_index + max(0, offset), last_index)
        index = _first_fit(days, target, unit.est_minutes)
        if index is None:
            index = last_index

        put(unit, index)

    return result


__all__ = ["PlacementResult", "place_tasks", "split_work_unit"]
