"""
studyplan.planner
---------

This module generates a course's study plan end to end.

Classes:
    PlanResult: The outcome of a plan generation.

Functions:
    generate_plan: Builds, checks and places a course's work.
    partition_for_regeneration: Splits existing tasks into those to keep and those to replace.
"""

from __future__ import annotations
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any
from loguru import logger
from studyplan.calendar import AvailabilityConfig, DaySlot, build_day_capacities
from studyplan.config import DEFAULT_CONFIG, PlannerConfig
from studyplan.feasibility import FeasibilityReport, check_feasibility
from studyplan.memory_card import MemoryCard
from studyplan.placement import place_tasks
from studyplan.section import Section
from studyplan.task import PlacedTask, TaskStatus, WorkUnit
from studyplan.validation import validate_schedule_inputs
from studyplan.work_units import build_work_units, compute_total_load


@dataclass
class PlanResult:
    """
    The outcome of generating a course's plan.

    Attributes:
        feasible: Whether the work fits, possibly after extending the window.
        tasks: The placed tasks, empty when the plan is infeasible or the inputs invalid.
        skipped: Units that could not be placed.
        total_minutes: Total minutes of the course's work.
        days: The day slots after placement.
        report: The feasibility report of the window that was used.
        extended_window: Whether the plan had to run past the requested window.
        original_deficit: The deficit of the requested window when it was extended.
        spill_days: Days the last task runs past the exam date.
        errors: Problems with the inputs; nothing is planned when present.
    """

    feasible: bool
    tasks: list[PlacedTask] = field(default_factory=list)
    skipped: list[WorkUnit] = field(default_factory=list)
    total_minutes: int = 0
    days: list[DaySlot] = field(default_factory=list)
    report: FeasibilityReport | None = None
    extended_window: bool = False
    original_deficit: int = 0
    spill_days: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def suggestions(self) -> tuple[str, ...]:
        return self.report.suggestions if self.report is not None else ()


def generate_plan(
    sections: Sequence[Section],
    course_id: str,
    today: date,
    exam_date: date | None = None,
    availability: AvailabilityConfig | dict[str, Any] | None = None,
    revision_policy: str | None = None,
    memory_cards: Mapping[str, MemoryCard] | Iterable[MemoryCard] | None = None,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> PlanResult:
    """
    Generates the plan of a course from today until its exam.

    When the work does not fit before the exam, the plan is tried once more against the longest
    window allowed, and reports how many days it spills past the exam.

    Args:
        sections: The course's analyzed sections.
        course_id: The course being planned.
        today: The first day of the plan.
        exam_date: The exam date, or None for the default study period.
        availability: The learner's availability.
        revision_policy: The static revision policy name.
        memory_cards: The learner's memory cards for the course.
        config: The planner configuration.

    Returns:
        PlanResult: The placed tasks, or the reasons no plan could be made.
    """

    errors = validate_schedule_inputs(today, exam_date)
    if errors:
        return PlanResult(feasible=False, errors=errors)

    if isinstance(availability, dict):
        availability = AvailabilityConfig.from_dict(availability, config=config)

    work_units = build_work_units(
        sections,
        course_id,
        revision_policy=revision_policy,
        memory_cards=memory_cards,
        config=config,
    )
    total_minutes = compute_total_load(work_units)

    days = build_day_capacities(today, exam_date, availability, config=config)
    report = check_feasibility(total_minutes, days)

    extended_window = False
    original_deficit = 0

    if not report.feasible:
        max_end_date = today + timedelta(days=config.max_schedule_days - 1)
        extended_days = build_day_capacities(
            today, max_end_date, availability, config=config
        )
        extended_report = check_feasibility(total_minutes, extended_days)

        if not extended_report.feasible:
            logger.info(
                f"Plan for course {course_id} is infeasible: {total_minutes} min requested, "
                f"{extended_report.deficit} min short"
            )
            return PlanResult(
                feasible=False,
                total_minutes=total_minutes,
                days=extended_days,
                report=extended_report,
            )

        original_deficit = report.deficit
        days = extended_days
        report = extended_report
        extended_window = True

    placement = place_tasks(work_units, days, config=config)

    spill_days = 0
    if extended_window and exam_date is not None and placement.placed:
        latest_due_date = max(task.due_date for task in placement.placed)
        spill_days = max(0, (latest_due_date - exam_date).days)

    for unit in placement.skipped:
        logger.warning(f"Could not place '{unit.title}' ({unit.est_minutes} min)")

    logger.info(
        f"Planned {len(placement.placed)} tasks over {len(days)} days for course {course_id}"
        + (f", {spill_days} days past the exam" if extended_window else "")
    )

    return PlanResult(
        feasible=True,
        tasks=placement.placed,
        skipped=placement.skipped,
        total_minutes=total_minutes,
        days=placement.days,
        report=report,
        extended_window=extended_window,
        original_deficit=original_deficit,
        spill_days=spill_days,
    )


def partition_for_regeneration(
    tasks: Iterable[PlacedTask], keep_completed: bool = True
) -> tuple[list[PlacedTask], list[PlacedTask]]:
    """
    Splits a course's existing tasks before it is planned again.

    Returns:
        tuple[list[PlacedTask], list[PlacedTask]]: The tasks to keep (completed ones, when
        ``keep_completed``) and the tasks to delete.
    """

    kept = []
    deleted = []
    for task in tasks:
        if keep_completed and task.status == TaskStatus.DONE:
            kept.append(task)
        else:
            deleted.append(task)

    return kept, deleted


__all__ = ["PlanResult", "generate_plan", "partition_for_regeneration"]
