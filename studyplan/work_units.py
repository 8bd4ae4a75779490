"""
studyplan.work_units
---------

Expands analyzed sections into STUDY, QUESTIONS and REVIEW work units.

Functions:
    build_work_units: Builds the work units of a course.
    compute_total_load: Sums the minutes of a list of work units.
    adaptive_review_minutes: Sizes a review from its memory difficulty.
"""

from __future__ import annotations
from collections.abc import Iterable, Mapping, Sequence
from studyplan.config import DEFAULT_CONFIG, PlannerConfig
from studyplan.memory_card import MemoryCard
from studyplan.section import Section
from studyplan.task import TaskType, WorkUnit
from studyplan.titles import derive_section_title
from studyplan.validation import clamp, clamp_int, round_half_up

MIN_STUDY_MINUTES = 5
MAX_STUDY_MINUTES = 240
DEFAULT_STUDY_MINUTES = 15
MIN_SECTION_DIFFICULTY = 1
MAX_SECTION_DIFFICULTY = 5
DEFAULT_SECTION_DIFFICULTY = 3
MAX_TOPIC_TAGS = 10

QUESTIONS_SHARE = 0.35
MIN_QUESTIONS_MINUTES = 8

MIN_REVIEW_MINUTES = 10
MAX_REVIEW_MINUTES = 30

TITLE_PREFIXES = {
    TaskType.STUDY: "Study",
    TaskType.QUESTIONS: "Questions",
    TaskType.REVIEW: "Review",
}


def adaptive_review_minutes(memory_difficulty: float) -> int:
    """
    Returns the length of a memory-model review: 10 minutes for the easiest memories, up to 30 for the hardest.
    """

    minutes = round_half_up(MIN_REVIEW_MINUTES + (memory_difficulty / 10) * 20)
    return int(clamp(minutes, MIN_REVIEW_MINUTES, MAX_REVIEW_MINUTES))


def _has_adaptive_schedule(card: MemoryCard | None) -> bool:
    return card is not None and card.interval > 0 and card.next_review is not None


def build_work_units(
    sections: Sequence[Section],
    course_id: str,
    revision_policy: str | None = None,
    memory_cards: Mapping[str, MemoryCard] | Iterable[MemoryCard] | None = None,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> list[WorkUnit]:
    """
    Converts a course's sections into work units, in section order.

    Each section yields one STUDY unit, one QUESTIONS unit when its questions are ready, and its
    REVIEW units. A section with a scheduled memory card gets a single review at the card's
    interval; other sections get the static reviews of the revision policy.

    Args:
        sections: The analyzed sections of the course.
        course_id: The course the units belong to.
        revision_policy: One of the configured policy names; unknown names fall back to "standard".
            A policy without reviews ("off") suppresses every REVIEW unit.
        memory_cards: Memory cards of the course, keyed by section id or as a plain collection.
        config: The planner configuration holding the revision policy table.

    Returns:
        list[WorkUnit]: The work units, grouped by section.
    """

    if memory_cards is None:
        memory_cards = {}
    elif not isinstance(memory_cards, Mapping):
        memory_cards = {card.section_id: card for card in memory_cards}

    review_steps = config.revision_steps(revision_policy)

    units = []
    for position, section in enumerate(sections):
        study_minutes = clamp_int(
            section.est_minutes,
            MIN_STUDY_MINUTES,
            MAX_STUDY_MINUTES,
            default=DEFAULT_STUDY_MINUTES,
        )
        difficulty = clamp_int(
            section.difficulty,
            MIN_SECTION_DIFFICULTY,
            MAX_SECTION_DIFFICULTY,
            default=DEFAULT_SECTION_DIFFICULTY,
        )
        title = derive_section_title(section, position)
        source_order = (
            section.source_order if section.source_order is not None else position
        )

        def unit(task_type: TaskType, minutes: int, **extra) -> WorkUnit:
            return WorkUnit(
                course_id=course_id,
                type=task_type,
                title=f"{TITLE_PREFIXES[task_type]}: {title}",
                section_ids=(section.id,),
                topic_tags=tuple(section.topic_tags[:MAX_TOPIC_TAGS]),
                est_minutes=minutes,
                difficulty=difficulty,
                source_order=source_order,
                **extra,
            )

        units.append(unit(TaskType.STUDY, study_minutes))

        if section.has_questions:
            questions_minutes = max(
                MIN_QUESTIONS_MINUTES, round_half_up(study_minutes * QUESTIONS_SHARE)
            )
            units.append(unit(TaskType.QUESTIONS, questions_minutes))

        if not review_steps:
            continue

        card = memory_cards.get(section.id)
        if _has_adaptive_schedule(card):
            units.append(
                unit(
                    TaskType.REVIEW,
                    adaptive_review_minutes(card.difficulty),
                    review_offset_days=card.interval,
                    fsrs_generated=True,
                )
            )
        else:
            for step in review_steps:
                units.append(
                    unit(
                        TaskType.REVIEW,
                        step.minutes,
                        review_offset_days=step.day_offset,
                    )
                )

    return units


def compute_total_load(work_units: Iterable[WorkUnit]) -> int:
    """
    Returns the total estimated minutes of the work units.
    """

    return sum(unit.est_minutes for unit in work_units)


__all__ = ["build_work_units", "compute_total_load", "adaptive_review_minutes"]
