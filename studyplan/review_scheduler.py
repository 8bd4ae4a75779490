"""
studyplan.review_scheduler
---------

This module reschedules a section's reviews whenever one of its REVIEW tasks is completed.

Classes:
    MemoryCardRepository: Where memory cards are loaded from and saved to.
    AttemptRepository: Where a section's quiz attempts are read from.
    TaskRepository: Where new tasks are written to.
    ReviewScheduler: Grades a completed review and emits the next one.
"""

from __future__ import annotations
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Protocol, runtime_checkable
from loguru import logger
from studyplan.grading import (
    DEFAULT_LOOKBACK_DAYS,
    DEFAULT_THRESHOLDS,
    Attempt,
    GradingThresholds,
    grade_from_stats,
    summarize_attempts,
)
from studyplan.memory_card import MemoryCard
from studyplan.memory_model import SECONDS_PER_DAY, MemoryModel
from studyplan.review_log import ReviewLog
from studyplan.task import PlacedTask, TaskStatus, TaskType
from studyplan.work_units import adaptive_review_minutes

DEFAULT_REVIEW_TITLE = "Review: Section"


@runtime_checkable
class MemoryCardRepository(Protocol):
    """Protocol for memory card storage."""

    def get(self, section_id: str) -> MemoryCard | None:
        """Return the card of a section, or None if it was never reviewed."""
        ...

    def save(self, card: MemoryCard) -> None:
        """Create or replace the card of a section."""
        ...


@runtime_checkable
class AttemptRepository(Protocol):
    """Protocol for quiz attempt sources."""

    def attempts_for_section(self, section_id: str, since: datetime) -> Iterable[Attempt]:
        """Return the attempts on a section's questions made at or after `since`."""
        ...


@runtime_checkable
class TaskRepository(Protocol):
    """Protocol for task storage."""

    def add(self, task: PlacedTask) -> None:
        """Persist a new task."""
        ...


class ReviewScheduler:
    """
    Turns completed REVIEW tasks into adaptively timed follow-up reviews.

    Failures never reach the learner: the static revision policy keeps the plan usable, so any
    error in the pipeline is logged and the review is skipped.

    Attributes:
        cards: Storage of the learner's memory cards.
        attempts: Source of the learner's quiz attempts.
        tasks: Storage the next REVIEW task is written to.
        memory_model: The model that updates memory cards.
        thresholds: The cutoffs used to grade quiz performance.
        lookback_days: How far back quiz attempts are taken into account.
    """

    def __init__(
        self,
        cards: MemoryCardRepository,
        attempts: AttemptRepository,
        tasks: TaskRepository,
        memory_model: MemoryModel | None = None,
        thresholds: GradingThresholds = DEFAULT_THRESHOLDS,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    ) -> None:
        self.cards = cards
        self.attempts = attempts
        self.tasks = tasks
        self.memory_model = memory_model if memory_model is not None else MemoryModel()
        self.thresholds = thresholds
        self.lookback_days = lookback_days

    def on_task_updated(
        self, before: PlacedTask, after: PlacedTask, now: datetime | None = None
    ) -> ReviewLog | None:
        """
        Reviews the task's section when a REVIEW task has just been marked DONE.

        Returns:
            ReviewLog | None: The outcome of the review, or None when the update is not a
            completed review or the review failed.
        """

        if after.type != TaskType.REVIEW:
            return None

        if before.status == TaskStatus.DONE or after.status != TaskStatus.DONE:
            return None

        return self.review_section(after, now=now)

    def review_section(
        self, task: PlacedTask, now: datetime | None = None
    ) -> ReviewLog | None:
        """
        Grades the section of a completed REVIEW task, updates its memory card and adds the next
        REVIEW task.

        Args:
            task: The completed REVIEW task.
            now: The time of completion, timezone-aware UTC. Defaults to the current time.

        Returns:
            ReviewLog | None: The outcome of the review, or None if it failed.
        """

        if len(task.section_ids) == 0 or not task.section_ids[0]:
            logger.warning(f"REVIEW task '{task.title}' has no section, skipping it")
            return None

        section_id = task.section_id

        try:
            if now is None:
                now = datetime.now(timezone.utc)

            card = self.cards.get(section_id)
            if card is None:
                card = MemoryCard.blank(section_id=section_id, course_id=task.course_id)

            elapsed_days = 0.0
            if card.last_review is not None:
                elapsed_days = max(
                    0.0, (now - card.last_review).total_seconds() / SECONDS_PER_DAY
                )

            since = now - timedelta(days=self.lookback_days)
            stats = summarize_attempts(
                self.attempts.attempts_for_section(section_id, since),
                now=now,
                lookback_days=self.lookback_days,
            )
            grade = grade_from_stats(stats, self.thresholds)

            updated = self.memory_model.review_card(
                card, grade, elapsed_days=elapsed_days, review_datetime=now
            )
            self.cards.save(updated)

            next_task = PlacedTask(
                course_id=task.course_id,
                type=TaskType.REVIEW,
                title=task.title or DEFAULT_REVIEW_TITLE,
                section_ids=(section_id,),
                topic_tags=task.topic_tags,
                est_minutes=adaptive_review_minutes(updated.difficulty),
                difficulty=task.difficulty,
                source_order=task.source_order,
                review_offset_days=updated.interval,
                fsrs_generated=True,
                due_date=updated.next_review.date(),
            )
            self.tasks.add(next_task)

        except Exception as e:
            logger.warning(f"Adaptive review of section {section_id} failed: {e}")
            return None

        logger.info(
            f"Reviewed section {section_id}: grade {grade.name}, accuracy {stats.accuracy:.2f} "
            f"over {stats.count} attempts, stability {card.stability:.2f} -> {updated.stability:.2f}, "
            f"next review in {updated.interval} days"
        )

        return ReviewLog(
            section_id=section_id,
            course_id=task.course_id,
            grade=grade,
            stats=stats,
            previous_stability=card.stability,
            stability=updated.stability,
            interval=updated.interval,
            review_datetime=now,
            next_review=updated.next_review,
            next_task=next_task,
        )


__all__ = [
    "MemoryCardRepository",
    "AttemptRepository",
    "TaskRepository",
    "ReviewScheduler",
]
