"""
studyplan.grading
---------

This module turns quiz performance into recall grades.

Classes:
    Attempt: One answer to a quiz question.
    AttemptStats: Aggregate performance over a lookback window.
    GradingThresholds: The cutoffs used to grade performance.

Functions:
    summarize_attempts: Aggregates raw attempts into AttemptStats.
    grade_from_performance: Maps accuracy, time and confidence to a Grade.
    grade_from_stats: Grades AttemptStats, defaulting to Good without attempts.
"""

from __future__ import annotations
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from studyplan.grade import Grade
from studyplan.validation import clamp, coerce_number

DEFAULT_LOOKBACK_DAYS = 30
DEFAULT_ATTEMPT_LIMIT = 200
MAX_CONFIDENCE = 5.0


@dataclass(frozen=True)
class Attempt:
    """
    One answer to a quiz question belonging to a section.

    Attributes:
        correct: Whether the answer was right.
        time_spent_sec: Seconds spent on the question.
        confidence: Self-reported confidence from 1 to 5, or None if not asked.
        created_at: When the answer was given.
    """

    correct: bool
    time_spent_sec: float
    confidence: float | None
    created_at: datetime


@dataclass(frozen=True)
class AttemptStats:
    """
    Performance of a learner on one section over a lookback window.

    Attributes:
        accuracy: Fraction of correct answers.
        avg_time_sec: Average seconds per answer.
        avg_confidence: Average confidence over the answers that report one; 0 when none do.
        count: Number of answers aggregated.
    """

    accuracy: float = 0.5
    avg_time_sec: float = 30.0
    avg_confidence: float = 0.0
    count: int = 0


NEUTRAL_STATS = AttemptStats()


@dataclass(frozen=True)
class GradingThresholds:
    """
    Cutoffs of the performance grader.

    Accuracy is the primary signal; answer time and confidence only move a grade at the edges.

    Attributes:
        again_below: Accuracy below which a section is graded Again.
        hard_below: Accuracy below which a section is graded Hard (or Again when confidently wrong).
        slow_hard_below: Accuracy below which a slow learner is graded Hard.
        easy_above: Accuracy above which a fast, confident learner is graded Easy.
        fast_below_sec: Average answer time below which answers count as fast.
        slow_above_sec: Average answer time above which answers count as slow.
        confident_at_least: Average confidence from which answers count as confident.
    """

    again_below: float = 0.40
    hard_below: float = 0.65
    slow_hard_below: float = 0.80
    easy_above: float = 0.90
    fast_below_sec: float = 30.0
    slow_above_sec: float = 90.0
    confident_at_least: float = 4.0

    def __post_init__(self) -> None:
        if not (
            0.0
            <= self.again_below
            <= self.hard_below
            <= self.slow_hard_below
            <= self.easy_above
            <= 1.0
        ):
            raise ValueError(
                "accuracy thresholds must satisfy 0 <= again_below <= hard_below <= slow_hard_below <= easy_above <= 1"
            )

        if not 0.0 <= self.fast_below_sec <= self.slow_above_sec:
            raise ValueError("fast_below_sec must be between 0 and slow_above_sec")

        if not 0.0 <= self.confident_at_least <= MAX_CONFIDENCE:
            raise ValueError(
                f"confident_at_least must be between 0 and {MAX_CONFIDENCE}"
            )


DEFAULT_THRESHOLDS = GradingThresholds()


def summarize_attempts(
    attempts: Iterable[Attempt],
    now: datetime | None = None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    limit: int = DEFAULT_ATTEMPT_LIMIT,
) -> AttemptStats:
    """
    Aggregates the most recent attempts of the lookback window.

    Args:
        attempts: The section's attempts, in any order.
        now: End of the lookback window. Defaults to the current UTC time.
        lookback_days: Length of the window in days.
        limit: Maximum number of most recent attempts considered.

    Returns:
        AttemptStats: The aggregate, or neutral stats (accuracy 0.5, 30 s, no confidence) when the
        window holds no attempts.
    """

    if now is None:
        now = datetime.now(timezone.utc)

    cutoff = now - timedelta(days=lookback_days)
    recent = sorted(
        (attempt for attempt in attempts if attempt.created_at >= cutoff),
        key=lambda attempt: attempt.created_at,
        reverse=True,
    )[:limit]

    if len(recent) == 0:
        return NEUTRAL_STATS

    correct = sum(1 for attempt in recent if attempt.correct)
    total_time = sum(max(0.0, coerce_number(a.time_spent_sec, 0.0)) for a in recent)
    confidences = [a.confidence for a in recent if a.confidence is not None]

    return AttemptStats(
        accuracy=correct / len(recent),
        avg_time_sec=total_time / len(recent),
        avg_confidence=sum(confidences) / len(confidences) if confidences else 0.0,
        count=len(recent),
    )


def grade_from_performance(
    accuracy: float,
    avg_time_sec: float,
    avg_confidence: float,
    thresholds: GradingThresholds = DEFAULT_THRESHOLDS,
) -> Grade:
    """
    Maps quiz performance to a recall grade.

    The grade never decreases as accuracy rises while time and confidence stay fixed.
    An unknown time or confidence (0) never makes an answer fast or confident.

    Args:
        accuracy: Fraction of correct answers, clamped to [0, 1].
        avg_time_sec: Average seconds per answer, 0 when unknown.
        avg_confidence: Average confidence from 1 to 5, 0 when unknown.
        thresholds: The grading cutoffs.

    Returns:
        Grade: The recall grade.
    """

    accuracy = clamp(coerce_number(accuracy, 0.0), 0.0, 1.0)
    time = max(0.0, coerce_number(avg_time_sec, 0.0))
    confidence = clamp(coerce_number(avg_confidence, 0.0), 0.0, MAX_CONFIDENCE)

    fast = 0 < time < thresholds.fast_below_sec
    slow = time > thresholds.slow_above_sec
    confident = confidence > 0 and confidence >= thresholds.confident_at_least

    if accuracy < thresholds.again_below:
        return Grade.Again

    if accuracy < thresholds.hard_below:
        # quick and sure of itself yet mostly wrong
        if fast and confident:
            return Grade.Again
        return Grade.Hard

    if accuracy < thresholds.slow_hard_below and slow:
        return Grade.Hard

    if accuracy > thresholds.easy_above and fast and confident:
        return Grade.Easy

    return Grade.Good


def grade_from_stats(
    stats: AttemptStats, thresholds: GradingThresholds = DEFAULT_THRESHOLDS
) -> Grade:
    """
    Grades aggregated attempts; a section that was never quizzed is graded Good.
    """

    if stats.count == 0:
        return Grade.Good

    return grade_from_performance(
        stats.accuracy, stats.avg_time_sec, stats.avg_confidence, thresholds
    )


__all__ = [
    "Attempt",
    "AttemptStats",
    "GradingThresholds",
    "summarize_attempts",
    "grade_from_performance",
    "grade_from_stats",
]
