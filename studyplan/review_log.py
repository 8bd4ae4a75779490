"""
studyplan.review_log
---------

This module defines the ReviewLog class.

Classes:
    ReviewLog: Represents the outcome of one adaptive review of a section.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import TypedDict
import json
from typing_extensions import Self
from studyplan.grade import Grade
from studyplan.grading import AttemptStats
from studyplan.task import PlacedTask, PlacedTaskDict


class AttemptStatsDict(TypedDict):
    accuracy: float
    avg_time_sec: float
    avg_confidence: float
    count: int


class ReviewLogDict(TypedDict):
    """
    JSON-serializable dictionary representation of a ReviewLog object.
    """

    section_id: str
    course_id: str
    grade: int
    stats: AttemptStatsDict
    previous_stability: float
    stability: float
    interval: int
    review_datetime: str
    next_review: str
    next_task: PlacedTaskDict


@dataclass
class ReviewLog:
    """
    Represents the log entry of a section that has been reviewed.

    Attributes:
        section_id: The id of the section being reviewed.
        course_id: The course of that section.
        grade: The grade derived from the learner's quiz performance.
        stats: The quiz performance the grade was derived from.
        previous_stability: The card's stability before the review.
        stability: The card's stability after the review.
        interval: Days until the next review.
        review_datetime: The date and time of the review.
        next_review: The date and time when the next review is due.
        next_task: The REVIEW task emitted for the next review.
    """

    section_id: str
    course_id: str
    grade: Grade
    stats: AttemptStats
    previous_stability: float
    stability: float
    interval: int
    review_datetime: datetime
    next_review: datetime
    next_task: PlacedTask

    def to_dict(
        self,
    ) -> ReviewLogDict:
        """
        Returns a dictionary representation of the ReviewLog object.

        Returns:
            A dictionary representation of the ReviewLog object.
        """

        return {
            "section_id": self.section_id,
            "course_id": self.course_id,
            "grade": int(self.grade),
            "stats": {
                "accuracy": self.stats.accuracy,
                "avg_time_sec": self.stats.avg_time_sec,
                "avg_confidence": self.stats.avg_confidence,
                "count": self.stats.count,
            },
            "previous_stability": self.previous_stability,
            "stability": self.stability,
            "interval": self.interval,
            "review_datetime": self.review_datetime.isoformat(),
            "next_review": self.next_review.isoformat(),
            "next_task": self.next_task.to_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        source_dict: ReviewLogDict,
    ) -> Self:
        """
        Creates a ReviewLog object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing ReviewLog object.

        Returns:
            A ReviewLog object created from the provided dictionary.
        """

        return cls(
            section_id=source_dict["section_id"],
            course_id=source_dict["course_id"],
            grade=Grade(int(source_dict["grade"])),
            stats=AttemptStats(**source_dict["stats"]),
            previous_stability=float(source_dict["previous_stability"]),
            stability=float(source_dict["stability"]),
            interval=int(source_dict["interval"]),
            review_datetime=datetime.fromisoformat(source_dict["review_datetime"]),
            next_review=datetime.fromisoformat(source_dict["next_review"]),
            next_task=PlacedTask.from_dict(source_dict["next_task"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the ReviewLog object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the ReviewLog object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a ReviewLog object from a JSON-serialized string.
        """

        source_dict: ReviewLogDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["ReviewLog"]
