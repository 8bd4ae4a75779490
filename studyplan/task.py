"""
studyplan.task
---------

This module defines the units of planned work and the dated tasks they become.

Classes:
    TaskType: Enum representing the kind of work a task asks for.
    TaskStatus: Enum representing the completion status of a task.
    WorkUnit: A piece of planned work before it is given a date.
    PlacedTask: A WorkUnit with a due date and an intra-day order.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
import json
from typing import TypedDict
from typing_extensions import Self


class TaskType(str, Enum):
    """
    Enum representing the kind of work a task asks for.
    """

    STUDY = "STUDY"
    QUESTIONS = "QUESTIONS"
    REVIEW = "REVIEW"


class TaskStatus(str, Enum):
    """
    Enum representing the completion status of a task.
    """

    TODO = "TODO"
    DONE = "DONE"


@dataclass
class WorkUnit:
    """
    An atomic piece of planned work, produced and consumed within one scheduling run.

    Attributes:
        course_id: The course the work belongs to.
        type: Whether the unit is studying, practice questions or a review.
        title: Display title, prefixed with the task type.
        section_ids: The single section the unit covers.
        topic_tags: Topics of that section.
        est_minutes: Minutes the unit is expected to take.
        difficulty: Difficulty from 1 to 5.
        source_order: Position of the section in the course.
        review_offset_days: Days after the study day a REVIEW unit is due, None for other types.
        status: Completion status.
        is_pinned: Whether the learner pinned the task to its date.
        priority: 0 for planned work, 1 for elevated catch-up work.
        fsrs_generated: Whether the unit was timed by the memory model rather than a static policy.
    """

    course_id: str
    type: TaskType
    title: str
    section_ids: tuple[str, ...]
    topic_tags: tuple[str, ...] = ()
    est_minutes: int = 15
    difficulty: int = 3
    source_order: int = 0
    review_offset_days: int | None = None
    status: TaskStatus = TaskStatus.TODO
    is_pinned: bool = False
    priority: int = 0
    fsrs_generated: bool = False

    @property
    def section_id(self) -> str:
        return self.section_ids[0]


class PlacedTaskDict(TypedDict):
    """
    JSON-serializable dictionary representation of a PlacedTask object.
    """

    course_id: str
    type: str
    title: str
    section_ids: list[str]
    topic_tags: list[str]
    est_minutes: int
    difficulty: int
    source_order: int
    review_offset_days: int | None
    status: str
    is_pinned: bool
    priority: int
    fsrs_generated: bool
    due_date: str
    order_index: int


@dataclass(kw_only=True)
class PlacedTask(WorkUnit):
    """
    A WorkUnit assigned to a day. This is the record persisted as a learner's task.

    Attributes:
        due_date: The day the task is planned for.
        order_index: Position of the task within its day.
    """

    due_date: date
    order_index: int = 0

    @classmethod
    def from_work_unit(cls, unit: WorkUnit, due_date: date, order_index: int = 0) -> Self:
        values = {f.name: getattr(unit, f.name) for f in fields(WorkUnit)}
        return cls(**values, due_date=due_date, order_index=order_index)

    def to_dict(self) -> PlacedTaskDict:
        """
        Returns a JSON-serializable dictionary representation of the PlacedTask object.

        This method is specifically useful for storing PlacedTask objects in a database.
        """

        return {
            "course_id": self.course_id,
            "type": self.type.value,
            "title": self.title,
            "section_ids": list(self.section_ids),
            "topic_tags": list(self.topic_tags),
            "est_minutes": self.est_minutes,
            "difficulty": self.difficulty,
            "source_order": self.source_order,
            "review_offset_days": self.review_offset_days,
            "status": self.status.value,
            "is_pinned": self.is_pinned,
            "priority": self.priority,
            "fsrs_generated": self.fsrs_generated,
            "due_date": self.due_date.isoformat(),
            "order_index": self.order_index,
        }

    @classmethod
    def from_dict(cls, source_dict: PlacedTaskDict) -> Self:
        """
        Creates a PlacedTask object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing PlacedTask object.

        Returns:
            A PlacedTask object created from the provided dictionary.
        """

        return cls(
            course_id=source_dict["course_id"],
            type=TaskType(source_dict["type"]),
            title=source_dict["title"],
            section_ids=tuple(source_dict["section_ids"]),
            topic_tags=tuple(source_dict["topic_tags"]),
            est_minutes=int(source_dict["est_minutes"]),
            difficulty=int(source_dict["difficulty"]),
            source_order=int(source_dict["source_order"]),
            review_offset_days=source_dict["review_offset_days"],
            status=TaskStatus(source_dict["status"]),
            is_pinned=bool(source_dict["is_pinned"]),
            priority=int(source_dict["priority"]),
            fsrs_generated=bool(source_dict["fsrs_generated"]),
            due_date=date.fromisoformat(source_dict["due_date"]),
            order_index=int(source_dict["order_index"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the PlacedTask object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        source_dict: PlacedTaskDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["TaskType", "TaskStatus", "WorkUnit", "PlacedTask"]
