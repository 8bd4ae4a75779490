"""
studyplan.section
---------

This module defines the Section class, the analyzed course material a plan is built from.

Classes:
    QuestionsStatus: Enum representing the question-generation status of a Section.
    SectionBlueprint: The concepts extracted from a Section.
    Section: One analyzed section of a course.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from typing_extensions import Self
from studyplan.validation import coerce_number


class QuestionsStatus(str, Enum):
    """
    Enum representing the question-generation status of a Section.
    """

    PENDING = "PENDING"
    GENERATING = "GENERATING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value if isinstance(item, str) and item.strip())


@dataclass(frozen=True)
class SectionBlueprint:
    """
    Concepts extracted from a section's text.

    Attributes:
        key_concepts: Central ideas of the section.
        terms_to_define: Vocabulary the section introduces.
        learning_objectives: What the learner should be able to do afterwards.
        high_yield_points: Facts most likely to be examined.
    """

    key_concepts: tuple[str, ...] = ()
    terms_to_define: tuple[str, ...] = ()
    learning_objectives: tuple[str, ...] = ()
    high_yield_points: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, source_dict: dict[str, Any] | None) -> Self:
        source_dict = source_dict or {}

        return cls(
            key_concepts=_string_list(source_dict.get("key_concepts")),
            terms_to_define=_string_list(source_dict.get("terms_to_define")),
            learning_objectives=_string_list(source_dict.get("learning_objectives")),
            high_yield_points=_string_list(source_dict.get("high_yield_points")),
        )


@dataclass(frozen=True)
class Section:
    """
    One analyzed section of a course. Sections are read-only to the scheduler.

    Attributes:
        id: The id of the section.
        title: The raw extracted title, possibly generic ("Pages 1-10").
        est_minutes: Estimated study time.
        difficulty: Estimated difficulty from 1 (easy) to 5 (hard).
        topic_tags: Topics the section covers.
        questions_status: Whether practice questions exist for the section.
        source_order: Position of the section in the course material.
        blueprint: Concepts extracted from the section.
    """

    id: str
    title: str = ""
    est_minutes: float = 15
    difficulty: float = 3
    topic_tags: tuple[str, ...] = ()
    questions_status: QuestionsStatus | None = None
    source_order: int | None = None
    blueprint: SectionBlueprint = field(default_factory=SectionBlueprint)

    @property
    def has_questions(self) -> bool:
        return self.questions_status == QuestionsStatus.COMPLETED

    @classmethod
    def from_dict(cls, source_dict: dict[str, Any]) -> Self:
        """
        Creates a Section from an extracted section record, defaulting anything missing or malformed.

        Args:
            source_dict: A dictionary describing the section. Only ``id`` is required.

        Returns:
            A Section object created from the provided dictionary.
        """

        try:
            questions_status = QuestionsStatus(source_dict.get("questions_status"))
        except ValueError:
            questions_status = None

        source_order = source_dict.get("source_order")

        return cls(
            id=str(source_dict["id"]),
            title=str(source_dict.get("title") or ""),
            est_minutes=coerce_number(source_dict.get("est_minutes"), 15),
            difficulty=coerce_number(source_dict.get("difficulty"), 3),
            topic_tags=_string_list(source_dict.get("topic_tags")),
            questions_status=questions_status,
            source_order=int(source_order) if isinstance(source_order, int) else None,
            blueprint=SectionBlueprint.from_dict(source_dict.get("blueprint")),
        )


__all__ = ["QuestionsStatus", "SectionBlueprint", "Section"]
