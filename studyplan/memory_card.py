"""
studyplan.memory_card
---------

This module defines the MemoryCard class.

Classes:
    MemoryCard: The spaced-repetition memory state of one section for one learner.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
import json
from typing import TypedDict
from typing_extensions import Self
from studyplan.state import State


class MemoryCardDict(TypedDict):
    """
    JSON-serializable dictionary representation of a MemoryCard object.
    """

    section_id: str
    course_id: str
    state: str
    stability: float
    difficulty: float
    reps: int
    lapses: int
    interval: int
    last_review: str | None
    next_review: str | None


@dataclass
class MemoryCard:
    """
    Represents the memory state of one section, created on its first review and never deleted.

    Attributes:
        section_id: The section the card tracks.
        course_id: The course of that section.
        state: The card's current learning state.
        stability: Days until recall probability decays to the target retention; 0 while New.
        difficulty: Memory difficulty in [1, 10]; 0 while New.
        reps: Number of reviews so far.
        lapses: Number of times the section was forgotten.
        interval: Days between the last review and the next one.
        last_review: The date and time of the card's last review.
        next_review: The date and time when the card is due next.
    """

    section_id: str
    course_id: str
    state: State = State.New
    stability: float = 0.0
    difficulty: float = 0.0
    reps: int = 0
    lapses: int = 0
    interval: int = 0
    last_review: datetime | None = None
    next_review: datetime | None = None

    @classmethod
    def blank(cls, section_id: str, course_id: str) -> Self:
        """
        Returns a never-reviewed card for a section.
        """

        return cls(section_id=section_id, course_id=course_id)

    @property
    def is_new(self) -> bool:
        return self.state == State.New or self.reps == 0 or self.stability <= 0

    def to_dict(self) -> MemoryCardDict:
        """
        Returns a JSON-serializable dictionary representation of the MemoryCard object.

        This method is specifically useful for storing MemoryCard objects in a database.

        Returns:
            A dictionary representation of the MemoryCard object.
        """

        return {
            "section_id": self.section_id,
            "course_id": self.course_id,
            "state": self.state.name,
            "stability": self.stability,
            "difficulty": self.difficulty,
            "reps": self.reps,
            "lapses": self.lapses,
            "interval": self.interval,
            "last_review": self.last_review.isoformat() if self.last_review else None,
            "next_review": self.next_review.isoformat() if self.next_review else None,
        }

    @classmethod
    def from_dict(cls, source_dict: MemoryCardDict) -> Self:
        """
        Creates a MemoryCard object from an existing dictionary.

        Missing counters and parameters default to those of a blank card.

        Args:
            source_dict: A dictionary representing an existing MemoryCard object.

        Returns:
            A MemoryCard object created from the provided dictionary.
        """

        state = source_dict.get("state", State.New.name)
        if isinstance(state, str):
            state = State[state]
        else:
            state = State(int(state))

        last_review = source_dict.get("last_review")
        next_review = source_dict.get("next_review")

        return cls(
            section_id=source_dict["section_id"],
            course_id=source_dict["course_id"],
            state=state,
            stability=float(source_dict.get("stability") or 0.0),
            difficulty=float(source_dict.get("difficulty") or 0.0),
            reps=int(source_dict.get("reps") or 0),
            lapses=int(source_dict.get("lapses") or 0),
            interval=int(source_dict.get("interval") or 0),
            last_review=datetime.fromisoformat(last_review) if last_review else None,
            next_review=datetime.fromisoformat(next_review) if next_review else None,
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the MemoryCard object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the MemoryCard object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a MemoryCard object from a JSON-serialized string.
        """

        source_dict: MemoryCardDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["MemoryCard"]
