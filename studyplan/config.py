"""
studyplan.config
---------

This module defines the scheduling constants and the PlannerConfig class that bundles them.

Classes:
    ReviewStep: One static review of a revision policy.
    PlannerConfig: The capacity and revision settings of a scheduling run.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from collections.abc import Mapping
import json
from typing import NamedTuple, TypedDict
from typing_extensions import Self


class ReviewStep(NamedTuple):
    """
    One review of a static revision policy.

    Attributes:
        day_offset: Days after the study day on which the review is due.
        minutes: Minutes allocated to the review.
    """

    day_offset: int
    minutes: int


REVISION_POLICIES: dict[str, tuple[ReviewStep, ...]] = {
    "off": (),
    "light": (ReviewStep(3, 10),),
    "standard": (
        ReviewStep(1, 10),
        ReviewStep(3, 15),
        ReviewStep(7, 25),
    ),
    "aggressive": (
        ReviewStep(1, 15),
        ReviewStep(3, 20),
        ReviewStep(7, 30),
        ReviewStep(14, 20),
    ),
}
DEFAULT_REVISION_POLICY = "standard"

DEFAULT_MINUTES_PER_DAY = 120
MIN_DAILY_MINUTES = 30
MAX_DAILY_MINUTES = 480
MAX_SCHEDULE_DAYS = 365
DEFAULT_STUDY_PERIOD_DAYS = 30
DEFAULT_CATCH_UP_BUFFER_PERCENT = 15
MAX_CATCH_UP_BUFFER_PERCENT = 50
CATCH_UP_SPAN_DAYS = 5


class PlannerConfigDict(TypedDict):
    """
    JSON-serializable dictionary representation of a PlannerConfig object.
    """

    min_daily_minutes: int
    max_daily_minutes: int
    max_schedule_days: int
    default_study_period_days: int
    default_minutes_per_day: int
    default_catch_up_buffer_percent: int
    catch_up_span_days: int
    revision_policies: dict[str, list[list[int]]]


@dataclass(frozen=True)
class PlannerConfig:
    """
    Capacity and revision settings shared by the calendar, builder and placer.

    Attributes:
        min_daily_minutes: Lower bound of the default daily budget; a day with less remaining than this is full.
        max_daily_minutes: Upper bound of any daily budget.
        max_schedule_days: Number of calendar days a plan may span.
        default_study_period_days: Horizon used when no exam date is set.
        default_minutes_per_day: Daily budget used when the learner sets none.
        default_catch_up_buffer_percent: Share of each day withheld for catch-up when the learner sets none.
        catch_up_span_days: Number of future days overdue work is spread across.
        revision_policies: Static review offsets and durations keyed by policy name.
    """

    min_daily_minutes: int = MIN_DAILY_MINUTES
    max_daily_minutes: int = MAX_DAILY_MINUTES
    max_schedule_days: int = MAX_SCHEDULE_DAYS
    default_study_period_days: int = DEFAULT_STUDY_PERIOD_DAYS
    default_minutes_per_day: int = DEFAULT_MINUTES_PER_DAY
    default_catch_up_buffer_percent: int = DEFAULT_CATCH_UP_BUFFER_PERCENT
    catch_up_span_days: int = CATCH_UP_SPAN_DAYS
    revision_policies: Mapping[str, tuple[ReviewStep, ...]] = field(
        default_factory=lambda: dict(REVISION_POLICIES)
    )

    def __post_init__(self) -> None:
        error_messages = []

        if not 0 < self.min_daily_minutes <= self.max_daily_minutes:
            error_messages.append(
                f"daily minutes bounds ({self.min_daily_minutes}, {self.max_daily_minutes}) are invalid"
            )
        if self.max_schedule_days < 1:
            error_messages.append(
                f"max_schedule_days = {self.max_schedule_days} must be at least 1"
            )
        if self.default_study_period_days < 0:
            error_messages.append(
                f"default_study_period_days = {self.default_study_period_days} must not be negative"
            )
        if not 0 <= self.default_catch_up_buffer_percent <= MAX_CATCH_UP_BUFFER_PERCENT:
            error_messages.append(
                f"default_catch_up_buffer_percent = {self.default_catch_up_buffer_percent} is out of bounds: (0, {MAX_CATCH_UP_BUFFER_PERCENT})"
            )
        if self.catch_up_span_days < 1:
            error_messages.append(
                f"catch_up_span_days = {self.catch_up_span_days} must be at least 1"
            )
        if DEFAULT_REVISION_POLICY not in self.revision_policies:
            error_messages.append(
                f"revision_policies must define the '{DEFAULT_REVISION_POLICY}' policy"
            )

        if len(error_messages) > 0:
            raise ValueError(
                "Invalid planner configuration:\n" + "\n".join(error_messages)
            )

    def revision_steps(self, policy: str | None) -> tuple[ReviewStep, ...]:
        """
        Returns the review steps of a policy, falling back to the standard policy for unknown names.
        """

        if policy not in self.revision_policies:
            policy = DEFAULT_REVISION_POLICY

        return tuple(self.revision_policies[policy])

    def to_dict(self) -> PlannerConfigDict:
        """
        Returns a JSON-serializable dictionary representation of the PlannerConfig object.
        """

        return {
            "min_daily_minutes": self.min_daily_minutes,
            "max_daily_minutes": self.max_daily_minutes,
            "max_schedule_days": self.max_schedule_days,
            "default_study_period_days": self.default_study_period_days,
            "default_minutes_per_day": self.default_minutes_per_day,
            "default_catch_up_buffer_percent": self.default_catch_up_buffer_percent,
            "catch_up_span_days": self.catch_up_span_days,
            "revision_policies": {
                name: [[step.day_offset, step.minutes] for step in steps]
                for name, steps in self.revision_policies.items()
            },
        }

    @classmethod
    def from_dict(cls, source_dict: PlannerConfigDict) -> Self:
        """
        Creates a PlannerConfig object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing PlannerConfig object.

        Returns:
            A PlannerConfig object created from the provided dictionary.

        Raises:
            ValueError: If the resulting configuration is inconsistent.
        """

        return cls(
            min_daily_minutes=int(source_dict["min_daily_minutes"]),
            max_daily_minutes=int(source_dict["max_daily_minutes"]),
            max_schedule_days=int(source_dict["max_schedule_days"]),
            default_study_period_days=int(source_dict["default_study_period_days"]),
            default_minutes_per_day=int(source_dict["default_minutes_per_day"]),
            default_catch_up_buffer_percent=int(
                source_dict["default_catch_up_buffer_percent"]
            ),
            catch_up_span_days=int(source_dict["catch_up_span_days"]),
            revision_policies={
                name: tuple(ReviewStep(int(offset), int(minutes)) for offset, minutes in steps)
                for name, steps in source_dict["revision_policies"].items()
            },
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the PlannerConfig object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a PlannerConfig object from a JSON-serialized string.
        """

        source_dict: PlannerConfigDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


DEFAULT_CONFIG = PlannerConfig()


__all__ = [
    "ReviewStep",
    "PlannerConfig",
    "REVISION_POLICIES",
    "DEFAULT_REVISION_POLICY",
    "DEFAULT_MINUTES_PER_DAY",
    "MIN_DAILY_MINUTES",
    "MAX_DAILY_MINUTES",
    "MAX_SCHEDULE_DAYS",
    "DEFAULT_STUDY_PERIOD_DAYS",
    "DEFAULT_CATCH_UP_BUFFER_PERCENT",
    "MAX_CATCH_UP_BUFFER_PERCENT",
    "CATCH_UP_SPAN_DAYS",
    "DEFAULT_CONFIG",
]
