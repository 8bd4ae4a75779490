"""
studyplan.memory_model
---------

This module defines the MemoryModel class as well as the various constants used in its calculations.

Classes:
    MemoryModel: The FSRS v5 memory model of a learner's sections.

Functions:
    review_card: Reviews a MemoryCard with a one-off MemoryModel.
"""

from __future__ import annotations
from collections.abc import Sequence
import math
from datetime import datetime, timezone, timedelta
from copy import copy
import json
from dataclasses import dataclass
from typing import TypedDict
from typing_extensions import Self
from studyplan.grade import Grade
from studyplan.memory_card import MemoryCard
from studyplan.state import State

DEFAULT_PARAMETERS = (
    0.4072,
    1.1829,
    3.1262,
    15.4722,
    7.2102,
    0.5316,
    1.0651,
    0.0589,
    1.5330,
    0.1544,
    1.0070,
    1.9395,
    0.1100,
    0.2970,
    2.2693,
    0.2315,
    2.9898,
    0.5163,
    0.6571,
)

DECAY = -0.5
# retrievability is exactly 0.9 after `stability` days
FACTOR = 0.9 ** (1 / DECAY) - 1

STABILITY_MIN = 0.001
LOWER_BOUNDS_PARAMETERS = (
    STABILITY_MIN,
    STABILITY_MIN,
    STABILITY_MIN,
    STABILITY_MIN,
    1.0,
    0.001,
    0.001,
    0.001,
    0.0,
    0.0,
    0.001,
    0.001,
    0.001,
    0.001,
    0.0,
    0.0,
    1.0,
    0.0,
    0.0,
)

INITIAL_STABILITY_MAX = 100.0
UPPER_BOUNDS_PARAMETERS = (
    INITIAL_STABILITY_MAX,
    INITIAL_STABILITY_MAX,
    INITIAL_STABILITY_MAX,
    INITIAL_STABILITY_MAX,
    10.0,
    4.0,
    4.0,
    0.75,
    4.5,
    0.8,
    3.5,
    5.0,
    0.25,
    0.9,
    4.0,
    1.0,
    6.0,
    2.0,
    2.0,
)

MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0

DEFAULT_DESIRED_RETENTION = 0.9
DEFAULT_MINIMUM_INTERVAL = 1
DEFAULT_MAXIMUM_INTERVAL = 365

SECONDS_PER_DAY = 86400


class MemoryModelDict(TypedDict):
    """
    JSON-serializable dictionary representation of a MemoryModel object.
    """

    parameters: list[float]
    desired_retention: float
    minimum_interval: int
    maximum_interval: int


def _elapsed_days(since: datetime, until: datetime) -> float:
    return max(0.0, (until - since).total_seconds() / SECONDS_PER_DAY)


@dataclass(init=False)
class MemoryModel:
    """
    The FSRS v5 memory model.

    Tracks how well a learner remembers each section and spaces its reviews so that recall
    probability is at the desired retention when the next review comes due.

    Attributes:
        parameters: The 19 model weights.
        desired_retention: The recall probability targeted at the next review.
        minimum_interval: The shortest interval in days between two reviews.
        maximum_interval: The longest interval in days between two reviews.
    """

    parameters: tuple[float, ...]
    desired_retention: float
    minimum_interval: int
    maximum_interval: int

    def __init__(
        self,
        parameters: Sequence[float] = DEFAULT_PARAMETERS,
        desired_retention: float = DEFAULT_DESIRED_RETENTION,
        minimum_interval: int = DEFAULT_MINIMUM_INTERVAL,
        maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL,
    ) -> None:
        self._validate_parameters(parameters=parameters)

        if not 0 < desired_retention < 1:
            raise ValueError(
                f"desired_retention must be between 0 and 1 (exclusive), got {desired_retention}"
            )

        if not 1 <= minimum_interval <= maximum_interval:
            raise ValueError(
                f"Expected 1 <= minimum_interval <= maximum_interval, got {minimum_interval} and {maximum_interval}"
            )

        self.parameters = tuple(parameters)
        self.desired_retention = desired_retention
        self.minimum_interval = int(minimum_interval)
        self.maximum_interval = int(maximum_interval)

    def _validate_parameters(self, *, parameters: Sequence[float]) -> None:
        if len(parameters) != len(LOWER_BOUNDS_PARAMETERS):
            raise ValueError(
                f"Expected {len(LOWER_BOUNDS_PARAMETERS)} parameters, got {len(parameters)}."
            )

        error_messages = []
        for index, (parameter, lower_bound, upper_bound) in enumerate(
            zip(parameters, LOWER_BOUNDS_PARAMETERS, UPPER_BOUNDS_PARAMETERS)
        ):
            if not lower_bound <= parameter <= upper_bound:
                error_message = f"parameters[{index}] = {parameter} is out of bounds: ({lower_bound}, {upper_bound})"
                error_messages.append(error_message)

        if len(error_messages) > 0:
            raise ValueError(
                "One or more parameters are out of bounds:\n"
                + "\n".join(error_messages)
            )

    def get_retrievability(
        self, card: MemoryCard, current_datetime: datetime | None = None
    ) -> float:
        """
        Calculates a MemoryCard's current retrievability for a given date and time.

        The retrievability of a card is the predicted probability that its section is correctly recalled at the provided datetime.

        Args:
            card: The card whose retrievability is to be calculated
            current_datetime: The current date and time

        Returns:
            float: The retrievability of the MemoryCard object, 0 for a card that was never reviewed.
        """

        if card.last_review is None or card.stability <= 0:
            return 0

        if current_datetime is None:
            current_datetime = datetime.now(timezone.utc)

        return self._retrievability(
            elapsed_days=_elapsed_days(card.last_review, current_datetime),
            stability=card.stability,
        )

    def review_card(
        self,
        card: MemoryCard,
        grade: Grade | int,
        elapsed_days: float | None = None,
        review_datetime: datetime | None = None,
    ) -> MemoryCard:
        """
        Reviews a card with a given grade at a given time.

        Args:
            card: The card being reviewed. It is not modified.
            grade: The recall grade of the review; integers are rounded and clamped to 1-4.
            elapsed_days: Days since the card's last review. Defaults to the time between the card's
                last review and `review_datetime`, or 0 for a card that was never reviewed. Negative
                values count as 0.
            review_datetime: The date and time of the review.

        Returns:
            MemoryCard: The updated, reviewed card.

        Raises:
            ValueError: If the `review_datetime` argument is not timezone-aware and set to UTC.
        """

        if review_datetime is not None and (
            (review_datetime.tzinfo is None) or (review_datetime.tzinfo != timezone.utc)
        ):
            raise ValueError("datetime must be timezone-aware and set to UTC")

        card = copy(card)
        grade = Grade(min(max(round(grade), Grade.Again), Grade.Easy))

        if review_datetime is None:
            review_datetime = datetime.now(timezone.utc)

        if elapsed_days is None:
            elapsed_days = (
                _elapsed_days(card.last_review, review_datetime)
                if card.last_review
                else 0.0
            )
        elapsed_days = max(0.0, elapsed_days)

        if card.is_new:
            card.stability = self._initial_stability(grade=grade)
            card.difficulty = self._initial_difficulty(grade=grade, clamp=True)
            card.state = State.Learning if grade == Grade.Again else State.Review

        else:
            # stored cards may carry a difficulty of 0
            card.difficulty = self._clamp_difficulty(difficulty=card.difficulty)

            if elapsed_days < 1:
                card.stability = self._short_term_stability(
                    stability=card.stability, grade=grade
                )
            else:
                card.stability = self._next_stability(
                    difficulty=card.difficulty,
                    stability=card.stability,
                    retrievability=self._retrievability(
                        elapsed_days=elapsed_days, stability=card.stability
                    ),
                    grade=grade,
                )

            card.difficulty = self._next_difficulty(
                difficulty=card.difficulty, grade=grade
            )
            card.state = State.Relearning if grade == Grade.Again else State.Review

        card.reps += 1
        if grade == Grade.Again:
            card.lapses += 1

        card.interval = self._next_interval(stability=card.stability)
        card.last_review = review_datetime
        card.next_review = review_datetime + timedelta(days=card.interval)

        return card

    def to_dict(
        self,
    ) -> MemoryModelDict:
        """
        Returns a dictionary representation of the MemoryModel object.

        Returns:
            MemoryModelDict: A dictionary representation of the MemoryModel object.
        """

        return {
            "parameters": list(self.parameters),
            "desired_retention": self.desired_retention,
            "minimum_interval": self.minimum_interval,
            "maximum_interval": self.maximum_interval,
        }

    @classmethod
    def from_dict(cls, source_dict: MemoryModelDict) -> Self:
        """
        Creates a MemoryModel object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing MemoryModel object.

        Returns:
            Self: A MemoryModel object created from the provided dictionary.
        """

        return cls(
            parameters=source_dict["parameters"],
            desired_retention=source_dict["desired_retention"],
            minimum_interval=source_dict["minimum_interval"],
            maximum_interval=source_dict["maximum_interval"],
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the MemoryModel object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the MemoryModel object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a MemoryModel object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing MemoryModel object.

        Returns:
            Self: A MemoryModel object created from the JSON string.
        """

        source_dict: MemoryModelDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)

    def _retrievability(self, *, elapsed_days: float, stability: float) -> float:
        return (1 + FACTOR * elapsed_days / stability) ** DECAY

    def _clamp_difficulty(self, *, difficulty: float) -> float:
        return min(max(difficulty, MIN_DIFFICULTY), MAX_DIFFICULTY)

    def _clamp_stability(self, *, stability: float) -> float:
        return max(stability, STABILITY_MIN)

    def _initial_stability(self, *, grade: Grade) -> float:
        initial_stability = self.parameters[grade - 1]

        initial_stability = self._clamp_stability(stability=initial_stability)

        return initial_stability

    def _initial_difficulty(self, *, grade: Grade, clamp: bool) -> float:
        initial_difficulty = (
            self.parameters[4] - (math.e ** (self.parameters[5] * (grade - 1))) + 1
        )

        if clamp:
            initial_difficulty = self._clamp_difficulty(difficulty=initial_difficulty)

        return initial_difficulty

    def _next_interval(self, *, stability: float) -> int:
        next_interval = (stability / FACTOR) * (
            (self.desired_retention ** (1 / DECAY)) - 1
        )

        next_interval = round(next_interval)  # intervals are full days

        next_interval = max(next_interval, self.minimum_interval)

        next_interval = min(next_interval, self.maximum_interval)

        return next_interval

    def _short_term_stability(self, *, stability: float, grade: Grade) -> float:
        short_term_stability = stability * (
            math.e ** (self.parameters[17] * (grade - 3 + self.parameters[18]))
        )

        # a same-day lapse never strengthens the memory
        if grade == Grade.Again:
            short_term_stability = min(short_term_stability, stability)

        short_term_stability = self._clamp_stability(stability=short_term_stability)

        return short_term_stability

    def _next_difficulty(self, *, difficulty: float, grade: Grade) -> float:
        def _mean_reversion(*, arg_1: float, arg_2: float) -> float:
            return self.parameters[7] * arg_1 + (1 - self.parameters[7]) * arg_2

        arg_1 = self._initial_difficulty(grade=Grade.Easy, clamp=False)

        arg_2 = difficulty - (self.parameters[6] * (grade - 3))

        next_difficulty = _mean_reversion(arg_1=arg_1, arg_2=arg_2)

        next_difficulty = self._clamp_difficulty(difficulty=next_difficulty)

        return next_difficulty

    def _next_stability(
        self,
        *,
        difficulty: float,
        stability: float,
        retrievability: float,
        grade: Grade,
    ) -> float:
        if grade == Grade.Again:
            next_stability = self._next_forget_stability(
                difficulty=difficulty,
                stability=stability,
                retrievability=retrievability,
            )

        else:
            next_stability = self._next_recall_stability(
                difficulty=difficulty,
                stability=stability,
                retrievability=retrievability,
                grade=grade,
            )

        next_stability = self._clamp_stability(stability=next_stability)

        return next_stability

    def _next_forget_stability(
        self, *, difficulty: float, stability: float, retrievability: float
    ) -> float:
        next_forget_stability_long_term_params = (
            self.parameters[11]
            * (difficulty ** -self.parameters[12])
            * (((stability + 1) ** (self.parameters[13])) - 1)
            * (math.e ** ((1 - retrievability) * self.parameters[14]))
        )

        next_forget_stability_short_term_params = stability / (
            math.e ** (self.parameters[17] * self.parameters[18])
        )

        return min(
            next_forget_stability_long_term_params,
            next_forget_stability_short_term_params,
            stability,
        )

    def _next_recall_stability(
        self,
        *,
        difficulty: float,
        stability: float,
        retrievability: float,
        grade: Grade,
    ) -> float:
        hard_penalty = self.parameters[15] if grade == Grade.Hard else 1
        easy_bonus = self.parameters[16] if grade == Grade.Easy else 1

        return stability * (
            1
            + (math.e ** (self.parameters[8]))
            * (11 - difficulty)
            * (stability ** -self.parameters[9])
            * ((math.e ** ((1 - retrievability) * self.parameters[10])) - 1)
            * hard_penalty
            * easy_bonus
        )


def review_card(
    card: MemoryCard,
    grade: Grade | int,
    elapsed_days: float,
    desired_retention: float = DEFAULT_DESIRED_RETENTION,
    minimum_interval: int = DEFAULT_MINIMUM_INTERVAL,
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL,
    review_datetime: datetime | None = None,
    parameters: Sequence[float] = DEFAULT_PARAMETERS,
) -> MemoryCard:
    """
    Reviews a card with a MemoryModel built from the given configuration.

    Returns:
        MemoryCard: The updated, reviewed card.
    """

    memory_model = MemoryModel(
        parameters=parameters,
        desired_retention=desired_retention,
        minimum_interval=minimum_interval,
        maximum_interval=maximum_interval,
    )

    return memory_model.review_card(
        card, grade, elapsed_days=elapsed_days, review_datetime=review_datetime
    )


__all__ = ["MemoryModel", "review_card", "DEFAULT_PARAMETERS"]
