from enum import IntEnum


class Grade(IntEnum):
    """
    Enum representing the four possible recall grades of a review.
    """

    Again = 1
    Hard = 2
    Good = 3
    Easy = 4


__all__ = ["Grade"]
