from enum import IntEnum

from .errors import InvalidRating


class Rating(IntEnum):
    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4

    @classmethod
    def parse(cls, value):
        """Coerce an int (or Rating) into a Rating, rejecting anything else."""
        if isinstance(value, bool):
            raise InvalidRating(rating=value)
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise InvalidRating(rating=value) from None


RATING_LABELS = {
    Rating.AGAIN: "again",
    Rating.HARD: "hard",
    Rating.GOOD: "good",
    Rating.EASY: "easy",
}

REVIEW_ORDERS = ("ordered", "random")
INTERLEAVINGS = ("review-first", "interleaved")
