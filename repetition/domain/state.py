from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from ..config import DEFAULT_EASE_FACTOR
from .errors import CorruptState


@dataclass(frozen=True)
class CardState:
    """Scheduling record for one (user, card) pair.

    Exactly one of ``queue`` (new regime) and ``due`` (review regime) is set.
    ``version`` is the store's row version, used for compare-and-swap writes.
    """

    user_id: UUID
    card_id: UUID
    queue: Optional[int] = None
    due: Optional[date] = None
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval_days: int = 0
    repetitions: int = 0
    last_reviewed_at: Optional[datetime] = None
    version: int = 0

    @property
    def is_new(self) -> bool:
        return self.queue is not None and self.due is None

    @property
    def in_review(self) -> bool:
        return self.queue is None and self.due is not None

    def check(self) -> "CardState":
        if self.is_new == self.in_review:
            raise CorruptState(
                "record must be either new or in review",
                user_id=self.user_id,
                card_id=self.card_id,
                queue=self.queue,
                due=self.due,
            )
        return self

    def with_changes(self, **changes) -> "CardState":
        return replace(self, **changes)
