from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..data import repos
from .activity import current_streak, last_review_date, remaining_new_quota


@dataclass(frozen=True)
class QueueStats:
    new_cards: int
    due_cards: int
    total_scheduled: int
    new_cards_left_today: int
    streak: int
    last_review_date: Optional[date]


def queue_stats(user_id, as_of) -> QueueStats:
    return QueueStats(
        new_cards=repos.count_new(user_id),
        due_cards=repos.count_scheduled(user_id, until=as_of),
        total_scheduled=repos.count_scheduled(user_id),
        new_cards_left_today=remaining_new_quota(user_id, as_of),
        streak=current_streak(user_id, as_of),
        last_review_date=last_review_date(user_id, as_of),
    )
