from datetime import timedelta

import structlog

from ..config import DAILY_NEW_CARD_QUOTA
from ..data import repos

logger = structlog.get_logger()


def remaining_new_quota(user_id, on_date) -> int:
    row = repos.get_activity(user_id, on_date)
    if row is None:
        return DAILY_NEW_CARD_QUOTA
    return max(0, DAILY_NEW_CARD_QUOTA - row.new_cards_reviewed)


def record_review(user_id, on_date, is_new_card: bool):
    """
    Count one review for the user on ``on_date`` (and one new card if
    ``is_new_card``). Callers must invoke this at most once per card per day;
    no per-card deduplication happens here.
    """
    row = repos.increment_activity(user_id, on_date, reviews=1, new_cards=1 if is_new_card else 0)
    logger.info(
        "activity_recorded",
        user_id=str(user_id),
        date=on_date.isoformat(),
        is_new_card=is_new_card,
        review_count=row.review_count,
        new_cards_reviewed=row.new_cards_reviewed,
    )
    return row


def current_streak(user_id, as_of) -> int:
    """Consecutive active days ending today or yesterday; 0 if neither is active."""
    dates = repos.active_dates(user_id, as_of)
    if not dates:
        return 0

    if dates[0] == as_of:
        expected = as_of
    elif dates[0] == as_of - timedelta(days=1):
        expected = dates[0]
    else:
        return 0

    streak = 0
    for active in dates:
        if active != expected:
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def last_review_date(user_id, as_of):
    dates = repos.active_dates(user_id, as_of)
    return dates[0] if dates else None


def consistency_map(user_id, start, end) -> dict:
    """{date: review_count} for every date in [start, end] that has a record."""
    if start > end:
        raise ValueError(f"start {start} is after end {end}")
    return dict(repos.activity_between(user_id, start, end))
