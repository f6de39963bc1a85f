from dataclasses import dataclass, field
import random

import structlog

from ..data import repos
from ..domain.enums import INTERLEAVINGS, REVIEW_ORDERS
from .activity import remaining_new_quota

logger = structlog.get_logger()


@dataclass(frozen=True)
class SessionPlan:
    review_card_ids: list = field(default_factory=list)
    new_card_ids: list = field(default_factory=list)
    card_ids: list = field(default_factory=list)


def _interleave(review_ids, new_ids):
    merged = []
    for i in range(max(len(review_ids), len(new_ids))):
        if i < len(review_ids):
            merged.append(review_ids[i])
        if i < len(new_ids):
            merged.append(new_ids[i])
    return merged


def plan_session(
    user_id,
    as_of,
    *,
    limit=None,
    review_order="ordered",
    interleaving="review-first",
    rng=None,
) -> SessionPlan:
    """Cards to study on ``as_of``: due reviews, then new cards up to the daily quota.

    Read-only. With the default options the result is deterministic for a
    given store state: reviews by (due, card_id), then new cards by queue.
    """
    if review_order not in REVIEW_ORDERS:
        raise ValueError(f"review_order must be one of {REVIEW_ORDERS}")
    if interleaving not in INTERLEAVINGS:
        raise ValueError(f"interleaving must be one of {INTERLEAVINGS}")

    review_ids = [state.card_id for state in repos.review_queue(user_id, until=as_of)]
    if review_order == "random":
        (rng or random.Random()).shuffle(review_ids)

    remaining = remaining_new_quota(user_id, as_of)
    new_ids = [state.card_id for state in repos.new_queue(user_id, limit=remaining)] if remaining else []

    if interleaving == "interleaved":
        card_ids = _interleave(review_ids, new_ids)
    else:
        card_ids = review_ids + new_ids

    if limit is not None:
        card_ids = card_ids[:limit]
        kept = set(card_ids)
        review_ids = [card_id for card_id in review_ids if card_id in kept]
        new_ids = [card_id for card_id in new_ids if card_id in kept]

    logger.info(
        "session_planned",
        user_id=str(user_id),
        as_of=as_of.isoformat(),
        review_cards=len(review_ids),
        new_cards=len(new_ids),
        new_quota_left=remaining,
    )
    return SessionPlan(review_card_ids=review_ids, new_card_ids=new_ids, card_ids=card_ids)


def build_session(user_id, as_of, **options) -> list:
    return plan_session(user_id, as_of, **options).card_ids
