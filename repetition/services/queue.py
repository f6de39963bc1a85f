from django.db import IntegrityError, transaction
import structlog

from ..data import repos
from ..domain.errors import RecordsNotFound
from ..utils.ids import as_uuid

logger = structlog.get_logger()


def enqueue_new(user_id) -> int:
    """Next free new-queue position for the user: current max + 1, or 0.

    Only meaningful while the caller holds the user's new-queue lock, which
    ``add_card`` does.
    """
    top = repos.max_queue_position(user_id)
    return 0 if top is None else top + 1


def add_card(user_id, card_id):
    """Put a card at the back of the new queue. Returns ``(state, created)``."""
    with repos.atomic():
        repos.lock_new_queue(user_id)
        existing = repos.get_card(user_id, card_id)
        if existing is not None:
            logger.info("card_already_added", user_id=str(user_id), card_id=str(card_id))
            return existing, False

        position = enqueue_new(user_id)
        try:
            with transaction.atomic():
                state = repos.insert_new_card(user_id, card_id, position)
        except IntegrityError:
            # Same card inserted by a request that did not hold the lock
            return repos.get_card(user_id, card_id), False

    logger.info("card_enqueued", user_id=str(user_id), card_id=str(card_id), queue=position)
    return state, True


def remove_card(user_id, card_id) -> bool:
    with repos.atomic():
        repos.lock_new_queue(user_id)
        existing = repos.get_card(user_id, card_id)
        if existing is None:
            return False
        repos.delete_card(user_id, card_id)
        if existing.is_new:
            repos.close_queue_gap(user_id, existing.queue)

    logger.info("card_removed", user_id=str(user_id), card_id=str(card_id), was_new=existing.is_new)
    return True


def move_to_top(user_id, card_ids) -> list:
    """
    Move the given new cards to positions 0..k-1, keeping their relative
    order; the user's other new cards follow in their existing order.

    All-or-nothing: if any card is not currently new for this user, nothing
    changes and RecordsNotFound is raised. Returns the new queue as card ids.
    """
    wanted = {as_uuid(card_id) for card_id in card_ids}
    if not wanted:
        return [state.card_id for state in repos.new_queue(user_id)]

    with repos.atomic():
        repos.lock_new_queue(user_id)
        rows = repos.new_cards_for_update(user_id)

        moved = [row for row in rows if row.card_id in wanted]
        missing = wanted - {row.card_id for row in moved}
        if missing:
            logger.warning(
                "queue_reorder_rejected",
                user_id=str(user_id),
                missing=sorted(str(card_id) for card_id in missing),
            )
            raise RecordsNotFound(
                "cards are not in the user's new queue",
                user_id=user_id,
                card_ids=sorted(str(card_id) for card_id in missing),
            )

        others = [row for row in rows if row.card_id not in wanted]
        ordered = moved + others
        repos.rewrite_new_queue(user_id, ordered)

    logger.info("queue_reordered", user_id=str(user_id), moved=len(moved), total=len(ordered))
    return [row.card_id for row in ordered]


def new_queue(user_id) -> list:
    return [state.card_id for state in repos.new_queue(user_id)]


def review_queue(user_id, until=None) -> list:
    return [state.card_id for state in repos.review_queue(user_id, until)]
