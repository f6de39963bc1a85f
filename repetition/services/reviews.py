from django.utils import timezone
import structlog

from ..data import repos
from ..domain.enums import RATING_LABELS, Rating
from ..domain.errors import RecordsNotFound
from ..domain.logic import schedule
from ..utils.time import default_clock, to_local_iso
from .activity import record_review
from .sessions import plan_session

logger = structlog.get_logger()


def start_session(user_id, as_of=None, *, clock=None, **options):
    """
    Plan a session and snapshot every planned card's scheduling state.

    Ratings submitted later are always computed from this snapshot, never
    from the live row, so revising a rating replaces the earlier result
    instead of compounding on it.
    """
    clock = default_clock(clock)
    as_of = as_of or clock.today()

    plan = plan_session(user_id, as_of, **options)
    states = repos.get_cards(user_id, plan.card_ids)
    baseline = [states[card_id] for card_id in plan.card_ids if card_id in states]

    session = repos.create_session(
        user_id,
        as_of,
        options.get("review_order", "ordered"),
        options.get("interleaving", "review-first"),
        baseline,
    )
    logger.info("session_started",
        user_id=str(user_id),
        session_id=str(session.id),
        as_of=as_of.isoformat(),
        card_count=len(baseline),
    )
    return session, plan


def rate_card(session_id, card_id, rating, *, user_id=None, clock=None):
    """
    Apply ``rating`` to a session card and persist the result.

    Returns ``(state, counted)`` where ``counted`` says whether this call
    recorded daily activity; a card is counted at most once per day.
    """
    rating = Rating.parse(rating)
    now = default_clock(clock).now()
    today = timezone.localdate(now)

    with repos.atomic():
        entry = repos.session_card_for_update(session_id, card_id, user_id=user_id)
        user_id = entry.session.user_id
        baseline = entry.baseline()

        logger.info("rating_received",
            user_id=str(user_id),
            card_id=str(card_id),
            session_id=str(session_id),
            rating=RATING_LABELS[rating],
            revision=entry.committed_version is not None,
        )

        next_state = schedule(baseline, rating, now=now, today=today)
        expected = entry.committed_version if entry.committed_version is not None else baseline.version

        # Serialise with queue rewrites while a new card leaves the queue
        if baseline.is_new:
            repos.lock_new_queue(user_id)
        current = repos.card_for_update(user_id, card_id)
        if current is None:
            raise RecordsNotFound("card was removed", user_id=user_id, card_id=card_id)

        saved = repos.compare_and_swap(next_state, expected)
        if current.is_new:
            repos.close_queue_gap(user_id, current.queue)

        counted = entry.counted_on != today
        if counted:
            # Only the first count of a session card can introduce a new card
            record_review(user_id, today, is_new_card=baseline.is_new and entry.counted_on is None)
        repos.mark_rated(entry, rating, saved.version, today)

    logger.info("rating_applied",
        user_id=str(user_id),
        card_id=str(card_id),
        interval_days=saved.interval_days,
        ease_factor=saved.ease_factor,
        due=saved.due.isoformat(),
        reviewed_at=to_local_iso(saved.last_reviewed_at),
        counted=counted,
    )
    return saved, counted
