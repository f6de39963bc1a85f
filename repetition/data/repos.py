from contextlib import contextmanager
import functools

from django.db import InterfaceError, OperationalError, transaction
from django.db.models import F, Max
from django.utils import timezone
import structlog

from ..domain.errors import ConcurrentUpdate, SessionNotFound, StoreUnavailable
from .models import DailyActivity, NewQueueLock, SessionCard, StudySession, UserCard

logger = structlog.get_logger()


def store_call(func):
    """Surface connection-level database failures as StoreUnavailable."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error("store_failure", operation=func.__name__, error=str(exc))
            raise StoreUnavailable(str(exc), operation=func.__name__) from exc

    return wrapper


@contextmanager
def atomic():
    """transaction.atomic() whose connection failures, commit included, raise StoreUnavailable."""
    try:
        with transaction.atomic():
            yield
    except (OperationalError, InterfaceError) as exc:
        logger.error("store_failure", operation="atomic", error=str(exc))
        raise StoreUnavailable(str(exc), operation="atomic") from exc


# Card records

@store_call
def get_card(user_id, card_id):
    row = UserCard.objects.filter(user_id=user_id, card_id=card_id).first()
    return row.to_state() if row else None


@store_call
def get_cards(user_id, card_ids):
    rows = UserCard.objects.filter(user_id=user_id, card_id__in=list(card_ids))
    return {row.card_id: row.to_state() for row in rows}


@store_call
def lock_new_queue(user_id):
    """
    Take the per-user new-queue lock. Must be called inside a transaction;
    the lock is held until it commits or rolls back.
    """
    NewQueueLock.objects.select_for_update().get_or_create(user_id=user_id)


@store_call
def max_queue_position(user_id):
    return (
        UserCard.objects.filter(user_id=user_id, due__isnull=True, queue__gte=0)
        .aggregate(top=Max("queue"))["top"]
    )


@store_call
def insert_new_card(user_id, card_id, queue):
    return UserCard.objects.create(user_id=user_id, card_id=card_id, queue=queue).to_state()


@store_call
def delete_card(user_id, card_id):
    deleted, _ = UserCard.objects.filter(user_id=user_id, card_id=card_id).delete()
    return deleted > 0


@store_call
def new_queue(user_id, limit=None):
    qs = UserCard.objects.filter(
        user_id=user_id, due__isnull=True, queue__gte=0
    ).order_by("queue")
    if limit is not None:
        qs = qs[:limit]
    return [row.to_state() for row in qs]


@store_call
def review_queue(user_id, until=None):
    qs = UserCard.objects.filter(user_id=user_id, due__isnull=False)
    if until is not None:
        qs = qs.filter(due__lte=until)
    return [row.to_state() for row in qs.order_by("due", "card_id")]


@store_call
def new_cards_for_update(user_id):
    return list(
        UserCard.objects.select_for_update()
        .filter(user_id=user_id, due__isnull=True)
        .order_by("queue")
    )


@store_call
def rewrite_new_queue(user_id, ordered_rows):
    """
    Renumber the user's new cards to 0..n-1 in the order given.

    Two statements inside the caller's transaction: every row is first parked
    on a distinct negative value, then all negatives are flipped to their
    final position. No statement ever produces a duplicate (user, queue).
    """
    for position, row in enumerate(ordered_rows):
        row.queue = -(position + 1)
    UserCard.objects.bulk_update(ordered_rows, ["queue"])
    _flip_parked_positions(user_id)


@store_call
def close_queue_gap(user_id, position):
    """Shift new cards above ``position`` down by one."""
    UserCard.objects.filter(
        user_id=user_id, due__isnull=True, queue__gt=position
    ).update(queue=-F("queue"))
    _flip_parked_positions(user_id)


def _flip_parked_positions(user_id):
    # -1 -> 0, -2 -> 1, ...
    UserCard.objects.filter(user_id=user_id, due__isnull=True, queue__lt=0).update(
        queue=-1 - F("queue")
    )


@store_call
def compare_and_swap(state, expected_version):
    """
    Write ``state`` only if the stored row is still at ``expected_version``.
    Returns the state with its new version.
    """
    updated = UserCard.objects.filter(
        user_id=state.user_id, card_id=state.card_id, version=expected_version
    ).update(
        queue=state.queue,
        due=state.due,
        ease_factor=state.ease_factor,
        interval_days=state.interval_days,
        repetitions=state.repetitions,
        last_reviewed_at=state.last_reviewed_at,
        version=F("version") + 1,
    )
    if not updated:
        current = get_card(state.user_id, state.card_id)
        logger.warning("concurrent_update_rejected",
            user_id=str(state.user_id),
            card_id=str(state.card_id),
            expected_version=expected_version,
        )
        raise ConcurrentUpdate(
            "card changed since the rating baseline was taken",
            user_id=state.user_id,
            card_id=state.card_id,
            expected_version=expected_version,
            current_version=current.version if current else None,
        )
    return state.with_changes(version=expected_version + 1)


@store_call
def count_new(user_id):
    return UserCard.objects.filter(user_id=user_id, due__isnull=True).count()


@store_call
def count_scheduled(user_id, until=None):
    qs = UserCard.objects.filter(user_id=user_id, due__isnull=False)
    if until is not None:
        qs = qs.filter(due__lte=until)
    return qs.count()


# Daily activity

@store_call
def get_activity(user_id, on_date):
    return DailyActivity.objects.filter(user_id=user_id, date=on_date).first()


@store_call
def increment_activity(user_id, on_date, reviews, new_cards):
    with transaction.atomic():
        row, _ = DailyActivity.objects.select_for_update().get_or_create(
            user_id=user_id, date=on_date
        )
        DailyActivity.objects.filter(pk=row.pk).update(
            review_count=F("review_count") + reviews,
            new_cards_reviewed=F("new_cards_reviewed") + new_cards,
            updated_at=timezone.now(),
        )
        row.refresh_from_db()
    return row


@store_call
def active_dates(user_id, until):
    """Dates with at least one review, most recent first, not after ``until``."""
    return list(
        DailyActivity.objects.filter(user_id=user_id, date__lte=until, review_count__gt=0)
        .order_by("-date")
        .values_list("date", flat=True)
    )


@store_call
def activity_between(user_id, start, end):
    return list(
        DailyActivity.objects.filter(user_id=user_id, date__gte=start, date__lte=end)
        .order_by("date")
        .values_list("date", "review_count")
    )


# Study sessions

@store_call
def create_session(user_id, as_of, review_order, interleaving, states):
    with transaction.atomic():
        session = StudySession.objects.create(
            user_id=user_id, as_of=as_of, review_order=review_order, interleaving=interleaving
        )
        SessionCard.objects.bulk_create(
            [SessionCard.capture(session, position, state) for position, state in enumerate(states)]
        )
    return session


@store_call
def session_card_for_update(session_id, card_id, user_id=None):
    qs = SessionCard.objects.select_for_update().select_related("session").filter(
        session_id=session_id, card_id=card_id
    )
    if user_id is not None:
        qs = qs.filter(session__user_id=user_id)
    entry = qs.first()
    if entry is None:
        raise SessionNotFound(
            "card is not part of this session", session_id=session_id, card_id=card_id
        )
    return entry


@store_call
def session_cards(session_id):
    return list(SessionCard.objects.filter(session_id=session_id).order_by("position"))


@store_call
def card_for_update(user_id, card_id):
    row = UserCard.objects.select_for_update().filter(user_id=user_id, card_id=card_id).first()
    return row.to_state() if row else None


@store_call
def mark_rated(entry, rating, committed_version, counted_on):
    entry.rating = int(rating)
    entry.committed_version = committed_version
    entry.counted_on = counted_on
    entry.save(update_fields=["rating", "committed_version", "counted_on"])
