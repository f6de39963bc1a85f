import uuid
from datetime import date, datetime, timezone

from repetition.data.models import DailyActivity, UserCard
from repetition.services.queue import add_card

TODAY = date(2026, 3, 10)
NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


def add_new_cards(user_id, count):
    card_ids = [uuid.uuid4() for _ in range(count)]
    for card_id in card_ids:
        add_card(user_id, card_id)
    return card_ids


def make_review_card(user_id, due, interval_days=1, ease_factor=2.5, card_id=None):
    row = UserCard.objects.create(
        user_id=user_id,
        card_id=card_id or uuid.uuid4(),
        queue=None,
        due=due,
        interval_days=interval_days,
        ease_factor=ease_factor,
        repetitions=1,
    )
    return row.card_id


def set_activity(user_id, on_date, review_count, new_cards_reviewed=0):
    DailyActivity.objects.update_or_create(
        user_id=user_id,
        date=on_date,
        defaults={"review_count": review_count, "new_cards_reviewed": new_cards_reviewed},
    )


def new_queue_positions(user_id):
    return list(
        UserCard.objects.filter(user_id=user_id, due__isnull=True)
        .order_by("queue")
        .values_list("card_id", "queue")
    )
