import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone

from ..config import DEFAULT_EASE_FACTOR
from ..domain.state import CardState


class UserCard(models.Model):
    user_id = models.UUIDField()
    card_id = models.UUIDField()
    # Negative values only exist inside a queue rewrite transaction
    queue = models.IntegerField(null=True, blank=True)
    due = models.DateField(null=True, blank=True)
    ease_factor = models.FloatField(default=DEFAULT_EASE_FACTOR)
    interval_days = models.PositiveIntegerField(default=0)
    repetitions = models.PositiveIntegerField(default=0)
    last_reviewed_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user_id", "card_id"], name="usercard_user_card_uniq"),
            models.UniqueConstraint(fields=["user_id", "queue"], name="usercard_user_queue_uniq"),
            models.CheckConstraint(
                condition=(
                    Q(queue__isnull=False, due__isnull=True)
                    | Q(queue__isnull=True, due__isnull=False)
                ),
                name="usercard_new_xor_review",
            ),
        ]
        indexes = [
            models.Index(fields=["user_id", "due"], name="usercard_user_due_idx"),
        ]

    def to_state(self) -> CardState:
        return CardState(
            user_id=self.user_id,
            card_id=self.card_id,
            queue=self.queue,
            due=self.due,
            ease_factor=self.ease_factor,
            interval_days=self.interval_days,
            repetitions=self.repetitions,
            last_reviewed_at=self.last_reviewed_at,
            version=self.version,
        )


class NewQueueLock(models.Model):
    """One row per user; locked to serialise writes to that user's new queue."""

    user_id = models.UUIDField(primary_key=True)


class DailyActivity(models.Model):
    user_id = models.UUIDField()
    date = models.DateField()
    review_count = models.PositiveIntegerField(default=0)
    new_cards_reviewed = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = (("user_id", "date"),)


class StudySession(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField()
    as_of = models.DateField()
    review_order = models.CharField(max_length=16, default="ordered")
    interleaving = models.CharField(max_length=16, default="review-first")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["user_id", "created_at"], name="session_user_created_idx"),
        ]


class SessionCard(models.Model):
    """A card planned into a session, with its scheduling state at session start."""

    session = models.ForeignKey(StudySession, on_delete=models.CASCADE, related_name="cards")
    card_id = models.UUIDField()
    position = models.PositiveIntegerField()

    baseline_queue = models.IntegerField(null=True, blank=True)
    baseline_due = models.DateField(null=True, blank=True)
    baseline_ease_factor = models.FloatField()
    baseline_interval_days = models.PositiveIntegerField()
    baseline_repetitions = models.PositiveIntegerField()
    baseline_last_reviewed_at = models.DateTimeField(null=True, blank=True)
    baseline_version = models.PositiveIntegerField()

    rating = models.SmallIntegerField(null=True, blank=True)
    committed_version = models.PositiveIntegerField(null=True, blank=True)
    counted_on = models.DateField(null=True, blank=True)

    class Meta:
        unique_together = (("session", "card_id"),)
        ordering = ["position"]

    @classmethod
    def capture(cls, session, position, state: CardState):
        return cls(
            session=session,
            card_id=state.card_id,
            position=position,
            baseline_queue=state.queue,
            baseline_due=state.due,
            baseline_ease_factor=state.ease_factor,
            baseline_interval_days=state.interval_days,
            baseline_repetitions=state.repetitions,
            baseline_last_reviewed_at=state.last_reviewed_at,
            baseline_version=state.version,
        )

    def baseline(self) -> CardState:
        return CardState(
            user_id=self.session.user_id,
            card_id=self.card_id,
            queue=self.baseline_queue,
            due=self.baseline_due,
            ease_factor=self.baseline_ease_factor,
            interval_days=self.baseline_interval_days,
            repetitions=self.baseline_repetitions,
            last_reviewed_at=self.baseline_last_reviewed_at,
            version=self.baseline_version,
        )
