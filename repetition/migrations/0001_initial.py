import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="UserCard",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("card_id", models.UUIDField()),
                ("queue", models.IntegerField(blank=True, null=True)),
                ("due", models.DateField(blank=True, null=True)),
                ("ease_factor", models.FloatField(default=2.5)),
                ("interval_days", models.PositiveIntegerField(default=0)),
                ("repetitions", models.PositiveIntegerField(default=0)),
                ("last_reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "indexes": [models.Index(fields=["user_id", "due"], name="usercard_user_due_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("user_id", "card_id"), name="usercard_user_card_uniq"),
                    models.UniqueConstraint(fields=("user_id", "queue"), name="usercard_user_queue_uniq"),
                    models.CheckConstraint(
                        condition=(
                            models.Q(("due__isnull", True), ("queue__isnull", False))
                            | models.Q(("due__isnull", False), ("queue__isnull", True))
                        ),
                        name="usercard_new_xor_review",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="NewQueueLock",
            fields=[
                ("user_id", models.UUIDField(primary_key=True, serialize=False)),
            ],
        ),
        migrations.CreateModel(
            name="DailyActivity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("date", models.DateField()),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("new_cards_reviewed", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "unique_together": {("user_id", "date")},
            },
        ),
        migrations.CreateModel(
            name="StudySession",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.UUIDField()),
                ("as_of", models.DateField()),
                ("review_order", models.CharField(default="ordered", max_length=16)),
                ("interleaving", models.CharField(default="review-first", max_length=16)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "indexes": [models.Index(fields=["user_id", "created_at"], name="session_user_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="SessionCard",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("card_id", models.UUIDField()),
                ("position", models.PositiveIntegerField()),
                ("baseline_queue", models.IntegerField(blank=True, null=True)),
                ("baseline_due", models.DateField(blank=True, null=True)),
                ("baseline_ease_factor", models.FloatField()),
                ("baseline_interval_days", models.PositiveIntegerField()),
                ("baseline_repetitions", models.PositiveIntegerField()),
                ("baseline_last_reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("baseline_version", models.PositiveIntegerField()),
                ("rating", models.SmallIntegerField(blank=True, null=True)),
                ("committed_version", models.PositiveIntegerField(blank=True, null=True)),
                ("counted_on", models.DateField(blank=True, null=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cards",
                        to="repetition.studysession",
                    ),
                ),
            ],
            options={
                "ordering": ["position"],
                "unique_together": {("session", "card_id")},
            },
        ),
    ]
