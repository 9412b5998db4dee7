import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ReviewStateRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("interval_days", models.PositiveIntegerField()),
                ("ease_factor", models.FloatField()),
                ("repetitions", models.PositiveIntegerField(default=0)),
                ("due_date", models.DateField()),
                ("last_reviewed_at", models.DateTimeField()),
                (
                    "card",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="review_states",
                        to="catalog.card",
                    ),
                ),
            ],
            options={
                "db_table": "scheduler_review_state",
                "indexes": [
                    models.Index(fields=["user_id", "due_date"], name="review_state_user_due_idx"),
                ],
                "unique_together": {("user_id", "card")},
            },
        ),
        migrations.CreateModel(
            name="ReviewLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("card_id", models.UUIDField()),
                ("quality", models.SmallIntegerField()),
                ("idempotency_key", models.CharField(blank=True, max_length=64, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("interval_days", models.PositiveIntegerField()),
                ("ease_factor", models.FloatField()),
                ("repetitions", models.PositiveIntegerField()),
                ("due_date", models.DateField()),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user_id", "card_id", "created_at"], name="review_log_user_card_idx"),
                ],
                "unique_together": {("user_id", "card_id", "idempotency_key")},
            },
        ),
    ]
