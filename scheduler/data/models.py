from django.db import models
from django.utils import timezone

class ReviewStateRecord(models.Model):
    user_id = models.UUIDField()
    card = models.ForeignKey("catalog.Card", on_delete=models.CASCADE, related_name="review_states")
    interval_days = models.PositiveIntegerField()
    ease_factor = models.FloatField()
    repetitions = models.PositiveIntegerField(default=0)
    due_date = models.DateField()
    last_reviewed_at = models.DateTimeField()

    class Meta:
        db_table = "scheduler_review_state"
        unique_together = (("user_id", "card"),)
        indexes = [
            models.Index(fields=["user_id", "due_date"], name="review_state_user_due_idx"),
        ]

class ReviewLog(models.Model):
    user_id = models.UUIDField()
    card_id = models.UUIDField()
    quality = models.SmallIntegerField()
    idempotency_key = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    interval_days = models.PositiveIntegerField()
    ease_factor = models.FloatField()
    repetitions = models.PositiveIntegerField()
    due_date = models.DateField()

    class Meta:
        unique_together = (("user_id", "card_id", "idempotency_key"),)
        indexes = [
            models.Index(fields=["user_id", "card_id", "created_at"], name="review_log_user_card_idx"),
        ]
