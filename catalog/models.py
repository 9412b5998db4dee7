import uuid

from django.db import models


class Deck(models.Model):
    """
    A flashcard set. Decks and their cards are owned by the catalog;
    the scheduler only ever refers to cards by id.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)

    def __str__(self):
        return self.title


class Card(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    deck = models.ForeignKey(Deck, on_delete=models.CASCADE, related_name="cards")
    front = models.TextField()
    back = models.TextField()
    card_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ("deck_id", "card_order", "id")


class Enrollment(models.Model):
    """A learner studying a deck."""

    user_id = models.UUIDField()
    deck = models.ForeignKey(Deck, on_delete=models.CASCADE, related_name="enrollments")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (("user_id", "deck"),)
