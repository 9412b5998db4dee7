from .models import Card, Enrollment


class CardCatalog:
    """
    Read-only view of the cards a learner studies.

    The scheduler scopes due-card queries through this class and never
    touches the catalog tables directly.
    """

    def cards_for_user(self, user_id, deck_id=None):
        decks = Enrollment.objects.filter(user_id=user_id).values("deck_id")
        qs = Card.objects.filter(deck_id__in=decks)
        if deck_id is not None:
            qs = qs.filter(deck_id=deck_id)
        return qs.order_by("deck_id", "card_order", "id")

    def card_ids_for_user(self, user_id, deck_id=None):
        return list(self.cards_for_user(user_id, deck_id).values_list("id", flat=True))

    def user_has_card(self, user_id, card_id) -> bool:
        return self.cards_for_user(user_id).filter(pk=card_id).exists()
