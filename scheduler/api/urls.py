from django.urls import path
from .views import CardStateView, DeckProgressView, DueCardsView, QualityScaleView, ReviewView, StatsView

urlpatterns = [
    path("reviews", ReviewView.as_view(), name="review"),
    path("quality-scale", QualityScaleView.as_view(), name="quality-scale"),
    path("users/<uuid:user_id>/due-cards", DueCardsView.as_view(), name="due-cards"),
    path("users/<uuid:user_id>/stats", StatsView.as_view(), name="review-stats"),
    path("users/<uuid:user_id>/cards/<uuid:card_id>/state", CardStateView.as_view(), name="card-state"),
    path("users/<uuid:user_id>/decks/<uuid:deck_id>/progress", DeckProgressView.as_view(), name="deck-progress"),
]
