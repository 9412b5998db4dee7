from django.utils import timezone
from rest_framework import views, status
from rest_framework.response import Response
import structlog
import uuid
from ..domain.enums import QUALITY_LABELS, Quality
from ..domain.errors import IdempotencyConflict, InvalidQuality, PersistenceError, UnknownCard
from ..domain.state import Unreviewed
from ..services.reviews import ReviewScheduler
from ..utils.time import local_today
from .serializers import DueQuerySerializer, ProgressQuerySerializer, ReviewInSerializer, StatsQuerySerializer

base_logger = structlog.get_logger()


def state_payload(state):
    if isinstance(state, Unreviewed):
        return {"never_reviewed": True}
    return {
        "never_reviewed": False,
        "interval_days": state.interval_days,
        "ease_factor": state.ease_factor,
        "repetitions": state.repetitions,
        "due_date": state.due_date.isoformat(),
        "last_reviewed_at": state.last_reviewed_at.isoformat(),
    }


def error_response(exc):
    if isinstance(exc, InvalidQuality):
        return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, UnknownCard):
        return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, IdempotencyConflict):
        return Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)
    return Response({"error": "review store unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


class SchedulerView(views.APIView):
    scheduler_class = ReviewScheduler

    def get_scheduler(self):
        return self.scheduler_class()

    def get_logger(self):
        # Create a unique request_id
        return base_logger.bind(request_id=str(uuid.uuid4()))


class ReviewView(SchedulerView):
    def post(self, request):
        logger = self.get_logger()

        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user_id = s.validated_data["user_id"]
        card_id = s.validated_data["card_id"]
        quality = s.validated_data["quality"]
        idem = s.validated_data.get("idempotency_key") or None

        now = timezone.now()
        try:
            result = self.get_scheduler().rate(
                user_id, card_id, quality,
                today=local_today(now), now=now, idempotency_key=idem,
            )
        except (InvalidQuality, UnknownCard, IdempotencyConflict, PersistenceError) as exc:
            return error_response(exc)

        status_code = status.HTTP_200_OK if result.replayed else status.HTTP_201_CREATED

        logger.info(
            "review_api_response",
            user_id=str(user_id),
            card_id=str(card_id),
            quality=quality,
            idempotent=result.replayed,
            interval_days=result.new_interval_days,
            due_date=result.due_date.isoformat(),
            status=status_code,
        )

        return Response(
            {
                "interval_days": result.new_interval_days,
                "ease_factor": result.new_ease_factor,
                "repetitions": result.repetitions,
                "due_date": result.due_date.isoformat(),
                "lapsed": result.lapsed,
                "quality_label": QUALITY_LABELS[Quality(quality)],
                "idempotent": result.replayed,
            },
            status=status_code,
        )


class DueCardsView(SchedulerView):
    def get(self, request, user_id):
        logger = self.get_logger()

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        as_of = qs.validated_data.get("as_of") or local_today()
        deck_id = qs.validated_data.get("deck_id")

        try:
            cards = self.get_scheduler().fetch_due(
                user_id, as_of, deck_id=deck_id, limit=qs.validated_data["limit"]
            )
        except PersistenceError as exc:
            return error_response(exc)

        logger.info(
            "due_cards_api_response",
            user_id=str(user_id),
            as_of=as_of.isoformat(),
            card_count=len(cards),
        )

        return Response(
            {
                "user_id": str(user_id),
                "as_of": as_of.isoformat(),
                "cards": [
                    {
                        "card_id": str(c.card_id),
                        "deck_id": str(c.deck_id),
                        "front": c.front,
                        "back": c.back,
                        "state": state_payload(c.state),
                    }
                    for c in cards
                ],
            }
        )


class StatsView(SchedulerView):
    def get(self, request, user_id):
        qs = StatsQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        as_of = qs.validated_data.get("as_of") or local_today()

        try:
            stats = self.get_scheduler().stats(
                user_id, as_of, deck_id=qs.validated_data.get("deck_id")
            )
        except PersistenceError as exc:
            return error_response(exc)

        return Response(
            {
                "user_id": str(user_id),
                "as_of": as_of.isoformat(),
                "total_cards": stats.total_cards,
                "cards_due_today": stats.cards_due_today,
                "cards_learned": stats.cards_learned,
                "average_ease": stats.average_ease,
            }
        )


class CardStateView(SchedulerView):
    def get(self, request, user_id, card_id):
        try:
            state = self.get_scheduler().get_state(user_id, card_id)
        except PersistenceError as exc:
            return error_response(exc)
        return Response({"user_id": str(user_id), "card_id": str(card_id), **state_payload(state)})


class DeckProgressView(SchedulerView):
    def get(self, request, user_id, deck_id):
        qs = ProgressQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        as_of = qs.validated_data.get("as_of") or local_today()

        try:
            cards = self.get_scheduler().deck_progress(user_id, deck_id, as_of)
        except PersistenceError as exc:
            return error_response(exc)

        return Response(
            {
                "user_id": str(user_id),
                "deck_id": str(deck_id),
                "as_of": as_of.isoformat(),
                "cards": [
                    {
                        "card_id": str(c.card_id),
                        "front": c.front,
                        "back": c.back,
                        "is_due": c.is_due,
                        "state": state_payload(c.state),
                    }
                    for c in cards
                ],
            }
        )


class QualityScaleView(views.APIView):
    def get(self, request):
        return Response(
            [{"value": int(q), "label": label} for q, label in QUALITY_LABELS.items()]
        )
