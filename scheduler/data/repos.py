from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Avg, OuterRef, Q, Subquery

from catalog.catalog import CardCatalog

from ..config import PASSING_QUALITY
from ..domain.errors import PersistenceError, StateConflict
from ..domain.state import UNREVIEWED, CardProgress, DueCard, RatingResult, Reviewed
from .models import ReviewLog, ReviewStateRecord


@contextmanager
def _persistence_errors():
    try:
        yield
    except DatabaseError as exc:
        raise PersistenceError(str(exc)) from exc


def _to_state(record):
    if record is None:
        return UNREVIEWED
    return Reviewed(
        interval_days=record.interval_days,
        ease_factor=record.ease_factor,
        repetitions=record.repetitions,
        due_date=record.due_date,
        last_reviewed_at=record.last_reviewed_at,
    )


class ReviewStateStore:
    """
    Persists one review state per (user, card) pair.

    Every database failure is raised as PersistenceError; nothing is retried.
    """

    def __init__(self, catalog=None):
        self.catalog = catalog or CardCatalog()

    def _due_cards(self, user_id, as_of, deck_id=None):
        state_due = ReviewStateRecord.objects.filter(
            user_id=user_id, card_id=OuterRef("pk")
        ).values("due_date")[:1]
        return (
            self.catalog.cards_for_user(user_id, deck_id)
            .annotate(state_due=Subquery(state_due))
            .filter(Q(state_due__isnull=True) | Q(state_due__lte=as_of))
        )

    def get_due(self, user_id, as_of, deck_id=None, limit=None):
        with _persistence_errors():
            qs = self._due_cards(user_id, as_of, deck_id)
            if limit is not None:
                qs = qs[:limit]
            cards = list(qs)
            records = {
                r.card_id: r
                for r in ReviewStateRecord.objects.filter(
                    user_id=user_id, card_id__in=[c.pk for c in cards]
                )
            }
        return [
            DueCard(
                card_id=c.pk,
                deck_id=c.deck_id,
                front=c.front,
                back=c.back,
                state=_to_state(records.get(c.pk)),
            )
            for c in cards
        ]

    def count_due(self, user_id, as_of, deck_id=None):
        with _persistence_errors():
            return self._due_cards(user_id, as_of, deck_id).count()

    def get(self, user_id, card_id):
        with _persistence_errors():
            record = ReviewStateRecord.objects.filter(user_id=user_id, card_id=card_id).first()
        return _to_state(record)

    @contextmanager
    def locked(self, user_id, card_id):
        """
        Open a transaction holding the row lock for (user, card) and yield
        its current state. Reads and writes inside the block are serialized
        per key and committed together. An absent row cannot be locked, so
        the first write for a key must use ``upsert(..., insert_only=True)``.
        """
        with _persistence_errors(), transaction.atomic():
            record = (ReviewStateRecord.objects
                      .select_for_update()
                      .filter(user_id=user_id, card_id=card_id)
                      .first())
            yield _to_state(record)

    def upsert(self, user_id, card_id, state: Reviewed, insert_only=False):
        """
        Replace the state for (user, card). With ``insert_only`` the row must
        not exist yet; a row created concurrently raises StateConflict
        instead of being overwritten.
        """
        fields = {
            "interval_days": state.interval_days,
            "ease_factor": state.ease_factor,
            "repetitions": state.repetitions,
            "due_date": state.due_date,
            "last_reviewed_at": state.last_reviewed_at,
        }
        with _persistence_errors():
            if not insert_only:
                with transaction.atomic():
                    ReviewStateRecord.objects.update_or_create(
                        user_id=user_id, card_id=card_id, defaults=fields
                    )
                return
            try:
                with transaction.atomic():
                    ReviewStateRecord.objects.create(user_id=user_id, card_id=card_id, **fields)
            except IntegrityError as exc:
                raise StateConflict(str(exc)) from exc

    # review log -----------------------------------------------------

    def get_logged_result(self, user_id, card_id, idem_key):
        """Return (quality, RatingResult) logged under ``idem_key``, or None."""
        if not idem_key:
            return None
        with _persistence_errors():
            log = ReviewLog.objects.filter(
                user_id=user_id, card_id=card_id, idempotency_key=idem_key
            ).first()
        if log is None:
            return None
        return log.quality, RatingResult(
            new_interval_days=log.interval_days,
            new_ease_factor=log.ease_factor,
            due_date=log.due_date,
            lapsed=log.quality < PASSING_QUALITY,
            repetitions=log.repetitions,
            replayed=True,
        )

    def append_log(self, user_id, card_id, quality, idem_key, state: Reviewed):
        """
        Insert a ReviewLog row. Returns False when a concurrent request
        already logged the same idempotency key.
        """
        with _persistence_errors():
            try:
                with transaction.atomic():
                    ReviewLog.objects.create(
                        user_id=user_id, card_id=card_id, quality=quality,
                        idempotency_key=idem_key or None,
                        created_at=state.last_reviewed_at,
                        interval_days=state.interval_days,
                        ease_factor=state.ease_factor,
                        repetitions=state.repetitions,
                        due_date=state.due_date,
                    )
            except IntegrityError:
                # Duplicate idempotency key safeguard
                return False
        return True

    def user_has_card(self, user_id, card_id):
        with _persistence_errors():
            return self.catalog.user_has_card(user_id, card_id)

    # stats ----------------------------------------------------------

    def count_cards(self, user_id, deck_id=None):
        with _persistence_errors():
            return self.catalog.cards_for_user(user_id, deck_id).count()

    def summarize_reviewed(self, user_id, deck_id=None):
        """Return (cards_learned, average_ease) over the user's reviewed cards."""
        with _persistence_errors():
            qs = ReviewStateRecord.objects.filter(
                user_id=user_id,
                card__in=self.catalog.cards_for_user(user_id, deck_id),
            )
            learned = qs.filter(repetitions__gte=1).count()
            average = qs.aggregate(avg=Avg("ease_factor"))["avg"]
        return learned, average

    def get_progress(self, user_id, deck_id, as_of):
        """Every card of an enrolled deck in catalog order, reviewed or not."""
        with _persistence_errors():
            cards = list(self.catalog.cards_for_user(user_id, deck_id))
            records = {
                r.card_id: r
                for r in ReviewStateRecord.objects.filter(
                    user_id=user_id, card_id__in=[c.pk for c in cards]
                )
            }
        progress = []
        for c in cards:
            state = _to_state(records.get(c.pk))
            progress.append(CardProgress(
                card_id=c.pk,
                deck_id=c.deck_id,
                front=c.front,
                back=c.back,
                state=state,
                is_due=state.is_due(as_of),
            ))
        return progress
