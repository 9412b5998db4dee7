import structlog

from ..config import INITIAL_EASE_FACTOR, RATE_ATTEMPTS
from ..data.repos import ReviewStateStore
from ..domain.errors import IdempotencyConflict, StateConflict, UnknownCard
from ..domain.logic import schedule_next, to_result, validate_quality
from ..domain.state import ReviewStats, Unreviewed

logger = structlog.get_logger()


class _ConcurrentDuplicate(Exception):
    """Another request logged the same idempotency key first."""


class ReviewScheduler:
    """
    Stateless SM-2 scheduler over a ReviewStateStore.

    Callers supply ``today`` and ``now``; the scheduler never reads a clock.
    Errors from the store propagate unchanged.
    """

    def __init__(self, store=None):
        self.store = store or ReviewStateStore()

    def rate(self, user_id, card_id, quality, *, today, now, idempotency_key=None):
        quality = validate_quality(quality)
        logger.info("review_received",
            user_id=str(user_id),
            card_id=str(card_id),
            quality=quality,
            idempotency_key=idempotency_key,
        )

        if not self.store.user_has_card(user_id, card_id):
            raise UnknownCard(card_id)

        for attempt in range(1, RATE_ATTEMPTS + 1):
            try:
                result = self._apply(user_id, card_id, quality, today, now, idempotency_key)
            except StateConflict:
                if attempt == RATE_ATTEMPTS:
                    raise
                # the row exists now, so the next attempt can lock it
                continue
            except _ConcurrentDuplicate:
                return self._replay(user_id, card_id, quality, idempotency_key)
            break

        if result.replayed:
            return result
        logger.info("review_scheduled",
            user_id=str(user_id),
            card_id=str(card_id),
            interval_days=result.new_interval_days,
            ease_factor=result.new_ease_factor,
            repetitions=result.repetitions,
            lapsed=result.lapsed,
            due_date=result.due_date.isoformat(),
        )
        return result

    def _apply(self, user_id, card_id, quality, today, now, idempotency_key):
        # Serialize the read-compute-write per (user, card)
        with self.store.locked(user_id, card_id) as current:
            if idempotency_key:
                existing = self._replay(user_id, card_id, quality, idempotency_key)
                if existing:
                    return existing

            new_state = schedule_next(current, quality, today, now)
            self.store.upsert(
                user_id, card_id, new_state,
                insert_only=isinstance(current, Unreviewed),
            )
            if not self.store.append_log(user_id, card_id, quality, idempotency_key, new_state):
                raise _ConcurrentDuplicate()
        return to_result(new_state, quality)

    def _replay(self, user_id, card_id, quality, idempotency_key):
        logged = self.store.get_logged_result(user_id, card_id, idempotency_key)
        if logged is None:
            return None
        logged_quality, result = logged
        if logged_quality != quality:
            raise IdempotencyConflict(idempotency_key, logged_quality, quality)
        logger.info("idempotent_reuse",
            user_id=str(user_id),
            card_id=str(card_id),
            due_date=result.due_date.isoformat(),
        )
        return result

    def get_state(self, user_id, card_id):
        return self.store.get(user_id, card_id)

    def fetch_due(self, user_id, as_of, *, deck_id=None, limit=None):
        """
        Return a snapshot of the cards due for ``user_id`` by ``as_of``,
        in the store's order. Never-reviewed cards are always included.
        """
        cards = tuple(self.store.get_due(user_id, as_of, deck_id=deck_id, limit=limit))
        logger.info("due_cards_fetched",
            user_id=str(user_id),
            as_of=as_of.isoformat(),
            deck_id=str(deck_id) if deck_id else None,
            card_count=len(cards),
        )
        return cards

    def stats(self, user_id, as_of, *, deck_id=None):
        learned, average = self.store.summarize_reviewed(user_id, deck_id)
        return ReviewStats(
            total_cards=self.store.count_cards(user_id, deck_id),
            cards_due_today=self.store.count_due(user_id, as_of, deck_id),
            cards_learned=learned,
            average_ease=INITIAL_EASE_FACTOR if average is None else average,
            as_of=as_of,
        )

    def deck_progress(self, user_id, deck_id, as_of):
        """All cards of one enrolled deck with their state and due flag."""
        return tuple(self.store.get_progress(user_id, deck_id, as_of))
