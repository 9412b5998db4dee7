class SchedulerError(Exception):
    """Base class for errors reported by the review scheduler."""


class InvalidQuality(SchedulerError, ValueError):
    def __init__(self, quality):
        self.quality = quality
        super().__init__(f"quality must be an integer between 0 and 5, got {quality!r}")


class PersistenceError(SchedulerError):
    """The review state store failed to read or write."""


class StateConflict(PersistenceError):
    """A concurrent first rating created the review state before this one."""


class UnknownCard(SchedulerError, LookupError):
    def __init__(self, card_id):
        self.card_id = card_id
        super().__init__(f"card {card_id} is not in the learner's decks")


class IdempotencyConflict(SchedulerError):
    def __init__(self, idempotency_key, logged_quality, quality):
        self.idempotency_key = idempotency_key
        self.logged_quality = logged_quality
        self.quality = quality
        super().__init__(
            f"idempotency key {idempotency_key!r} was used for quality {logged_quality}, not {quality}"
        )
