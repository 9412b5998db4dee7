from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Unreviewed:
    """A card the learner has never rated; always due."""

    def is_due(self, as_of: date) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Reviewed:
    interval_days: int
    ease_factor: float
    repetitions: int
    due_date: date
    last_reviewed_at: datetime

    def is_due(self, as_of: date) -> bool:
        return self.due_date <= as_of


ReviewState = Union[Unreviewed, Reviewed]

UNREVIEWED = Unreviewed()


@dataclass(frozen=True, slots=True)
class RatingResult:
    new_interval_days: int
    new_ease_factor: float
    due_date: date
    lapsed: bool
    repetitions: int
    replayed: bool = False


@dataclass(frozen=True, slots=True)
class DueCard:
    card_id: UUID
    deck_id: UUID
    front: str
    back: str
    state: ReviewState

    @property
    def never_reviewed(self) -> bool:
        return isinstance(self.state, Unreviewed)


@dataclass(frozen=True, slots=True)
class ReviewStats:
    total_cards: int
    cards_due_today: int
    cards_learned: int
    average_ease: float
    as_of: Optional[date] = None


@dataclass(frozen=True, slots=True)
class CardProgress:
    card_id: UUID
    deck_id: UUID
    front: str
    back: str
    state: ReviewState
    is_due: bool
