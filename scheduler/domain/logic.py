import math
from datetime import date, datetime, timedelta

from .errors import InvalidQuality
from .state import RatingResult, Reviewed, ReviewState, Unreviewed
from ..config import (
    FIRST_INTERVALS_DAYS,
    INITIAL_EASE_FACTOR,
    LAPSE_INTERVAL_DAYS,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
)


def validate_quality(quality) -> int:
    # bool is an int subclass but never a rating
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQuality(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidQuality(quality)
    return int(quality)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def next_ease_factor(ease_factor: float, quality: int) -> float:
    miss = MAX_QUALITY - quality
    proposed = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return max(proposed, MIN_EASE_FACTOR)


def next_interval_days(quality: int, repetitions: int, interval_days: int, ease_factor: float) -> int:
    if quality < PASSING_QUALITY:
        return LAPSE_INTERVAL_DAYS
    if repetitions in FIRST_INTERVALS_DAYS:
        return FIRST_INTERVALS_DAYS[repetitions]
    return max(round_half_up(interval_days * ease_factor), 1)


def schedule_next(state: ReviewState, quality: int, today: date, now: datetime) -> Reviewed:
    """
    Apply one SM-2 rating to ``state``.

    The interval product uses the ease factor held before this rating;
    the ease factor is then updated for every rating, lapses included.
    """
    quality = validate_quality(quality)

    if isinstance(state, Unreviewed):
        ease, repetitions, interval = INITIAL_EASE_FACTOR, 0, 0
    else:
        ease, repetitions, interval = state.ease_factor, state.repetitions, state.interval_days

    new_interval = next_interval_days(quality, repetitions, interval, ease)
    new_repetitions = 0 if quality < PASSING_QUALITY else repetitions + 1

    return Reviewed(
        interval_days=new_interval,
        ease_factor=next_ease_factor(ease, quality),
        repetitions=new_repetitions,
        due_date=today + timedelta(days=new_interval),
        last_reviewed_at=now,
    )


def to_result(state: Reviewed, quality: int) -> RatingResult:
    return RatingResult(
        new_interval_days=state.interval_days,
        new_ease_factor=state.ease_factor,
        due_date=state.due_date,
        lapsed=quality < PASSING_QUALITY,
        repetitions=state.repetitions,
    )
