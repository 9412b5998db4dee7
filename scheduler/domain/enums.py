from enum import IntEnum

class Quality(IntEnum):
    BLACKOUT = 0
    WRONG = 1
    HARD_WRONG = 2
    HARD = 3
    GOOD = 4
    PERFECT = 5

QUALITY_LABELS = {
    Quality.BLACKOUT: "Total blackout",
    Quality.WRONG: "Wrong, remembered on seeing the answer",
    Quality.HARD_WRONG: "Wrong, easy to recall after a hint",
    Quality.HARD: "Correct with serious difficulty",
    Quality.GOOD: "Correct after some hesitation",
    Quality.PERFECT: "Perfect recall",
}
