INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
PASSING_QUALITY = 3        # below this a rating is a lapse
MIN_QUALITY = 0
MAX_QUALITY = 5
LAPSE_INTERVAL_DAYS = 1
FIRST_INTERVALS_DAYS = {
    0: 1,   # first success (or first after a lapse)
    1: 6,   # second consecutive success
}
DUE_CARDS_LIMIT = 50       # default page size for the due-cards endpoint
RATE_ATTEMPTS = 2         # one retry when a concurrent first rating wins the insert
