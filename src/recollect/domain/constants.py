"""Centralized constants for recollect.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
INITIAL_EASINESS = 2.5
MIN_EASINESS = 1.3
PASSING_QUALITY = 3
MIN_QUALITY = 0
MAX_QUALITY = 5
FIRST_INTERVAL = 1  # days
SECOND_INTERVAL = 6  # days
FAILED_INTERVAL = 1  # days

# ---------- Interval prediction (button hints) ----------
HARD_MULTIPLIER = 1.2
EASY_BONUS = 1.3
HARD_FIRST_INTERVAL = 1
HARD_SECOND_INTERVAL = 3
EASY_FIRST_INTERVAL = 4
EASY_SECOND_INTERVAL = 10

# ---------- Queue Builder ----------
REVIEWS_PER_NEW_CARD = 3  # one new card after every N review cards
DEFAULT_NEW_CARDS_PER_DAY = 20
DEFAULT_REVIEWS_PER_DAY = 100

# ---------- Decks ----------
MAX_DECK_NAME_LEN = 100

# ---------- Interval formatting ----------
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365
