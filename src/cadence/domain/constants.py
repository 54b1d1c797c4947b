"""Centralized constants for the cadence scheduler.

All magic numbers live here so every layer imports from a single source
of truth. None of these are user-configurable.
"""

# ---------- Time ----------
MS_PER_DAY = 24 * 60 * 60 * 1000

# ---------- Ease factor ----------
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.5
DEFAULT_EASE_FACTOR = 2.5

AGAIN_EASE_PENALTY = 0.2
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15

# ---------- Interval growth ----------
HARD_INTERVAL_MULTIPLIER = 1.2
HARD_MIN_INTERVAL = 1.0
EASY_INTERVAL_BONUS = 1.3

# Fixed steps (days) for the first two successful repetitions
GOOD_STEPS = (1.0, 3.0)
EASY_STEPS = (3.0, 7.0)

# ---------- State classification ----------
LEARNING_MAX_INTERVAL = 7  # interval < 7 -> learning
REVIEW_MAX_INTERVAL = 30  # interval < 30 -> review, else mastered

# ---------- Insights ----------
RETENTION_DECAY_DAYS = 60.0
SECONDS_PER_CARD = 10
