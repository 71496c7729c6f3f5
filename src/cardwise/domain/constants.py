"""Centralized constants for cardwise.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 Scheduling ----------
INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
INITIAL_INTERVAL = 1
SECOND_INTERVAL = 6
SUCCESS_THRESHOLD = 3
MIN_QUALITY = 0
MAX_QUALITY = 5
EASE_PRECISION = 2

# ---------- Maturity Buckets ----------
MATURE_REPETITIONS = 3

# ---------- Review Sessions ----------
DEFAULT_SESSION_LIMIT = 20
DEFAULT_STATS_WINDOW_DAYS = 7

# ---------- Cards ----------
CARD_TYPES = ("fact", "concept", "procedure")
DEFAULT_CARD_TYPE = "fact"
DEFAULT_USER_ID = "local"
