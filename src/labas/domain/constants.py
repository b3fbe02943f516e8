"""Centralized constants for the labas application.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SRS ----------
SRS_INTERVALS = (1, 2, 4, 8, 16, 32, 64, 128, 256, 512)  # days, indexed by level - 1
MIN_LEVEL = 1
MAX_LEVEL = 10
DEMOTION_STEP = 2
DIFFICULTY_MULTIPLIERS = {1: 0.5, 2: 1.0, 3: 1.5}
DEFAULT_MULTIPLIER = 1.0
DEFAULT_SESSION_SIZE = 20
MAX_STREAK_DAYS = 365

# ---------- Learning Insights ----------
MAX_OVERDUE_IN_RECOMMENDATION = 10
WEAK_RETENTION_THRESHOLD = 70.0
WEAK_MIN_REVIEWS = 3
NEW_WORDS_REVIEW_THRESHOLD = 10
STREAK_REMINDER_DAYS = 3

# ---------- Session Log ----------
SESSION_LOG_LIMIT = 100

# ---------- Audio Keys ----------
KEY_MAX_LENGTH = 50
AUDIO_EXTENSION = "mp3"
CACHE_INDEX_FILE = "cache_index.json"

# ---------- Audio HTTP ----------
PROBE_TIMEOUT = 4.0
REQUEST_TIMEOUT = 30.0
MEMO_TTL_HOURS = 24.0
PRIMARY_URL = "http://localhost:3001"
FALLBACK_URL = "http://localhost:8080"

# ---------- External Commands ----------
COMMAND_TIMEOUT = 60.0
