"""Centralized constants for the sm15 engine.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Grades ----------
MIN_GRADE = 1
MAX_GRADE = 5
LAPSE_GRADE = 1
PASSING_GRADE = 3  # Stability grows from this grade up

GRADE_PERFORMANCE = {1: 0.0, 2: 0.3, 3: 0.6, 4: 0.8, 5: 1.0}

# ---------- Item domains ----------
MIN_A_FACTOR = 1.10
MAX_A_FACTOR = 2.50
DEFAULT_A_FACTOR = 2.50
A_FACTOR_DECIMALS = 2

MIN_INTERVAL_DAYS = 1
MAX_INTERVAL_DAYS = 5475  # 15 years
DEFAULT_INTERVAL_DAYS = 1

DEFAULT_STABILITY = 1.5  # days
MIN_STABILITY = 1.0  # days
MAX_STABILITY = 36500.0  # days, 100 years

# ---------- Memory model ----------
TARGET_FORGETTING_INDEX = 0.10
MIN_FORGETTING_INDEX = 0.01
MAX_FORGETTING_INDEX = 0.95
STABILITY_GAIN = 0.2
STABILITY_LOSS = 0.3

# ---------- Difficulty tracker ----------
SHORT_INTERVAL_DAYS = 7
MEDIUM_INTERVAL_DAYS = 30
SHORT_INTERVAL_WEIGHT = 0.30
MEDIUM_INTERVAL_WEIGHT = 0.60
LONG_INTERVAL_WEIGHT = 0.85
LAPSE_DIFFICULTY_STEP = 0.2
LAPSE_DIFFICULTY_PER_LAPSE = 0.1

# ---------- Optimal factor matrix ----------
MIN_BUCKET = 0
MAX_BUCKET = 24
BUCKET_WIDTH = 0.10
BUCKET_BONUS = 0.05  # Default factor grows 5% per bucket

MIN_OPTIMAL_FACTOR = 1.0
MAX_OPTIMAL_FACTOR = 3.0
DEFAULT_FACTOR_CURVE = (1.30, 1.85, 2.00, 2.18, 2.35)
DEFAULT_FACTOR_TAIL = 2.50  # Rows past the end of the curve
FACTOR_RETENTION = 0.9  # EMA weight kept by the stored value

# ---------- Interval calculator ----------
GRADE_MULTIPLIERS = {2: 0.60, 3: 0.85, 4: 1.15, 5: 1.30}
