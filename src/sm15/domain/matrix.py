"""
Pure helpers for the optimal factor matrix.

The matrix is keyed by (repetition row, difficulty bucket). Rows start at 1;
buckets split the A-Factor domain into 0.10-wide slices numbered 0-24.
"""

import math

from .constants import (
    BUCKET_BONUS,
    BUCKET_WIDTH,
    DEFAULT_FACTOR_CURVE,
    DEFAULT_FACTOR_TAIL,
    MAX_BUCKET,
    MAX_OPTIMAL_FACTOR,
    MIN_A_FACTOR,
    MIN_BUCKET,
    MIN_OPTIMAL_FACTOR,
)

MatrixKey = tuple[int, int]


def bucket_of(difficulty_factor: float) -> int:
    """Map an A-Factor to its difficulty bucket, clamped to [0, 24]."""
    # Rounding first keeps 2.50 in bucket 14 rather than 13.999...
    position = round((difficulty_factor - MIN_A_FACTOR) / BUCKET_WIDTH, 9)
    return max(MIN_BUCKET, min(MAX_BUCKET, math.floor(position)))


def clamp_factor(value: float) -> float:
    return max(MIN_OPTIMAL_FACTOR, min(MAX_OPTIMAL_FACTOR, value))


def default_optimal_factor(repetition: int, bucket: int) -> float:
    """
    Factor used for a (repetition, bucket) pair nothing has been learned about.

    Rows 1-5 follow DEFAULT_FACTOR_CURVE, later rows use the tail value; each
    bucket adds 5% on top. The result is clamped like any stored factor.
    """
    validate_key(repetition, bucket)
    if repetition > len(DEFAULT_FACTOR_CURVE):
        base = DEFAULT_FACTOR_TAIL
    else:
        base = DEFAULT_FACTOR_CURVE[repetition - 1]
    return clamp_factor(base * (1 + bucket * BUCKET_BONUS))


def validate_key(repetition: int, bucket: int) -> None:
    if repetition < 1:
        raise ValueError(f"Matrix rows start at 1, got {repetition}")
    if not MIN_BUCKET <= bucket <= MAX_BUCKET:
        raise ValueError(f"Bucket must lie in [{MIN_BUCKET}, {MAX_BUCKET}], got {bucket}")
