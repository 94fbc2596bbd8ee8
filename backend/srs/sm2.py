"""SM-2 scheduling for front/back flashcards.

A four-point variant of SuperMemo-2. Grades run 0-3 instead of 0-5, the
ease factor is capped at 2.5, and the first two successful reviews use fixed
intervals of 1 and 3 days before the ease factor takes over.

Key concepts:
- Ease factor (EF): multiplier for interval growth, bounded to [1.3, 2.5].
- Interval: whole days until the next review. 0 means never successfully reviewed.
- Grade: 0=forgot, 1=hard, 2=good, 3=perfect. Grade >= 2 counts as a success.

Everything here is pure: no I/O, no clock reads.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum

INITIAL_EASE_FACTOR = 1.8
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.5
INITIAL_INTERVAL = 1  # days, first successful review
SECOND_INTERVAL = 3  # days, second successful review
FAILED_INTERVAL = 1  # days, any failed review
MAX_INTERVAL = 36500  # days, keeps next_study_date inside the datetime range

PASSING_GRADE = 2


class Grade(IntEnum):
    """Self-reported recall quality for one review."""

    FORGOT = 0  # total recall failure
    HARD = 1  # recalled with difficulty
    GOOD = 2  # recalled adequately
    PERFECT = 3  # recalled perfectly


@dataclass(frozen=True)
class LearningProgress:
    """Scheduling state produced by a review."""

    ease_factor: float
    interval: int  # Days until next review
    next_study_date: datetime


def is_successful(grade: int) -> bool:
    """Return True if the grade counts as a successful recall."""
    return grade >= PASSING_GRADE


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (7.5 -> 8).

    Unlike the builtin ``round``, which rounds half to even (6.5 -> 6).
    """
    return math.floor(value + 0.5)


def clamp_ease_factor(ease_factor: float) -> float:
    return min(MAX_EASE_FACTOR, max(MIN_EASE_FACTOR, ease_factor))


def ease_factor_delta(grade: int) -> float:
    """EF adjustment for a successful grade: +0.1 for 3, -0.1 for 2."""
    miss = 3 - grade
    return 0.1 - miss * (0.15 + miss * 0.05)


def next_interval(prior_interval: int, ease_factor: float, grade: int) -> int:
    """Compute the next interval in days.

    Args:
        prior_interval: Interval before this review (0 if never reviewed).
        ease_factor: Ease factor after this review.
        grade: Review grade (0-3).

    Returns:
        Days until the next review, between 1 and MAX_INTERVAL.
    """
    if not is_successful(grade):
        return FAILED_INTERVAL
    if prior_interval == 0:
        return INITIAL_INTERVAL
    if prior_interval == 1:
        return SECOND_INTERVAL
    return min(round_half_up(prior_interval * ease_factor), MAX_INTERVAL)


def compute_next_state(
    prior: LearningProgress | None,
    grade: int,
    reviewed_at: datetime,
) -> LearningProgress:
    """Apply a review grade to the prior learning state.

    Args:
        prior: The learner's current state for the card, or None if the card
            has never been reviewed by this learner.
        grade: Review grade (0-3). Assumed already validated by the caller.
        reviewed_at: When the review happened.

    Returns:
        The new LearningProgress. On failure the ease factor is left unchanged
        and the interval resets to one day.
    """
    prior_ease_factor = prior.ease_factor if prior is not None else INITIAL_EASE_FACTOR
    prior_interval = prior.interval if prior is not None else 0

    if is_successful(grade):
        ease_factor = clamp_ease_factor(prior_ease_factor + ease_factor_delta(grade))
    else:
        ease_factor = prior_ease_factor

    interval = next_interval(prior_interval, ease_factor, grade)

    # timedelta(days=n) moves the calendar date and keeps the wall-clock time
    # and tzinfo, so DST shifts do not drift the review time.
    next_study_date = reviewed_at + timedelta(days=interval)

    return LearningProgress(
        ease_factor=ease_factor,
        interval=interval,
        next_study_date=next_study_date,
    )
