"""
Read-only helpers for querying card status.

Informational only: nothing here feeds back into scheduling decisions.
"""

import math

from cadence.domain.constants import RETENTION_DECAY_DAYS, SECONDS_PER_CARD
from cadence.domain.models import Card

from .factory import get_clock


def is_due(card: Card, now: int | None = None) -> bool:
    """
    True when the card's next review time has been reached.

    The boundary is inclusive: a card due exactly at ``now`` is due.
    """
    if now is None:
        now = get_clock().now_ms()
    return card.next_review_date <= now


def calculate_retention(interval: float) -> float:
    """
    Estimate recall probability (percent) after ``interval`` days.

    Simple exponential decay: 100% at day 0, ~61% at day 30, ~22% at day 90.
    """
    if not math.isfinite(interval) or interval < 0:
        raise ValueError(f"interval must be a non-negative finite number, got {interval}")
    return 100 * math.exp(-interval / RETENTION_DECAY_DAYS)


def suggest_study_time(due_count: int) -> int:
    """Minutes needed to clear ``due_count`` cards at a fixed pace per card."""
    if due_count < 0:
        raise ValueError(f"due_count must be non-negative, got {due_count}")
    return math.ceil(due_count * SECONDS_PER_CARD / 60)
