"""cadence: SM-2 style spaced-repetition scheduler."""

from cadence.application.insights import calculate_retention, is_due, suggest_study_time
from cadence.application.scheduler import calculate_next_review
from cadence.consts import VERSION
from cadence.domain.models import Card, CardState, Rating, ReviewResult, new_card

__version__ = VERSION

__all__ = [
    "Card",
    "CardState",
    "Rating",
    "ReviewResult",
    "calculate_next_review",
    "calculate_retention",
    "is_due",
    "new_card",
    "suggest_study_time",
]
