"""
Domain models for card scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from .constants import DEFAULT_EASE_FACTOR


class Rating(str, Enum):
    """Recall quality reported by the learner for a single review."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class CardState(str, Enum):
    """
    Coarse retention maturity of a card.

    Derived from interval and repetitions by the scheduler; never set directly.
    """

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"


@dataclass(frozen=True)
class Card:
    """
    Scheduling snapshot of a flashcard.

    Attributes:
        card_id: Identifier assigned by the persistence layer.
        deck_id: Owning deck.
        interval: Days until the next review (one decimal place).
        ease_factor: SM-2 multiplier, higher means easier.
        repetitions: Consecutive non-"again" reviews since the last reset.
        next_review_date: Epoch milliseconds when the card becomes due.
        state: Classification recomputed after every review.
        last_reviewed: Epoch milliseconds of the last review, if any.
    """

    card_id: str
    deck_id: str
    interval: float = 0.0
    ease_factor: float = DEFAULT_EASE_FACTOR
    repetitions: int = 0
    next_review_date: int = 0
    state: CardState = CardState.NEW
    last_reviewed: int | None = None


def new_card(card_id: str, deck_id: str, now: int) -> Card:
    """Create a card in its initial state, due immediately."""
    return Card(card_id=card_id, deck_id=deck_id, next_review_date=now)


@dataclass(frozen=True)
class ReviewResult:
    """
    Output of a single review. The input card is never mutated.

    The caller is responsible for persisting these fields.
    """

    interval: float
    ease_factor: float
    repetitions: int
    next_review_date: int
    state: CardState

    def apply_to(self, card: Card, reviewed_at: int | None = None) -> Card:
        """Return a copy of ``card`` carrying the new scheduling fields."""
        return replace(
            card,
            interval=self.interval,
            ease_factor=self.ease_factor,
            repetitions=self.repetitions,
            next_review_date=self.next_review_date,
            state=self.state,
            last_reviewed=reviewed_at if reviewed_at is not None else card.last_reviewed,
        )


@dataclass(frozen=True)
class DeckStats:
    """Per-state card counts for a deck, plus how many are due."""

    total: int = 0
    new: int = 0
    learning: int = 0
    review: int = 0
    mastered: int = 0
    due: int = 0


def _empty_tally() -> dict[Rating, int]:
    return {rating: 0 for rating in Rating}


@dataclass(frozen=True)
class SessionStats:
    """
    Running totals for one study session.

    Owned and threaded through by the caller; ``record`` returns a new value.
    """

    cards_studied: int = 0
    new_cards: int = 0
    review_cards: int = 0
    ratings: dict[Rating, int] = field(default_factory=_empty_tally)

    def record(self, rating: Rating | str, previous_state: CardState | str) -> "SessionStats":
        rating = Rating(rating)
        was_new = CardState(previous_state) is CardState.NEW
        tally = dict(self.ratings)
        tally[rating] = tally.get(rating, 0) + 1
        return SessionStats(
            cards_studied=self.cards_studied + 1,
            new_cards=self.new_cards + (1 if was_new else 0),
            review_cards=self.review_cards + (0 if was_new else 1),
            ratings=tally,
        )

    @property
    def accuracy(self) -> float | None:
        """Share of answers that were not "again", or None before any answer."""
        if self.cards_studied == 0:
            return None
        return (self.cards_studied - self.ratings.get(Rating.AGAIN, 0)) / self.cards_studied
