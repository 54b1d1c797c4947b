"""
Review Service: Application layer orchestrator.

Loads a card from the repository, runs it through the scheduler and writes
the updated scheduling fields back.
"""

import logging
from typing import Literal

from cadence.domain.errors import CardNotFoundError
from cadence.domain.models import Card, DeckStats, Rating, ReviewResult
from cadence.domain.ports import CardRepository, Clock

from .factory import get_clock
from .insights import is_due
from .scheduler import calculate_next_review, sanitize_card
from .stats import DeckStatsCalculator

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for answering cards and querying deck status.

    Follows Dependency Inversion: depends on the CardRepository and Clock
    abstractions, not concrete adapter implementations. Writes for the same
    card are not serialized here; that is the repository's concern.
    """

    def __init__(
        self,
        repo: CardRepository,
        clock: Clock | None = None,
        invalid_card_policy: Literal["reject", "clamp"] = "reject",
        calculator: DeckStatsCalculator | None = None,
    ):
        """
        Args:
            repo: The repository (port) for loading and saving cards.
            clock: Time source; defaults to the system clock.
            invalid_card_policy: "reject" raises on corrupted fields,
                "clamp" repairs them and logs a warning.
            calculator: Optional custom stats calculator.
        """
        self._repo = repo
        self._clock = clock or get_clock()
        self._policy = invalid_card_policy
        self._calc = calculator or DeckStatsCalculator()

    async def review(self, card_id: str, rating: Rating | str) -> ReviewResult:
        """
        Apply a rating to a stored card and persist the outcome.

        Raises:
            CardNotFoundError: If the repository has no such card.
            InvalidCardError: If the stored fields are corrupted and the
                policy is "reject".
        """
        rating = Rating(rating)
        card = await self._repo.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        if self._policy == "clamp":
            card, repaired = sanitize_card(card)
            if repaired:
                logger.warning(
                    "Card %s had corrupted fields %s; clamped before scheduling",
                    card_id,
                    ", ".join(repaired),
                )

        now = self._clock.now_ms()
        result = calculate_next_review(card, rating, now=now)
        await self._repo.save(result.apply_to(card, reviewed_at=now))

        logger.debug(
            "Reviewed %s as %s: interval=%s ease=%.2f reps=%d state=%s",
            card_id,
            rating.value,
            result.interval,
            result.ease_factor,
            result.repetitions,
            result.state.value,
        )
        return result

    async def due_cards(self, deck_id: str) -> list[Card]:
        """
        List the deck's due cards, earliest first.

        No daily caps or shuffling are applied.
        """
        now = self._clock.now_ms()
        cards = await self._repo.list_by_deck(deck_id)
        return sorted(
            (c for c in cards if is_due(c, now)),
            key=lambda c: c.next_review_date,
        )

    async def deck_stats(self, deck_id: str) -> DeckStats:
        cards = await self._repo.list_by_deck(deck_id)
        return self._calc.summarize(cards, self._clock.now_ms())
