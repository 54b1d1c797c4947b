"""
In-memory Card Repository: Infrastructure adapter.

Implements CardRepository with a plain dict. Used by the CLI simulator and
tests; nothing is persisted across processes.
"""

import logging

from cadence.domain.models import Card
from cadence.domain.ports import CardRepository

logger = logging.getLogger(__name__)


class InMemoryCardRepository(CardRepository):
    """Stores cards keyed by card_id, preserving insertion order."""

    def __init__(self, cards: list[Card] | None = None):
        self._cards: dict[str, Card] = {}
        for card in cards or []:
            self._cards[card.card_id] = card

    async def get(self, card_id: str) -> Card | None:
        return self._cards.get(card_id)

    async def save(self, card: Card) -> None:
        if card.card_id not in self._cards:
            logger.debug("Adding card %s to deck %s", card.card_id, card.deck_id)
        self._cards[card.card_id] = card

    async def list_by_deck(self, deck_id: str) -> list[Card]:
        return [c for c in self._cards.values() if c.deck_id == deck_id]

    def __len__(self) -> int:
        return len(self._cards)
