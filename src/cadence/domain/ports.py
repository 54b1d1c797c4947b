"""
Ports (interfaces) for time and card persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card


class Clock(ABC):
    """Source of the current time in epoch milliseconds."""

    @abstractmethod
    def now_ms(self) -> int:
        pass


class CardRepository(ABC):
    """
    Port for loading and storing card scheduling records.

    Implementations:
        - InMemoryCardRepository: dict-backed store for tests and simulations.
    """

    @abstractmethod
    async def get(self, card_id: str) -> Card | None:
        """
        Fetch a card by id.

        Returns:
            The stored card, or None if no such card exists.
        """
        pass

    @abstractmethod
    async def save(self, card: Card) -> None:
        """Insert or replace a card, keyed by its card_id."""
        pass

    @abstractmethod
    async def list_by_deck(self, deck_id: str) -> list[Card]:
        """
        Fetch every card belonging to a deck.

        Args:
            deck_id: The owning deck.

        Returns:
            Cards in insertion order.
        """
        pass
