"""
Deck statistics derived from card scheduling snapshots.

This is a pure computation module with no I/O.
"""

from collections import Counter
from collections.abc import Iterable

from cadence.application.insights import is_due
from cadence.domain.models import Card, CardState, DeckStats


class DeckStatsCalculator:
    """
    Counts cards per state and how many are due.

    Stateless and side-effect free.
    """

    def summarize(self, cards: Iterable[Card], now: int) -> DeckStats:
        states: Counter[CardState] = Counter()
        total = 0
        due = 0

        for card in cards:
            total += 1
            states[CardState(card.state)] += 1
            if is_due(card, now):
                due += 1

        return DeckStats(
            total=total,
            new=states[CardState.NEW],
            learning=states[CardState.LEARNING],
            review=states[CardState.REVIEW],
            mastered=states[CardState.MASTERED],
            due=due,
        )
