# Application Stats Package
from .metrics_calculator import DeckStatsCalculator

__all__ = ["DeckStatsCalculator"]
