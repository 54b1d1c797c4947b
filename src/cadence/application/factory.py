"""
Clock Factory
Centralizes the choice of concrete time source for the application layer.
"""

from cadence.domain.ports import Clock
from cadence.infrastructure.clock import SystemClock


def get_clock() -> Clock:
    """
    Returns the wall-clock implementation used when no clock is injected.
    """
    return SystemClock()
