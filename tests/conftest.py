import pytest

from cadence.domain.models import Card, new_card
from cadence.infrastructure.clock import FixedClock

# 2024-01-01T00:00:00Z
EPOCH_MS = 1_704_067_200_000


@pytest.fixture
def now():
    return EPOCH_MS


@pytest.fixture
def clock():
    return FixedClock(EPOCH_MS)


@pytest.fixture
def fresh_card():
    """A card exactly as created: interval 0, ease 2.5, no repetitions."""
    return new_card("c1", "deck-1", EPOCH_MS)


@pytest.fixture
def make_card():
    def _make(**fields) -> Card:
        fields.setdefault("card_id", "c1")
        fields.setdefault("deck_id", "deck-1")
        return Card(**fields)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    return home
