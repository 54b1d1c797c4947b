"""Domain exceptions."""


class CadenceError(Exception):
    """Base class for all cadence errors."""


class InvalidCardError(CadenceError, ValueError):
    """Scheduling fields are corrupted (negative or non-finite values)."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Invalid card field {field!r}: {value!r}")


class CardNotFoundError(CadenceError, KeyError):
    """No card with the requested id exists in the repository."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(card_id)

    def __str__(self) -> str:
        return f"Card not found: {self.card_id}"
