from __future__ import annotations


class PokerError(Exception):
    """Base class for errors raised by the rules engine."""


class ValidationError(PokerError):
    """An action that is illegal in the current state. Recoverable; nothing was mutated."""

    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


class DeckExhausted(PokerError):
    """Raised when more cards are requested than remain in the deck."""


class InvariantViolation(PokerError):
    """Chip accounting went wrong. Signals a defect, never a gameplay outcome."""
