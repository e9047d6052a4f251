from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .errors import DeckExhausted

RANKS = tuple(range(2, 15))
RANK_LABELS = "23456789TJQKA"
RANK_VALUE = {label: value for value, label in zip(RANKS, RANK_LABELS)}
DECK_SIZE = 52


class Suit(str, Enum):
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"
    SPADES = "s"


SUITS = tuple(Suit)


@dataclass(frozen=True)
class Card:
    rank: int
    suit: Suit

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            try:
                object.__setattr__(self, "suit", Suit(self.suit))
            except ValueError:
                raise ValueError(f"Invalid suit: {self.suit}") from None

    def __lt__(self, other: "Card") -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self) -> str:
        return self.label

    @property
    def label(self) -> str:
        return f"{RANK_LABELS[self.rank - 2]}{self.suit.value}"


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    rank = RANK_VALUE.get(label[0].upper())
    if rank is None:
        raise ValueError(f"Invalid rank: {label[0]}")
    return Card(rank, label[1].lower())


def parse_cards(labels: Iterable[str]) -> List[Card]:
    return [parse_label(label) for label in labels]


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


class Deck:
    """Standard 52-card deck dealt from a cursor.

    The card list always holds all 52 cards; ``deal`` walks a cursor over it
    instead of popping, so a reshuffle restores the full deck.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)
        self._cards: List[Card] = []
        self._dealt = 0
        self.reset()

    def reset(self) -> None:
        self._cards = [Card(rank, suit) for suit in SUITS for rank in RANKS]
        self._dealt = 0

    def shuffle(self) -> None:
        # random.shuffle is an in-place Fisher-Yates pass
        self._rng.shuffle(self._cards)
        self._dealt = 0

    def deal(self) -> Card:
        if self._dealt >= len(self._cards):
            raise DeckExhausted("No cards remaining in deck")
        card = self._cards[self._dealt]
        self._dealt += 1
        return card

    def deal_multiple(self, count: int) -> List[Card]:
        if count < 0:
            raise ValueError("Cannot deal a negative number of cards")
        if count > self.remaining:
            raise DeckExhausted(f"Not enough cards remaining. Requested: {count}, available: {self.remaining}")
        return [self.deal() for _ in range(count)]

    @property
    def remaining(self) -> int:
        return len(self._cards) - self._dealt

    @property
    def dealt_count(self) -> int:
        return self._dealt

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)
