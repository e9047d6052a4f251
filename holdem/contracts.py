from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple

from .cards import Card
from .models import Action, ActionType, BettingRound, TableSnapshot


@dataclass(frozen=True)
class DecisionPoint:
    """What an advisor gets to see when a player is on the clock."""

    player_id: str
    hole_cards: Tuple[Card, ...]
    community_cards: Tuple[Card, ...]
    pot_size: int
    current_bet: int
    amount_to_call: int
    stack: int
    position: int  # seats left of the button; the button itself is 0
    active_players: int
    available_actions: Tuple[ActionType, ...]
    betting_round: BettingRound


@dataclass(frozen=True)
class Advice:
    recommended: ActionType
    frequencies: Dict[ActionType, float] = field(default_factory=dict)
    reasoning: str = ""
    amount: Optional[int] = None

    def __post_init__(self) -> None:
        if self.frequencies and not math.isclose(sum(self.frequencies.values()), 1.0, abs_tol=1e-6):
            raise ValueError("Action frequencies must sum to 1.0")
        if any(freq < 0 for freq in self.frequencies.values()):
            raise ValueError("Action frequencies cannot be negative")


class DecisionMaker(Protocol):
    def __call__(self, snapshot: TableSnapshot, player_id: str) -> Action:
        ...


class Advisor(Protocol):
    def advise(self, point: DecisionPoint) -> Advice:
        ...
