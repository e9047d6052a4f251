from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple

from .cards import Card

MAX_SEATS = 8


class BettingRound(str, Enum):
    PREFLOP = "PREFLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"

    def next_round(self) -> Optional["BettingRound"]:
        order = list(BettingRound)
        idx = order.index(self)
        return order[idx + 1] if idx + 1 < len(order) else None


# Community cards revealed when a round opens.
STREET_CARDS = {
    BettingRound.PREFLOP: 0,
    BettingRound.FLOP: 3,
    BettingRound.TURN: 1,
    BettingRound.RIVER: 1,
}


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class HandCategory(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


@dataclass(frozen=True)
class HandRank:
    category: HandCategory
    primary_value: int
    kickers: Tuple[int, ...] = ()
    cards_used: Tuple[Card, ...] = field(default=(), compare=False)

    @property
    def key(self) -> Tuple[int, int, Tuple[int, ...]]:
        return (int(self.category), self.primary_value, self.kickers)


@dataclass(frozen=True)
class Action:
    action_type: ActionType
    amount: Optional[int] = None  # intended total bet for the round, not an increment


@dataclass
class TableConfig:
    seats: int = MAX_SEATS
    starting_stack: int = 1_000
    sb: int = 5
    bb: int = 10

    def __post_init__(self) -> None:
        if not 2 <= self.seats <= MAX_SEATS:
            raise ValueError(f"Seats must be between 2 and {MAX_SEATS}")
        if self.starting_stack <= 0:
            raise ValueError("Starting stack must be positive")
        if self.sb <= 0 or self.bb <= 0:
            raise ValueError("Blinds must be positive")
        if self.bb < self.sb:
            raise ValueError("Big blind cannot be smaller than the small blind")


@dataclass
class Player:
    player_id: str
    name: str
    seat: int
    stack: int
    current_bet: int = 0
    total_committed: int = 0
    hole_cards: List[Card] = field(default_factory=list)
    has_folded: bool = False
    is_all_in: bool = False

    def reset_for_hand(self) -> None:
        self.current_bet = 0
        self.total_committed = 0
        self.hole_cards.clear()
        self.is_all_in = False
        # Busted players sit the hand out.
        self.has_folded = self.stack == 0

    def reset_for_round(self) -> None:
        self.current_bet = 0

    @property
    def can_act(self) -> bool:
        return not self.has_folded and not self.is_all_in and self.stack > 0


@dataclass
class Pot:
    amount: int = 0
    eligible_players: List[str] = field(default_factory=list)
    is_main_pot: bool = True
    # Per-player slice of this layer; None for the open pot at the top of the ladder.
    cap: Optional[int] = None
    contributions: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ShowdownEntry:
    player_id: str
    hand_rank: Optional[HandRank] = None


@dataclass(frozen=True)
class Distribution:
    player_id: str
    amount: int
    pot_index: int


@dataclass(frozen=True)
class WinnerResult:
    player_id: str
    hand_rank: Optional[HandRank]
    pot_share: int


@dataclass(frozen=True)
class HandResult:
    hand_number: int
    winners: Tuple[WinnerResult, ...]
    distributions: Tuple[Distribution, ...]
    showdown: bool


@dataclass(frozen=True)
class ActionRecord:
    hand_number: int
    betting_round: BettingRound
    player_id: str
    action: Action
    timestamp: float
    pot_size_after: int
    stack_after: int


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class ActionWindow:
    legal: Tuple[ActionType, ...]
    call_amount: Optional[int]
    min_raise_to: Optional[int]
    max_raise_to: Optional[int]


@dataclass(frozen=True)
class PlayerSnapshot:
    player_id: str
    name: str
    seat: int
    stack: int
    current_bet: int
    total_committed: int
    hole_cards: Tuple[Card, ...]
    has_folded: bool
    is_all_in: bool


@dataclass(frozen=True)
class PotSnapshot:
    amount: int
    eligible_players: Tuple[str, ...]
    is_main_pot: bool


@dataclass(frozen=True)
class TableSnapshot:
    hand_number: int
    hand_in_progress: bool
    dealer_position: int
    small_blind_position: int
    big_blind_position: int
    current_betting_round: BettingRound
    current_bet: int
    minimum_raise: int
    players: Tuple[PlayerSnapshot, ...]
    community_cards: Tuple[Card, ...]
    pots: Tuple[PotSnapshot, ...]
    action_queue: Tuple[str, ...]
    current_actor_index: int
    current_actor: Optional[str]
    legal_actions: Tuple[ActionType, ...] = ()

    @property
    def total_pot(self) -> int:
        return sum(pot.amount for pot in self.pots)

    def player(self, player_id: str) -> PlayerSnapshot:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise KeyError(player_id)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "hand_in_progress": self.hand_in_progress,
            "round": self.current_betting_round.value,
            "button": self.dealer_position,
            "sb_seat": self.small_blind_position,
            "bb_seat": self.big_blind_position,
            "current_bet": self.current_bet,
            "minimum_raise": self.minimum_raise,
            "pot": self.total_pot,
            "pots": [
                {"amount": pot.amount, "eligible": list(pot.eligible_players), "main": pot.is_main_pot}
                for pot in self.pots
            ],
            "community": [card.label for card in self.community_cards],
            "players": [
                {
                    "id": p.player_id,
                    "name": p.name,
                    "seat": p.seat,
                    "stack": p.stack,
                    "current_bet": p.current_bet,
                    "hole": [card.label for card in p.hole_cards],
                    "has_folded": p.has_folded,
                    "is_all_in": p.is_all_in,
                }
                for p in self.players
            ],
            "action_queue": list(self.action_queue),
            "next_actor": self.current_actor,
            "legal": [action.value for action in self.legal_actions],
        }


@dataclass(frozen=True)
class ActionResult:
    success: bool
    snapshot: TableSnapshot
    error: Optional[str] = None
    code: Optional[str] = None
    events: Tuple[Dict[str, object], ...] = ()
