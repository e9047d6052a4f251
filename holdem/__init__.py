"""No-Limit Hold'em rules engine: cards, hand ranking, pots and betting order."""

from .cards import Card, Deck, RANKS, SUITS, Suit, parse_cards, parse_label
from .contracts import Advice, Advisor, DecisionMaker, DecisionPoint
from .errors import DeckExhausted, InvariantViolation, PokerError, ValidationError
from .evaluator import compare_hands, determine_winners, evaluate_hand, rank_showdown
from .game import GameEngine
from .models import (
    Action,
    ActionResult,
    ActionType,
    BettingRound,
    HandCategory,
    HandRank,
    HandResult,
    Player,
    Pot,
    TableConfig,
    TableSnapshot,
)
from .pots import PotLedger
from .table import TableState
from .validator import ActionValidator

__all__ = [
    "Card",
    "Deck",
    "RANKS",
    "SUITS",
    "Suit",
    "parse_cards",
    "parse_label",
    "Advice",
    "Advisor",
    "DecisionMaker",
    "DecisionPoint",
    "DeckExhausted",
    "InvariantViolation",
    "PokerError",
    "ValidationError",
    "compare_hands",
    "determine_winners",
    "evaluate_hand",
    "rank_showdown",
    "GameEngine",
    "Action",
    "ActionResult",
    "ActionType",
    "BettingRound",
    "HandCategory",
    "HandRank",
    "HandResult",
    "Player",
    "Pot",
    "TableConfig",
    "TableSnapshot",
    "PotLedger",
    "TableState",
    "ActionValidator",
]
