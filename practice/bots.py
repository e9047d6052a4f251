from __future__ import annotations

import random
from typing import Optional, Sequence, Tuple

from holdem.cards import Card
from holdem.models import Action, ActionType, BettingRound, TableSnapshot

_RNG = random.Random()


def _rough_hand_strength(hole: Sequence[Card]) -> int:
    """Very rough proxy for hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    values = [card.rank for card in hole]
    score = sum(values)
    if values[0] == values[1]:
        score += 14  # pairs are quite strong pre-flop
    else:
        gap = abs(values[0] - values[1])
        if gap == 1:
            score += 4
        elif gap == 2:
            score += 2
    if hole[0].suit == hole[1].suit:
        score += 3
    if min(values) >= 11:
        score += 2

    return score


def _should_raise(strength: int, betting_round: BettingRound, facing_bet: bool, rng: random.Random) -> bool:
    base = 0.2 if facing_bet else 0.35
    round_bonus = {
        BettingRound.PREFLOP: 0.0,
        BettingRound.FLOP: 0.05,
        BettingRound.TURN: 0.1,
        BettingRound.RIVER: 0.12,
    }.get(betting_round, 0.0)
    scaled_strength = min(strength / 45.0, 0.45)
    probability = min(0.85, base + round_bonus + scaled_strength)

    # Always attack with premium holdings.
    if strength >= 36:
        return True
    return rng.random() < probability


def _raise_bounds(snapshot: TableSnapshot, player_id: str) -> Tuple[Optional[int], Optional[int]]:
    player = snapshot.player(player_id)
    if ActionType.BET in snapshot.legal_actions:
        return min(snapshot.minimum_raise, player.stack), player.stack
    if ActionType.RAISE in snapshot.legal_actions:
        return snapshot.current_bet + snapshot.minimum_raise, player.current_bet + player.stack
    return None, None


def _choose_raise_amount(
    min_raise_to: Optional[int],
    max_raise_to: Optional[int],
    facing_bet: bool,
    rng: random.Random,
) -> int:
    if min_raise_to is None:
        raise ValueError("Raise requested without a minimum amount")
    if max_raise_to is None or max_raise_to <= min_raise_to:
        return min_raise_to

    span = max_raise_to - min_raise_to
    roll = rng.random()

    # Facing a bet → weight toward stronger responses, otherwise mix in more probes.
    if facing_bet:
        if roll < 0.2:
            return min_raise_to
        if roll > 0.85:
            return max_raise_to
    else:
        if roll < 0.35:
            return min_raise_to
        if roll > 0.9:
            return max_raise_to

    return min_raise_to + int(span * rng.random())


def baseline_strategy(snapshot: TableSnapshot, player_id: str, rng: Optional[random.Random] = None) -> Action:
    """Aggressive demo bot: mixes in random raises with a bias toward stronger holdings.

    Only ever picks from ``snapshot.legal_actions``, so every returned action
    passes validation when ``player_id`` is the current actor.
    """
    rng = rng or _RNG
    legal = snapshot.legal_actions
    if not legal:
        raise ValueError(f"{player_id} has no legal actions")

    player = snapshot.player(player_id)
    hole = player.hole_cards
    strength = _rough_hand_strength(hole)
    facing_bet = ActionType.CALL in legal or (ActionType.FOLD in legal and ActionType.CHECK not in legal)

    if hole and _should_raise(strength, snapshot.current_betting_round, facing_bet, rng):
        min_raise_to, max_raise_to = _raise_bounds(snapshot, player_id)
        if min_raise_to is not None:
            amount = _choose_raise_amount(min_raise_to, max_raise_to, facing_bet, rng)
            if amount >= player.current_bet + player.stack:
                return Action(ActionType.ALL_IN)
            kind = ActionType.BET if ActionType.BET in legal else ActionType.RAISE
            return Action(kind, amount)

    # Fall back to calling if legal.
    if ActionType.CALL in legal:
        return Action(ActionType.CALL)

    # Prefer checking when no chips are at risk and no raise happened.
    if ActionType.CHECK in legal:
        return Action(ActionType.CHECK)

    # Short stacks facing a bigger bet can only shove or give up.
    if ActionType.FOLD in legal and strength < 30:
        return Action(ActionType.FOLD)
    return Action(ActionType.ALL_IN)


class BaselineBot:
    """Seedable wrapper so a practice run replays the same decisions."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def __call__(self, snapshot: TableSnapshot, player_id: str) -> Action:
        return baseline_strategy(snapshot, player_id, rng=self._rng)
