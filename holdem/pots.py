from __future__ import annotations

import logging
from collections import defaultdict
from copy import deepcopy
from typing import DefaultDict, List, Optional, Sequence, Set, Tuple, Union

from .errors import InvariantViolation
from .evaluator import compare_hands
from .models import Distribution, HandRank, Player, Pot, ShowdownEntry

LOGGER = logging.getLogger("holdem.pots")

WinnerLike = Union[str, ShowdownEntry, Tuple[str, Optional[HandRank]]]


class PotLedger:
    """Main pot plus a ladder of side pots for one hand.

    Pots are ordered lowest threshold first; the last pot is the open (main)
    pot. Every capped layer holds at most ``cap`` chips from each player, so
    chips added later by a caller fill the lower layers before reaching the
    open pot. All-in thresholds split exactly one layer, and the ladder only
    ever grows within a hand.
    """

    def __init__(self) -> None:
        self._pots: List[Pot] = []
        self._contributions: DefaultDict[str, int] = defaultdict(int)
        self._round_contributions: DefaultDict[str, int] = defaultdict(int)
        self._folded: Set[str] = set()
        self.reset()

    # Inspection -------------------------------------------------------

    @property
    def pots(self) -> List[Pot]:
        return deepcopy(self._pots)

    @property
    def total(self) -> int:
        return sum(pot.amount for pot in self._pots)

    @property
    def main_pot(self) -> Pot:
        return deepcopy(self._pots[-1])

    @property
    def side_pots(self) -> List[Pot]:
        return deepcopy(self._pots[:-1])

    def contributed(self, player_id: str) -> int:
        return self._contributions.get(player_id, 0)

    # Mutation ---------------------------------------------------------

    def reset(self) -> None:
        if self._pots:
            LOGGER.debug("Resetting pots (was %s)", self.total)
        self._pots = [Pot(is_main_pot=True)]
        self._contributions.clear()
        self._round_contributions.clear()
        self._folded.clear()

    def end_round(self) -> None:
        self._round_contributions.clear()

    def add_to_pot(self, amount: int, player_id: str) -> None:
        if amount < 0:
            raise InvariantViolation("Cannot add negative amount to pot")

        remaining = amount
        for pot in self._pots:
            held = pot.contributions.get(player_id, 0)
            if pot.cap is None:
                take = remaining
            else:
                take = min(pot.cap - held, remaining)
                if take <= 0:
                    continue
            if take:
                pot.contributions[player_id] = held + take
                pot.amount += take
                remaining -= take
            if self._reached(pot, player_id) and player_id not in pot.eligible_players:
                pot.eligible_players.append(player_id)

        if remaining:
            raise InvariantViolation(f"{remaining} chips from {player_id} did not land in any pot")

        self._contributions[player_id] += amount
        self._round_contributions[player_id] += amount
        LOGGER.debug("add_to_pot: %s adds %s, total %s", player_id, amount, self.total)

    def fold(self, player_id: str) -> None:
        self._folded.add(player_id)
        for pot in self._pots:
            if player_id in pot.eligible_players:
                pot.eligible_players.remove(player_id)

    def create_side_pot(self, players: Sequence[Player], all_in_player: Player, all_in_amount: int) -> Optional[Pot]:
        """Split the ladder at ``all_in_player``'s threshold.

        ``all_in_amount`` is the all-in player's bet for the current round.
        Returns a copy of the new side pot, or None when the threshold already
        sits on a layer boundary.
        """
        if all_in_amount < 0:
            raise InvariantViolation("All-in amount cannot be negative")
        for player in players:
            if player.has_folded:
                self.fold(player.player_id)

        pid = all_in_player.player_id
        threshold = self._contributions.get(pid, 0) - self._round_contributions.get(pid, 0) + all_in_amount

        floor = 0
        for idx, pot in enumerate(self._pots):
            if threshold <= floor:
                return None
            ceiling = None if pot.cap is None else floor + pot.cap
            if ceiling is None or threshold < ceiling:
                return self._split(idx, threshold - floor, threshold)
            if threshold == ceiling:
                return None
            floor = ceiling
        return None

    def _split(self, idx: int, cut: int, threshold: int) -> Pot:
        pot = self._pots[idx]
        lower = Pot(is_main_pot=False, cap=cut)
        upper = Pot(is_main_pot=pot.is_main_pot, cap=None if pot.cap is None else pot.cap - cut)

        for player_id, chips in pot.contributions.items():
            below = min(chips, cut)
            above = chips - below
            if below:
                lower.contributions[player_id] = below
                lower.amount += below
            if above:
                upper.contributions[player_id] = above
                upper.amount += above

        for layer in (lower, upper):
            layer.eligible_players = [
                player_id for player_id in layer.contributions if self._reached(layer, player_id)
            ]

        if lower.amount + upper.amount != pot.amount:
            raise InvariantViolation(
                f"Side pot split lost chips: {pot.amount} -> {lower.amount} + {upper.amount}"
            )

        self._pots[idx : idx + 1] = [lower, upper]
        LOGGER.debug(
            "Split pot %s at threshold %s: side %s %s, above %s %s",
            idx,
            threshold,
            lower.amount,
            lower.eligible_players,
            upper.amount,
            upper.eligible_players,
        )
        return deepcopy(lower)

    def _reached(self, pot: Pot, player_id: str) -> bool:
        if player_id in self._folded:
            return False
        chips = pot.contributions.get(player_id, 0)
        if pot.cap is None:
            return chips > 0
        return chips >= pot.cap

    # Payout -----------------------------------------------------------

    def distribute_pots(self, winners: Sequence[WinnerLike]) -> List[Distribution]:
        """Share every pot among its best eligible hands.

        ``winners`` is ordered best hand first. On a split the remainder
        chips go to the first tied winner in that order. Bare ids (no hand
        rank) hand the whole pot to the first eligible id.
        """
        entries = [_as_entry(winner) for winner in winners]
        distributions: List[Distribution] = []
        self._settle_orphans()

        for pot_index, pot in enumerate(self._pots):
            if pot.amount == 0:
                continue
            eligible = [entry for entry in entries if entry.player_id in pot.eligible_players]
            if not eligible:
                raise InvariantViolation(f"No eligible winner for pot {pot_index} holding {pot.amount}")

            best = eligible[0]
            if best.hand_rank is None:
                takers = [best]
            else:
                for entry in eligible[1:]:
                    if entry.hand_rank is not None and compare_hands(entry.hand_rank, best.hand_rank) > 0:
                        best = entry
                takers = [
                    entry
                    for entry in eligible
                    if entry.hand_rank is not None and compare_hands(entry.hand_rank, best.hand_rank) == 0
                ]

            share, remainder = divmod(pot.amount, len(takers))
            for position, entry in enumerate(takers):
                payout = share + (remainder if position == 0 else 0)
                distributions.append(Distribution(entry.player_id, payout, pot_index))

        self._check_paid_out(distributions)
        return distributions

    def _settle_orphans(self) -> None:
        # Chips in a layer every contributor folded out of drop to the layer below.
        for idx in range(len(self._pots) - 1, 0, -1):
            pot = self._pots[idx]
            if pot.amount and not pot.eligible_players:
                LOGGER.debug("Moving %s orphaned chips from pot %s down", pot.amount, idx)
                self._pots[idx - 1].amount += pot.amount
                pot.amount = 0

    def award_all(self, player_id: str) -> List[Distribution]:
        distributions = [
            Distribution(player_id, pot.amount, pot_index)
            for pot_index, pot in enumerate(self._pots)
            if pot.amount > 0
        ]
        self._check_paid_out(distributions)
        return distributions

    def _check_paid_out(self, distributions: Sequence[Distribution]) -> None:
        paid = sum(dist.amount for dist in distributions)
        if paid != self.total:
            raise InvariantViolation(f"Distributed {paid} chips but pots hold {self.total}")


def _as_entry(winner: WinnerLike) -> ShowdownEntry:
    if isinstance(winner, ShowdownEntry):
        return winner
    if isinstance(winner, str):
        return ShowdownEntry(winner)
    player_id, hand_rank = winner
    return ShowdownEntry(player_id, hand_rank)
