from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from .cards import Card
from .models import (
    ActionType,
    BettingRound,
    Player,
    PlayerSnapshot,
    Pot,
    PotSnapshot,
    TableConfig,
    TableSnapshot,
)

# TableState is the single mutable aggregate for one table. Only the engine
# writes to it; callers get frozen snapshots.


@dataclass
class TableState:
    config: TableConfig
    players: List[Player]
    community_cards: List[Card] = field(default_factory=list)
    current_bet: int = 0
    minimum_raise: int = 0
    dealer_position: int = 0
    small_blind_position: int = 1
    big_blind_position: int = 2
    current_betting_round: BettingRound = BettingRound.PREFLOP
    action_queue: List[str] = field(default_factory=list)
    current_actor_index: int = 0
    hand_number: int = 0
    hand_in_progress: bool = False
    # Queued players still owed an action this round.
    pending: Set[str] = field(default_factory=set)

    @classmethod
    def create(cls, config: TableConfig) -> "TableState":
        players = [
            Player(player_id=f"player_{seat}", name=f"Player {seat}", seat=seat, stack=config.starting_stack)
            for seat in range(config.seats)
        ]
        return cls(config=config, players=players, minimum_raise=config.bb)

    # Lookups ----------------------------------------------------------

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def player(self, player_id: str) -> Player:
        player = self.find_player(player_id)
        if player is None:
            raise KeyError(f"Unknown player {player_id}")
        return player

    def player_at(self, seat: int) -> Player:
        return self.players[seat % len(self.players)]

    def players_in_hand(self) -> List[Player]:
        return [player for player in self.players if not player.has_folded]

    def funded_players(self) -> List[Player]:
        return [player for player in self.players if player.stack > 0]

    def seats_from(self, start: int) -> List[Player]:
        count = len(self.players)
        return [self.players[(start + offset) % count] for offset in range(count)]

    def next_funded_seat(self, start: int) -> int:
        for player in self.seats_from(start + 1):
            if player.stack > 0:
                return player.seat
        raise RuntimeError("No funded seat at the table")

    @property
    def current_actor(self) -> Optional[str]:
        if not self.pending or not self.action_queue:
            return None
        return self.action_queue[self.current_actor_index]

    # Hand lifecycle ---------------------------------------------------

    def start_hand(self) -> None:
        """Reset per-hand state and move the button to the next funded seat."""
        for player in self.players:
            player.reset_for_hand()

        self.hand_number += 1
        if self.hand_number == 1:
            self.dealer_position = self.next_funded_seat(-1)
        else:
            self.dealer_position = self.next_funded_seat(self.dealer_position)

        if len(self.funded_players()) == 2:
            self.small_blind_position = self.dealer_position
        else:
            self.small_blind_position = self.next_funded_seat(self.dealer_position)
        self.big_blind_position = self.next_funded_seat(self.small_blind_position)

        self.community_cards.clear()
        self.current_betting_round = BettingRound.PREFLOP
        self.current_bet = 0
        self.minimum_raise = self.config.bb
        self.action_queue.clear()
        self.pending.clear()
        self.current_actor_index = 0
        self.hand_in_progress = True

    def start_betting_round(self, betting_round: BettingRound) -> None:
        """Phase transition: the only place bets reset and the queue is rebuilt."""
        self.current_betting_round = betting_round
        if betting_round != BettingRound.PREFLOP:
            for player in self.players:
                player.reset_for_round()
            self.current_bet = 0
        self.minimum_raise = self.config.bb

        if betting_round == BettingRound.PREFLOP:
            start = self.big_blind_position + 1
        else:
            start = self.dealer_position + 1
        self.action_queue = [player.player_id for player in self.seats_from(start) if player.can_act]
        self.current_actor_index = 0
        self.pending = set(self.action_queue)

        # A lone player who already matches the bet has nobody to act against.
        if len(self.action_queue) == 1 and self.player(self.action_queue[0]).current_bet >= self.current_bet:
            self.pending.clear()

    def finish_hand(self) -> None:
        for player in self.players:
            player.reset_for_round()
        self.current_bet = 0
        self.action_queue.clear()
        self.pending.clear()
        self.current_actor_index = 0
        self.hand_in_progress = False

    # Action queue -----------------------------------------------------

    def complete_turn(self, player_id: str, reopened: bool = False) -> None:
        """Record that ``player_id`` acted and move to the next owed actor.

        ``reopened`` marks a bet or raise: every other queued player below the
        new bet owes an action again. Folded and all-in players leave the queue
        and are never put back.
        """
        idx = self.action_queue.index(player_id)
        self.pending.discard(player_id)
        if reopened:
            self.pending = {
                pid
                for pid in self.action_queue
                if pid != player_id and self.player(pid).current_bet < self.current_bet
            }

        player = self.player(player_id)
        if player.has_folded or player.is_all_in:
            del self.action_queue[idx]
            next_idx = idx
        else:
            next_idx = idx + 1
        self.current_actor_index = self._next_pending_index(next_idx)

    def _next_pending_index(self, start: int) -> int:
        size = len(self.action_queue)
        for offset in range(size):
            pos = (start + offset) % size
            if self.action_queue[pos] in self.pending:
                return pos
        return 0

    def is_round_complete(self) -> bool:
        return not self.pending

    # Snapshots --------------------------------------------------------

    def snapshot(
        self,
        pots: Sequence[Pot],
        viewer: Optional[str] = None,
        legal_actions: Sequence[ActionType] = (),
    ) -> TableSnapshot:
        players = tuple(
            PlayerSnapshot(
                player_id=player.player_id,
                name=player.name,
                seat=player.seat,
                stack=player.stack,
                current_bet=player.current_bet,
                total_committed=player.total_committed,
                hole_cards=tuple(player.hole_cards) if viewer in (None, player.player_id) else (),
                has_folded=player.has_folded,
                is_all_in=player.is_all_in,
            )
            for player in self.players
        )
        return TableSnapshot(
            hand_number=self.hand_number,
            hand_in_progress=self.hand_in_progress,
            dealer_position=self.dealer_position,
            small_blind_position=self.small_blind_position,
            big_blind_position=self.big_blind_position,
            current_betting_round=self.current_betting_round,
            current_bet=self.current_bet,
            minimum_raise=self.minimum_raise,
            players=players,
            community_cards=tuple(self.community_cards),
            pots=tuple(
                PotSnapshot(amount=pot.amount, eligible_players=tuple(pot.eligible_players), is_main_pot=pot.is_main_pot)
                for pot in pots
            ),
            action_queue=tuple(self.action_queue),
            current_actor_index=self.current_actor_index,
            current_actor=self.current_actor,
            legal_actions=tuple(legal_actions),
        )
