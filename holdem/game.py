from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Tuple

from .cards import Deck
from .contracts import DecisionPoint
from .errors import InvariantViolation
from .evaluator import describe_rank, rank_showdown
from .models import (
    STREET_CARDS,
    Action,
    ActionRecord,
    ActionResult,
    ActionType,
    ActionWindow,
    BettingRound,
    Distribution,
    HandRank,
    HandResult,
    Player,
    ShowdownEntry,
    TableConfig,
    TableSnapshot,
    WinnerResult,
)
from .pots import PotLedger
from .table import TableState
from .validator import ActionValidator

LOGGER = logging.getLogger("holdem.game")

Event = Dict[str, object]

# GameEngine owns one table: its state, pot ledger and deck. Nothing here does
# I/O; callers drive it one action at a time.


class GameEngine:
    """No-Limit Texas Hold'em engine for a single table."""

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        *,
        deck: Optional[Deck] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.config = config or TableConfig()
        self.state = TableState.create(self.config)
        self.ledger = PotLedger()
        self.deck = deck if deck is not None else Deck(seed=seed)
        self.validator = ActionValidator()
        self._history: List[ActionRecord] = []
        self._hand_events: List[Event] = []
        self._last_result: Optional[HandResult] = None
        self._chip_total = sum(player.stack for player in self.state.players)

    @classmethod
    def create(
        cls,
        num_players: int = 8,
        starting_stack: int = 1_000,
        small_blind: int = 5,
        big_blind: int = 10,
        seed: Optional[int] = None,
    ) -> "GameEngine":
        config = TableConfig(seats=num_players, starting_stack=starting_stack, sb=small_blind, bb=big_blind)
        return cls(config, seed=seed)

    # Hand lifecycle --------------------------------------------------

    def can_start_hand(self) -> bool:
        return not self.state.hand_in_progress and len(self.state.funded_players()) >= 2

    def deal_hand(self) -> TableSnapshot:
        if self.state.hand_in_progress:
            raise RuntimeError("Hand already in progress")
        if len(self.state.funded_players()) < 2:
            raise RuntimeError("Not enough active players to start a hand")

        state = self.state
        self._chip_total = sum(player.stack for player in state.players)
        self.ledger.reset()
        state.start_hand()
        self._hand_events = []
        self._last_result = None

        self.deck.reset()
        self.deck.shuffle()
        self._deal_hole_cards()
        self._post_blinds()
        state.start_betting_round(BettingRound.PREFLOP)
        LOGGER.info(
            "Hand %s started: button %s, blinds %s/%s",
            state.hand_number,
            state.dealer_position,
            state.small_blind_position,
            state.big_blind_position,
        )

        # Blinds can put everyone all-in before anyone acts.
        self._hand_events.extend(self._progress())
        self._verify_conservation()
        return self.snapshot()

    def _deal_hole_cards(self) -> None:
        dealt_in = [player for player in self.state.seats_from(self.state.dealer_position + 1) if not player.has_folded]
        for _ in range(2):
            for player in dealt_in:
                player.hole_cards.append(self.deck.deal())

    def _post_blinds(self) -> None:
        state = self.state
        sb_player = state.player_at(state.small_blind_position)
        bb_player = state.player_at(state.big_blind_position)
        self._commit(sb_player, min(sb_player.stack, self.config.sb))
        self._commit(bb_player, min(bb_player.stack, self.config.bb))

        state.current_bet = self.config.bb
        state.minimum_raise = self.config.bb
        self._hand_events.append(
            {
                "ev": "POST_BLINDS",
                "sb_seat": sb_player.seat,
                "bb_seat": bb_player.seat,
                "sb": sb_player.current_bet,
                "bb": bb_player.current_bet,
            }
        )

    def _commit(self, player: Player, amount: int) -> None:
        if amount > player.stack:
            raise InvariantViolation(f"{player.player_id} cannot commit {amount} from a stack of {player.stack}")
        player.stack -= amount
        player.current_bet += amount
        player.total_committed += amount
        self.ledger.add_to_pot(amount, player.player_id)
        if player.stack == 0:
            player.is_all_in = True
            self.ledger.create_side_pot(self.state.players, player, player.current_bet)

    # Action handling -------------------------------------------------

    def execute_action(self, player_id: str, action: Action) -> ActionResult:
        state = self.state
        verdict = self.validator.validate_action(player_id, action, state)
        if not verdict.valid:
            return ActionResult(success=False, snapshot=self.snapshot(), error=verdict.error, code=verdict.code)

        player = state.player(player_id)
        betting_round = state.current_betting_round
        events = self._apply(player, action)
        self._history.append(
            ActionRecord(
                hand_number=state.hand_number,
                betting_round=betting_round,
                player_id=player_id,
                action=action,
                timestamp=time.time(),
                pot_size_after=self.ledger.total,
                stack_after=player.stack,
            )
        )

        events.extend(self._progress())
        self._verify_conservation()
        self._hand_events.extend(events)
        return ActionResult(success=True, snapshot=self.snapshot(), events=tuple(events))

    def _apply(self, player: Player, action: Action) -> List[Event]:
        state = self.state
        seat = player.seat
        reopened = False
        events: List[Event] = []

        # Each branch records what happened so a presentation layer can replay it.
        if action.action_type == ActionType.FOLD:
            player.has_folded = True
            self.ledger.fold(player.player_id)
            events.append({"ev": "FOLD", "seat": seat})
        elif action.action_type == ActionType.CHECK:
            events.append({"ev": "CHECK", "seat": seat})
        elif action.action_type == ActionType.CALL:
            call_amount = self.validator.amount_to_call(player, state)
            self._commit(player, call_amount)
            events.append({"ev": "CALL", "seat": seat, "amount": call_amount})
        elif action.action_type == ActionType.BET:
            assert action.amount is not None
            added = self._raise_to(player, action.amount)
            reopened = True
            events.append({"ev": "BET", "seat": seat, "amount": added, "to": action.amount})
        elif action.action_type == ActionType.RAISE:
            assert action.amount is not None
            added = self._raise_to(player, action.amount)
            reopened = True
            events.append({"ev": "RAISE", "seat": seat, "amount": added, "to": action.amount})
        elif action.action_type == ActionType.ALL_IN:
            target = player.current_bet + player.stack
            if target > state.current_bet:
                added = self._raise_to(player, target)
                reopened = True
            else:
                added = player.stack
                self._commit(player, added)
            events.append({"ev": "ALL_IN", "seat": seat, "amount": added, "to": target})
        else:
            raise ValueError(f"Unsupported action {action.action_type}")

        state.complete_turn(player.player_id, reopened)
        return events

    def _raise_to(self, player: Player, target: int) -> int:
        """Bring ``player`` up to ``target`` for the round and make it the table bet."""
        state = self.state
        previous_bet = state.current_bet
        added = target - player.current_bet
        self._commit(player, added)
        increment = target - previous_bet
        # A short all-in raise leaves the minimum raise where it was.
        if increment >= state.minimum_raise:
            state.minimum_raise = increment
        state.current_bet = target
        return added

    def _progress(self) -> List[Event]:
        """Close the round if it is done: deal the next street or resolve."""
        state = self.state
        if not state.hand_in_progress:
            return []
        if len(state.players_in_hand()) == 1:
            return self._resolve()[1]
        if not state.is_round_complete():
            return []

        events: List[Event] = []
        while state.is_round_complete():
            next_round = state.current_betting_round.next_round()
            if next_round is None:
                events.extend(self._resolve()[1])
                break
            if len(state.action_queue) < 2:
                LOGGER.info("Hand %s: no betting left, running out %s", state.hand_number, next_round.value)
            events.append(self._open_street(next_round))
        return events

    def advance_betting_round(self) -> bool:
        state = self.state
        if not state.hand_in_progress:
            return False
        next_round = state.current_betting_round.next_round()
        if next_round is None:
            return False
        self._hand_events.append(self._open_street(next_round))
        return True

    def _open_street(self, betting_round: BettingRound) -> Event:
        cards = self.deck.deal_multiple(STREET_CARDS[betting_round])
        self.state.community_cards.extend(cards)
        self.ledger.end_round()
        self.state.start_betting_round(betting_round)
        LOGGER.debug("%s: %s", betting_round.value, " ".join(card.label for card in cards))
        if betting_round == BettingRound.FLOP:
            return {"ev": "FLOP", "cards": [card.label for card in cards]}
        return {"ev": betting_round.value, "card": cards[0].label}

    # Resolution ------------------------------------------------------

    def resolve_hand(self) -> HandResult:
        if not self.state.hand_in_progress:
            raise RuntimeError("No hand in progress")
        result, events = self._resolve()
        self._hand_events.extend(events)
        return result

    def _resolve(self) -> Tuple[HandResult, List[Event]]:
        state = self.state
        events: List[Event] = []
        live = [player for player in state.seats_from(state.dealer_position + 1) if not player.has_folded]
        ranks: Dict[str, Optional[HandRank]] = {}

        if len(live) == 1:
            showdown = False
            distributions = self.ledger.award_all(live[0].player_id)
        else:
            showdown = True
            missing = 5 - len(state.community_cards)
            if missing > 0:
                state.community_cards.extend(self.deck.deal_multiple(missing))
            board = [card.label for card in state.community_cards]
            ranked = rank_showdown(live, state.community_cards)
            for player_id, rank in ranked:
                ranks[player_id] = rank
            for player in live:
                events.append(
                    {
                        "ev": "SHOWDOWN",
                        "seat": player.seat,
                        "hand": [card.label for card in player.hole_cards],
                        "board": board,
                        "rank": describe_rank(ranks[player.player_id]),
                    }
                )
            entries = [ShowdownEntry(player_id, rank) for player_id, rank in ranked]
            distributions = self.ledger.distribute_pots(entries)

        events.extend(self._pay_out(distributions))
        for player in state.players:
            if player.stack == 0 and player.hole_cards:
                events.append({"ev": "ELIMINATED", "seat": player.seat})

        winnings: Dict[str, int] = {}
        for dist in distributions:
            winnings[dist.player_id] = winnings.get(dist.player_id, 0) + dist.amount
        result = HandResult(
            hand_number=state.hand_number,
            winners=tuple(
                WinnerResult(player_id, ranks.get(player_id), amount) for player_id, amount in winnings.items()
            ),
            distributions=tuple(distributions),
            showdown=showdown,
        )

        self.ledger.reset()
        state.finish_hand()
        self._verify_conservation()
        self._last_result = result
        LOGGER.info(
            "Hand %s resolved: %s",
            result.hand_number,
            ", ".join(f"{winner.player_id} +{winner.pot_share}" for winner in result.winners),
        )
        return result, events

    def _pay_out(self, distributions: List[Distribution]) -> List[Event]:
        events: List[Event] = []
        for dist in distributions:
            player = self.state.player(dist.player_id)
            player.stack += dist.amount
            events.append({"ev": "POT_AWARD", "seat": player.seat, "amount": dist.amount, "pot": dist.pot_index})
        return events

    def _verify_conservation(self) -> None:
        in_play = sum(player.stack for player in self.state.players) + self.ledger.total
        if in_play != self._chip_total:
            raise InvariantViolation(f"Chip total drifted: expected {self._chip_total}, found {in_play}")

    # Queries ---------------------------------------------------------

    def snapshot(self, viewer: Optional[str] = None) -> TableSnapshot:
        actor_id = self.next_actor()
        legal: List[ActionType] = []
        if actor_id is not None:
            legal = self.validator.get_available_actions(self.state.player(actor_id), self.state)
        return self.state.snapshot(self.ledger.pots, viewer=viewer, legal_actions=legal)

    def next_actor(self) -> Optional[str]:
        if not self.state.hand_in_progress:
            return None
        return self.state.current_actor

    def action_window(self, player_id: str) -> ActionWindow:
        if not self.state.hand_in_progress:
            raise RuntimeError("Hand not in progress")
        return self.validator.action_window(self.state.player(player_id), self.state)

    def decision_point(self, player_id: str) -> DecisionPoint:
        if not self.state.hand_in_progress:
            raise RuntimeError("Hand not in progress")
        state = self.state
        player = state.player(player_id)
        return DecisionPoint(
            player_id=player_id,
            hole_cards=tuple(player.hole_cards),
            community_cards=tuple(state.community_cards),
            pot_size=self.ledger.total,
            current_bet=state.current_bet,
            amount_to_call=self.validator.amount_to_call(player, state),
            stack=player.stack,
            position=(player.seat - state.dealer_position) % len(state.players),
            active_players=len(state.players_in_hand()),
            available_actions=tuple(self.validator.get_available_actions(player, state)),
            betting_round=state.current_betting_round,
        )

    def history(self, hand_number: Optional[int] = None) -> Tuple[ActionRecord, ...]:
        if hand_number is None:
            return tuple(self._history)
        return tuple(record for record in self._history if record.hand_number == hand_number)

    def hand_events(self) -> Tuple[Event, ...]:
        return tuple(self._hand_events)

    @property
    def last_result(self) -> Optional[HandResult]:
        return self._last_result

    def is_hand_complete(self) -> bool:
        return self.state.hand_number > 0 and not self.state.hand_in_progress

    def is_match_over(self) -> bool:
        return len(self.state.funded_players()) <= 1
