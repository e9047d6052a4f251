from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from holdem.contracts import DecisionMaker
from holdem.game import GameEngine
from holdem.models import HandResult, TableConfig
from practice.bots import BaselineBot

LOGGER = logging.getLogger("practice_session")


class PracticeSessionError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


@dataclass
class SessionSummary:
    hands_played: int = 0
    results: List[HandResult] = field(default_factory=list)
    final_stacks: Dict[str, int] = field(default_factory=dict)

    @property
    def chip_leader(self) -> Optional[str]:
        if not self.final_stacks:
            return None
        return max(self.final_stacks, key=lambda player_id: self.final_stacks[player_id])


# One practice run = repeated hands until the hand limit or one stack remains.


class PracticeSession:
    """Drives a table of decision makers through complete hands."""

    def __init__(
        self,
        config: TableConfig,
        decision_makers: Optional[Mapping[str, DecisionMaker]] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.engine = GameEngine(config, seed=seed)
        self.decision_makers: Dict[str, DecisionMaker] = {}
        for offset, player in enumerate(self.engine.state.players):
            bot_seed = None if seed is None else seed + offset + 1
            self.decision_makers[player.player_id] = BaselineBot(bot_seed)
        for player_id, maker in (decision_makers or {}).items():
            if self.engine.state.find_player(player_id) is None:
                raise PracticeSessionError("UNKNOWN_PLAYER", f"No seat for {player_id}")
            self.decision_makers[player_id] = maker

    def run(self, hands: int) -> SessionSummary:
        if hands <= 0:
            raise ValueError("Number of hands must be positive")

        summary = SessionSummary()
        while summary.hands_played < hands and self.engine.can_start_hand():
            summary.results.append(self.play_hand())
            summary.hands_played += 1

        summary.final_stacks = {player.player_id: player.stack for player in self.engine.state.players}
        LOGGER.info("Session finished after %s hands; leader %s", summary.hands_played, summary.chip_leader)
        return summary

    def play_hand(self) -> HandResult:
        engine = self.engine
        engine.deal_hand()
        for event in engine.hand_events():
            LOGGER.debug("event %s", event)

        while not engine.is_hand_complete():
            actor = engine.next_actor()
            if actor is None:
                raise PracticeSessionError("STALLED", f"Hand {engine.state.hand_number} has no actor")

            action = self.decision_makers[actor](engine.snapshot(viewer=actor), actor)
            result = engine.execute_action(actor, action)
            if not result.success:
                raise PracticeSessionError(result.code or "REJECTED", f"{actor}: {result.error}")
            for event in result.events:
                LOGGER.debug("event %s", event)

        hand_result = engine.last_result
        assert hand_result is not None
        for winner in hand_result.winners:
            LOGGER.info("Hand %s: %s wins %s", hand_result.hand_number, winner.player_id, winner.pot_share)
        return hand_result
