from __future__ import annotations

import logging
from typing import List, Optional

from .errors import ValidationError
from .models import Action, ActionType, ActionWindow, Player, ValidationResult
from .table import TableState

LOGGER = logging.getLogger("holdem.validator")


class ActionValidator:
    """Legal-action rules for the player whose turn it is.

    Amounts on BET and RAISE are the player's intended total for the round.
    """

    def get_available_actions(self, player: Player, state: TableState) -> List[ActionType]:
        if not player.can_act:
            return []

        to_call = self.amount_to_call(player, state)
        reach = player.current_bet + player.stack

        if to_call <= 0:
            if state.current_bet == 0:
                return [ActionType.CHECK, ActionType.BET, ActionType.ALL_IN]
            # Big blind option: nothing to call but a bet is live.
            actions = [ActionType.CHECK]
            if reach >= self.minimum_raise_to(state):
                actions.append(ActionType.RAISE)
            actions.append(ActionType.ALL_IN)
            return actions

        actions = [ActionType.FOLD]
        if player.stack >= to_call:
            actions.append(ActionType.CALL)
        if player.stack > to_call and reach >= self.minimum_raise_to(state):
            actions.append(ActionType.RAISE)
        actions.append(ActionType.ALL_IN)
        return actions

    def validate_action(self, player_id: str, action: Action, state: TableState) -> ValidationResult:
        try:
            self.check(player_id, action, state)
        except ValidationError as exc:
            LOGGER.debug("Rejected %s from %s: %s", action.action_type, player_id, exc.msg)
            return ValidationResult(valid=False, error=exc.msg, code=exc.code)
        return ValidationResult(valid=True)

    def check(self, player_id: str, action: Action, state: TableState) -> None:
        """Raise ValidationError describing the first rule ``action`` breaks."""
        if not state.hand_in_progress:
            raise ValidationError("NO_HAND_IN_PROGRESS", "No hand in progress")

        player = state.find_player(player_id)
        if player is None:
            raise ValidationError("UNKNOWN_PLAYER", f"Player not found: {player_id}")
        if player.has_folded:
            raise ValidationError("ALREADY_FOLDED", "Cannot act after folding")
        if player.is_all_in:
            raise ValidationError("ALREADY_ALL_IN", "Player is already all-in")
        if state.current_actor != player_id:
            raise ValidationError("NOT_YOUR_TURN", f"Not your turn; waiting on {state.current_actor}")

        available = self.get_available_actions(player, state)
        if action.action_type not in available:
            listed = ", ".join(item.value for item in available)
            raise ValidationError(
                "ACTION_NOT_AVAILABLE",
                f"{getattr(action.action_type, 'value', action.action_type)} not available. Available actions: {listed}",
            )

        if action.action_type == ActionType.BET:
            self._check_bet(action.amount, player, state)
        elif action.action_type == ActionType.RAISE:
            self._check_raise(action.amount, player, state)

    def _check_bet(self, amount: Optional[int], player: Player, state: TableState) -> None:
        if amount is None or amount <= 0:
            raise ValidationError("MISSING_AMOUNT", "Bet amount must be greater than 0")
        if amount > player.stack:
            raise ValidationError(
                "INSUFFICIENT_STACK",
                f"Insufficient chips. Cannot bet {amount}, you only have {player.stack}",
            )
        # A short stack may still bet everything it has.
        if amount < state.minimum_raise and amount != player.stack:
            raise ValidationError("BET_BELOW_MINIMUM", f"Bet must be at least {state.minimum_raise}")

    def _check_raise(self, amount: Optional[int], player: Player, state: TableState) -> None:
        if amount is None or amount <= 0:
            raise ValidationError("MISSING_AMOUNT", "Raise amount must be greater than 0")
        if amount - player.current_bet > player.stack:
            raise ValidationError(
                "INSUFFICIENT_STACK",
                f"Insufficient chips. Cannot raise to {amount}, you only have {player.stack} remaining",
            )
        minimum = self.minimum_raise_to(state)
        if amount < minimum:
            raise ValidationError(
                "RAISE_BELOW_MINIMUM",
                f"Raise must be at least {minimum} "
                f"(current bet {state.current_bet} + minimum raise {state.minimum_raise})",
            )

    # Helpers ----------------------------------------------------------

    @staticmethod
    def amount_to_call(player: Player, state: TableState) -> int:
        return max(state.current_bet - player.current_bet, 0)

    @staticmethod
    def minimum_raise_to(state: TableState) -> int:
        return state.current_bet + state.minimum_raise

    def action_window(self, player: Player, state: TableState) -> ActionWindow:
        legal = self.get_available_actions(player, state)
        to_call = self.amount_to_call(player, state)
        min_raise_to = None
        max_raise_to = None
        if ActionType.BET in legal:
            min_raise_to = min(state.minimum_raise, player.stack)
            max_raise_to = player.stack
        elif ActionType.RAISE in legal:
            min_raise_to = self.minimum_raise_to(state)
            max_raise_to = player.current_bet + player.stack
        return ActionWindow(
            legal=tuple(legal),
            call_amount=to_call if ActionType.CALL in legal else None,
            min_raise_to=min_raise_to,
            max_raise_to=max_raise_to,
        )
