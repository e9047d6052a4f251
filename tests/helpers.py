from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from holdem.cards import Deck, parse_cards
from holdem.game import GameEngine
from holdem.models import Action, ActionResult, ActionType, TableConfig


class StackedDeck(Deck):
    """Deck that deals a fixed card order; shuffling only rewinds the cursor."""

    def __init__(self, labels: Sequence[str]) -> None:
        self._top = parse_cards(labels)
        super().__init__(seed=0)

    def reset(self) -> None:
        rest = [card for card in Deck(seed=0).cards if card not in self._top]
        self._cards = list(self._top) + rest
        self._dealt = 0

    def shuffle(self) -> None:
        self._dealt = 0


def stack_order(holes: Sequence[Sequence[str]], board: Sequence[str] = ()) -> List[str]:
    """Card order for ``StackedDeck`` given hole cards in deal order (left of the button first)."""
    order = [hole[0] for hole in holes] + [hole[1] for hole in holes]
    return order + list(board)


def create_engine(
    *,
    seats: int = 4,
    starting_stack: int = 1_000,
    sb: int = 10,
    bb: int = 20,
    seed: Optional[int] = 42,
    deck: Optional[Deck] = None,
) -> GameEngine:
    """Instantiate a game engine with a populated table."""
    config = TableConfig(seats=seats, starting_stack=starting_stack, sb=sb, bb=bb)
    return GameEngine(config, deck=deck, seed=seed)


def rigged_engine(
    holes: Sequence[Sequence[str]],
    board: Sequence[str],
    *,
    stacks: Optional[Sequence[int]] = None,
    sb: int = 5,
    bb: int = 10,
) -> GameEngine:
    """Engine with one seat per hole pair and a stacked deck. Hole pairs are given by seat."""
    seats = len(holes)
    engine = create_engine(seats=seats, starting_stack=1_000, sb=sb, bb=bb, deck=None)
    if stacks is not None:
        for player, stack in zip(engine.state.players, stacks):
            player.stack = stack
    # Hand 1 puts the button on seat 0, so seat 1 is dealt first.
    dealt = [holes[(1 + idx) % seats] for idx in range(seats)]
    engine.deck = StackedDeck(stack_order(dealt, board))
    return engine


def act(engine: GameEngine, player_id: str, action_type: ActionType, amount: Optional[int] = None) -> ActionResult:
    result = engine.execute_action(player_id, Action(action_type, amount))
    assert result.success, result.error
    return result


def perform_actions(engine: GameEngine, actions: Iterable[Tuple[str, ActionType, Optional[int]]]) -> None:
    """Apply a scripted sequence of actions (player id, action, amount)."""
    for player_id, action_type, amount in actions:
        act(engine, player_id, action_type, amount)


def passive_action(engine: GameEngine, player_id: str) -> Action:
    legal = engine.action_window(player_id).legal
    if ActionType.CHECK in legal:
        return Action(ActionType.CHECK)
    if ActionType.CALL in legal:
        return Action(ActionType.CALL)
    return Action(ActionType.FOLD)


def auto_complete_hand(engine: GameEngine) -> None:
    """Advance the current hand with straightforward actions until completion."""
    while not engine.is_hand_complete():
        actor = engine.next_actor()
        if actor is None:
            break
        result = engine.execute_action(actor, passive_action(engine, actor))
        assert result.success, result.error
