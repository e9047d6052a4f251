import pytest

from holdem.contracts import Advice, DecisionPoint
from holdem.errors import DeckExhausted, InvariantViolation, PokerError, ValidationError
from holdem.models import Action, ActionType, BettingRound
from holdem.validator import ActionValidator

from .helpers import act, create_engine


def test_error_taxonomy_shares_one_root():
    for exc_type in (ValidationError, DeckExhausted, InvariantViolation):
        assert issubclass(exc_type, PokerError)
    err = ValidationError("NOT_YOUR_TURN", "wait")
    assert err.code == "NOT_YOUR_TURN"
    assert str(err) == "wait"


def test_validator_raises_internally_and_reports_a_result():
    engine = create_engine()
    engine.deal_hand()
    validator = ActionValidator()
    with pytest.raises(ValidationError) as info:
        validator.check("player_0", Action(ActionType.FOLD), engine.state)
    assert info.value.code == "NOT_YOUR_TURN"

    verdict = validator.validate_action("player_0", Action(ActionType.FOLD), engine.state)
    assert not verdict.valid
    assert verdict.code == "NOT_YOUR_TURN"
    assert "player_3" in verdict.error


def test_unknown_action_type_is_not_available():
    engine = create_engine()
    engine.deal_hand()
    result = engine.execute_action("player_3", Action("SHOUT"))  # type: ignore[arg-type]
    assert not result.success
    assert result.code == "ACTION_NOT_AVAILABLE"
    assert "Available actions: FOLD, CALL, RAISE, ALL_IN" in result.error


def test_chip_leak_is_detected_after_an_action():
    engine = create_engine()
    engine.deal_hand()
    engine.state.player("player_0").stack += 1
    with pytest.raises(InvariantViolation, match="Chip total"):
        engine.execute_action("player_3", Action(ActionType.CALL))


def test_exhausted_deck_fails_the_deal():
    engine = create_engine(seats=2)
    engine.deck.deal_multiple(50)
    engine.deck.reset = lambda: None
    engine.deck.shuffle = lambda: None
    with pytest.raises(DeckExhausted):
        engine.deal_hand()


def test_action_window_and_decision_point_need_a_hand():
    engine = create_engine()
    with pytest.raises(RuntimeError, match="Hand not in progress"):
        engine.action_window("player_0")
    with pytest.raises(RuntimeError, match="Hand not in progress"):
        engine.decision_point("player_0")
    assert engine.next_actor() is None
    assert not engine.is_hand_complete()


def test_actions_after_the_hand_are_rejected():
    engine = create_engine(seats=2)
    engine.deal_hand()
    act(engine, "player_0", ActionType.FOLD)
    result = engine.execute_action("player_1", Action(ActionType.CHECK))
    assert result.code == "NO_HAND_IN_PROGRESS"
    assert engine.can_start_hand()


def test_advice_frequencies_must_sum_to_one():
    Advice(ActionType.CALL, {ActionType.CALL: 0.7, ActionType.FOLD: 0.3}, "priced in")
    with pytest.raises(ValueError, match="sum to 1.0"):
        Advice(ActionType.CALL, {ActionType.CALL: 0.7, ActionType.FOLD: 0.2})
    with pytest.raises(ValueError, match="negative"):
        Advice(ActionType.CALL, {ActionType.CALL: 1.5, ActionType.FOLD: -0.5})


def test_advisor_protocol_consumes_decision_points():
    class AlwaysCall:
        def advise(self, point: DecisionPoint) -> Advice:
            action = ActionType.CALL if ActionType.CALL in point.available_actions else ActionType.CHECK
            return Advice(action, {action: 1.0}, f"{point.amount_to_call} to call")

    engine = create_engine()
    engine.deal_hand()
    advice = AlwaysCall().advise(engine.decision_point("player_3"))
    assert advice.recommended == ActionType.CALL
    assert advice.reasoning == "20 to call"
    assert engine.decision_point("player_3").betting_round == BettingRound.PREFLOP
