import logging
import random
import sys
from dataclasses import replace

import pytest

from holdem.models import Action, ActionType, TableConfig
from practice import __main__ as practice_main
from practice.bots import BaselineBot, baseline_strategy
from practice.session import PracticeSession, PracticeSessionError

from .helpers import create_engine


def test_baseline_strategy_only_picks_legal_actions():
    rng = random.Random(5)
    for seed in range(40):
        engine = create_engine(seed=seed)
        engine.deal_hand()
        while not engine.is_hand_complete():
            actor = engine.next_actor()
            snapshot = engine.snapshot(viewer=actor)
            action = baseline_strategy(snapshot, actor, rng=rng)
            assert action.action_type in snapshot.legal_actions
            result = engine.execute_action(actor, action)
            assert result.success, result.error


def test_baseline_strategy_needs_a_turn():
    engine = create_engine()
    engine.deal_hand()
    with pytest.raises(ValueError, match="no legal actions"):
        baseline_strategy(replace(engine.snapshot(), legal_actions=()), "player_3")


def test_session_plays_hands_and_conserves_chips():
    session = PracticeSession(TableConfig(seats=6, starting_stack=500, sb=5, bb=10), seed=21)
    summary = session.run(hands=60)

    assert 1 <= summary.hands_played <= 60
    assert len(summary.results) == summary.hands_played
    assert sum(summary.final_stacks.values()) == 3_000
    assert summary.chip_leader in summary.final_stacks


def test_session_is_reproducible_with_a_seed():
    config = TableConfig(seats=4, starting_stack=300, sb=5, bb=10)
    first = PracticeSession(config, seed=3).run(hands=25)
    second = PracticeSession(config, seed=3).run(hands=25)
    assert first.final_stacks == second.final_stacks


def test_session_accepts_custom_decision_makers():
    def always_fold(snapshot, player_id):
        legal = snapshot.legal_actions
        return Action(ActionType.FOLD if ActionType.FOLD in legal else ActionType.CHECK)

    session = PracticeSession(TableConfig(seats=3), decision_makers={"player_0": always_fold}, seed=1)
    summary = session.run(hands=1)
    assert summary.hands_played == 1
    assert summary.final_stacks["player_0"] == 1_000

    with pytest.raises(PracticeSessionError) as info:
        PracticeSession(TableConfig(seats=3), decision_makers={"player_7": always_fold})
    assert info.value.code == "UNKNOWN_PLAYER"


def test_session_reports_rejected_actions():
    def bad_raise(snapshot, player_id):
        return Action(ActionType.RAISE, 1)

    session = PracticeSession(TableConfig(seats=2), decision_makers={"player_0": bad_raise}, seed=2)
    with pytest.raises(PracticeSessionError) as info:
        session.run(hands=1)
    assert info.value.code == "RAISE_BELOW_MINIMUM"


def test_seeded_bot_is_deterministic():
    engine = create_engine(seed=11)
    engine.deal_hand()
    snapshot = engine.snapshot(viewer="player_3")
    assert BaselineBot(4)(snapshot, "player_3") == BaselineBot(4)(snapshot, "player_3")


def test_cli_runs_a_short_session(monkeypatch, capsys):
    monkeypatch.setattr(
        sys,
        "argv",
        ["practice", "--players", "3", "--hands", "5", "--seed", "7", "--starting-stack", "200"],
    )
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)
    practice_main.main()

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 3
    assert sum(int(line.split()[-1]) for line in lines) == 600
