import pytest

from holdem.cards import parse_cards
from holdem.evaluator import (
    compare_hands,
    describe_rank,
    determine_winners,
    evaluate_best,
    evaluate_hand,
    rank_showdown,
)
from holdem.models import HandCategory, Player


def _player(seat: int, hole: list, folded: bool = False) -> Player:
    player = Player(player_id=f"player_{seat}", name=f"Player {seat}", seat=seat, stack=1_000)
    player.hole_cards = parse_cards(hole)
    player.has_folded = folded
    return player


def test_evaluate_best_identifies_all_hand_categories():
    cases = [
        (HandCategory.ROYAL_FLUSH, ["Ah", "Kh", "Qh", "Jh", "Th"]),
        (HandCategory.STRAIGHT_FLUSH, ["9s", "8s", "7s", "6s", "5s"]),
        (HandCategory.FOUR_OF_A_KIND, ["As", "Ah", "Ad", "Ac", "Kd"]),
        (HandCategory.FULL_HOUSE, ["Qc", "Qd", "Qs", "9h", "9s"]),
        (HandCategory.FLUSH, ["Ah", "Jh", "9h", "6h", "2h"]),
        (HandCategory.STRAIGHT, ["9h", "8d", "7c", "6s", "5h"]),
        (HandCategory.THREE_OF_A_KIND, ["8h", "8d", "8s", "Qd", "Js"]),
        (HandCategory.TWO_PAIR, ["7h", "7d", "4s", "4c", "As"]),
        (HandCategory.PAIR, ["6h", "6s", "Qh", "8d", "4c"]),
        (HandCategory.HIGH_CARD, ["As", "Kd", "Jh", "9c", "4d"]),
    ]

    for expected, labels in cases:
        rank = evaluate_best(parse_cards(labels))
        assert rank.category == expected, f"labels={labels}"
        assert describe_rank(rank) == expected.name.lower()


def test_evaluate_hand_needs_five_cards():
    with pytest.raises(ValueError, match="at least 5"):
        evaluate_hand(parse_cards(["Ah", "Kd"]), parse_cards(["2c", "3s"]))


def test_ace_high_flush_keeps_top_five_suited_ranks():
    rank = evaluate_hand(parse_cards(["Ah", "Kh"]), parse_cards(["Qh", "Jh", "8h", "9d", "5c"]))
    assert rank.category == HandCategory.FLUSH
    assert rank.primary_value == 14
    assert rank.kickers == (13, 12, 11, 8)
    assert len(rank.cards_used) == 5


def test_broadway_in_hearts_is_a_royal_flush():
    rank = evaluate_hand(parse_cards(["Ah", "Kh"]), parse_cards(["Qh", "Jh", "Th", "9d", "5c"]))
    assert rank.category == HandCategory.ROYAL_FLUSH


def test_wheel_is_five_high_and_loses_to_six_high_straight():
    wheel = evaluate_best(parse_cards(["Ah", "2d", "3c", "4s", "5h", "9d", "Kd"]))
    six_high = evaluate_best(parse_cards(["2d", "3c", "4s", "5h", "6c", "Jd", "Kd"]))
    assert wheel.category == HandCategory.STRAIGHT
    assert wheel.primary_value == 5
    assert six_high.primary_value == 6
    assert compare_hands(six_high, wheel) > 0


def test_steel_wheel_is_a_five_high_straight_flush():
    rank = evaluate_best(parse_cards(["Ac", "2c", "3c", "4c", "5c", "Kd", "Qd"]))
    assert rank.category == HandCategory.STRAIGHT_FLUSH
    assert rank.primary_value == 5


def test_two_sets_of_trips_make_a_full_house():
    rank = evaluate_best(parse_cards(["7h", "7d", "7c", "5s", "5h", "5d", "2c"]))
    assert rank.category == HandCategory.FULL_HOUSE
    assert rank.primary_value == 7
    assert rank.kickers == (5,)


def test_three_pairs_use_the_two_highest_and_best_kicker():
    rank = evaluate_best(parse_cards(["Kh", "Kd", "Qc", "Qs", "3h", "3d", "2c"]))
    assert rank.category == HandCategory.TWO_PAIR
    assert rank.primary_value == 13
    assert rank.kickers == (12, 3)


def test_kickers_break_ties_between_equal_pairs():
    hand_a = evaluate_best(parse_cards(["Ah", "Ad", "Kc", "Qs", "9h", "2d", "3c"]))
    hand_b = evaluate_best(parse_cards(["Ah", "Ad", "Qc", "Js", "8h", "2d", "3c"]))
    assert compare_hands(hand_a, hand_b) > 0
    assert compare_hands(hand_b, hand_a) < 0
    assert compare_hands(hand_a, hand_a) == 0


def test_board_straight_flush_ties_every_live_player():
    community = parse_cards(["5h", "6h", "7h", "8h", "9h"])
    players = [
        _player(0, ["2c", "3d"]),
        _player(1, ["Ac", "Ad"]),
        _player(2, ["Kc", "Ks"]),
        _player(3, ["Qs", "Js"], folded=True),
    ]
    assert determine_winners(players, community) == ["player_0", "player_1", "player_2"]


def test_determine_winners_handles_empty_and_lone_survivor():
    community = parse_cards(["2c", "7d", "9h", "Js", "Kd"])
    assert determine_winners([_player(0, ["Ah", "Ac"], folded=True)], community) == []

    # A lone survivor wins without a full board being evaluated.
    survivor = _player(1, ["3c", "4d"])
    assert determine_winners([survivor, _player(2, ["Ah", "Ac"], folded=True)], []) == ["player_1"]


def test_rank_showdown_is_best_first_and_stable_on_ties():
    community = parse_cards(["2c", "7d", "9h", "Js", "Kd"])
    players = [
        _player(3, ["4h", "5h"]),
        _player(4, ["Ac", "Ad"]),
        _player(5, ["4c", "5c"]),
    ]
    ranked = rank_showdown(players, community)
    assert [player_id for player_id, _ in ranked] == ["player_4", "player_3", "player_5"]


def test_full_house_beats_an_ace_high_flush():
    boat = evaluate_hand(parse_cards(["As", "Ah"]), parse_cards(["Kd", "Kc", "Kh", "2d", "3c"]))
    flush = evaluate_hand(parse_cards(["Ah", "Kh"]), parse_cards(["Qh", "Jh", "8h", "9d", "5c"]))
    assert boat.category == HandCategory.FULL_HOUSE
    assert (boat.primary_value, boat.kickers) == (13, (14,))
    assert compare_hands(boat, flush) > 0
