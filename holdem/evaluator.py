from __future__ import annotations

import itertools
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from .cards import Card
from .models import HandCategory, HandRank, Player

WHEEL = (14, 5, 4, 3, 2)


def evaluate_hand(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> HandRank:
    """Best 5-card hand available from hole cards plus board."""
    cards = list(hole_cards) + list(community_cards)
    if len(cards) < 5:
        raise ValueError("Need at least 5 cards to evaluate a hand")
    return evaluate_best(cards)


def evaluate_best(cards: Sequence[Card]) -> HandRank:
    best: Optional[HandRank] = None
    for combo in itertools.combinations(cards, 5):
        rank = _evaluate_five(combo)
        if best is None or rank.key > best.key:
            best = rank
    if best is None:
        raise ValueError("Need at least 5 cards to evaluate a hand")
    return best


def _evaluate_five(cards: Tuple[Card, ...]) -> HandRank:
    used = tuple(sorted(cards, key=lambda card: card.rank, reverse=True))
    ranks = [card.rank for card in used]
    is_flush = len({card.suit for card in used}) == 1
    straight_high = _straight_high(ranks)

    # (count, rank) pairs, biggest group first, then by rank
    groups = sorted(((count, rank) for rank, count in Counter(ranks).items()), reverse=True)
    counts = [count for count, _ in groups]
    grouped = [rank for _, rank in groups]

    if straight_high and is_flush:
        if straight_high == 14:
            return HandRank(HandCategory.ROYAL_FLUSH, 14, (), used)
        return HandRank(HandCategory.STRAIGHT_FLUSH, straight_high, (), used)
    if counts[0] == 4:
        return HandRank(HandCategory.FOUR_OF_A_KIND, grouped[0], (grouped[1],), used)
    if counts[0] == 3 and counts[1] == 2:
        return HandRank(HandCategory.FULL_HOUSE, grouped[0], (grouped[1],), used)
    if is_flush:
        return HandRank(HandCategory.FLUSH, ranks[0], tuple(ranks[1:]), used)
    if straight_high:
        return HandRank(HandCategory.STRAIGHT, straight_high, (), used)
    if counts[0] == 3:
        return HandRank(HandCategory.THREE_OF_A_KIND, grouped[0], tuple(grouped[1:]), used)
    if counts[0] == 2 and counts[1] == 2:
        return HandRank(HandCategory.TWO_PAIR, grouped[0], (grouped[1], grouped[2]), used)
    if counts[0] == 2:
        return HandRank(HandCategory.PAIR, grouped[0], tuple(grouped[1:]), used)
    return HandRank(HandCategory.HIGH_CARD, ranks[0], tuple(ranks[1:]), used)


def _straight_high(ranks: List[int]) -> Optional[int]:
    """High card of a five-card straight; the wheel plays as 5-high."""
    distinct = sorted(set(ranks), reverse=True)
    if len(distinct) != 5:
        return None
    if distinct[0] - distinct[4] == 4:
        return distinct[0]
    if tuple(distinct) == WHEEL:
        return 5
    return None


def compare_hands(a: HandRank, b: HandRank) -> int:
    """Positive if ``a`` wins, negative if ``b`` wins, 0 on an exact tie."""
    if a.category != b.category:
        return int(a.category) - int(b.category)
    if a.primary_value != b.primary_value:
        return a.primary_value - b.primary_value
    for idx in range(max(len(a.kickers), len(b.kickers))):
        left = a.kickers[idx] if idx < len(a.kickers) else 0
        right = b.kickers[idx] if idx < len(b.kickers) else 0
        if left != right:
            return left - right
    return 0


def rank_showdown(players: Sequence[Player], community_cards: Sequence[Card]) -> List[Tuple[str, HandRank]]:
    """Evaluate every live player, best hand first.

    The sort is stable, so tied hands keep the order the players were given in.
    """
    ranked = [
        (player.player_id, evaluate_hand(player.hole_cards, community_cards))
        for player in players
        if not player.has_folded
    ]
    ranked.sort(key=lambda entry: entry[1].key, reverse=True)
    return ranked


def determine_winners(players: Sequence[Player], community_cards: Sequence[Card]) -> List[str]:
    live = [player for player in players if not player.has_folded]
    if not live:
        return []
    if len(live) == 1:
        return [live[0].player_id]

    ranked = rank_showdown(live, community_cards)
    best = ranked[0][1]
    return [player_id for player_id, rank in ranked if compare_hands(rank, best) == 0]


def describe_rank(rank: HandRank) -> str:
    if rank.category == HandCategory.ROYAL_FLUSH:
        return "royal_flush"
    if rank.category == HandCategory.STRAIGHT_FLUSH:
        return "straight_flush"
    if rank.category == HandCategory.FOUR_OF_A_KIND:
        return "four_of_a_kind"
    if rank.category == HandCategory.FULL_HOUSE:
        return "full_house"
    if rank.category == HandCategory.FLUSH:
        return "flush"
    if rank.category == HandCategory.STRAIGHT:
        return "straight"
    if rank.category == HandCategory.THREE_OF_A_KIND:
        return "three_of_a_kind"
    if rank.category == HandCategory.TWO_PAIR:
        return "two_pair"
    if rank.category == HandCategory.PAIR:
        return "pair"
    if rank.category == HandCategory.HIGH_CARD:
        return "high_card"
    raise ValueError(f"Unknown hand category {rank.category}")
