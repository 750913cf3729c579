"""
Hand Evaluation for Texas Hold'em.

This module evaluates 5 or more cards and returns the best 5-card hand.
Every evaluation carries a single integer ``value``: the hand category sits
in the high-order digits and the kickers, in descending order, in the
lower-order digit pairs, so comparing two values alone decides a showdown.

Hand Rankings (best to worst):
1. Royal Flush: A♠ K♠ Q♠ J♠ T♠
2. Straight Flush: 5 consecutive cards of same suit
3. Four of a Kind: 4 cards of same rank
4. Full House: 3 of a kind + pair
5. Flush: 5 cards of same suit
6. Straight: 5 consecutive cards
7. Three of a Kind: 3 cards of same rank
8. Two Pair: 2 different pairs
9. One Pair: 2 cards of same rank
10. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel).
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
from itertools import combinations
from enum import IntEnum
from collections import Counter
from dataclasses import dataclass, field

from fairholdem.core.card import Card, Rank


class HandRank(IntEnum):
    """Hand categories, higher is better."""
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10


HAND_RANK_NAMES = {
    HandRank.ROYAL_FLUSH: "Royal Flush",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "One Pair",
    HandRank.HIGH_CARD: "High Card",
}

# value = category * CATEGORY_WEIGHT + kickers as base-100 digits (up to 5)
KICKER_BASE = 100
CATEGORY_WEIGHT = KICKER_BASE ** 5

HAND_SIZE = 5


class InsufficientCards(ValueError):
    """Raised when fewer than 5 cards are given to the evaluator."""


@dataclass
class HandEvaluation:
    """The best 5-card hand found among a set of cards."""
    rank: HandRank
    value: int
    description: str
    cards: List[Card] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "rank": self.rank.name,
            "value": self.value,
            "description": self.description,
            "cards": [c.to_int() for c in self.cards],
        }


def evaluate_hand(cards: Sequence[Card]) -> HandEvaluation:
    """
    Evaluate a poker hand of 5 or more cards.

    Args:
        cards: Hole cards plus community cards

    Returns:
        HandEvaluation for the best 5-card combination

    Raises:
        InsufficientCards: If fewer than 5 cards are provided
    """
    if len(cards) < HAND_SIZE:
        raise InsufficientCards(f"Need at least 5 cards to evaluate hand, got {len(cards)}")

    best: Optional[HandEvaluation] = None
    for combo in combinations(cards, HAND_SIZE):
        evaluation = _evaluate_5_cards(list(combo))
        if best is None or evaluation.value > best.value:
            best = evaluation
    return best


def _evaluate_5_cards(cards: List[Card]) -> HandEvaluation:
    """Evaluate exactly 5 cards."""
    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)
    ranks = [c.rank for c in sorted_cards]

    is_flush = len({c.suit for c in sorted_cards}) == 1
    is_straight, straight_high = _check_straight(ranks)

    rank_counts = Counter(ranks)
    counts = sorted(rank_counts.values(), reverse=True)

    if is_straight and is_flush:
        if straight_high == Rank.ACE:
            return _make(HandRank.ROYAL_FLUSH, [Rank.ACE], sorted_cards)
        return _make(HandRank.STRAIGHT_FLUSH, [straight_high], _order_straight(sorted_cards, straight_high))

    if counts == [4, 1]:
        quad_rank = _get_rank_with_count(rank_counts, 4)
        kicker = _get_rank_with_count(rank_counts, 1)
        return _make(HandRank.FOUR_OF_A_KIND, [quad_rank, kicker], _sort_by_count(sorted_cards, rank_counts))

    if counts == [3, 2]:
        trips_rank = _get_rank_with_count(rank_counts, 3)
        pair_rank = _get_rank_with_count(rank_counts, 2)
        return _make(HandRank.FULL_HOUSE, [trips_rank, pair_rank], _sort_by_count(sorted_cards, rank_counts))

    if is_flush:
        return _make(HandRank.FLUSH, ranks, sorted_cards)

    if is_straight:
        return _make(HandRank.STRAIGHT, [straight_high], _order_straight(sorted_cards, straight_high))

    if counts == [3, 1, 1]:
        trips_rank = _get_rank_with_count(rank_counts, 3)
        kickers = sorted((r for r, c in rank_counts.items() if c == 1), reverse=True)
        return _make(HandRank.THREE_OF_A_KIND, [trips_rank] + kickers, _sort_by_count(sorted_cards, rank_counts))

    if counts == [2, 2, 1]:
        pairs = sorted((r for r, c in rank_counts.items() if c == 2), reverse=True)
        kicker = _get_rank_with_count(rank_counts, 1)
        return _make(HandRank.TWO_PAIR, pairs + [kicker], _sort_by_count(sorted_cards, rank_counts))

    if counts == [2, 1, 1, 1]:
        pair_rank = _get_rank_with_count(rank_counts, 2)
        kickers = sorted((r for r, c in rank_counts.items() if c == 1), reverse=True)
        return _make(HandRank.ONE_PAIR, [pair_rank] + kickers, _sort_by_count(sorted_cards, rank_counts))

    return _make(HandRank.HIGH_CARD, ranks, sorted_cards)


def _check_straight(ranks: List[Rank]) -> Tuple[bool, Optional[Rank]]:
    """
    Check if ranks form a straight.

    Returns:
        Tuple of (is_straight, high_card_rank)
    """
    unique_ranks = sorted(set(ranks), reverse=True)
    if len(unique_ranks) != 5:
        return False, None

    if unique_ranks[0] - unique_ranks[4] == 4:
        return True, unique_ranks[0]

    # Ace plays low only here: A-5-4-3-2 is a 5-high straight
    if unique_ranks == [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]:
        return True, Rank.FIVE

    return False, None


def _get_rank_with_count(rank_counts: Counter, count: int) -> Rank:
    for rank, c in rank_counts.items():
        if c == count:
            return rank
    raise ValueError(f"No rank with count {count}")


def _sort_by_count(cards: List[Card], rank_counts: Counter) -> List[Card]:
    """Sort cards by count (descending), then by rank (descending)."""
    return sorted(cards, key=lambda c: (rank_counts[c.rank], c.rank), reverse=True)


def _order_straight(cards: List[Card], high: Rank) -> List[Card]:
    """Put the wheel's Ace last (5-4-3-2-A); other straights are already ordered."""
    if high != Rank.FIVE:
        return cards
    ace = [c for c in cards if c.rank == Rank.ACE]
    others = [c for c in cards if c.rank != Rank.ACE]
    return others + ace


def _calculate_value(hand_type: HandRank, kicker_ranks: Sequence[Rank]) -> int:
    """Fold a category and up to five kickers into one comparable integer."""
    value = int(hand_type) * CATEGORY_WEIGHT
    for i, rank in enumerate(kicker_ranks[:HAND_SIZE]):
        value += int(rank) * KICKER_BASE ** (HAND_SIZE - 1 - i)
    return value


def _make(hand_type: HandRank, kicker_ranks: Sequence[Rank], cards: List[Card]) -> HandEvaluation:
    return HandEvaluation(
        rank=hand_type,
        value=_calculate_value(hand_type, kicker_ranks),
        description=_describe(hand_type, kicker_ranks),
        cards=cards,
    )


def _describe(hand_type: HandRank, kickers: Sequence[Rank]) -> str:
    """Human-readable description of the hand."""
    if hand_type == HandRank.ROYAL_FLUSH:
        return "Royal Flush"
    elif hand_type == HandRank.STRAIGHT_FLUSH:
        return f"Straight Flush, {_rank_name(kickers[0])} high"
    elif hand_type == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(kickers[0])}"
    elif hand_type == HandRank.FULL_HOUSE:
        return f"Full House, {_plural(kickers[0])} full of {_plural(kickers[1])}"
    elif hand_type == HandRank.FLUSH:
        return f"Flush, {_rank_name(kickers[0])} high"
    elif hand_type == HandRank.STRAIGHT:
        if kickers[0] == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(kickers[0])} high"
    elif hand_type == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(kickers[0])}"
    elif hand_type == HandRank.TWO_PAIR:
        return f"Two Pair, {_plural(kickers[0])} and {_plural(kickers[1])}"
    elif hand_type == HandRank.ONE_PAIR:
        return f"Pair of {_plural(kickers[0])}"
    return f"High Card, {_rank_name(kickers[0])}"


def compare_hands(cards1: Sequence[Card], cards2: Sequence[Card]) -> int:
    """
    Compare two hands.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    value1 = evaluate_hand(cards1).value
    value2 = evaluate_hand(cards2).value
    return (value1 > value2) - (value1 < value2)


_RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}


def _rank_name(rank: Rank) -> str:
    return _RANK_NAMES[Rank(rank)]


def _plural(rank: Rank) -> str:
    name = _rank_name(rank)
    return f"{name}es" if name == "Six" else f"{name}s"
