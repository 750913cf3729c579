"""
Pytest configuration and shared fixtures for fairholdem tests.
"""

import pytest
from fairholdem.core.card import Card, Rank, Suit, DECK_SIZE
from fairholdem.core.game import PokerEngine
from fairholdem.fairness.dealer import FairDealer, LocalRandomnessProvider
from fairholdem.fairness.ledger import CommitmentLedger


def _card_index(card) -> int:
    return card if isinstance(card, int) else Card.from_string(card).to_int()


def build_deck(hands, board=()):
    """
    Packed deck that deals ``hands`` (one pair per dealt-in seat, in seat
    order) round-robin and then ``board`` around the burn cards.
    """
    n = len(hands)
    order = [None] * DECK_SIZE
    for seat, (first, second) in enumerate(hands):
        order[seat] = _card_index(first)
        order[n + seat] = _card_index(second)

    board_positions = [2 * n + 1, 2 * n + 2, 2 * n + 3, 2 * n + 5, 2 * n + 7]
    for position, card in zip(board_positions, board):
        order[position] = _card_index(card)

    unused = iter(i for i in range(DECK_SIZE) if i not in order)
    return bytes(card if card is not None else next(unused) for card in order)


@pytest.fixture
def deck_builder():
    """Build stacked packed decks for deterministic hands."""
    return build_deck


@pytest.fixture
def heads_up():
    """A 2-player (heads-up) table, 1000 chips each, blinds 10/20."""
    return PokerEngine(["alice", "bob"], starting_chips=1000, small_blind=10, big_blind=20)


@pytest.fixture
def three_handed():
    """A 3-player table, 1000 chips each, blinds 10/20."""
    return PokerEngine(["alice", "bob", "carol"], starting_chips=1000, small_blind=10, big_blind=20)


@pytest.fixture
def six_handed():
    """A 6-player table."""
    return PokerEngine([f"p{i}" for i in range(6)], starting_chips=1000, small_blind=10, big_blind=20)


@pytest.fixture
def ledger():
    return CommitmentLedger()


@pytest.fixture
def provider(ledger):
    """In-process randomness service wired to the ledger."""
    return LocalRandomnessProvider(ledger.fulfill_randomness)


@pytest.fixture
def dealer(ledger):
    return FairDealer(ledger)


@pytest.fixture
def salt():
    return bytes([0x11] * 32)


@pytest.fixture
def random_value():
    return bytes(range(32))


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def king_high_straight_flush():
    """9♥ T♥ J♥ Q♥ K♥"""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.TEN, Suit.HEARTS),
        Card(Rank.JACK, Suit.HEARTS),
        Card(Rank.QUEEN, Suit.HEARTS),
        Card(Rank.KING, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.DIAMONDS),
        Card(Rank.TWO, Suit.CLUBS),
        Card(Rank.THREE, Suit.HEARTS),
        Card(Rank.FOUR, Suit.SPADES),
        Card(Rank.FIVE, Suit.DIAMONDS),
    ]
