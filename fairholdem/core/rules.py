"""
Texas Hold'em Rules and Constants.

Table defaults and the small rule helpers the betting engine shares:

1. Heads-up (2 players): Dealer posts small blind, non-dealer posts big blind.
   Preflop: Dealer acts first. Postflop: Non-dealer acts first.

2. Minimum raise: the big blind when nobody has bet this street, otherwise
   the size of the last raise. A wager below the minimum from a player who
   could afford the minimum is played as a call.

3. Side pots: when players are all-in for different amounts, separate pots
   are created for each all-in level.
"""

from enum import Enum
from typing import List, Sequence, Tuple


class GameStage(Enum):
    """Streets of a Texas Hold'em hand."""
    PREFLOP = "Pre-Flop"
    FLOP = "Flop"
    TURN = "Turn"
    RIVER = "River"
    SHOWDOWN = "Showdown"


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    BET = "bet"
    RAISE = "raise"
    ALL_IN = "allin"


# Default game settings
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
DEFAULT_BUY_IN = 1000
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1

STREET_ORDER = [
    GameStage.PREFLOP,
    GameStage.FLOP,
    GameStage.TURN,
    GameStage.RIVER,
    GameStage.SHOWDOWN,
]

CARDS_FOR_STREET = {
    GameStage.FLOP: FLOP_CARDS,
    GameStage.TURN: TURN_CARDS,
    GameStage.RIVER: RIVER_CARDS,
}


def next_stage(stage: GameStage) -> GameStage:
    """The street after ``stage``; Showdown is terminal."""
    if stage == GameStage.SHOWDOWN:
        return stage
    return STREET_ORDER[STREET_ORDER.index(stage) + 1]


def get_blind_positions(eligible_seats: Sequence[int], dealer_position: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind seats.

    In heads-up play the dealer posts the small blind; otherwise the blinds
    are the next two eligible seats clockwise of the dealer.

    Args:
        eligible_seats: Seat indices dealt into the hand, ascending
        dealer_position: Seat of the dealer (must be eligible)

    Returns:
        Tuple of (small_blind_seat, big_blind_seat)
    """
    if len(eligible_seats) < MIN_PLAYERS:
        raise ValueError("Need at least 2 players")

    seats: List[int] = list(eligible_seats)
    dealer_idx = seats.index(dealer_position)
    n = len(seats)

    if n == 2:
        return seats[dealer_idx], seats[(dealer_idx + 1) % n]
    return seats[(dealer_idx + 1) % n], seats[(dealer_idx + 2) % n]


def calculate_min_raise(current_bet: int, last_raise_amount: int, big_blind: int) -> int:
    """
    Minimum wager that counts as a bet or raise.

    Args:
        current_bet: Highest bet on this street
        last_raise_amount: Size of the last raise on this street
        big_blind: Big blind amount

    Returns:
        The big blind when no bet exists yet, else the last raise size
    """
    return big_blind if current_bet == 0 else last_raise_amount
