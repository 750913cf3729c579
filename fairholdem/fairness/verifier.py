"""
Replay verification of a dealt hand.

Given the public commitment, the delivered random value and the revealed
salt, anyone can rebuild the deck and check that every dealt card really sat
at the claimed position. Nothing here mutates state, so verification can be
repeated by any number of parties.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence
import logging

from fairholdem.core.card import DECK_SIZE
from fairholdem.fairness.errors import (
    InvalidPositionError,
    InvalidRevealError,
    InvalidSessionStateError,
    SaltMismatchError,
)
from fairholdem.fairness.shuffle import (
    Bytes32Like,
    derive_final_seed,
    hash_salt,
    shuffle_deck,
    to_bytes32,
    to_hex,
)

if TYPE_CHECKING:
    from fairholdem.fairness.ledger import GameSession


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of replaying a deal.

    Attributes:
        valid: Every claimed card matched the replayed deck
        final_seed: Seed the deck was rebuilt from
        mismatch_index: Index of the first bad (card, position) pair, if any
    """
    valid: bool
    final_seed: bytes
    mismatch_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "final_seed": to_hex(self.final_seed),
            "mismatch_index": self.mismatch_index,
        }


def check_reveal_shape(dealt_cards: Sequence[int], card_positions: Sequence[int]) -> None:
    """
    Reject malformed reveal payloads before any replay.

    Raises:
        InvalidRevealError: Lists of different lengths or a card outside 0-51
        InvalidPositionError: A position outside the deck
    """
    if len(dealt_cards) != len(card_positions):
        raise InvalidRevealError(
            f"{len(dealt_cards)} dealt cards but {len(card_positions)} positions"
        )
    for card in dealt_cards:
        if not 0 <= card < DECK_SIZE:
            raise InvalidRevealError(f"Card index out of range: {card}")
    for position in card_positions:
        if not 0 <= position < DECK_SIZE:
            raise InvalidPositionError(f"Deck position out of range: {position}")


def check_salt(salt_hash: Bytes32Like, salt: Bytes32Like) -> None:
    """
    Raises:
        SaltMismatchError: If ``salt`` does not hash to ``salt_hash``
    """
    if hash_salt(salt) != to_bytes32(salt_hash):
        raise SaltMismatchError("Revealed salt does not match the commitment")


def verify_deal(
    salt_hash: Bytes32Like,
    random_value: Bytes32Like,
    salt: Bytes32Like,
    dealt_cards: Sequence[int],
    card_positions: Sequence[int],
) -> VerificationResult:
    """
    Check claimed (card, position) pairs against the replayed shuffle.

    Args:
        salt_hash: Commitment published before the randomness was known
        random_value: Value delivered by the randomness service
        salt: The revealed salt
        dealt_cards: Card indices the host says it dealt
        card_positions: Position of each of those cards in the shuffled deck

    Returns:
        VerificationResult; stops at the first mismatching pair

    Raises:
        SaltMismatchError: If the salt does not match the commitment
        InvalidPositionError: If a position is 52 or more
        InvalidRevealError: If the payload is malformed
    """
    check_salt(salt_hash, salt)
    check_reveal_shape(dealt_cards, card_positions)

    final_seed = derive_final_seed(random_value, salt)
    deck = shuffle_deck(final_seed)

    for index, (card, position) in enumerate(zip(dealt_cards, card_positions)):
        if deck[position] != card:
            logger.warning(
                f"Deal mismatch at pair {index}: position {position} holds "
                f"{deck[position]}, claimed {card}"
            )
            return VerificationResult(False, final_seed, index)

    return VerificationResult(True, final_seed)


def replay_session(
    session: GameSession,
    dealt_cards: Sequence[int],
    card_positions: Sequence[int],
) -> VerificationResult:
    """
    Re-check a revealed session from its public fields.

    Raises:
        InvalidSessionStateError: If the session has not been revealed yet
    """
    if session.random_value is None or session.revealed_salt is None:
        raise InvalidSessionStateError(f"Game {session.game_id} has not been revealed")
    return verify_deal(
        session.salt_hash,
        session.random_value,
        session.revealed_salt,
        list(dealt_cards),
        list(card_positions),
    )

