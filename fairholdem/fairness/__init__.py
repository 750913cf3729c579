"""
fairholdem fairness - commit-reveal shuffling and deal verification.
"""

from fairholdem.fairness.errors import (
    FairnessError,
    CommitmentExistsError,
    UnknownGameError,
    InvalidSessionStateError,
    RandomnessNotFulfilledError,
    SessionEndedError,
    SaltMismatchError,
    InvalidPositionError,
    InvalidRevealError,
)
from fairholdem.fairness.shuffle import (
    keccak256,
    hash_salt,
    derive_final_seed,
    generate_salt,
    shuffle_deck,
    packed_deck_for_seed,
)
from fairholdem.fairness.verifier import VerificationResult, verify_deal, replay_session
from fairholdem.fairness.ledger import CommitmentLedger, GameSession, SessionStatus
from fairholdem.fairness.dealer import FairDealer, LocalRandomnessProvider

__all__ = [
    "FairnessError",
    "CommitmentExistsError",
    "UnknownGameError",
    "InvalidSessionStateError",
    "RandomnessNotFulfilledError",
    "SessionEndedError",
    "SaltMismatchError",
    "InvalidPositionError",
    "InvalidRevealError",
    "keccak256",
    "hash_salt",
    "derive_final_seed",
    "generate_salt",
    "shuffle_deck",
    "packed_deck_for_seed",
    "VerificationResult",
    "verify_deal",
    "replay_session",
    "CommitmentLedger",
    "GameSession",
    "SessionStatus",
    "FairDealer",
    "LocalRandomnessProvider",
]
