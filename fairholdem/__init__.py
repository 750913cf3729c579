"""
fairholdem - Provably fair Texas Hold'em

A Texas Hold'em engine whose deck order comes from a commit-reveal shuffle:
- Pure Python game core (cards, hand evaluation, betting state machine)
- keccak-256 deterministic shuffle, compatible with the on-chain dealer
- Commitment ledger and replay verifier for every dealt card

Usage:
    from fairholdem import PokerEngine, FairDealer, verify_deal
"""

__version__ = "0.1.0"

from fairholdem.core.card import Card, Deck
from fairholdem.core.player import Player
from fairholdem.core.game import PokerEngine
from fairholdem.core.hand import HandRank, evaluate_hand
from fairholdem.fairness.dealer import FairDealer, LocalRandomnessProvider
from fairholdem.fairness.ledger import CommitmentLedger
from fairholdem.fairness.verifier import verify_deal

__all__ = [
    "Card",
    "Deck",
    "Player",
    "PokerEngine",
    "HandRank",
    "evaluate_hand",
    "FairDealer",
    "LocalRandomnessProvider",
    "CommitmentLedger",
    "verify_deal",
    "__version__",
]
