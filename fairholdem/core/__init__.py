"""
fairholdem core - Pure Python Texas Hold'em game logic.

This module contains the cards, hand evaluator and betting engine, without
any knowledge of how the deck order was produced.
"""

from fairholdem.core.card import Card, Deck, Rank, Suit, pack_deck, unpack_deck
from fairholdem.core.hand import HandEvaluation, HandRank, InsufficientCards, evaluate_hand
from fairholdem.core.rules import ActionType, GameStage
from fairholdem.core.player import Player
from fairholdem.core.game import ActionResult, GameState, PokerEngine, PotAward, SidePot

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "pack_deck",
    "unpack_deck",
    "HandEvaluation",
    "HandRank",
    "InsufficientCards",
    "evaluate_hand",
    "ActionType",
    "GameStage",
    "Player",
    "ActionResult",
    "GameState",
    "PokerEngine",
    "PotAward",
    "SidePot",
]
