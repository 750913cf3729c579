"""
Pydantic schemas for data crossing the package boundary.

Game snapshots handed to a persistence or replication layer, and the reveal
and randomness payloads the host receives from outside, are validated here
before they reach the engine or the ledger.
"""

from typing import Annotated, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator

from fairholdem.core.rules import GameStage


CardIndex = Annotated[int, Field(ge=0, lt=52)]
Uint8 = Annotated[int, Field(ge=0, le=255)]


def _check_hex32(value: str) -> str:
    digits = value[2:] if value.startswith(("0x", "0X")) else value
    if len(digits) != 64:
        raise ValueError("expected 32 bytes of hex")
    int(digits, 16)
    return "0x" + digits.lower()


# ============= Game Snapshots =============

class PlayerSnapshot(BaseModel):
    """One seat as stored in a snapshot."""
    id: int = Field(ge=0)
    name: str
    chips: int = Field(ge=0)
    hole_cards: List[CardIndex] = Field(default_factory=list, max_length=2)
    is_folded: bool = False
    is_all_in: bool = False
    current_bet: int = Field(ge=0, default=0)
    total_bet_in_round: int = Field(ge=0, default=0)
    is_active: bool = True
    has_acted: bool = False

    @model_validator(mode="after")
    def _street_bet_within_hand_bet(self) -> "PlayerSnapshot":
        if self.current_bet > self.total_bet_in_round:
            raise ValueError("current_bet cannot exceed total_bet_in_round")
        return self


class DeckSnapshot(BaseModel):
    """Remaining cards plus the record of dealt (card, position) pairs."""
    cards: List[CardIndex] = Field(default_factory=list)
    offset: int = Field(ge=0, le=52, default=0)
    dealt: List[Tuple[CardIndex, CardIndex]] = Field(default_factory=list)


class SidePotSnapshot(BaseModel):
    amount: int = Field(ge=0)
    eligible_players: List[int] = Field(default_factory=list)


class WinnerSnapshot(BaseModel):
    player_id: int
    amount: int = Field(ge=0)
    description: Optional[str] = None


class GameSnapshot(BaseModel):
    """Complete state of one hand, as produced by PokerEngine.serialize()."""
    players: List[PlayerSnapshot]
    deck: DeckSnapshot = Field(default_factory=DeckSnapshot)
    community_cards: List[CardIndex] = Field(default_factory=list, max_length=5)
    pot: int = Field(ge=0, default=0)
    current_bet: int = Field(ge=0, default=0)
    stage: GameStage = GameStage.PREFLOP
    dealer_position: int = 0
    small_blind_position: int = 0
    big_blind_position: int = 0
    current_player_index: int = 0
    last_to_act_index: int = 0
    last_raise_amount: int = Field(ge=0, default=0)
    small_blind: int = Field(gt=0)
    big_blind: int = Field(gt=0)
    side_pots: List[SidePotSnapshot] = Field(default_factory=list)
    betting_actions: int = Field(ge=0, default=0)
    logs: List[str] = Field(default_factory=list)
    hand_number: int = Field(ge=0, default=0)
    winners: List[WinnerSnapshot] = Field(default_factory=list)
    settled: bool = False

    @model_validator(mode="after")
    def _cards_unique(self) -> "GameSnapshot":
        seen = list(self.deck.cards) + list(self.community_cards)
        for player in self.players:
            seen.extend(player.hole_cards)
        if len(seen) != len(set(seen)):
            raise ValueError("a card appears more than once in the snapshot")
        return self

    @model_validator(mode="after")
    def _seats_in_range(self) -> "GameSnapshot":
        seats = [
            ("current_player_index", self.current_player_index),
            ("dealer_position", self.dealer_position),
            ("small_blind_position", self.small_blind_position),
            ("big_blind_position", self.big_blind_position),
            ("last_to_act_index", self.last_to_act_index),
        ]
        for pot in self.side_pots:
            seats.extend(("side_pots.eligible_players", seat) for seat in pot.eligible_players)
        seats.extend(("winners.player_id", winner.player_id) for winner in self.winners)

        for name, seat in seats:
            if not 0 <= seat < len(self.players):
                raise ValueError(f"{name} {seat} is not a seat at this table")
        return self


# ============= Fairness Payloads =============

class RevealRequest(BaseModel):
    """Salt and claimed deal submitted by the host at the end of a hand."""
    game_id: str
    salt: str
    dealt_cards: List[Uint8]
    card_positions: List[Uint8]

    @field_validator("salt")
    @classmethod
    def _salt_is_bytes32(cls, value: str) -> str:
        return _check_hex32(value)

    @model_validator(mode="after")
    def _same_length(self) -> "RevealRequest":
        if len(self.dealt_cards) != len(self.card_positions):
            raise ValueError("dealt_cards and card_positions must have the same length")
        return self


class RandomnessFulfillment(BaseModel):
    """Callback payload delivered by the randomness service."""
    sequence_id: int = Field(ge=0)
    random_value: str

    @field_validator("random_value")
    @classmethod
    def _value_is_bytes32(cls, value: str) -> str:
        return _check_hex32(value)


class SessionSnapshot(BaseModel):
    """Public fields of a fairness session."""
    game_id: str
    status: str
    salt_hash: str
    sequence_id: Optional[int] = None
    random_value: Optional[str] = None
    revealed_salt: Optional[str] = None
    final_seed: Optional[str] = None
    vrf_fulfilled: bool = False
    ended: bool = False
    verified: bool = False
