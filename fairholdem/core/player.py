"""
Player class for Texas Hold'em.

Manages player state including:
- Stack (chip count)
- Hole cards
- Bet on the current street and over the whole hand
- Folded / all-in / active flags
"""

from __future__ import annotations
from typing import List, Dict, Any
from dataclasses import dataclass, field

from fairholdem.core.card import Card


@dataclass
class Player:
    """
    A seat at the table.

    Attributes:
        id: Seat index, fixed for the life of the table
        name: Display name
        chips: Current chip count
        hole_cards: The player's private cards (0 or 2)
        is_folded: Out of the current hand
        is_all_in: No chips left behind, no further actions this hand
        current_bet: Amount wagered on the current street
        total_bet_in_round: Amount wagered over the whole hand
        is_active: Seated and willing to be dealt in
        has_acted: Acted since the last raise on this street
    """
    id: int
    name: str
    chips: int
    hole_cards: List[Card] = field(default_factory=list)
    is_folded: bool = False
    is_all_in: bool = False
    current_bet: int = 0
    total_bet_in_round: int = 0
    is_active: bool = True
    has_acted: bool = False

    def reset_for_new_hand(self) -> None:
        """Clear per-hand state. Seats without chips sit the hand out."""
        self.hole_cards = []
        self.is_all_in = False
        self.current_bet = 0
        self.total_bet_in_round = 0
        self.has_acted = False
        self.is_folded = not self.can_be_dealt_in

    def reset_for_new_street(self) -> None:
        self.current_bet = 0
        self.has_acted = False

    def wager(self, amount: int) -> int:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Chips requested

        Returns:
            Actual amount wagered (capped at the stack; all-in on exhaustion)
        """
        if amount <= 0:
            return 0

        actual = min(amount, self.chips)
        self.chips -= actual
        self.current_bet += actual
        self.total_bet_in_round += actual

        if self.chips == 0:
            self.is_all_in = True

        return actual

    @property
    def can_be_dealt_in(self) -> bool:
        return self.is_active and self.chips > 0

    @property
    def can_act(self) -> bool:
        """Able to make a betting decision."""
        return not self.is_folded and not self.is_all_in and self.chips > 0

    def to_dict(self, hide_cards: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        return {
            "id": self.id,
            "name": self.name,
            "chips": self.chips,
            "hole_cards": [] if hide_cards else [c.to_int() for c in self.hole_cards],
            "is_folded": self.is_folded,
            "is_all_in": self.is_all_in,
            "current_bet": self.current_bet,
            "total_bet_in_round": self.total_bet_in_round,
            "is_active": self.is_active,
            "has_acted": self.has_acted,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Player:
        data = dict(data)
        data["hole_cards"] = [Card.from_int(i) for i in data.get("hole_cards", [])]
        return cls(**data)

    def __repr__(self) -> str:
        return (
            f"Player({self.id}, {self.name}, chips={self.chips}, "
            f"bet={self.current_bet}, folded={self.is_folded}, all_in={self.is_all_in})"
        )

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"{self.name} [{cards_str}] ${self.chips}"
