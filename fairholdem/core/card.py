"""
Card and Deck classes for Texas Hold'em.

Cards use the compact integer encoding shared with the on-chain dealer:

    index = (rank - 2) * 4 + suit

with suits ordered Hearts, Diamonds, Clubs, Spades. A shuffled deck travels
between components as 52 packed bytes, one card index per byte.
"""

from __future__ import annotations
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union
from enum import IntEnum


DECK_SIZE = 52


class Suit(IntEnum):
    """Card suits in wire-format order."""
    HEARTS = 0    # ♥
    DIAMONDS = 1  # ♦
    CLUBS = 2     # ♣
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (14, highest)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.HEARTS: "h",
    Suit.DIAMONDS: "d",
    Suit.CLUBS: "c",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}


class Card:
    """
    A playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10♥")
    - Integer (0-51): Card.from_int(51) = Ace of Spades
    """

    __slots__ = ("rank", "suit", "_int")

    def __init__(self, rank: Rank, suit: Suit):
        self.rank = Rank(rank)
        self.suit = Suit(suit)
        self._int = (int(self.rank) - 2) * 4 + int(self.suit)

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts "As", "Kh", "Td", "10d" and the symbol forms "A♠", "10♥".
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        if s[:2] == "10":
            rank_part, suit_part = "T", s[2:]
        else:
            rank_part, suit_part = s[0].upper(), s[1:]

        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")
        rank = CHAR_TO_RANK[rank_part]

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(rank, suit)

    @classmethod
    def from_int(cls, card_int: int) -> Card:
        """Create a card from its wire index (0-51)."""
        if not 0 <= card_int < DECK_SIZE:
            raise ValueError(f"Card int must be 0-51, got {card_int}")
        return cls(Rank(card_int // 4 + 2), Suit(card_int % 4))

    def to_int(self) -> int:
        """Return the wire index (0-51)."""
        return self._int

    def __int__(self) -> int:
        return self._int

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self._int == other._int
        return False

    def __hash__(self) -> int:
        return self._int

    def __lt__(self, other: Card) -> bool:
        """Compare by rank only (for sorting)."""
        return self.rank < other.rank

    def __repr__(self) -> str:
        return f"Card({self.short_str})"

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', 'Kh'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def color(self) -> str:
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "index": self._int,
            "rank": RANK_CHARS[self.rank],
            "suit": SUIT_SYMBOLS[self.suit],
            "text": str(self),
        }


PackedDeck = Union[bytes, bytearray, Sequence[int], str]


def unpack_deck(packed: PackedDeck) -> List[int]:
    """
    Decode a packed deck into 52 card indices.

    Accepts raw bytes, a sequence of ints or a hex string (with or without
    ``0x``). Anything past the first 52 bytes is ignored.

    Raises:
        ValueError: If fewer than 52 bytes are given, a byte is not a card
            index or a card appears twice.
    """
    if isinstance(packed, str):
        hex_str = packed[2:] if packed.startswith(("0x", "0X")) else packed
        try:
            values = list(bytes.fromhex(hex_str))
        except ValueError:
            raise ValueError(f"Packed deck is not valid hex: {packed!r}") from None
    else:
        values = [int(v) for v in packed]

    if len(values) < DECK_SIZE:
        raise ValueError(f"Packed deck must contain {DECK_SIZE} bytes, got {len(values)}")
    values = values[:DECK_SIZE]

    for value in values:
        if not 0 <= value < DECK_SIZE:
            raise ValueError(f"Packed deck byte out of range: {value}")
    if len(set(values)) != DECK_SIZE:
        raise ValueError("Packed deck contains duplicate cards")
    return values


def pack_deck(indices: Iterable[int]) -> bytes:
    """Encode card indices as the 52-byte wire format."""
    return bytes(unpack_deck(list(indices)))


class Deck:
    """
    An ordered 52-card deck for one hand.

    Cards only leave from the front, either dealt (``draw``) or burned
    (``burn``). Every dealt card is recorded with its position in the
    shuffled order so the deal can be checked against a replayed shuffle.

    Usage:
        deck = Deck.from_packed(packed_bytes)
        hole_cards = deck.draw(2)
        deck.burn()
        flop = deck.draw(3)
    """

    def __init__(
        self,
        cards: Optional[Sequence[Card]] = None,
        offset: int = 0,
        dealt: Optional[Sequence[Tuple[int, int]]] = None,
    ):
        """
        Args:
            cards: Remaining cards, top first. A freshly shuffled full deck
                when omitted.
            offset: Number of cards already removed from the shuffled order.
            dealt: (card index, position) pairs already dealt.
        """
        if cards is None:
            indices = list(range(DECK_SIZE))
            random.shuffle(indices)
            cards = [Card.from_int(i) for i in indices]
        self._cards: List[Card] = list(cards)
        self._offset = offset
        self._dealt: List[Tuple[int, int]] = [(int(c), int(p)) for c, p in (dealt or [])]

    @classmethod
    def from_packed(cls, packed: PackedDeck) -> Deck:
        """Build a full deck from the 52-byte wire format."""
        return cls([Card.from_int(i) for i in unpack_deck(packed)])

    def draw(self, n: int = 1) -> List[Card]:
        """
        Deal n cards from the top of the deck.

        Raises:
            ValueError: If not enough cards remain.
        """
        if n > len(self._cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self._cards)} remain")

        drawn = self._cards[:n]
        self._cards = self._cards[n:]
        for card in drawn:
            self._dealt.append((card.to_int(), self._offset))
            self._offset += 1
        return drawn

    def burn(self) -> Optional[Card]:
        """Discard the top card. Burned cards are not part of the deal record."""
        if not self._cards:
            return None
        self._offset += 1
        return self._cards.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._cards)

    @property
    def offset(self) -> int:
        """Position of the current top card in the shuffled order."""
        return self._offset

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    @property
    def dealt(self) -> List[Tuple[int, int]]:
        """(card index, deck position) for every dealt card, in deal order."""
        return list(self._dealt)

    def to_dict(self) -> Dict[str, object]:
        return {
            "cards": [c.to_int() for c in self._cards],
            "offset": self._offset,
            "dealt": [list(pair) for pair in self._dealt],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> Deck:
        return cls(
            cards=[Card.from_int(i) for i in data.get("cards", [])],
            offset=int(data.get("offset", 0)),
            dealt=[tuple(pair) for pair in data.get("dealt", [])],
        )

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts "As Kh Td" (space-separated) or "AsKhTd" (2 chars each).
    """
    cards_str = cards_str.strip()

    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    result = []
    i = 0
    while i < len(cards_str):
        if i + 1 < len(cards_str) and (
            cards_str[i + 1] in SYMBOL_TO_SUIT or cards_str[i + 1].lower() in CHAR_TO_SUIT
        ):
            result.append(Card.from_string(cards_str[i:i + 2]))
            i += 2
        else:
            raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    return result
