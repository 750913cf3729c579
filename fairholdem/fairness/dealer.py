"""
Host-side fair dealing.

FairDealer runs the host half of the protocol for any number of games:
commit a fresh salt, request randomness, build the deck from the final seed
once the value arrives, hand out cards, and finally reveal the salt together
with every dealt (card, position) pair.

    dealer = FairDealer(ledger)
    dealer.begin_game("table-1")
    dealer.request_shuffle("table-1", provider)
    ... randomness arrives ...
    engine.start_new_hand(dealer.packed_deck("table-1"))
    ... play ...
    result = dealer.reveal("table-1", *engine.dealt_card_positions())
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence
import itertools
import logging

from fairholdem.core.card import Card, Deck
from fairholdem.fairness.errors import RandomnessNotFulfilledError, UnknownGameError
from fairholdem.fairness.ledger import CommitmentLedger, RandomnessProvider
from fairholdem.fairness.shuffle import (
    derive_final_seed,
    generate_salt,
    hash_salt,
    packed_deck_for_seed,
    to_hex,
)
from fairholdem.fairness.verifier import VerificationResult


logger = logging.getLogger(__name__)


class LocalRandomnessProvider:
    """
    In-process randomness service.

    Requests are queued and only delivered when ``deliver`` is called, so the
    asynchronous gap between request and callback is preserved.
    """

    def __init__(self, on_fulfill: Callable[[int, bytes], bool]):
        self._on_fulfill = on_fulfill
        self._counter = itertools.count(1)
        self._pending: List[int] = []

    def request(self) -> int:
        sequence_id = next(self._counter)
        self._pending.append(sequence_id)
        return sequence_id

    @property
    def pending(self) -> List[int]:
        return list(self._pending)

    def deliver(self, sequence_id: Optional[int] = None, random_value: Optional[bytes] = None) -> bytes:
        """
        Deliver a random value for a pending request (the oldest by default).

        Raises:
            ValueError: If there is no such pending request
        """
        if sequence_id is None:
            if not self._pending:
                raise ValueError("No pending randomness requests")
            sequence_id = self._pending[0]
        if sequence_id not in self._pending:
            raise ValueError(f"Sequence {sequence_id} is not pending")

        self._pending.remove(sequence_id)
        value = random_value if random_value is not None else generate_salt()
        self._on_fulfill(sequence_id, value)
        return value

    def deliver_all(self) -> None:
        while self._pending:
            self.deliver()


@dataclass
class DealSession:
    """Private host state for one game: the salt and what was dealt from where."""
    game_id: str
    salt: bytes
    deck: Optional[Deck] = None
    player_cards: Dict[str, List[Card]] = field(default_factory=dict)
    community: List[Card] = field(default_factory=list)


class FairDealer:
    """Host half of the commit-reveal protocol."""

    def __init__(self, ledger: Optional[CommitmentLedger] = None):
        self.ledger = ledger if ledger is not None else CommitmentLedger()
        self._games: Dict[str, DealSession] = {}

    def _get(self, game_id: str) -> DealSession:
        game = self._games.get(game_id)
        if game is None:
            raise UnknownGameError(f"Dealer has no game {game_id}")
        return game

    def begin_game(self, game_id: str, salt: Optional[bytes] = None) -> bytes:
        """
        Generate a salt and commit its hash.

        Returns:
            The salt hash that was committed
        """
        salt = salt if salt is not None else generate_salt()
        salt_hash = hash_salt(salt)
        self.ledger.commit(game_id, salt_hash)
        self._games[game_id] = DealSession(game_id=game_id, salt=salt)
        return salt_hash

    def request_shuffle(self, game_id: str, provider: RandomnessProvider) -> int:
        self._get(game_id)
        return self.ledger.request_randomness(game_id, provider)

    def deck_for(self, game_id: str) -> Deck:
        """
        The game's deck, built from the final seed on first use.

        Raises:
            RandomnessNotFulfilledError: If the random value has not arrived
        """
        game = self._get(game_id)
        if game.deck is None:
            game.deck = Deck.from_packed(self.packed_deck(game_id))
            logger.debug(f"Deck ready for game {game_id}")
        return game.deck

    def packed_deck(self, game_id: str) -> bytes:
        """The shuffled deck for the game in the 52-byte wire format."""
        game = self._get(game_id)
        session = self.ledger.get_session(game_id)
        if not session.vrf_fulfilled:
            raise RandomnessNotFulfilledError(f"Game {game_id} has no random value yet")
        return packed_deck_for_seed(derive_final_seed(session.random_value, game.salt))

    def deal(self, game_id: str, player: str, count: int = 2) -> List[Card]:
        """Deal private cards to a player."""
        cards = self.deck_for(game_id).draw(count)
        self._get(game_id).player_cards.setdefault(player, []).extend(cards)
        return cards

    def deal_community(self, game_id: str, count: int, burn: bool = True) -> List[Card]:
        """Deal board cards, burning one first by default."""
        deck = self.deck_for(game_id)
        if burn:
            deck.burn()
        cards = deck.draw(count)
        self._get(game_id).community.extend(cards)
        return cards

    def player_cards(self, game_id: str, player: str) -> List[Card]:
        return list(self._get(game_id).player_cards.get(player, []))

    def community_cards(self, game_id: str) -> List[Card]:
        return list(self._get(game_id).community)

    def verification_data(self, game_id: str) -> Dict[str, Any]:
        """Salt and dealt (card, position) pairs for the reveal."""
        game = self._get(game_id)
        dealt = game.deck.dealt if game.deck is not None else []
        return {
            "salt": to_hex(game.salt),
            "dealt_cards": [card for card, _ in dealt],
            "card_positions": [position for _, position in dealt],
        }

    def reveal(
        self,
        game_id: str,
        dealt_cards: Optional[Sequence[int]] = None,
        card_positions: Optional[Sequence[int]] = None,
    ) -> VerificationResult:
        """
        Reveal the salt and verify the deal on the ledger.

        Without explicit cards, the dealer's own deal record is used; pass the
        engine's ``dealt_card_positions()`` when the engine did the dealing.
        """
        game = self._get(game_id)
        if dealt_cards is None or card_positions is None:
            data = self.verification_data(game_id)
            dealt_cards, card_positions = data["dealt_cards"], data["card_positions"]
        return self.ledger.reveal_and_verify(game_id, game.salt, dealt_cards, card_positions)

    def cleanup(self, game_id: str) -> None:
        """Forget the private state of a game. The ledger record stays."""
        self._games.pop(game_id, None)
