"""
Commitment ledger for the commit-reveal protocol.

One GameSession per game id, moving strictly forward through:

    UNCOMMITTED -> COMMITTED -> RANDOMNESS_PENDING -> RANDOMNESS_FULFILLED
                -> REVEALED_VALID | REVEALED_INVALID

Each field is written once. Randomness callbacks are routed only through the
sequence id the randomness service handed out, and a failed precondition
raises without touching the session.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence, Union
import logging
import threading

from fairholdem.fairness.errors import (
    CommitmentExistsError,
    InvalidSessionStateError,
    RandomnessNotFulfilledError,
    SessionEndedError,
    UnknownGameError,
)
from fairholdem.fairness.shuffle import Bytes32Like, to_bytes32, to_hex
from fairholdem.fairness.verifier import VerificationResult, verify_deal
from fairholdem.schemas import RandomnessFulfillment, SessionSnapshot


logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    UNCOMMITTED = "uncommitted"
    COMMITTED = "committed"
    RANDOMNESS_PENDING = "randomness_pending"
    RANDOMNESS_FULFILLED = "randomness_fulfilled"
    REVEALED_VALID = "revealed_valid"
    REVEALED_INVALID = "revealed_invalid"


class RandomnessProvider(Protocol):
    """External verifiable randomness service."""

    def request(self) -> int:
        """Place a request and return its sequence id."""
        ...


@dataclass
class GameSession:
    """Public protocol record for one game."""
    game_id: str
    salt_hash: bytes
    sequence_id: Optional[int] = None
    random_value: Optional[bytes] = None
    revealed_salt: Optional[bytes] = None
    final_seed: Optional[bytes] = None
    vrf_fulfilled: bool = False
    ended: bool = False
    verified: bool = False

    @property
    def status(self) -> SessionStatus:
        if self.ended:
            return SessionStatus.REVEALED_VALID if self.verified else SessionStatus.REVEALED_INVALID
        if self.vrf_fulfilled:
            return SessionStatus.RANDOMNESS_FULFILLED
        if self.sequence_id is not None:
            return SessionStatus.RANDOMNESS_PENDING
        return SessionStatus.COMMITTED

    def to_dict(self) -> Dict[str, Any]:
        snapshot = SessionSnapshot(
            game_id=self.game_id,
            status=self.status.value,
            salt_hash=to_hex(self.salt_hash),
            sequence_id=self.sequence_id,
            random_value=to_hex(self.random_value) if self.random_value else None,
            revealed_salt=to_hex(self.revealed_salt) if self.revealed_salt else None,
            final_seed=to_hex(self.final_seed) if self.final_seed else None,
            vrf_fulfilled=self.vrf_fulfilled,
            ended=self.ended,
            verified=self.verified,
        )
        return snapshot.model_dump()


class CommitmentLedger:
    """
    Host-owned store of fairness sessions.

    Usage:
        ledger = CommitmentLedger()
        ledger.commit("table-1", hash_salt(salt))
        ledger.request_randomness("table-1", provider)
        # ... provider later calls ledger.fulfill_randomness(seq, value)
        result = ledger.reveal_and_verify("table-1", salt, cards, positions)
    """

    def __init__(self):
        self._sessions: Dict[str, GameSession] = {}
        self._sequences: Dict[int, str] = {}
        self._lock = threading.RLock()

    def __contains__(self, game_id: str) -> bool:
        return game_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def status(self, game_id: str) -> SessionStatus:
        session = self._sessions.get(game_id)
        return session.status if session else SessionStatus.UNCOMMITTED

    def get_session(self, game_id: str) -> GameSession:
        """
        A copy of the session record.

        Raises:
            UnknownGameError: If nothing was committed for ``game_id``
        """
        return replace(self._require(game_id))

    def _require(self, game_id: str) -> GameSession:
        session = self._sessions.get(game_id)
        if session is None:
            raise UnknownGameError(f"No commitment for game {game_id}")
        return session

    def commit(self, game_id: str, salt_hash: Bytes32Like) -> GameSession:
        """
        Record the salt commitment for a game.

        Raises:
            CommitmentExistsError: If the game already has a commitment
        """
        salt_hash = to_bytes32(salt_hash)
        with self._lock:
            if game_id in self._sessions:
                raise CommitmentExistsError(f"Game {game_id} is already committed")
            session = GameSession(game_id=game_id, salt_hash=salt_hash)
            self._sessions[game_id] = session
        logger.info(f"Committed game {game_id}: saltHash={to_hex(salt_hash)}")
        return replace(session)

    def request_randomness(self, game_id: str, provider: RandomnessProvider) -> int:
        """
        Ask the randomness service for a value bound to this game.

        Returns:
            The sequence id the value will be delivered under
        """
        with self._lock:
            self._check_committed(game_id)
            sequence_id = provider.request()
            self._bind(game_id, sequence_id)
        return sequence_id

    def bind_sequence(self, game_id: str, sequence_id: int) -> None:
        """Record a sequence id requested outside the ledger."""
        with self._lock:
            self._check_committed(game_id)
            self._bind(game_id, sequence_id)

    def _check_committed(self, game_id: str) -> None:
        session = self._require(game_id)
        if session.status != SessionStatus.COMMITTED:
            raise InvalidSessionStateError(
                f"Game {game_id} cannot request randomness in state {session.status.value}"
            )

    def _bind(self, game_id: str, sequence_id: int) -> None:
        if sequence_id in self._sequences:
            raise InvalidSessionStateError(f"Sequence {sequence_id} is already bound")
        self._sessions[game_id].sequence_id = sequence_id
        self._sequences[sequence_id] = game_id
        logger.info(f"Game {game_id} waiting for randomness, sequence={sequence_id}")

    def fulfill_randomness(self, sequence_id: int, random_value: Bytes32Like) -> bool:
        """
        Randomness service callback.

        Unknown sequence ids and repeated deliveries are ignored; a value,
        once set, is never overwritten.

        Returns:
            True if the value was recorded

        Raises:
            ValueError: If the value for a bound sequence is not 32 bytes
        """
        with self._lock:
            game_id = self._sequences.get(sequence_id)
            if game_id is None:
                logger.warning(f"Ignoring randomness for unknown sequence {sequence_id}")
                return False
            session = self._sessions[game_id]
            if session.vrf_fulfilled:
                logger.warning(f"Ignoring repeated randomness for game {game_id}")
                return False
            session.random_value = to_bytes32(random_value)
            session.vrf_fulfilled = True
        logger.info(f"Randomness fulfilled for game {game_id}")
        return True

    def fulfill_from_payload(self, payload: Union[Dict[str, Any], RandomnessFulfillment]) -> bool:
        """
        Randomness callback delivered as untrusted data.

        Raises:
            ValueError: If the payload does not validate
        """
        fulfillment = RandomnessFulfillment.model_validate(payload)
        return self.fulfill_randomness(fulfillment.sequence_id, fulfillment.random_value)

    def reveal_and_verify(
        self,
        game_id: str,
        salt: Bytes32Like,
        dealt_cards: Sequence[int],
        card_positions: Sequence[int],
    ) -> VerificationResult:
        """
        Reveal the salt and check the deal against the replayed shuffle.

        The outcome is recorded permanently on the session.

        Raises:
            UnknownGameError: No commitment for the game
            RandomnessNotFulfilledError: The random value has not arrived
            SessionEndedError: The game was already revealed
            SaltMismatchError: The salt does not match the commitment
            InvalidPositionError: A position is outside the deck
            InvalidRevealError: The payload is malformed
        """
        salt = to_bytes32(salt)
        dealt_cards = list(dealt_cards)
        card_positions = list(card_positions)

        with self._lock:
            session = self._require(game_id)
            if session.ended:
                raise SessionEndedError(f"Game {game_id} was already revealed")
            if not session.vrf_fulfilled:
                raise RandomnessNotFulfilledError(f"Game {game_id} has no random value yet")

            result = verify_deal(session.salt_hash, session.random_value, salt, dealt_cards, card_positions)

            session.revealed_salt = salt
            session.final_seed = result.final_seed
            session.ended = True
            session.verified = result.valid

        if result.valid:
            logger.info(f"Game {game_id} verified: finalSeed={to_hex(result.final_seed)}")
        else:
            logger.warning(f"Fairness check failed for game {game_id} at pair {result.mismatch_index}")
        return result
