"""
Deterministic keccak-256 shuffle.

The shuffle must replay bit-for-bit on the dealer contract, so the hashing
mirrors Solidity's ``keccak256(abi.encodePacked(bytes32, uint256))``:

    s = seed
    for i in 51 .. 1:
        s = keccak256(s || uint256(i))
        j = uint256(s) % (i + 1)
        swap(deck[i], deck[j])

keccak-256 is the pre-standard Keccak used by Ethereum, not ``sha3_256``.
"""

import secrets
from typing import List, Union

from Crypto.Hash import keccak

from fairholdem.core.card import DECK_SIZE


Bytes32Like = Union[bytes, bytearray, int, str]

WORD_SIZE = 32
MAX_UINT256 = 2 ** 256 - 1


def keccak256(*parts: bytes) -> bytes:
    """keccak-256 digest of the concatenated parts."""
    digest = keccak.new(digest_bits=256)
    for part in parts:
        digest.update(bytes(part))
    return digest.digest()


def to_bytes32(value: Bytes32Like) -> bytes:
    """
    Coerce a 256-bit value to 32 big-endian bytes.

    Args:
        value: 32 raw bytes, an int in [0, 2**256) or 64 hex digits with or
            without ``0x``

    Raises:
        ValueError: If the value does not fit in exactly 32 bytes
    """
    if isinstance(value, bool):
        raise ValueError("Expected a 256-bit value, got bool")
    if isinstance(value, int):
        if not 0 <= value <= MAX_UINT256:
            raise ValueError(f"Integer out of uint256 range: {value}")
        return value.to_bytes(WORD_SIZE, "big")
    if isinstance(value, str):
        digits = value[2:] if value.startswith(("0x", "0X")) else value
        if len(digits) != WORD_SIZE * 2:
            raise ValueError(f"Expected 64 hex digits, got {len(digits)}")
        try:
            return bytes.fromhex(digits)
        except ValueError:
            raise ValueError(f"Not a hex string: {value!r}") from None
    if len(value) != WORD_SIZE:
        raise ValueError(f"Expected 32 bytes, got {len(value)}")
    return bytes(value)


def to_hex(value: bytes) -> str:
    return "0x" + bytes(value).hex()


def generate_salt() -> bytes:
    """A fresh 32-byte secret salt from the OS CSPRNG."""
    return secrets.token_bytes(WORD_SIZE)


def hash_salt(salt: Bytes32Like) -> bytes:
    """The commitment published before any randomness is known."""
    return keccak256(to_bytes32(salt))


def derive_final_seed(random_value: Bytes32Like, salt: Bytes32Like) -> bytes:
    """Combine the external random value and the host salt into the shuffle seed."""
    return keccak256(to_bytes32(random_value), to_bytes32(salt))


def shuffle_deck(seed: Bytes32Like) -> List[int]:
    """
    Map a 256-bit seed to a permutation of the 52 card indices.

    Pure and total: the same seed always yields the same order.
    """
    deck = list(range(DECK_SIZE))
    state = to_bytes32(seed)
    for i in range(DECK_SIZE - 1, 0, -1):
        state = keccak256(state, i.to_bytes(WORD_SIZE, "big"))
        j = int.from_bytes(state, "big") % (i + 1)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def packed_deck_for_seed(seed: Bytes32Like) -> bytes:
    """The shuffled deck in the 52-byte wire format."""
    return bytes(shuffle_deck(seed))
