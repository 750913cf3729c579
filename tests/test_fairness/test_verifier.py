"""
Tests for replay verification of a dealt hand.
"""

import pytest
from fairholdem.fairness.errors import (
    InvalidPositionError,
    InvalidRevealError,
    InvalidSessionStateError,
    SaltMismatchError,
)
from fairholdem.fairness.ledger import GameSession
from fairholdem.fairness.shuffle import derive_final_seed, hash_salt, shuffle_deck
from fairholdem.fairness.verifier import verify_deal, replay_session


@pytest.fixture
def replayed(salt, random_value):
    """The deck the protocol produces for the shared salt and random value."""
    return shuffle_deck(derive_final_seed(random_value, salt))


class TestVerifyDeal:

    def test_honest_deal_is_valid(self, salt, random_value, replayed):
        positions = [0, 1, 2, 3, 5, 6, 7, 9, 11]
        cards = [replayed[p] for p in positions]
        result = verify_deal(hash_salt(salt), random_value, salt, cards, positions)
        assert result.valid
        assert result.mismatch_index is None
        assert result.final_seed == derive_final_seed(random_value, salt)

    @pytest.mark.parametrize("index", range(5))
    def test_any_tampered_card_is_invalid(self, salt, random_value, replayed, index):
        positions = [0, 1, 2, 3, 4]
        cards = [replayed[p] for p in positions]
        cards[index] = (cards[index] + 1) % 52
        result = verify_deal(hash_salt(salt), random_value, salt, cards, positions)
        assert not result.valid
        assert result.mismatch_index == index

    def test_swapped_positions_invalid(self, salt, random_value, replayed):
        cards = [replayed[0], replayed[1]]
        result = verify_deal(hash_salt(salt), random_value, salt, cards, [1, 0])
        assert not result.valid

    def test_empty_deal_is_valid(self, salt, random_value):
        assert verify_deal(hash_salt(salt), random_value, salt, [], []).valid

    def test_wrong_salt_always_fails(self, salt, random_value, replayed):
        other = bytes([0x22] * 32)
        with pytest.raises(SaltMismatchError):
            verify_deal(hash_salt(salt), random_value, other, [replayed[0]], [0])
        with pytest.raises(SaltMismatchError):
            verify_deal(hash_salt(salt), random_value, other, [], [])

    def test_position_out_of_range(self, salt, random_value):
        with pytest.raises(InvalidPositionError):
            verify_deal(hash_salt(salt), random_value, salt, [0], [52])

    def test_length_mismatch(self, salt, random_value):
        with pytest.raises(InvalidRevealError):
            verify_deal(hash_salt(salt), random_value, salt, [0, 1], [0])

    def test_card_out_of_range(self, salt, random_value):
        with pytest.raises(InvalidRevealError):
            verify_deal(hash_salt(salt), random_value, salt, [52], [0])

    def test_result_dict(self, salt, random_value):
        data = verify_deal(hash_salt(salt), random_value, salt, [], []).to_dict()
        assert data["valid"] is True
        assert data["final_seed"].startswith("0x")
        assert len(data["final_seed"]) == 66


class TestReplaySession:

    def test_replay_revealed_session(self, salt, random_value, replayed):
        session = GameSession(
            game_id="g",
            salt_hash=hash_salt(salt),
            sequence_id=1,
            random_value=random_value,
            revealed_salt=salt,
            vrf_fulfilled=True,
            ended=True,
            verified=True,
        )
        assert replay_session(session, [replayed[3]], [3]).valid
        assert not replay_session(session, [replayed[4]], [3]).valid

    def test_replay_requires_reveal(self, salt):
        session = GameSession(game_id="g", salt_hash=hash_salt(salt))
        with pytest.raises(InvalidSessionStateError):
            replay_session(session, [], [])
