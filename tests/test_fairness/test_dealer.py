"""
Tests for the host-side dealer and its integration with the engine.
"""

import pytest
from fairholdem.core.game import PokerEngine
from fairholdem.core.rules import ActionType, GameStage
from fairholdem.fairness.errors import RandomnessNotFulfilledError, UnknownGameError
from fairholdem.fairness.ledger import SessionStatus
from fairholdem.fairness.shuffle import derive_final_seed, hash_salt, shuffle_deck


@pytest.fixture
def ready(dealer, provider, salt, random_value):
    """Dealer with game "t1" committed and its randomness delivered."""
    dealer.begin_game("t1", salt)
    sequence_id = dealer.request_shuffle("t1", provider)
    provider.deliver(sequence_id, random_value)
    return dealer


@pytest.fixture
def deck(salt, random_value):
    return shuffle_deck(derive_final_seed(random_value, salt))


class TestLocalRandomnessProvider:

    def test_sequence_ids(self, provider):
        assert provider.request() == 1
        assert provider.request() == 2
        assert provider.pending == [1, 2]

    def test_deliver_nothing_pending(self, provider):
        with pytest.raises(ValueError):
            provider.deliver()

    def test_deliver_unknown(self, provider):
        provider.request()
        with pytest.raises(ValueError):
            provider.deliver(5)

    def test_deliver_all(self, ledger, provider, dealer):
        dealer.begin_game("a")
        dealer.begin_game("b")
        dealer.request_shuffle("a", provider)
        dealer.request_shuffle("b", provider)
        provider.deliver_all()
        assert provider.pending == []
        assert ledger.status("a") == SessionStatus.RANDOMNESS_FULFILLED
        assert ledger.status("b") == SessionStatus.RANDOMNESS_FULFILLED


class TestFairDealer:

    def test_begin_game_commits(self, dealer, ledger, salt):
        assert dealer.begin_game("t1", salt) == hash_salt(salt)
        assert ledger.status("t1") == SessionStatus.COMMITTED

    def test_random_salt(self, dealer, ledger):
        salt_hash = dealer.begin_game("t1")
        assert ledger.get_session("t1").salt_hash == salt_hash

    def test_packed_deck_before_fulfillment(self, dealer, provider, salt):
        dealer.begin_game("t1", salt)
        with pytest.raises(RandomnessNotFulfilledError):
            dealer.packed_deck("t1")
        dealer.request_shuffle("t1", provider)
        with pytest.raises(RandomnessNotFulfilledError):
            dealer.deal("t1", "alice")

    def test_unknown_game(self, dealer, provider):
        with pytest.raises(UnknownGameError):
            dealer.request_shuffle("nope", provider)
        with pytest.raises(UnknownGameError):
            dealer.deal("nope", "alice")

    def test_packed_deck_matches_shuffle(self, ready, deck):
        assert list(ready.packed_deck("t1")) == deck

    def test_deal_positions(self, ready, deck):
        alice = ready.deal("t1", "alice")
        bob = ready.deal("t1", "bob")
        flop = ready.deal_community("t1", 3)
        turn = ready.deal_community("t1", 1)

        assert [c.to_int() for c in alice] == deck[0:2]
        assert [c.to_int() for c in bob] == deck[2:4]
        assert [c.to_int() for c in flop] == deck[5:8]
        assert [c.to_int() for c in turn] == [deck[9]]
        assert ready.player_cards("t1", "alice") == alice
        assert ready.community_cards("t1") == flop + turn

        data = ready.verification_data("t1")
        assert data["card_positions"] == [0, 1, 2, 3, 5, 6, 7, 9]
        assert data["dealt_cards"] == [deck[p] for p in data["card_positions"]]

    def test_deal_community_without_burn(self, ready, deck):
        board = ready.deal_community("t1", 2, burn=False)
        assert [c.to_int() for c in board] == deck[0:2]

    def test_reveal_uses_own_record(self, ready, salt):
        ready.deal("t1", "alice")
        ready.deal_community("t1", 3)
        result = ready.reveal("t1")
        assert result.valid
        assert ready.ledger.status("t1") == SessionStatus.REVEALED_VALID
        assert ready.verification_data("t1")["salt"] == "0x" + salt.hex()

    def test_cleanup_keeps_ledger(self, ready):
        ready.cleanup("t1")
        with pytest.raises(UnknownGameError):
            ready.deal("t1", "alice")
        assert ready.ledger.status("t1") == SessionStatus.RANDOMNESS_FULFILLED


class TestEngineIntegration:

    def play_down(self, engine):
        while engine.is_hand_running():
            legal = {a["type"] for a in engine.get_legal_actions()}
            if not legal:
                break
            action = ActionType.CHECK if "check" in legal else ActionType.CALL
            engine.take_action(engine.state.current_player_index, action)

    def test_fair_hand_verifies(self, ready, deck):
        engine = PokerEngine(["alice", "bob", "carol"], starting_chips=500)
        assert engine.start_new_hand(ready.packed_deck("t1"))
        self.play_down(engine)

        assert engine.state.stage == GameStage.SHOWDOWN
        cards, positions = engine.dealt_card_positions()
        assert len(cards) == 3 * 2 + 5
        assert all(deck[p] == c for c, p in zip(cards, positions))

        result = ready.reveal("t1", cards, positions)
        assert result.valid
        assert sum(p.chips for p in engine.players) == 1500

    def test_tampered_hand_fails(self, ready):
        engine = PokerEngine(["alice", "bob"], starting_chips=500)
        engine.start_new_hand(ready.packed_deck("t1"))
        cards, positions = engine.dealt_card_positions()
        cards[0], cards[1] = cards[1], cards[0]

        result = ready.reveal("t1", cards, positions)
        assert not result.valid
        assert result.mismatch_index == 0
        assert ready.ledger.status("t1") == SessionStatus.REVEALED_INVALID
