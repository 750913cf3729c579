"""
Tests for state snapshots handed to persistence or replication layers.
"""

import json

import pytest
from pydantic import ValidationError

from fairholdem.core.game import PokerEngine
from fairholdem.core.rules import ActionType, GameStage
from fairholdem.schemas import GameSnapshot, RevealRequest, RandomnessFulfillment


class TestSnapshots:

    def test_serialize_is_json(self, heads_up):
        heads_up.start_new_hand()
        data = heads_up.serialize()
        assert json.loads(json.dumps(data)) == data
        assert data["stage"] == "Pre-Flop"
        assert data["pot"] == 30
        assert len(data["players"][0]["hole_cards"]) == 2

    def test_round_trip(self, heads_up):
        heads_up.start_new_hand()
        heads_up.take_action(1, ActionType.CALL)
        heads_up.take_action(0, ActionType.CHECK)
        snapshot = heads_up.serialize()

        restored = PokerEngine.from_snapshot(snapshot)
        assert restored.serialize() == snapshot
        assert restored.state.stage == GameStage.FLOP
        assert restored.dealt_card_positions() == heads_up.dealt_card_positions()

    def test_restored_engine_continues(self, heads_up):
        heads_up.start_new_hand()
        heads_up.take_action(1, ActionType.CALL)
        restored = PokerEngine.from_snapshot(heads_up.serialize())

        heads_up.take_action(0, ActionType.CHECK)
        restored.take_action(0, ActionType.CHECK)
        assert restored.serialize() == heads_up.serialize()

    def test_load_state_replaces(self, heads_up, three_handed):
        three_handed.start_new_hand()
        heads_up.load_state(three_handed.serialize())
        assert heads_up.num_players == 3
        assert heads_up.state.pot == 30

    def test_snapshot_rejects_duplicate_cards(self, heads_up):
        heads_up.start_new_hand()
        data = heads_up.serialize()
        data["community_cards"] = [data["players"][0]["hole_cards"][0]]
        with pytest.raises(ValueError):
            heads_up.load_state(data)

    def test_snapshot_rejects_bad_bets(self, heads_up):
        heads_up.start_new_hand()
        data = heads_up.serialize()
        data["players"][0]["current_bet"] = data["players"][0]["total_bet_in_round"] + 1
        with pytest.raises(ValidationError):
            GameSnapshot.model_validate(data)

    def test_snapshot_rejects_misnumbered_seats(self, heads_up):
        heads_up.start_new_hand()
        data = heads_up.serialize()
        data["players"][0]["id"] = 5
        with pytest.raises(ValueError):
            heads_up.load_state(data)

    @pytest.mark.parametrize("field", [
        "current_player_index",
        "dealer_position",
        "small_blind_position",
        "big_blind_position",
        "last_to_act_index",
    ])
    def test_snapshot_rejects_seat_outside_table(self, heads_up, field):
        heads_up.start_new_hand()
        before = heads_up.serialize()
        data = heads_up.serialize()
        data[field] = 7
        with pytest.raises(ValueError):
            heads_up.load_state(data)
        assert heads_up.serialize() == before
        assert heads_up.get_legal_actions()

    def test_snapshot_rejects_unknown_pot_seats(self, heads_up):
        heads_up.start_new_hand()
        data = heads_up.serialize()
        data["side_pots"] = [{"amount": 30, "eligible_players": [0, 2]}]
        with pytest.raises(ValidationError):
            GameSnapshot.model_validate(data)

        data = heads_up.serialize()
        data["winners"] = [{"player_id": -1, "amount": 30}]
        with pytest.raises(ValidationError):
            GameSnapshot.model_validate(data)

    def test_failed_load_keeps_state(self, heads_up):
        heads_up.start_new_hand()
        before = heads_up.serialize()
        with pytest.raises(ValueError):
            heads_up.load_state({"players": []})
        assert heads_up.serialize() == before


class TestGetState:

    def test_copy_is_independent(self, heads_up):
        heads_up.start_new_hand()
        copy = heads_up.get_state()
        copy.players[0].chips = 0
        copy.community_cards.append(copy.deck.cards[0])
        copy.deck.draw(5)

        assert heads_up.players[0].chips == 980
        assert heads_up.state.community_cards == []
        assert heads_up.state.deck.remaining == 48

    def test_copy_matches(self, heads_up):
        heads_up.start_new_hand()
        copy = heads_up.get_state()
        assert copy.to_dict() == heads_up.state.to_dict()


class TestBoundarySchemas:

    def test_reveal_request_normalizes_salt(self):
        request = RevealRequest(game_id="g", salt="AB" * 32, dealt_cards=[1, 2], card_positions=[0, 1])
        assert request.salt == "0x" + "ab" * 32

    def test_reveal_request_bad_salt(self):
        with pytest.raises(ValidationError):
            RevealRequest(game_id="g", salt="0x1234", dealt_cards=[], card_positions=[])

    def test_reveal_request_length_mismatch(self):
        with pytest.raises(ValidationError):
            RevealRequest(game_id="g", salt="00" * 32, dealt_cards=[1, 2], card_positions=[0])

    def test_reveal_request_uint8(self):
        with pytest.raises(ValidationError):
            RevealRequest(game_id="g", salt="00" * 32, dealt_cards=[256], card_positions=[0])

    def test_randomness_fulfillment(self):
        payload = RandomnessFulfillment(sequence_id=3, random_value="0x" + "ff" * 32)
        assert payload.sequence_id == 3
        with pytest.raises(ValidationError):
            RandomnessFulfillment(sequence_id=-1, random_value="0x" + "ff" * 32)
