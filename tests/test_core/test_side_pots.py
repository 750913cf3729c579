"""
Tests for side pot calculation in Texas Hold'em.

These tests verify the handling of side pots when players go all-in with
different stack sizes: pots always add up to what was contributed and only
players who matched a level can win it.
"""

import pytest
from fairholdem.core.game import PokerEngine, SidePot
from fairholdem.core.rules import ActionType, GameStage


def set_contributions(engine, totals, all_in=(), folded=()):
    """Overwrite each seat's total contribution for a direct pot calculation."""
    for player, total in zip(engine.players, totals):
        player.total_bet_in_round = total
        player.current_bet = 0
        player.is_all_in = player.id in all_in
        player.is_folded = player.id in folded
        if player.is_all_in:
            player.chips = 0
    engine.state.pot = sum(totals)


class TestSidePotCalculation:
    """Direct tests of the pot split."""

    def test_no_all_in_single_pot(self, three_handed):
        three_handed.start_new_hand()
        set_contributions(three_handed, [100, 100, 100])
        three_handed._calculate_side_pots()
        assert three_handed.state.side_pots == [SidePot(300, [0, 1, 2])]

    def test_short_all_in(self, three_handed):
        """Contributions 100, 50 (all-in), 200."""
        three_handed.start_new_hand()
        set_contributions(three_handed, [100, 50, 200], all_in={1})
        three_handed._calculate_side_pots()
        pots = three_handed.state.side_pots

        assert pots[0] == SidePot(150, [0, 1, 2])
        assert pots[1] == SidePot(200, [0, 2])
        assert sum(p.amount for p in pots) == 350

    def test_two_all_in_levels(self, three_handed):
        three_handed.start_new_hand()
        set_contributions(three_handed, [100, 300, 300], all_in={0, 1})
        three_handed._calculate_side_pots()
        assert three_handed.state.side_pots == [
            SidePot(300, [0, 1, 2]),
            SidePot(400, [1, 2]),
        ]

    def test_eligibility_respects_threshold(self, six_handed):
        six_handed.start_new_hand()
        totals = [40, 120, 300, 300, 500, 500]
        set_contributions(six_handed, totals, all_in={0, 1, 2})
        six_handed._calculate_side_pots()
        pots = six_handed.state.side_pots

        assert sum(p.amount for p in pots) == sum(totals)
        thresholds = [40, 120, 300]
        for pot, threshold in zip(pots, thresholds):
            assert all(totals[pid] >= threshold for pid in pot.eligible_players)
        assert pots[-1].eligible_players == [4, 5]

    def test_folded_chips_stay_in_pot(self, three_handed):
        """A folded player's chips are dead money, they are never eligible."""
        three_handed.start_new_hand()
        set_contributions(three_handed, [200, 50, 200], all_in={1}, folded={2})
        three_handed._calculate_side_pots()
        pots = three_handed.state.side_pots

        assert sum(p.amount for p in pots) == 450
        assert pots[0] == SidePot(150, [0, 1])
        assert pots[1] == SidePot(300, [0])
        assert all(2 not in p.eligible_players for p in pots)

    def test_dead_money_above_all_live_stakes(self, three_handed):
        """Nothing is lost when a folded player put in more than every live player."""
        three_handed.start_new_hand()
        set_contributions(three_handed, [50, 50, 300], all_in={0, 1}, folded={2})
        three_handed._calculate_side_pots()
        pots = three_handed.state.side_pots
        assert pots == [SidePot(400, [0, 1])]

    @pytest.mark.parametrize("totals,all_in", [
        ([10, 20, 30, 40], {0, 1, 2}),
        ([500, 20, 500, 20], {1, 3}),
        ([75, 75, 75, 75], {0, 1, 2, 3}),
        ([1, 999, 998, 1000], {0, 2}),
    ])
    def test_pots_sum_to_total(self, totals, all_in):
        engine = PokerEngine(["a", "b", "c", "d"])
        engine.start_new_hand()
        set_contributions(engine, totals, all_in=all_in)
        engine._calculate_side_pots()
        assert sum(p.amount for p in engine.state.side_pots) == sum(totals)


class TestSidePotFlow:
    """Side pots built by real action sequences."""

    def test_two_all_ins_three_winners(self, deck_builder):
        """
        Stacks 100, 300, 1000. Seat 1 shoves, both others call. The short
        stack wins the main pot, the middle stack the side pot.
        """
        engine = PokerEngine(["short", "mid", "big"], starting_chips=1000)
        engine.players[0].chips = 100
        engine.players[1].chips = 300
        engine.start_new_hand(deck_builder(
            [("As", "Ad"), ("Ks", "Kd"), ("Qs", "Qd")],
            ["2c", "7d", "9h", "Js", "3c"],
        ))

        assert engine.take_action(1, ActionType.ALL_IN).success
        assert engine.take_action(2, ActionType.CALL).success
        assert engine.take_action(0, ActionType.CALL).success

        state = engine.state
        assert state.stage == GameStage.SHOWDOWN
        assert len(state.community_cards) == 5
        assert state.side_pots == [SidePot(300, [0, 1, 2]), SidePot(400, [1, 2])]
        assert [p.chips for p in state.players] == [300, 400, 700]
        assert sum(p.chips for p in state.players) == 1400

    def test_uncalled_excess_returns(self, deck_builder):
        """The big stack gets back what nobody could match."""
        engine = PokerEngine(["a", "b"], starting_chips=1000)
        engine.players[1].chips = 200
        engine.start_new_hand(deck_builder(
            [("2c", "7d"), ("As", "Ad")],
            ["Kh", "Qh", "9s", "4d", "3s"],
        ))
        # Seat 1 is dealer and small blind heads-up
        engine.take_action(1, ActionType.ALL_IN)
        engine.take_action(0, ActionType.ALL_IN)

        state = engine.state
        assert state.stage == GameStage.SHOWDOWN
        assert state.side_pots == [SidePot(400, [0, 1]), SidePot(800, [0])]
        assert state.players[1].chips == 400
        assert state.players[0].chips == 800
