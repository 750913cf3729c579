"""
Texas Hold'em Game Engine - State Machine Implementation.

This module implements the betting state machine for one No-Limit hand:
- Hand setup (dealer rotation, blinds, round-robin hole cards)
- Player actions (fold, check, call, bet/raise, all-in)
- Street transitions with burn cards and automatic run-out
- Side pot calculation and settlement at showdown
- Snapshots for persistence and replication

The engine never shuffles for the fairness protocol itself: it accepts an
already resolved packed deck and records where every dealt card came from.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Tuple, Any, Union
from dataclasses import dataclass, field
import copy
import functools
import logging
import threading

from fairholdem.core.card import Card, Deck, PackedDeck
from fairholdem.core.player import Player
from fairholdem.core.hand import HandEvaluation, InsufficientCards, evaluate_hand
from fairholdem.core.rules import (
    GameStage, ActionType,
    get_blind_positions, calculate_min_raise, next_stage,
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, DEFAULT_BUY_IN,
    MIN_PLAYERS, MAX_PLAYERS, HOLE_CARDS, CARDS_FOR_STREET,
)
from fairholdem.schemas import GameSnapshot


logger = logging.getLogger(__name__)


@dataclass
class SidePot:
    """A pot (main or side) and the seats that can win it."""
    amount: int = 0
    eligible_players: List[int] = field(default_factory=list)


@dataclass
class PotAward:
    """Chips a seat collected from one pot at settlement."""
    player_id: int
    amount: int
    description: Optional[str] = None


@dataclass
class ActionResult:
    """Result of a player action. Rejected actions leave the state untouched."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0


@dataclass
class GameState:
    """Everything the engine knows about the hand in progress."""
    players: List[Player]
    deck: Deck = field(default_factory=lambda: Deck([]))
    community_cards: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    stage: GameStage = GameStage.PREFLOP
    dealer_position: int = 0
    small_blind_position: int = 0
    big_blind_position: int = 0
    current_player_index: int = 0
    last_to_act_index: int = 0
    last_raise_amount: int = DEFAULT_BIG_BLIND
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    side_pots: List[SidePot] = field(default_factory=list)
    betting_actions: int = 0
    logs: List[str] = field(default_factory=list)
    hand_number: int = 0
    winners: List[PotAward] = field(default_factory=list)
    settled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "players": [p.to_dict() for p in self.players],
            "deck": self.deck.to_dict(),
            "community_cards": [c.to_int() for c in self.community_cards],
            "pot": self.pot,
            "current_bet": self.current_bet,
            "stage": self.stage.value,
            "dealer_position": self.dealer_position,
            "small_blind_position": self.small_blind_position,
            "big_blind_position": self.big_blind_position,
            "current_player_index": self.current_player_index,
            "last_to_act_index": self.last_to_act_index,
            "last_raise_amount": self.last_raise_amount,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "side_pots": [
                {"amount": p.amount, "eligible_players": list(p.eligible_players)}
                for p in self.side_pots
            ],
            "betting_actions": self.betting_actions,
            "logs": list(self.logs),
            "hand_number": self.hand_number,
            "winners": [
                {"player_id": w.player_id, "amount": w.amount, "description": w.description}
                for w in self.winners
            ],
            "settled": self.settled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameState:
        return cls(
            players=[Player.from_dict(p) for p in data["players"]],
            deck=Deck.from_dict(data["deck"]),
            community_cards=[Card.from_int(i) for i in data["community_cards"]],
            pot=data["pot"],
            current_bet=data["current_bet"],
            stage=GameStage(data["stage"]),
            dealer_position=data["dealer_position"],
            small_blind_position=data["small_blind_position"],
            big_blind_position=data["big_blind_position"],
            current_player_index=data["current_player_index"],
            last_to_act_index=data["last_to_act_index"],
            last_raise_amount=data["last_raise_amount"],
            small_blind=data["small_blind"],
            big_blind=data["big_blind"],
            side_pots=[SidePot(p["amount"], list(p["eligible_players"])) for p in data["side_pots"]],
            betting_actions=data["betting_actions"],
            logs=list(data["logs"]),
            hand_number=data["hand_number"],
            winners=[PotAward(**w) for w in data["winners"]],
            settled=data["settled"],
        )


def _serialized(method):
    """Run the method while holding the engine lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class PokerEngine:
    """
    No-Limit Texas Hold'em engine implementing a state machine.

    Usage:
        engine = PokerEngine(["alice", "bob"], starting_chips=1000)
        engine.start_new_hand(packed_deck)

        while engine.is_hand_running():
            seat = engine.state.current_player_index
            action, amount = get_player_action(engine.get_state())
            result = engine.take_action(seat, action, amount)

        winners = engine.state.winners

    Every public method holds an internal lock, so the engine can be shared
    by concurrent callers. Every action method rejects any seat that is not
    the one to act.
    """

    def __init__(
        self,
        player_names: List[str],
        starting_chips: int = DEFAULT_BUY_IN,
        small_blind: int = DEFAULT_SMALL_BLIND,
        big_blind: int = DEFAULT_BIG_BLIND,
        auto_start: bool = False,
    ):
        """
        Initialize a table.

        Args:
            player_names: Seat names in seat order (2-10)
            starting_chips: Starting stack for each player
            small_blind: Small blind amount
            big_blind: Big blind amount
            auto_start: Deal the first hand with a locally shuffled deck
        """
        if not MIN_PLAYERS <= len(player_names) <= MAX_PLAYERS:
            raise ValueError(f"Number of players must be {MIN_PLAYERS}-{MAX_PLAYERS}")
        if small_blind <= 0 or big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if small_blind > big_blind:
            raise ValueError("Small blind cannot exceed big blind")
        if starting_chips < 0:
            raise ValueError("Starting chips cannot be negative")

        self._lock = threading.RLock()
        self.state = GameState(
            players=[
                Player(id=i, name=name, chips=starting_chips)
                for i, name in enumerate(player_names)
            ],
            small_blind=small_blind,
            big_blind=big_blind,
            last_raise_amount=big_blind,
        )

        if auto_start:
            self.start_new_hand()

    @classmethod
    def from_snapshot(cls, snapshot: Union[Dict[str, Any], GameSnapshot]) -> PokerEngine:
        """Rebuild an engine from ``serialize()`` output."""
        validated = GameSnapshot.model_validate(snapshot)
        engine = cls(
            [p.name for p in validated.players],
            small_blind=validated.small_blind,
            big_blind=validated.big_blind,
        )
        engine.load_state(validated)
        return engine

    # ============= Queries =============

    @property
    def players(self) -> List[Player]:
        return self.state.players

    @property
    def num_players(self) -> int:
        return len(self.state.players)

    @property
    @_serialized
    def current_player(self) -> Optional[Player]:
        """The player whose turn it is to act."""
        if not self.is_hand_running():
            return None
        return self.state.players[self.state.current_player_index]

    @_serialized
    def is_hand_running(self) -> bool:
        """Check if a hand is currently in progress."""
        return self.state.hand_number > 0 and self.state.stage != GameStage.SHOWDOWN

    @_serialized
    def get_state(self) -> GameState:
        """Return a structurally independent copy of the state."""
        return copy.deepcopy(self.state)

    @_serialized
    def serialize(self) -> Dict[str, Any]:
        """Deep snapshot of the state as JSON-compatible data."""
        return GameSnapshot.model_validate(self.state.to_dict()).model_dump(mode="json")

    @_serialized
    def load_state(self, snapshot: Union[Dict[str, Any], GameSnapshot]) -> None:
        """
        Replace the current state with a previously saved snapshot.

        Raises:
            ValueError: If the snapshot does not validate
        """
        validated = GameSnapshot.model_validate(snapshot)
        for seat, player in enumerate(validated.players):
            if player.id != seat:
                raise ValueError(f"Player at seat {seat} has id {player.id}")
        self.state = GameState.from_dict(validated.model_dump())

    @_serialized
    def dealt_card_positions(self) -> Tuple[List[int], List[int]]:
        """
        Dealt cards and their positions in the shuffled deck.

        Returns:
            Tuple of (dealt_cards, card_positions), ready for the reveal step
        """
        dealt = self.state.deck.dealt
        return [card for card, _ in dealt], [position for _, position in dealt]

    # ============= Hand Setup =============

    @_serialized
    def start_new_hand(self, packed_deck: Optional[PackedDeck] = None) -> bool:
        """
        Start a new hand.

        Args:
            packed_deck: The shuffled deck in 52-byte wire format. A locally
                shuffled deck is used when omitted.

        Returns:
            True if the hand started, False if fewer than two players can play

        Raises:
            ValueError: If the packed deck is malformed
        """
        state = self.state
        eligible = [p.id for p in state.players if p.can_be_dealt_in]
        if len(eligible) < MIN_PLAYERS:
            logger.warning("Cannot start hand: not enough players with chips")
            state.stage = GameStage.SHOWDOWN
            return False

        deck = Deck.from_packed(packed_deck) if packed_deck is not None else Deck()

        state.hand_number += 1
        state.dealer_position = self._next_eligible_seat(state.dealer_position)
        state.small_blind_position, state.big_blind_position = get_blind_positions(
            eligible, state.dealer_position
        )

        state.logs = [f"--- New Hand #{state.hand_number} ---"]
        state.deck = deck
        state.pot = 0
        state.side_pots = []
        state.current_bet = 0
        state.stage = GameStage.PREFLOP
        state.community_cards = []
        state.betting_actions = 0
        state.winners = []
        state.settled = False

        for player in state.players:
            player.reset_for_new_hand()

        self._deal_hole_cards()

        # Blinds are forced wagers: they do not go through the action flow
        self._post_blind(state.small_blind_position, state.small_blind, "small blind")
        self._post_blind(state.big_blind_position, state.big_blind, "big blind")

        state.current_bet = state.players[state.big_blind_position].current_bet
        state.current_player_index = self._next_eligible_seat(state.big_blind_position)
        state.last_to_act_index = state.big_blind_position
        state.last_raise_amount = state.big_blind

        logger.info(
            f"Starting hand #{state.hand_number}: dealer={state.dealer_position} "
            f"sb={state.small_blind_position} bb={state.big_blind_position}"
        )

        contenders = [p for p in state.players if p.can_act]
        if not contenders or (len(contenders) == 1 and contenders[0].current_bet >= state.current_bet):
            self._run_out_board()
            self._settle()

        return True

    def _next_eligible_seat(self, from_seat: int) -> int:
        """Next seat clockwise with chips that is seated and active."""
        n = self.num_players
        for offset in range(1, n + 1):
            seat = (from_seat + offset) % n
            if self.state.players[seat].can_be_dealt_in:
                return seat
        return from_seat

    def _deal_hole_cards(self) -> None:
        """Deal round-robin: every player gets card 1, then every player card 2."""
        for _ in range(HOLE_CARDS):
            for player in self.state.players:
                if not player.is_folded:
                    player.hole_cards.extend(self.state.deck.draw(1))

    def _post_blind(self, seat: int, amount: int, label: str) -> None:
        player = self.state.players[seat]
        posted = player.wager(amount)
        self.state.pot += posted
        self.state.logs.append(f"{player.name} posts {label} {posted}")
        logger.debug(f"{player.name} posts {label} {posted}")

    # ============= Actions =============

    @_serialized
    def take_action(
        self,
        seat: int,
        action_type: Union[ActionType, str],
        amount: int = 0,
    ) -> ActionResult:
        """
        Apply an action from the seat whose turn it is.

        This is the single serialized entry point for players: anything from
        a seat other than ``current_player_index`` is rejected.

        Args:
            seat: Seat submitting the action
            action_type: FOLD, CHECK, CALL, BET, RAISE or ALL_IN
            amount: Chips to put in for BET/RAISE

        Returns:
            ActionResult indicating success/failure and details
        """
        if not self.is_hand_running():
            return ActionResult(False, "No hand in progress")
        if seat != self.state.current_player_index:
            return ActionResult(False, "Not your turn")

        try:
            action_type = ActionType(action_type)
        except ValueError:
            return ActionResult(False, f"Unknown action: {action_type}")

        player = self.state.players[seat]
        if action_type == ActionType.FOLD:
            return self._fold(player)
        elif action_type == ActionType.CHECK:
            return self._check(player)
        elif action_type == ActionType.CALL:
            return self._call(player)
        elif action_type in (ActionType.BET, ActionType.RAISE):
            return self._bet(player, amount)
        return self._all_in(player)

    @_serialized
    def timeout_action(self) -> ActionResult:
        """Default action when the seat to act runs out of time: check, else fold."""
        player = self.current_player
        if player is None:
            return ActionResult(False, "No hand in progress")
        if player.current_bet >= self.state.current_bet:
            return self._check(player)
        return self._fold(player)

    @_serialized
    def bet(self, player_id: int, amount: int) -> ActionResult:
        """
        Bet or raise by putting ``amount`` chips in.

        A wager below the minimum raise from a player who has more chips than
        the wager is played as a call. Wagers are capped at the stack.
        """
        player = self._get_player(player_id)
        return self._bet(player, amount) if player else ActionResult(False, "Unknown seat")

    @_serialized
    def check(self, player_id: int) -> ActionResult:
        player = self._get_player(player_id)
        return self._check(player) if player else ActionResult(False, "Unknown seat")

    @_serialized
    def call(self, player_id: int) -> ActionResult:
        player = self._get_player(player_id)
        return self._call(player) if player else ActionResult(False, "Unknown seat")

    @_serialized
    def fold(self, player_id: int) -> ActionResult:
        player = self._get_player(player_id)
        return self._fold(player) if player else ActionResult(False, "Unknown seat")

    @_serialized
    def all_in(self, player_id: int) -> ActionResult:
        player = self._get_player(player_id)
        return self._all_in(player) if player else ActionResult(False, "Unknown seat")

    def _get_player(self, player_id: int) -> Optional[Player]:
        if 0 <= player_id < self.num_players:
            return self.state.players[player_id]
        return None

    def _reject_reason(self, player: Player, needs_chips: bool = True) -> Optional[str]:
        """Why this player cannot act right now, or None if they can."""
        if not self.is_hand_running():
            return "No hand in progress"
        if player.is_folded:
            return "Player has folded"
        if player.is_all_in:
            return "Player is all-in"
        if needs_chips and player.chips <= 0:
            return "Player has no chips"
        if player.id != self.state.current_player_index:
            return "Not your turn"
        return None

    def _bet(self, player: Player, amount: int, action_type: Optional[ActionType] = None) -> ActionResult:
        reason = self._reject_reason(player)
        if reason:
            return ActionResult(False, reason)
        if amount <= 0:
            return ActionResult(False, "Bet amount must be positive")

        state = self.state
        prev_bet = state.current_bet
        min_raise = calculate_min_raise(prev_bet, state.last_raise_amount, state.big_blind)

        to_call = prev_bet - player.current_bet
        if amount < player.chips and (amount < min_raise or amount < to_call):
            return self._call(player)

        wagered = player.wager(amount)
        state.pot += wagered

        if player.current_bet > prev_bet:
            state.last_raise_amount = player.current_bet - prev_bet
            state.current_bet = player.current_bet
            state.last_to_act_index = player.id
            # A new high bet reopens the action for everyone else
            for other in state.players:
                if other is not player:
                    other.has_acted = False
            if prev_bet == 0:
                message = f"bets {player.current_bet}"
                action_type = action_type or ActionType.BET
            else:
                message = f"raises to {player.current_bet}"
                action_type = action_type or ActionType.RAISE
        else:
            message = f"calls {wagered}"
            action_type = action_type or ActionType.CALL

        if player.is_all_in:
            message += " (all-in)"
        return self._finish_action(player, action_type, wagered, message)

    def _check(self, player: Player) -> ActionResult:
        reason = self._reject_reason(player)
        if reason:
            return ActionResult(False, reason)
        if player.current_bet != self.state.current_bet:
            to_call = self.state.current_bet - player.current_bet
            return ActionResult(False, f"Cannot check, must call {to_call}")
        return self._finish_action(player, ActionType.CHECK, 0, "checks")

    def _call(self, player: Player) -> ActionResult:
        reason = self._reject_reason(player)
        if reason:
            return ActionResult(False, reason)

        to_call = self.state.current_bet - player.current_bet
        if to_call <= 0:
            return self._check(player)

        wagered = player.wager(to_call)
        self.state.pot += wagered
        message = f"calls {wagered}" + (" (all-in)" if player.is_all_in else "")
        return self._finish_action(player, ActionType.CALL, wagered, message)

    def _fold(self, player: Player) -> ActionResult:
        reason = self._reject_reason(player, needs_chips=False)
        if reason:
            return ActionResult(False, reason)
        player.is_folded = True
        return self._finish_action(player, ActionType.FOLD, 0, "folds")

    def _all_in(self, player: Player) -> ActionResult:
        reason = self._reject_reason(player)
        if reason:
            return ActionResult(False, reason)
        return self._bet(player, player.chips, ActionType.ALL_IN)

    def _finish_action(
        self,
        player: Player,
        action_type: ActionType,
        amount: int,
        message: str,
    ) -> ActionResult:
        player.has_acted = True
        self.state.logs.append(f"{player.name} {message}")
        logger.debug(f"Seat {player.id} ({player.name}) {message}")
        self._post_action(player.id)
        return ActionResult(True, message, action_type, amount)

    # ============= Flow =============

    def _post_action(self, origin: int) -> None:
        """Advance the turn, finish the street and run out the board as needed."""
        state = self.state
        state.betting_actions += 1

        if sum(1 for p in state.players if not p.is_folded) == 1:
            state.stage = GameStage.SHOWDOWN
            self._settle()
            return

        self._advance_from(origin)

        if self._is_betting_round_complete(origin):
            self._next_stage()
            if state.stage != GameStage.SHOWDOWN:
                if sum(1 for p in state.players if p.can_act) <= 1:
                    self._run_out_board()
                else:
                    self._advance_from(state.dealer_position)

        if state.stage == GameStage.SHOWDOWN:
            self._settle()

    def _advance_from(self, start: int) -> None:
        """Give the action to the next seat that is neither folded nor out of chips."""
        n = self.num_players
        for offset in range(1, n + 1):
            seat = (start + offset) % n
            candidate = self.state.players[seat]
            if not candidate.is_folded and candidate.chips > 0:
                self.state.current_player_index = seat
                return

    def _is_betting_round_complete(self, origin: int) -> bool:
        """
        Check if the current street is finished.

        Every player who can still bet must have matched the high bet, and
        the action must have come back around: either the closing seat just
        acted or everyone has acted since the last raise.
        """
        state = self.state
        contenders = [p for p in state.players if p.can_act]
        if not contenders:
            return True
        if any(p.current_bet != state.current_bet for p in contenders):
            return False
        return origin == state.last_to_act_index or all(p.has_acted for p in contenders)

    def _next_stage(self) -> None:
        """Move to the next street: burn one, deal the board cards, reset bets."""
        state = self.state
        if state.stage == GameStage.SHOWDOWN:
            return
        if state.stage == GameStage.RIVER:
            state.stage = GameStage.SHOWDOWN
            return

        state.stage = next_stage(state.stage)
        state.logs.append(f"--- {state.stage.value} ---")
        state.deck.burn()
        state.community_cards.extend(state.deck.draw(CARDS_FOR_STREET[state.stage]))
        self._reset_round_bets()

    def _run_out_board(self) -> None:
        """Deal the remaining streets without betting."""
        while self.state.stage != GameStage.SHOWDOWN:
            self._next_stage()

    def _reset_round_bets(self) -> None:
        state = self.state
        for player in state.players:
            player.reset_for_new_street()
        state.current_bet = 0

        # The street closes on the dealer, or the nearest live seat before it
        n = self.num_players
        for offset in range(n):
            seat = (state.dealer_position - offset) % n
            if not state.players[seat].is_folded:
                state.last_to_act_index = seat
                break

        state.last_raise_amount = state.big_blind

    # ============= Showdown =============

    @_serialized
    def settle_pot(self) -> List[PotAward]:
        """
        Pay out the pot. Runs automatically on reaching Showdown and only once.

        Returns:
            The awards made, one entry per (pot, winner)
        """
        if self.state.stage != GameStage.SHOWDOWN or self.state.hand_number == 0:
            return []
        return list(self._settle())

    def _settle(self) -> List[PotAward]:
        state = self.state
        if state.settled:
            return state.winners

        remaining = [p for p in state.players if not p.is_folded]
        awards: List[PotAward] = []

        if len(remaining) == 1:
            winner = remaining[0]
            winner.chips += state.pot
            awards.append(PotAward(winner.id, state.pot, "All other players folded"))
        else:
            self._calculate_side_pots()
            evaluations = self._evaluate_players(remaining)
            for pot in state.side_pots:
                awards.extend(self._award_pot(pot, evaluations))

        for award in awards:
            name = state.players[award.player_id].name
            state.logs.append(f"{name} wins {award.amount}" + (f" with {award.description}" if award.description else ""))

        state.winners = awards
        state.settled = True
        logger.info(f"Hand #{state.hand_number} settled: {[(a.player_id, a.amount) for a in awards]}")
        return awards

    def _calculate_side_pots(self) -> None:
        """
        Split the pot by all-in levels.

        Folded players' chips stay in the pots they reached but those players
        are never eligible. Pots always sum to the total contributed.
        """
        state = self.state
        contributors = [p for p in state.players if p.total_bet_in_round > 0]
        live = [p for p in contributors if not p.is_folded]
        levels = sorted({p.total_bet_in_round for p in live if p.is_all_in})

        pots: List[SidePot] = []
        previous = 0
        for level in levels:
            amount = sum(max(0, min(p.total_bet_in_round, level) - previous) for p in contributors)
            if amount > 0:
                eligible = [p.id for p in live if p.total_bet_in_round >= level]
                pots.append(SidePot(amount, eligible))
            previous = level

        main_amount = sum(max(0, p.total_bet_in_round - previous) for p in contributors)
        if main_amount > 0:
            eligible = [p.id for p in live if p.total_bet_in_round > previous]
            if eligible:
                pots.append(SidePot(main_amount, eligible))
            elif pots:
                # Dead money above every live stake
                pots[-1].amount += main_amount
            else:
                pots.append(SidePot(main_amount, [p.id for p in live]))

        state.side_pots = pots

    def _evaluate_players(self, players: List[Player]) -> Dict[int, HandEvaluation]:
        evaluations: Dict[int, HandEvaluation] = {}
        for player in players:
            try:
                evaluations[player.id] = evaluate_hand(player.hole_cards + self.state.community_cards)
            except InsufficientCards:
                logger.debug(f"No evaluation for seat {player.id}: not enough cards")
        return evaluations

    def _award_pot(self, pot: SidePot, evaluations: Dict[int, HandEvaluation]) -> List[PotAward]:
        """Give one pot to its best hand(s); split evenly without evaluations."""
        eligible = [self.state.players[pid] for pid in pot.eligible_players]
        if not eligible:
            return []

        scored = [p for p in eligible if p.id in evaluations]
        if scored:
            best_value = max(evaluations[p.id].value for p in scored)
            pot_winners = [p for p in scored if evaluations[p.id].value == best_value]
        else:
            pot_winners = eligible

        share, remainder = divmod(pot.amount, len(pot_winners))
        awards = []
        # Odd chips go to the tied winners closest to the left of the dealer
        for i, winner in enumerate(self._clockwise_from_dealer(pot_winners)):
            amount = share + (1 if i < remainder else 0)
            winner.chips += amount
            evaluation = evaluations.get(winner.id)
            awards.append(PotAward(winner.id, amount, evaluation.description if evaluation else None))
        return awards

    def _clockwise_from_dealer(self, players: List[Player]) -> List[Player]:
        n = self.num_players
        dealer = self.state.dealer_position
        return sorted(players, key=lambda p: (p.id - dealer - 1) % n)

    @_serialized
    def evaluate_winners(self) -> Tuple[List[Player], Dict[int, HandEvaluation]]:
        """
        Best hand(s) among the players still in the hand.

        Returns:
            Tuple of (winners, evaluations by seat). With one player left no
            evaluation is made; with no evaluable hand everyone left wins.
        """
        active = [p for p in self.state.players if not p.is_folded and p.is_active]
        if len(active) == 1:
            return [copy.deepcopy(active[0])], {}

        evaluations = self._evaluate_players(active)
        if not evaluations:
            return copy.deepcopy(active), evaluations

        best_value = max(e.value for e in evaluations.values())
        winners = [self.state.players[pid] for pid, e in evaluations.items() if e.value == best_value]
        return copy.deepcopy(winners), evaluations

    @_serialized
    def get_hand_evaluation(self, player_id: int) -> Optional[HandEvaluation]:
        """Evaluation of a seat's best hand, or None before 5 cards are known."""
        player = self._get_player(player_id)
        if player is None:
            return None
        try:
            return evaluate_hand(player.hole_cards + self.state.community_cards)
        except InsufficientCards:
            return None

    @_serialized
    def get_legal_actions(self) -> List[Dict[str, Any]]:
        """
        Legal actions for the seat to act.

        Returns:
            List of action dicts with type and constraints
        """
        player = self.current_player
        if player is None or not player.can_act:
            return []

        state = self.state
        to_call = max(0, state.current_bet - player.current_bet)
        actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]

        if to_call == 0:
            actions.append({"type": ActionType.CHECK.value})
        else:
            actions.append({"type": ActionType.CALL.value, "amount": min(to_call, player.chips)})

        if player.chips > to_call:
            min_raise = calculate_min_raise(state.current_bet, state.last_raise_amount, state.big_blind)
            actions.append({
                "type": (ActionType.BET if state.current_bet == 0 else ActionType.RAISE).value,
                "min": min(max(min_raise, to_call + 1), player.chips),
                "max": player.chips,
            })

        actions.append({"type": ActionType.ALL_IN.value, "amount": player.chips})
        return actions
