#!/usr/bin/env python3
"""
fairholdem command line.

Usage:
    python -m fairholdem shuffle SEED
    python -m fairholdem commit [--salt HEX]
    python -m fairholdem verify --salt-hash HEX --random-value HEX --salt HEX \
        --cards 12,40,7 --positions 0,1,2
    python -m fairholdem play [--players alice,bob] [--chips 1000]
"""

import argparse
import logging
import sys
from typing import List, Optional

from fairholdem import __version__
from fairholdem.core.card import Card
from fairholdem.core.game import PokerEngine
from fairholdem.core.rules import (
    ActionType, DEFAULT_BIG_BLIND, DEFAULT_BUY_IN, DEFAULT_SMALL_BLIND,
)
from fairholdem.fairness.dealer import FairDealer, LocalRandomnessProvider
from fairholdem.fairness.errors import FairnessError
from fairholdem.fairness.ledger import CommitmentLedger
from fairholdem.fairness.shuffle import (
    generate_salt, hash_salt, packed_deck_for_seed, to_bytes32, to_hex,
)
from fairholdem.fairness.verifier import verify_deal
from fairholdem.schemas import RevealRequest


def _parse_word(value: str):
    """A 256-bit value given as decimal, or as hex with a 0x prefix."""
    if value.startswith(("0x", "0X")):
        return value
    if value.isdigit():
        return int(value)
    raise ValueError(f"Expected a decimal number or 0x-prefixed hex, got {value!r}")


def _parse_cards(value: str) -> List[int]:
    """Comma separated card indices or card strings ("12,As,Td")."""
    cards = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        cards.append(int(item) if item.isdigit() else Card.from_string(item).to_int())
    return cards


def cmd_shuffle(args) -> int:
    packed = packed_deck_for_seed(_parse_word(args.seed))
    print(f"packed: {to_hex(packed)}")
    print("cards:  " + " ".join(str(Card.from_int(i)) for i in packed))
    return 0


def cmd_commit(args) -> int:
    salt = to_bytes32(args.salt) if args.salt else generate_salt()
    print(f"salt:      {to_hex(salt)}")
    print(f"salt hash: {to_hex(hash_salt(salt))}")
    return 0


def cmd_verify(args) -> int:
    request = RevealRequest(
        game_id="cli",
        salt=args.salt,
        dealt_cards=_parse_cards(args.cards),
        card_positions=[int(p) for p in args.positions.split(",") if p.strip()],
    )
    try:
        result = verify_deal(
            args.salt_hash,
            args.random_value,
            request.salt,
            request.dealt_cards,
            request.card_positions,
        )
    except FairnessError as e:
        print(f"fairness check failed: {e}")
        return 1

    print(f"final seed: {to_hex(result.final_seed)}")
    if result.valid:
        print(f"valid: {len(request.dealt_cards)} dealt cards match the shuffle")
        return 0
    print(f"INVALID: pair {result.mismatch_index} does not match the shuffle")
    return 1


def cmd_play(args) -> int:
    names = [n.strip() for n in args.players.split(",") if n.strip()]
    ledger = CommitmentLedger()
    dealer = FairDealer(ledger)
    provider = LocalRandomnessProvider(ledger.fulfill_randomness)

    salt_hash = dealer.begin_game(args.game_id)
    print(f"committed salt hash {to_hex(salt_hash)}")
    sequence_id = dealer.request_shuffle(args.game_id, provider)
    random_value = provider.deliver(sequence_id)
    print(f"randomness {to_hex(random_value)} (sequence {sequence_id})")

    engine = PokerEngine(
        names,
        starting_chips=args.chips,
        small_blind=args.small_blind,
        big_blind=args.big_blind,
    )
    engine.start_new_hand(dealer.packed_deck(args.game_id))

    # Everyone checks or calls down
    while engine.is_hand_running():
        legal = {a["type"] for a in engine.get_legal_actions()}
        if not legal:
            break
        action = ActionType.CHECK if ActionType.CHECK.value in legal else ActionType.CALL
        engine.take_action(engine.state.current_player_index, action)

    state = engine.get_state()
    for line in state.logs:
        print(line)
    print("board: " + " ".join(str(c) for c in state.community_cards))
    for player in state.players:
        print(f"  {player}")

    result = dealer.reveal(args.game_id, *engine.dealt_card_positions())
    dealer.cleanup(args.game_id)
    print(f"final seed {to_hex(result.final_seed)}: {'verified' if result.valid else 'FAILED'}")
    return 0 if result.valid else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fairholdem", description="Provably fair Texas Hold'em")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("shuffle", help="Print the deck for a seed")
    p.add_argument("seed", help="256-bit seed, decimal or 0x-prefixed hex")
    p.set_defaults(func=cmd_shuffle)

    p = sub.add_parser("commit", help="Generate a salt and its commitment")
    p.add_argument("--salt", help="Use this 32-byte hex salt instead of a random one")
    p.set_defaults(func=cmd_commit)

    p = sub.add_parser("verify", help="Replay a deal and check the dealt cards")
    p.add_argument("--salt-hash", required=True)
    p.add_argument("--random-value", required=True, type=_parse_word)
    p.add_argument("--salt", required=True)
    p.add_argument("--cards", required=True, help="Dealt cards, e.g. 12,40,7 or As,Kd")
    p.add_argument("--positions", required=True, help="Deck positions, e.g. 0,1,2")
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("play", help="Play one fair hand locally and verify it")
    p.add_argument("--game-id", default="local-1")
    p.add_argument("--players", default="alice,bob", help="Comma separated seat names")
    p.add_argument("--chips", type=int, default=DEFAULT_BUY_IN)
    p.add_argument("--small-blind", type=int, default=DEFAULT_SMALL_BLIND)
    p.add_argument("--big-blind", type=int, default=DEFAULT_BIG_BLIND)
    p.set_defaults(func=cmd_play)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return args.func(args)
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
