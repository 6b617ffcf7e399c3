from __future__ import annotations

import argparse
from typing import List, Tuple

from .decision_engine import DecisionEngine
from .deck_engine import FACE_VALUES, STANDARD_DECK
from .probability import FLIP_7_DECAY, SECOND_CHANCE_DAMPING
from .report import format_report
from .state import RoundState


def _parse_seen(token: str) -> Tuple[int, int]:
    face, _, count = token.partition(":")
    try:
        parsed = int(face), int(count) if count else 1
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected FACE or FACE:COUNT, got {token!r}")
    if parsed[1] < 1:
        raise argparse.ArgumentTypeError(f"Count must be at least 1, got {token!r}")
    return parsed


def build_state(hand: List[int], seen: List[Tuple[int, int]], second_chance: bool, x2: bool) -> RoundState:
    """Replay the command-line observations onto a fresh round."""
    state = RoundState()
    for face in hand:
        if face not in FACE_VALUES:
            raise ValueError(f"Card {face} is not a number card (0-12)")
        if face in state.hand:
            raise ValueError(f"Card {face} given twice in hand")
        state = state.toggle_card(face)

    for face, count in seen:
        if face not in FACE_VALUES:
            raise ValueError(f"Card {face} is not a number card (0-12)")
        for _ in range(count):
            nxt = state.reveal(face)
            if nxt is state:
                raise ValueError(f"Too many {face}s revealed (deck has {STANDARD_DECK.max_count(face)})")
            state = nxt

    if second_chance:
        state = state.toggle_second_chance()
    if x2:
        state = state.toggle_x2()
    state.validate()
    return state


def main() -> None:
    parser = argparse.ArgumentParser(description="Should you HIT or STAY? Flip 7 advice from the cards seen this round.")
    parser.add_argument("--hand", type=int, nargs="*", default=[], help="Number cards in your line (unique, 0-12).")
    parser.add_argument(
        "--seen",
        type=_parse_seen,
        nargs="*",
        default=[],
        help="Cards revealed by other players, as FACE or FACE:COUNT (your own cards are counted automatically).",
    )
    parser.add_argument("--second-chance", action="store_true", help="You hold Second Chance.")
    parser.add_argument("--x2", action="store_true", help="You hold the x2 modifier.")
    parser.add_argument(
        "--damping",
        type=float,
        default=SECOND_CHANCE_DAMPING,
        help=f"Second Chance damping factor (default: {SECOND_CHANCE_DAMPING}).",
    )
    parser.add_argument(
        "--decay",
        type=float,
        default=FLIP_7_DECAY,
        help=f"Flip 7 potential decay per missing card (default: {FLIP_7_DECAY}).",
    )

    args = parser.parse_args()

    try:
        state = build_state(args.hand, args.seen, args.second_chance, args.x2)
    except ValueError as exc:
        raise SystemExit(str(exc))

    decision = DecisionEngine(second_chance_damping=args.damping, flip7_decay=args.decay)
    print(format_report(state, decision.compute(state)))


if __name__ == "__main__":
    main()
