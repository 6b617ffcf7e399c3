from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Tuple

from flip7advisor.deck_engine import FACE_VALUES, STANDARD_DECK, DeckComposition

_NO_REVEALS = tuple(0 for _ in FACE_VALUES)


def _as_int(value: Any, what: str) -> int:
    # bool is an int subclass; JSON true/false are not card numbers
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Malformed round snapshot: {what} must be an integer, got {value!r}")
    return value


def _as_bool(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Malformed round snapshot: {what} must be true or false, got {value!r}")
    return value


def _as_face_key(key: Any) -> int:
    # JSON object keys arrive as strings
    if isinstance(key, str) and key.strip().lstrip("-").isdigit():
        return int(key)
    return _as_int(key, "revealed card")


@dataclass(frozen=True)
class RoundState:
    """
    Everything observed in the current round (own cards included).

    - hand: number cards in your line; a repeated value means you already busted
    - revealed: face-up count per face value 0..12, your own cards included
    - has_second_chance: whether you hold Second Chance right now
    - has_x2: whether x2 is currently held
    """

    hand: Tuple[int, ...] = ()
    revealed: Tuple[int, ...] = _NO_REVEALS
    has_second_chance: bool = False
    has_x2: bool = False

    @property
    def total_revealed(self) -> int:
        return sum(self.revealed)

    def revealed_counts(self) -> Dict[int, int]:
        return {v: c for v, c in enumerate(self.revealed) if c}

    def _with_revealed(self, face: int, count: int) -> Tuple[int, ...]:
        nxt = list(self.revealed)
        nxt[face] = count
        return tuple(nxt)

    def toggle_card(self, face: int, composition: DeckComposition = STANDARD_DECK) -> "RoundState":
        if face in self.hand:
            hand = list(self.hand)
            hand.remove(face)
            count = max(0, self.revealed[face] - 1)
            return replace(self, hand=tuple(hand), revealed=self._with_revealed(face, count))

        current = self.revealed[face]
        if current >= composition.max_count(face):
            return self
        return replace(self, hand=self.hand + (face,), revealed=self._with_revealed(face, current + 1))

    def reveal(self, face: int, composition: DeckComposition = STANDARD_DECK) -> "RoundState":
        current = self.revealed[face]
        if current >= composition.max_count(face):
            return self
        return replace(self, revealed=self._with_revealed(face, current + 1))

    def unreveal(self, face: int) -> "RoundState":
        # never below the copies you hold yourself
        if self.revealed[face] <= self.hand.count(face):
            return self
        return replace(self, revealed=self._with_revealed(face, self.revealed[face] - 1))

    def toggle_second_chance(self) -> "RoundState":
        return replace(self, has_second_chance=not self.has_second_chance)

    def toggle_x2(self) -> "RoundState":
        return replace(self, has_x2=not self.has_x2)

    def reset(self) -> "RoundState":
        return RoundState()

    def validate(self, composition: DeckComposition = STANDARD_DECK) -> None:
        if len(self.revealed) != len(composition.counts):
            raise ValueError(f"Expected {len(composition.counts)} revealed counts, got {len(self.revealed)}")
        for v in self.hand:
            if not 0 <= v < len(composition.counts):
                raise ValueError(f"Card {v} is not a number card (0-12)")
        for v, c in enumerate(self.revealed):
            if c < 0:
                raise ValueError(f"Revealed count for {v} is negative: {c}")
            if c > composition.max_count(v):
                raise ValueError(f"Revealed count for {v} exceeds deck maximum {composition.max_count(v)}: {c}")
        for v in set(self.hand):
            held = self.hand.count(v)
            if held > self.revealed[v]:
                raise ValueError(f"Holding {held}x {v} but only {self.revealed[v]} revealed")

    @staticmethod
    def from_dict(data: Mapping[str, Any], composition: DeckComposition = STANDARD_DECK) -> "RoundState":
        try:
            hand = tuple(_as_int(v, "hand card") for v in data.get("hand", ()))
            revealed = [0] * len(composition.counts)
            for k, c in dict(data.get("revealed", {})).items():
                k = _as_face_key(k)
                if not 0 <= k < len(revealed):
                    raise ValueError(f"Card {k} is not a number card (0-12)")
                revealed[k] = _as_int(c, f"revealed count for {k}")
            second_chance = _as_bool(data.get("second_chance", False), "second_chance")
            x2 = _as_bool(data.get("x2", False), "x2")
        except (TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed round snapshot: {exc}") from exc

        state = RoundState(
            hand=hand,
            revealed=tuple(revealed),
            has_second_chance=second_chance,
            has_x2=x2,
        )
        state.validate(composition)
        return state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand": list(self.hand),
            "revealed": {str(v): c for v, c in self.revealed_counts().items()},
            "second_chance": self.has_second_chance,
            "x2": self.has_x2,
        }
