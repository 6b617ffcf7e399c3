from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple

import numpy as np

FACE_VALUES = tuple(range(0, 13))
FLIP_7_BONUS = 15


@dataclass(frozen=True)
class UnknownPool:
    """
    Unseen copies of each number card, derived from the deck and what has
    been revealed so far. `remaining[v]` is the count for face v.
    """

    remaining: Tuple[int, ...]
    total: int

    def __getitem__(self, face: int) -> int:
        if 0 <= face < len(self.remaining):
            return self.remaining[face]
        return 0

    def probability_of(self, faces: Iterable[int]) -> float:
        if self.total <= 0:
            return 0.0
        num = 0
        for f in faces:
            num += self[f]
        return num / self.total

    def as_dict(self) -> Dict[int, int]:
        return dict(enumerate(self.remaining))


@dataclass(frozen=True)
class DeckComposition:
    """
    Flip 7 number-card composition (79 cards).

    - 2..12: value N has N copies
    - 1: 1 copy
    - 0: 1 copy

    Action and modifier cards never bust and are not tracked here.
    """

    counts: Tuple[int, ...]

    @staticmethod
    def standard() -> "DeckComposition":
        counts = [1, 1]
        for n in range(2, 13):
            counts.append(n)
        return DeckComposition(counts=tuple(counts))

    def total_cards(self) -> int:
        return sum(self.counts)

    def max_count(self, face: int) -> int:
        return self.counts[face]

    def unknown_pool(self, revealed: Mapping[int, int]) -> UnknownPool:
        seen = np.zeros(len(self.counts), dtype=np.int64)
        for k, v in revealed.items():
            k = int(k)
            if not 0 <= k < len(self.counts):
                raise ValueError(f"Card {k} is not a number card (0-{len(self.counts) - 1})")
            seen[k] = int(v)
        # over-revealed faces clamp to zero instead of going negative
        left = np.clip(np.asarray(self.counts, dtype=np.int64) - seen, 0, None)
        return UnknownPool(remaining=tuple(int(x) for x in left), total=int(left.sum()))


STANDARD_DECK = DeckComposition.standard()
TOTAL_NUMBER_CARDS = STANDARD_DECK.total_cards()


@dataclass(frozen=True)
class DeckInfo:
    composition: Tuple[int, ...]
    total_cards: int
    flip7_bonus: int


def get_deck_info(composition: DeckComposition | None = None) -> DeckInfo:
    deck = composition or STANDARD_DECK
    return DeckInfo(composition=deck.counts, total_cards=deck.total_cards(), flip7_bonus=FLIP_7_BONUS)


def unknown_pool(revealed: Mapping[int, int], composition: DeckComposition | None = None) -> UnknownPool:
    return (composition or STANDARD_DECK).unknown_pool(revealed)
