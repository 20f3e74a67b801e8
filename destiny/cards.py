from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .errors import InvalidDrawSize

MIN_DRAW = 1
MAX_DRAW = 10

RANK_CHARS = "23456789TJQKA"
RANK_VALUE = {char: idx for idx, char in enumerate(RANK_CHARS, start=2)}
RANKS = tuple(range(2, 15))

RANK_NAMES = {
    2: "Two",
    3: "Three",
    4: "Four",
    5: "Five",
    6: "Six",
    7: "Seven",
    8: "Eight",
    9: "Nine",
    10: "Ten",
    11: "Jack",
    12: "Queen",
    13: "King",
    14: "Ace",
}


class Suit(str, Enum):
    SPADES = "SPADES"
    HEARTS = "HEARTS"
    CLUBS = "CLUBS"
    DIAMONDS = "DIAMONDS"

    @property
    def short(self) -> str:
        return self.value[0].lower()


SUITS = tuple(Suit)
SUIT_BY_SHORT = {suit.short: suit for suit in SUITS}


@dataclass(frozen=True)
class Card:
    rank: int
    suit: Suit

    def __post_init__(self) -> None:
        if isinstance(self.rank, bool) or self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{RANK_CHARS[self.rank - 2]}{self.suit.short}"


# The 52 distinct card values every draw samples from.
UNIVERSE = tuple(Card(rank, suit) for suit in SUITS for rank in RANKS)

_SEED_SOURCE = random.SystemRandom()


def new_seed() -> int:
    """Fresh 32-bit seed from OS entropy; safe to call from any thread."""
    return _SEED_SOURCE.getrandbits(32)


def draw(count: int, seed: Optional[int] = None) -> List[Card]:
    """Draw ``count`` cards with replacement.

    Every call owns its generator, so concurrent draws never share RNG state.
    The same seed always yields the same cards.
    """
    if isinstance(count, bool) or not isinstance(count, int) or not MIN_DRAW <= count <= MAX_DRAW:
        raise InvalidDrawSize(count)
    rng = random.Random(seed)
    return [rng.choice(UNIVERSE) for _ in range(count)]


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    rank = RANK_VALUE.get(label[0].upper())
    if rank is None:
        raise ValueError(f"Invalid rank: {label[0]}")
    suit = SUIT_BY_SHORT.get(label[1].lower())
    if suit is None:
        raise ValueError(f"Invalid suit: {label[1]}")
    return Card(rank, suit)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
