from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence

from .cards import Card, Suit


@dataclass(frozen=True)
class SuitWeights:
    """Per-suit multipliers an action applies to the cards drawn for it."""

    spades: int = 0
    hearts: int = 0
    clubs: int = 0
    diamonds: int = 0

    def __post_init__(self) -> None:
        for suit in Suit:
            value = getattr(self, suit.name.lower())
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Suit weight for {suit.value} must be an integer")
            if value < 0:
                raise ValueError(f"Suit weight for {suit.value} must be non-negative")

    def weight(self, suit: Suit) -> int:
        return getattr(self, suit.name.lower())

    def as_dict(self) -> Dict[str, int]:
        return {suit.name.lower(): self.weight(suit) for suit in Suit}

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> "SuitWeights":
        unknown = set(data) - {suit.name.lower() for suit in Suit}
        if unknown:
            raise ValueError(f"Unknown suit weights: {sorted(unknown)}")
        return cls(**data)


@dataclass(frozen=True)
class SuitBonuses:
    spades: int = 0
    hearts: int = 0
    clubs: int = 0
    diamonds: int = 0

    @property
    def total(self) -> int:
        return self.spades + self.hearts + self.clubs + self.diamonds

    def bonus(self, suit: Suit) -> int:
        return getattr(self, suit.name.lower())

    def as_dict(self) -> Dict[str, int]:
        return {suit.name.lower(): self.bonus(suit) for suit in Suit}


def score_suits(cards: Sequence[Card], weights: SuitWeights) -> SuitBonuses:
    counts = Counter(card.suit for card in cards)
    return SuitBonuses(**{suit.name.lower(): counts[suit] * weights.weight(suit) for suit in Suit})
