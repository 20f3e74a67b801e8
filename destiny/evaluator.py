from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .cards import RANK_NAMES, SUITS, Card, Suit
from .errors import UnrankableHand

# Straights and flushes need this many cards; smaller hands top out at quads.
RUN_LENGTH = 5
CATEGORY_WEIGHT = 100


class HandRank(IntEnum):
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def label(self) -> str:
        return HAND_LABELS[self]


HAND_LABELS = {
    HandRank.HIGH_CARD: "High Card",
    HandRank.PAIR: "Pair",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.STRAIGHT: "Straight",
    HandRank.FLUSH: "Flush",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.ROYAL_FLUSH: "Royal Flush",
}

RANK_PLURALS = {rank: name + ("es" if name == "Six" else "s") for rank, name in RANK_NAMES.items()}


@dataclass(frozen=True)
class HandEvaluation:
    rank: HandRank
    score: int
    description: str
    tiebreak: int
    kicker_total: int = 0

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        # Total order: category, then the cards forming it, then everything else.
        return (int(self.rank), self.tiebreak, self.kicker_total)


@dataclass(frozen=True)
class _Made:
    rank: HandRank
    tiebreak: int
    used_total: int
    description: str


def evaluate(cards: Sequence[Card]) -> HandEvaluation:
    """Classify 1-10 drawn cards into their best category and base score.

    ``score`` is ``rank * 100`` plus the rank sum of the cards forming the
    category, which never reaches 100, so a higher category always scores
    higher. Kickers do not enter the score; they only break ties in
    ``sort_key``.
    """
    if not cards:
        raise UnrankableHand("Cannot evaluate an empty hand")

    counts = Counter(card.rank for card in cards)
    by_suit: Dict[Suit, List[int]] = {}
    for card in cards:
        by_suit.setdefault(card.suit, []).append(card.rank)

    made: Optional[_Made] = None
    if len(cards) >= RUN_LENGTH:
        made = _straight_flush(by_suit)
    made = (
        made
        or _four_of_a_kind(counts)
        or _full_house(counts)
        or (_flush(by_suit) if len(cards) >= RUN_LENGTH else None)
        or (_straight(counts) if len(cards) >= RUN_LENGTH else None)
        or _three_of_a_kind(counts)
        or _two_pair(counts)
        or _pair(counts)
        or _high_card(counts)
    )
    if made is None:
        raise UnrankableHand(f"No category matched {len(cards)} cards")

    total = sum(card.rank for card in cards)
    return HandEvaluation(
        rank=made.rank,
        score=int(made.rank) * CATEGORY_WEIGHT + made.tiebreak,
        description=made.description,
        tiebreak=made.tiebreak,
        kicker_total=total - made.used_total,
    )


def straight_high(ranks: Set[int]) -> Optional[int]:
    """Highest card of the best five-card run, or None. The wheel reports 5."""
    present = set(ranks)
    if 14 in present:  # Ace low
        present.add(1)
    for high in range(14, 4, -1):
        if all(value in present for value in range(high - 4, high + 1)):
            return high
    return None


def _run_totals(high: int) -> Tuple[int, int]:
    # (tiebreak, face total); the wheel scores its ace as 1 but the card is still an Ace.
    tiebreak = sum(range(high - 4, high + 1))
    used_total = tiebreak + 13 if high == 5 else tiebreak
    return tiebreak, used_total


def _straight_flush(by_suit: Dict[Suit, List[int]]) -> Optional[_Made]:
    best: Optional[Tuple[int, Suit]] = None
    for suit in SUITS:
        ranks = by_suit.get(suit, [])
        if len(ranks) < RUN_LENGTH:
            continue
        high = straight_high(set(ranks))
        if high is not None and (best is None or high > best[0]):
            best = (high, suit)
    if best is None:
        return None
    high, suit = best
    tiebreak, used_total = _run_totals(high)
    if high == 14:
        return _Made(HandRank.ROYAL_FLUSH, tiebreak, used_total, f"Royal Flush, {suit.value.title()}")
    return _Made(HandRank.STRAIGHT_FLUSH, tiebreak, used_total, f"Straight Flush, {RANK_NAMES[high]} High")


def _four_of_a_kind(counts: Counter) -> Optional[_Made]:
    quads = [rank for rank, count in counts.items() if count >= 4]
    if not quads:
        return None
    rank = max(quads)
    return _Made(HandRank.FOUR_OF_A_KIND, 4 * rank, 4 * rank, f"Four of a Kind, {RANK_PLURALS[rank]}")


def _full_house(counts: Counter) -> Optional[_Made]:
    trips = [rank for rank, count in counts.items() if count >= 3]
    if not trips:
        return None
    top = max(trips)
    pairs = [rank for rank, count in counts.items() if count >= 2 and rank != top]
    if not pairs:
        return None
    pair = max(pairs)
    tiebreak = 3 * top + 2 * pair
    return _Made(
        HandRank.FULL_HOUSE,
        tiebreak,
        tiebreak,
        f"Full House, {RANK_PLURALS[top]} over {RANK_PLURALS[pair]}",
    )


def _flush(by_suit: Dict[Suit, List[int]]) -> Optional[_Made]:
    best: Optional[Tuple[List[int], Suit]] = None
    for suit in SUITS:
        ranks = by_suit.get(suit, [])
        if len(ranks) < RUN_LENGTH:
            continue
        top = sorted(ranks, reverse=True)[:RUN_LENGTH]
        if best is None or top > best[0]:
            best = (top, suit)
    if best is None:
        return None
    top, suit = best
    return _Made(HandRank.FLUSH, sum(top), sum(top), f"Flush, {suit.value.title()}")


def _straight(counts: Counter) -> Optional[_Made]:
    high = straight_high(set(counts))
    if high is None:
        return None
    tiebreak, used_total = _run_totals(high)
    return _Made(HandRank.STRAIGHT, tiebreak, used_total, f"Straight, {RANK_NAMES[high]} High")


def _three_of_a_kind(counts: Counter) -> Optional[_Made]:
    trips = [rank for rank, count in counts.items() if count >= 3]
    if not trips:
        return None
    rank = max(trips)
    return _Made(HandRank.THREE_OF_A_KIND, 3 * rank, 3 * rank, f"Three of a Kind, {RANK_PLURALS[rank]}")


def _two_pair(counts: Counter) -> Optional[_Made]:
    pairs = sorted((rank for rank, count in counts.items() if count >= 2), reverse=True)
    if len(pairs) < 2:
        return None
    high, low = pairs[0], pairs[1]
    tiebreak = 2 * high + 2 * low
    return _Made(
        HandRank.TWO_PAIR,
        tiebreak,
        tiebreak,
        f"Two Pair, {RANK_PLURALS[high]} and {RANK_PLURALS[low]}",
    )


def _pair(counts: Counter) -> Optional[_Made]:
    pairs = [rank for rank, count in counts.items() if count >= 2]
    if not pairs:
        return None
    rank = max(pairs)
    return _Made(HandRank.PAIR, 2 * rank, 2 * rank, f"Pair, {RANK_PLURALS[rank]}")


def _high_card(counts: Counter) -> Optional[_Made]:
    if not counts:
        return None
    rank = max(counts)
    return _Made(HandRank.HIGH_CARD, rank, rank, f"High Card, {RANK_NAMES[rank]}")
