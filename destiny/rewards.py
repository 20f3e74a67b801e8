from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from .evaluator import HandRank


class RewardTier(str, Enum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    LEGENDARY = "LEGENDARY"


TIER_BY_RANK = {
    HandRank.HIGH_CARD: RewardTier.COMMON,
    HandRank.PAIR: RewardTier.COMMON,
    HandRank.TWO_PAIR: RewardTier.UNCOMMON,
    HandRank.THREE_OF_A_KIND: RewardTier.UNCOMMON,
    HandRank.STRAIGHT: RewardTier.RARE,
    HandRank.FLUSH: RewardTier.RARE,
    HandRank.FULL_HOUSE: RewardTier.RARE,
    HandRank.FOUR_OF_A_KIND: RewardTier.LEGENDARY,
    HandRank.STRAIGHT_FLUSH: RewardTier.LEGENDARY,
    HandRank.ROYAL_FLUSH: RewardTier.LEGENDARY,
}


def tier_for(rank: HandRank) -> RewardTier:
    return TIER_BY_RANK[rank]


def _require_non_negative(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class Rewards:
    xp: int = 0
    gold: int = 0
    items: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {"xp": self.xp, "gold": self.gold, "items": list(self.items)}


@dataclass(frozen=True)
class RewardEntry:
    xp: int = 0
    gold: int = 0
    items: Tuple[str, ...] = ()
    xp_per_margin: int = 0
    gold_per_margin: int = 0

    def __post_init__(self) -> None:
        for name in ("xp", "gold", "xp_per_margin", "gold_per_margin"):
            _require_non_negative(name, getattr(self, name))
        # Accept any iterable of item ids but store a tuple so entries stay hashable.
        object.__setattr__(self, "items", tuple(str(item) for item in self.items))


@dataclass(frozen=True)
class RewardTable:
    """Rewards keyed by ``(success, tier)``; margin scaling stops at ``margin_cap``."""

    entries: Mapping[Tuple[bool, RewardTier], RewardEntry] = field(default_factory=dict)
    margin_cap: int = 0

    def __post_init__(self) -> None:
        _require_non_negative("margin_cap", self.margin_cap)
        for key in self.entries:
            if not (isinstance(key, tuple) and len(key) == 2 and isinstance(key[1], RewardTier)):
                raise ValueError(f"Invalid reward table key: {key!r}")

    def lookup(self, success: bool, tier: RewardTier) -> RewardEntry:
        return self.entries.get((bool(success), tier), _EMPTY_ENTRY)


_EMPTY_ENTRY = RewardEntry()


def effective_margin(success: bool, margin: int, cap: int) -> int:
    # Failures never scale; successes scale linearly until the cap.
    if not success:
        return 0
    return min(max(margin, 0), cap)


def calculate_reward(success: bool, hand_rank: HandRank, margin: int, table: RewardTable) -> Rewards:
    entry = table.lookup(success, tier_for(hand_rank))
    scaled = effective_margin(success, margin, table.margin_cap)
    return Rewards(
        xp=entry.xp + entry.xp_per_margin * scaled,
        gold=entry.gold + entry.gold_per_margin * scaled,
        items=entry.items,
    )
