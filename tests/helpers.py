from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from destiny.affinity import SuitWeights
from destiny.engine import ResolutionEngine
from destiny.models import ActionDefinition, ActionType
from destiny.rewards import RewardEntry, RewardTable, RewardTier

FIXED_TIME = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def create_engine(now: datetime = FIXED_TIME) -> ResolutionEngine:
    """Engine with a frozen clock so results compare equal across runs."""
    return ResolutionEngine(clock=lambda: now)


def simple_table(margin_cap: int = 50) -> RewardTable:
    entries: Dict[Tuple[bool, RewardTier], RewardEntry] = {
        (True, RewardTier.COMMON): RewardEntry(xp=10, gold=5, xp_per_margin=1, gold_per_margin=1),
        (True, RewardTier.UNCOMMON): RewardEntry(xp=20, gold=10, xp_per_margin=1, gold_per_margin=1),
        (True, RewardTier.RARE): RewardEntry(xp=40, gold=20, items=("rare_pelt",), xp_per_margin=2),
        (True, RewardTier.LEGENDARY): RewardEntry(xp=80, gold=40, items=("golden_idol",), xp_per_margin=3),
        (False, RewardTier.COMMON): RewardEntry(xp=2),
    }
    return RewardTable(entries=entries, margin_cap=margin_cap)


def make_action(
    *,
    action_id: str = "test_action",
    cards_to_draw: int = 5,
    threshold: int = 200,
    weights: Optional[SuitWeights] = None,
    table: Optional[RewardTable] = None,
) -> ActionDefinition:
    return ActionDefinition(
        action_id=action_id,
        name=action_id.replace("_", " ").title(),
        cards_to_draw=cards_to_draw,
        threshold=threshold,
        suit_weights=weights or SuitWeights(),
        reward_table=table or simple_table(),
        action_type=ActionType.HUNT,
    )
