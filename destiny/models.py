from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .affinity import SuitBonuses, SuitWeights
from .cards import Card
from .evaluator import HandRank
from .rewards import Rewards, RewardTable


class ActionType(str, Enum):
    CRIME = "CRIME"
    COMBAT = "COMBAT"
    CRAFT = "CRAFT"
    SOCIAL = "SOCIAL"
    HUNT = "HUNT"


@dataclass(frozen=True)
class ActionDefinition:
    # Supplied by the action catalog; the engine only checks cards_to_draw.
    action_id: str
    name: str
    cards_to_draw: int
    threshold: int
    suit_weights: SuitWeights = field(default_factory=SuitWeights)
    reward_table: RewardTable = field(default_factory=RewardTable)
    action_type: ActionType = ActionType.SOCIAL
    description: str = ""


@dataclass(frozen=True)
class ActionResult:
    character_id: str
    action_id: str
    cards_drawn: Tuple[Card, ...]
    hand_rank: HandRank
    hand_score: int
    hand_description: str
    suit_bonuses: SuitBonuses
    total_score: int
    success: bool
    rewards_gained: Rewards
    timestamp: datetime
    threshold: int
    seed: Optional[int] = None

    @property
    def margin(self) -> int:
        return self.total_score - self.threshold
