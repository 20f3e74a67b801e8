from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from .affinity import SuitBonuses
from .cards import Card, cards_to_labels, parse_cards
from .errors import ResultInvariantError
from .evaluator import HandEvaluation, HandRank
from .models import ActionDefinition, ActionResult
from .rewards import Rewards

# The recorder only packages values; writing them anywhere is the caller's job.


def record(
    character_id: str,
    action: ActionDefinition,
    cards: Sequence[Card],
    evaluation: HandEvaluation,
    bonuses: SuitBonuses,
    total_score: int,
    success: bool,
    rewards: Rewards,
    timestamp: datetime,
    seed: Optional[int] = None,
) -> ActionResult:
    if len(cards) != action.cards_to_draw:
        raise ResultInvariantError(
            f"Drew {len(cards)} cards for {action.action_id}, expected {action.cards_to_draw}"
        )
    if total_score != evaluation.score + bonuses.total:
        raise ResultInvariantError(
            f"Total score {total_score} != hand {evaluation.score} + suits {bonuses.total}"
        )
    if success != (total_score >= action.threshold):
        raise ResultInvariantError(f"Success flag {success} disagrees with threshold {action.threshold}")

    return ActionResult(
        character_id=character_id,
        action_id=action.action_id,
        cards_drawn=tuple(cards),
        hand_rank=evaluation.rank,
        hand_score=evaluation.score,
        hand_description=evaluation.description,
        suit_bonuses=bonuses,
        total_score=total_score,
        success=success,
        rewards_gained=rewards,
        timestamp=timestamp,
        threshold=action.threshold,
        seed=seed,
    )


def result_payload(result: ActionResult) -> Dict[str, Any]:
    return {
        "character_id": result.character_id,
        "action_id": result.action_id,
        "cards_drawn": cards_to_labels(result.cards_drawn),
        "hand_rank": result.hand_rank.name,
        "hand_score": result.hand_score,
        "hand_description": result.hand_description,
        "suit_bonuses": result.suit_bonuses.as_dict(),
        "total_score": result.total_score,
        "threshold": result.threshold,
        "success": result.success,
        "rewards_gained": result.rewards_gained.as_dict(),
        "timestamp": result.timestamp.isoformat(),
        "seed": result.seed,
    }


def result_from_payload(payload: Mapping[str, Any]) -> ActionResult:
    rewards = payload["rewards_gained"]
    return ActionResult(
        character_id=payload["character_id"],
        action_id=payload["action_id"],
        cards_drawn=tuple(parse_cards(payload["cards_drawn"])),
        hand_rank=HandRank[payload["hand_rank"]],
        hand_score=int(payload["hand_score"]),
        hand_description=payload["hand_description"],
        suit_bonuses=SuitBonuses(**payload["suit_bonuses"]),
        total_score=int(payload["total_score"]),
        success=bool(payload["success"]),
        rewards_gained=Rewards(
            xp=int(rewards["xp"]),
            gold=int(rewards["gold"]),
            items=tuple(rewards.get("items", ())),
        ),
        timestamp=datetime.fromisoformat(payload["timestamp"]),
        threshold=int(payload["threshold"]),
        seed=payload.get("seed"),
    )
