from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from .affinity import score_suits
from .cards import MAX_DRAW, MIN_DRAW, Card, draw, new_seed
from .errors import InvalidDrawSize, ResultInvariantError, UnrankableHand
from .evaluator import evaluate
from .models import ActionDefinition, ActionResult
from .recorder import record
from .rewards import calculate_reward

LOGGER = logging.getLogger("destiny_engine")

# ResolutionEngine holds no per-call state: every resolve draws its own cards
# with its own generator, so one instance can serve many threads at once.


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ResolutionEngine:
    """Turns an action definition into a scored, rewarded ActionResult."""

    def __init__(
        self,
        clock: Callable[[], datetime] = _utc_now,
        seed_source: Callable[[], int] = new_seed,
    ) -> None:
        self.clock = clock
        self.seed_source = seed_source

    def resolve(self, character_id: str, action: ActionDefinition, seed: Optional[int] = None) -> ActionResult:
        _check_draw_size(action)
        if seed is None:
            seed = self.seed_source()
        cards = draw(action.cards_to_draw, seed=seed)
        return self._score(character_id, action, cards, seed)

    def resolve_cards(self, character_id: str, action: ActionDefinition, cards: Sequence[Card]) -> ActionResult:
        """Resolve against a hand the caller already holds (replays, audits)."""
        _check_draw_size(action)
        if len(cards) != action.cards_to_draw:
            raise InvalidDrawSize(len(cards))
        return self._score(character_id, action, list(cards), None)

    def replay(self, result: ActionResult, action: ActionDefinition) -> ActionResult:
        """Recompute a recorded result; only the timestamp is carried over."""
        _check_draw_size(action)
        if action.action_id != result.action_id:
            raise ResultInvariantError(f"Result was recorded for {result.action_id}, not {action.action_id}")
        if action.cards_to_draw != len(result.cards_drawn):
            raise ResultInvariantError(
                f"{action.action_id} draws {action.cards_to_draw} cards but the result holds {len(result.cards_drawn)}"
            )
        if result.seed is not None:
            cards = draw(action.cards_to_draw, seed=result.seed)
        else:
            cards = list(result.cards_drawn)
        return self._score(result.character_id, action, cards, result.seed, timestamp=result.timestamp)

    def _score(
        self,
        character_id: str,
        action: ActionDefinition,
        cards: Sequence[Card],
        seed: Optional[int],
        timestamp: Optional[datetime] = None,
    ) -> ActionResult:
        try:
            evaluation = evaluate(cards)
        except UnrankableHand:
            LOGGER.error("Unrankable hand for %s/%s: %s", character_id, action.action_id, cards)
            raise

        bonuses = score_suits(cards, action.suit_weights)
        total_score = evaluation.score + bonuses.total
        success = total_score >= action.threshold
        rewards = calculate_reward(success, evaluation.rank, total_score - action.threshold, action.reward_table)

        LOGGER.debug(
            "Resolved %s for %s: %s (%s + %s = %s vs %s) success=%s",
            action.action_id,
            character_id,
            evaluation.description,
            evaluation.score,
            bonuses.total,
            total_score,
            action.threshold,
            success,
        )

        return record(
            character_id,
            action,
            cards,
            evaluation,
            bonuses,
            total_score,
            success,
            rewards,
            timestamp or self.clock(),
            seed=seed,
        )


def _check_draw_size(action: ActionDefinition) -> None:
    count = action.cards_to_draw
    if isinstance(count, bool) or not isinstance(count, int) or not MIN_DRAW <= count <= MAX_DRAW:
        raise InvalidDrawSize(count)


_DEFAULT_ENGINE = ResolutionEngine()


def resolve(character_id: str, action: ActionDefinition, seed: Optional[int] = None) -> ActionResult:
    return _DEFAULT_ENGINE.resolve(character_id, action, seed=seed)
