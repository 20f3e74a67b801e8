"""Destiny Deck action resolution: cards in, scored and rewarded results out."""

from .affinity import SuitBonuses, SuitWeights, score_suits
from .cards import Card, RANKS, SUITS, Suit, draw, parse_cards
from .catalog import ActionCatalog, load_catalog, starter_catalog
from .engine import ResolutionEngine, resolve
from .errors import DestinyError, InvalidDrawSize, UnrankableHand
from .evaluator import HandEvaluation, HandRank, evaluate
from .models import ActionDefinition, ActionResult, ActionType
from .recorder import result_payload
from .rewards import RewardEntry, Rewards, RewardTable, RewardTier, calculate_reward

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "Suit",
    "draw",
    "parse_cards",
    "HandEvaluation",
    "HandRank",
    "evaluate",
    "SuitBonuses",
    "SuitWeights",
    "score_suits",
    "RewardEntry",
    "Rewards",
    "RewardTable",
    "RewardTier",
    "calculate_reward",
    "ActionDefinition",
    "ActionResult",
    "ActionType",
    "result_payload",
    "ResolutionEngine",
    "resolve",
    "ActionCatalog",
    "load_catalog",
    "starter_catalog",
    "DestinyError",
    "InvalidDrawSize",
    "UnrankableHand",
]
