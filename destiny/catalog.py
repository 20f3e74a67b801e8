"""Action catalog: JSON action definitions and the built-in starter set.

A catalog file looks like::

    {"actions": [
        {"action_id": "pickpocket_drunk", "name": "Pickpocket Drunk",
         "type": "CRIME", "cards_to_draw": 5, "threshold": 220,
         "suit_weights": {"spades": 8},
         "rewards": {"margin_cap": 60, "entries": [
             {"success": true, "tier": "COMMON", "xp": 10, "gold": 10,
              "xp_per_margin": 1}
         ]}}
    ]}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from .affinity import SuitWeights
from .cards import MAX_DRAW, MIN_DRAW
from .errors import CatalogError, UnknownAction
from .models import ActionDefinition, ActionType
from .rewards import RewardEntry, RewardTable, RewardTier

_ENTRY_FIELDS = ("xp", "gold", "xp_per_margin", "gold_per_margin")


class ActionCatalog:
    """Read-only lookup of action definitions by id."""

    def __init__(self, actions: Iterable[ActionDefinition]) -> None:
        self._actions: Dict[str, ActionDefinition] = {}
        for action in actions:
            if action.action_id in self._actions:
                raise CatalogError(f"Duplicate action id: {action.action_id}")
            self._actions[action.action_id] = action

    def get(self, action_id: str) -> ActionDefinition:
        try:
            return self._actions[action_id]
        except KeyError:
            raise UnknownAction(action_id) from None

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def actions(self) -> List[ActionDefinition]:
        return sorted(self._actions.values(), key=lambda action: (action.action_type.value, action.threshold))


def _reward_table_from_payload(data: Mapping[str, Any]) -> RewardTable:
    if not isinstance(data, Mapping):
        raise CatalogError(f"rewards must be an object, got {type(data).__name__}")
    raw_entries = data.get("entries", [])
    if not isinstance(raw_entries, list):
        raise CatalogError("rewards.entries must be a list")
    entries: Dict[tuple, RewardEntry] = {}
    for raw in raw_entries:
        if not isinstance(raw, Mapping):
            raise CatalogError(f"Invalid reward entry {raw!r}: expected an object")
        try:
            tier = RewardTier(raw["tier"])
            success = raw["success"]
        except (KeyError, ValueError) as exc:
            raise CatalogError(f"Invalid reward entry {raw!r}: {exc}") from exc
        if not isinstance(success, bool):
            raise CatalogError(f"Reward entry success flag must be a boolean: {raw!r}")
        key = (success, tier)
        if key in entries:
            raise CatalogError(f"Duplicate reward entry for {tier.value} (success={success})")
        entries[key] = RewardEntry(
            items=tuple(raw.get("items", ())),
            **{name: raw.get(name, 0) for name in _ENTRY_FIELDS},
        )
    return RewardTable(entries=entries, margin_cap=data.get("margin_cap", 0))


def action_from_payload(data: Mapping[str, Any]) -> ActionDefinition:
    if not isinstance(data, Mapping):
        raise CatalogError(f"Action definition must be an object, got {data!r}")
    try:
        action_id = data["action_id"]
        cards_to_draw = data["cards_to_draw"]
        threshold = data["threshold"]
    except KeyError as exc:
        raise CatalogError(f"Action definition missing field {exc}") from exc

    if not isinstance(action_id, str) or not action_id.strip():
        raise CatalogError("action_id must be a non-empty string")
    if isinstance(cards_to_draw, bool) or not isinstance(cards_to_draw, int) or not MIN_DRAW <= cards_to_draw <= MAX_DRAW:
        raise CatalogError(f"{action_id}: cards_to_draw must be between {MIN_DRAW} and {MAX_DRAW}")
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        raise CatalogError(f"{action_id}: threshold must be an integer")

    try:
        return ActionDefinition(
            action_id=action_id,
            name=data.get("name", action_id),
            cards_to_draw=cards_to_draw,
            threshold=threshold,
            suit_weights=SuitWeights.from_dict(data.get("suit_weights", {})),
            reward_table=_reward_table_from_payload(data.get("rewards", {})),
            action_type=ActionType(data.get("type", ActionType.SOCIAL.value)),
            description=data.get("description", ""),
        )
    except CatalogError:
        raise
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"{action_id}: {exc}") from exc


def action_payload(action: ActionDefinition) -> Dict[str, Any]:
    entries = []
    for (success, tier), entry in sorted(action.reward_table.entries.items(), key=lambda kv: (not kv[0][0], kv[0][1].value)):
        row: Dict[str, Any] = {"success": success, "tier": tier.value, "items": list(entry.items)}
        row.update({name: getattr(entry, name) for name in _ENTRY_FIELDS})
        entries.append(row)
    return {
        "action_id": action.action_id,
        "name": action.name,
        "type": action.action_type.value,
        "description": action.description,
        "cards_to_draw": action.cards_to_draw,
        "threshold": action.threshold,
        "suit_weights": action.suit_weights.as_dict(),
        "rewards": {"margin_cap": action.reward_table.margin_cap, "entries": entries},
    }


def load_catalog(path: Union[str, Path]) -> ActionCatalog:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"{path}: cannot read catalog ({exc})") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(document, dict) or not isinstance(document.get("actions"), list):
        raise CatalogError(f"{path}: expected an object with an 'actions' list")
    return ActionCatalog(action_from_payload(item) for item in document["actions"])


def _standard_rewards(xp: int, gold: int, items: List[str], margin_cap: int) -> Dict[str, Any]:
    # Better hands pay more; failures with a weak hand still earn a little xp.
    entries = []
    for multiplier, tier in enumerate(RewardTier, start=1):
        entries.append(
            {
                "success": True,
                "tier": tier.value,
                "xp": xp * multiplier,
                "gold": gold * multiplier,
                "items": items if tier in (RewardTier.RARE, RewardTier.LEGENDARY) else [],
                "xp_per_margin": 1,
                "gold_per_margin": 1 if gold else 0,
            }
        )
    for tier in (RewardTier.COMMON, RewardTier.UNCOMMON):
        entries.append({"success": False, "tier": tier.value, "xp": max(xp // 4, 1)})
    return {"margin_cap": margin_cap, "entries": entries}


STARTER_ACTIONS: List[Dict[str, Any]] = [
    {
        "action_id": "pickpocket_drunk",
        "name": "Pickpocket Drunk",
        "type": ActionType.CRIME.value,
        "description": "Lift a coin purse from a saloon regular who has had one too many.",
        "cards_to_draw": 5,
        "threshold": 220,
        "suit_weights": {"spades": 8},
        "rewards": _standard_rewards(10, 10, ["pocket_watch"], 40),
    },
    {
        "action_id": "burglarize_store",
        "name": "Burglarize Store",
        "type": ActionType.CRIME.value,
        "description": "Break into the general store after closing.",
        "cards_to_draw": 5,
        "threshold": 330,
        "suit_weights": {"spades": 10, "diamonds": 4},
        "rewards": _standard_rewards(40, 60, ["stolen_goods"], 80),
    },
    {
        "action_id": "track_deer",
        "name": "Track Deer",
        "type": ActionType.HUNT.value,
        "description": "Follow fresh tracks out past the creek.",
        "cards_to_draw": 6,
        "threshold": 240,
        "suit_weights": {"clubs": 6, "hearts": 3},
        "rewards": _standard_rewards(15, 8, ["deer_hide"], 50),
    },
    {
        "action_id": "forge_horseshoes",
        "name": "Forge Horseshoes",
        "type": ActionType.CRAFT.value,
        "description": "Work the anvil at the livery stable.",
        "cards_to_draw": 5,
        "threshold": 210,
        "suit_weights": {"diamonds": 9},
        "rewards": _standard_rewards(12, 5, ["iron_horseshoe"], 30),
    },
    {
        "action_id": "quick_draw_duel",
        "name": "Quick Draw Duel",
        "type": ActionType.COMBAT.value,
        "description": "Face a drifter at high noon.",
        "cards_to_draw": 7,
        "threshold": 360,
        "suit_weights": {"clubs": 12},
        "rewards": _standard_rewards(50, 25, ["silver_spurs"], 100),
    },
    {
        "action_id": "bluff_the_sheriff",
        "name": "Bluff the Sheriff",
        "type": ActionType.SOCIAL.value,
        "description": "Talk your way past the law with a straight face.",
        "cards_to_draw": 3,
        "threshold": 150,
        "suit_weights": {"hearts": 10},
        "rewards": _standard_rewards(8, 0, [], 20),
    },
]


def starter_catalog() -> ActionCatalog:
    return ActionCatalog(action_from_payload(item) for item in STARTER_ACTIONS)
