import json

import pytest

from destiny.affinity import SuitWeights
from destiny.catalog import (
    STARTER_ACTIONS,
    ActionCatalog,
    action_from_payload,
    action_payload,
    load_catalog,
    starter_catalog,
)
from destiny.errors import CatalogError, UnknownAction
from destiny.models import ActionType
from destiny.rewards import RewardEntry, RewardTier

from .helpers import create_engine, make_action


def _payload(**overrides):
    payload = {
        "action_id": "skin_rabbit",
        "name": "Skin Rabbit",
        "type": "HUNT",
        "cards_to_draw": 4,
        "threshold": 180,
        "suit_weights": {"clubs": 3},
        "rewards": {
            "margin_cap": 25,
            "entries": [
                {"success": True, "tier": "COMMON", "xp": 5, "gold": 2, "xp_per_margin": 1},
                {"success": False, "tier": "COMMON", "xp": 1},
            ],
        },
    }
    payload.update(overrides)
    return payload


def test_action_from_payload_builds_definition():
    action = action_from_payload(_payload())
    assert action.action_id == "skin_rabbit"
    assert action.action_type == ActionType.HUNT
    assert action.cards_to_draw == 4
    assert action.suit_weights == SuitWeights(clubs=3)
    assert action.reward_table.margin_cap == 25
    assert action.reward_table.lookup(True, RewardTier.COMMON) == RewardEntry(xp=5, gold=2, xp_per_margin=1)
    assert action.reward_table.lookup(True, RewardTier.RARE) == RewardEntry()


def test_action_payload_survives_a_json_trip():
    action = action_from_payload(_payload())
    assert action_from_payload(json.loads(json.dumps(action_payload(action)))) == action


@pytest.mark.parametrize("cards_to_draw", [0, 11, "5", True])
def test_catalog_rejects_bad_draw_sizes(cards_to_draw):
    with pytest.raises(CatalogError, match="cards_to_draw"):
        action_from_payload(_payload(cards_to_draw=cards_to_draw))


def test_catalog_rejects_missing_fields_and_bad_values():
    with pytest.raises(CatalogError, match="missing field"):
        action_from_payload({"action_id": "x", "cards_to_draw": 3})
    with pytest.raises(CatalogError, match="non-negative"):
        action_from_payload(_payload(suit_weights={"hearts": -2}))
    with pytest.raises(CatalogError, match="Invalid reward entry"):
        action_from_payload(_payload(rewards={"entries": [{"success": True, "tier": "MYTHIC"}]}))
    with pytest.raises(CatalogError):
        action_from_payload(_payload(type="HEIST"))


def test_duplicate_ids_rejected():
    with pytest.raises(CatalogError, match="Duplicate action id"):
        ActionCatalog([make_action(action_id="dup"), make_action(action_id="dup")])


def test_unknown_action_lookup():
    catalog = ActionCatalog([make_action(action_id="known")])
    assert "known" in catalog
    with pytest.raises(UnknownAction, match="Unknown action: missing") as excinfo:
        catalog.get("missing")
    assert excinfo.value.code == "UNKNOWN_ACTION"


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "actions.json"
    path.write_text(json.dumps({"actions": [_payload(), _payload(action_id="skin_fox")]}), encoding="utf-8")
    catalog = load_catalog(path)
    assert len(catalog) == 2
    assert catalog.get("skin_fox").name == "Skin Rabbit"


def test_load_catalog_rejects_bad_documents(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="invalid JSON"):
        load_catalog(broken)

    wrong_shape = tmp_path / "shape.json"
    wrong_shape.write_text(json.dumps([_payload()]), encoding="utf-8")
    with pytest.raises(CatalogError, match="'actions' list"):
        load_catalog(wrong_shape)


def test_starter_catalog_actions_all_resolve():
    catalog = starter_catalog()
    assert len(catalog) == len(STARTER_ACTIONS)
    engine = create_engine()
    for action in catalog.actions():
        result = engine.resolve("starter", action, seed=11)
        assert len(result.cards_drawn) == action.cards_to_draw
        assert result.rewards_gained.xp >= 0


@pytest.mark.parametrize(
    "payload",
    [
        "oops",
        _payload(rewards=[]),
        _payload(rewards={"entries": {"success": True, "tier": "COMMON"}}),
        _payload(rewards={"entries": ["COMMON"]}),
    ],
)
def test_catalog_rejects_non_object_shapes(payload):
    with pytest.raises(CatalogError):
        action_from_payload(payload)


def test_load_catalog_rejects_non_object_actions_and_missing_files(tmp_path):
    strings = tmp_path / "strings.json"
    strings.write_text(json.dumps({"actions": ["oops"]}), encoding="utf-8")
    with pytest.raises(CatalogError, match="must be an object"):
        load_catalog(strings)

    with pytest.raises(CatalogError, match="cannot read catalog"):
        load_catalog(tmp_path / "missing.json")
