"""
Content integrity tests for the YAML catalog files.

These tests ensure that the bundled data is internally consistent and that
the loaders reject malformed content instead of silently skipping it.
"""
from pathlib import Path

import pytest
import yaml

from armoire.catalog import DATA_DIR, load_catalog
from armoire.constants import GEAR_SLOTS
from armoire.content_specs import ItemType, load_food, load_gear, load_quests, load_special


def _load_yaml(path: Path):
    """Load a YAML file and return its contents."""
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def test_bundled_catalog_loads():
    """Loading the whole catalog also checks keys are unique across files."""
    catalog = load_catalog(DATA_DIR)

    assert catalog.get_item("potion").type == ItemType.POTION
    assert catalog.get_item("armoire").type == ItemType.ARMOIRE
    assert catalog.get_item("armor_warrior_1").cost.gp == 30


def test_special_prices():
    special = load_special(DATA_DIR / "special.yaml")

    assert special["potion"].cost.gp == 25
    assert special["armoire"].cost.gp == 100


def test_every_gear_slot_is_known():
    gear = load_gear(DATA_DIR / "gear.yaml")

    unknown = [f"{key}: {item.slot}" for key, item in gear.items() if item.slot not in GEAR_SLOTS]
    assert not unknown, "gear.yaml uses unknown slots:\n" + "\n".join(unknown)


def test_gear_key_prefix_matches_slot():
    gear = load_gear(DATA_DIR / "gear.yaml")

    mismatched = [key for key, item in gear.items() if not key.startswith(item.slot + "_")]
    assert not mismatched, "gear keys not prefixed by their slot:\n" + "\n".join(mismatched)


def test_armoire_pool_is_not_sold_directly():
    """Pool gear is only reachable through the armoire."""
    gear = load_gear(DATA_DIR / "gear.yaml")

    pool = [item for item in gear.values() if item.set_name == "armoire"]
    assert pool
    assert all(not item.can_buy for item in pool)


def test_food_is_gem_priced():
    food = load_food(DATA_DIR / "food.yaml")

    assert all(item.cost.gems > 0 and item.cost.gp == 0 for item in food.values())


def test_quests_are_either_gold_or_gem_only():
    quests = load_quests(DATA_DIR / "quests.yaml")

    for item in quests.values():
        if item.gem_only:
            assert item.cost.gp == 0
        else:
            assert item.cost.gp > 0
            assert item.cost.gems == 0


def test_raw_yaml_has_no_duplicate_keys():
    for name, section in [("gear.yaml", "gear"), ("food.yaml", "food"), ("quests.yaml", "quests")]:
        raw = _load_yaml(DATA_DIR / name)
        keys = [entry["key"] for entry in raw[section]]
        assert len(keys) == len(set(keys)), f"{name} has duplicate keys"


# ===== LOADER ERROR HANDLING =====

def test_missing_file_loads_empty(tmp_path):
    assert load_gear(tmp_path / "nope.yaml") == {}


def test_duplicate_key_reports_both_lines(tmp_path):
    path = tmp_path / "gear.yaml"
    path.write_text(
        "gear:\n"
        "  - {key: head_x, slot: head}\n"
        "  - {key: head_x, slot: head}\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError) as excinfo:
        load_gear(path)

    message = str(excinfo.value)
    assert "duplicate key 'head_x'" in message
    assert ":3:" in message
    assert "first defined at line 2" in message


def test_section_must_be_a_list(tmp_path):
    path = tmp_path / "food.yaml"
    path.write_text("food:\n  Honey: 1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="food must be a list"):
        load_food(path)


def test_non_numeric_price_rejected_with_line(tmp_path):
    path = tmp_path / "gear.yaml"
    path.write_text(
        "gear:\n"
        "  - {key: head_ok, slot: head, value: 10}\n"
        "  - {key: head_bad, slot: head, value: lots}\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match=r":3: head_bad: value must be numeric"):
        load_gear(path)


def test_gear_without_slot_rejected(tmp_path):
    path = tmp_path / "gear.yaml"
    path.write_text("gear:\n  - {key: mystery}\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must declare a slot"):
        load_gear(path)


def test_unknown_special_type_rejected(tmp_path):
    path = tmp_path / "special.yaml"
    path.write_text("special:\n  - {key: box, type: lootbox, value: 5}\n", encoding="utf-8")

    with pytest.raises(ValueError, match="unknown item type 'lootbox'"):
        load_special(path)


def test_malformed_yaml_reports_position(tmp_path):
    path = tmp_path / "quests.yaml"
    path.write_text("quests:\n  - {key: a\n", encoding="utf-8")

    with pytest.raises(ValueError) as excinfo:
        load_quests(path)

    assert str(path) in str(excinfo.value)


def test_key_defined_in_two_files_rejected(tmp_path):
    (tmp_path / "gear.yaml").write_text("gear:\n  - {key: Honey, slot: head}\n", encoding="utf-8")
    (tmp_path / "food.yaml").write_text("food:\n  - {key: Honey}\n", encoding="utf-8")

    with pytest.raises(ValueError, match="defined more than once"):
        load_catalog(tmp_path)
