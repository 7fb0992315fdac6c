"""Tests for potion, gear, quest and food purchases through the dispatcher."""

from dataclasses import asdict

import pytest

from armoire.catalog import load_default_catalog
from armoire.config import EngineConfig
from armoire.content_specs import Cost
from armoire.handlers import GearHandler, PotionHandler
from armoire.ledger import LedgerInvariantError, debit
from armoire.models import User
from armoire.results import PurchaseFailure
from armoire.rng import FixedRandomSource
from armoire.shop import PurchaseRequest, buy


def _new_user(gp=200):
    """A warrior owning only the training sword."""
    user = User()
    user.stats.gp = gp
    return user


# ===== POTION TESTS =====

def test_potion_recovers_15_hp():
    user = _new_user()
    user.stats.hp = 30

    result = buy(user, {"key": "potion"})

    assert result.success
    assert user.stats.hp == 45


def test_potion_does_not_increase_hp_above_max():
    user = _new_user()
    user.stats.hp = 45

    buy(user, {"key": "potion"})

    assert user.stats.hp == 50


def test_potion_deducts_25_gp():
    user = _new_user()
    user.stats.hp = 45

    buy(user, {"key": "potion"})

    assert user.stats.gp == 175


def test_potion_not_purchased_without_enough_gold():
    """Neither gold nor hp changes when the potion is unaffordable."""
    user = _new_user(gp=5)
    user.stats.hp = 45

    result = buy(user, {"key": "potion"})

    assert not result.success
    assert result.code == PurchaseFailure.INSUFFICIENT_GOLD
    assert result.message == "Not Enough Gold"
    assert user.stats.hp == 45
    assert user.stats.gp == 5


def test_potion_cap_comes_from_class_config():
    """Max HP is looked up per class rather than fixed at 50."""
    config = EngineConfig(class_max_hp={"warrior": 50, "healer": 70})
    user = _new_user()
    user.stats.klass = "healer"
    user.stats.hp = 60

    buy(user, "potion", config=config)

    assert user.stats.hp == 70


def test_potion_with_exact_gold():
    user = _new_user(gp=25)
    user.stats.hp = 10

    result = buy(user, "potion")

    assert result.success
    assert user.stats.gp == 0
    assert user.stats.hp == 25


# ===== GEAR TESTS =====

def test_gear_added_to_inventory():
    user = _new_user(gp=31)

    buy(user, {"key": "armor_warrior_1"})

    assert user.items.gear.owned == {"weapon_warrior_0": True, "armor_warrior_1": True}


def test_gear_deducts_gold():
    user = _new_user(gp=31)

    buy(user, {"key": "armor_warrior_1"})

    assert user.stats.gp == 1


def test_gear_auto_equips_with_preference_on():
    user = _new_user(gp=31)
    user.preferences.auto_equip = True

    result = buy(user, {"key": "armor_warrior_1"})

    assert user.items.gear.equipped["armor"] == "armor_warrior_1"
    assert result.data["equipped_slot"] == "armor"


def test_gear_auto_equip_replaces_item_in_same_slot():
    user = _new_user(gp=100)
    user.preferences.auto_equip = True

    buy(user, "weapon_warrior_1")

    assert user.items.gear.equipped["weapon"] == "weapon_warrior_1"
    # The replaced weapon is still owned
    assert user.items.gear.owned["weapon_warrior_0"] is True


def test_gear_bought_but_not_auto_equipped():
    user = _new_user(gp=31)
    user.preferences.auto_equip = False

    buy(user, {"key": "armor_warrior_1"})

    assert "armor" not in user.items.gear.equipped
    assert user.items.gear.owned["armor_warrior_1"] is True


def test_gear_not_bought_without_enough_gold():
    user = _new_user(gp=20)

    result = buy(user, {"key": "armor_warrior_1"})

    assert result.code == PurchaseFailure.INSUFFICIENT_GOLD
    assert "armor_warrior_1" not in user.items.gear.owned
    assert user.stats.gp == 20


def test_gear_already_owned_is_rejected():
    user = _new_user(gp=100)
    user.items.gear.owned["armor_warrior_1"] = True

    result = buy(user, "armor_warrior_1")

    assert result.code == PurchaseFailure.ALREADY_OWNED
    assert user.stats.gp == 100


def test_armoire_gear_cannot_be_bought_directly():
    user = _new_user(gp=500)

    result = buy(user, "shield_armoire_gladiatorShield")

    assert result.code == PurchaseFailure.NOT_ELIGIBLE
    assert result.message == "You can't buy this item"
    assert "shield_armoire_gladiatorShield" not in user.items.gear.owned
    assert user.stats.gp == 500


# ===== QUEST TESTS =====

def test_buys_a_quest_scroll():
    user = _new_user(gp=500)

    result = buy(user, {"key": "moonstone1"})

    assert result.success
    assert user.items.quests == {"moonstone1": 1}
    assert user.stats.gp == 100


def test_quest_not_bought_without_enough_gold():
    user = _new_user(gp=200)

    result = buy(user, {"key": "moonstone1"})

    assert result.code == PurchaseFailure.INSUFFICIENT_GOLD
    assert user.items.quests == {}
    assert user.stats.gp == 200


def test_nonexistent_quest_not_bought():
    user = _new_user(gp=1000)
    before = asdict(user)

    result = buy(user, {"key": "quest_that_does_not_exist"})

    assert result.code == PurchaseFailure.UNKNOWN_ITEM
    assert asdict(user) == before


def test_gem_premium_quest_not_bought():
    user = _new_user(gp=1000)
    user.stats.gems = 100

    result = buy(user, {"key": "gryphon"})

    assert result.code == PurchaseFailure.QUEST_NOT_PURCHASABLE
    assert user.items.quests == {}
    assert user.stats.gp == 1000
    assert user.stats.gems == 100


def test_gem_only_quest_rejected_even_when_gem_purchases_allowed():
    user = _new_user(gp=1000)
    user.stats.gems = 100

    result = buy(user, "hedgehog", config=EngineConfig(allow_gem_purchases=True))

    assert result.code == PurchaseFailure.QUEST_NOT_PURCHASABLE
    assert user.stats.gems == 100


# ===== FOOD / PREMIUM TESTS =====

def test_food_requires_gem_purchases():
    user = _new_user()
    user.stats.gems = 10

    result = buy(user, "Honey")

    assert result.code == PurchaseFailure.PREMIUM_ITEM_NOT_PURCHASABLE
    assert user.items.food == {}
    assert user.stats.gems == 10


def test_food_bought_with_gems_when_enabled():
    user = _new_user()
    user.stats.gems = 10
    config = EngineConfig(allow_gem_purchases=True)

    buy(user, "Honey", config=config)
    buy(user, "Honey", config=config)

    assert user.items.food == {"Honey": 2}
    assert user.stats.gems == 8
    assert user.stats.gp == 200


def test_food_not_bought_without_enough_gems():
    user = _new_user()
    user.stats.gems = 2

    result = buy(user, "Saddle", config=EngineConfig(allow_gem_purchases=True))

    assert result.code == PurchaseFailure.INSUFFICIENT_GEMS
    assert user.items.food == {}
    assert user.stats.gems == 2


# ===== DISPATCHER TESTS =====

def test_unknown_item_fails():
    user = _new_user()

    result = buy(user, {"key": "no_such_item"})

    assert not result.success
    assert result.code == PurchaseFailure.UNKNOWN_ITEM
    assert "no_such_item" in result.message


def test_callback_receives_result():
    user = _new_user()
    received = []

    result = buy(user, {"key": "potion"}, received.append)

    assert received == [result]


def test_callback_receives_failures_too():
    user = _new_user(gp=0)
    received = []

    buy(user, "armoire", received.append)

    assert len(received) == 1
    assert received[0].message == "You can't buy this item"


def test_request_shapes_are_equivalent():
    assert PurchaseRequest.from_dict({"key": "potion"}).key == "potion"
    assert PurchaseRequest.from_dict({"params": {"key": "potion"}}).key == "potion"
    with pytest.raises(ValueError):
        PurchaseRequest.from_dict({"params": {}})


def test_legacy_request_shape_buys():
    user = _new_user()
    user.stats.hp = 30

    buy(user, {"params": {"key": "potion"}})

    assert user.stats.hp == 45


def test_result_to_dict():
    user = _new_user(gp=0)

    result = buy(user, "potion").to_dict()

    assert result["success"] is False
    assert result["code"] == "insufficient_gold"
    assert result["message"] == "Not Enough Gold"


def test_handler_rejects_wrong_item_type():
    catalog = load_default_catalog()
    handler = PotionHandler(catalog, FixedRandomSource(), EngineConfig())

    with pytest.raises(TypeError):
        handler.purchase(_new_user(), catalog.get_item("armor_warrior_1"))


def test_apply_without_validation_is_a_programming_error():
    """Skipping the affordability check trips the ledger invariant."""
    catalog = load_default_catalog()
    handler = GearHandler(catalog, FixedRandomSource(), EngineConfig())
    user = _new_user(gp=10)

    with pytest.raises(LedgerInvariantError):
        handler.apply(user, catalog.get_item("armor_warrior_1"))

    assert user.stats.gp == 10


def test_debit_never_goes_negative():
    user = _new_user(gp=10)

    with pytest.raises(LedgerInvariantError):
        debit(user, Cost(gp=11))

    debit(user, Cost(gp=10))
    assert user.stats.gp == 0


# ===== SHOP LISTING TESTS =====

def test_shop_listing_reports_availability():
    user = _new_user(gp=30)
    cards = {card.key: card for card in load_default_catalog().list_purchasable(user)}

    assert cards["potion"].available
    assert cards["armor_warrior_1"].available
    assert not cards["armor_warrior_2"].available
    assert cards["armor_warrior_2"].why_locked == "Not Enough Gold"
    assert cards["armoire"].why_locked == "You can't buy this item"
    # Owned gear is listed as locked
    assert not cards["weapon_warrior_0"].available
    # Pool gear and gem-only quests are never listed
    assert "shield_armoire_gladiatorShield" not in cards
    assert "gryphon" not in cards


def test_shop_listing_does_not_mutate_user():
    user = _new_user(gp=300)
    user.achievements.ultimate_gear_sets = {"warrior": True}
    before = asdict(user)

    load_default_catalog().list_purchasable(user)

    assert asdict(user) == before


def test_request_without_key_fails_through_callback():
    """A malformed request mapping is a failed result, not an exception."""
    user = _new_user()
    before = asdict(user)
    received = []

    result = buy(user, {"params": {}}, received.append)

    assert result.success is False
    assert result.code == PurchaseFailure.UNKNOWN_ITEM
    assert received == [result]
    assert asdict(user) == before
