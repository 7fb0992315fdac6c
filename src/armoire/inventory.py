from __future__ import annotations

from typing import Mapping, Optional

from .catalog import ItemCatalog, load_default_catalog
from .models import User


def owns(user: User, gear_key: str) -> bool:
    return bool(user.items.gear.owned.get(gear_key))


def grant_gear(
    user: User,
    gear_key: str,
    catalog: ItemCatalog,
    equip: Optional[bool] = None,
) -> Optional[str]:
    """Add gear to the user's owned set.

    Args:
        user: User receiving the gear
        gear_key: Catalog key of the gear
        catalog: Catalog used to resolve the gear's slot
        equip: Force (True) or suppress (False) equipping; None follows
            the user's auto-equip preference.

    Returns:
        The slot the gear was equipped into, or None when it was not equipped.
    """
    slot = catalog.slot_of(gear_key)
    user.items.gear.owned[gear_key] = True

    if equip is None:
        equip = user.preferences.auto_equip
    if not equip:
        return None

    user.items.gear.equipped[slot] = gear_key
    return slot


def remaining_in_set(
    owned: Mapping[str, bool],
    set_name: str,
    catalog: Optional[ItemCatalog] = None,
) -> int:
    """Count catalog gear tagged ``set_name`` that is not in ``owned``."""
    catalog = catalog or load_default_catalog()
    return sum(1 for key in catalog.list_gear_in_pool(set_name) if not owned.get(key))


def grant_food(user: User, food_key: str) -> int:
    food = user.items.food
    food[food_key] = food.get(food_key, 0) + 1
    return food[food_key]


def grant_quest(user: User, quest_key: str) -> int:
    quests = user.items.quests
    quests[quest_key] = quests.get(quest_key, 0) + 1
    return quests[quest_key]
