"""Purchase handlers, one per item type.

Every handler validates the whole purchase before touching the user. A
failed validation returns a ``PurchaseResult`` and leaves the user exactly
as it was; ``apply`` is only reached once validation has passed.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

from . import ledger
from .catalog import ItemCatalog
from .config import EngineConfig
from .constants import (
    ARMOIRE_OUTCOMES,
    BRANCH_EQUIPMENT,
    BRANCH_EXPERIENCE,
    BRANCH_FOOD,
    FLAG_ARMOIRE_OPENED,
    MSG_ALREADY_OWNED,
    MSG_ARMOIRE_EQUIPMENT,
    MSG_ARMOIRE_EXPERIENCE,
    MSG_ARMOIRE_FOOD,
    MSG_FOOD,
    MSG_GEAR,
    MSG_NOT_ELIGIBLE,
    MSG_NOT_ENOUGH_GEMS,
    MSG_NOT_ENOUGH_GOLD,
    MSG_POTION,
    MSG_QUEST,
    MSG_QUEST_NOT_PURCHASABLE,
)
from .content_specs import ItemDefinition, ItemType
from .inventory import grant_food, grant_gear, grant_quest, owns
from .models import User, armoire_opened, has_ultimate_gear
from .results import PurchaseFailure, PurchaseResult
from .rng import RandomSource

logger = logging.getLogger(__name__)


class PurchaseHandler(ABC):
    """Validate and apply purchases of a single item type."""

    item_type: ItemType

    def __init__(self, catalog: ItemCatalog, rng: RandomSource, config: EngineConfig):
        self.catalog = catalog
        self.rng = rng
        self.config = config

    def purchase(self, user: User, item: ItemDefinition) -> PurchaseResult:
        """Validate, then apply. Returns the failure result untouched if invalid."""
        if item.type != self.item_type:
            raise TypeError(f"{type(self).__name__} cannot handle {item.type.value} item '{item.key}'")

        failure = self.validate(user, item)
        if failure is not None:
            logger.debug(f"Purchase of {item.key} refused: {failure.code.value}")
            return failure

        result = self.apply(user, item)
        logger.info(f"Purchased {item.key}: {result.message}")
        return result

    @abstractmethod
    def validate(self, user: User, item: ItemDefinition) -> Optional[PurchaseResult]:
        """Return a failed result, or None when the purchase may proceed."""

    @abstractmethod
    def apply(self, user: User, item: ItemDefinition) -> PurchaseResult:
        """Mutate the user. Only called after ``validate`` returned None."""


def _not_enough_gold(user: User, item: ItemDefinition) -> Optional[PurchaseResult]:
    if user.stats.gp < item.cost.gp:
        return PurchaseResult.fail(PurchaseFailure.INSUFFICIENT_GOLD, MSG_NOT_ENOUGH_GOLD)
    return None


class PotionHandler(PurchaseHandler):
    item_type = ItemType.POTION

    def validate(self, user: User, item: ItemDefinition) -> Optional[PurchaseResult]:
        return _not_enough_gold(user, item)

    def apply(self, user: User, item: ItemDefinition) -> PurchaseResult:
        ledger.debit(user, item.cost)

        max_hp = self.config.max_hp_for(user.stats.klass)
        before = user.stats.hp
        user.stats.hp = max(0, min(max_hp, before + self.config.potion_recovery))
        recovered = user.stats.hp - before

        return PurchaseResult.ok(
            MSG_POTION.format(amount=recovered),
            hp=user.stats.hp,
            gp=user.stats.gp,
        )


class GearHandler(PurchaseHandler):
    item_type = ItemType.GEAR

    def validate(self, user: User, item: ItemDefinition) -> Optional[PurchaseResult]:
        if owns(user, item.key):
            return PurchaseResult.fail(PurchaseFailure.ALREADY_OWNED, MSG_ALREADY_OWNED)
        if not item.can_buy:
            return PurchaseResult.fail(PurchaseFailure.NOT_ELIGIBLE, MSG_NOT_ELIGIBLE)
        return _not_enough_gold(user, item)

    def apply(self, user: User, item: ItemDefinition) -> PurchaseResult:
        ledger.debit(user, item.cost)
        slot = grant_gear(user, item.key, self.catalog)
        return PurchaseResult.ok(
            MSG_GEAR.format(text=item.text),
            key=item.key,
            equipped_slot=slot,
            gp=user.stats.gp,
        )


class QuestHandler(PurchaseHandler):
    """Sells quest scrolls for gold; quest progress is handled elsewhere."""

    item_type = ItemType.QUEST

    def validate(self, user: User, item: ItemDefinition) -> Optional[PurchaseResult]:
        if item.gem_only:
            return PurchaseResult.fail(
                PurchaseFailure.QUEST_NOT_PURCHASABLE,
                MSG_QUEST_NOT_PURCHASABLE.format(key=item.key),
            )
        return _not_enough_gold(user, item)

    def apply(self, user: User, item: ItemDefinition) -> PurchaseResult:
        ledger.debit(user, item.cost)
        count = grant_quest(user, item.key)
        return PurchaseResult.ok(MSG_QUEST.format(text=item.text), key=item.key, count=count)


class FoodHandler(PurchaseHandler):
    """Gem-priced food, reachable only when gem purchases are enabled."""

    item_type = ItemType.FOOD

    def validate(self, user: User, item: ItemDefinition) -> Optional[PurchaseResult]:
        if user.stats.gems < item.cost.gems:
            return PurchaseResult.fail(PurchaseFailure.INSUFFICIENT_GEMS, MSG_NOT_ENOUGH_GEMS)
        return _not_enough_gold(user, item)

    def apply(self, user: User, item: ItemDefinition) -> PurchaseResult:
        ledger.debit(user, item.cost)
        count = grant_food(user, item.key)
        return PurchaseResult.ok(MSG_FOOD.format(text=item.text), key=item.key, count=count)


class ArmoireHandler(PurchaseHandler):
    """Enchanted Armoire: pay gold, receive gear, food or experience.

    One uniform draw picks the reward branch through ``ARMOIRE_OUTCOMES``.
    The first opening always yields gear. When every pool item is already
    owned the gear branch pays out experience instead; the gold has been
    spent by then, so the purchase never fails after validation.
    """

    item_type = ItemType.ARMOIRE

    def validate(self, user: User, item: ItemDefinition) -> Optional[PurchaseResult]:
        if not has_ultimate_gear(user):
            return PurchaseResult.fail(PurchaseFailure.NOT_ELIGIBLE, MSG_NOT_ELIGIBLE)
        return _not_enough_gold(user, item)

    def apply(self, user: User, item: ItemDefinition) -> PurchaseResult:
        ledger.debit(user, item.cost)

        draw = self.rng.uniform()
        if not armoire_opened(user):
            branch = BRANCH_EQUIPMENT
            user.flags[FLAG_ARMOIRE_OPENED] = True
        else:
            branch = classify_draw(draw)
        logger.debug(f"Armoire draw {draw:.3f} -> {branch}")

        if branch == BRANCH_EQUIPMENT:
            eligible = [
                key for key in self.catalog.list_gear_in_pool(self.config.armoire_pool)
                if not owns(user, key)
            ]
            if eligible:
                return self._drop_gear(user, self.rng.pick_one(eligible))
            logger.debug("Armoire pool exhausted, granting experience")
            branch = BRANCH_EXPERIENCE

        if branch == BRANCH_FOOD:
            food = self.catalog.list_food()
            if food:
                return self._drop_food(user, self.rng.pick_one(food))
            logger.warning("No droppable food in catalog, granting experience")

        return self._drop_experience(user)

    def _drop_gear(self, user: User, gear_key: str) -> PurchaseResult:
        grant_gear(user, gear_key, self.catalog, equip=False)
        text = self.catalog.gear[gear_key].text
        return PurchaseResult.ok(
            MSG_ARMOIRE_EQUIPMENT.format(text=text),
            armoire={"type": "gear", "drop_key": gear_key, "drop_text": text},
        )

    def _drop_food(self, user: User, food_key: str) -> PurchaseResult:
        grant_food(user, food_key)
        text = self.catalog.food[food_key].text
        return PurchaseResult.ok(
            MSG_ARMOIRE_FOOD.format(text=text),
            armoire={"type": "food", "drop_key": food_key, "drop_text": text},
        )

    def _drop_experience(self, user: User) -> PurchaseResult:
        amount = int(math.floor(
            self.rng.uniform() * self.config.armoire_exp_spread + self.config.armoire_exp_base
        ))
        user.stats.exp += amount
        return PurchaseResult.ok(
            MSG_ARMOIRE_EXPERIENCE.format(amount=amount),
            armoire={"type": "experience", "value": amount},
        )


def classify_draw(draw: float) -> str:
    """Map a uniform draw onto an armoire reward branch."""
    for upper_bound, branch in ARMOIRE_OUTCOMES:
        if draw <= upper_bound:
            return branch
    return ARMOIRE_OUTCOMES[-1][1]


HANDLERS: Dict[ItemType, Type[PurchaseHandler]] = {
    ItemType.POTION: PotionHandler,
    ItemType.GEAR: GearHandler,
    ItemType.QUEST: QuestHandler,
    ItemType.FOOD: FoodHandler,
    ItemType.ARMOIRE: ArmoireHandler,
}
