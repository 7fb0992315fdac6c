from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, TYPE_CHECKING

from .content_specs import (
    Cost,
    ItemDefinition,
    ItemType,
    load_food,
    load_gear,
    load_quests,
    load_special,
)

if TYPE_CHECKING:
    from .config import EngineConfig
    from .models import User

DATA_DIR = Path(__file__).resolve().parent / "data"
logger = logging.getLogger(__name__)


@dataclass
class ShopCard:
    key: str
    display_name: str
    type: ItemType
    cost: Cost
    available: bool
    why_locked: Optional[str] = None
    missing_requirements: List[str] = field(default_factory=list)


class ItemCatalog:
    """Read-only lookup over the static item content."""

    def __init__(
        self,
        gear: Dict[str, ItemDefinition],
        food: Dict[str, ItemDefinition],
        quests: Dict[str, ItemDefinition],
        special: Dict[str, ItemDefinition],
    ):
        self.gear = gear
        self.food = food
        self.quests = quests
        self.special = special
        self._items: Dict[str, ItemDefinition] = {}
        for group in (gear, food, quests, special):
            for key, item in group.items():
                if key in self._items:
                    raise ValueError(f"Item key '{key}' is defined more than once in the catalog")
                self._items[key] = item

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def get_item(self, key: str) -> Optional[ItemDefinition]:
        return self._items.get(key)

    def list_gear_in_pool(self, pool_name: str) -> List[str]:
        """Keys of gear tagged with ``pool_name``, in catalog order."""
        return [key for key, item in self.gear.items() if item.set_name == pool_name]

    def list_food(self) -> List[str]:
        """Keys of food the armoire may hand out."""
        return [key for key, item in self.food.items() if item.can_drop]

    def slot_of(self, gear_key: str) -> str:
        item = self.gear.get(gear_key)
        if item is None or item.slot is None:
            raise KeyError(f"Gear {gear_key} is not in the catalog")
        return item.slot

    def list_purchasable(self, user: User, config: Optional[EngineConfig] = None) -> List[ShopCard]:
        """List every directly buyable item with its availability for ``user``."""
        from .shop import check_purchase

        cards: List[ShopCard] = []
        groups = (self.special, self.gear, self.quests, self.food)
        for group in groups:
            for key, item in group.items():
                if item.type == ItemType.GEAR and not item.can_buy:
                    continue
                if item.type == ItemType.QUEST and item.gem_only:
                    continue

                failure = check_purchase(user, item, self, config)
                missing: List[str] = []
                if failure is not None and item.cost.gp > user.stats.gp:
                    missing.append(f"need {item.cost.gp}gp (have {user.stats.gp}gp)")

                cards.append(
                    ShopCard(
                        key=key,
                        display_name=item.text,
                        type=item.type,
                        cost=item.cost,
                        available=failure is None,
                        why_locked=None if failure is None else failure.message,
                        missing_requirements=missing,
                    )
                )
        return cards


def load_catalog(data_dir: Path) -> ItemCatalog:
    """Load the catalog from the YAML content files in ``data_dir``.

    Raises:
        ValueError: If any content file is malformed
    """
    catalog = ItemCatalog(
        gear=load_gear(data_dir / "gear.yaml"),
        food=load_food(data_dir / "food.yaml"),
        quests=load_quests(data_dir / "quests.yaml"),
        special=load_special(data_dir / "special.yaml"),
    )
    logger.info(f"Loaded catalog from {data_dir} ({len(catalog)} items)")
    return catalog


# Cache the bundled catalog to avoid reloading YAML repeatedly
_DEFAULT_CATALOG = None


def load_default_catalog() -> ItemCatalog:
    """Return the catalog bundled with the package (cached)."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = load_catalog(DATA_DIR)
    return _DEFAULT_CATALOG
