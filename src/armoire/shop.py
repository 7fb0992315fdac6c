"""Purchase dispatcher.

``buy`` resolves the requested key in the catalog, applies the checks that
hold for every item type, and delegates to the handler for the item's type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .catalog import ItemCatalog, load_default_catalog
from .config import EngineConfig
from .constants import (
    MSG_MISSING_KEY,
    MSG_PREMIUM_NOT_PURCHASABLE,
    MSG_QUEST_NOT_PURCHASABLE,
    MSG_UNKNOWN_ITEM,
)
from .content_specs import ItemDefinition, ItemType
from .handlers import HANDLERS, PurchaseHandler
from .models import User
from .results import PurchaseFailure, PurchaseResult
from .rng import RandomSource, SeededRandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseRequest:
    key: str
    params: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> "PurchaseRequest":
        """Accept ``{"key": ...}`` or the older ``{"params": {"key": ...}}`` shape."""
        params = dict(raw.get("params") or {})
        key = raw.get("key", params.get("key"))
        if not isinstance(key, str) or not key:
            raise ValueError("Purchase request must include an item key")
        params.pop("key", None)
        return PurchaseRequest(key, params)


def check_purchase(
    user: User,
    item: ItemDefinition,
    catalog: ItemCatalog,
    config: Optional[EngineConfig] = None,
) -> Optional[PurchaseResult]:
    """Run every check ``buy`` would run, without mutating anything.

    Returns:
        The failed result, or None when the purchase would go through.
    """
    config = config or EngineConfig()
    failure = _gate(item, config)
    if failure is not None:
        return failure
    handler = _handler_for(item, catalog, SeededRandomSource(), config)
    return handler.validate(user, item)


def buy(
    user: User,
    request: Union[PurchaseRequest, Mapping[str, Any], str],
    callback: Optional[Callable[[PurchaseResult], None]] = None,
    *,
    catalog: Optional[ItemCatalog] = None,
    rng: Optional[RandomSource] = None,
    config: Optional[EngineConfig] = None,
) -> PurchaseResult:
    """Buy one item for ``user``.

    Args:
        user: User record, mutated in place on success
        request: PurchaseRequest, a request mapping, or a bare item key
        callback: Optional callable receiving the result
        catalog: Item catalog (defaults to the bundled catalog)
        rng: Random source for probabilistic rewards
        config: Engine configuration

    Returns:
        PurchaseResult; failures leave ``user`` unchanged.
    """
    if isinstance(request, str):
        request = PurchaseRequest(request)
    elif not isinstance(request, PurchaseRequest):
        try:
            request = PurchaseRequest.from_dict(request)
        except ValueError as exc:
            logger.debug(f"Rejected purchase request {dict(request)!r}: {exc}")
            return _finish(PurchaseResult.fail(PurchaseFailure.UNKNOWN_ITEM, MSG_MISSING_KEY), callback)

    catalog = catalog or load_default_catalog()
    config = config or EngineConfig()

    item = catalog.get_item(request.key)
    if item is None:
        logger.debug(f"Unknown item requested: {request.key}")
        result = PurchaseResult.fail(PurchaseFailure.UNKNOWN_ITEM, MSG_UNKNOWN_ITEM.format(key=request.key))
    else:
        result = _gate(item, config)
        if result is None:
            handler = _handler_for(item, catalog, rng or SeededRandomSource(), config)
            result = handler.purchase(user, item)

    return _finish(result, callback)


def _finish(
    result: PurchaseResult,
    callback: Optional[Callable[[PurchaseResult], None]],
) -> PurchaseResult:
    if callback is not None:
        callback(result)
    return result


def _gate(item: ItemDefinition, config: EngineConfig) -> Optional[PurchaseResult]:
    if item.type == ItemType.QUEST and item.gem_only:
        return PurchaseResult.fail(
            PurchaseFailure.QUEST_NOT_PURCHASABLE,
            MSG_QUEST_NOT_PURCHASABLE.format(key=item.key),
        )
    if item.cost.is_premium and not config.allow_gem_purchases:
        return PurchaseResult.fail(
            PurchaseFailure.PREMIUM_ITEM_NOT_PURCHASABLE,
            MSG_PREMIUM_NOT_PURCHASABLE.format(key=item.key),
        )
    return None


def _handler_for(
    item: ItemDefinition,
    catalog: ItemCatalog,
    rng: RandomSource,
    config: EngineConfig,
) -> PurchaseHandler:
    handler_cls = HANDLERS.get(item.type)
    if handler_cls is None:
        raise TypeError(f"No purchase handler registered for item type {item.type.value}")
    return handler_cls(catalog, rng, config)
