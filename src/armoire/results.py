"""Result types returned by every purchase.

Expected business failures are values, not exceptions: the engine always
hands back a ``PurchaseResult`` and leaves the user untouched on failure.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class PurchaseFailure(str, Enum):
    """Why a purchase was refused."""
    INSUFFICIENT_GOLD = "insufficient_gold"
    INSUFFICIENT_GEMS = "insufficient_gems"
    NOT_ELIGIBLE = "not_eligible"
    UNKNOWN_ITEM = "unknown_item"
    QUEST_NOT_PURCHASABLE = "quest_not_purchasable"
    PREMIUM_ITEM_NOT_PURCHASABLE = "premium_item_not_purchasable"
    ALREADY_OWNED = "already_owned"


@dataclass
class PurchaseResult:
    """Outcome of a single purchase."""
    success: bool
    message: str
    code: Optional[PurchaseFailure] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **data: Any) -> "PurchaseResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, code: PurchaseFailure, message: str) -> "PurchaseResult":
        return cls(success=False, message=message, code=code)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["code"] = self.code.value if self.code else None
        return out
