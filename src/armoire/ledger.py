"""Gold and gem accounting against user stats."""

from __future__ import annotations

import logging

from .content_specs import Cost
from .models import User

logger = logging.getLogger(__name__)


class LedgerInvariantError(RuntimeError):
    """Raised when a debit is attempted that the balance cannot cover.

    Handlers check ``can_afford`` first, so this always indicates a bug in
    the caller rather than bad user input.
    """


def can_afford(user: User, cost: Cost) -> bool:
    return user.stats.gp >= cost.gp and user.stats.gems >= cost.gems


def debit(user: User, cost: Cost) -> None:
    """Subtract ``cost`` from the user's balances.

    Raises:
        LedgerInvariantError: If either balance would go negative
    """
    if cost.gp < 0 or cost.gems < 0:
        raise LedgerInvariantError(f"Cannot debit negative cost {cost}")
    if not can_afford(user, cost):
        raise LedgerInvariantError(
            f"Debit of {cost.gp}gp/{cost.gems} gems exceeds balance "
            f"{user.stats.gp}gp/{user.stats.gems} gems"
        )
    user.stats.gp -= cost.gp
    user.stats.gems -= cost.gems
    logger.debug(f"Debited {cost.gp}gp {cost.gems} gems; now {user.stats.gp}gp {user.stats.gems} gems")
