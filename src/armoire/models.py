from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .constants import DEFAULT_MAX_HP, FLAG_ARMOIRE_OPENED


@dataclass
class Stats:
    hp: float = DEFAULT_MAX_HP   # 0..max_hp (class-derived)
    mp: float = 10
    gp: float = 0                # gold, never negative
    exp: int = 0
    gems: int = 0
    lvl: int = 1
    klass: str = "warrior"


@dataclass
class Gear:
    owned: Dict[str, bool] = field(default_factory=lambda: {"weapon_warrior_0": True})
    equipped: Dict[str, str] = field(default_factory=lambda: {"weapon": "weapon_warrior_0"})  # slot -> gear key


@dataclass
class Items:
    gear: Gear = field(default_factory=Gear)
    food: Dict[str, int] = field(default_factory=dict)     # food key -> count
    quests: Dict[str, int] = field(default_factory=dict)   # quest key -> scroll count


@dataclass
class Preferences:
    auto_equip: bool = False


@dataclass
class Achievements:
    ultimate_gear_sets: Dict[str, bool] = field(default_factory=dict)  # class -> earned


@dataclass
class User:
    """State of one user as seen by the purchase engine.

    The caller owns the record for the duration of a purchase; nothing here
    is synchronized.
    """
    stats: Stats = field(default_factory=Stats)
    items: Items = field(default_factory=Items)
    preferences: Preferences = field(default_factory=Preferences)
    achievements: Achievements = field(default_factory=Achievements)
    flags: Dict[str, Any] = field(default_factory=dict)


def has_ultimate_gear(user: User) -> bool:
    """True when the user completed the ultimate gear set of any class."""
    return any(user.achievements.ultimate_gear_sets.values())


def armoire_opened(user: User) -> bool:
    return bool(user.flags.get(FLAG_ARMOIRE_OPENED))
