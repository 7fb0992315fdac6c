from __future__ import annotations

from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import Achievements, Gear, Items, Preferences, Stats, User


def user_to_dict(user: User) -> Dict[str, Any]:
    return asdict(user)


def user_from_dict(raw: Dict[str, Any]) -> User:
    """Build a User from a plain mapping, filling in defaults for missing sections."""
    stats_raw = raw.get("stats") or {}
    known = {f.name for f in fields(Stats)}
    unknown = sorted(str(k) for k in stats_raw if k not in known)
    if unknown:
        raise ValueError(f"unknown stats fields: {', '.join(unknown)}")
    stats = Stats(**stats_raw)

    items_raw = raw.get("items") or {}
    gear_raw = items_raw.get("gear") or {}
    gear = Gear()
    if "owned" in gear_raw:
        gear.owned = {str(k): bool(v) for k, v in (gear_raw["owned"] or {}).items()}
    if "equipped" in gear_raw:
        gear.equipped = {str(k): str(v) for k, v in (gear_raw["equipped"] or {}).items()}
    items = Items(
        gear=gear,
        food={str(k): int(v) for k, v in (items_raw.get("food") or {}).items()},
        quests={str(k): int(v) for k, v in (items_raw.get("quests") or {}).items()},
    )

    prefs_raw = raw.get("preferences") or {}
    ach_raw = raw.get("achievements") or {}
    return User(
        stats=stats,
        items=items,
        preferences=Preferences(auto_equip=bool(prefs_raw.get("auto_equip", False))),
        achievements=Achievements(
            ultimate_gear_sets={str(k): bool(v) for k, v in (ach_raw.get("ultimate_gear_sets") or {}).items()}
        ),
        flags=dict(raw.get("flags") or {}),
    )


def save_user(user: User, path: Path) -> None:
    """Save a user record to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(user_to_dict(user), default_flow_style=False, sort_keys=True), encoding="utf-8"
    )


def load_user(path: Path) -> User:
    """Load a user record from a YAML file.

    Raises:
        ValueError: If the file is not a YAML mapping or has unknown stats fields
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        return User()
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at document root")
    try:
        return user_from_dict(raw)
    except ValueError as exc:
        raise ValueError(f"{path}: {exc}") from exc
