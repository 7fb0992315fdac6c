"""Content specification loaders for the item catalog.

This module provides data structures and loaders for:
- ItemDefinition: Immutable definition of a purchasable item (gear, food, quest, ...)
- Cost: Gold and gem price of an item
- YAML loaders for each content file, reporting errors as ``path:line: message``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml
from yaml.nodes import MappingNode, ScalarNode, SequenceNode


class ItemType(str, Enum):
    """Kinds of purchasable items, each served by its own handler."""
    POTION = "potion"
    GEAR = "gear"
    QUEST = "quest"
    ARMOIRE = "armoire"
    FOOD = "food"


@dataclass(frozen=True)
class Cost:
    """Price of an item in gold and/or gems."""
    gp: float = 0
    gems: int = 0

    @property
    def is_premium(self) -> bool:
        return self.gems > 0


@dataclass(frozen=True)
class ItemDefinition:
    """Read-only catalog entry.

    Attributes:
        key: Unique item key
        type: Item type used for handler dispatch
        text: Display name
        cost: Gold and gem price
        klass: Gear class (warrior, rogue, wizard, healer, armoire, ...)
        slot: Equipment slot the gear occupies
        set_name: Pool/set membership (e.g. "armoire")
        can_buy: Whether the item may be bought directly
        gem_only: Quest scrolls that can only be bought with gems
        can_drop: Food eligible as an armoire reward
    """
    key: str
    type: ItemType
    text: str
    cost: Cost = Cost()
    klass: Optional[str] = None
    slot: Optional[str] = None
    set_name: Optional[str] = None
    can_buy: bool = True
    gem_only: bool = False
    can_drop: bool = True


def load_gear(path: str | Path) -> Dict[str, ItemDefinition]:
    """Load gear definitions from YAML file.

    Args:
        path: Path to gear.yaml file

    Returns:
        Dict mapping gear key to ItemDefinition (empty if the file is missing)

    Raises:
        ValueError: If the file is malformed or defines a key twice
    """
    return _load_entries(path, "gear", _build_gear)


def load_food(path: str | Path) -> Dict[str, ItemDefinition]:
    """Load food definitions from YAML file."""
    return _load_entries(path, "food", _build_food)


def load_quests(path: str | Path) -> Dict[str, ItemDefinition]:
    """Load quest scroll definitions from YAML file."""
    return _load_entries(path, "quests", _build_quest)


def load_special(path: str | Path) -> Dict[str, ItemDefinition]:
    """Load special shop items (potion, armoire) from YAML file."""
    return _load_entries(path, "special", _build_special)


def _build_gear(entry: Dict[str, Any]) -> ItemDefinition:
    if not entry.get("slot"):
        raise ValueError(f"{entry['key']}: gear must declare a slot")
    return ItemDefinition(
        key=entry["key"],
        type=ItemType.GEAR,
        text=entry.get("text", entry["key"]),
        cost=Cost(gp=_number(entry, "value", 0)),
        klass=entry.get("klass"),
        slot=entry["slot"],
        set_name=entry.get("set"),
        can_buy=bool(entry.get("can_buy", True)),
    )


def _build_food(entry: Dict[str, Any]) -> ItemDefinition:
    return ItemDefinition(
        key=entry["key"],
        type=ItemType.FOOD,
        text=entry.get("text", entry["key"]),
        cost=Cost(gems=int(_number(entry, "gems", 1))),
        can_drop=bool(entry.get("can_drop", True)),
    )


def _build_quest(entry: Dict[str, Any]) -> ItemDefinition:
    gold = _number(entry, "gold", 0)
    gems = int(_number(entry, "gems", 0))
    return ItemDefinition(
        key=entry["key"],
        type=ItemType.QUEST,
        text=entry.get("text", entry["key"]),
        cost=Cost(gp=gold, gems=0 if gold else gems),
        gem_only=bool(entry.get("gem_only", gold <= 0)),
    )


def _build_special(entry: Dict[str, Any]) -> ItemDefinition:
    raw_type = entry.get("type")
    try:
        item_type = ItemType(raw_type)
    except ValueError as exc:
        raise ValueError(f"{entry['key']}: unknown item type '{raw_type}'") from exc
    return ItemDefinition(
        key=entry["key"],
        type=item_type,
        text=entry.get("text", entry["key"]),
        cost=Cost(gp=_number(entry, "value", 0)),
    )


def _number(entry: Dict[str, Any], field: str, default: float) -> float:
    value = entry.get(field, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{entry['key']}: {field} must be numeric")
    if value < 0:
        raise ValueError(f"{entry['key']}: {field} must not be negative")
    return value


def _load_entries(
    path: str | Path,
    section: str,
    build: Callable[[Dict[str, Any]], ItemDefinition],
) -> Dict[str, ItemDefinition]:
    file_path = Path(path)
    if not file_path.exists():
        return {}

    raw, text = _load_yaml_mapping(file_path)
    entries = raw.get(section, [])
    if not isinstance(entries, list):
        raise ValueError(f"{file_path}: {section} must be a list")

    index_lines = _entry_lines(text, section)
    out: Dict[str, ItemDefinition] = {}
    seen: Dict[str, int] = {}  # key -> first line number

    for idx, entry in enumerate(entries):
        line = index_lines[idx] if idx < len(index_lines) else None
        if not isinstance(entry, dict):
            raise ValueError(_format_entry_error(file_path, line, f"{section}[{idx}] must be a mapping"))
        key = entry.get("key")
        if not isinstance(key, str) or not key:
            raise ValueError(_format_entry_error(file_path, line, f"{section}[{idx}] key must be a string"))

        if key in seen:
            this_line = line if line is not None else "?"
            raise ValueError(
                f"{file_path}:{this_line}: duplicate key '{key}' "
                f"(first defined at line {seen[key]})"
            )
        seen[key] = line if line is not None else -1

        try:
            out[key] = build(entry)
        except ValueError as exc:
            raise ValueError(_format_entry_error(file_path, line, str(exc))) from exc

    return out


def _entry_lines(text: str, section: str) -> List[int]:
    try:
        root = yaml.compose(text)
    except yaml.YAMLError:
        return []
    if not isinstance(root, MappingNode):
        return []

    for key_node, value_node in root.value:
        if isinstance(key_node, ScalarNode) and key_node.value == section:
            if isinstance(value_node, SequenceNode):
                return [node.start_mark.line + 1 for node in value_node.value]
            break
    return []


def _format_entry_error(file_path: Path, line: int | None, message: str) -> str:
    if line is not None:
        return f"{file_path}:{line}: {message}"
    return f"{file_path}: {message}"


def _format_yaml_error(file_path: Path, error: yaml.YAMLError) -> str:
    mark = getattr(error, "problem_mark", None)
    detail = getattr(error, "problem", None)
    if mark is not None:
        detail = detail or str(error)
        return f"{file_path}:{mark.line + 1}:{mark.column + 1}: {detail}"
    return f"{file_path}: {error}"


def _load_yaml_mapping(file_path: Path) -> tuple[Dict[str, Any], str]:
    text = file_path.read_text(encoding="utf-8")
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(_format_yaml_error(file_path, exc)) from exc
    if raw is None:
        return {}, text
    if not isinstance(raw, dict):
        raise ValueError(f"{file_path}: expected a mapping at document root")
    return raw, text
