from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import yaml

from .constants import (
    ARMOIRE_EXP_BASE,
    ARMOIRE_EXP_SPREAD,
    ARMOIRE_POOL,
    DEFAULT_MAX_HP,
    POTION_RECOVERY,
)

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Tuning knobs for purchases and rewards.

    Item prices come from the catalog; everything that depends on the
    user's class or on reward rules lives here. Defaults match the
    standard game configuration.
    """

    potion_recovery: int = POTION_RECOVERY
    default_max_hp: int = DEFAULT_MAX_HP
    # Classes missing here are capped at default_max_hp
    class_max_hp: Dict[str, int] = field(default_factory=dict)
    armoire_pool: str = ARMOIRE_POOL
    armoire_exp_base: int = ARMOIRE_EXP_BASE
    armoire_exp_spread: int = ARMOIRE_EXP_SPREAD
    allow_gem_purchases: bool = False

    def max_hp_for(self, klass: str) -> int:
        return self.class_max_hp.get(klass, self.default_max_hp)


def load_config(path: Path) -> EngineConfig:
    """Load engine configuration from a YAML mapping.

    A missing file yields the defaults. Malformed content raises ValueError.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Engine config not found at {path}; using defaults")
        return EngineConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"{path}: {exc}") from exc
    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at document root")

    cfg = EngineConfig()
    try:
        cfg.potion_recovery = int(data.get("potion_recovery", cfg.potion_recovery))
        cfg.default_max_hp = int(data.get("default_max_hp", cfg.default_max_hp))
        cfg.armoire_pool = str(data.get("armoire_pool", cfg.armoire_pool))
        cfg.armoire_exp_base = int(data.get("armoire_exp_base", cfg.armoire_exp_base))
        cfg.armoire_exp_spread = int(data.get("armoire_exp_spread", cfg.armoire_exp_spread))
        cfg.allow_gem_purchases = _flag(data, "allow_gem_purchases", cfg.allow_gem_purchases)
        class_hp = data.get("class_max_hp")
        if class_hp is not None:
            if not isinstance(class_hp, dict):
                raise ValueError("class_max_hp must be a mapping")
            cfg.class_max_hp = {str(k): int(v) for k, v in class_hp.items()}
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{path}: {exc}") from exc

    if cfg.default_max_hp <= 0 or any(v <= 0 for v in cfg.class_max_hp.values()):
        raise ValueError(f"{path}: max hp values must be positive")
    logger.info(f"Loaded engine config from {path}")
    return cfg


def _flag(data: Dict, name: str, default: bool) -> bool:
    value = data.get(name, default)
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value
