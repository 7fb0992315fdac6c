"""Shared constants for the Armoire purchase engine."""

from __future__ import annotations

# Equipment slots a piece of gear can occupy
GEAR_SLOTS = [
    "weapon",
    "armor",
    "head",
    "shield",
    "body",
    "back",
    "eyewear",
    "headAccessory",
]

# Health system constants
DEFAULT_MAX_HP = 50  # Ceiling for every class in the default configuration
POTION_RECOVERY = 15  # HP restored by a health potion

# Enchanted Armoire
ARMOIRE_POOL = "armoire"  # Gear set name of the armoire drop pool
ARMOIRE_EXP_BASE = 10  # Experience reward = floor(draw * spread + base)
ARMOIRE_EXP_SPREAD = 40

# Reward branches of the armoire
BRANCH_EQUIPMENT = "equipment"
BRANCH_FOOD = "food"
BRANCH_EXPERIENCE = "experience"

# Cumulative upper bounds (inclusive) checked in order against a single uniform draw.
# Draws past the last bound belong to the last branch.
ARMOIRE_OUTCOMES = [
    (0.5, BRANCH_EQUIPMENT),
    (0.7, BRANCH_FOOD),
    (0.9, BRANCH_EXPERIENCE),
]

# User flags
FLAG_ARMOIRE_OPENED = "armoire_opened"

# Stable user-facing messages
MSG_NOT_ENOUGH_GOLD = "Not Enough Gold"
MSG_NOT_ENOUGH_GEMS = "Not Enough Gems"
MSG_NOT_ELIGIBLE = "You can't buy this item"
MSG_UNKNOWN_ITEM = "Item '{key}' not found"
MSG_MISSING_KEY = "No item key given"
MSG_ALREADY_OWNED = "You already own that"
MSG_QUEST_NOT_PURCHASABLE = "Quest '{key}' is not available for Gold"
MSG_PREMIUM_NOT_PURCHASABLE = "'{key}' must be bought with Gems"

MSG_POTION = "You drink a Health Potion and recover {amount} HP."
MSG_GEAR = "You bought {text}."
MSG_QUEST = "You bought the quest scroll {text}."
MSG_FOOD = "You bought {text}."
MSG_ARMOIRE_EQUIPMENT = "You found a piece of rare Equipment in the Armoire: {text}! Awesome!"
MSG_ARMOIRE_FOOD = "You rummage in the Armoire and find {text}. What's that doing in here?"
MSG_ARMOIRE_EXPERIENCE = "You wrestle with the Armoire and gain {amount} Experience. Take that!"
