#!/usr/bin/env python3
"""Basic usage example.

This example buys a potion, a piece of gear and opens the Enchanted Armoire
a few times with a seeded random source.
"""

from armoire.inventory import remaining_in_set
from armoire.models import User
from armoire.rng import SeededRandomSource
from armoire.shop import buy


def main():
    print("=" * 60)
    print("Armoire - Basic Usage Example")
    print("=" * 60)

    user = User()
    user.stats.gp = 600
    user.stats.hp = 20
    user.preferences.auto_equip = True
    user.achievements.ultimate_gear_sets = {"warrior": True}

    print("\n1. Buying a health potion...")
    result = buy(user, {"key": "potion"})
    print(f"  {result.message}  (HP {user.stats.hp}, Gold {user.stats.gp})")

    print("\n2. Buying leather armor...")
    result = buy(user, {"key": "armor_warrior_1"})
    print(f"  {result.message}  (equipped armor: {user.items.gear.equipped.get('armor')})")

    print("\n3. Opening the Enchanted Armoire...")
    rng = SeededRandomSource(2024)
    while user.stats.gp >= 100:
        result = buy(user, {"key": "armoire"}, rng=rng)
        print(f"  {result.message}")

    print("\n4. Summary:")
    print(f"  Gold left: {user.stats.gp}")
    print(f"  Experience: {user.stats.exp}")
    print(f"  Food: {user.items.food}")
    print(f"  Armoire items still to find: {remaining_in_set(user.items.gear.owned, 'armoire')}")

    print("\n5. Trying to buy without enough gold...")
    result = buy(user, {"key": "armoire"}, rng=rng)
    print(f"  {result.message}")


if __name__ == "__main__":
    main()
