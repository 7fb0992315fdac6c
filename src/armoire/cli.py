from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.table import Table

from .catalog import load_default_catalog
from .config import EngineConfig, load_config
from .inventory import remaining_in_set
from .io import load_user, save_user, user_to_dict
from .models import User
from .rng import SeededRandomSource
from .shop import buy as buy_item

app = typer.Typer(add_completion=False)
DEFAULT_SAVE = Path("saves/user_001.yaml")


def _render_status(user: User, config: EngineConfig) -> None:
    s = user.stats
    rprint(f"[bold]{s.klass.title()}[/bold]  (level {s.lvl})")
    rprint(f"HP: {s.hp}/{config.max_hp_for(s.klass)}  MP: {s.mp}  Exp: {s.exp}")
    rprint(f"Gold: {s.gp}  Gems: {s.gems}")

    gear = user.items.gear
    table = Table(title="Gear", show_header=True, header_style="bold")
    table.add_column("Item")
    table.add_column("Equipped")
    equipped = set(gear.equipped.values())
    for key in sorted(k for k, v in gear.owned.items() if v):
        table.add_row(key, "yes" if key in equipped else "")
    rprint(table)

    if user.items.food:
        rprint("[bold]Food[/bold]")
        for key, count in sorted(user.items.food.items()):
            rprint(f"- {key} x{count}")

    if user.items.quests:
        rprint("[bold]Quest scrolls[/bold]")
        for key, count in sorted(user.items.quests.items()):
            rprint(f"- {key} x{count}")

    pool = config.armoire_pool
    rprint(f"[dim]Armoire items remaining:[/dim] {remaining_in_set(gear.owned, pool)}")


def _load_or_new(path: Path) -> User:
    if path.exists():
        return load_user(path)
    return User()


def _config(config_path: Optional[Path]) -> EngineConfig:
    if config_path is None:
        return EngineConfig()
    return load_config(config_path)


@app.callback()
def main_options(verbose: bool = typer.Option(False, "--verbose", "-v")):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def status(save: Path = DEFAULT_SAVE, config: Optional[Path] = None):
    _render_status(_load_or_new(save), _config(config))


@app.command()
def shop(save: Path = DEFAULT_SAVE, config: Optional[Path] = None):
    user = _load_or_new(save)
    cards = load_default_catalog().list_purchasable(user, _config(config))

    table = Table(title="Shop", show_header=True, header_style="bold")
    table.add_column("Key")
    table.add_column("Item")
    table.add_column("Price")
    table.add_column("Status")
    for card in cards:
        price = f"{card.cost.gems} gems" if card.cost.is_premium else f"{card.cost.gp}gp"
        state = "[green]available[/green]" if card.available else f"[red]{card.why_locked}[/red]"
        table.add_row(card.key, card.display_name, price, state)
    rprint(table)


@app.command()
def buy(
    key: str,
    save: Path = DEFAULT_SAVE,
    seed: Optional[int] = None,
    config: Optional[Path] = None,
):
    cfg = _config(config)
    user = _load_or_new(save)
    result = buy_item(user, key, rng=SeededRandomSource(seed), config=cfg)
    if result.success:
        save_user(user, save)
        rprint(f"[green]{result.message}[/green]")
    else:
        rprint(f"[red]{result.message}[/red]")
        raise typer.Exit(code=1)


@app.command()
def remaining(set_name: str = typer.Argument("armoire"), save: Path = DEFAULT_SAVE):
    user = _load_or_new(save)
    rprint(remaining_in_set(user.items.gear.owned, set_name))


@app.command()
def dump(save: Path = DEFAULT_SAVE):
    print(json.dumps(user_to_dict(_load_or_new(save)), indent=2, sort_keys=True))


def main():
    app()


if __name__ == "__main__":
    main()
