"""Tests for the typer command line front end."""

from typer.testing import CliRunner

from armoire.cli import app
from armoire.io import load_user, save_user
from armoire.models import User

runner = CliRunner()


def _saved_user(tmp_path, gp=200):
    user = User()
    user.stats.gp = gp
    user.stats.hp = 30
    path = tmp_path / "user.yaml"
    save_user(user, path)
    return path


def test_buy_potion_updates_save(tmp_path):
    path = _saved_user(tmp_path)

    result = runner.invoke(app, ["buy", "potion", "--save", str(path)])

    assert result.exit_code == 0
    user = load_user(path)
    assert user.stats.hp == 45
    assert user.stats.gp == 175


def test_failed_buy_exits_nonzero_and_keeps_save(tmp_path):
    path = _saved_user(tmp_path, gp=10)

    result = runner.invoke(app, ["buy", "potion", "--save", str(path)])

    assert result.exit_code == 1
    assert "Not Enough Gold" in result.output
    assert load_user(path).stats.gp == 10


def test_remaining_for_new_user(tmp_path):
    path = tmp_path / "missing.yaml"

    result = runner.invoke(app, ["remaining", "armoire", "--save", str(path)])

    assert result.exit_code == 0
    assert result.output.strip().isdigit()


def test_shop_and_status_render(tmp_path):
    path = _saved_user(tmp_path)

    shop = runner.invoke(app, ["shop", "--save", str(path)])
    status = runner.invoke(app, ["status", "--save", str(path)])

    assert shop.exit_code == 0
    assert "potion" in shop.output
    assert status.exit_code == 0
    assert "Gold" in status.output
