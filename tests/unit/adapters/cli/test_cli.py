"""
Tests des commandes CLI via typer.testing.CliRunner.

Chaque test pointe la configuration (base, store de session, logs) vers
tmp_path par variables d'environnement : chaque commande cree son propre
container et relit donc ces valeurs.
"""

import asyncio

import pytest
from sqlmodel import Session
from typer.testing import CliRunner

from orderflow.adapters.session import DiskCacheSessionStore
from orderflow.infrastructure.persistence.database import create_db_engine
from orderflow.infrastructure.persistence.repositories import (
    SQLModelOrderRepository,
    SQLModelProductRepository,
    SQLModelUserRepository,
)
from orderflow.main import app
from orderflow.services.user_service import EMAIL_TOKEN_KEY

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Isole la configuration des commandes dans tmp_path."""
    database_url = f"sqlite:///{tmp_path}/cli.db"
    monkeypatch.setenv("ORDERFLOW_DATABASE_URL", database_url)
    monkeypatch.setenv("ORDERFLOW_SESSION_STORE_DIR", str(tmp_path / "sessions"))
    monkeypatch.setenv("ORDERFLOW_LOG_FILE", str(tmp_path / "logs" / "orderflow.log"))
    monkeypatch.setenv("ORDERFLOW_GATEWAY_MODE", "stub")
    return {"database_url": database_url, "session_dir": tmp_path / "sessions"}


def _invoke(*args: str, input: str | None = None):
    return runner.invoke(app, list(args), input=input)


class TestInventoryCommands:
    def test_add_and_show_product(self, cli_env) -> None:
        added = _invoke("add-product", "LAMP-1", "Lampe", "19.90", "--stock", "5")
        shown = _invoke("show-stock", "LAMP-1")

        assert added.exit_code == 0, added.output
        assert "Produit ajoute" in added.output
        assert shown.exit_code == 0, shown.output
        assert "LAMP-1" in shown.output
        assert "19.90" in shown.output

    def test_adjust_stock(self, cli_env) -> None:
        _invoke("add-product", "LAMP-1", "Lampe", "19.90", "--stock", "5")

        down = _invoke("adjust-stock", "LAMP-1", "2", "-r", "casse", "-d", "decrease")
        too_much = _invoke("adjust-stock", "LAMP-1", "9", "-r", "casse", "-d", "decrease")

        assert down.exit_code == 0, down.output
        assert "stock_after" in down.output
        assert too_much.exit_code == 1
        assert "InsufficientStock" in too_much.output

    def test_stock_take_reports_discrepancies(self, cli_env) -> None:
        _invoke("add-product", "LAMP-1", "Lampe", "19.90", "--stock", "5")
        _invoke("add-product", "VIS-1", "Vis", "0.10", "--stock", "50")

        result = _invoke("stock-take", "LAMP-1=3", "VIS-1=50")

        assert result.exit_code == 0, result.output
        assert "Inventaire termine" in result.output
        assert "5 -> 3 (-2)" in result.output

    def test_stock_take_rejects_bad_format(self, cli_env) -> None:
        _invoke("add-product", "LAMP-1", "Lampe", "19.90")
        result = _invoke("stock-take", "LAMP-1:3")
        assert result.exit_code != 0

    def test_unknown_sku_exits_with_error(self, cli_env) -> None:
        result = _invoke("show-stock", "NOPE")
        assert result.exit_code == 1
        assert "Produit inconnu" in result.output

    def test_invalid_price_is_reported(self, cli_env) -> None:
        result = _invoke("add-product", "LAMP-1", "Lampe", "gratuit")
        assert result.exit_code == 1
        assert "ValidationError" in result.output


class TestUserAndOrderCommands:
    def test_register_verify_and_order(self, cli_env) -> None:
        _invoke("add-product", "LAMP-1", "Lampe", "19.90", "--stock", "5")

        registered = _invoke(
            "register-user",
            "bruno",
            "bruno@example.com",
            "--first-name",
            "Bruno",
            "--last-name",
            "Petit",
            input="motdepasse1\nmotdepasse1\n",
        )
        assert registered.exit_code == 0, registered.output

        engine = create_db_engine(cli_env["database_url"])
        with Session(engine) as session:
            user = SQLModelUserRepository(session).find_by_username("bruno")
        store = DiskCacheSessionStore(cli_env["session_dir"])
        try:
            token = asyncio.run(store.get(user.id, EMAIL_TOKEN_KEY))
        finally:
            store.close()

        verified = _invoke("verify-email", user.id, token)
        ordered = _invoke("create-order", user.id, "-i", "LAMP-1:2", "-a", "3 place du Marche")

        assert verified.exit_code == 0, verified.output
        assert ordered.exit_code == 0, ordered.output
        assert "Commande creee" in ordered.output
        with Session(engine) as session:
            orders = SQLModelOrderRepository(session).find_by_user(user.id)
            product = SQLModelProductRepository(session).find_by_sku("LAMP-1")
        engine.dispose()
        assert len(orders) == 1
        assert str(orders[0].total.amount) == "39.80"
        assert product is not None

    def test_create_order_with_unknown_sku(self, cli_env) -> None:
        result = _invoke("create-order", "u1", "-i", "GHOST:1", "-a", "adresse")
        assert result.exit_code != 0

    def test_unverified_user_cannot_order(self, cli_env) -> None:
        _invoke("add-product", "LAMP-1", "Lampe", "19.90", "--stock", "5")
        _invoke(
            "register-user",
            "carla",
            "carla@example.com",
            "--first-name",
            "Carla",
            "--last-name",
            "Blanc",
            "--password",
            "motdepasse1",
        )
        engine = create_db_engine(cli_env["database_url"])
        with Session(engine) as session:
            user = SQLModelUserRepository(session).find_by_username("carla")
        engine.dispose()

        result = _invoke("create-order", user.id, "-i", "LAMP-1:1", "-a", "adresse")

        assert result.exit_code == 1
        assert "BusinessError" in result.output


class TestInfoCommands:
    def test_version(self) -> None:
        from orderflow import __version__

        result = _invoke("version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = _invoke("--help")
        assert result.exit_code == 0
        for name in ("create-order", "adjust-stock", "register-user", "serve"):
            assert name in result.output
