"""Smoke tests for the CLI commands that work without a backend."""

import pytest
from click.testing import CliRunner

from storefront.application.cart_store import CartStore
from storefront.infrastructure.cli.main import cli
from storefront.infrastructure.cli.payment_commands import parse_callback
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from tests.fakes import make_product


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STOREFRONT_API_URL", "http://127.0.0.1:9")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_cart_show_empty(data_dir):
    result = CliRunner().invoke(cli, ["cart", "show"])
    assert result.exit_code == 0
    assert "Your cart is empty." in result.output


def test_cart_show_and_update(data_dir):
    CartStore(JsonCartRepository(data_dir / "cart.json")).add_item(
        make_product("A", price="10.00", stock=3, name="Widget"), 1
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["cart", "update", "--product", "A", "--qty", "9"])
    assert result.exit_code == 0
    assert "Widget: qty 3" in result.output

    result = runner.invoke(cli, ["cart", "show"])
    assert "$30.00" in result.output


def test_submit_without_login_asks_to_log_in(data_dir):
    CartStore(JsonCartRepository(data_dir / "cart.json")).add_item(make_product("A"), 1)
    result = CliRunner().invoke(cli, ["order", "submit"])
    assert result.exit_code == 1
    assert "Please login to checkout" in result.output
    assert "storefront auth login" in result.output


def test_parse_callback_accepts_url_or_query():
    assert parse_callback("https://shop.example/orders?payment=success&orderId=o1") == {
        "payment": "success",
        "orderId": "o1",
    }
    assert parse_callback("?paymentID=TR1&status=success") == {
        "paymentID": "TR1",
        "status": "success",
    }


def test_corrupt_cart_file_does_not_block_commands(data_dir):
    (data_dir / "cart.json").write_text("{not json", encoding="utf-8")
    result = CliRunner().invoke(cli, ["cart", "show"])
    assert result.exit_code == 0
    assert "Your cart is empty." in result.output
