"""Unit tests for the Cart aggregate and its quantity bounds."""

import itertools

import pytest

from storefront.domain.model.cart import Cart, clamp_quantity
from storefront.domain.model.value_objects import Money
from tests.fakes import make_product


def _quantities_in_bounds(cart: Cart) -> bool:
    return all(1 <= line.quantity <= line.stock_ceiling for line in cart.lines)


class TestAdd:

    def test_new_line(self):
        cart = Cart()
        line = cart.add(make_product("A", price="10.00", stock=5), 2)
        assert line.quantity == 2
        assert line.unit_price == Money.of("10.00")
        assert line.stock_ceiling == 5
        assert len(cart.lines) == 1

    def test_same_product_merges(self):
        cart = Cart()
        cart.add(make_product("A", stock=10), 2)
        cart.add(make_product("A", stock=10), 3)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 5

    def test_merge_clamps_to_stock_ceiling(self):
        cart = Cart()
        cart.add(make_product("A", stock=4), 3)
        cart.add(make_product("A", stock=4), 3)
        assert cart.lines[0].quantity == 4

    def test_new_line_clamps_to_stock_ceiling(self):
        cart = Cart()
        cart.add(make_product("A", stock=3), 10)
        assert cart.lines[0].quantity == 3

    def test_new_line_below_one_clamps_up(self):
        cart = Cart()
        cart.add(make_product("A", stock=3), 0)
        assert cart.lines[0].quantity == 1

    def test_lines_keep_insertion_order(self):
        cart = Cart()
        for pid in ("C", "A", "B"):
            cart.add(make_product(pid))
        assert [line.product_id for line in cart.lines] == ["C", "A", "B"]

    def test_price_snapshot_kept_on_merge(self):
        cart = Cart()
        cart.add(make_product("A", price="10.00"), 1)
        cart.add(make_product("A", price="99.00"), 1)
        assert cart.lines[0].unit_price == Money.of("10.00")


class TestRemoveAndUpdate:

    def test_remove_existing(self):
        cart = Cart()
        cart.add(make_product("A"))
        assert cart.remove("A") is True
        assert cart.is_empty

    def test_remove_absent_is_noop(self):
        cart = Cart()
        cart.add(make_product("A"))
        assert cart.remove("Z") is False
        assert len(cart.lines) == 1

    def test_set_quantity_clamps(self):
        cart = Cart()
        cart.add(make_product("A", stock=5))
        assert cart.set_quantity("A", 50).quantity == 5
        assert cart.set_quantity("A", -2).quantity == 1

    def test_set_quantity_absent_is_noop(self):
        cart = Cart()
        assert cart.set_quantity("Z", 3) is None
        assert cart.is_empty

    def test_last_write_wins(self):
        cart = Cart()
        cart.add(make_product("A", stock=10))
        cart.set_quantity("A", 5)
        cart.set_quantity("A", 1)
        assert cart.lines[0].quantity == 1

    def test_clear(self):
        cart = Cart()
        cart.add(make_product("A"))
        cart.add(make_product("B"))
        cart.clear()
        assert cart.is_empty
        assert cart.total == Money.zero()


class TestTotals:

    def test_total_is_sum_of_lines(self):
        cart = Cart()
        cart.add(make_product("A", price="10.00", stock=10), 2)
        cart.add(make_product("B", price="2.50", stock=10), 3)
        assert cart.total == Money.of("27.50")
        assert cart.item_count == 5

    def test_empty_total_is_zero(self):
        assert Cart().total == Money.of("0")

    def test_total_recomputed_after_update(self):
        cart = Cart()
        cart.add(make_product("A", price="4.00", stock=10), 1)
        cart.set_quantity("A", 3)
        assert cart.total == Money.of("12.00")


class TestQuantityBoundsHold:

    @pytest.mark.parametrize("ops", list(itertools.product([-3, 0, 1, 4, 9], repeat=3)))
    def test_any_sequence_stays_in_bounds(self, ops):
        cart = Cart()
        cart.add(make_product("A", stock=5), ops[0])
        assert _quantities_in_bounds(cart)
        cart.set_quantity("A", ops[1])
        assert _quantities_in_bounds(cart)
        cart.add(make_product("A", stock=5), ops[2])
        assert _quantities_in_bounds(cart)


class TestClamp:

    def test_within_range(self):
        assert clamp_quantity(3, 5) == 3

    def test_sold_out_ceiling_keeps_lower_bound(self):
        assert clamp_quantity(3, 0) == 1
