"""Tests for the cart ledger: merging, quantity rules, removal and listing."""

import pytest

from storefront.data.models import CartItemModel
from storefront.domain.errors import (
    CartItemNotFound,
    InvalidQuantity,
    OutOfStock,
    ProductNotFound,
    UserNotFound,
    VariantMismatch,
    VariantNotFound,
)
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService


def _lines(db, user_id):
    db.expire_all()
    return db.query(CartItemModel).filter(CartItemModel.user_id == user_id).all()


class TestAddToCart:
    def test_adds_new_line(self, db, catalog):
        item = CartService(db).add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 2)
        assert item.id is not None
        assert item.quantity == 2
        assert item.variant_id == catalog.coat_l_black_id

    def test_default_quantity_is_one(self, db, catalog):
        item = CartService(db).add_to_cart(catalog.user_id, catalog.sweater_id, catalog.sweater_m_navy_id)
        assert item.quantity == 1

    def test_same_variant_merges_into_one_line(self, db, catalog):
        svc = CartService(db)
        first = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 2)
        second = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 3)

        lines = _lines(db, catalog.user_id)
        assert len(lines) == 1
        assert lines[0].quantity == 5
        assert second.id == first.id

    def test_merge_bumps_updated_at(self, db, catalog):
        svc = CartService(db)
        item = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        before = item.updated_at
        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        assert _lines(db, catalog.user_id)[0].updated_at >= before

    def test_different_variants_get_separate_lines(self, db, catalog):
        svc = CartService(db)
        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        svc.add_to_cart(catalog.user_id, catalog.sweater_id, catalog.sweater_m_navy_id, 1)
        assert len(_lines(db, catalog.user_id)) == 2

    def test_carts_are_per_user(self, db, catalog):
        svc = CartService(db)
        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        svc.add_to_cart(catalog.other_user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        assert len(_lines(db, catalog.user_id)) == 1
        assert len(_lines(db, catalog.other_user_id)) == 1

    def test_variant_of_another_product_is_rejected(self, db, catalog):
        with pytest.raises(VariantMismatch) as exc:
            CartService(db).add_to_cart(catalog.user_id, catalog.coat_id, catalog.sweater_m_navy_id, 1)
        assert isinstance(exc.value, VariantNotFound)
        assert _lines(db, catalog.user_id) == []

    def test_unknown_variant(self, db, catalog):
        with pytest.raises(VariantNotFound):
            CartService(db).add_to_cart(catalog.user_id, catalog.coat_id, 9999, 1)

    def test_unknown_product(self, db, catalog):
        with pytest.raises(ProductNotFound):
            CartService(db).add_to_cart(catalog.user_id, 9999, catalog.coat_l_black_id, 1)

    def test_unknown_user(self, db, catalog):
        with pytest.raises(UserNotFound):
            CartService(db).add_to_cart(404, catalog.coat_id, catalog.coat_l_black_id, 1)

    def test_variant_without_stock_is_rejected(self, db, catalog):
        with pytest.raises(OutOfStock):
            CartService(db).add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_m_black_id, 1)

    def test_backorder_product_accepts_zero_stock(self, db, catalog, product_factory):
        product, (variant,) = product_factory("Preorder Boots", "210.00", [("42", "Brown", 0)], allow_backorder=True)
        item = CartService(db).add_to_cart(catalog.user_id, product.id, variant.id, 1)
        assert item.quantity == 1

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_invalid_quantity(self, db, catalog, quantity):
        with pytest.raises(InvalidQuantity):
            CartService(db).add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, quantity)


class TestConcurrentMerge:
    def test_insert_conflict_is_retried_as_increment(self, db, catalog, monkeypatch):
        svc = CartService(db)
        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 2)

        # first lookup misses the existing line, as if another request inserted it
        # between our SELECT and INSERT
        real_find_line = CartRepo.find_line
        calls = {"n": 0}

        def stale_find_line(self, *args):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return real_find_line(self, *args)

        monkeypatch.setattr(CartRepo, "find_line", stale_find_line)

        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 3)

        lines = _lines(db, catalog.user_id)
        assert len(lines) == 1
        assert lines[0].quantity == 5
        assert calls["n"] == 2


class TestQuickAdd:
    def test_uses_first_variant_in_stock(self, db, catalog):
        item = CartService(db).quick_add(catalog.user_id, catalog.coat_id)
        assert item.variant_id == catalog.coat_l_black_id
        assert item.quantity == 1

    def test_merges_with_existing_line(self, db, catalog):
        svc = CartService(db)
        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        svc.quick_add(catalog.user_id, catalog.coat_id, 2)
        lines = _lines(db, catalog.user_id)
        assert [(line.variant_id, line.quantity) for line in lines] == [(catalog.coat_l_black_id, 3)]

    def test_out_of_stock_product(self, db, catalog, product_factory):
        product, _ = product_factory("Sold Out Coat", "295.00", [("M", "Black", 0)])
        with pytest.raises(OutOfStock):
            CartService(db).quick_add(catalog.user_id, product.id)


class TestUpdateQuantity:
    def test_sets_quantity(self, db, catalog):
        svc = CartService(db)
        item = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        updated = svc.update_quantity(item.id, 4)
        assert updated.quantity == 4

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_floor_is_one_and_line_is_unchanged(self, db, catalog, quantity):
        svc = CartService(db)
        item = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 2)
        with pytest.raises(InvalidQuantity):
            svc.update_quantity(item.id, quantity)
        assert _lines(db, catalog.user_id)[0].quantity == 2

    def test_missing_line(self, db, catalog):
        with pytest.raises(CartItemNotFound):
            CartService(db).update_quantity(9999, 1)

    def test_line_of_another_user(self, db, catalog):
        svc = CartService(db)
        item = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        with pytest.raises(PermissionError):
            svc.update_quantity(item.id, 3, user_id=catalog.other_user_id)
        assert _lines(db, catalog.user_id)[0].quantity == 1


class TestRemoveItem:
    def test_removes_line(self, db, catalog):
        svc = CartService(db)
        item = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        svc.remove_item(item.id)
        assert _lines(db, catalog.user_id) == []

    def test_removing_twice_is_not_an_error(self, db, catalog):
        svc = CartService(db)
        item = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        item_id = item.id
        svc.remove_item(item_id)
        svc.remove_item(item_id)
        svc.remove_item(424242)

    def test_line_of_another_user(self, db, catalog):
        svc = CartService(db)
        item = svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        with pytest.raises(PermissionError):
            svc.remove_item(item.id, user_id=catalog.other_user_id)
        assert len(_lines(db, catalog.user_id)) == 1


class TestListAndClear:
    def test_list_joins_product_and_variant_in_insertion_order(self, db, catalog):
        svc = CartService(db)
        svc.add_to_cart(catalog.user_id, catalog.sweater_id, catalog.sweater_m_navy_id, 2)
        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)

        lines = svc.list_cart(catalog.user_id)
        assert [line.product.name for line in lines] == ["Merino Sweater", "Wool Coat"]
        assert [(line.variant.size, line.variant.color) for line in lines] == [("M", "Navy"), ("L", "Black")]

    def test_list_empty_cart(self, db, catalog):
        assert CartService(db).list_cart(catalog.user_id) == []

    def test_clear_removes_only_that_users_lines(self, db, catalog):
        svc = CartService(db)
        svc.add_to_cart(catalog.user_id, catalog.coat_id, catalog.coat_l_black_id, 1)
        svc.add_to_cart(catalog.user_id, catalog.sweater_id, catalog.sweater_m_navy_id, 1)
        svc.add_to_cart(catalog.other_user_id, catalog.coat_id, catalog.coat_l_black_id, 1)

        assert svc.clear_cart(catalog.user_id) == 2
        assert svc.list_cart(catalog.user_id) == []
        assert len(svc.list_cart(catalog.other_user_id)) == 1

    def test_clear_empty_cart(self, db, catalog):
        assert CartService(db).clear_cart(catalog.user_id) == 0
