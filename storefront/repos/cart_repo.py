# storefront/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_item(self, cart_item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, cart_item_id)

    def find_line(self, user_id: int, product_id: int, variant_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
            CartItemModel.variant_id == variant_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_cart_items(self, user_id: int, for_update: bool = False) -> list[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        if for_update:
            #lock only cart rows, joined tables are locked separately
            stmt = stmt.with_for_update(of=CartItemModel)
        else:
            stmt = stmt.options(
                joinedload(CartItemModel.product),
                joinedload(CartItemModel.variant),
            )
        return list(self.db.execute(stmt).scalars().unique().all())

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def increment_quantity(self, cart_item_id: int, quantity: int) -> int:
        #UPDATE cart_items SET quantity = quantity + n, atomic in the database
        result = self.db.execute(
            update(CartItemModel)
            .where(CartItemModel.id == cart_item_id)
            .values(
                quantity=CartItemModel.quantity + quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cart_item(self, cart_item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.id == cart_item_id)
        )
        return result.rowcount

    def delete_user_items(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
        )
        return result.rowcount

    def delete_items_for_product(self, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.product_id == product_id)
        )
        return result.rowcount

    def delete_items_for_variant(self, variant_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.variant_id == variant_id)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
