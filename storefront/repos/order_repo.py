# storefront/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        #flush only, id is needed for the items, commit belongs to the caller
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order(self, order_id: int, with_items: bool = False) -> OrderModel | None:
        if not with_items:
            return self.db.get(OrderModel, order_id)
        stmt = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.items))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_order_for_update(self, order_id: int) -> OrderModel | None:
        stmt = select(OrderModel).where(OrderModel.id == order_id).with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_idempotency_key(self, user_id: int, key: str) -> OrderModel | None:
        stmt = select(OrderModel).where(
            OrderModel.user_id == user_id,
            OrderModel.idempotency_key == key,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders(self, user_id: int | None = None) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_order_items(self, order_id: int) -> list[OrderItemModel]:
        stmt = (
            select(OrderItemModel)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
