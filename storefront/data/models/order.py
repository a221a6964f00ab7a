from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    shipping_address = Column(Text, nullable=False)

    status = Column(String, nullable=False, default="pending")  # see domain.order_status
    total = Column(Numeric(10, 2), nullable=False)
    idempotency_key = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )

    __table_args__ = (UniqueConstraint("user_id", "idempotency_key", name="u_order_user_idempotency_key"),)
