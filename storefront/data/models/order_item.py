from sqlalchemy import Column, Integer, ForeignKey, String, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    """Snapshot of one purchased variant. Written once at checkout, never updated."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    # history survives catalog deletes
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    variant_id = Column(Integer, ForeignKey("product_variants.id", ondelete="SET NULL"), nullable=True)

    quantity = Column(Integer, nullable=False)
    # units actually taken from stock, less than quantity for backorders
    reserved = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False)
    product_name = Column(String, nullable=False)
    size = Column(String, nullable=False)
    color = Column(String, nullable=False)

    order = relationship("OrderModel", back_populates="items")
