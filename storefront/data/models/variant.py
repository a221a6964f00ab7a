# storefront/data/models/variant.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class ProductVariantModel(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    size = Column(String, nullable=False)
    color = Column(String, nullable=False)
    color_hex = Column(String(7), nullable=False, default="#808080")
    stock = Column(Integer, nullable=False, default=0)

    sku = Column(String, nullable=True, unique=True)
    price = Column(Numeric(10, 2), nullable=True)  # override, not used for order totals
    cost_price = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    product = relationship("ProductModel", back_populates="variants")

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_variant_stock_non_negative"),)
