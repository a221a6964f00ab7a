# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime


class UserCreate(BaseModel):
    """Schema for registering a user."""

    id: int = Field(..., gt=0, description="User ID (must be > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str | None = Field(None, max_length=255)
    is_admin: bool = False


class UserRead(BaseModel):
    """Schema for a user (response)."""

    id: int
    name: str
    email: str | None = None
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


# -- catalog --

class ProductIn(BaseModel):
    """Schema for creating a product."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_src: str | None = None
    images: List[str] = []
    allow_backorder: bool = False


class ProductUpdate(BaseModel):
    """Partial product update, only the fields sent are changed."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    image_src: str | None = None
    images: List[str] | None = None
    allow_backorder: bool | None = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    image_src: str | None = None
    images: List[str] = []
    allow_backorder: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VariantIn(BaseModel):
    """Schema for creating a variant of a product."""

    product_id: int = Field(..., gt=0)
    size: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)
    color_hex: str = Field("#808080", pattern=r"^#[0-9A-Fa-f]{6}$")
    stock: int = 0
    sku: str | None = None
    price: Decimal | None = Field(None, ge=0)
    cost_price: Decimal | None = Field(None, ge=0)


class VariantUpdate(BaseModel):
    size: str | None = Field(None, min_length=1)
    color: str | None = Field(None, min_length=1)
    color_hex: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    stock: int | None = None
    sku: str | None = None
    price: Decimal | None = Field(None, ge=0)
    cost_price: Decimal | None = Field(None, ge=0)


class VariantOut(BaseModel):
    id: int
    product_id: int
    size: str
    color: str
    color_hex: str
    stock: int
    sku: str | None = None
    price: Decimal | None = None
    cost_price: Decimal | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductWithVariantsOut(ProductOut):
    variants: List[VariantOut] = []


# -- cart --

class CartItemIn(BaseModel):
    """Schema for adding a variant to the cart. Quantity is validated by the service."""

    product_id: int = Field(..., gt=0, description="Product ID")
    variant_id: int = Field(..., gt=0, description="Variant ID")
    quantity: int = 1


class QuickAddIn(BaseModel):
    """Add without picking size/color, first in-stock variant is used."""

    product_id: int = Field(..., gt=0)
    quantity: int = 1


class CartItemUpdate(BaseModel):
    quantity: int


class CartItemOut(BaseModel):
    """Schema for a cart line (response)."""

    id: int
    user_id: int
    product_id: int
    variant_id: int
    quantity: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartLineOut(CartItemOut):
    """Cart line joined with the current product and variant."""

    product: ProductOut
    variant: VariantOut


# -- orders --

class OrderCreate(BaseModel):
    """
    Schema for checkout. Lines and prices are always read from the
    server-side cart, any items sent by the client are ignored.
    """

    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    shipping_address: str = Field(..., min_length=1)


class OrderStatusUpdate(BaseModel):
    status: str


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: int | None = None
    variant_id: int | None = None
    quantity: int
    price: Decimal
    product_name: str
    size: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: int
    user_id: int
    customer_name: str
    customer_email: str
    shipping_address: str
    status: str
    total: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderWithItemsOut(OrderOut):
    items: List[OrderItemOut] = []


# -- admin --

class RequestLogEntryOut(BaseModel):
    method: str
    path: str
    status: int
    duration_ms: float
    timestamp: datetime


class HealthOut(BaseModel):
    status: str
    uptime: int
    timestamp: datetime
