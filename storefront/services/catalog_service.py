# storefront/services/catalog_service.py
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.variant import ProductVariantModel
from storefront.domain.errors import (
    InvalidQuantity,
    ProductNotFound,
    StorefrontError,
    VariantNotFound,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_PRODUCT_FIELDS = ("name", "description", "price", "image_src", "images", "allow_backorder")
_VARIANT_FIELDS = ("size", "color", "color_hex", "stock", "sku", "price", "cost_price")


def _check_stock(stock):
    if stock is None:
        return
    if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
        raise InvalidQuantity(f"Stock must be a non-negative integer, got {stock!r}")


class CatalogService:
    """
    Products and their variants: reads for the shop, CRUD for the owner.
    Stock figures are only ever set here (admin edits, imports) and by checkout.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.cart_repo = CartRepo(db)

    #query
    def list_products(self) -> list[ProductModel]:
        return self.repo.list_products()

    def products_with_variants(self) -> list[ProductModel]:
        return self.repo.list_products(with_variants=True)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    def list_variants(self, product_id: int) -> list[ProductVariantModel]:
        self.get_product(product_id)
        return self.repo.list_variants(product_id)

    def get_variant(self, variant_id: int) -> ProductVariantModel:
        variant = self.repo.get_variant(variant_id)
        if not variant:
            raise VariantNotFound(f"Variant {variant_id} not found")
        return variant

    #commands
    def create_product(self, data: Dict[str, Any]) -> ProductModel:
        product = ProductModel(**{k: v for k, v in data.items() if k in _PRODUCT_FIELDS})
        self.repo.add_product(product)
        self.repo.commit()
        logger.info(f"Created product {product.id} ({product.name})")
        return product

    def update_product(self, product_id: int, changes: Dict[str, Any]) -> ProductModel:
        product = self.get_product(product_id)
        for field, value in changes.items():
            if field in _PRODUCT_FIELDS:
                setattr(product, field, value)
        self.repo.commit()
        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            return
        #cart lines go with the product, order lines keep their snapshot
        removed = self.cart_repo.delete_items_for_product(product_id)
        self.repo.delete_product(product)
        self.repo.commit()
        logger.info(f"Deleted product {product_id} ({removed} cart lines removed)")

    def create_variant(self, data: Dict[str, Any]) -> ProductVariantModel:
        self.get_product(data["product_id"])
        _check_stock(data.get("stock", 0))

        variant = ProductVariantModel(
            product_id=data["product_id"],
            **{k: v for k, v in data.items() if k in _VARIANT_FIELDS},
        )
        try:
            self.repo.add_variant(variant)
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise StorefrontError(f"SKU {data.get('sku')!r} is already in use") from None

        logger.info(
            f"Created variant {variant.id} of product {variant.product_id} "
            f"({variant.size}/{variant.color}, stock {variant.stock})"
        )
        return variant

    def update_variant(self, variant_id: int, changes: Dict[str, Any]) -> ProductVariantModel:
        variant = self.get_variant(variant_id)
        _check_stock(changes.get("stock"))

        for field, value in changes.items():
            if field in _VARIANT_FIELDS:
                setattr(variant, field, value)
        try:
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise StorefrontError(f"SKU {changes.get('sku')!r} is already in use") from None

        logger.info(f"Updated variant {variant_id}: {sorted(changes)}")
        return variant

    def delete_variant(self, variant_id: int) -> None:
        variant = self.repo.get_variant(variant_id)
        if not variant:
            return
        removed = self.cart_repo.delete_items_for_variant(variant_id)
        self.repo.delete_variant(variant)
        self.repo.commit()
        logger.info(f"Deleted variant {variant_id} ({removed} cart lines removed)")
