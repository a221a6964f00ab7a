# storefront/services/inventory_service.py
from sqlalchemy.orm import Session

from storefront.data.models.variant import ProductVariantModel
from storefront.domain.errors import ProductNotFound, VariantNotFound, OutOfStock
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def is_purchasable(variant: ProductVariantModel) -> bool:
    """In stock, or the product sells on backorder."""
    if variant.stock > 0:
        return True
    return bool(variant.product is not None and variant.product.allow_backorder)


class InventoryService:
    """
    Read-only queries over variant stock, keyed by (product, size, color).
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def find_variant(self, product_id: int, size: str, color: str) -> ProductVariantModel:
        variant = self.repo.find_variant(product_id, size, color)
        if not variant:
            raise VariantNotFound(
                f"Product {product_id} has no variant in size {size} / color {color}"
            )
        return variant

    def first_available_variant(self, product_id: int) -> ProductVariantModel:
        """
        First variant with stock > 0, in insertion order. Used by quick add
        when the shopper did not pick a size or color.
        """
        if not self.repo.get_product(product_id):
            raise ProductNotFound(product_id)

        for variant in self.repo.list_variants(product_id):
            if variant.stock > 0:
                return variant

        logger.info(f"No variant of product {product_id} is in stock")
        raise OutOfStock(f"Product {product_id} is out of stock")
