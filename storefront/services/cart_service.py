from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
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
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.inventory_service import InventoryService, is_purchasable
from storefront.utils.logging import get_logger
from storefront.utils.retry import conflict_retry

logger = get_logger(__name__)


def check_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(f"Quantity must be an integer, got {quantity!r}")
    if quantity < 1:
        raise InvalidQuantity(f"Quantity must be at least 1, got {quantity}")
    return quantity


class CartService:
    """
    Cart ledger: one line per (user, product, variant).
    commands (add, quick add, update, remove, clear) change state
    query (list) only reads
    """

    def __init__(self, db: Session, inventory: InventoryService | None = None):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.inventory = inventory or InventoryService(db)

    #query
    def list_cart(self, user_id: int) -> list[CartItemModel]:
        """Lines joined with the current product and variant, oldest first."""
        return self.repo.get_cart_items(user_id)

    #commands
    def add_to_cart(
        self,
        user_id: int,
        product_id: int,
        variant_id: int,
        quantity: int = 1,
    ) -> CartItemModel:
        check_quantity(quantity)

        if not self.users.get_user(user_id):
            raise UserNotFound(user_id)

        product = self.products.get_product(product_id)
        if not product:
            raise ProductNotFound(product_id)

        variant = self.products.get_variant(variant_id)
        if not variant:
            raise VariantNotFound(f"Variant {variant_id} not found")
        if variant.product_id != product.id:
            raise VariantMismatch(variant_id, product_id)

        if not is_purchasable(variant):
            raise OutOfStock(
                f"{product.name} ({variant.size}/{variant.color}) is out of stock"
            )

        return self._merge_line(user_id, product_id, variant_id, quantity)

    def quick_add(self, user_id: int, product_id: int, quantity: int = 1) -> CartItemModel:
        check_quantity(quantity)
        variant = self.inventory.first_available_variant(product_id)
        logger.info(
            f"Quick add for user {user_id}: product {product_id} resolved to variant "
            f"{variant.id} ({variant.size}/{variant.color})"
        )
        return self.add_to_cart(user_id, product_id, variant.id, quantity)

    @conflict_retry()
    def _merge_line(self, user_id: int, product_id: int, variant_id: int, quantity: int) -> CartItemModel:
        # a concurrent request may insert the same line between our SELECT and INSERT,
        # the unique constraint rejects the second insert and the retry increments instead
        try:
            existing = self.repo.find_line(user_id, product_id, variant_id)

            if existing and self.repo.increment_quantity(existing.id, quantity):
                logger.info(
                    f"Variant {variant_id} already in cart of user {user_id}, "
                    f"adding {quantity} to line {existing.id}"
                )
                item = existing
            else:
                logger.info(f"Adding variant {variant_id} x{quantity} to cart of user {user_id}")
                item = self.repo.add_cart_item(
                    CartItemModel(
                        user_id=user_id,
                        product_id=product_id,
                        variant_id=variant_id,
                        quantity=quantity,
                    )
                )

            self.repo.commit()
            return item

        except IntegrityError:
            self.repo.rollback()
            logger.warning(
                f"Cart line conflict for user {user_id}, product {product_id}, variant {variant_id}"
            )
            raise

    def update_quantity(self, cart_item_id: int, quantity: int, user_id: int | None = None) -> CartItemModel:
        # zero is not a removal, callers use remove_item for that
        check_quantity(quantity)

        item = self.repo.get_cart_item(cart_item_id)
        if not item:
            raise CartItemNotFound(cart_item_id)

        if user_id is not None and item.user_id != user_id:
            raise PermissionError("No access to this cart item")

        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Cart line {cart_item_id} set to quantity {quantity}")
        return item

    def remove_item(self, cart_item_id: int, user_id: int | None = None) -> None:
        item = self.repo.get_cart_item(cart_item_id)
        if not item:
            logger.info(f"Cart line {cart_item_id} already gone")
            return

        if user_id is not None and item.user_id != user_id:
            raise PermissionError("No access to this cart item")

        self.repo.delete_cart_item(cart_item_id)
        self.repo.commit()
        logger.info(f"Removed cart line {cart_item_id}")

    def clear_cart(self, user_id: int, commit: bool = True) -> int:
        """
        Deletes every line of the user. With commit=False the caller owns the
        transaction (checkout clears the cart together with the order insert).
        """
        removed = self.repo.delete_user_items(user_id)
        if commit:
            self.repo.commit()
        logger.info(f"Cleared {removed} lines from cart of user {user_id}")
        return removed
