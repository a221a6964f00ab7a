# storefront/services/order_service.py
import uuid
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import (
    CheckoutInProgress,
    EmptyCart,
    OrderNotFound,
    OutOfStock,
    StorefrontError,
)
from storefront.domain.order_status import OrderStatus, parse_status, validate_transition
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def order_total(lines) -> Decimal:
    """Sum of unit price x quantity over (price, quantity) pairs, in cents."""
    total = sum((Decimal(str(price)) * quantity for price, quantity in lines), Decimal("0.00"))
    return total.quantize(CENT)


class OrderService:
    """
    Order domain, separate from the cart ledger.
    Turns a cart into an order in one transaction and manages order status.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.cart = CartService(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def place_order(
        self,
        user_id: int,
        customer_name: str,
        customer_email: str,
        shipping_address: str,
        idempotency_key: str | None = None,
    ) -> OrderModel:
        """
        Use case: checkout.

        1. per-user lock, one checkout at a time
        2. read and lock the cart lines and their variants
        3. re-check stock, snapshot name/price/size/color from the catalog
        4. insert order + items, decrement stock, clear cart, commit
        5. notify (async)

        Nothing sent by the client besides shipping details is trusted.
        """
        token = uuid.uuid4().hex
        if not self.lock_service.acquire_checkout_lock(user_id, token, CHECKOUT_LOCK_TTL_SECONDS):
            raise CheckoutInProgress(user_id)

        try:
            if idempotency_key:
                previous = self.repo.get_by_idempotency_key(user_id, idempotency_key)
                if previous:
                    logger.info(
                        f"Checkout key {idempotency_key} already used by order {previous.id}, "
                        f"returning it"
                    )
                    return previous

            try:
                order = self._assemble(user_id, customer_name, customer_email, shipping_address, idempotency_key)
            except IntegrityError:
                # lock expired mid-checkout and a retry with the same key committed first
                previous = self.repo.get_by_idempotency_key(user_id, idempotency_key) if idempotency_key else None
                if not previous:
                    raise
                logger.info(f"Checkout key {idempotency_key} committed concurrently as order {previous.id}")
                return previous
        finally:
            self.lock_service.release_checkout_lock(user_id, token)

        self._notify(user_id, order.id, order.status)
        return order

    def _assemble(self, user_id, customer_name, customer_email, shipping_address, idempotency_key) -> OrderModel:
        try:
            lines = self.cart_repo.get_cart_items(user_id, for_update=True)
            if not lines:
                raise EmptyCart(user_id)

            variants = self.products.lock_variants(sorted({line.variant_id for line in lines}))

            snapshots = []
            for line in lines:
                variant = variants.get(line.variant_id)
                product = line.product
                if variant is None or product is None:
                    raise OutOfStock(f"Cart line {line.id} refers to an item that is no longer sold")

                if variant.stock < line.quantity and not product.allow_backorder:
                    raise OutOfStock(
                        f"Only {variant.stock} left of {product.name} "
                        f"({variant.size}/{variant.color}), {line.quantity} requested"
                    )

                # product base price, a per-variant override does not apply to orders
                snapshots.append((line, product, variant, Decimal(str(product.price))))

            total = order_total((price, line.quantity) for line, _, _, price in snapshots)

            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    customer_name=customer_name,
                    customer_email=customer_email,
                    shipping_address=shipping_address,
                    status=OrderStatus.PENDING.value,
                    total=total,
                    idempotency_key=idempotency_key,
                )
            )

            for line, product, variant, price in snapshots:
                # backorders never push stock below zero
                reserved = min(max(variant.stock, 0), line.quantity)
                self.repo.add_order_item(
                    OrderItemModel(
                        order_id=order.id,
                        product_id=product.id,
                        variant_id=variant.id,
                        quantity=line.quantity,
                        reserved=reserved,
                        price=price,
                        product_name=product.name,
                        size=variant.size,
                        color=variant.color,
                    )
                )
                variant.stock -= reserved

            self.cart.clear_cart(user_id, commit=False)
            self.repo.commit()

        except StorefrontError as e:
            logger.info(f"Checkout rejected for user {user_id}: {e}")
            self.repo.rollback()
            raise
        except Exception as e:
            logger.error(f"Checkout failed for user {user_id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created for user {user_id}: {len(snapshots)} lines, total {total}")
        return order

    def update_status(self, order_id: int, new_status: str) -> OrderModel:
        """
        Use case: admin moves an order along pending -> processing -> shipped -> delivered,
        or cancels it. Cancelling puts the units taken at checkout back into stock.
        """
        parse_status(new_status)

        try:
            order = self.repo.get_order_for_update(order_id)
            if not order:
                raise OrderNotFound(order_id)

            current = order.status
            target = validate_transition(current, new_status)

            if target.value == current:
                self.repo.rollback()
                return order

            if target == OrderStatus.CANCELLED:
                self._restock(order)

            order.status = target.value
            self.repo.commit()

        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} status {current} -> {target.value}")
        self._notify(order.user_id, order.id, target.value)
        return order

    def _restock(self, order: OrderModel):
        items = self.repo.get_order_items(order.id)
        variants = self.products.lock_variants(
            sorted({i.variant_id for i in items if i.variant_id is not None})
        )
        for item in items:
            variant = variants.get(item.variant_id)
            if variant is None:
                # variant deleted since the order was placed
                continue
            variant.stock += item.reserved or 0

    #query
    def list_orders(self, user_id: int | None = None) -> list[OrderModel]:
        return self.repo.list_orders(user_id)

    def get_order(self, order_id: int, user_id: int) -> OrderModel:
        order = self.repo.get_order(order_id, with_items=True)

        if not order:
            raise OrderNotFound(order_id)

        if order.user_id != user_id:
            user = self.users.get_user(user_id)
            if not (user and user.is_admin):
                raise PermissionError("No access to this order")

        return order

    def _notify(self, user_id: int, order_id: int, status: str):
        # the order is committed at this point, a broker outage must not fail the request
        try:
            self.notification_service.send_order_notification(user_id, order_id, status)
        except Exception as e:
            logger.warning(f"Failed to enqueue notification for order {order_id}: {e}")
