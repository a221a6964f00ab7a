# storefront/domain/errors.py
"""
Errors raised by the cart/order core.

Everything derives from StorefrontError, which is a ValueError, so callers
that only care about "bad request" can keep catching ValueError. Access
violations use the builtin PermissionError.
"""


class StorefrontError(ValueError):
    pass


class NotFound(StorefrontError):
    pass


class ProductNotFound(NotFound):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class VariantNotFound(NotFound):
    pass


class VariantMismatch(VariantNotFound):
    def __init__(self, variant_id, product_id):
        super().__init__(f"Variant {variant_id} does not belong to product {product_id}")
        self.variant_id = variant_id
        self.product_id = product_id


class CartItemNotFound(NotFound):
    def __init__(self, cart_item_id):
        super().__init__(f"Cart item {cart_item_id} not found")
        self.cart_item_id = cart_item_id


class OrderNotFound(NotFound):
    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class UserNotFound(NotFound):
    def __init__(self, user_id):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class OutOfStock(StorefrontError):
    pass


class InvalidQuantity(StorefrontError):
    pass


class EmptyCart(StorefrontError):
    def __init__(self, user_id):
        super().__init__(f"Cart of user {user_id} is empty")
        self.user_id = user_id


class InvalidStatus(StorefrontError):
    pass


class InvalidStatusTransition(InvalidStatus):
    def __init__(self, current, new):
        super().__init__(f"Order status cannot change from {current} to {new}")
        self.current = current
        self.new = new


class CheckoutInProgress(StorefrontError):
    def __init__(self, user_id):
        super().__init__(f"Checkout already in progress for user {user_id}")
        self.user_id = user_id
