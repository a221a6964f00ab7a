# storefront/domain/order_status.py
from enum import Enum

from storefront.domain.errors import InvalidStatus, InvalidStatusTransition


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# delivered and cancelled are terminal
TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise InvalidStatus(f"Unknown order status {value!r}, expected one of: {allowed}") from None


def validate_transition(current, new) -> OrderStatus:
    """
    Checks current -> new against TRANSITIONS and returns the parsed new status.
    Re-applying the current status is allowed (no-op).
    """
    new_status = parse_status(new)
    current_status = parse_status(current)

    if new_status == current_status:
        return new_status

    if new_status not in TRANSITIONS[current_status]:
        raise InvalidStatusTransition(current_status.value, new_status.value)

    return new_status
