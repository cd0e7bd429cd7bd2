"""
Status allow-lists for orders and vendors.

Transitions are validated against the status currently persisted, never
against what the caller believes the status to be.
"""

from typing import Dict, FrozenSet, Optional

from aromasouq.core.exceptions import InvalidStatusTransitionError
from aromasouq.models.order import OrderStatus
from aromasouq.models.vendor import VendorStatus

ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# forward chain used by the vendor "advance" action
ORDER_CHAIN = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

VENDOR_TRANSITIONS: Dict[VendorStatus, FrozenSet[VendorStatus]] = {
    VendorStatus.PENDING: frozenset({VendorStatus.APPROVED, VendorStatus.REJECTED}),
    VendorStatus.APPROVED: frozenset({VendorStatus.SUSPENDED}),
    VendorStatus.SUSPENDED: frozenset({VendorStatus.APPROVED}),
    VendorStatus.REJECTED: frozenset({VendorStatus.APPROVED}),
}


def can_transition_order(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ORDER_TRANSITIONS.get(current, frozenset())


def ensure_order_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition_order(current, target):
        raise InvalidStatusTransitionError("order", current.value, target.value)


def next_order_status(current: OrderStatus) -> Optional[OrderStatus]:
    """Next state on the forward chain, or None for terminal states."""
    if current not in ORDER_CHAIN:
        return None
    index = ORDER_CHAIN.index(current)
    if index + 1 >= len(ORDER_CHAIN):
        return None
    return ORDER_CHAIN[index + 1]


def ensure_vendor_transition(current: VendorStatus, target: VendorStatus) -> None:
    if target not in VENDOR_TRANSITIONS.get(current, frozenset()):
        raise InvalidStatusTransitionError("vendor", current.value, target.value)
