import pytest

from aromasouq.core.exceptions import InvalidStatusTransitionError
from aromasouq.models.order import OrderStatus
from aromasouq.models.vendor import VendorStatus
from aromasouq.services.order_status import (
    can_transition_order,
    ensure_order_transition,
    ensure_vendor_transition,
    next_order_status,
)


def test_forward_chain_is_allowed():
    assert can_transition_order(OrderStatus.PENDING, OrderStatus.CONFIRMED)
    assert can_transition_order(OrderStatus.CONFIRMED, OrderStatus.PROCESSING)
    assert can_transition_order(OrderStatus.PROCESSING, OrderStatus.SHIPPED)
    assert can_transition_order(OrderStatus.SHIPPED, OrderStatus.DELIVERED)


def test_skipping_states_is_rejected():
    assert not can_transition_order(OrderStatus.PENDING, OrderStatus.DELIVERED)
    assert not can_transition_order(OrderStatus.CONFIRMED, OrderStatus.SHIPPED)


def test_only_pending_orders_can_be_cancelled():
    assert can_transition_order(OrderStatus.PENDING, OrderStatus.CANCELLED)
    assert not can_transition_order(OrderStatus.SHIPPED, OrderStatus.CANCELLED)


def test_terminal_states_have_no_exit():
    for target in OrderStatus:
        assert not can_transition_order(OrderStatus.DELIVERED, target)
        assert not can_transition_order(OrderStatus.CANCELLED, target)


def test_ensure_order_transition_error_details():
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        ensure_order_transition(OrderStatus.PENDING, OrderStatus.DELIVERED)

    assert exc_info.value.status_code == 400
    assert exc_info.value.details == {
        "entity": "order",
        "current": "PENDING",
        "requested": "DELIVERED",
    }


def test_next_order_status():
    assert next_order_status(OrderStatus.PENDING) == OrderStatus.CONFIRMED
    assert next_order_status(OrderStatus.SHIPPED) == OrderStatus.DELIVERED
    assert next_order_status(OrderStatus.DELIVERED) is None
    assert next_order_status(OrderStatus.CANCELLED) is None


def test_vendor_transitions():
    ensure_vendor_transition(VendorStatus.PENDING, VendorStatus.APPROVED)
    ensure_vendor_transition(VendorStatus.SUSPENDED, VendorStatus.APPROVED)
    with pytest.raises(InvalidStatusTransitionError):
        ensure_vendor_transition(VendorStatus.APPROVED, VendorStatus.REJECTED)
    with pytest.raises(InvalidStatusTransitionError):
        ensure_vendor_transition(VendorStatus.PENDING, VendorStatus.SUSPENDED)
