# tests/test_order_status_policy.py
import itertools

import pytest

from shop_admin.models.order import OrderStatus, PaymentStatus
from shop_admin.services.order_status_policy import (
    ALLOWED_TRANSITIONS, TERMINAL_STATUSES,
    is_status_allowed, allowed_statuses, is_terminal, status_notes
)

ALL_COMBINATIONS = list(itertools.product(OrderStatus, PaymentStatus, OrderStatus))

@pytest.mark.parametrize("current, payment, candidate, expected", [
    ("pending", "completed", "processing", True),
    ("pending", "failed", "processing", False),
    ("pending", "failed", "cancelled", True),
    ("shipped", "completed", "delivered", True),
    ("delivered", "completed", "returned", True),
    ("delivered", "completed", "pending", False),
    ("returned", "completed", "pending", False),
    ("cancelled", "completed", "returned", False),
])
def test_known_transitions(current, payment, candidate, expected):
    assert is_status_allowed(current, payment, candidate) is expected

@pytest.mark.parametrize("current, payment, candidate", ALL_COMBINATIONS)
def test_terminal_orders_never_move(current, payment, candidate):
    if current in TERMINAL_STATUSES:
        assert not is_status_allowed(current, payment, candidate)

@pytest.mark.parametrize("current, payment, candidate", ALL_COMBINATIONS)
def test_payment_never_adds_edges(current, payment, candidate):
    if candidate not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        assert not is_status_allowed(current, payment, candidate)

@pytest.mark.parametrize("current, candidate", itertools.product(OrderStatus, OrderStatus))
def test_failed_payment_only_allows_cancel(current, candidate):
    result = is_status_allowed(current, PaymentStatus.FAILED, candidate)
    if candidate != OrderStatus.CANCELLED:
        assert result is False
    else:
        assert result is (candidate in ALLOWED_TRANSITIONS.get(current, frozenset()))

@pytest.mark.parametrize("current, candidate", itertools.product(OrderStatus, OrderStatus))
def test_completed_payment_matches_status_table(current, candidate):
    expected = candidate in ALLOWED_TRANSITIONS.get(current, frozenset())
    assert is_status_allowed(current, PaymentStatus.COMPLETED, candidate) is expected

@pytest.mark.parametrize("current, candidate", itertools.product(OrderStatus, OrderStatus))
def test_pending_payment_is_as_permissive_as_the_table(current, candidate):
    assert is_status_allowed(current, PaymentStatus.PENDING, candidate) == \
        is_status_allowed(current, PaymentStatus.COMPLETED, candidate)

@pytest.mark.parametrize("payment", [None, "", "refunded", 3])
def test_unknown_payment_status_is_unrestricted(payment):
    assert is_status_allowed("processing", payment, "shipped")

@pytest.mark.parametrize("current, candidate", [
    ("on_hold", "processing"),
    ("pending", "teleported"),
    (None, "cancelled"),
    ("pending", None),
    (17, "cancelled"),
])
def test_unknown_statuses_fail_closed(current, candidate):
    assert is_status_allowed(current, "completed", candidate) is False

def test_raw_values_are_normalized():
    assert is_status_allowed(" Pending ", "COMPLETED", "Processing")

def test_allowed_statuses_in_display_order():
    assert allowed_statuses("pending", "completed") == [OrderStatus.PROCESSING, OrderStatus.CANCELLED]
    assert allowed_statuses("pending", "failed") == [OrderStatus.CANCELLED]
    assert allowed_statuses("returned", "completed") == []
    assert allowed_statuses("mystery", "completed") == []

def test_is_terminal():
    assert is_terminal("cancelled")
    assert is_terminal(OrderStatus.RETURNED)
    assert not is_terminal("delivered")
    assert not is_terminal("mystery")

def test_status_notes():
    assert status_notes("returned", "completed") == ['Returned orders cannot be moved to any other status.']
    assert status_notes("cancelled", "failed") == ['Cancelled orders cannot be moved to any other status.']
    assert status_notes("processing", "completed") == []
    assert status_notes("pending", "failed") == ['Payment failed: the order can only be cancelled.']
    assert status_notes("pending", "pending") == ['Payment is still pending for this order.']
    notes = status_notes("on_hold", None)
    assert len(notes) == 1 and "on_hold" in notes[0]
