# shop_admin/services/order_status_policy.py
"""Which order statuses an administrator may pick next.

The table below is the only place transition rules live. The status picker
keyboard, the notes printed beside it and the confirmation step all read
from it, so the buttons shown and the check applied cannot disagree.

The backend re-validates every change; this policy only decides which
buttons the console offers.
"""
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union
from ..models.order import OrderStatus, PaymentStatus

StatusValue = Union[OrderStatus, PaymentStatus, str, None]

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.CANCELLED,
    OrderStatus.RETURNED,
})

# Status-only edges, before the payment refinement
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.RETURNED}),
}

# Candidates each payment status lets through; payment statuses missing
# here put no further restriction on the status-only table.
PAYMENT_RESTRICTIONS: Dict[PaymentStatus, FrozenSet[OrderStatus]] = {
    # TODO: confirm with product whether shipped/delivered should be blocked
    # while payment is pending; as written this never narrows the table.
    PaymentStatus.PENDING: frozenset({
        OrderStatus.PENDING,
        OrderStatus.PROCESSING,
        OrderStatus.CANCELLED,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    }),
    PaymentStatus.FAILED: frozenset({OrderStatus.CANCELLED}),
}

def _coerce(value: StatusValue, enum_cls):
    """Map raw backend values onto ``enum_cls``; anything unknown gives None."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None

def is_terminal(status: StatusValue) -> bool:
    return _coerce(status, OrderStatus) in TERMINAL_STATUSES

def payment_allows(payment_status: StatusValue, candidate: OrderStatus) -> bool:
    restriction = PAYMENT_RESTRICTIONS.get(_coerce(payment_status, PaymentStatus))
    if restriction is None:
        return True
    return candidate in restriction

def is_status_allowed(current_status: StatusValue, payment_status: StatusValue,
                      candidate_status: StatusValue) -> bool:
    """Return True if ``candidate_status`` may be selected for the order.

    Never raises: unknown current or candidate statuses are refused.
    """
    current = _coerce(current_status, OrderStatus)
    candidate = _coerce(candidate_status, OrderStatus)
    if current is None or candidate is None:
        return False
    if current in TERMINAL_STATUSES:
        return False

    if candidate not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        return False

    return payment_allows(payment_status, candidate)

def allowed_statuses(current_status: StatusValue,
                     payment_status: StatusValue) -> List[OrderStatus]:
    """Candidates the picker should enable, in display order"""
    return [
        status for status in OrderStatus
        if is_status_allowed(current_status, payment_status, status)
    ]

def status_notes(current_status: StatusValue,
                 payment_status: StatusValue) -> List[str]:
    """Explanations shown under the status picker"""
    current = _coerce(current_status, OrderStatus)
    payment: Optional[PaymentStatus] = _coerce(payment_status, PaymentStatus)

    if current == OrderStatus.RETURNED:
        return ['Returned orders cannot be moved to any other status.']
    if current == OrderStatus.CANCELLED:
        return ['Cancelled orders cannot be moved to any other status.']

    notes = []
    if payment == PaymentStatus.PENDING:
        notes.append('Payment is still pending for this order.')
    elif payment == PaymentStatus.FAILED:
        notes.append('Payment failed: the order can only be cancelled.')
    if current is None:
        notes.append(f'Unknown order status "{current_status}": no changes allowed.')
    return notes
