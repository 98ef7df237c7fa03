"""
Order Lifecycle

Status state machine for orders.

    PENDING -> CONFIRMED -> SHIPPED -> DELIVERED
       |           |           |
       +-----------+-----------+--> CANCELLED

DELIVERED and CANCELLED are terminal. Setting a status to its current value
is always allowed. ``force=True`` skips the table for operator overrides;
soft delete always lands on CANCELLED.
"""

from typing import Dict, FrozenSet, Optional

from .models import Order, OrderStatus
from .protocols import InvalidStatusTransitionError


ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def initial_status(requested: Optional[OrderStatus] = None) -> OrderStatus:
    """Status for a new order"""
    return requested if requested is not None else OrderStatus.PENDING


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Whether current -> target is a legal move"""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def transition(order: Order, target: OrderStatus, force: bool = False) -> Order:
    """
    Return a copy of the order moved to ``target``.

    Raises:
        InvalidStatusTransitionError: If the move is illegal and not forced
    """
    if not force and not can_transition(order.status, target):
        raise InvalidStatusTransitionError(order.status, target)
    return order.model_copy(update={"status": target})


def soft_delete(order: Order) -> Order:
    """Cancel the order regardless of its current status"""
    return order.model_copy(update={"status": OrderStatus.CANCELLED})
