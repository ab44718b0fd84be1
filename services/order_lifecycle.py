"""
Order lifecycle - allowed status transitions and guard helpers.

Every status mutation goes through ``ensure_transition`` so an order can only
move forward: once it reaches a terminal status nothing changes it again.
"""

import logging

from database.models import OrderStatus
from services.exceptions import InvalidStatusTransition

logger = logging.getLogger(__name__)

# Format: {from_status: [allowed_to_statuses]}
ALLOWED_TRANSITIONS = {
    OrderStatus.REQUEST_SENT: [
        OrderStatus.QUOTE_SENT,
        OrderStatus.DECLINED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.QUOTE_SENT: [
        OrderStatus.QUOTE_ACCEPTED,
        OrderStatus.QUOTE_DECLINED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.QUOTE_ACCEPTED: [
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.QUOTE_DECLINED: [],
    OrderStatus.DECLINED: [],
    OrderStatus.COMPLETED: [],
    OrderStatus.CANCELLED: [],
}

TERMINAL_STATUSES = {
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
}

# Statuses counted as "pending" on the seller dashboard
OPEN_STATUSES = [
    OrderStatus.REQUEST_SENT,
    OrderStatus.QUOTE_SENT,
    OrderStatus.QUOTE_ACCEPTED,
]


def is_transition_allowed(from_status, to_status) -> bool:
    return OrderStatus(to_status) in ALLOWED_TRANSITIONS.get(OrderStatus(from_status), [])


def is_terminal_status(status) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def get_allowed_transitions(from_status) -> list:
    return list(ALLOWED_TRANSITIONS.get(OrderStatus(from_status), []))


def ensure_transition(order, to_status):
    """
    Validate and apply a status change on an order row (not committed).

    Raises:
        InvalidStatusTransition: if the order cannot move to ``to_status``
    """
    to_status = OrderStatus(to_status)
    from_status = OrderStatus(order.status)

    if not is_transition_allowed(from_status, to_status):
        logger.warning(
            f"Invalid status transition attempted: {from_status.value} -> {to_status.value} for order {order.id}"
        )
        raise InvalidStatusTransition(order.id, from_status.value, to_status.value)

    order.status = to_status
    logger.info(f"Order {order.id} transitioned: {from_status.value} -> {to_status.value}")
    return order
