"""
Marketplace error types shared by services and handlers.
"""


class MarketplaceError(Exception):
    """Base class for errors surfaced to users as a short message"""

    user_message = "❌ Something went wrong. Please try again."


class NotFoundError(MarketplaceError):
    user_message = "❌ Not found. It may have been removed."


class AccessDeniedError(MarketplaceError):
    user_message = "❌ Invalid order or access denied."


class InvalidStatusTransition(MarketplaceError, ValueError):
    user_message = "⚠️ This order has already been processed."

    def __init__(self, order_id, from_status, to_status):
        self.order_id = order_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid status transition for order {order_id}: {from_status} -> {to_status}"
        )


class DuplicateReviewError(MarketplaceError):
    user_message = "⚠️ You have already rated this order."

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} already has a review")
