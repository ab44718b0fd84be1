from config import PAYMENT_LINK, PROMOTION_PRICE, PROMOTION_DAYS
from utils.helpers import build_payment_url, format_price, generate_reference, total_with_commission
import logging

logger = logging.getLogger(__name__)


class PaymentService:
    """Builds links to the external payment page; no money moves through the bot"""

    def __init__(self, payment_link: str = PAYMENT_LINK):
        self.payment_link = payment_link

    def order_payment_url(self, order) -> str:
        """Link for an accepted quote: quoted price plus commission"""
        amount = total_with_commission(order.payable_price)
        url = build_payment_url(self.payment_link, amount, order.transaction_id)
        logger.info(f"💳 Payment link for order {order.id}: {format_price(amount)} ref {order.transaction_id}")
        return url

    def promotion_payment_url(self, service_id: int):
        """Returns (url, reference) for a promotion purchase"""
        reference = generate_reference("PROMO", service_id)
        url = build_payment_url(self.payment_link, PROMOTION_PRICE, reference)
        logger.info(f"🌟 Promotion link for service {service_id}: ref {reference}")
        return url, reference

    def format_payment_message(self, order, service_title: str) -> str:
        amount = total_with_commission(order.payable_price)
        return f"""✅ Quote Accepted!

📦 Service: {service_title}
💰 Quoted Price: {format_price(order.payable_price)}
💳 Total (incl. fees): {format_price(amount)}
🧾 Reference: {order.transaction_id}

Tap "Pay Now" to complete your payment. You'll be asked to rate the seller afterwards."""

    def format_promotion_message(self, service_title: str, reference: str) -> str:
        return f"""🌟 Promote "{service_title}"

💰 Price: {format_price(PROMOTION_PRICE)}
⏰ Duration: {PROMOTION_DAYS} days
🧾 Reference: {reference}

Promoted services appear first in browse and search results.
Your promotion activates automatically once payment is received."""
