"""
Helper functions for SkillSwap Marketplace
"""
import uuid
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from urllib.parse import urlencode, urlsplit

from config import COMMISSION_RATE, DEFAULT_CURRENCY_SYMBOL

CENT = Decimal("0.01")


def total_with_commission(net_price) -> float:
    """Amount the buyer pays for a net price, rounded half-up to cents"""
    gross = Decimal(str(net_price)) * (Decimal("1") + Decimal(str(COMMISSION_RATE)))
    return float(gross.quantize(CENT, rounding=ROUND_HALF_UP))


def format_price(price):
    """Format price with 2 decimal places"""
    try:
        return f"{DEFAULT_CURRENCY_SYMBOL}{float(price):.2f}"
    except (TypeError, ValueError):
        return f"{DEFAULT_CURRENCY_SYMBOL}0.00"


def generate_reference(prefix, object_id):
    """Generate a unique transaction reference, e.g. REQ_20250101120000123456_7_1A2B3C"""
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
    random_part = uuid.uuid4().hex[:6].upper()
    return f"{prefix}_{timestamp}_{object_id}_{random_part}"


def build_payment_url(base_url, amount, reference):
    """Append amount and reference query parameters to the payment link"""
    separator = '&' if urlsplit(base_url).query else '?'
    query = urlencode({'amount': f"{float(amount):.2f}", 'ref': reference})
    return f"{base_url}{separator}{query}"


def callback_arg(data: str, prefix: str) -> str:
    """Strip a callback prefix: callback_arg('buy_7', 'buy_') -> '7'"""
    if not data.startswith(prefix):
        raise ValueError(f"Callback data {data!r} does not start with {prefix!r}")
    return data[len(prefix):]


def callback_int(data: str, prefix: str) -> int:
    return int(callback_arg(data, prefix))


def stars(rating: int) -> str:
    return '⭐' * int(rating)


def format_date(value):
    return value.strftime('%Y-%m-%d') if value else 'N/A'
