import math

from config import DESCRIPTION_MAX_LENGTH


def parse_price(text):
    """Return a positive finite price parsed from text, or None"""
    try:
        value = float(str(text).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def is_valid_description(text):
    return bool(text) and len(text) <= DESCRIPTION_MAX_LENGTH


def parse_quote(text):
    """
    Parse a seller quote of the form "<price> <description...>".

    Returns (price, description) or None when the first token is not a
    positive number. The description may be empty.
    """
    parts = str(text).strip().split(None, 1)
    if not parts:
        return None
    price = parse_price(parts[0])
    if price is None:
        return None
    description = parts[1].strip() if len(parts) > 1 else ''
    return price, description


def parse_rating(value):
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return None
    return rating if 1 <= rating <= 5 else None
