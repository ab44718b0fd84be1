from keyboards.main_menu import (
    get_main_menu_keyboard, get_role_keyboard,
    get_back_keyboard, get_help_keyboard
)
from keyboards.buy_menu import (
    get_services_keyboard, get_requirements_keyboard,
    get_promotion_keyboard, get_promotion_payment_keyboard
)
from keyboards.order_actions import (
    get_request_actions_keyboard, get_quote_response_keyboard,
    get_payment_keyboard, get_rating_keyboard,
    get_reply_to_seller_keyboard, get_reply_to_buyer_keyboard,
    get_my_orders_keyboard
)

__all__ = [
    'get_main_menu_keyboard', 'get_role_keyboard',
    'get_back_keyboard', 'get_help_keyboard',
    'get_services_keyboard', 'get_requirements_keyboard',
    'get_promotion_keyboard', 'get_promotion_payment_keyboard',
    'get_request_actions_keyboard', 'get_quote_response_keyboard',
    'get_payment_keyboard', 'get_rating_keyboard',
    'get_reply_to_seller_keyboard', 'get_reply_to_buyer_keyboard',
    'get_my_orders_keyboard'
]
