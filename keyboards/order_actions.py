from telegram import InlineKeyboardButton, InlineKeyboardMarkup


def get_request_actions_keyboard(order_id):
    """Seller buttons on a new service request"""
    keyboard = [
        [InlineKeyboardButton("💰 Send Quote", callback_data=f"send_quote_{order_id}")],
        [InlineKeyboardButton("❌ Decline Request", callback_data=f"decline_request_{order_id}")],
        [InlineKeyboardButton("💬 Message Buyer", callback_data=f"message_buyer_{order_id}")]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_quote_response_keyboard(order_id):
    """Buyer buttons on a received quote"""
    keyboard = [
        [InlineKeyboardButton("✅ Accept Quote", callback_data=f"accept_quote_{order_id}")],
        [InlineKeyboardButton("❌ Decline Quote", callback_data=f"decline_quote_{order_id}")],
        [InlineKeyboardButton("💬 Message Seller", callback_data=f"message_seller_{order_id}")]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_payment_keyboard(payment_url):
    keyboard = [
        [InlineKeyboardButton("💳 Pay Now", url=payment_url)],
        [InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_rating_keyboard(order_id):
    keyboard = [
        [InlineKeyboardButton(f"⭐ {n}", callback_data=f"rate_{order_id}_{n}") for n in range(1, 6)],
        [InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_reply_to_seller_keyboard(order_id):
    """Shown to the buyer under a relayed seller message"""
    keyboard = [
        [InlineKeyboardButton("💬 Reply to Seller", callback_data=f"message_seller_{order_id}")],
        [InlineKeyboardButton("📋 View Order", callback_data="menu_my_orders")]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_reply_to_buyer_keyboard(order_id):
    """Shown to the seller under a relayed buyer message"""
    keyboard = [
        [InlineKeyboardButton("💬 Reply to Buyer", callback_data=f"message_buyer_{order_id}")],
        [InlineKeyboardButton("💰 Send Quote", callback_data=f"send_quote_{order_id}")],
        [InlineKeyboardButton("📊 Sales Dashboard", callback_data="menu_sales")]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_my_orders_keyboard(cancellable_order_ids):
    keyboard = [
        [InlineKeyboardButton(f"🚫 Cancel Order #{order_id}", callback_data=f"cancel_order_{order_id}")]
        for order_id in cancellable_order_ids
    ]
    keyboard.append([InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")])
    return InlineKeyboardMarkup(keyboard)
