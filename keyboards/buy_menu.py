from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from config import PROMOTION_PRICE


def get_services_keyboard(listings) -> InlineKeyboardMarkup:
    """One buy button per listed service"""
    keyboard = [
        [InlineKeyboardButton(f"🛒 Buy #{index}", callback_data=f"buy_{listing.service.id}")]
        for index, listing in enumerate(listings, start=1)
    ]
    keyboard.append([InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")])
    return InlineKeyboardMarkup(keyboard)


def get_requirements_keyboard(service_id, last_added=None) -> InlineKeyboardMarkup:
    """Decision point of the request flow; the last used mode is offered as 'more'"""
    text_button = InlineKeyboardButton(
        "📝 Add More Text" if last_added == 'text' else "📝 Add Text Requirements",
        callback_data=f"req_text_{service_id}"
    )
    docs_button = InlineKeyboardButton(
        "📎 Add More Files" if last_added == 'file' else "📎 Upload Documents",
        callback_data=f"req_docs_{service_id}"
    )
    send_button = InlineKeyboardButton("✅ Send Request", callback_data=f"send_request_{service_id}")

    if last_added == 'text':
        rows = [[text_button], [send_button], [docs_button]]
    elif last_added == 'file':
        rows = [[docs_button], [send_button], [text_button]]
    else:
        rows = [[text_button], [docs_button], [send_button]]
    return InlineKeyboardMarkup(rows)


def get_promotion_keyboard(services) -> InlineKeyboardMarkup:
    keyboard = [
        [InlineKeyboardButton(f"🌟 Promote \"{service.title}\"", callback_data=f"promote_service_{service.id}")]
        for service in services
    ]
    keyboard.append([InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")])
    return InlineKeyboardMarkup(keyboard)


def get_promotion_payment_keyboard(payment_url) -> InlineKeyboardMarkup:
    keyboard = [
        [InlineKeyboardButton(f"💳 Pay ${PROMOTION_PRICE:.2f} to Promote", url=payment_url)],
        [InlineKeyboardButton("🔙 Back to Promotion", callback_data="menu_promote")],
        [InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")]
    ]
    return InlineKeyboardMarkup(keyboard)
