from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from config import SUPPORT_HANDLE
from database.models import UserRole
from utils.constants import ROLE_LABELS


def get_main_menu_keyboard(role) -> InlineKeyboardMarkup:
    """Create main menu keyboard for the user's role"""
    role = UserRole(role)
    keyboard = []

    if role.can_buy:
        keyboard.append([InlineKeyboardButton("🔍 Browse Services", callback_data="menu_browse")])
        keyboard.append([InlineKeyboardButton("🔎 Search Services", callback_data="menu_search")])
        keyboard.append([InlineKeyboardButton("📋 My Orders", callback_data="menu_my_orders")])

    if role.can_sell:
        keyboard.append([InlineKeyboardButton("💼 My Services", callback_data="menu_my_services")])
        keyboard.append([InlineKeyboardButton("➕ Add Service", callback_data="menu_add_service")])
        keyboard.append([InlineKeyboardButton("📊 Sales Dashboard", callback_data="menu_sales")])
        keyboard.append([InlineKeyboardButton("🌟 Promote Services", callback_data="menu_promote")])

    keyboard.append([InlineKeyboardButton("🏆 Top Sellers", callback_data="menu_top_sellers")])
    keyboard.append([InlineKeyboardButton("👤 My Profile", callback_data="menu_profile")])
    keyboard.append([InlineKeyboardButton("🚀 What is SkillSwap?", callback_data="menu_about")])
    keyboard.append([InlineKeyboardButton("❓ Help", callback_data="menu_help")])
    return InlineKeyboardMarkup(keyboard)


def get_role_keyboard() -> InlineKeyboardMarkup:
    """Role selection during registration"""
    keyboard = [
        [InlineKeyboardButton(label, callback_data=f"role_{role}")]
        for role, label in ROLE_LABELS.items()
    ]
    return InlineKeyboardMarkup(keyboard)


def get_back_keyboard(*extra_rows) -> InlineKeyboardMarkup:
    """Create back-to-menu keyboard, optionally preceded by extra (label, callback) rows"""
    keyboard = [[InlineKeyboardButton(label, callback_data=data)] for label, data in extra_rows]
    keyboard.append([InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")])
    return InlineKeyboardMarkup(keyboard)


def get_help_keyboard() -> InlineKeyboardMarkup:
    keyboard = [
        [InlineKeyboardButton("💬 Contact Support", url=f"https://t.me/{SUPPORT_HANDLE}")],
        [InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")]
    ]
    return InlineKeyboardMarkup(keyboard)
