"""
Shared helpers for marketplace handlers.
"""
import logging

from telegram import Update
from telegram.ext import ContextTypes

from config import ADMIN_ID
from database.db import create_session
from keyboards import get_main_menu_keyboard
from services.notify_service import NotificationService
from services.user_service import UserService

logger = logging.getLogger(__name__)

REGISTER_FIRST_TEXT = "❌ Please register first with /start"


async def respond(update: Update, text: str, reply_markup=None):
    """Edit the pressed message for button events, reply otherwise"""
    query = update.callback_query
    if query:
        await query.edit_message_text(text, reply_markup=reply_markup)
    else:
        await update.effective_message.reply_text(text, reply_markup=reply_markup)


def get_notifier(context: ContextTypes.DEFAULT_TYPE) -> NotificationService:
    return NotificationService(context.bot)


def load_user(telegram_id):
    db = create_session()
    try:
        return UserService(db).get_user(telegram_id)
    finally:
        db.close()


def main_menu_text(user):
    return f"""Welcome back, {user.name}! 👋

🎯 SkillSwap Dashboard

Role: {user.role.value}
What would you like to do today?"""


async def show_main_menu(update: Update, user):
    await respond(update, main_menu_text(user), reply_markup=get_main_menu_keyboard(user.role))


async def acknowledge(update: Update, text: str = None):
    """Answer the button press, if this update is one"""
    if update.callback_query:
        await update.callback_query.answer(text)


def is_admin(telegram_id) -> bool:
    return bool(ADMIN_ID) and str(telegram_id) == str(ADMIN_ID)
