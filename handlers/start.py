from telegram import Update
from telegram.ext import ContextTypes
import logging

from conversation import AwaitingName, AwaitingRole, get_conversations, per_user
from database.db import create_session
from database.models import UserRole
from handlers.common import load_user, show_main_menu
from keyboards import get_role_keyboard
from services.user_service import UserService
from utils.helpers import callback_arg

logger = logging.getLogger(__name__)


@per_user
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Register new users, show the dashboard to known ones"""
    telegram_id = update.effective_user.id
    store = get_conversations(context)

    user = load_user(telegram_id)
    if user:
        store.delete(telegram_id)
        await show_main_menu(update, user)
        return

    store.set(telegram_id, AwaitingName())
    logger.info(f"👋 Registration started for {telegram_id}")
    await update.message.reply_text(
        "Welcome to SkillSwap! 🎉\n\nLet's get you registered. First, what's your name?"
    )


async def handle_name(update: Update, context: ContextTypes.DEFAULT_TYPE, state: AwaitingName):
    name = update.message.text.strip()
    if not name:
        await update.message.reply_text("Please tell me your name:")
        return

    get_conversations(context).set(
        update.effective_user.id,
        AwaitingRole(name=name, username=update.effective_user.username)
    )
    await update.message.reply_text(
        f"Nice to meet you, {name}! 👋\n\nWhat's your role on SkillSwap?",
        reply_markup=get_role_keyboard()
    )


@per_user
async def handle_role_selection(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()

    telegram_id = update.effective_user.id
    store = get_conversations(context)
    state = store.get(telegram_id)
    if not isinstance(state, AwaitingRole):
        await query.edit_message_text("⏰ Registration session expired. Please /start again.")
        return

    role = UserRole(callback_arg(query.data, 'role_'))

    db = create_session()
    try:
        user = UserService(db).create_user(telegram_id, state.name, state.username, role)
    finally:
        db.close()

    store.delete(telegram_id)
    await query.edit_message_text(
        f"✅ Registration complete!\n\n👤 Name: {user.name}\n🎭 Role: {user.role.value}\n\n"
        f"Welcome to SkillSwap! Use /start to see the main menu."
    )
    if user.role.can_sell:
        await query.message.reply_text("💡 As a seller, you can add services with the menu button")
