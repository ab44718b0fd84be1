from telegram import Update
from telegram.ext import ContextTypes
import logging

from conversation import get_conversations, per_user
from database.db import create_session
from handlers.common import is_admin
from keyboards import get_back_keyboard
from services.user_service import UserService

logger = logging.getLogger(__name__)


@per_user
async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Drop whatever flow the user is in"""
    if get_conversations(context).delete(update.effective_user.id):
        await update.message.reply_text("🚫 Cancelled.", reply_markup=get_back_keyboard())
    else:
        await update.message.reply_text("Nothing to cancel. Use /start to open the menu.")


async def stats_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Marketplace counters, admin only"""
    if not is_admin(update.effective_user.id):
        await update.message.reply_text("❌ Admin access required")
        return

    db = create_session()
    try:
        stats = UserService(db).get_stats()
    finally:
        db.close()

    store = get_conversations(context)
    await update.message.reply_text(f"""📊 SkillSwap Statistics

👥 Users: {stats['total_users']}
💼 Active Sellers: {stats['active_sellers']}
🛍️ Services: {stats['total_services']}
📦 Orders: {stats['total_orders']}
💬 Open Conversations: {len(store)}""")
