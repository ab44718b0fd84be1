"""
Buyer/seller messaging relayed through the bot, one message per button press.
"""
from telegram import Update
from telegram.ext import ContextTypes
import logging

from conversation import MessagingBuyer, MessagingSeller, get_conversations, per_user
from database.db import create_session
from handlers.common import get_notifier
from keyboards import get_reply_to_buyer_keyboard, get_reply_to_seller_keyboard
from services.exceptions import MarketplaceError
from services.order_service import OrderService
from services.user_service import UserService
from utils.helpers import callback_int

logger = logging.getLogger(__name__)


@per_user
async def start_message_buyer(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    order_id = callback_int(query.data, 'message_buyer_')

    db = create_session()
    try:
        OrderService(db).get_order_for(order_id, telegram_id, 'seller')
    finally:
        db.close()

    get_conversations(context).set(telegram_id, MessagingBuyer(order_id=order_id))
    await query.message.reply_text(f"💬 Message the buyer about Order #{order_id}\n\nType your message:")


@per_user
async def start_message_seller(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    order_id = callback_int(query.data, 'message_seller_')

    db = create_session()
    try:
        OrderService(db).get_order_for(order_id, telegram_id, 'buyer')
    finally:
        db.close()

    get_conversations(context).set(telegram_id, MessagingSeller(order_id=order_id))
    await query.message.reply_text(f"💬 Message the seller about Order #{order_id}\n\nType your message:")


async def _relay(update, context, order_id, sender_role):
    """Validate the sender against the order and forward the text to the other party"""
    telegram_id = update.effective_user.id
    store = get_conversations(context)
    recipient_role = 'buyer' if sender_role == 'seller' else 'seller'

    db = create_session()
    try:
        order = OrderService(db).get_order_for(order_id, telegram_id, sender_role)
        recipient_id = order.buyer_id if recipient_role == 'buyer' else order.seller_id
        sender = UserService(db).get_user(telegram_id)
        sender_name = sender.name if sender else update.effective_user.first_name
    except MarketplaceError as e:
        store.delete(telegram_id)
        await update.message.reply_text(e.user_message)
        return
    finally:
        db.close()

    store.delete(telegram_id)
    reply_markup = (
        get_reply_to_seller_keyboard(order_id) if recipient_role == 'buyer'
        else get_reply_to_buyer_keyboard(order_id)
    )
    delivered = await get_notifier(context).notify_user(
        recipient_id,
        f"💬 Message from {sender_role.title()}\n\n📋 Order #{order_id}\n👤 From: {sender_name}\n\n"
        f"📝 Message:\n{update.message.text}",
        reply_markup=reply_markup
    )

    if delivered:
        await update.message.reply_text(
            f"✅ Message Sent!\n\n📋 Order #{order_id}\n📤 Your message has been delivered to the {recipient_role}."
        )
    else:
        await update.message.reply_text(
            f"❌ Could not deliver message. The {recipient_role} may have blocked the bot."
        )


async def handle_message_to_buyer(update: Update, context: ContextTypes.DEFAULT_TYPE, state: MessagingBuyer):
    await _relay(update, context, state.order_id, 'seller')


async def handle_message_to_seller(update: Update, context: ContextTypes.DEFAULT_TYPE, state: MessagingSeller):
    await _relay(update, context, state.order_id, 'buyer')
