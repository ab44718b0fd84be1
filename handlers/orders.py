"""
Order actions after a request is sent: quoting, accept/decline, rating, cancellation.

Every status change goes through the order lifecycle guard in OrderService;
counterpart notifications are sent only after the change is committed.
"""
from telegram import Update
from telegram.ext import ContextTypes
import logging

from conversation import CreatingQuote, get_conversations, per_user
from database.db import create_session
from database.models import OrderStatus
from handlers.common import get_notifier
from keyboards import get_back_keyboard, get_payment_keyboard, get_quote_response_keyboard
from services.exceptions import InvalidStatusTransition
from services.order_lifecycle import is_transition_allowed
from services.order_service import OrderService
from services.payment_service import PaymentService
from services.scheduler import cancel_order_jobs, schedule_rating_prompt
from utils.helpers import callback_arg, callback_int, format_price, stars, total_with_commission
from utils.validators import parse_quote, parse_rating

logger = logging.getLogger(__name__)


# ========== SELLER ==========
@per_user
async def start_quote(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    order_id = callback_int(query.data, 'send_quote_')

    db = create_session()
    try:
        order = OrderService(db).get_order_for(order_id, telegram_id, 'seller')
        if not is_transition_allowed(order.status, OrderStatus.QUOTE_SENT):
            raise InvalidStatusTransition(order_id, order.status.value, OrderStatus.QUOTE_SENT.value)
    finally:
        db.close()

    get_conversations(context).set(telegram_id, CreatingQuote(order_id=order_id))
    await query.message.reply_text(
        f"💰 Create Your Quote\n\n📋 Order #{order_id}\n\n"
        "Send your price and a short description:\n"
        "Format: [Price] [Description]\n"
        "Example: 25.00 Logo design with revisions"
    )


async def handle_quote_text(update: Update, context: ContextTypes.DEFAULT_TYPE, state: CreatingQuote):
    telegram_id = update.effective_user.id
    parsed = parse_quote(update.message.text)
    if parsed is None:
        await update.message.reply_text(
            "❌ Invalid price format. Please use: [Price] [Description]\n"
            "Example: 25.00 Logo design with revisions"
        )
        return
    price, description = parsed

    store = get_conversations(context)
    db = create_session()
    try:
        orders = OrderService(db)
        orders.get_order_for(state.order_id, telegram_id, 'seller')
        order = orders.update_order_quote(state.order_id, price, description)
        buyer_id = order.buyer_id
    except InvalidStatusTransition as e:
        store.delete(telegram_id)
        await update.message.reply_text(e.user_message, reply_markup=get_back_keyboard())
        return
    finally:
        db.close()

    store.delete(telegram_id)
    total = total_with_commission(price)

    await get_notifier(context).notify_user(
        buyer_id,
        f"💰 Custom Quote Received!\n\n"
        f"📋 Request ID: {state.order_id}\n"
        f"💵 Seller's Price: {format_price(price)}\n"
        f"💳 Total (with fees): {format_price(total)}\n\n"
        f"📝 Quote Details:\n{description or 'No details provided.'}\n\n"
        "🤔 Your Options:\n• Accept and proceed to payment\n• Decline and look elsewhere",
        reply_markup=get_quote_response_keyboard(state.order_id)
    )
    await update.message.reply_text(
        f"✅ Quote Sent!\n\n"
        f"💰 Your quote: {format_price(price)}\n"
        f"💳 Customer pays: {format_price(total)}\n"
        f"💵 You receive: {format_price(price)}\n\n"
        "📱 The buyer will be notified and can accept or decline your quote.",
        reply_markup=get_back_keyboard()
    )


@per_user
async def decline_request(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    order_id = callback_int(query.data, 'decline_request_')

    db = create_session()
    try:
        orders = OrderService(db)
        orders.get_order_for(order_id, telegram_id, 'seller')
        order = orders.update_order_status(order_id, OrderStatus.DECLINED)
        buyer_id = order.buyer_id
    finally:
        db.close()

    await query.edit_message_text(
        f"❌ Request Declined\n\n📋 Order #{order_id}\n\nThe buyer will be notified.",
        reply_markup=get_back_keyboard()
    )
    await get_notifier(context).notify_user(
        buyer_id,
        f"❌ Request Declined\n\n📋 Order #{order_id}\n\n"
        "The seller can't take this request. Browse other services to find another provider.",
        reply_markup=get_back_keyboard(("🔍 Browse Services", "menu_browse"))
    )


# ========== BUYER ==========
@per_user
async def accept_quote(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    order_id = callback_int(query.data, 'accept_quote_')

    payments = PaymentService()
    db = create_session()
    try:
        orders = OrderService(db)
        orders.get_order_for(order_id, telegram_id, 'buyer')
        order = orders.update_order_status(order_id, OrderStatus.QUOTE_ACCEPTED)
        seller_id = order.seller_id
        quoted = order.payable_price
        payment_url = payments.order_payment_url(order)
        message = payments.format_payment_message(order, order.service.title if order.service else f"Order #{order_id}")
    finally:
        db.close()

    await query.edit_message_text(message, reply_markup=get_payment_keyboard(payment_url))
    await get_notifier(context).notify_user(
        seller_id,
        f"🎉 Quote Accepted!\n\n📋 Order ID: {order_id}\n💰 Amount: {format_price(quoted)}\n\n"
        "⏳ Status: Waiting for payment\n\n"
        "📱 You'll be notified once payment is confirmed. Then you can start working!"
    )
    schedule_rating_prompt(context.job_queue, order_id)


@per_user
async def decline_quote(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    order_id = callback_int(query.data, 'decline_quote_')

    db = create_session()
    try:
        orders = OrderService(db)
        orders.get_order_for(order_id, telegram_id, 'buyer')
        order = orders.update_order_status(order_id, OrderStatus.QUOTE_DECLINED)
        seller_id = order.seller_id
    finally:
        db.close()

    cancel_order_jobs(context.job_queue, order_id)
    await query.edit_message_text(
        "❌ Quote Declined\n\nYou can:\n• Browse other services\n• Look for different providers",
        reply_markup=get_back_keyboard(("🔍 Browse Services", "menu_browse"))
    )
    await get_notifier(context).notify_user(
        seller_id,
        f"❌ Quote Declined\n\n📋 Order ID: {order_id}\n\nThe buyer has declined your quote."
    )


@per_user
async def rate_order(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """rate_<order_id>_<rating>: store the review and complete the order"""
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id

    order_part, _, rating_part = callback_arg(query.data, 'rate_').partition('_')
    order_id = int(order_part)
    rating = parse_rating(rating_part)
    if rating is None:
        await query.edit_message_text("❌ Invalid rating.", reply_markup=get_back_keyboard())
        return

    db = create_session()
    try:
        review = OrderService(db).create_review(order_id, telegram_id, rating)
        seller_id = review.seller_id
    finally:
        db.close()

    cancel_order_jobs(context.job_queue, order_id)
    await query.edit_message_text(
        f"✅ Thank you for your rating!\n\n{stars(rating)} ({rating}/5)\n\n"
        "Your feedback helps other buyers find great sellers.",
        reply_markup=get_back_keyboard()
    )
    await get_notifier(context).notify_user(
        seller_id,
        f"⭐ New Rating Received!\n\n📋 Order ID: {order_id}\n{stars(rating)} ({rating}/5)\n\n"
        "Keep up the great work!"
    )


@per_user
async def cancel_order(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    order_id = callback_int(query.data, 'cancel_order_')

    db = create_session()
    try:
        order = OrderService(db).cancel_order(order_id, telegram_id)
        seller_id = order.seller_id
    finally:
        db.close()

    cancel_order_jobs(context.job_queue, order_id)
    await query.edit_message_text(
        f"🚫 Order #{order_id} cancelled.",
        reply_markup=get_back_keyboard(("📋 My Orders", "menu_my_orders"))
    )
    await get_notifier(context).notify_user(
        seller_id,
        f"🚫 Order Cancelled\n\n📋 Order ID: {order_id}\n\nThe buyer has cancelled this order."
    )
