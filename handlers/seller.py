"""
Seller flows: service creation and paid promotion.
"""
from telegram import Update
from telegram.ext import ContextTypes
import logging

from config import COMMISSION_RATE, DESCRIPTION_MAX_LENGTH, SUPPORT_HANDLE, PROMOTION_PRICE
from conversation import (
    ServiceTitle, ServiceDescription, ServicePrice, ServiceDelivery, ServicePayment,
    get_conversations, per_user
)
from database.db import create_session
from handlers.common import REGISTER_FIRST_TEXT, acknowledge, get_notifier, load_user, respond
from keyboards import get_back_keyboard, get_promotion_keyboard, get_promotion_payment_keyboard
from services.catalog_service import CatalogService
from services.payment_service import PaymentService
from services.scheduler import schedule_promotion_activation
from utils.helpers import callback_int, format_date, format_price, total_with_commission
from utils.validators import is_valid_description, parse_price

logger = logging.getLogger(__name__)

COMMISSION_PERCENT = int(round(COMMISSION_RATE * 100))
SELLERS_ONLY_TEXT = f"❌ Only sellers can add services.\n\nContact @{SUPPORT_HANDLE} to change your role."


# ========== SERVICE CREATION ==========
@per_user
async def start_add_service(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    telegram_id = update.effective_user.id

    user = load_user(telegram_id)
    if not user:
        await respond(update, REGISTER_FIRST_TEXT)
        return
    if not user.role.can_sell:
        await respond(update, SELLERS_ONLY_TEXT, reply_markup=get_back_keyboard())
        return

    get_conversations(context).set(telegram_id, ServiceTitle())
    await respond(
        update,
        "💼 Let's add your service!\n\n📝 First, what's the title of your service?\n(Keep it short and descriptive)"
    )


async def handle_service_title(update: Update, context: ContextTypes.DEFAULT_TYPE, state: ServiceTitle):
    title = update.message.text.strip()
    if not title:
        await update.message.reply_text("Please send a title for your service:")
        return

    get_conversations(context).set(update.effective_user.id, ServiceDescription(title=title))
    await update.message.reply_text(
        f"Great! Now provide a description (max {DESCRIPTION_MAX_LENGTH} characters):"
    )


async def handle_service_description(update: Update, context: ContextTypes.DEFAULT_TYPE,
                                     state: ServiceDescription):
    description = update.message.text.strip()
    if not is_valid_description(description):
        await update.message.reply_text(
            f"Description too long! Please keep it under {DESCRIPTION_MAX_LENGTH} characters."
        )
        return

    get_conversations(context).set(
        update.effective_user.id,
        ServicePrice(title=state.title, description=description)
    )
    await update.message.reply_text(
        f"What's your net price in USD? (e.g., 5.00)\nNote: Customers will pay this + {COMMISSION_PERCENT}% commission"
    )


async def handle_service_price(update: Update, context: ContextTypes.DEFAULT_TYPE, state: ServicePrice):
    price = parse_price(update.message.text)
    if price is None:
        await update.message.reply_text("Please enter a valid price (e.g., 5.00)")
        return

    get_conversations(context).set(
        update.effective_user.id,
        ServiceDelivery(title=state.title, description=state.description, price=price)
    )
    await update.message.reply_text('How long will delivery take? (e.g., "24 hours", "3 days")')


async def handle_service_delivery(update: Update, context: ContextTypes.DEFAULT_TYPE, state: ServiceDelivery):
    delivery = update.message.text.strip()
    if not delivery:
        await update.message.reply_text('Please send a delivery time (e.g., "24 hours")')
        return

    get_conversations(context).set(
        update.effective_user.id,
        ServicePayment(title=state.title, description=state.description, price=state.price, delivery=delivery)
    )
    await update.message.reply_text(
        "What's your payment method for receiving payments?\n"
        '(e.g., "PayPal: email@example.com", "USDT wallet: 0x123...")'
    )


async def handle_service_payment(update: Update, context: ContextTypes.DEFAULT_TYPE, state: ServicePayment):
    telegram_id = update.effective_user.id
    payment_method = update.message.text.strip()
    if not payment_method:
        await update.message.reply_text("Please send your payment method:")
        return

    db = create_session()
    try:
        service = CatalogService(db).create_service(
            seller_id=telegram_id,
            title=state.title,
            description=state.description,
            net_price=state.price,
            delivery_time=state.delivery,
            payment_method=payment_method
        )
    finally:
        db.close()

    get_conversations(context).delete(telegram_id)
    await update.message.reply_text(
        f"✅ Service added successfully!\n\n"
        f"💼 {service.title}\n"
        f"📝 {service.description}\n"
        f"💰 Customer pays: {format_price(total_with_commission(service.net_price))} "
        f"(you get: {format_price(service.net_price)})\n"
        f"⏱️ Delivery: {service.delivery_time}",
        reply_markup=get_back_keyboard()
    )


# ========== PROMOTION ==========
async def show_promotion_options(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    user = load_user(update.effective_user.id)
    if not user:
        await respond(update, REGISTER_FIRST_TEXT)
        return
    if not user.role.can_sell:
        await respond(
            update,
            f"❌ Promotion Available for Sellers Only\n\nContact @{SUPPORT_HANDLE} to change your role to Seller.",
            reply_markup=get_back_keyboard()
        )
        return

    db = create_session()
    try:
        services = CatalogService(db).get_user_services(user.telegram_id)
    finally:
        db.close()

    if not services:
        await respond(
            update,
            "💼 No Services to Promote\n\nYou need to add services before you can promote them.",
            reply_markup=get_back_keyboard(("➕ Add Service First", "menu_add_service"))
        )
        return

    lines = [
        f"🌟 Promote Your Services\n\n💰 Only ${PROMOTION_PRICE:.2f}/month per service\n\n"
        "✨ Benefits:\n• 🔝 Top position in search results\n• 🌟 Featured badge on your services\n"
        "• 🏆 Featured in Top Sellers leaderboard\n\n📋 Your Services:\n"
    ]
    promotable = []
    for i, service in enumerate(services, start=1):
        if service.is_currently_promoted():
            status = f"🌟 PROMOTED (expires {format_date(service.promotion_expires)})"
        else:
            status = "Not promoted"
            promotable.append(service)
        lines.append(
            f"{i}. {service.title}\n"
            f"   Status: {status}\n"
            f"   Price: {format_price(total_with_commission(service.net_price))}\n"
        )

    await respond(update, "\n".join(lines), reply_markup=get_promotion_keyboard(promotable))


async def promote_service(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Show the promotion payment link and schedule activation"""
    query = update.callback_query
    await query.answer()
    telegram_id = update.effective_user.id
    service_id = callback_int(query.data, 'promote_service_')

    db = create_session()
    try:
        service = CatalogService(db).get_service(service_id)
    finally:
        db.close()

    if not service or service.seller_id != telegram_id:
        await query.edit_message_text("❌ Service not found.", reply_markup=get_back_keyboard())
        return

    payments = PaymentService()
    payment_url, reference = payments.promotion_payment_url(service_id)
    await query.edit_message_text(
        payments.format_promotion_message(service.title, reference),
        reply_markup=get_promotion_payment_keyboard(payment_url)
    )

    await get_notifier(context).notify_admin(
        f"🌟 Promotion Payment Pending\n\n📋 Transaction: {reference}\n"
        f"👤 Seller: {update.effective_user.first_name} ({telegram_id})\n"
        f"💼 Service: {service.title}\n💰 Amount: ${PROMOTION_PRICE:.2f}"
    )
    schedule_promotion_activation(context.job_queue, service_id, telegram_id)
