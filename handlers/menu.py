"""
Menu screens: dashboard, profile, about, help, top sellers, orders, services, sales.

Screens only read data; they serve both the menu buttons and the matching
commands.
"""
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import ContextTypes
import logging

from config import SUPPORT_HANDLE, PROMOTION_PRICE, COMMISSION_RATE
from database.db import create_session
from handlers.common import REGISTER_FIRST_TEXT, acknowledge, load_user, respond, show_main_menu
from keyboards import get_back_keyboard, get_help_keyboard, get_my_orders_keyboard
from services.catalog_service import CatalogService
from services.order_lifecycle import OPEN_STATUSES
from services.order_service import OrderService
from utils.constants import LEADERBOARD_MEDALS, ORDER_STATUS_EMOJI
from utils.helpers import format_date, format_price, total_with_commission

logger = logging.getLogger(__name__)

COMMISSION_PERCENT = int(round(COMMISSION_RATE * 100))

HELP_COMMANDS_TEXT = f"""🤖 SkillSwap Bot Commands

📝 General:
/start - Register or welcome back
/help - Show this help message
/profile - View your profile
/cancel - Cancel what you're doing

🔍 Browse Services:
/search [keyword] - Search for services
/browse - Browse all services

💼 For Sellers:
/addservice - Add a new service
/myservices - View your services
/promote - Promote your services (💰 ${PROMOTION_PRICE:.2f}/month)

⭐ Reviews:
Rate services after purchase (1-5 stars)

💰 Payments:
All payments processed securely via our payment system
Sellers receive their net price; buyers pay +{COMMISSION_PERCENT}%

Need help? Contact @{SUPPORT_HANDLE}"""

HELP_TEXT = f"""🤖 SkillSwap Help

🛒 For Buyers:
• Browse or search services
• Share requirements & documents
• Get custom quotes
• Pay securely via the payment link
• Rate sellers

💼 For Sellers:
• Add your services
• Receive requests with files
• Create custom quotes
• Build your reputation

💰 How It Works:
1. Buyer selects service & shares requirements
2. Seller reviews & sends custom quote
3. Buyer accepts & pays (seller gets the full net price)
4. Seller delivers work via chat
5. Buyer rates the experience

Need help? Contact @{SUPPORT_HANDLE}"""

ABOUT_TEXT = f"""🚀 Welcome to SkillSwap!

Turn your 10-minute skill into real cash inside Telegram.

💡 How it works:
SELL: Add service → describe your micro-skill, set your price
BUY: Browse gigs → pay securely → get your result in-chat
EARN: Every time someone buys your skill, you get your full net price (buyers pay a small {COMMISSION_PERCENT}% service fee on top)

🌟 Why join?
• No sign-ups, just Telegram
• Top sellers get featured (promote your gig for just ${PROMOTION_PRICE:.2f}/month!)
• Build your reputation with star ratings ⭐⭐⭐⭐⭐

SkillSwap: where tiny talents turn into real income. 💰"""


async def back_to_menu(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    user = load_user(update.effective_user.id)
    if not user:
        await respond(update, REGISTER_FIRST_TEXT)
        return
    await show_main_menu(update, user)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(HELP_COMMANDS_TEXT)


async def show_help(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    await respond(update, HELP_TEXT, reply_markup=get_help_keyboard())


async def show_about(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    await respond(update, ABOUT_TEXT, reply_markup=get_back_keyboard(
        ("➕ Add My Service", "menu_add_service"),
        ("🔍 Browse Services", "menu_browse")
    ))


async def show_profile(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    user = load_user(update.effective_user.id)
    if not user:
        await respond(update, REGISTER_FIRST_TEXT)
        return

    text = f"""👤 Your Profile

📝 Name: {user.name}
🆔 Username: {'@' + user.username if user.username else 'Not set'}
🎭 Role: {user.role.value}
📅 Joined: {format_date(user.created_at)}

🔄 Want to change your role or update info? Contact @{SUPPORT_HANDLE}"""
    await respond(update, text, reply_markup=get_back_keyboard())


async def show_top_sellers(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)

    db = create_session()
    try:
        sellers = CatalogService(db).get_top_sellers()
    finally:
        db.close()

    if not sellers:
        await respond(
            update,
            "🏆 Top Sellers\n\nNo sellers yet! Be the first to add a service and start earning.",
            reply_markup=get_back_keyboard(("🔍 Browse Services", "menu_browse"))
        )
        return

    lines = ["🏆 Top Sellers Leaderboard\n"]
    for position, seller in enumerate(sellers, start=1):
        medal = LEADERBOARD_MEDALS.get(position, f"{position}.")
        promoted = "🌟 " if seller.is_promoted else ""
        rating = f"⭐ {seller.avg_rating:.1f}" if seller.avg_rating > 0 else "⭐ New"
        lines.append(
            f"{medal} {promoted}{seller.name}\n"
            f"   {rating} • {seller.total_orders} orders • {format_price(seller.total_earned)} earned\n"
            f"   Active Services: {seller.active_services}\n"
        )
    lines.append(f"💡 Want to be featured? Promote your services for just ${PROMOTION_PRICE:.2f}/month!")

    await respond(update, "\n".join(lines), reply_markup=get_back_keyboard(
        ("🌟 Promote My Services", "menu_promote")
    ))


async def show_sales_dashboard(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    user = load_user(update.effective_user.id)
    if not user or not user.role.can_sell:
        await respond(update, "❌ The sales dashboard is available for sellers only.",
                      reply_markup=get_back_keyboard())
        return

    db = create_session()
    try:
        stats = CatalogService(db).get_seller_stats(user.telegram_id)
    finally:
        db.close()

    rating = f"{stats.avg_rating:.1f}" if stats.avg_rating > 0 else "No ratings yet"
    text = f"""📊 Sales Dashboard

💰 Earnings:
• Total Orders: {stats.total_orders}
• Completed: {stats.completed_orders}
• Pending: {stats.pending_orders}
• Total Earned: {format_price(stats.total_earned)}

⭐ Reputation:
• Average Rating: {rating}
• Total Reviews: {stats.total_reviews}

📈 Performance:
• Active Services: {stats.active_services}
• This Month: {stats.monthly_orders} orders"""
    await respond(update, text, reply_markup=get_back_keyboard(("💼 My Services", "menu_my_services")))


async def show_my_orders(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    telegram_id = update.effective_user.id

    db = create_session()
    try:
        orders = OrderService(db).get_user_orders(telegram_id)
        lines = ["📋 My Orders\n"]
        cancellable = []
        for i, order in enumerate(orders, start=1):
            status = order.status.value
            price = total_with_commission(order.custom_price) if order.custom_price is not None else order.total_amount
            title = order.service.title if order.service else "Service"
            lines.append(
                f"{i}. {ORDER_STATUS_EMOJI.get(status, '📋')} Order #{order.id} • {title}\n"
                f"   💰 {format_price(price)} • 📅 {format_date(order.created_at)}\n"
                f"   Status: {status.replace('_', ' ')}\n"
            )
            if order.status in OPEN_STATUSES:
                cancellable.append(order.id)
    finally:
        db.close()

    if not orders:
        await respond(
            update,
            "📋 My Orders\n\nYou haven't placed any orders yet.\n\nStart by browsing available services!",
            reply_markup=get_back_keyboard(("🔍 Browse Services", "menu_browse"))
        )
        return

    await respond(update, "\n".join(lines), reply_markup=get_my_orders_keyboard(cancellable))


async def show_my_services(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)

    db = create_session()
    try:
        services = CatalogService(db).get_user_services(update.effective_user.id)
    finally:
        db.close()

    if not services:
        await respond(
            update,
            "💼 My Services\n\nYou haven't added any services yet.\n\nStart by creating your first service!",
            reply_markup=get_back_keyboard(("➕ Add Service", "menu_add_service"))
        )
        return

    lines = ["💼 My Services\n"]
    for i, service in enumerate(services, start=1):
        promoted = "🌟 " if service.is_currently_promoted() else ""
        lines.append(
            f"{i}. {promoted}{service.title}\n"
            f"   💰 {format_price(total_with_commission(service.net_price))} • ⏱️ {service.delivery_time}\n"
            f"   📝 {service.description}\n"
        )
    await respond(update, "\n".join(lines), reply_markup=InlineKeyboardMarkup([
        [InlineKeyboardButton("➕ Add Service", callback_data="menu_add_service")],
        [InlineKeyboardButton("🏠 Back to Menu", callback_data="back_to_menu")]
    ]))
