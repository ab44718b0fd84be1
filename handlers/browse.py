from telegram import Update
from telegram.ext import ContextTypes
import logging

from conversation import SearchKeyword, get_conversations, per_user
from database.db import create_session
from handlers.common import acknowledge, respond
from keyboards import get_back_keyboard, get_services_keyboard
from services.catalog_service import CatalogService
from utils.helpers import format_price, total_with_commission

logger = logging.getLogger(__name__)


def format_listings(listings, title):
    lines = [f"{title}\n"]
    for i, listing in enumerate(listings, start=1):
        service = listing.service
        rating = f"⭐ {listing.avg_rating:.1f}" if listing.avg_rating > 0 else "⭐ New"
        promoted = "🌟 " if listing.is_currently_promoted else ""
        lines.append(
            f"{i}. {promoted}{service.title}\n"
            f"👤 {listing.seller_name} {rating}\n"
            f"📝 {service.description}\n"
            f"💰 {format_price(total_with_commission(service.net_price))} • ⏱️ {service.delivery_time}\n"
        )
    return "\n".join(lines)


async def show_browse(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)

    db = create_session()
    try:
        listings = CatalogService(db).browse_services()
    finally:
        db.close()

    if not listings:
        await respond(update, "No services available yet 😔\n\nBe the first to add a service!",
                      reply_markup=get_back_keyboard())
        return

    await respond(update, format_listings(listings, "🛍️ Available Services"),
                  reply_markup=get_services_keyboard(listings))


async def run_search(update: Update, keyword: str):
    db = create_session()
    try:
        listings = CatalogService(db).search_services(keyword)
    finally:
        db.close()

    logger.info(f"🔍 Search '{keyword}': {len(listings)} result(s)")
    if not listings:
        await respond(
            update,
            f"🔍 Search Results\n\nNo services found for \"{keyword}\" 😔\n\nTry different keywords or browse all services.",
            reply_markup=get_back_keyboard(("🔍 Browse All", "menu_browse"))
        )
        return

    await respond(update, format_listings(listings, f"🔍 Search: \"{keyword}\""),
                  reply_markup=get_services_keyboard(listings))


@per_user
async def start_search(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await acknowledge(update)
    get_conversations(context).set(update.effective_user.id, SearchKeyword())
    await respond(update, "🔎 What are you looking for?\n\nSend a keyword (e.g., logo, translation, excel):")


@per_user
async def search_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/search <keyword> searches right away, bare /search asks for a keyword"""
    keyword = " ".join(context.args or []).strip()
    if keyword:
        await run_search(update, keyword)
        return

    get_conversations(context).set(update.effective_user.id, SearchKeyword())
    await update.message.reply_text("🔎 What are you looking for?\n\nSend a keyword:")


async def handle_search_keyword(update: Update, context: ContextTypes.DEFAULT_TYPE, state: SearchKeyword):
    keyword = update.effective_message.text.strip()
    if not keyword:
        await update.effective_message.reply_text("🔎 Please send a keyword to search for:")
        return

    await run_search(update, keyword)
    get_conversations(context).delete(update.effective_user.id)
