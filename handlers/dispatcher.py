"""
Routes free text and uploaded files by the user's current conversation state.

Each state variant maps to exactly one handler; text or files arriving in a
state without an entry get a short hint instead.
"""
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.ext import ContextTypes
import logging

from conversation import (
    AwaitingName, AwaitingRole,
    ServiceTitle, ServiceDescription, ServicePrice, ServiceDelivery, ServicePayment,
    CollectRequirements, TypingRequirements, UploadingDocs,
    CreatingQuote, MessagingBuyer, MessagingSeller, SearchKeyword,
    get_conversations, per_user
)
from handlers.browse import handle_search_keyword
from handlers.messaging import handle_message_to_buyer, handle_message_to_seller
from handlers.orders import handle_quote_text
from handlers.purchase import (
    handle_requirements_choice, handle_requirements_file, handle_requirements_text
)
from handlers.seller import (
    handle_service_title, handle_service_description, handle_service_price,
    handle_service_delivery, handle_service_payment
)
from handlers.start import handle_name
from services.exceptions import MarketplaceError

logger = logging.getLogger(__name__)

RESTART_TEXT = "Sorry, something went wrong. Please try /start again."


async def _use_role_buttons(update: Update, context: ContextTypes.DEFAULT_TYPE, state: AwaitingRole):
    await update.message.reply_text("Please choose your role using the buttons above 👆")


async def _expect_file(update: Update, context: ContextTypes.DEFAULT_TYPE, state: UploadingDocs):
    await update.message.reply_text(
        "📎 Please send a document, image or video, or use the buttons to continue."
    )


TEXT_HANDLERS = {
    AwaitingName: handle_name,
    AwaitingRole: _use_role_buttons,
    ServiceTitle: handle_service_title,
    ServiceDescription: handle_service_description,
    ServicePrice: handle_service_price,
    ServiceDelivery: handle_service_delivery,
    ServicePayment: handle_service_payment,
    CollectRequirements: handle_requirements_choice,
    TypingRequirements: handle_requirements_text,
    UploadingDocs: _expect_file,
    CreatingQuote: handle_quote_text,
    MessagingBuyer: handle_message_to_buyer,
    MessagingSeller: handle_message_to_seller,
    SearchKeyword: handle_search_keyword,
}

FILE_HANDLERS = {
    UploadingDocs: handle_requirements_file,
}


async def _dispatch(update: Update, context: ContextTypes.DEFAULT_TYPE, handlers, fallback_text):
    if update.message is None:
        logger.debug(f"Ignoring non-message update {update.update_id}")
        return

    telegram_id = update.effective_user.id
    state = get_conversations(context).get(telegram_id)
    handler = handlers.get(type(state)) if state is not None else None

    if handler is None:
        await update.effective_message.reply_text(fallback_text)
        return

    try:
        await handler(update, context, state)
    except MarketplaceError as e:
        logger.warning(f"⚠️ {state.step} for user {telegram_id} rejected: {e}")
        await update.effective_message.reply_text(e.user_message)
    except Exception as e:
        # Handlers close their sessions in finally, which rolls back uncommitted work
        logger.error(f"❌ Error in step '{state.step}' for user {telegram_id}: {e}", exc_info=True)
        await update.effective_message.reply_text(RESTART_TEXT)


@per_user
async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await _dispatch(
        update, context, TEXT_HANDLERS,
        "I didn't understand that. Use /start to see available options."
    )


@per_user
async def handle_file(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await _dispatch(
        update, context, FILE_HANDLERS,
        "📎 To attach files, pick a service and tap \"Upload Documents\" first."
    )


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Last resort for errors raised by button and command handlers"""
    error = context.error
    if isinstance(error, MarketplaceError):
        logger.warning(f"⚠️ Rejected action: {error}")
        message = error.user_message
    else:
        logger.error(f"Update {update} caused error {error}", exc_info=error)
        message = "❌ An error occurred. Please try /start to return to the main menu."

    if not isinstance(update, Update):
        return

    reply_markup = InlineKeyboardMarkup([
        [InlineKeyboardButton("🏠 Main Menu", callback_data="back_to_menu")]
    ])
    try:
        if update.callback_query:
            await update.callback_query.edit_message_text(message, reply_markup=reply_markup)
        elif update.effective_message:
            await update.effective_message.reply_text(message, reply_markup=reply_markup)
    except Exception as e:
        logger.error(f"Error in error handler: {e}")
