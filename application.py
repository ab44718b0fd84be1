import logging

from telegram.ext import (
    ApplicationBuilder, CommandHandler, CallbackQueryHandler,
    MessageHandler, filters
)

from config import TELEGRAM_TOKEN, API_TIMEOUT
from conversation import ConversationStore, STORE_KEY

logger = logging.getLogger(__name__)

# Edits of earlier messages are not input for the current step
TEXT_FILTER = filters.UpdateType.MESSAGE & filters.TEXT & ~filters.COMMAND
FILE_FILTER = filters.UpdateType.MESSAGE & (filters.Document.ALL | filters.PHOTO | filters.VIDEO)


def create_application(token=TELEGRAM_TOKEN):
    """Create and configure the Telegram application"""
    if not token or token == "YOUR_BOT_TOKEN_HERE":
        logger.error("❌ TELEGRAM_TOKEN is not set. Add it to your .env file")
        return None

    application = (
        ApplicationBuilder()
        .token(token)
        .concurrent_updates(True)
        .read_timeout(API_TIMEOUT)
        .write_timeout(API_TIMEOUT)
        .connect_timeout(API_TIMEOUT)
        .pool_timeout(API_TIMEOUT)
        .build()
    )
    application.bot_data[STORE_KEY] = ConversationStore()

    register_handlers(application)

    from services.scheduler import register_recurring_jobs
    register_recurring_jobs(application.job_queue)

    logger.info("✅ All handlers registered successfully!")
    return application


def register_handlers(application):
    from handlers.browse import show_browse, start_search, search_command
    from handlers.commands import cancel_command, stats_command
    from handlers.dispatcher import handle_text, handle_file, error_handler
    from handlers.menu import (
        back_to_menu, help_command, show_help, show_about, show_profile,
        show_top_sellers, show_sales_dashboard, show_my_orders, show_my_services
    )
    from handlers.messaging import start_message_buyer, start_message_seller
    from handlers.orders import (
        start_quote, decline_request, accept_quote, decline_quote, rate_order, cancel_order
    )
    from handlers.purchase import (
        buy_service, start_text_requirements, start_document_upload, send_request
    )
    from handlers.seller import start_add_service, show_promotion_options, promote_service
    from handlers.start import start_command, handle_role_selection

    # ========== COMMANDS ==========
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("profile", show_profile))
    application.add_handler(CommandHandler("search", search_command))
    application.add_handler(CommandHandler("browse", show_browse))
    application.add_handler(CommandHandler("addservice", start_add_service))
    application.add_handler(CommandHandler("myservices", show_my_services))
    application.add_handler(CommandHandler("promote", show_promotion_options))
    application.add_handler(CommandHandler("cancel", cancel_command))
    application.add_handler(CommandHandler("stats", stats_command))

    # ========== REGISTRATION ==========
    application.add_handler(CallbackQueryHandler(handle_role_selection, pattern="^role_(Buyer|Seller|Both)$"))

    # ========== MENU ==========
    application.add_handler(CallbackQueryHandler(back_to_menu, pattern="^back_to_menu$"))
    application.add_handler(CallbackQueryHandler(show_browse, pattern="^menu_browse$"))
    application.add_handler(CallbackQueryHandler(start_search, pattern="^menu_search$"))
    application.add_handler(CallbackQueryHandler(show_my_orders, pattern="^menu_my_orders$"))
    application.add_handler(CallbackQueryHandler(show_my_services, pattern="^menu_my_services$"))
    application.add_handler(CallbackQueryHandler(show_sales_dashboard, pattern="^menu_sales$"))
    application.add_handler(CallbackQueryHandler(start_add_service, pattern="^menu_add_service$"))
    application.add_handler(CallbackQueryHandler(show_profile, pattern="^menu_profile$"))
    application.add_handler(CallbackQueryHandler(show_about, pattern="^menu_about$"))
    application.add_handler(CallbackQueryHandler(show_top_sellers, pattern="^menu_top_sellers$"))
    application.add_handler(CallbackQueryHandler(show_promotion_options, pattern="^menu_promote$"))
    application.add_handler(CallbackQueryHandler(show_help, pattern="^menu_help$"))

    # ========== PROMOTION ==========
    application.add_handler(CallbackQueryHandler(promote_service, pattern=r"^promote_service_\d+$"))

    # ========== PURCHASE ==========
    application.add_handler(CallbackQueryHandler(buy_service, pattern=r"^buy_\d+$"))
    application.add_handler(CallbackQueryHandler(start_text_requirements, pattern=r"^req_text_\d+$"))
    application.add_handler(CallbackQueryHandler(start_document_upload, pattern=r"^req_docs_\d+$"))
    application.add_handler(CallbackQueryHandler(send_request, pattern=r"^send_request_\d+$"))

    # ========== ORDERS ==========
    application.add_handler(CallbackQueryHandler(start_quote, pattern=r"^send_quote_\d+$"))
    application.add_handler(CallbackQueryHandler(decline_request, pattern=r"^decline_request_\d+$"))
    application.add_handler(CallbackQueryHandler(accept_quote, pattern=r"^accept_quote_\d+$"))
    application.add_handler(CallbackQueryHandler(decline_quote, pattern=r"^decline_quote_\d+$"))
    application.add_handler(CallbackQueryHandler(rate_order, pattern=r"^rate_\d+_\d+$"))
    application.add_handler(CallbackQueryHandler(cancel_order, pattern=r"^cancel_order_\d+$"))

    # ========== MESSAGING ==========
    application.add_handler(CallbackQueryHandler(start_message_buyer, pattern=r"^message_buyer_\d+$"))
    application.add_handler(CallbackQueryHandler(start_message_seller, pattern=r"^message_seller_\d+$"))

    # ========== FREE INPUT ==========
    application.add_handler(MessageHandler(TEXT_FILTER, handle_text))
    application.add_handler(MessageHandler(FILE_FILTER, handle_file))

    # ========== ERROR HANDLER ==========
    application.add_error_handler(error_handler)
