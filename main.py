import logging
from datetime import datetime

from telegram import Update

from config import LOG_FILE, LOG_LEVEL, WEBHOOK_URL, WEBHOOK_PATH, WEBHOOK_PORT

# Set up logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    handlers=[
        logging.FileHandler(LOG_FILE),
        logging.StreamHandler()
    ]
)
# httpx logs every getUpdates poll at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def main():
    """Main function"""
    logger.info("=" * 60)
    logger.info("🚀 SkillSwap Marketplace Bot")
    logger.info(f"Start Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    from database.db import init_db, dispose_engine, test_connection

    if not test_connection():
        logger.warning("⚠️ Database connection test failed. Attempting to initialize anyway...")
    if not init_db():
        logger.error("❌ Database initialization failed. Exiting.")
        return

    from application import create_application
    application = create_application()
    if not application:
        logger.error("❌ Failed to create application. Exiting.")
        return

    from webhook_server import start_health_server
    start_health_server()

    try:
        if WEBHOOK_URL:
            logger.info(f"⚡ Starting in webhook mode on port {WEBHOOK_PORT}")
            application.run_webhook(
                listen="0.0.0.0",
                port=WEBHOOK_PORT,
                url_path=WEBHOOK_PATH,
                webhook_url=f"{WEBHOOK_URL.rstrip('/')}/{WEBHOOK_PATH}",
                allowed_updates=Update.ALL_TYPES,
                drop_pending_updates=True
            )
        else:
            logger.info("⚡ Starting in polling mode. Press Ctrl+C to stop")
            application.run_polling(
                allowed_updates=Update.ALL_TYPES,
                drop_pending_updates=True
            )
    except KeyboardInterrupt:
        logger.info("👋 Bot stopped by user")
    finally:
        dispose_engine()
        logger.info(f"End Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")


if __name__ == '__main__':
    main()
