"""
Configuration file for SkillSwap Marketplace
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ========== TELEGRAM BOT CONFIG ==========
TELEGRAM_TOKEN = os.getenv("TELEGRAM_TOKEN", os.getenv("BOT_TOKEN", "YOUR_BOT_TOKEN_HERE"))
ADMIN_ID = os.getenv("ADMIN_ID", "")
SUPPORT_HANDLE = os.getenv("SUPPORT_HANDLE", "xiniluca")

# Webhook mode is used only when a public URL is configured
WEBHOOK_URL = os.getenv("WEBHOOK_URL", "")
WEBHOOK_PATH = os.getenv("WEBHOOK_PATH", "telegram")

# ========== HTTP SERVER CONFIG ==========
PORT = int(os.getenv("PORT", "3000"))
WEBHOOK_PORT = int(os.getenv("WEBHOOK_PORT", "8443"))

# ========== DATABASE CONFIG ==========
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///skillswap.db")

# ========== PAYMENT CONFIG ==========
PAYMENT_LINK = os.getenv("PAYMENT_LINK", "https://pay.example.com/checkout")
DEFAULT_CURRENCY_SYMBOL = "$"

# Buyers pay net price + commission, sellers receive the net price
COMMISSION_RATE = 0.15

# ========== MARKETPLACE CONFIG ==========
DESCRIPTION_MAX_LENGTH = 120
SEARCH_LIMIT = 5
TOP_SELLERS_LIMIT = 10

# ========== PROMOTION CONFIG ==========
PROMOTION_PRICE = 1.99
PROMOTION_DAYS = 30

# ========== DEFERRED JOBS (seconds) ==========
# Stand-ins for payment webhooks: fixed delays after the payment link is shown
RATING_PROMPT_DELAY = int(os.getenv("RATING_PROMPT_DELAY", "30"))
PROMOTION_ACTIVATION_DELAY = int(os.getenv("PROMOTION_ACTIVATION_DELAY", "10"))
PROMOTION_SWEEP_INTERVAL = 60 * 60

# ========== CONVERSATION SESSIONS ==========
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "1800"))
SESSION_SWEEP_INTERVAL = int(os.getenv("SESSION_SWEEP_INTERVAL", "300"))

# ========== LOGGING CONFIG ==========
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "skillswap.log")

# ========== API CONFIG ==========
API_TIMEOUT = 30
