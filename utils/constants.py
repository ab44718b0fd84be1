# utils/constants.py

# Order status display
ORDER_STATUS_EMOJI = {
    'request_sent': '📤',
    'quote_sent': '💰',
    'quote_accepted': '✅',
    'quote_declined': '❌',
    'declined': '❌',
    'completed': '🎉',
    'cancelled': '🚫',
}

# Role selection buttons
ROLE_LABELS = {
    'Buyer': '🛒 Buyer',
    'Seller': '💼 Seller',
    'Both': '🔄 Both',
}

# File kind labels shown in requirement lists
FILE_KIND_LABELS = {
    'document': '📄 Document',
    'photo': '🖼️ Image uploaded',
    'video': '🎥 Video uploaded',
}

NO_REQUIREMENTS_TEXT = 'No specific requirements provided.'

LEADERBOARD_MEDALS = {1: '🥇', 2: '🥈', 3: '🥉'}
