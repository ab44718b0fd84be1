from telegram.error import TelegramError
from config import ADMIN_ID
from database.models import FileKind
import logging

logger = logging.getLogger(__name__)

MESSAGE_LIMIT = 4000


class NotificationService:
    """Delivers messages to the other party of an order.

    Failures are logged and reported as ``False`` so the caller's own flow
    can still finish.
    """

    def __init__(self, bot):
        self.bot = bot

    async def notify_user(self, user_id: int, message: str, reply_markup=None, parse_mode: str = None) -> bool:
        """Send notification to a specific user"""
        try:
            await self.bot.send_message(
                chat_id=user_id,
                text=message[:MESSAGE_LIMIT],
                reply_markup=reply_markup,
                parse_mode=parse_mode,
                disable_web_page_preview=True
            )
            logger.debug(f"Notified user {user_id}")
            return True
        except TelegramError as e:
            logger.error(f"Failed to notify user {user_id}: {e}")
            return False

    async def notify_admin(self, message: str) -> bool:
        """Send notification to the configured admin"""
        if not ADMIN_ID:
            logger.debug("No ADMIN_ID configured, skipping admin notification")
            return False
        return await self.notify_user(int(ADMIN_ID), message)

    async def send_file(self, chat_id: int, file, caption: str = None) -> bool:
        """Forward an uploaded file by its Telegram file_id.

        ``file`` is anything with ``file_id`` and a kind (``kind`` on
        conversation drafts, ``file_type`` on stored rows).
        """
        kind = FileKind(getattr(file, 'kind', None) or file.file_type)
        try:
            if kind == FileKind.PHOTO:
                await self.bot.send_photo(chat_id=chat_id, photo=file.file_id, caption=caption)
            elif kind == FileKind.VIDEO:
                await self.bot.send_video(chat_id=chat_id, video=file.file_id, caption=caption)
            else:
                await self.bot.send_document(chat_id=chat_id, document=file.file_id, caption=caption)
            return True
        except TelegramError as e:
            logger.error(f"Failed to send {kind.value} to {chat_id}: {e}")
            return False
