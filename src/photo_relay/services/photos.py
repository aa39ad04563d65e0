"""Handling of photos sent to the bot."""

import logging
from dataclasses import dataclass
from html import escape

from photo_relay.adapters.telegram_client import TelegramClient
from photo_relay.adapters.telegram_file_client import TelegramFileClient
from photo_relay.domain.photos import PhotoRecord, TelegramFile
from photo_relay.services.callbacks import CANCEL_DATA, gmail_callback_data
from photo_relay.services.history import PhotoHistory

logger = logging.getLogger(__name__)


@dataclass
class PhotoReceivedHandler:
    """Resolve a received photo to a URL and offer follow-up actions."""

    telegram_client: TelegramClient
    file_client: TelegramFileClient
    history: PhotoHistory
    mail_enabled: bool

    async def handle(
        self, telegram_user_id: int, chat_id: int, file_id: str
    ) -> PhotoRecord:
        """Reply with the file URL and size, and record it for the user."""
        file = await self.file_client.get_file(file_id)
        file_url = self.file_client.file_url(file)
        record = self.history.record(telegram_user_id, file_url)
        logger.info("Photo received", extra={"chat_id": chat_id, "file_id": file_id})
        await self.telegram_client.send_message(
            chat_id=chat_id,
            text=format_photo_reply(file_url, file),
            parse_mode="HTML",
            reply_markup=photo_keyboard(file.file_id, self.mail_enabled),
        )
        return record


def format_photo_reply(file_url: str, file: TelegramFile) -> str:
    """Format the reply for a received photo."""
    return (
        "✅ <b>Photo Received!</b>\n\n"
        f"🔗 <b>File URL:</b>\n{escape(file_url)}\n\n"
        f"📊 <b>Size:</b> {file.size_kb:.1f} KB"
    )


def photo_keyboard(file_id: str, mail_enabled: bool) -> dict:
    rows: list[list[dict[str, str]]] = []
    if mail_enabled:
        rows.append(
            [
                {
                    "text": "📧 Upload to Gmail",
                    "callback_data": gmail_callback_data(file_id),
                }
            ]
        )
    rows.append([{"text": "❌ Close", "callback_data": CANCEL_DATA}])
    return {"inline_keyboard": rows}
