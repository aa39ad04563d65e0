"""Inline button (callback query) handling."""

import logging
import time
from dataclasses import dataclass
from html import escape

from photo_relay.adapters.telegram_client import TelegramClient
from photo_relay.adapters.telegram_file_client import TelegramFileClient
from photo_relay.services.mail import MailForwardService

logger = logging.getLogger(__name__)

GMAIL_PREFIX = "gmail_"
CANCEL_DATA = "cancel"
# Telegram rejects inline buttons whose callback_data exceeds this many bytes.
CALLBACK_DATA_LIMIT = 64


def gmail_callback_data(file_id: str) -> str:
    data = f"{GMAIL_PREFIX}{file_id}"
    size = len(data.encode("utf-8"))
    if size > CALLBACK_DATA_LIMIT:
        logger.warning(
            "Upload button data is %d bytes, over Telegram's %d byte limit",
            size,
            CALLBACK_DATA_LIMIT,
            extra={"file_id": file_id},
        )
    return data


def parse_callback_data(data: str) -> tuple[str, str | None] | None:
    """Parse callback data into (action, file_id).

    Recognises gmail_<file_id> and cancel; anything else yields None.
    """
    if data.startswith(GMAIL_PREFIX):
        return "gmail", data.removeprefix(GMAIL_PREFIX)
    if data == CANCEL_DATA:
        return "cancel", None
    return None


@dataclass
class CallbackQueryHandler:
    """Handle taps on the buttons attached to a photo reply."""

    telegram_client: TelegramClient
    file_client: TelegramFileClient
    mail_service: MailForwardService | None

    async def handle(
        self,
        callback_query_id: str,
        data: str,
        chat_id: int | None,
        message_id: int | None,
    ) -> None:
        """Dispatch a callback query by its data string."""
        parsed = parse_callback_data(data)
        if parsed is None:
            return
        action, file_id = parsed
        if action == "gmail" and file_id is not None:
            await self._upload_to_gmail(callback_query_id, file_id, chat_id)
        elif action == "cancel":
            await self.telegram_client.answer_callback_query(
                callback_query_id, text="Closed"
            )
            if chat_id is not None and message_id is not None:
                await self.telegram_client.delete_message(chat_id, message_id)

    async def _upload_to_gmail(
        self, callback_query_id: str, file_id: str, chat_id: int | None
    ) -> None:
        if self.mail_service is None:
            await self.telegram_client.answer_callback_query(
                callback_query_id, text="Gmail upload is disabled"
            )
            return
        await self.telegram_client.answer_callback_query(
            callback_query_id, text="📧 Uploading to Gmail..."
        )
        file = await self.file_client.get_file(file_id)
        file_url = self.file_client.file_url(file)
        file_name = f"photo_{int(time.time() * 1000)}.jpg"
        success = await self.mail_service.forward_photo(file_url, file_name)
        if chat_id is None:
            return
        if success:
            await self.telegram_client.send_message(
                chat_id=chat_id,
                text=(
                    "✅ <b>Uploaded to Gmail!</b>\n\n"
                    f"📧 Sent to: {escape(self.mail_service.mailbox)}\n"
                    f"📎 File: {escape(file_name)}"
                ),
                parse_mode="HTML",
            )
        else:
            await self.telegram_client.send_message(
                chat_id=chat_id, text="❌ Failed to upload to Gmail"
            )
