"""Command handlers for Telegram updates."""

from dataclasses import dataclass

from photo_relay.adapters.telegram_client import TelegramClient

START_COMMAND = "/start"


@dataclass
class StartCommandHandler:
    """Handle the /start Telegram command."""

    telegram_client: TelegramClient
    mail_enabled: bool

    async def handle(self, chat_id: int) -> None:
        """Send the greeting describing what the bot can do."""
        await self.telegram_client.send_message(
            chat_id=chat_id,
            text=greeting_text(self.mail_enabled),
            parse_mode="HTML",
        )


def greeting_text(mail_enabled: bool) -> str:
    text = (
        "📸 <b>Photo Upload Bot</b>\n\n"
        "Send me a photo and I'll give you the file link!"
    )
    if mail_enabled:
        text += "\n📧 I can also upload it to Gmail!"
    return text
