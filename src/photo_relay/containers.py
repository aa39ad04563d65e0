"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from photo_relay.adapters.smtp_mailer import SmtpMailer
from photo_relay.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from photo_relay.adapters.telegram_file_client import (
    HttpxTelegramFileClient,
    TelegramFileClient,
)
from photo_relay.config import Settings
from photo_relay.services.callbacks import CallbackQueryHandler
from photo_relay.services.commands import StartCommandHandler
from photo_relay.services.history import PhotoHistory
from photo_relay.services.mail import MailForwardService
from photo_relay.services.photos import PhotoReceivedHandler

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    telegram_file_client: TelegramFileClient
    photo_history: PhotoHistory
    mail_service: MailForwardService | None
    start_command_handler: StartCommandHandler
    photo_handler: PhotoReceivedHandler
    callback_handler: CallbackQueryHandler
    close_resources: Callable[[], Awaitable[None]]

    @property
    def mail_enabled(self) -> bool:
        return self.mail_service is not None


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    telegram_client = HttpxTelegramClient.create(resolved_settings.bot_token)
    telegram_file_client = HttpxTelegramFileClient.create(resolved_settings.bot_token)
    mail_service: MailForwardService | None = None
    if resolved_settings.mail_enabled:
        mailbox = resolved_settings.gmail_user or ""
        mail_service = MailForwardService(
            file_client=telegram_file_client,
            mailer=SmtpMailer(
                host=resolved_settings.smtp_host,
                port=resolved_settings.smtp_port,
                username=mailbox,
                password=resolved_settings.gmail_pass or "",
                timeout=resolved_settings.smtp_timeout,
            ),
            mailbox=mailbox,
        )
    else:
        logger.warning("Gmail credentials not set - Gmail upload disabled")

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()

    return assemble_container(
        settings=resolved_settings,
        telegram_client=telegram_client,
        telegram_file_client=telegram_file_client,
        mail_service=mail_service,
        close_resources=close_resources,
    )


def assemble_container(
    settings: Settings,
    telegram_client: TelegramClient,
    telegram_file_client: TelegramFileClient,
    mail_service: MailForwardService | None,
    close_resources: Callable[[], Awaitable[None]],
) -> AppContainer:
    """Wire handlers around already-built clients."""
    history = PhotoHistory()
    mail_enabled = mail_service is not None
    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        telegram_file_client=telegram_file_client,
        photo_history=history,
        mail_service=mail_service,
        start_command_handler=StartCommandHandler(
            telegram_client=telegram_client, mail_enabled=mail_enabled
        ),
        photo_handler=PhotoReceivedHandler(
            telegram_client=telegram_client,
            file_client=telegram_file_client,
            history=history,
            mail_enabled=mail_enabled,
        ),
        callback_handler=CallbackQueryHandler(
            telegram_client=telegram_client,
            file_client=telegram_file_client,
            mail_service=mail_service,
        ),
        close_resources=close_resources,
    )
