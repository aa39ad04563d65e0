"""Forward Telegram photos to a mailbox."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from photo_relay.adapters.telegram_file_client import TelegramFileClient
from photo_relay.domain.photos import OutgoingMail

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    """Interface for sending an email."""

    async def send(self, mail: OutgoingMail) -> None:
        """Deliver a single message."""


@dataclass
class MailForwardService:
    """Download a photo and mail it to the configured mailbox."""

    file_client: TelegramFileClient
    mailer: Mailer
    mailbox: str

    async def forward_photo(self, file_url: str, file_name: str) -> bool:
        """Send the photo behind file_url as an attachment.

        Returns False on any download or transport failure; the caller only
        reports success or failure to the user.
        """
        try:
            content = await self.file_client.download_bytes(file_url)
            await self.mailer.send(
                OutgoingMail(
                    sender=self.mailbox,
                    recipient=self.mailbox,
                    subject=f"📸 Telegram Photo - {file_name}",
                    body=(
                        "Photo uploaded from Telegram Bot\n"
                        f"File: {file_name}\n"
                        f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
                    ),
                    attachment_name=file_name,
                    attachment=content,
                )
            )
        except Exception:
            logger.exception("Gmail upload failed", extra={"file_name": file_name})
            return False
        logger.info("Forwarded %s to %s", file_name, self.mailbox)
        return True
