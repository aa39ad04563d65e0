"""SMTP mail transport."""

import asyncio
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from photo_relay.domain.photos import OutgoingMail
from photo_relay.services.mail import Mailer


@dataclass
class SmtpMailer(Mailer):
    """Mailer backed by smtplib over implicit TLS."""

    host: str
    port: int
    username: str
    password: str
    timeout: float = 20

    async def send(self, mail: OutgoingMail) -> None:
        """Send the message from a worker thread."""
        await asyncio.to_thread(self._send_sync, build_message(mail))

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.login(self.username, self.password)
            smtp.send_message(message)


def build_message(mail: OutgoingMail) -> EmailMessage:
    """Compose a MIME message with one attachment."""
    message = EmailMessage()
    message["From"] = mail.sender
    message["To"] = mail.recipient
    message["Subject"] = mail.subject
    message.set_content(mail.body)
    maintype, subtype = _detect_mime_type(mail.attachment).split("/")
    message.add_attachment(
        mail.attachment,
        maintype=maintype,
        subtype=subtype,
        filename=mail.attachment_name,
    )
    return message


def _detect_mime_type(data: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
