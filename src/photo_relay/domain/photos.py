"""Domain models for relayed photos."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PhotoRecord:
    """A photo a user sent, kept in the in-memory history."""

    owner_id: int
    file_url: str
    timestamp: datetime


@dataclass(frozen=True)
class TelegramFile:
    """Result of a Telegram getFile lookup."""

    file_id: str
    file_path: str
    file_size: int | None = None

    @property
    def size_kb(self) -> float:
        return (self.file_size or 0) / 1024


@dataclass(frozen=True)
class OutgoingMail:
    """Email with a single binary attachment."""

    sender: str
    recipient: str
    subject: str
    body: str
    attachment_name: str
    attachment: bytes
