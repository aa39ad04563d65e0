"""Telegram file lookup and download client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from photo_relay.domain.photos import TelegramFile


class TelegramApiError(RuntimeError):
    """Raised when Telegram answers with ok=false."""


class TelegramFileClient(Protocol):
    """Interface for resolving and downloading Telegram files."""

    async def get_file(self, file_id: str) -> TelegramFile:
        """Look up file metadata for a Telegram file id."""

    def file_url(self, file: TelegramFile) -> str:
        """Return the direct download URL for a resolved file."""

    async def download_bytes(self, url: str) -> bytes:
        """Download the content behind a file URL."""


@dataclass
class HttpxTelegramFileClient(TelegramFileClient):
    """Telegram file client using httpx."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramFileClient":
        """Create a Telegram file client with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def get_file(self, file_id: str) -> TelegramFile:
        """Resolve a file id via getFile."""
        get_file_url = f"https://api.telegram.org/bot{self.bot_token}/getFile"
        response = await self.http_client.get(
            get_file_url, params={"file_id": file_id}, timeout=10
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise TelegramApiError(
                payload.get("description") or "Telegram getFile failed"
            )
        result = payload["result"]
        return TelegramFile(
            file_id=result.get("file_id", file_id),
            file_path=result["file_path"],
            file_size=result.get("file_size"),
        )

    def file_url(self, file: TelegramFile) -> str:
        """Build the file download URL."""
        return f"https://api.telegram.org/file/bot{self.bot_token}/{file.file_path}"

    async def download_bytes(self, url: str) -> bytes:
        """Download raw bytes from a file URL."""
        file_response = await self.http_client.get(url, timeout=20)
        file_response.raise_for_status()
        return file_response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
