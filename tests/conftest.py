"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from photo_relay.adapters.telegram_client import TelegramClient
from photo_relay.adapters.telegram_file_client import (
    TelegramApiError,
    TelegramFileClient,
)
from photo_relay.config import Settings
from photo_relay.containers import AppContainer, assemble_container
from photo_relay.domain.photos import OutgoingMail, TelegramFile
from photo_relay.services.mail import MailForwardService, Mailer


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records calls."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    reply_markups: list[dict | None] = field(default_factory=list)
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    deleted: list[tuple[int, int]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    send_error: Exception | None = None
    commands_error: Exception | None = None

    async def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: str | None = None,
        reply_markup: dict | None = None,
    ) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.messages.append((chat_id, text))
        self.reply_markups.append(reply_markup)

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        self.deleted.append((chat_id, message_id))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        if self.commands_error is not None:
            raise self.commands_error
        self.commands = commands


@dataclass
class FakeTelegramFileClient(TelegramFileClient):
    """Fake Telegram file client returning static metadata and bytes."""

    file_size: int | None = 12345
    content: bytes = b"\xff\xd8\xfffake-jpeg"
    missing: bool = False
    lookups: list[str] = field(default_factory=list)
    downloads: list[str] = field(default_factory=list)

    async def get_file(self, file_id: str) -> TelegramFile:
        self.lookups.append(file_id)
        if self.missing:
            raise TelegramApiError("Bad Request: wrong file_id")
        return TelegramFile(
            file_id=file_id,
            file_path=f"photos/{file_id}.jpg",
            file_size=self.file_size,
        )

    def file_url(self, file: TelegramFile) -> str:
        return f"https://api.telegram.org/file/bottest-token/{file.file_path}"

    async def download_bytes(self, url: str) -> bytes:
        self.downloads.append(url)
        return self.content


@dataclass
class FakeMailer(Mailer):
    """Fake mailer that records attempts and can simulate failure."""

    fail: bool = False
    attempts: list[OutgoingMail] = field(default_factory=list)

    async def send(self, mail: OutgoingMail) -> None:
        self.attempts.append(mail)
        if self.fail:
            raise RuntimeError("SMTP authentication failed")


@dataclass
class ClosedFlag:
    closed: bool = False

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        bot_token="test-token",
        gmail_user="relay@example.com",
        gmail_pass="app-password",
        environment="local",
    )


@pytest.fixture
def settings_without_mail() -> Settings:
    return Settings(
        bot_token="test-token",
        gmail_user=None,
        gmail_pass=None,
        environment="local",
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def file_client() -> FakeTelegramFileClient:
    return FakeTelegramFileClient()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def closed_flag() -> ClosedFlag:
    return ClosedFlag()


@pytest.fixture
def container(
    settings: Settings,
    telegram_client: FakeTelegramClient,
    file_client: FakeTelegramFileClient,
    mailer: FakeMailer,
    closed_flag: ClosedFlag,
) -> AppContainer:
    mail_service = MailForwardService(
        file_client=file_client,
        mailer=mailer,
        mailbox="relay@example.com",
    )
    return assemble_container(
        settings=settings,
        telegram_client=telegram_client,
        telegram_file_client=file_client,
        mail_service=mail_service,
        close_resources=closed_flag.close,
    )


@pytest.fixture
def container_without_mail(
    settings_without_mail: Settings,
    telegram_client: FakeTelegramClient,
    file_client: FakeTelegramFileClient,
    closed_flag: ClosedFlag,
) -> AppContainer:
    return assemble_container(
        settings=settings_without_mail,
        telegram_client=telegram_client,
        telegram_file_client=file_client,
        mail_service=None,
        close_resources=closed_flag.close,
    )


def photo_update(user_id: int = 321, chat_id: int = 101) -> dict[str, object]:
    return {
        "update_id": 2,
        "message": {
            "message_id": 20,
            "date": 1700000001,
            "chat": {"id": chat_id, "type": "private"},
            "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
            "photo": [
                {
                    "file_id": "small",
                    "file_unique_id": "small-unique",
                    "width": 90,
                    "height": 90,
                },
                {
                    "file_id": "large",
                    "file_unique_id": "large-unique",
                    "width": 1280,
                    "height": 1280,
                },
            ],
        },
    }


def text_update(text: str, chat_id: int = 99) -> dict[str, object]:
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "date": 1700000000,
            "chat": {"id": chat_id, "type": "private"},
            "from": {"id": 123, "is_bot": False, "first_name": "Test"},
            "text": text,
        },
    }


def callback_update(data: str, chat_id: int = 202) -> dict[str, object]:
    return {
        "update_id": 3,
        "callback_query": {
            "id": "cbq-1",
            "from": {"id": 555, "is_bot": False, "first_name": "Test"},
            "message": {
                "message_id": 31,
                "date": 1700000002,
                "chat": {"id": chat_id, "type": "private"},
                "text": "Photo Received!",
            },
            "data": data,
        },
    }
