"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from photo_relay.api.telegram_models import (
    TelegramCallbackQuery,
    TelegramMessage,
    TelegramUpdate,
)
from photo_relay.app_logging import configure_logging
from photo_relay.containers import AppContainer
from photo_relay.services.commands import START_COMMAND
from photo_relay.telegram_commands import telegram_commands

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}

_ROUTED_METHODS = ["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE", "HEAD"]

logger = logging.getLogger(__name__)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.api_route("/", methods=_ROUTED_METHODS)
    @app.api_route("/{path:path}", methods=_ROUTED_METHODS)
    async def webhook(request: Request) -> Response:
        """Single endpoint: status check, CORS preflight and Telegram updates."""
        state_container: AppContainer = request.app.state.container
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        if request.method == "GET":
            return JSONResponse(
                {
                    "status": "Bot is running!",
                    "users": state_container.photo_history.user_count,
                    "gmail": state_container.mail_enabled,
                },
                headers=CORS_HEADERS,
            )
        if request.method == "POST":
            try:
                await _process_request(state_container, request)
            except Exception as exc:
                logger.exception("Error handling Telegram update")
                return JSONResponse(
                    {"error": _redact(state_container, str(exc))},
                    status_code=500,
                    headers=CORS_HEADERS,
                )
            return JSONResponse({"ok": True}, headers=CORS_HEADERS)
        return JSONResponse(
            {"error": "Method not allowed"}, status_code=405, headers=CORS_HEADERS
        )

    return app


async def _process_request(state_container: AppContainer, request: Request) -> None:
    """Parse the body and dispatch it; malformed updates are ignored."""
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Ignoring request with a non-JSON body")
        return
    try:
        update = TelegramUpdate.model_validate(body)
    except ValidationError:
        logger.warning("Ignoring unrecognized update payload")
        return
    if update.message:
        await _handle_message(state_container, update.message)
    elif update.callback_query:
        await _handle_callback(state_container, update.callback_query)


async def _handle_message(
    state_container: AppContainer, message: TelegramMessage
) -> None:
    chat_id = message.chat.id
    if message.photo:
        photo = message.photo[-1]
        user_id = message.from_user.id if message.from_user else chat_id
        try:
            await state_container.photo_handler.handle(
                telegram_user_id=user_id, chat_id=chat_id, file_id=photo.file_id
            )
        except Exception as exc:
            logger.exception(
                "Failed to process Telegram photo",
                extra={"file_id": photo.file_id, "chat_id": chat_id},
            )
            await state_container.telegram_client.send_message(
                chat_id=chat_id,
                text=_format_error(
                    state_container, exc, "❌ Couldn't process that photo."
                ),
            )
        return
    if message.text == START_COMMAND:
        await state_container.start_command_handler.handle(chat_id=chat_id)


async def _handle_callback(
    state_container: AppContainer, callback: TelegramCallbackQuery
) -> None:
    if not callback.data:
        return
    chat_id = callback.message.chat.id if callback.message else None
    message_id = callback.message.message_id if callback.message else None
    try:
        await state_container.callback_handler.handle(
            callback_query_id=callback.id,
            data=callback.data,
            chat_id=chat_id,
            message_id=message_id,
        )
    except Exception as exc:
        logger.exception(
            "Failed to handle callback query",
            extra={"callback_data": callback.data, "chat_id": chat_id},
        )
        if chat_id is None:
            raise
        await state_container.telegram_client.send_message(
            chat_id=chat_id,
            text=_format_error(state_container, exc, "❌ Something went wrong."),
        )


def _format_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = _redact(state_container, f"{type(exc).__name__}: {exc}".strip())
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _redact(state_container: AppContainer, text: str) -> str:
    """Mask the bot token, which httpx errors carry inside the request URL."""
    token = state_container.settings.bot_token
    if not token:
        return text
    return text.replace(token, "<bot-token>")
