"""Utility functions for Telegram handlers."""

import asyncio
import functools
import logging
from typing import Any, Callable, Concatenate, Coroutine, ParamSpec, TypeVar

from telegram import Message, Update
from telegram.constants import ChatAction
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from captainslog.config import ALLOWED_CHAT_ID
from captainslog.core.store import MessageStore
from captainslog.core.summary import LogSummarizer

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

STORE_KEY = "store"
SUMMARIZER_KEY = "summarizer"


def get_store(context: ContextTypes.DEFAULT_TYPE) -> MessageStore:
    """Return the MessageStore registered on the application."""
    return context.bot_data[STORE_KEY]


def get_summarizer(context: ContextTypes.DEFAULT_TYPE) -> LogSummarizer:
    """Return the LogSummarizer registered on the application."""
    return context.bot_data[SUMMARIZER_KEY]


def authorized_handler(
    handler: Callable[
        Concatenate[Update, ContextTypes.DEFAULT_TYPE, P], Coroutine[Any, Any, R]
    ],
) -> Callable[
    Concatenate[Update, ContextTypes.DEFAULT_TYPE, P], Coroutine[Any, Any, R | None]
]:
    """
    Decorator that drops updates from chats other than ALLOWED_CHAT_ID.

    ALLOWED_CHAT_ID of 0 accepts every chat.
    """

    @functools.wraps(handler)
    async def wrapper(
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R | None:
        chat = update.effective_chat
        chat_id = chat.id if chat is not None else None
        if ALLOWED_CHAT_ID != 0 and chat_id != ALLOWED_CHAT_ID:
            logger.debug("Ignoring update from unauthorized chat %s", chat_id)
            return None
        return await handler(update, context, *args, **kwargs)

    return wrapper


async def _chat_action_loop(
    update: Update, context: ContextTypes.DEFAULT_TYPE, action: str, interval: float
) -> None:
    """Continuously send a chat action until cancelled."""
    chat = update.effective_chat
    if chat is None:
        return
    chat_id = chat.id
    while True:
        try:
            await context.bot.send_chat_action(chat_id=chat_id, action=action)
        except TelegramError as exc:
            logger.debug("Failed to send chat action: %s", exc)
        await asyncio.sleep(interval)


def start_chat_action(
    update: Update, context: ContextTypes.DEFAULT_TYPE, interval: float = 4.0
) -> asyncio.Task[None]:
    """Start sending 'typing' chat actions periodically."""
    return asyncio.create_task(
        _chat_action_loop(update, context, ChatAction.TYPING, interval)
    )


async def stop_chat_action(task: asyncio.Task[None] | None) -> None:
    """Stop a running chat action task."""
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


def split_message(text: str, chunk_size: int = 4000) -> list[str]:
    """Split text into chunks no longer than chunk_size, preferring line breaks."""
    chunks = []
    remaining = text
    while remaining:
        if len(remaining) <= chunk_size:
            chunks.append(remaining)
            break
        break_point = remaining.rfind("\n", 0, chunk_size)
        if break_point == -1:
            break_point = remaining.rfind(" ", 0, chunk_size)
        if break_point == -1:
            break_point = chunk_size
        chunks.append(remaining[:break_point])
        remaining = remaining[break_point:].lstrip()
    return chunks


async def send_long_message(
    update: Update, first_msg: Message, text: str, chunk_size: int = 4000
) -> None:
    """
    Edit first_msg to text, continuing in replies when it's too long.

    Args:
        update: Telegram update object
        first_msg: First message to edit
        text: Full text to send
        chunk_size: Maximum characters per message
    """
    if len(text) <= chunk_size:
        await first_msg.edit_text(text)
        return

    chunks = split_message(text, chunk_size)
    await first_msg.edit_text(chunks[0] + f"\n\n[1/{len(chunks)}]")
    message = update.message
    if message is None:
        return
    for i, chunk in enumerate(chunks[1:], 2):
        await message.reply_text(chunk + f"\n\n[{i}/{len(chunks)}]")
