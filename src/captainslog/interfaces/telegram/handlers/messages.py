"""Message handlers: log every message, summarize on request."""

import logging

from telegram import Message, Update
from telegram.ext import ContextTypes

from captainslog.config import SUMMARY_TRIGGER
from captainslog.core.store import LogUnreadableError
from captainslog.core.summary import SummaryKind, summarize_log
from captainslog.core.types import NO_TEXT_SENTINEL
from captainslog.interfaces.telegram.handlers.utils import (
    authorized_handler,
    get_store,
    get_summarizer,
    send_long_message,
    start_chat_action,
    stop_chat_action,
)

logger = logging.getLogger(__name__)

_USER_ERROR = "Error processing your request. Please try again later."
_UNREADABLE = (
    "The captain's log exists but can't be decrypted. "
    "Nothing was changed; check ENCRYPTION_KEY."
)


def is_summary_request(text: str | None) -> bool:
    """Check whether a message asks for the log summary."""
    return bool(text) and SUMMARY_TRIGGER in text.lower()


async def _send_safe_error(msg: Message, error: Exception) -> None:
    """Log the error and show a generic message to the user."""
    logger.error("Handler error: %s", error, exc_info=True)
    try:
        await msg.reply_text(_USER_ERROR)
    except Exception as exc:
        logger.debug("Failed to send error message: %s", exc)


async def summarize_captains_log(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Reply with an analysis of the log, or the raw log if analysis fails."""
    message = update.message
    if message is None:
        return

    typing_task = start_chat_action(update, context)
    try:
        processing_msg = await message.reply_text("Analyzing the log...")
        summary = await summarize_log(get_store(context), get_summarizer(context))

        if summary.kind is SummaryKind.EMPTY:
            await processing_msg.edit_text("Captain's log is empty.")
        elif summary.kind is SummaryKind.UNREADABLE:
            await processing_msg.edit_text(_UNREADABLE)
        elif summary.kind is SummaryKind.ANALYSIS:
            await send_long_message(
                update, processing_msg, f"Psychological Analysis\n\n{summary.text}"
            )
        else:
            await send_long_message(
                update,
                processing_msg,
                f"Couldn't generate analysis. Here's the raw log:\n\n{summary.text}",
            )
    except Exception as e:
        await _send_safe_error(message, e)
    finally:
        await stop_chat_action(typing_task)


@authorized_handler
async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Append the message to the log and echo it back."""
    user = update.effective_user
    message = update.message
    if message is None or (user is not None and user.is_bot is True):
        return

    text = message.text
    logger.debug("Message received from chat %s", message.chat_id)

    if is_summary_request(text):
        await summarize_captains_log(update, context)
        return

    try:
        await get_store(context).append(int(message.date.timestamp()), text)
    except LogUnreadableError:
        await message.reply_text(_UNREADABLE)
        return
    except Exception as e:
        await _send_safe_error(message, e)
        return

    await message.reply_text(f"Echo: {text or NO_TEXT_SENTINEL}")
