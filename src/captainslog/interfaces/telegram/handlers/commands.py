"""Telegram command handlers."""

from telegram import Update
from telegram.ext import ContextTypes

from captainslog.config import SUMMARY_TRIGGER
from captainslog.core.types import LogStatus, format_timestamp
from captainslog.interfaces.telegram.handlers.utils import (
    authorized_handler,
    get_store,
)


def _format_command_help() -> str:
    lines = [
        "Every message you send is added to the encrypted captain's log.",
        "",
        "Commands:",
        "/help - Show this message",
        "/status - Log size and health",
        "",
        f'Send "{SUMMARY_TRIGGER}" to get an analysis of the whole log.',
    ]
    return "\n".join(lines)


@authorized_handler
async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    message = update.message
    if message is None:
        return
    await message.reply_text(_format_command_help())


@authorized_handler
async def cmd_status(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /status command."""
    message = update.message
    if message is None:
        return

    snapshot = await get_store(context).load()
    if snapshot.status is LogStatus.UNREADABLE:
        await message.reply_text(
            f"Log is present but unreadable: {type(snapshot.error).__name__}"
        )
        return
    if snapshot.status is LogStatus.ABSENT or not snapshot.records:
        await message.reply_text("Captain's log is empty.")
        return

    last = snapshot.records[-1]
    await message.reply_text(
        f"Entries: {len(snapshot.records)}\n"
        f"Last entry: {format_timestamp(last.timestamp)}"
    )
