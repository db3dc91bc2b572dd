"""Telegram message and command handlers."""

from captainslog.interfaces.telegram.handlers.commands import cmd_help, cmd_status
from captainslog.interfaces.telegram.handlers.messages import handle_message

__all__ = [
    "cmd_help",
    "cmd_status",
    "handle_message",
]
