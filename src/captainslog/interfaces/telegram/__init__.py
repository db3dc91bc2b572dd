"""Telegram interface for the captain's log."""
