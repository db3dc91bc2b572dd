"""Captain's log - a Telegram-fed personal log encrypted at rest."""

__version__ = "0.1.0"
