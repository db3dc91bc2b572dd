"""Command line interface for the captain's log."""
