"""Unified entry point for the captain's log.

This module starts one of the interfaces:
- Telegram bot (default)
- CLI
"""

import argparse


def main(argv: list[str] | None = None):
    """Main entry point with interface selection."""
    parser = argparse.ArgumentParser(
        description="Captain's log - an encrypted personal log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Interfaces:
  telegram    Start the Telegram bot (default)
  cli         Read or write the log from the terminal

Examples:
  python -m captainslog                     # Start Telegram bot
  python -m captainslog cli show            # Print the log
  python -m captainslog cli append "Hello"  # Add an entry
""",
    )

    parser.add_argument(
        "interface",
        nargs="?",
        default="telegram",
        choices=["telegram", "cli"],
        help="Which interface to start (default: telegram)",
    )

    args, rest = parser.parse_known_args(argv)

    if args.interface == "telegram":
        if rest:
            parser.error(f"unrecognized arguments: {' '.join(rest)}")
        from captainslog.interfaces.telegram.bot import run_telegram_bot

        run_telegram_bot()

    elif args.interface == "cli":
        from captainslog.interfaces.cli.app import run_cli

        run_cli(rest)


if __name__ == "__main__":
    main()
