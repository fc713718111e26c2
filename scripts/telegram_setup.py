#!/usr/bin/env python3
"""
Telegram bot setup helper.

Checks the bot token, prints the bot's details and registers the webhook the
API serves at /telegram/webhook. Optionally sends a test message to a chat.

Usage:
    python scripts/telegram_setup.py --webhook-url https://kost.example.com/telegram/webhook
    python scripts/telegram_setup.py --test-chat 123456789
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "api"))

from kostnotify.channels.telegram import TelegramAdapter, TelegramError  # noqa: E402
from kostnotify.config import settings  # noqa: E402
from kostnotify.notifications.messages import t  # noqa: E402


async def run(args: argparse.Namespace) -> int:
    telegram = TelegramAdapter(
        settings.telegram_bot_token,
        api_base=settings.telegram_api_base,
        timeout=settings.telegram_timeout,
    )
    if not telegram.configured:
        print("ERROR: TELEGRAM_BOT_TOKEN is not set.")
        print()
        print("To create a bot:")
        print("  1. Talk to @BotFather on Telegram and send /newbot")
        print("  2. Copy the token into TELEGRAM_BOT_TOKEN in your .env")
        return 1

    try:
        bot = await telegram.get_me()
    except TelegramError as exc:
        print(f"ERROR: token check failed: {exc}")
        return 1

    print("Bot information:")
    print(f"  id:       {bot.get('id')}")
    print(f"  name:     {bot.get('first_name')}")
    print(f"  username: @{bot.get('username')}")

    if args.webhook_url:
        secret = args.secret or settings.telegram_webhook_secret or None
        try:
            await telegram.set_webhook(args.webhook_url, secret_token=secret)
        except TelegramError as exc:
            print(f"ERROR: webhook registration failed: {exc}")
            return 1
        print(f"\nWebhook registered: {args.webhook_url}")
        if not secret:
            print("WARNING: no secret token set; anyone can post updates to the webhook.")

    if args.test_chat:
        text = args.message or t(settings.default_locale, "test_message", app=settings.app_name)
        result = await telegram.send_message(args.test_chat, text)
        if not result.success:
            print(f"ERROR: test message failed: {result.error}")
            return 1
        print(f"\nTest message sent to {args.test_chat}")

    return 0


def main():
    parser = argparse.ArgumentParser(description="Set up the Kost Manager Telegram bot.")
    parser.add_argument("--webhook-url", help="public URL of the /telegram/webhook endpoint")
    parser.add_argument("--secret", help="webhook secret token (defaults to TELEGRAM_WEBHOOK_SECRET)")
    parser.add_argument("--test-chat", help="chat id to send a test message to")
    parser.add_argument("--message", help="custom test message text")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
