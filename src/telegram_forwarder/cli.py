"""
Command Line - Telegram Forwarder

Forward one file to a Telegram chat through the plugin's channel.

Usage:
    telegram-forwarder FILE [--token TOKEN] [--chat-id CHAT_ID] [--content-root AUTHORITY=DIR]
"""

import argparse
import logging
import sys

from telegram_forwarder.channel import MethodChannel
from telegram_forwarder.config import BOT_TOKEN, CACHE_DIR, CHAT_ID, LOG_LEVEL
from telegram_forwarder.plugin import TelegramForwarderPlugin
from telegram_forwarder.resolver import ContentResolver, DirectoryContentProvider
from telegram_forwarder.stager import Stager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Forward a file to a Telegram chat")
    parser.add_argument('file', help="File path, file:// or content:// reference")
    parser.add_argument('--token', default=BOT_TOKEN, help="Bot token (default: TELEGRAM_BOT_TOKEN)")
    parser.add_argument('--chat-id', default=CHAT_ID, help="Target chat ID (default: TELEGRAM_CHAT_ID)")
    parser.add_argument('--cache-dir', default=CACHE_DIR, help="Scratch directory for staged files (default: private per-process directory)")
    parser.add_argument(
        '--content-root',
        action='append',
        default=[],
        metavar='AUTHORITY=DIR',
        help="Serve content://AUTHORITY/... from DIR (repeatable)"
    )
    return parser


def build_resolver(content_roots) -> ContentResolver:
    resolver = ContentResolver()
    for spec in content_roots:
        authority, sep, root = spec.partition('=')
        if not sep or not authority or not root:
            raise ValueError(f"Invalid --content-root '{spec}', expected AUTHORITY=DIR")
        resolver.register_provider(authority, DirectoryContentProvider(root))
    return resolver


def main(argv=None) -> int:
    """Run the forwarder CLI. Returns the process exit code."""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    )

    # httpx logs request URLs, which carry the bot token
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        resolver = build_resolver(args.content_root)
    except ValueError as e:
        parser.error(str(e))

    channel = MethodChannel(TelegramForwarderPlugin.CHANNEL_NAME)
    plugin = TelegramForwarderPlugin(resolver=resolver, stager=Stager(args.cache_dir))
    plugin.attach(channel)

    try:
        reply = channel.invoke(TelegramForwarderPlugin.FORWARD_METHOD, {
            'filePath': args.file,
            'botToken': args.token,
            'chatId': args.chat_id,
        }).result()
    finally:
        plugin.detach()

    if reply.ok:
        print(f"[OK] Sent {args.file} to chat {args.chat_id}")
        return 0

    print(f"[ERROR] {reply.error_code}: {reply.error_message}")
    return 1


if __name__ == '__main__':
    sys.exit(main())
