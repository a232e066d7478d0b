#!/usr/bin/env python3
"""
Run Telegram Forwarder

Usage:
    python run.py FILE [--token TOKEN] [--chat-id CHAT_ID]
"""

import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from telegram_forwarder.cli import main

if __name__ == '__main__':
    sys.exit(main())
