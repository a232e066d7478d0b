"""
Configuration - Telegram Forwarder

Loads environment variables and forwarder settings.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Telegram Bot API
TELEGRAM_API_BASE_URL = os.getenv('TELEGRAM_API_BASE_URL', 'https://api.telegram.org')

# Defaults for the command line only, the plugin always takes them per request
BOT_TOKEN = os.getenv('TELEGRAM_BOT_TOKEN')
CHAT_ID = os.getenv('TELEGRAM_CHAT_ID')

# Scratch directory for staged files; unset means a private per-process directory
CACHE_DIR = os.getenv('FORWARDER_CACHE_DIR')
CACHE_DIR_PREFIX = 'telegram_forwarder_'

# Upload timeouts (seconds)
CONNECT_TIMEOUT = float(os.getenv('FORWARDER_CONNECT_TIMEOUT', '30'))
WRITE_TIMEOUT = float(os.getenv('FORWARDER_WRITE_TIMEOUT', '30'))
READ_TIMEOUT = float(os.getenv('FORWARDER_READ_TIMEOUT', '30'))

# Display name used when a resource has no metadata
TIMESTAMP_NAME_FORMAT = '%Y%m%d_%H%M%S'

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
