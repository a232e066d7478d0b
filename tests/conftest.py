"""
Pytest configuration for Telegram Forwarder tests.
"""

import os
import sys

# Set test environment variables BEFORE any imports
os.environ['TELEGRAM_API_BASE_URL'] = 'https://api.telegram.org'
os.environ['LOG_LEVEL'] = 'DEBUG'
os.environ.pop('TELEGRAM_BOT_TOKEN', None)
os.environ.pop('TELEGRAM_CHAT_ID', None)
os.environ.pop('FORWARDER_CACHE_DIR', None)

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import httpx
import pytest

from telegram_forwarder.resolver import ContentResolver, DirectoryContentProvider
from telegram_forwarder.stager import Stager
from telegram_forwarder.uploader import TelegramUploadClient


class StubTelegram:
    """Records sendDocument requests and answers with a fixed status."""

    def __init__(self, status_code: int = 200, body=None, error: Exception = None):
        self.status_code = status_code
        self.body = body if body is not None else {'ok': status_code < 400}
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def content_dir(tmp_path):
    """Directory served as content://valid/."""
    root = tmp_path / 'content'
    root.mkdir()
    (root / 'doc.pdf').write_bytes(b'%PDF-1.4 test document')
    (root / 'README').write_bytes(b'no extension here')
    return root


@pytest.fixture
def resolver(content_dir):
    return ContentResolver({'valid': DirectoryContentProvider(str(content_dir))})


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / 'cache'


@pytest.fixture
def stager(cache_dir):
    return Stager(str(cache_dir))


@pytest.fixture
def stub_telegram():
    return StubTelegram()


@pytest.fixture
def make_uploader():
    """Build upload clients backed by a stub transport."""
    clients = []

    def factory(handler):
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        return TelegramUploadClient(http_client=http_client)

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def uploader(make_uploader, stub_telegram):
    return make_uploader(stub_telegram)
