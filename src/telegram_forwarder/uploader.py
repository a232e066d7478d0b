"""
Upload Client - Telegram Forwarder

Sends a staged file to a chat with the Bot API sendDocument method.
One attempt per call, no retries.
"""

import logging
from typing import NamedTuple, Optional

import httpx

from telegram_forwarder.config import (
    CONNECT_TIMEOUT,
    READ_TIMEOUT,
    TELEGRAM_API_BASE_URL,
    WRITE_TIMEOUT
)
from telegram_forwarder.models import ForwarderError, StagedFile
from telegram_forwarder.stager import StagingError

logger = logging.getLogger(__name__)


class UploadError(ForwarderError):
    """Exception raised when upload fails."""
    pass


class NetworkError(UploadError):
    """Connection, timeout or transport failure."""
    pass


class RemoteRejectionError(UploadError):
    """Telegram answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = ''):
        super().__init__(f"Telegram API error: {status_code}")
        self.status_code = status_code
        self.body = body


class UploadTimeouts(NamedTuple):
    """Independent per-phase timeouts in seconds."""

    connect: float = CONNECT_TIMEOUT
    write: float = WRITE_TIMEOUT
    read: float = READ_TIMEOUT

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect,
            write=self.write,
            read=self.read,
            pool=self.connect,
        )


class TelegramUploadClient:
    """
    Bot API document uploader.

    Wraps one httpx.Client, which is thread-safe and holds no per-request
    state, so a single instance serves every concurrent pipeline.
    """

    CONTENT_TYPE = 'application/octet-stream'

    def __init__(self, http_client: Optional[httpx.Client] = None,
                 timeouts: Optional[UploadTimeouts] = None,
                 api_base_url: Optional[str] = None):
        """
        Initialize upload client.

        Args:
            http_client: Optional httpx.Client (creates one if None)
            timeouts: Connect/write/read timeouts (30s each by default)
            api_base_url: Bot API base URL
        """
        self.timeouts = timeouts or UploadTimeouts()
        self.api_base_url = (api_base_url or TELEGRAM_API_BASE_URL).rstrip('/')
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=self.timeouts.to_httpx())

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.http_client.close()

    def build_url(self, credential: str) -> str:
        return f"{self.api_base_url}/bot{credential}/sendDocument"

    def send_document(self, staged: StagedFile, credential: str, destination_id: str) -> int:
        """
        Upload a staged file as a document.

        Args:
            staged: File to upload
            credential: Bot token
            destination_id: Target chat ID

        Returns:
            HTTP status code of the successful response

        Raises:
            StagingError: If the staged file cannot be read
            NetworkError: On connection, timeout or transport errors
            RemoteRejectionError: If Telegram returns a non-2xx status
        """
        logger.info(f"Uploading {staged.name} ({staged.size_bytes} bytes) to chat {destination_id}")

        try:
            document = open(staged.local_path, 'rb')
        except OSError as e:
            raise StagingError(f"Cannot read staged file: {e}") from e

        with document:
            try:
                response = self.http_client.post(
                    self.build_url(credential),
                    data={'chat_id': destination_id},
                    files={'document': (staged.name, document, self.CONTENT_TYPE)},
                    timeout=self.timeouts.to_httpx(),
                )
            except httpx.HTTPError as e:
                reason = str(e) or type(e).__name__
                logger.error(f"Upload of {staged.name} failed: {reason}")
                raise NetworkError(reason) from e

        if not response.is_success:
            body = response.text
            logger.error(f"Upload failed: {body}")
            raise RemoteRejectionError(response.status_code, body)

        logger.info(f"Upload complete: {staged.name} → chat {destination_id}")
        return response.status_code
