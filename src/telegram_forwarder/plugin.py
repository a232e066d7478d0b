"""
Telegram Forwarder Plugin - Command Adapter

Handles `forwardToTelegram` calls from the host: validates the
arguments and starts one ForwardCoordinator per call.
"""

import logging
import threading
from typing import Optional

from telegram_forwarder.channel import MethodCall, MethodChannel, MethodResult
from telegram_forwarder.models import ForwardRequest, UploadOutcome
from telegram_forwarder.pipeline import ForwardCoordinator
from telegram_forwarder.resolver import ContentResolver
from telegram_forwarder.stager import Stager
from telegram_forwarder.uploader import TelegramUploadClient

logger = logging.getLogger(__name__)


class TelegramForwarderPlugin:
    """Command adapter for the telegram_forwarder channel."""

    CHANNEL_NAME = 'telegram_forwarder'
    FORWARD_METHOD = 'forwardToTelegram'

    def __init__(self, resolver: Optional[ContentResolver] = None, stager: Optional[Stager] = None,
                 uploader: Optional[TelegramUploadClient] = None):
        """
        Initialize plugin.

        Args:
            resolver: Content resolver (empty resolver if None)
            stager: Stager (default scratch directory if None)
            uploader: Shared upload client (created on attach if None)
        """
        self.resolver = resolver or ContentResolver()
        self.stager = stager or Stager()
        self.uploader = uploader
        self.channel: Optional[MethodChannel] = None
        self._owns_uploader = False
        self._lock = threading.Lock()

    def _shared_uploader(self) -> TelegramUploadClient:
        with self._lock:
            if self.uploader is None:
                self.uploader = TelegramUploadClient()
                self._owns_uploader = True
            return self.uploader

    def attach(self, channel: MethodChannel):
        """Register on the host channel and prepare the shared upload client."""
        self._shared_uploader()

        self.channel = channel
        channel.set_method_call_handler(self.on_method_call)
        logger.info(f"Attached to channel '{channel.name}'")

    def detach(self):
        """Unregister from the channel and close an upload client we created."""
        if self.channel is not None:
            self.channel.set_method_call_handler(None)
            logger.info(f"Detached from channel '{self.channel.name}'")
            self.channel = None

        with self._lock:
            if self._owns_uploader and self.uploader is not None:
                self.uploader.close()
                self.uploader = None
                self._owns_uploader = False

    def on_method_call(self, call: MethodCall, result: MethodResult):
        if call.method == self.FORWARD_METHOD:
            self.forward_to_telegram(call, result)
        else:
            result.not_implemented()

    def forward_to_telegram(self, call: MethodCall, result: MethodResult) -> Optional[ForwardCoordinator]:
        """
        Start forwarding a file to a chat.

        Args:
            call: Call carrying filePath, botToken and chatId
            result: Handle receiving exactly one reply

        Returns:
            The started coordinator, or None if the call was rejected
        """
        file_path = call.argument('filePath')
        bot_token = call.argument('botToken')
        chat_id = call.argument('chatId')

        if file_path in (None, '') or bot_token in (None, '') or chat_id in (None, ''):
            logger.warning("forwardToTelegram called with missing parameters")
            result.error('INVALID_ARGUMENTS', 'Missing required parameters')
            return None

        request = ForwardRequest(str(file_path), str(bot_token), str(chat_id))
        coordinator = ForwardCoordinator(request, self.resolver, self.stager, self._shared_uploader())

        future = coordinator.start()
        future.add_done_callback(lambda done: self._deliver(done.result(), result))
        return coordinator

    @staticmethod
    def _deliver(outcome: UploadOutcome, result: MethodResult):
        if outcome.ok:
            result.success(True)
        elif outcome.error_code == 'FILE_NOT_FOUND':
            result.error('FILE_NOT_FOUND', 'File not found')
        else:
            result.error('UPLOAD_FAILED', outcome.reason, outcome.details())
