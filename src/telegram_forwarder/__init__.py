"""
Telegram Forwarder

Forwards a locally addressable file to a Telegram chat with the Bot API
sendDocument method, off the caller's thread.

Components:
- ContentResolver: Resource reference → stream + display name
- Stager: Stream → uniquely named scratch file
- TelegramUploadClient: Multipart upload with bounded timeouts
- ForwardCoordinator: Runs one request and yields one UploadOutcome
- TelegramForwarderPlugin: forwardToTelegram command adapter
"""

from telegram_forwarder.channel import FutureResult, MethodCall, MethodChannel, MethodReply, MethodResult
from telegram_forwarder.models import (
    FailureKind,
    ForwarderError,
    ForwardRequest,
    OutcomeKind,
    PipelineState,
    StagedFile,
    UploadOutcome
)
from telegram_forwarder.pipeline import ForwardCoordinator
from telegram_forwarder.plugin import TelegramForwarderPlugin
from telegram_forwarder.resolver import (
    ContentResolver,
    DirectoryContentProvider,
    ResolvedResource,
    ResourceNotFoundError
)
from telegram_forwarder.stager import Stager, StagingError
from telegram_forwarder.uploader import (
    NetworkError,
    RemoteRejectionError,
    TelegramUploadClient,
    UploadError,
    UploadTimeouts
)

__all__ = [
    'ContentResolver',
    'DirectoryContentProvider',
    'FailureKind',
    'ForwardCoordinator',
    'ForwardRequest',
    'ForwarderError',
    'FutureResult',
    'MethodCall',
    'MethodChannel',
    'MethodReply',
    'MethodResult',
    'NetworkError',
    'OutcomeKind',
    'PipelineState',
    'RemoteRejectionError',
    'ResolvedResource',
    'ResourceNotFoundError',
    'StagedFile',
    'Stager',
    'StagingError',
    'TelegramForwarderPlugin',
    'TelegramUploadClient',
    'UploadError',
    'UploadOutcome',
    'UploadTimeouts',
]
