"""
Pipeline Coordinator - Telegram Forwarder

Runs one forward request on a background thread:
Resolve → Stage → Upload → delete staged file.

Flow:
1. Open the resource reference (FileNotFound if it cannot be opened)
2. Copy it into a scratch file
3. Upload the scratch file to the chat
4. Delete the scratch file after a successful upload
5. Resolve the request's future with exactly one UploadOutcome
"""

import logging
import threading
from concurrent.futures import Future
from typing import Optional

from telegram_forwarder.models import (
    FailureKind,
    ForwardRequest,
    PipelineState,
    StagedFile,
    UploadOutcome
)
from telegram_forwarder.resolver import ContentResolver, ResourceNotFoundError
from telegram_forwarder.stager import Stager, StagingError
from telegram_forwarder.uploader import (
    NetworkError,
    RemoteRejectionError,
    TelegramUploadClient
)

logger = logging.getLogger(__name__)


class ForwardCoordinator:
    """
    Drive a single ForwardRequest to its terminal outcome.

    One coordinator per request. The resolver, stager and upload client
    are shared and stateless; the staged file belongs to this coordinator
    alone.
    """

    def __init__(self, request: ForwardRequest, resolver: ContentResolver,
                 stager: Stager, uploader: TelegramUploadClient):
        """
        Initialize coordinator.

        Args:
            request: Validated forward request
            resolver: Content resolver for the resource reference
            stager: Stager writing to the scratch directory
            uploader: Shared upload client
        """
        self.request = request
        self.resolver = resolver
        self.stager = stager
        self.uploader = uploader

        self.state = PipelineState.PENDING
        self.staged: Optional[StagedFile] = None
        self._future: Optional[Future] = None

    def _advance(self, state: PipelineState):
        logger.debug(f"{self.request.resource_reference}: {self.state.value} → {state.value}")
        self.state = state

    def start(self) -> Future:
        """
        Run the pipeline on a new background thread.

        Returns:
            Future resolved once with the UploadOutcome

        Raises:
            RuntimeError: If the coordinator was already started
        """
        if self._future is not None:
            raise RuntimeError("Coordinator already started")

        self._future = Future()
        self._future.set_running_or_notify_cancel()

        thread = threading.Thread(
            target=self._run_into_future,
            name=f"forward-{id(self):x}",
            daemon=True,
        )
        thread.start()
        return self._future

    def _run_into_future(self):
        self._future.set_result(self.run())

    def run(self) -> UploadOutcome:
        """
        Execute the pipeline on the calling thread.

        Never raises; every failure becomes an UploadOutcome.
        """
        try:
            outcome = self._execute()
        except ResourceNotFoundError:
            outcome = UploadOutcome.file_not_found()
        except StagingError as e:
            outcome = UploadOutcome.upload_failed(str(e), FailureKind.STAGING)
        except RemoteRejectionError as e:
            outcome = UploadOutcome.upload_failed(
                str(e), FailureKind.REMOTE_REJECTION, status_code=e.status_code
            )
        except NetworkError as e:
            outcome = UploadOutcome.upload_failed(str(e), FailureKind.NETWORK)
        except Exception as e:
            logger.exception(f"Unexpected error forwarding {self.request.resource_reference}")
            outcome = UploadOutcome.upload_failed(str(e) or type(e).__name__)

        if outcome.ok:
            self._advance(PipelineState.SUCCEEDED)
            logger.info(f"Forwarded {self.request.resource_reference} to chat {self.request.destination_id}")
        else:
            self._advance(PipelineState.FAILED)
            logger.error(f"Forward of {self.request.resource_reference} failed: "
                         f"{outcome.error_code} {outcome.reason}")
            if self.staged is not None:
                logger.warning(f"Staged file left behind: {self.staged.local_path}")

        return outcome

    def _execute(self) -> UploadOutcome:
        self._advance(PipelineState.RESOLVING)
        resource = self.resolver.resolve(self.request.resource_reference)

        self._advance(PipelineState.STAGING)
        self.staged = self.stager.stage(resource.stream, resource.display_name)

        self._advance(PipelineState.UPLOADING)
        self.uploader.send_document(
            self.staged,
            self.request.credential,
            self.request.destination_id,
        )

        # Cleanup is best effort and cannot turn a success into a failure
        if self.stager.remove(self.staged):
            self.staged = None

        return UploadOutcome.success()
