"""
Models - Telegram Forwarder

Request-scoped value types passed between the pipeline stages.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class ForwarderError(Exception):
    """Base exception for forwarding errors."""
    pass


class PipelineState(Enum):
    """Lifecycle of a single forward request."""

    PENDING = 'pending'
    RESOLVING = 'resolving'
    STAGING = 'staging'
    UPLOADING = 'uploading'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


class OutcomeKind(Enum):
    """Terminal outcome variants, valued by their wire error code."""

    SUCCESS = 'SUCCESS'
    FILE_NOT_FOUND = 'FILE_NOT_FOUND'
    UPLOAD_FAILED = 'UPLOAD_FAILED'


class FailureKind(Enum):
    """What went wrong inside a failed pipeline run."""

    RESOURCE_NOT_FOUND = 'resource_not_found'
    STAGING = 'staging'
    NETWORK = 'network'
    REMOTE_REJECTION = 'remote_rejection'
    INTERNAL = 'internal'


@dataclass(frozen=True)
class ForwardRequest:
    """A file reference plus the bot credential and chat to deliver it to."""

    resource_reference: str
    credential: str = field(repr=False)
    destination_id: str

    def __post_init__(self):
        missing = [
            name for name in ('resource_reference', 'credential', 'destination_id')
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")


@dataclass(frozen=True)
class StagedFile:
    """A resolved resource copied into the scratch directory."""

    local_path: str
    display_name: str
    size_bytes: int

    @property
    def name(self) -> str:
        """File name sent to Telegram."""
        return os.path.basename(self.local_path)

    @property
    def extension(self) -> str:
        """Extension without the leading dot, empty when there is none."""
        return os.path.splitext(self.local_path)[1].lstrip('.')


@dataclass(frozen=True)
class UploadOutcome:
    """
    Terminal result of one forward request.

    Exactly one of Success, FileNotFound or UploadFailed(reason). The
    failure kind and status code keep staging, network and remote
    failures apart even though they share the UPLOAD_FAILED code.
    """

    kind: OutcomeKind
    reason: Optional[str] = None
    failure: Optional[FailureKind] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls) -> 'UploadOutcome':
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def file_not_found(cls) -> 'UploadOutcome':
        return cls(
            OutcomeKind.FILE_NOT_FOUND,
            reason='File not found',
            failure=FailureKind.RESOURCE_NOT_FOUND,
        )

    @classmethod
    def upload_failed(cls, reason: str, failure: FailureKind = FailureKind.INTERNAL,
                      status_code: Optional[int] = None) -> 'UploadOutcome':
        return cls(
            OutcomeKind.UPLOAD_FAILED,
            reason=reason,
            failure=failure,
            status_code=status_code,
        )

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def error_code(self) -> Optional[str]:
        """Wire error code, or None for a success."""
        if self.ok:
            return None
        return self.kind.value

    def details(self) -> Optional[Dict]:
        """Diagnostic details attached to an error reply."""
        if self.failure is None:
            return None

        details = {'failure': self.failure.value}
        if self.status_code is not None:
            details['status_code'] = self.status_code
        return details
