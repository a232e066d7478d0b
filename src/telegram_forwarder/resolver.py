"""
Resource Resolver - Telegram Forwarder

Turns an opaque resource reference into an open byte stream and a
display name.

Supported references:
- content://<authority>/<path> → registered content provider
- file:///path and plain filesystem paths → opened directly
"""

import logging
import os
from datetime import datetime
from typing import BinaryIO, Dict, NamedTuple, Optional
from urllib.parse import unquote, urlparse

from telegram_forwarder.config import TIMESTAMP_NAME_FORMAT
from telegram_forwarder.models import ForwarderError

logger = logging.getLogger(__name__)


class ResourceNotFoundError(ForwarderError):
    """Raised when a resource reference cannot be opened for reading."""
    pass


class ResolvedResource(NamedTuple):
    """An opened resource. The caller owns and must close the stream."""

    stream: BinaryIO
    display_name: str


class DirectoryContentProvider:
    """Serves content:// references from files below a root directory."""

    def __init__(self, root: str):
        """
        Initialize provider.

        Args:
            root: Directory the provider's paths are relative to
        """
        self.root = os.path.realpath(root)

    def _locate(self, path: str) -> str:
        candidate = os.path.realpath(os.path.join(self.root, path.lstrip('/')))
        if os.path.commonpath([self.root, candidate]) != self.root:
            raise FileNotFoundError(f"Path escapes provider root: {path}")
        return candidate

    def open(self, path: str) -> BinaryIO:
        return open(self._locate(path), 'rb')

    def display_name(self, path: str) -> Optional[str]:
        """Return the file's basename, or None if there is no such file."""
        location = self._locate(path)
        if not os.path.isfile(location):
            return None
        return os.path.basename(location)


class ContentResolver:
    """
    Content Resolver - reference to stream

    Dispatches content:// references to providers registered by
    authority. Direct file references carry no metadata, so their display
    name is always synthesized from the current time.
    """

    def __init__(self, providers: Optional[Dict[str, DirectoryContentProvider]] = None):
        self._providers = dict(providers or {})

    def register_provider(self, authority: str, provider):
        """
        Register a content provider.

        Args:
            authority: Authority part of content:// references
            provider: Object with open(path) and display_name(path)
        """
        self._providers[authority] = provider
        logger.debug(f"Registered content provider for '{authority}'")

    def open_input_stream(self, reference: str) -> BinaryIO:
        """
        Open a reference for reading.

        Raises:
            ResourceNotFoundError: If the reference cannot be opened
        """
        parsed = urlparse(reference)

        try:
            if parsed.scheme == 'content':
                provider = self._providers.get(parsed.netloc)
                if provider is None:
                    raise FileNotFoundError(f"No provider for authority '{parsed.netloc}'")
                return provider.open(unquote(parsed.path))

            if parsed.scheme == 'file':
                return open(unquote(parsed.path), 'rb')

            # Windows drive letters parse as a one-letter scheme
            if not parsed.scheme or len(parsed.scheme) == 1:
                return open(reference, 'rb')

            raise FileNotFoundError(f"Unsupported scheme '{parsed.scheme}'")

        except OSError as e:
            logger.error(f"Cannot open {reference}: {e}")
            raise ResourceNotFoundError(f"Cannot open {reference}: {e}") from e

    def query_display_name(self, reference: str) -> Optional[str]:
        """
        Query the canonical display name of a reference.

        Returns:
            Display name, or None if the reference has no metadata
        """
        parsed = urlparse(reference)
        if parsed.scheme != 'content':
            return None

        provider = self._providers.get(parsed.netloc)
        if provider is None:
            return None

        return provider.display_name(unquote(parsed.path))

    def resolve(self, reference: str) -> ResolvedResource:
        """
        Open a reference and derive its display name.

        Args:
            reference: Resource reference string

        Returns:
            ResolvedResource with an open stream

        Raises:
            ResourceNotFoundError: If the reference cannot be opened
        """
        stream = self.open_input_stream(reference)

        display_name = None
        try:
            display_name = self.query_display_name(reference)
        except Exception as e:
            logger.debug(f"Display name query failed for {reference}: {e}")

        if not display_name:
            display_name = datetime.now().strftime(TIMESTAMP_NAME_FORMAT)

        logger.debug(f"Resolved {reference} as '{display_name}'")
        return ResolvedResource(stream, display_name)
