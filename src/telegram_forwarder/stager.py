"""
Stager - Telegram Forwarder

Copies a resolved resource into a uniquely named scratch file so it can
be re-opened for upload.
"""

import logging
import os
import shutil
import tempfile
import threading
import time
from typing import BinaryIO, Optional

from telegram_forwarder.config import CACHE_DIR, CACHE_DIR_PREFIX
from telegram_forwarder.models import ForwarderError, StagedFile

logger = logging.getLogger(__name__)

_process_cache_dir = None
_process_cache_dir_lock = threading.Lock()


class StagingError(ForwarderError):
    """Raised when a resource cannot be materialized as a local file."""
    pass


def extension_of(display_name: str) -> str:
    """
    Get the text after the last '.' of a display name.

    Args:
        display_name: Name reported for the resource

    Returns:
        Extension without the dot, or '' if the name has no '.'
    """
    if '.' not in display_name:
        return ''
    return display_name.rsplit('.', 1)[1]


def process_cache_dir() -> str:
    """
    Get this process's private scratch directory, creating it on first use.

    The directory is made by mkdtemp, so only the current user can access it.
    """
    global _process_cache_dir

    with _process_cache_dir_lock:
        if _process_cache_dir is None:
            _process_cache_dir = tempfile.mkdtemp(prefix=CACHE_DIR_PREFIX)
            logger.debug(f"Created scratch directory {_process_cache_dir}")
        return _process_cache_dir


class Stager:
    """Write resource streams to the scratch directory."""

    def __init__(self, cache_dir: Optional[str] = None):
        """
        Initialize stager.

        Args:
            cache_dir: Scratch directory (defaults to FORWARDER_CACHE_DIR,
                or a private per-process directory when that is unset)
        """
        self.cache_dir = os.path.abspath(cache_dir or CACHE_DIR or process_cache_dir())

    def _create_file(self, display_name: str):
        os.makedirs(self.cache_dir, mode=0o700, exist_ok=True)

        extension = extension_of(display_name)
        return tempfile.mkstemp(
            prefix=f"temp_{int(time.time() * 1000)}_",
            suffix=f".{extension}" if extension else '',
            dir=self.cache_dir,
        )

    def stage(self, stream: BinaryIO, display_name: str) -> StagedFile:
        """
        Copy a stream into a new scratch file.

        The stream is closed whether or not the copy succeeds.

        Args:
            stream: Open binary stream of the resource
            display_name: Display name the extension is taken from

        Returns:
            StagedFile describing the new file

        Raises:
            StagingError: If the file cannot be created or written
        """
        local_path = None
        with stream:
            try:
                fd, local_path = self._create_file(display_name)
                with os.fdopen(fd, 'wb') as output:
                    shutil.copyfileobj(stream, output)
                size_bytes = os.path.getsize(local_path)
            except Exception as e:
                logger.error(f"Error creating file: {e}")
                if local_path:
                    self.remove_path(local_path)
                raise StagingError(str(e) or type(e).__name__) from e

        logger.info(f"Staged '{display_name}' → {local_path} ({size_bytes} bytes)")
        return StagedFile(local_path, display_name, size_bytes)

    @staticmethod
    def remove_path(path: str) -> bool:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not delete staged file {path}: {e}")
            return False
        return True

    def remove(self, staged: StagedFile) -> bool:
        """
        Delete a staged file (best effort).

        Returns:
            True if the file no longer exists
        """
        removed = self.remove_path(staged.local_path)
        if removed:
            logger.debug(f"Deleted staged file {staged.local_path}")
        return removed
