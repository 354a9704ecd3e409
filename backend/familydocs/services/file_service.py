"""
Family Docs Backend - File Storage Service
===========================================

What:  Writes uploaded bytes to the upload directory, resolves stored paths
       back to files, and deletes them.
How:   Async file I/O through aiofiles. Stored names are
       "<epoch-millis>-<original-name>"; records keep "uploads/<stored-name>",
       which is also the URL the bytes are served at.
Who:   DocumentService (uploads, fetch, delete) and ProfileService (pictures).

Directory Structure:
    uploads/
    ├── 1718031234567-passport.pdf
    ├── 1718031240012-birth-certificate.jpg
    └── 1718031299876-family.png

Path safety:
    - Only the base name of the client's filename is kept, so "../x" or
      "a/b/c.pdf" can never leave the upload directory.
    - resolve() only looks at the last path component of a stored path and
      re-anchors it under the upload directory.
"""

import logging
import os
import time
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional, Tuple

import aiofiles

from familydocs.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# Public prefix of stored paths; matches the /uploads static mount
URL_PREFIX = "uploads"

DEFAULT_FILENAME = "upload"


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Reduces a client-supplied filename to a safe base name.

    Handles both POSIX and Windows separators (browsers on Windows sometimes
    send full paths) and falls back to DEFAULT_FILENAME when nothing usable
    remains.
    """
    if not filename:
        return DEFAULT_FILENAME
    name = PureWindowsPath(PurePosixPath(filename).name).name.strip()
    if name in ("", ".", ".."):
        return DEFAULT_FILENAME
    return name


class FileService:
    """
    Manages the upload directory.

    Lifecycle of an uploaded file:
        1. Route reads the multipart part → FileService.store()
        2. Size check against settings.max_file_size
        3. A free "<millis>-<name>" is picked (timestamp bumped on collision)
        4. Bytes are written with exclusive-create, never overwriting
        5. "uploads/<stored-name>" is returned for the record
        6. On record deletion (or a failed insert) delete()/cleanup() remove it
    """

    def __init__(self, upload_dir: str, max_file_size: int):
        self.upload_dir = Path(upload_dir).resolve()
        self.max_file_size = max_file_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileService initialized with upload_dir=%s", self.upload_dir)

    # ── Naming ────────────────────────────────────────────────────────────

    def _generate_storage_name(self, filename: Optional[str]) -> str:
        """
        Picks "<epoch-millis>-<original-name>" that is not yet taken.

        Two uploads of the same name in the same millisecond get consecutive
        timestamps instead of clobbering each other.
        """
        safe_name = sanitize_filename(filename)
        stamp = int(time.time() * 1000)
        while (self.upload_dir / f"{stamp}-{safe_name}").exists():
            stamp += 1
        return f"{stamp}-{safe_name}"

    def resolve(self, stored_path: str) -> Path:
        """Maps "uploads/<name>" (or a bare "<name>") to its absolute path."""
        return self.upload_dir / PurePosixPath(stored_path.replace("\\", "/")).name

    @staticmethod
    def stored_path_for(stored_name: str) -> str:
        return f"{URL_PREFIX}/{stored_name}"

    # ── Validation ────────────────────────────────────────────────────────

    def validate_size(self, actual_size: int) -> None:
        """
        Rejects uploads larger than the configured maximum.

        Raises:
            ValidationError with a human-readable size limit message
        """
        if actual_size > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=(
                    f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds "
                    f"maximum of {max_mb:.0f}MB."
                ),
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    # ── Write / Read / Delete ─────────────────────────────────────────────

    async def store(self, filename: Optional[str], content: bytes) -> Tuple[str, str]:
        """
        Validates and writes uploaded bytes.

        Returns:
            Tuple of (stored_name, stored_path) where stored_path is
            "uploads/<stored_name>".

        Raises:
            ValidationError if the file is too large.
            FileStorageError if the write fails.
        """
        self.validate_size(len(content))
        stored_name = self._generate_storage_name(filename)
        absolute_path = self.upload_dir / stored_name

        try:
            # "xb": exclusive create, fails instead of overwriting a racing upload
            async with aiofiles.open(absolute_path, "xb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file",
                context={"path": str(absolute_path), "detail": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", stored_name, len(content))
        return stored_name, self.stored_path_for(stored_name)

    def open_path(self, stored_path: str, message: str) -> Path:
        """
        Returns the absolute path for reading, failing if the bytes are gone.

        Raises:
            FileStorageError(message) if the file does not exist.
        """
        path = self.resolve(stored_path)
        if not path.is_file():
            logger.error("Stored file missing on disk: %s", path)
            raise FileStorageError(
                message=message,
                context={"path": stored_path, "detail": f"File not found: {stored_path}"},
            )
        return path

    async def delete(self, stored_path: str) -> bool:
        """
        Deletes stored bytes.

        Returns:
            True if a file was removed, False if it was already gone.

        Raises:
            FileStorageError for any other OS failure (permissions, I/O).
        """
        path = self.resolve(stored_path)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("Delete: file already gone: %s", path.name)
            return False
        except OSError as e:
            logger.error("Failed to delete file %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to delete stored file",
                context={"path": stored_path, "detail": str(e)},
            )
        logger.info("Deleted file: %s", path.name)
        return True

    async def cleanup(self, stored_path: str) -> None:
        """
        Best-effort removal of bytes whose record was never written.

        Never raises: the caller is already reporting the original failure.
        """
        try:
            await self.delete(stored_path)
        except FileStorageError as e:
            logger.warning("Failed to clean up file %s: %s", stored_path, e.detail)
