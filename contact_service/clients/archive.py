"""File archive client.

Stores a copy of every outbound message as its own .eml file, written before
the message is relayed.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path

from contact_service.core.exceptions import ArchiveError, ContactConfigError
from contact_service.core.logger import get_logger
from contact_service.models.delivery import OutboundMessage

logger = get_logger(__name__)


class FileArchiveClient:
    """Writes messages to <archive_dir>/<uuid4>.eml.

    The directory is created when the client is constructed, never at send
    time. Each write goes to a temporary file that is renamed into place, so
    an .eml file in the archive is always complete.

    Attributes:
        archive_dir: Directory receiving archived messages.
    """

    def __init__(self, archive_dir: str | Path) -> None:
        """Initialize archive client and create the archive directory.

        Args:
            archive_dir: Directory for archived messages.

        Raises:
            ContactConfigError: If the directory cannot be created.
        """
        self.archive_dir = Path(archive_dir)

        try:
            self.archive_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ContactConfigError(
                f"Unable to create backup email dir {self.archive_dir}: {e}"
            ) from e

        logger.info(f"Archive client initialized: {self.archive_dir}")

    def send(self, outbound: OutboundMessage) -> Path:
        """Write the message to a new file.

        Args:
            outbound: Assembled message.

        Returns:
            Path of the archived file.

        Raises:
            ArchiveError: If the file cannot be written.
        """
        file_id = uuid.uuid4()
        path = self.archive_dir / f"{file_id}.eml"
        tmp_path = self.archive_dir / f".{file_id}.eml.tmp"

        try:
            with open(tmp_path, "xb") as f:
                f.write(outbound.as_bytes())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            logger.error(f"Failed to archive message {outbound.message_id}: {e}")
            raise ArchiveError(
                f"Failed to write archive file {path}: {e}",
                path=str(path),
            ) from e

        logger.debug(f"Message {outbound.message_id} archived to {path}")
        return path
