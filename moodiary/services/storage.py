"""Local file storage for entry images and drawings."""

import base64
import binascii
import logging
import re
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from moodiary.errors import UploadError
from moodiary.models import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?:;[\w=-]+)*;base64,(?P<data>.*)$", re.DOTALL)


def _safe_part(value: str, label: str) -> str:
    """Reject path components that could escape the storage root."""
    name = Path(value).name
    if not value or name != value or name in (".", ".."):
        raise UploadError(f"Invalid {label}: {value!r}")
    return name


class LocalFileStore:
    """Stores uploaded files under a root directory.

    Layout: ``images/<user>/<entry>/<filename>``
    and ``drawings/<user>/<entry>.png``.
    """

    def __init__(self, root: Path):
        """Initialize the file store.

        Args:
            root: Directory files are written under.
        """
        self.root = Path(root)

    def _write(self, relative: Path, data: bytes) -> str:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Stored %d bytes at %s", len(data), path)
        return path.resolve().as_uri()

    def upload_image(
        self,
        user_id: str,
        entry_id: str,
        filename: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """Validate and store an image.

        Args:
            user_id: The authenticated user's ID.
            entry_id: The entry the image belongs to.
            filename: Original file name.
            data: File contents.
            content_type: MIME type of the file.

        Returns:
            URL of the stored image.

        Raises:
            UploadError: If the file is missing, too large or of a
                disallowed type.
        """
        if not data:
            raise UploadError("No file provided")
        if len(data) > MAX_IMAGE_SIZE:
            raise UploadError("Image must be under 5MB")
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise UploadError("Please upload a JPEG, PNG, GIF, or WebP image")

        relative = (
            Path("images")
            / _safe_part(user_id, "user id")
            / _safe_part(entry_id, "entry id")
            / _safe_part(filename, "file name")
        )
        return self._write(relative, data)

    def upload_drawing(self, user_id: str, entry_id: str, data_url: str) -> str:
        """Decode a canvas data URL and store it as a PNG drawing.

        Returns:
            URL of the stored drawing.

        Raises:
            UploadError: If the data URL cannot be decoded.
        """
        match = DATA_URL_PATTERN.match(data_url or "")
        if match is None:
            raise UploadError("Drawing must be a base64 data URL")
        try:
            data = base64.b64decode(match.group("data"), validate=True)
        except (binascii.Error, ValueError) as e:
            raise UploadError(f"Drawing data is not valid base64: {e}") from e
        if not data:
            raise UploadError("Drawing is empty")

        relative = (
            Path("drawings")
            / _safe_part(user_id, "user id")
            / f"{_safe_part(entry_id, 'entry id')}.png"
        )
        return self._write(relative, data)

    def delete(self, url: str) -> bool:
        """Remove a stored file by the URL an upload returned.

        Returns:
            True if a file was removed, False if it was already gone.

        Raises:
            UploadError: If the URL does not point inside the storage root.
        """
        parsed = urlparse(url)
        if parsed.scheme != "file":
            raise UploadError(f"Not a stored file: {url}")
        path = Path(url2pathname(parsed.path)).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise UploadError(f"Not a stored file: {url}")
        if not path.exists():
            return False
        path.unlink()
        logger.debug("Removed %s", path)
        return True
