"""Data models for the ProPhoto UI session."""

import logging
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from prophoto.core.errors import ErrorKind

logger = logging.getLogger(__name__)


def sniff_media_type(path: Path) -> str | None:
    """Identify an image's media type from its content.

    Only the header is read; the pixels are never decoded.

    Args:
        path: File to inspect

    Returns:
        The media type (e.g. "image/webp"), or None if Pillow does not recognise it
    """
    try:
        with Image.open(path) as image:
            return image.get_format_mimetype()
    except (UnidentifiedImageError, OSError):
        return None


class SessionStatus(str, Enum):
    """Which view the session is showing. Exactly one value at a time."""

    IDLE = "idle"
    READING = "reading"
    GENERATING = "generating"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_busy(self) -> bool:
        """True while an attempt is in flight."""
        return self in (SessionStatus.READING, SessionStatus.GENERATING)


@dataclass(frozen=True)
class FileSelection:
    """A file the user picked, before it has been read.

    Attributes
    ----------
    path : Path
        Location of the uploaded file
    mime_type : str
        Declared media type ("" when unknown)
    """

    path: Path
    mime_type: str

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> "FileSelection":
        """Create a selection, guessing the media type if none is declared.

        The file name is tried first. Hosts without a system mime.types file
        do not know every image extension (".webp" in particular), so an
        unknown name falls back to identifying the content with Pillow.

        Args:
            path: Path to the uploaded file
            mime_type: Declared media type (optional)

        Returns:
            FileSelection instance
        """
        path = Path(path)
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)
            if mime_type is None:
                mime_type = sniff_media_type(path)
                if mime_type:
                    logger.debug(f"Media type of {path.name} identified from content: {mime_type}")
        return cls(path=path, mime_type=mime_type or "")

    @property
    def name(self) -> str:
        """File name without its directory."""
        return self.path.name


@dataclass(frozen=True)
class UploadedImage:
    """Raw bytes of an accepted upload plus its media type."""

    data: bytes = field(repr=False)
    mime_type: str

    @property
    def size(self) -> int:
        """Size of the image in bytes."""
        return len(self.data)


@dataclass(frozen=True)
class TransformationResult:
    """Original and transformed images of one successful attempt.

    Both values are data URIs, ready for display.
    """

    original: str = field(repr=False)
    transformed: str = field(repr=False)


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session state after a transition.

    Attributes
    ----------
    status : SessionStatus
        Current status
    selected_file : FileSelection | None
        File of the current or last attempt
    error : str | None
        User-facing error message (only in ERROR)
    error_kind : ErrorKind | None
        Diagnostic tag of the error (never shown to the user)
    result : TransformationResult | None
        Result of the last successful attempt (only in SUCCESS)
    """

    status: SessionStatus = SessionStatus.IDLE
    selected_file: FileSelection | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    result: TransformationResult | None = None


# User-facing messages
INVALID_FILE_MESSAGE = "Please upload a valid image file."
READ_FAILURE_MESSAGE = "Failed to read the file."
TRANSFORMATION_FAILED_MESSAGE = "Transformation failed. Please try again later."
BUSY_MESSAGE = "A transformation is already in progress. Please wait for it to finish."

DOWNLOAD_FILENAME = "professional-headshot.png"

# Status text shown while an attempt is in flight
STATUS_MESSAGES = {
    SessionStatus.IDLE: "*Upload a photo to get started*",
    SessionStatus.READING: "📂 **Reading your photo...**",
    SessionStatus.GENERATING: (
        "✨ **Crafting your professional look...**\n\n"
        "Tailoring your suit, adjusting your posture and optimizing the lighting."
    ),
    SessionStatus.SUCCESS: "✅ **Your new professional headshot is ready!**",
    SessionStatus.ERROR: "",
}
