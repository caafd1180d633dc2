"""Gradio UI and session state for ProPhoto."""

from .models import (
    DOWNLOAD_FILENAME,
    FileSelection,
    SessionSnapshot,
    SessionStatus,
    TransformationResult,
    UploadedImage,
)
from .state import SessionController, cleanup_session, read_selection
from .validation import ValidationError, validate_selection

__all__ = [
    "DOWNLOAD_FILENAME",
    "FileSelection",
    "SessionController",
    "SessionSnapshot",
    "SessionStatus",
    "TransformationResult",
    "UploadedImage",
    "ValidationError",
    "cleanup_session",
    "read_selection",
    "validate_selection",
]
