"""Validation utilities for ProPhoto uploads."""

import logging

from prophoto.core.errors import InvalidInputError

from .models import INVALID_FILE_MESSAGE, FileSelection

logger = logging.getLogger(__name__)

IMAGE_MEDIA_PREFIX = "image/"


class ValidationError(InvalidInputError):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def is_image_media_type(mime_type: str | None) -> bool:
    """Check whether a declared media type names an image."""
    return bool(mime_type) and mime_type.lower().startswith(IMAGE_MEDIA_PREFIX)


def validate_selection(selection: FileSelection | None) -> FileSelection:
    """Validate that a selected file declares an image media type.

    Only the "image/" prefix is checked; there is no allow-list of formats.

    Args:
        selection: File picked by the user

    Returns:
        The same selection if valid

    Raises:
        ValidationError: If nothing was selected or the media type is not an image
    """
    if selection is None:
        raise ValidationError(INVALID_FILE_MESSAGE)

    if not is_image_media_type(selection.mime_type):
        logger.warning(
            f"Rejected upload {selection.name!r} with media type {selection.mime_type!r}"
        )
        raise ValidationError(INVALID_FILE_MESSAGE)

    return selection
