"""Error types shared by the transformation client and the UI controller.

Every failure carries an ErrorKind tag so operators can tell the causes
apart in logs and snapshots. End users still only ever see the generic
messages defined in prophoto.ui.models.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Cause of a failed transformation attempt."""

    INVALID_INPUT = "invalid_input"
    READ_FAILURE = "read_failure"
    TRANSPORT_FAILURE = "transport_failure"
    EMPTY_RESPONSE = "empty_response"


class ProPhotoError(Exception):
    """Base class for all ProPhoto errors."""

    kind: ErrorKind | None = None


class InvalidInputError(ProPhotoError):
    """The selected file or encoded payload cannot be sent to the service."""

    kind = ErrorKind.INVALID_INPUT


class ReadFailureError(ProPhotoError):
    """The selected file could not be read from disk."""

    kind = ErrorKind.READ_FAILURE


class TransportFailureError(ProPhotoError):
    """The request to the image service failed or was rejected."""

    kind = ErrorKind.TRANSPORT_FAILURE


class MissingApiKeyError(TransportFailureError):
    """No API key is configured, so no request can be authenticated."""


class EmptyResponseError(ProPhotoError):
    """The service answered without producing an image."""

    kind = ErrorKind.EMPTY_RESPONSE


class TransformationCancelled(ProPhotoError):
    """The in-flight transformation was cancelled by the session."""


class SessionBusyError(ProPhotoError):
    """A transformation is already in flight for this session."""
