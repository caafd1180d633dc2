"""Core transformation logic for ProPhoto.

This package contains the UI-agnostic parts of the application:
- config: Pydantic Settings configuration
- encoding: base64 / data URI helpers for encoded images
- errors: tagged error hierarchy
- prompts: the fixed headshot instruction
- transformation_client: the client for the generative image service
"""

from .config import ProPhotoConfig, config
from .encoding import decode_payload, encode_image, split_data_uri, strip_metadata_prefix
from .errors import (
    EmptyResponseError,
    ErrorKind,
    InvalidInputError,
    MissingApiKeyError,
    ProPhotoError,
    ReadFailureError,
    SessionBusyError,
    TransformationCancelled,
    TransportFailureError,
)
from .transformation_client import TransformationClient, extract_inline_image

__all__ = [
    # Configuration
    "ProPhotoConfig",
    "config",
    # Encoding
    "decode_payload",
    "encode_image",
    "split_data_uri",
    "strip_metadata_prefix",
    # Errors
    "EmptyResponseError",
    "ErrorKind",
    "InvalidInputError",
    "MissingApiKeyError",
    "ProPhotoError",
    "ReadFailureError",
    "SessionBusyError",
    "TransformationCancelled",
    "TransportFailureError",
    # Client
    "TransformationClient",
    "extract_inline_image",
]
