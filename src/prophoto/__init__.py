"""ProPhoto - Turn casual photos into professional headshots."""

__version__ = "0.1.0"

from prophoto.core.config import ProPhotoConfig, config
from prophoto.core.transformation_client import TransformationClient

__all__ = [
    "ProPhotoConfig",
    "TransformationClient",
    "config",
]
