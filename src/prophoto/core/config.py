"""Configuration management for ProPhoto.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PROPHOTO_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PROPHOTO_* prefix)
2. .env file in the project root
3. Default values defined in ProPhotoConfig

The API key is the one exception to the prefix rule: it is also accepted
from GEMINI_API_KEY or the bare API_KEY variable.

Example .env file:
    GEMINI_API_KEY=your-key
    PROPHOTO_MODEL_ID=gemini-2.5-flash-image
    PROPHOTO_REQUEST_TIMEOUT=120
    PROPHOTO_SERVER_PORT=7860
    PROPHOTO_CONCURRENCY_LIMIT=8

Explicit Configuration
----------------------
A global `config` instance is created at import time for the application
entry point. Library code never reads it: the TransformationClient receives
its configuration explicitly, so a client is a pure function of
(credentials, image, media type).

    from prophoto.core.config import ProPhotoConfig
    from prophoto.core.transformation_client import TransformationClient

    client = TransformationClient(ProPhotoConfig(api_key="..."))
"""

from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProPhotoConfig(BaseSettings):
    """Main configuration for ProPhoto.

    Attributes
    ----------
    Transformation Settings:
        api_key : SecretStr | None
            Credential for the generative image service
        model_id : str
            Identifier of the image model the instruction is sent to
        request_timeout : float | None
            Seconds to wait for the service (None waits indefinitely)

    Output Settings:
        download_filename : str
            File name used when the user downloads the result

    UI Settings:
        server_name : str
            Server bind address (0.0.0.0 for local network)
        server_port : int
            Server port (1024-65535)
        share : bool
            Create public gradio.live link (keep False for local-only)
        concurrency_limit : int | None
            Uploads processed at once across all sessions (None is unlimited)
        log_level : str
            Root logging level used by the entry point

    Examples
    --------
        >>> cfg = ProPhotoConfig(api_key="test-key", request_timeout=30)
        >>> cfg.api_key.get_secret_value()
        'test-key'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROPHOTO_",
        case_sensitive=False,
        extra="ignore",
    )

    # Transformation settings
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("api_key", "PROPHOTO_API_KEY", "GEMINI_API_KEY", "API_KEY"),
        description="API key for the generative image service",
    )
    model_id: str = Field(
        default="gemini-2.5-flash-image",
        min_length=1,
        description="Model identifier for the image transformation",
    )
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds (unset waits until the service answers)",
    )

    # Output settings
    download_filename: str = Field(
        default="professional-headshot.png",
        min_length=1,
        description="File name offered when downloading the result",
    )

    # UI settings
    server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )
    concurrency_limit: int | None = Field(
        default=None,
        ge=1,
        description="Maximum concurrent transformations across all sessions (unset is unlimited)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the application entry point",
    )

    def has_api_key(self) -> bool:
        """Return True if a non-empty API key is configured."""
        return self.api_key is not None and bool(self.api_key.get_secret_value().strip())


# Global configuration instance, read by the application entry point only.
config = ProPhotoConfig()
