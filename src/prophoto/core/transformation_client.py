"""Transformation client for the generative image service.

This module wraps the Google Gen AI SDK behind a single operation: send one
uploaded photo together with the fixed headshot instruction and return the
first image the model produces, re-encoded as a data URI.

Request Shape
-------------
Each call sends exactly one request carrying:
- **model**: the configured model identifier
- **image part**: the decoded upload bytes tagged with their media type
- **text part**: the fixed instruction from prophoto.core.prompts

There is no retry, streaming, or partial result. Any failure on the way
(missing credentials, transport errors, non-success responses) surfaces as a
TransportFailureError; a response without an inline image surfaces as an
EmptyResponseError.

Lifecycle
---------
The SDK client is created lazily on the first transform() call from the
configuration passed to the constructor, the same way model adapters defer
loading until first use.

Usage Example
-------------
    >>> from prophoto.core.config import ProPhotoConfig
    >>> from prophoto.core.transformation_client import TransformationClient
    >>>
    >>> client = TransformationClient(ProPhotoConfig(api_key="..."))
    >>> result_uri = await client.transform(data_uri, "image/jpeg")

Cancellation
------------
transform() accepts an asyncio.Event. Setting it while the request is in
flight cancels the request task and raises TransformationCancelled.
"""

import asyncio
import base64
import logging
from typing import Any

from google import genai
from google.genai import types

from .config import ProPhotoConfig
from .encoding import decode_payload
from .errors import (
    EmptyResponseError,
    InvalidInputError,
    MissingApiKeyError,
    TransformationCancelled,
    TransportFailureError,
)
from .prompts import HEADSHOT_INSTRUCTION

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_MIME_TYPE = "image/png"


def extract_inline_image(response: Any) -> str:
    """Return the first inline image of a response as a data URI.

    Candidates and their parts are scanned in order; text parts are skipped.

    Args:
        response: GenerateContentResponse from the SDK

    Returns:
        Data URI of the first inline image

    Raises:
        EmptyResponseError: If no part in the response carries inline data
    """
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline_data = getattr(part, "inline_data", None)
            if inline_data is None or not inline_data.data:
                continue

            mime_type = inline_data.mime_type or DEFAULT_RESPONSE_MIME_TYPE
            payload = base64.b64encode(inline_data.data).decode("ascii")
            return f"data:{mime_type};base64,{payload}"

    raise EmptyResponseError("No image part found in response")


class TransformationClient:
    """Stateless client that turns a casual photo into a professional headshot.

    Attributes
    ----------
    config : ProPhotoConfig
        Configuration carrying the credential, model id and timeout
    instruction : str
        Instruction sent with every image (fixed, not user editable)
    """

    instruction: str = HEADSHOT_INSTRUCTION

    def __init__(self, config: ProPhotoConfig, client: genai.Client | None = None) -> None:
        """Initialize the transformation client.

        Args:
            config: Configuration with the API key and model settings
            client: Pre-built SDK client (optional, created lazily otherwise)
        """
        self.config = config
        self._client = client
        logger.info(f"Configured transformation client with model: {config.model_id}")

    def load_client(self) -> genai.Client:
        """Create the SDK client from the configuration if needed.

        Returns:
            The SDK client

        Raises:
            MissingApiKeyError: If no API key is configured
        """
        if self._client is not None:
            return self._client

        if not self.config.has_api_key():
            raise MissingApiKeyError("No API key configured for the image service")

        http_options = None
        if self.config.request_timeout is not None:
            # HttpOptions.timeout is expressed in milliseconds
            http_options = types.HttpOptions(timeout=int(self.config.request_timeout * 1000))

        self._client = genai.Client(
            api_key=self.config.api_key.get_secret_value(),
            http_options=http_options,
        )
        logger.info("Image service client created")
        return self._client

    def unload_client(self) -> None:
        """Drop the SDK client so the next call rebuilds it from config."""
        self._client = None

    def is_loaded(self) -> bool:
        """Check whether the SDK client has been created."""
        return self._client is not None

    def build_contents(self, image_bytes: bytes, mime_type: str) -> list[types.Part]:
        """Build the request parts: the image first, then the instruction."""
        return [
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            types.Part.from_text(text=self.instruction),
        ]

    async def transform(
        self,
        encoded_image: str,
        mime_type: str,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Send an encoded photo to the image model and return the result.

        Args:
            encoded_image: Base64 image, optionally prefixed with a data URI header
            mime_type: Media type of the image (e.g. "image/jpeg")
            cancel_event: Event that aborts the request when set (optional)

        Returns:
            Data URI of the transformed image

        Raises:
            InvalidInputError: If the media type is empty or the payload is malformed
            TransportFailureError: If the request fails or is rejected
            EmptyResponseError: If the response contains no image
            TransformationCancelled: If cancel_event is set before the response arrives
        """
        if not mime_type or not mime_type.strip():
            raise InvalidInputError("Media type must not be empty")

        image_bytes = decode_payload(encoded_image)
        contents = self.build_contents(image_bytes, mime_type)

        logger.info(
            f"Requesting transformation from {self.config.model_id} "
            f"({mime_type}, {len(image_bytes)} bytes)"
        )

        try:
            client = self.load_client()
            response = await self._send(client, contents, cancel_event)
        except TransformationCancelled:
            logger.info("Transformation request cancelled")
            raise
        except MissingApiKeyError:
            logger.error("No API key configured for the image service")
            raise
        except Exception as e:
            logger.error(f"Image service request failed: {type(e).__name__}: {e}", exc_info=True)
            raise TransportFailureError(f"Image service request failed: {e}") from e

        try:
            result = extract_inline_image(response)
        except EmptyResponseError:
            logger.error("Image service response contained no image part")
            raise

        logger.info("Transformation complete")
        return result

    async def _send(
        self,
        client: genai.Client,
        contents: list[types.Part],
        cancel_event: asyncio.Event | None,
    ) -> types.GenerateContentResponse:
        """Issue the request, racing it against the cancellation event."""
        request = client.aio.models.generate_content(model=self.config.model_id, contents=contents)
        if cancel_event is None:
            return await request

        if cancel_event.is_set():
            request.close()
            raise TransformationCancelled("Transformation cancelled before sending")

        request_task = asyncio.ensure_future(request)
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            request_task.cancel()
            raise
        finally:
            cancel_task.cancel()

        if request_task in done:
            return request_task.result()

        request_task.cancel()
        raise TransformationCancelled("Transformation cancelled by session")
