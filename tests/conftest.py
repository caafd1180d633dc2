"""Shared pytest fixtures for ProPhoto tests."""

import pytest
import mimetypes
from io import BytesIO
from pathlib import Path
import tempfile
import shutil
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

from google.genai import types
from PIL import Image

from prophoto.core.config import ProPhotoConfig
from prophoto.core.encoding import encode_image
from prophoto.core.transformation_client import TransformationClient


def make_png_bytes(color: str = "navy", size: tuple[int, int] = (8, 8)) -> bytes:
    """Render a tiny solid-color PNG."""
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_response(*parts: types.Part) -> types.GenerateContentResponse:
    """Build a single-candidate response with the given parts."""
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def image_part(data: bytes, mime_type: str | None = "image/png") -> types.Part:
    """Build a response part carrying inline image data."""
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


def text_part(text: str) -> types.Part:
    """Build a response part carrying text."""
    return types.Part(text=text)


class FakeTransformationClient:
    """Stand-in for TransformationClient that records calls.

    Attributes
    ----------
    result : str
        Data URI returned by transform()
    error : Exception | None
        Raised by transform() instead of returning, if set
    gate : asyncio.Event | None
        If set, transform() waits for it before answering (ignoring cancellation)
    calls : list[tuple[str, str]]
        (encoded_image, mime_type) of every call
    """

    def __init__(self, result: str = "", error: Exception | None = None, gate=None):
        self.result = result
        self.error = error
        self.gate = gate
        self.calls = []

    async def transform(self, encoded_image, mime_type, cancel_event=None):
        self.calls.append((encoded_image, mime_type))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> ProPhotoConfig:
    """Create a test configuration with a dummy API key.

    Returns:
        ProPhotoConfig instance for testing
    """
    return ProPhotoConfig(
        api_key="test-key",
        model_id="gemini-2.5-flash-image",
        download_filename="professional-headshot.png",
        _env_file=None,
    )


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes of a small valid PNG (the uploaded photo)."""
    return make_png_bytes("tan")


@pytest.fixture
def result_png_bytes() -> bytes:
    """Bytes of a different PNG (the generated headshot)."""
    return make_png_bytes("navy")


@pytest.fixture
def result_data_uri(result_png_bytes: bytes) -> str:
    """Data URI of the generated headshot."""
    return encode_image(result_png_bytes, "image/png")


@pytest.fixture
def png_file(temp_dir: Path, png_bytes: bytes) -> Path:
    """A PNG photo on disk."""
    path = temp_dir / "portrait.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def text_file(temp_dir: Path) -> Path:
    """A plain text file on disk."""
    path = temp_dir / "notes.txt"
    path.write_text("not an image")
    return path


@pytest.fixture
def bare_mimetypes(monkeypatch) -> mimetypes.MimeTypes:
    """A mimetypes database with no system files and no .webp entry, as on slim hosts."""
    db = mimetypes.MimeTypes(filenames=())
    for strict in (True, False):
        db.types_map[strict].pop(".webp", None)
    monkeypatch.setattr(mimetypes, "_db", db)
    return db


@pytest.fixture
def mock_genai_client(result_png_bytes: bytes) -> MagicMock:
    """Mock SDK client whose async generate_content returns one inline PNG."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=make_response(image_part(result_png_bytes))
    )
    return client


@pytest.fixture
def transformation_client(
    test_config: ProPhotoConfig, mock_genai_client: MagicMock
) -> TransformationClient:
    """TransformationClient wired to the mock SDK client."""
    return TransformationClient(test_config, client=mock_genai_client)


@pytest.fixture
def fake_client(result_data_uri: str) -> FakeTransformationClient:
    """Recording fake client that returns the generated headshot."""
    return FakeTransformationClient(result=result_data_uri)
