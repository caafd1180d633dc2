"""Unit tests for UI data models."""

import mimetypes
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest
from PIL import Image, features

from prophoto.ui.models import (
    STATUS_MESSAGES,
    FileSelection,
    SessionSnapshot,
    SessionStatus,
    TransformationResult,
    UploadedImage,
    sniff_media_type,
)
from prophoto.ui.validation import validate_selection


class TestSessionStatus:
    """Tests for SessionStatus."""

    @pytest.mark.parametrize("status", [SessionStatus.READING, SessionStatus.GENERATING])
    def test_busy_statuses(self, status):
        assert status.is_busy is True

    @pytest.mark.parametrize(
        "status", [SessionStatus.IDLE, SessionStatus.SUCCESS, SessionStatus.ERROR]
    )
    def test_settled_statuses(self, status):
        assert status.is_busy is False

    def test_every_status_has_message(self):
        assert set(STATUS_MESSAGES) == set(SessionStatus)


class TestFileSelection:
    """Tests for FileSelection.from_path."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("portrait.jpg", "image/jpeg"),
            ("portrait.jpeg", "image/jpeg"),
            ("portrait.png", "image/png"),
            ("notes.txt", "text/plain"),
            ("no_extension", ""),
        ],
    )
    def test_guesses_media_type(self, name, expected):
        assert FileSelection.from_path(name).mime_type == expected

    def test_explicit_media_type(self):
        selection = FileSelection.from_path("/tmp/upload", mime_type="image/webp")
        assert selection.mime_type == "image/webp"

    def test_path_and_name(self):
        selection = FileSelection.from_path("/tmp/uploads/me.png")
        assert selection.path == Path("/tmp/uploads/me.png")
        assert selection.name == "me.png"


class TestContentSniffing:
    """Media types are identified from content when the file name is not enough."""

    @pytest.mark.skipif(not features.check("webp"), reason="Pillow built without WEBP")
    def test_webp_accepted_without_system_mime_table(self, bare_mimetypes, temp_dir):
        path = temp_dir / "me.webp"
        Image.new("RGB", (8, 8), "teal").save(path, format="WEBP")
        assert mimetypes.guess_type(path.name) == (None, None)

        selection = FileSelection.from_path(path)

        assert selection.mime_type == "image/webp"
        validate_selection(selection)

    def test_unknown_extension_uses_content(self, bare_mimetypes, temp_dir, png_bytes):
        path = temp_dir / "upload.blob"
        path.write_bytes(png_bytes)
        assert FileSelection.from_path(path).mime_type == "image/png"

    def test_unrecognised_content_stays_empty(self, bare_mimetypes, temp_dir):
        path = temp_dir / "notes.blob"
        path.write_text("just some notes")
        assert FileSelection.from_path(path).mime_type == ""

    def test_name_wins_over_content(self, temp_dir, png_bytes):
        path = temp_dir / "portrait.txt"
        path.write_bytes(png_bytes)
        assert FileSelection.from_path(path).mime_type == "text/plain"

    def test_missing_file_is_not_sniffed(self, temp_dir):
        assert sniff_media_type(temp_dir / "gone") is None


class TestImmutability:
    """Results and snapshots cannot change once created."""

    def test_result_is_frozen(self):
        result = TransformationResult(original="data:a", transformed="data:b")
        with pytest.raises(FrozenInstanceError):
            result.transformed = "data:c"

    def test_snapshot_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            SessionSnapshot().status = SessionStatus.ERROR

    def test_uploaded_image_size(self):
        assert UploadedImage(data=b"12345", mime_type="image/png").size == 5

    def test_repr_hides_image_content(self):
        result = TransformationResult(original="data:secret-original", transformed="data:secret-new")
        assert "secret" not in repr(result)

    def test_default_snapshot_is_idle(self):
        snapshot = SessionSnapshot()
        assert snapshot.status is SessionStatus.IDLE
        assert snapshot.error is None
        assert snapshot.result is None
