"""Session state management for the ProPhoto UI.

This module holds the SessionController, the per-session state machine
behind the upload view:

    IDLE --select(valid)--> READING --(read ok)--> GENERATING --(call ok)--> SUCCESS
    any read/call failure --> ERROR
    ERROR or SUCCESS --select(valid)--> READING
    any state --reset()--> IDLE

Only one attempt may be in flight per session. Each attempt gets a number
and a cancellation event; reset() fires the event and bumps the number, so
a response that arrives after a reset is discarded.
"""

import asyncio
import logging
import shutil
import tempfile
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import replace
from pathlib import Path

from prophoto.core.config import ProPhotoConfig
from prophoto.core.encoding import decode_payload, encode_image
from prophoto.core.errors import (
    ErrorKind,
    ProPhotoError,
    ReadFailureError,
    SessionBusyError,
    TransformationCancelled,
)
from prophoto.core.transformation_client import TransformationClient

from .models import (
    BUSY_MESSAGE,
    DOWNLOAD_FILENAME,
    READ_FAILURE_MESSAGE,
    TRANSFORMATION_FAILED_MESSAGE,
    FileSelection,
    SessionSnapshot,
    SessionStatus,
    TransformationResult,
    UploadedImage,
)
from .validation import ValidationError, validate_selection

logger = logging.getLogger(__name__)

Reader = Callable[[FileSelection], Awaitable[UploadedImage]]


async def read_selection(selection: FileSelection) -> UploadedImage:
    """Read a selected file without blocking the event loop.

    Args:
        selection: File picked by the user

    Returns:
        UploadedImage with the file's bytes

    Raises:
        ReadFailureError: If the file cannot be read
    """
    try:
        data = await asyncio.to_thread(selection.path.read_bytes)
    except OSError as e:
        logger.error(f"Failed to read upload {selection.name!r}: {e}")
        raise ReadFailureError(READ_FAILURE_MESSAGE) from e

    logger.debug(f"Read {len(data)} bytes from {selection.name!r}")
    return UploadedImage(data=data, mime_type=selection.mime_type)


class SessionController:
    """State machine for one user session.

    Attributes
    ----------
    client : TransformationClient
        Client used to transform accepted uploads
    download_filename : str
        File name used by download_result()
    download_dir : Path | None
        Temp directory holding this session's saved result, created on first use
    """

    def __init__(
        self,
        client: TransformationClient,
        download_filename: str = DOWNLOAD_FILENAME,
        reader: Reader = read_selection,
    ) -> None:
        self.client = client
        self.download_filename = download_filename
        self._reader = reader
        self._state = SessionSnapshot()
        self._attempt = 0
        self._cancel_event: asyncio.Event | None = None
        self.download_dir: Path | None = None

    @classmethod
    def from_config(cls, config: ProPhotoConfig) -> "SessionController":
        """Create a controller with a fresh client built from config."""
        return cls(TransformationClient(config), download_filename=config.download_filename)

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def result(self) -> TransformationResult | None:
        return self._state.result

    @property
    def is_busy(self) -> bool:
        """True while a selected file is being read or transformed."""
        return self._state.status.is_busy

    def snapshot(self) -> SessionSnapshot:
        """Return the current immutable session state."""
        return self._state

    async def select_file(self, selection: FileSelection | None) -> AsyncIterator[SessionSnapshot]:
        """Validate, read and transform a selected file.

        Yields a snapshot after every status transition, so a UI can render
        READING and GENERATING before the final SUCCESS or ERROR.

        Args:
            selection: File picked by the user

        Yields:
            SessionSnapshot after each transition

        Raises:
            SessionBusyError: If another attempt is still in flight
        """
        if self.is_busy:
            logger.warning("Rejected file selection while a transformation is in flight")
            raise SessionBusyError(BUSY_MESSAGE)

        self._attempt += 1
        attempt = self._attempt
        cancel_event = asyncio.Event()
        self._cancel_event = cancel_event

        try:
            try:
                validate_selection(selection)
            except ValidationError as e:
                self._state = SessionSnapshot(
                    status=SessionStatus.ERROR,
                    selected_file=selection,
                    error=str(e),
                    error_kind=e.kind,
                )
                yield self._state
                return

            logger.info(f"Attempt {attempt}: reading {selection.name!r} ({selection.mime_type})")
            self._state = SessionSnapshot(status=SessionStatus.READING, selected_file=selection)
            yield self._state

            try:
                upload = await self._reader(selection)
                encoded = encode_image(upload.data, upload.mime_type)
            except Exception as e:
                if not isinstance(e, ReadFailureError):
                    logger.error(f"Unexpected error reading upload: {e}", exc_info=True)
                if self._fail(attempt, READ_FAILURE_MESSAGE, ErrorKind.READ_FAILURE):
                    yield self._state
                return

            if not self._transition(attempt, status=SessionStatus.GENERATING):
                return
            yield self._state

            try:
                transformed = await self.client.transform(
                    encoded, upload.mime_type, cancel_event=cancel_event
                )
            except TransformationCancelled:
                logger.info(f"Attempt {attempt}: cancelled")
                return
            except ProPhotoError as e:
                logger.warning(f"Attempt {attempt}: transformation failed ({e.kind}): {e}")
                updated = self._fail(attempt, TRANSFORMATION_FAILED_MESSAGE, e.kind)
            except Exception as e:
                logger.error(f"Attempt {attempt}: unexpected transformation error: {e}", exc_info=True)
                updated = self._fail(
                    attempt, TRANSFORMATION_FAILED_MESSAGE, ErrorKind.TRANSPORT_FAILURE
                )
            else:
                result = TransformationResult(original=encoded, transformed=transformed)
                updated = self._transition(attempt, status=SessionStatus.SUCCESS, result=result)

            if updated:
                yield self._state

        finally:
            if attempt == self._attempt:
                self._cancel_event = None
                if self._state.status.is_busy:
                    # The consumer stopped iterating before the attempt finished
                    logger.warning(f"Attempt {attempt}: abandoned, returning to idle")
                    self._state = SessionSnapshot()

    async def run_selection(self, selection: FileSelection | None) -> SessionSnapshot:
        """Run select_file() to completion and return the final snapshot."""
        async for _ in self.select_file(selection):
            pass
        return self._state

    def reset(self) -> SessionSnapshot:
        """Discard the current attempt, result and error and return to IDLE.

        Always legal. An in-flight request is cancelled through its
        cancellation event, and anything it still produces is ignored.
        """
        if self._cancel_event is not None:
            logger.info(f"Cancelling in-flight attempt {self._attempt}")
            self._cancel_event.set()
            self._cancel_event = None

        self._attempt += 1
        self._state = SessionSnapshot()
        self.clear_downloads()
        logger.debug("Session reset to idle")
        return self._state

    def download_directory(self) -> Path:
        """Return the session's download directory, creating it on first use."""
        if self.download_dir is None:
            self.download_dir = Path(tempfile.mkdtemp(prefix="prophoto-"))
            logger.debug(f"Created download directory {self.download_dir}")
        return self.download_dir

    def clear_downloads(self) -> None:
        """Delete the session's download directory and the result saved in it."""
        if self.download_dir is None:
            return
        shutil.rmtree(self.download_dir, ignore_errors=True)
        logger.info(f"Removed download directory {self.download_dir}")
        self.download_dir = None

    def download_result(self, directory: Path) -> Path | None:
        """Save the transformed image under the fixed download file name.

        Args:
            directory: Directory to write the file into

        Returns:
            Path of the written file, or None if there is no result to save
        """
        result = self._state.result
        if self._state.status is not SessionStatus.SUCCESS or result is None:
            logger.debug("Download requested without a result, ignoring")
            return None

        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.download_filename
        path.write_bytes(decode_payload(result.transformed))
        logger.info(f"Saved result to {path}")
        return path

    def _transition(self, attempt: int, **changes) -> bool:
        """Apply a transition if the attempt is still current."""
        if attempt != self._attempt:
            logger.info(f"Attempt {attempt}: superseded, discarding {changes.get('status')}")
            return False

        self._state = replace(self._state, **changes)
        logger.info(f"Attempt {attempt}: status -> {self._state.status.value}")
        return True

    def _fail(self, attempt: int, message: str, kind: ErrorKind | None) -> bool:
        return self._transition(
            attempt, status=SessionStatus.ERROR, error=message, error_kind=kind, result=None
        )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"SessionController(status={self._state.status.value}, "
            f"attempt={self._attempt}, has_result={self._state.result is not None})"
        )


def cleanup_session(controller: SessionController | None) -> None:
    """Release a session's resources when Gradio discards its state.

    Args:
        controller: Controller held in gr.State, or None if the session never uploaded
    """
    if controller is None:
        return

    logger.info("Cleaning up session resources")
    controller.clear_downloads()
