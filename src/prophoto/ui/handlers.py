"""Gradio event handlers for the ProPhoto UI.

Handlers translate between Gradio component values and the SessionController.
Every handler returns the same tuple of component updates (see
render_snapshot) followed by the session controller, so the upload, reset
and initial-load events can share one output list.
"""

import logging
from collections.abc import AsyncIterator
from io import BytesIO

import gradio as gr
from PIL import Image, UnidentifiedImageError

from prophoto.core.config import ProPhotoConfig
from prophoto.core.encoding import decode_payload
from prophoto.core.errors import InvalidInputError, SessionBusyError

from .models import STATUS_MESSAGES, FileSelection, SessionSnapshot, SessionStatus
from .state import SessionController

logger = logging.getLogger(__name__)


def initialize_session(
    controller: SessionController | None, config: ProPhotoConfig
) -> SessionController:
    """Create the session controller on first use.

    Args:
        controller: Existing controller from gr.State, or None
        config: Configuration used to build a new controller

    Returns:
        Ready-to-use SessionController
    """
    if controller is None:
        logger.info("Creating new SessionController")
        controller = SessionController.from_config(config)
    return controller


def data_uri_to_image(data_uri: str) -> Image.Image | None:
    """Decode an encoded image for display.

    Returns:
        PIL image, or None if the payload is not a readable image
    """
    try:
        image = Image.open(BytesIO(decode_payload(data_uri)))
        image.load()
    except (InvalidInputError, UnidentifiedImageError, OSError) as e:
        logger.error(f"Could not decode image for display: {e}")
        return None
    return image


def prepare_download(controller: SessionController) -> str | None:
    """Write the result into the session's download directory for the download button.

    Every result of a session overwrites the same file; reset() removes it.

    Returns:
        Path of the saved file as a string, or None without a result
    """
    path = controller.download_result(controller.download_directory())
    return str(path) if path is not None else None


def render_snapshot(snapshot: SessionSnapshot, download_path: str | None = None) -> tuple:
    """Map a session snapshot to component updates.

    Args:
        snapshot: Session state to render
        download_path: Saved result file for the download button (SUCCESS only)

    Returns:
        Tuple of (upload_group, error_box, status_box, result_group,
        original_image, transformed_image, download_button, cancel_button) updates
    """
    status = snapshot.status
    show_upload = status in (SessionStatus.IDLE, SessionStatus.ERROR)
    show_result = status is SessionStatus.SUCCESS and snapshot.result is not None

    if snapshot.error:
        error_update = gr.update(value=f"⚠️ {snapshot.error}", visible=True)
    else:
        error_update = gr.update(value="", visible=False)

    if show_result:
        original = data_uri_to_image(snapshot.result.original)
        transformed = data_uri_to_image(snapshot.result.transformed)
    else:
        original = transformed = None

    return (
        gr.update(visible=show_upload),
        error_update,
        gr.update(value=STATUS_MESSAGES[status], visible=status.is_busy or show_result),
        gr.update(visible=show_result),
        gr.update(value=original),
        gr.update(value=transformed),
        gr.update(value=download_path if show_result else None),
        gr.update(visible=status.is_busy),
    )


async def select_file_handler(
    file_path: str | None, controller: SessionController | None, config: ProPhotoConfig
) -> AsyncIterator[tuple]:
    """Handle a file upload and stream every status transition to the UI.

    Args:
        file_path: Path of the uploaded file (from gr.File)
        controller: Session controller from gr.State
        config: Configuration used to create the controller on first use

    Yields:
        Component updates followed by the session controller
    """
    controller = initialize_session(controller, config)

    if not file_path:
        yield (*render_snapshot(controller.snapshot()), controller)
        return

    selection = FileSelection.from_path(file_path)
    try:
        async for snapshot in controller.select_file(selection):
            download_path = None
            if snapshot.status is SessionStatus.SUCCESS:
                download_path = prepare_download(controller)
            yield (*render_snapshot(snapshot, download_path), controller)
    except SessionBusyError as e:
        gr.Warning(str(e))
        yield (*render_snapshot(controller.snapshot()), controller)


async def reset_handler(
    controller: SessionController | None, config: ProPhotoConfig
) -> tuple:
    """Return the session to IDLE and clear the file input.

    Async so that reset() runs on the event loop that owns the in-flight
    attempt's cancellation event.

    Returns:
        Component updates, the cleared file input, and the session controller
    """
    controller = initialize_session(controller, config)
    snapshot = controller.reset()
    return (*render_snapshot(snapshot), gr.update(value=None), controller)
