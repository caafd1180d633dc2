"""Gradio UI for ProPhoto."""

import logging

import gradio as gr

from prophoto.core.config import ProPhotoConfig, config

from .handlers import render_snapshot, reset_handler, select_file_handler
from .models import STATUS_MESSAGES, SessionSnapshot, SessionStatus
from .state import cleanup_session

logger = logging.getLogger(__name__)

BENEFITS = """
### Your New Professional Identity

- 👔 **Smart Suit Fitting** - Digital tailoring for a perfectly aligned business suit.
- 🧍 **Posture Correction** - Subtle adjustments to look confident and engaged.
- 💡 **Studio Lighting** - Optimized brightness and contrast for professional clarity.
- 🏢 **Premium Background** - Modern office aesthetic for immediate visual impact.
"""


def create_ui(app_config: ProPhotoConfig | None = None) -> tuple[gr.Blocks, str]:
    """Create the Gradio UI.

    Args:
        app_config: Configuration for the session controllers (default: global config)

    Returns:
        Tuple of (Gradio Blocks app, custom CSS string)
    """
    app_config = app_config or config

    custom_css = """
    .error-banner {
        border: 1px solid #dc2626;
        border-radius: 6px;
        padding: 12px;
    }
    """

    app = gr.Blocks(title="ProPhoto AI")

    with app:
        # Session state - one controller per user, created on first event
        session = gr.State(None, delete_callback=cleanup_session)

        gr.Markdown(
            """
            # ProPhoto AI
            ### Transform casual photos into LinkedIn-ready professional headshots
            """
        )

        with gr.Group(visible=True) as upload_group:
            file_input = gr.File(
                label="Upload your photo (JPG, PNG, WEBP)",
                file_types=["image"],
                type="filepath",
            )

        error_box = gr.Markdown(value="", visible=False, elem_classes=["error-banner"])
        status_box = gr.Markdown(value=STATUS_MESSAGES[SessionStatus.IDLE], visible=False)
        cancel_button = gr.Button("Cancel", variant="stop", size="sm", visible=False)

        with gr.Row(visible=False) as result_group:
            with gr.Column(scale=1):
                original_image = gr.Image(label="Original", type="pil", interactive=False)
            with gr.Column(scale=1):
                transformed_image = gr.Image(
                    label="Professional Result", type="pil", interactive=False
                )
            with gr.Column(scale=1):
                gr.Markdown(BENEFITS)
                with gr.Row():
                    download_button = gr.DownloadButton("Download HD", variant="primary")
                    reset_button = gr.Button("Try Another", variant="secondary")

        view_outputs = [
            upload_group,
            error_box,
            status_box,
            result_group,
            original_image,
            transformed_image,
            download_button,
            cancel_button,
        ]

        async def upload_wrapper(file_path, controller):
            async for updates in select_file_handler(file_path, controller, app_config):
                yield updates

        async def reset_wrapper(controller):
            return await reset_handler(controller, app_config)

        # One attempt per session is enforced by the controller; this limit spans sessions
        upload_event = file_input.upload(
            fn=upload_wrapper,
            inputs=[file_input, session],
            outputs=[*view_outputs, session],
            concurrency_limit=app_config.concurrency_limit,
        )

        # Resetting also cancels a running upload event
        for button in (reset_button, cancel_button):
            button.click(
                fn=reset_wrapper,
                inputs=[session],
                outputs=[*view_outputs, file_input, session],
                cancels=[upload_event],
                concurrency_limit=None,
            )

        app.load(
            fn=lambda: render_snapshot(SessionSnapshot()),
            outputs=view_outputs,
        )

    return app, custom_css


def main():
    """Main entry point for the application."""
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting ProPhoto...")
    logger.info(f"Configuration: {config.model_dump(exclude={'api_key'})}")
    if not config.has_api_key():
        logger.warning("No API key configured; transformations will fail until one is set")

    app, custom_css = create_ui(config)

    logger.info(f"Launching Gradio UI on {config.server_name}:{config.server_port}")

    app.launch(
        server_name=config.server_name,
        server_port=config.server_port,
        share=config.share,
        show_error=True,
        inbrowser=False,
        css=custom_css,
    )


if __name__ == "__main__":
    main()
