"""Gradio UI for NanoArt Studio."""

import logging

import gradio as gr

from nanoart.core.config import MAX_IMAGE_COUNT, MIN_IMAGE_COUNT, config

from .handlers import (
    clear_source_image,
    delete_selected_image,
    edit_button_update,
    edit_image,
    generate_button_update,
    generate_images,
    refresh_gallery,
    select_gallery_image,
    upload_source_image,
)
from .handlers.edit import EDIT_LABEL
from .handlers.generation import GENERATE_LABEL
from .models import ASPECT_RATIO_CHOICES, UIState

logger = logging.getLogger(__name__)


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="NanoArt Studio")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown(
            """
            # NanoArt Studio
            ### Generate and edit images from text prompts
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                with gr.Tabs():
                    with gr.Tab("Generate", id="generate_tab"):
                        generate = create_generation_tab()
                    with gr.Tab("Edit", id="edit_tab"):
                        edit = create_edit_tab()

            with gr.Column(scale=2):
                gallery = gr.Gallery(
                    label="Gallery (0)",
                    columns=3,
                    height=600,
                    object_fit="contain",
                    show_label=True,
                )
                with gr.Row():
                    download_btn = gr.DownloadButton("Download", interactive=False, scale=1)
                    delete_btn = gr.Button("Delete", interactive=False, variant="stop", scale=1)

        # Generation events
        generate["prompt"].change(
            fn=generate_button_update,
            inputs=[generate["prompt"], ui_state],
            outputs=[generate["button"]],
        )

        generate["button"].click(
            fn=generate_images,
            inputs=[generate["prompt"], generate["aspect_ratio"], generate["count"], ui_state],
            outputs=[generate["error"], gallery, generate["button"], ui_state],
        )

        # Edit events
        edit["file"].change(
            fn=upload_source_image,
            inputs=[edit["file"], ui_state],
            outputs=[edit["preview"], edit["error"], ui_state],
        ).then(
            fn=edit_button_update,
            inputs=[edit["prompt"], ui_state],
            outputs=[edit["button"]],
        )

        edit["clear"].click(
            fn=clear_source_image,
            inputs=[ui_state],
            outputs=[edit["file"], edit["preview"], ui_state],
        ).then(
            fn=edit_button_update,
            inputs=[edit["prompt"], ui_state],
            outputs=[edit["button"]],
        )

        edit["prompt"].change(
            fn=edit_button_update,
            inputs=[edit["prompt"], ui_state],
            outputs=[edit["button"]],
        )

        edit["button"].click(
            fn=edit_image,
            inputs=[edit["prompt"], ui_state],
            outputs=[edit["error"], gallery, edit["button"], ui_state],
        )

        # Gallery events - uses gr.SelectData for event
        gallery.select(
            fn=select_gallery_image,
            inputs=[ui_state],
            outputs=[download_btn, delete_btn, ui_state],
        )

        delete_btn.click(
            fn=delete_selected_image,
            inputs=[ui_state],
            outputs=[gallery, download_btn, delete_btn, ui_state],
        )

        # Initialize the session on page load
        app.load(
            fn=refresh_gallery,
            inputs=[ui_state],
            outputs=[gallery, ui_state],
        )

    return app


def create_generation_tab() -> dict:
    """Create the text-to-image tab.

    Returns:
        Dictionary of components for event wiring
    """
    prompt_input = gr.Textbox(
        label="Prompt",
        placeholder="Describe the image you want to create...",
        value=config.default_prompt,
        lines=4,
    )

    with gr.Row():
        aspect_ratio_dropdown = gr.Dropdown(
            label="Aspect Ratio",
            choices=ASPECT_RATIO_CHOICES,
            value=config.default_aspect_ratio,
        )
        count_slider = gr.Slider(
            label="Number of Images",
            minimum=MIN_IMAGE_COUNT,
            maximum=MAX_IMAGE_COUNT,
            step=1,
            value=config.default_count,
        )

    generate_btn = gr.Button(
        GENERATE_LABEL,
        variant="primary",
        interactive=bool(config.default_prompt.strip()),
    )
    error_output = gr.Markdown(value="")

    return {
        "prompt": prompt_input,
        "aspect_ratio": aspect_ratio_dropdown,
        "count": count_slider,
        "button": generate_btn,
        "error": error_output,
    }


def create_edit_tab() -> dict:
    """Create the image editing tab.

    Returns:
        Dictionary of components for event wiring
    """
    file_input = gr.File(
        label=f"Source Image (PNG, JPG up to {config.max_upload_mb:g}MB)",
        file_types=["image"],
        type="filepath",
    )

    with gr.Row():
        preview = gr.Image(label="Source Preview", type="pil", interactive=False, height=240)

    clear_btn = gr.Button("Clear Image", size="sm")

    prompt_input = gr.Textbox(
        label="Edit Instruction",
        placeholder="Describe the change, e.g. 'make the sky stormy'",
        lines=3,
    )

    edit_btn = gr.Button(EDIT_LABEL, variant="primary", interactive=False)
    error_output = gr.Markdown(value="")

    return {
        "file": file_input,
        "preview": preview,
        "clear": clear_btn,
        "prompt": prompt_input,
        "button": edit_btn,
        "error": error_output,
    }


def main():
    """Main entry point for the standalone UI."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting NanoArt Studio UI...")
    logger.info(f"Configuration: {config.model_dump()}")

    app = create_ui()

    logger.info(f"Launching Gradio UI on {config.server_host}:{config.server_port}")

    app.launch(
        server_name=config.server_host,
        server_port=config.server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
        allowed_paths=[str(config.downloads_dir)],
    )


if __name__ == "__main__":
    main()
