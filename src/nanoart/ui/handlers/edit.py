"""Image editing handlers: source upload, clearing and submission."""

import logging
from collections.abc import AsyncIterator

import gradio as gr

from nanoart.core.data_uri import decode_to_image

from ..models import UIState
from ..state import initialize_ui_state
from .gallery import gallery_update
from .generation import format_error

logger = logging.getLogger(__name__)

EDIT_LABEL = "Edit Image"
EDIT_BUSY_LABEL = "Processing Edit..."


def _preview(state: UIState):
    source = state.edit.source_image
    if source is None:
        return None
    try:
        return decode_to_image(source.data_uri)
    except Exception as e:
        logger.warning(f"Could not decode preview for {source.filename}: {e}")
        return None


def edit_button_update(prompt: str, state: UIState) -> dict:
    """Enable the Edit button only with a prompt and a source image, while idle."""
    state = initialize_ui_state(state)
    return gr.update(value=EDIT_LABEL, interactive=state.edit.can_submit(prompt))


def upload_source_image(file_path: str | None, state: UIState) -> tuple:
    """Ingest a file chosen or dropped in the upload area.

    A rejected file leaves the previously ingested image in place.

    Args:
        file_path: Temp path of the uploaded file (None when the upload was cleared)
        state: UI state

    Returns:
        Tuple of (preview_image, error_markdown, updated_state)
    """
    state = initialize_ui_state(state)

    if not file_path:
        state.edit.clear_source()
        return None, format_error(state.edit.error), state

    state.edit.ingest_path(file_path)
    return _preview(state), format_error(state.edit.error), state


def clear_source_image(state: UIState) -> tuple[None, None, UIState]:
    """Remove the source image.

    Returns:
        Tuple of (file_input_value, preview_image, updated_state)
    """
    state = initialize_ui_state(state)
    state.edit.clear_source()
    return None, None, state


async def edit_image(prompt: str, state: UIState) -> AsyncIterator[tuple[str, dict, dict, UIState]]:
    """Submit one edit of the source image.

    Args:
        prompt: Edit instruction
        state: UI state

    Yields:
        Tuple of (error_markdown, gallery_update, edit_button_update, updated_state)
    """
    state = initialize_ui_state(state)
    workflow = state.edit

    if not workflow.can_submit(prompt):
        yield gr.update(), gr.update(), gr.update(), state
        return

    yield "", gr.update(), gr.update(value=EDIT_BUSY_LABEL, interactive=False), state

    await workflow.submit(prompt)

    yield (
        format_error(workflow.error),
        gallery_update(state),
        edit_button_update(prompt, state),
        state,
    )
