"""Gallery display, selection, download and delete handlers."""

import logging
from datetime import datetime
from pathlib import Path

import gradio as gr
from PIL import Image

from nanoart.core.config import config
from nanoart.core.data_uri import decode_data_uri, decode_to_image, extension_for_mime
from nanoart.core.gallery import GalleryState, GeneratedImageRecord

from ..models import UIState
from ..state import initialize_ui_state

logger = logging.getLogger(__name__)


def format_caption(record: GeneratedImageRecord, model_label: str | None = None) -> str:
    """Build the caption shown under a gallery image.

    Args:
        record: Gallery record
        model_label: Model name appended to the caption (default: configured model)

    Returns:
        "<prompt> · <local time> · <model>"
    """
    created = datetime.fromtimestamp(record.created_at / 1000).strftime("%H:%M:%S")
    return f"{record.source_prompt} · {created} · {model_label or config.model_id}"


def gallery_items(gallery: GalleryState | None) -> list[tuple[Image.Image, str]]:
    """Convert gallery records into Gradio gallery items, newest first.

    Records whose payload cannot be decoded are skipped (and logged) rather
    than breaking the whole gallery view.
    """
    if gallery is None:
        return []

    items = []
    for record in gallery:
        try:
            items.append((decode_to_image(record.image_data), format_caption(record)))
        except Exception as e:
            logger.error(f"Could not decode gallery record {record.id}: {e}")
    return items


def gallery_update(state: UIState) -> dict:
    """Gradio update that re-renders the gallery and its count heading."""
    count = len(state.gallery) if state.gallery is not None else 0
    return gr.update(value=gallery_items(state.gallery), label=f"Gallery ({count})")


def write_download_file(record: GeneratedImageRecord, directory: Path) -> Path:
    """Write a record's image to disk so the browser can download it.

    Args:
        record: Gallery record to export
        directory: Target directory

    Returns:
        Path of the written file, named ``nanoart-<id>.<ext>``
    """
    data, mime_type = decode_data_uri(record.image_data)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"nanoart-{record.id}.{extension_for_mime(mime_type)}"
    path.write_bytes(data)
    logger.info(f"Prepared download: {path}")
    return path


def refresh_gallery(state: UIState) -> tuple[dict, UIState]:
    """Re-render the gallery from state.

    Args:
        state: UI state

    Returns:
        Tuple of (gallery_update, updated_state)
    """
    state = initialize_ui_state(state)
    return gallery_update(state), state


def select_gallery_image(evt: gr.SelectData, state: UIState) -> tuple[dict, dict, UIState]:
    """Select a gallery image for download/delete.

    Args:
        evt: Gradio SelectData event containing selected index
        state: UI state

    Returns:
        Tuple of (download_button_update, delete_button_update, updated_state)
    """
    try:
        state = initialize_ui_state(state)

        records = state.gallery.records
        selected_index = evt.index
        if selected_index is None or selected_index >= len(records):
            state.selected_image_id = None
            return gr.update(value=None, interactive=False), gr.update(interactive=False), state

        record = records[selected_index]
        state.selected_image_id = record.id

        path = write_download_file(record, config.downloads_dir)
        return gr.update(value=str(path), interactive=True), gr.update(interactive=True), state

    except Exception as e:
        logger.error(f"Error selecting gallery image: {e}", exc_info=True)
        return gr.update(value=None, interactive=False), gr.update(interactive=False), state


def delete_selected_image(state: UIState) -> tuple[dict, dict, dict, UIState]:
    """Remove the selected image from the gallery.

    Args:
        state: UI state

    Returns:
        Tuple of (gallery_update, download_button_update, delete_button_update, updated_state)
    """
    state = initialize_ui_state(state)

    if state.selected_image_id is None:
        return gr.update(), gr.update(), gr.update(interactive=False), state

    removed = state.gallery.remove_by_id(state.selected_image_id)
    logger.info(f"Delete {state.selected_image_id}: removed={removed}")
    state.selected_image_id = None

    return (
        gallery_update(state),
        gr.update(value=None, interactive=False),
        gr.update(interactive=False),
        state,
    )
