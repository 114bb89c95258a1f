"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events, organized into logical modules:
- generation: Text-to-image runs with streamed progress
- edit: Source image upload and instruction-based editing
- gallery: Gallery rendering, selection, download and delete
"""

from .edit import (
    clear_source_image,
    edit_button_update,
    edit_image,
    upload_source_image,
)
from .gallery import (
    delete_selected_image,
    gallery_items,
    gallery_update,
    refresh_gallery,
    select_gallery_image,
    write_download_file,
)
from .generation import (
    format_error,
    generate_button_update,
    generate_images,
)

__all__ = [
    # Generation handlers
    "format_error",
    "generate_button_update",
    "generate_images",
    # Edit handlers
    "clear_source_image",
    "edit_button_update",
    "edit_image",
    "upload_source_image",
    # Gallery handlers
    "delete_selected_image",
    "gallery_items",
    "gallery_update",
    "refresh_gallery",
    "select_gallery_image",
    "write_download_file",
]
