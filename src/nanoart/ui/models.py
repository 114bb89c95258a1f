"""Data models for NanoArt UI state."""

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own UIState, so every session has its own
    gallery and its own workflow controllers.  Reloading the page creates a
    fresh state, which is why nothing here outlives a session.

    Attributes
    ----------
    gallery : Any | None
        GalleryState shared by both workflows
    image_service : Any | None
        ImageServiceBase instance used by both workflows
    generation : Any | None
        GenerationWorkflow controller
    edit : Any | None
        EditWorkflow controller
    selected_image_id : str | None
        Gallery record currently selected for download/delete
    """

    gallery: Any | None = None  # GalleryState instance
    image_service: Any | None = None  # ImageServiceBase instance
    generation: Any | None = None  # GenerationWorkflow instance
    edit: Any | None = None  # EditWorkflow instance
    selected_image_id: str | None = None

    def is_initialized(self) -> bool:
        """Check if the state has been initialized with core components.

        Returns:
            True if the gallery, service and both workflows exist
        """
        return (
            self.gallery is not None
            and self.image_service is not None
            and self.generation is not None
            and self.edit is not None
        )

    def __repr__(self) -> str:
        """String representation for debugging."""
        gallery_size = len(self.gallery) if self.gallery is not None else 0
        return f"UIState(initialized={self.is_initialized()}, gallery={gallery_size})"


# Dropdown labels for the supported aspect ratios
ASPECT_RATIO_CHOICES = [
    ("Square (1:1)", "1:1"),
    ("Landscape (16:9)", "16:9"),
    ("Portrait (9:16)", "9:16"),
    ("Standard (4:3)", "4:3"),
    ("Vertical (3:4)", "3:4"),
]
