"""State management utilities for NanoArt UI.

This module handles the initialization and teardown of a session's state:
the gallery, the image service client and the two workflow controllers.
"""

import logging

from nanoart.core.config import NanoArtConfig, config
from nanoart.core.gallery import GalleryState
from nanoart.core.image_service import GeminiImageService, ImageServiceBase
from nanoart.workflows import EditWorkflow, GenerationWorkflow

from .models import UIState

logger = logging.getLogger(__name__)


def initialize_ui_state(
    state: UIState | None = None,
    image_service: ImageServiceBase | None = None,
    app_config: NanoArtConfig | None = None,
) -> UIState:
    """Initialize or ensure UI state is ready.

    If state is None or uninitialized, the missing components are created.
    Components that already exist are left alone, so calling this at the
    start of every handler is cheap.

    Args:
        state: Existing UIState or None
        image_service: Service to use instead of the Gemini client (optional)
        app_config: Configuration to use (default: global config)

    Returns:
        Initialized UIState instance
    """
    cfg = app_config or config

    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.is_initialized():
        logger.debug("UIState already initialized")
        return state

    logger.info("Initializing UIState components...")

    if state.gallery is None:
        state.gallery = GalleryState()

    if state.image_service is None:
        state.image_service = image_service or GeminiImageService(cfg)
        logger.info(f"Image service ready: {type(state.image_service).__name__}")

    if state.generation is None:
        state.generation = GenerationWorkflow(state.image_service, state.gallery)

    if state.edit is None:
        state.edit = EditWorkflow(
            state.image_service, state.gallery, max_upload_bytes=cfg.max_upload_bytes
        )

    logger.info(f"UIState initialization complete: {state}")
    return state


def cleanup_ui_state(state: UIState) -> None:
    """Clean up UI state resources.

    This should be called when a session ends to free resources.

    Args:
        state: UI state to clean up
    """
    logger.info("Cleaning up UIState resources")

    if state.image_service is not None:
        try:
            state.image_service.close()
        except Exception as e:
            logger.error(f"Error closing image service: {e}")

    state.image_service = None
    state.generation = None
    state.edit = None
    state.gallery = None
    state.selected_image_id = None

    logger.info("UIState cleanup complete")
