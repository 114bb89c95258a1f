"""Text-to-image generation handlers."""

import logging
from collections.abc import AsyncIterator

import gradio as gr

from nanoart.core.requests import GenerationRequest
from nanoart.workflows import ImageAddedEvent, ProgressEvent

from ..models import UIState
from ..state import initialize_ui_state
from .gallery import gallery_update

logger = logging.getLogger(__name__)

GENERATE_LABEL = "Generate"


def format_error(error: str | None) -> str:
    """Render a display error as markdown (empty when there is none)."""
    return f"❌ {error}" if error else ""


def generate_button_update(prompt: str, state: UIState) -> dict:
    """Enable the Generate button only for a non-empty prompt while idle."""
    state = initialize_ui_state(state)
    return gr.update(
        value=GENERATE_LABEL, interactive=state.generation.can_submit(prompt)
    )


async def generate_images(
    prompt: str, aspect_ratio: str, count: float, state: UIState
) -> AsyncIterator[tuple[str, dict, dict, UIState]]:
    """Generate ``count`` images one after another, streaming progress.

    Each yielded tuple refreshes the error display, the gallery and the
    Generate button; the gallery is re-rendered as soon as each image
    arrives, so earlier images stay visible even if a later one fails.

    Args:
        prompt: Text prompt
        aspect_ratio: One of the supported aspect ratios
        count: Number of images (slider value)
        state: UI state

    Yields:
        Tuple of (error_markdown, gallery_update, generate_button_update, updated_state)
    """
    state = initialize_ui_state(state)
    workflow = state.generation

    if not workflow.can_submit(prompt):
        yield gr.update(), gr.update(), gr.update(), state
        return

    request = GenerationRequest(prompt=prompt, aspect_ratio=aspect_ratio, count=int(count))

    async for event in workflow.submit(request):
        if isinstance(event, ProgressEvent):
            progress = event.progress
            label = f"Generating Image {progress.current} of {progress.total}..."
            yield "", gr.update(), gr.update(value=label, interactive=False), state
        elif isinstance(event, ImageAddedEvent):
            yield "", gallery_update(state), gr.update(), state

    yield (
        format_error(workflow.error),
        gallery_update(state),
        generate_button_update(prompt, state),
        state,
    )
