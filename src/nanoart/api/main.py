"""NanoArt Studio FastAPI application.

This module is the single entry point for the web application. It defines
the FastAPI ``app`` instance, the REST API routes, the mounted Gradio UI and
the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`~nanoart.core.config.config`
  (``NANOART_*`` environment variables and ``.env``).
- **Image generation and editing** are delegated to the workflow controllers
  of one application-wide session (:class:`~nanoart.ui.models.UIState`),
  created in the lifespan handler.
- **The gallery** lives in memory for the lifetime of the process.
- **The browser UI** is the Gradio app from :mod:`nanoart.ui.app`, mounted
  at ``/ui``. Each browser session has its own gallery.

Endpoints
---------
========  ================================  ==================================
Method    Path                              Purpose
========  ================================  ==================================
GET       ``/``                             Redirect to the Gradio UI
GET       ``/api/config``                   Model, aspect ratios, limits
POST      ``/api/generate``                 NDJSON stream of generation events
POST      ``/api/edit``                     Edit a data-URI source image
GET       ``/api/gallery``                  Gallery records, newest first
GET       ``/api/gallery/{id}``             Single gallery record
GET       ``/api/gallery/{id}/download``    Image bytes as an attachment
DELETE    ``/api/gallery/{id}``             Remove a gallery record
========  ================================  ==================================

Usage
-----
CLI (installed entry point)::

    nanoart

Direct invocation::

    python -m nanoart.api.main
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import RedirectResponse, Response, StreamingResponse

from nanoart import __version__
from nanoart.api.models import EditRequest, GenerateRequest
from nanoart.core.config import ASPECT_RATIOS, MAX_IMAGE_COUNT, MIN_IMAGE_COUNT, config
from nanoart.core.data_uri import decode_data_uri, extension_for_mime
from nanoart.core.requests import GenerationRequest
from nanoart.core.validation import ValidationError, validate_prompt_content
from nanoart.ui.app import create_ui
from nanoart.ui.models import UIState
from nanoart.ui.state import cleanup_ui_state, initialize_ui_state
from nanoart.workflows import ErrorEvent, ImageAddedEvent, ProgressEvent, WorkflowEvent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application lifecycle: session setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Creates the API session (gallery, image service client and workflow
        controllers) and stores it on ``app.state``. The service client
        itself is created lazily on the first request.

    On shutdown:
        Releases the service client and drops the gallery.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    # --- Startup -----------------------------------------------------------
    app.state.ui_state = initialize_ui_state()
    logger.info("API session initialised.")

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    cleanup_ui_state(app.state.ui_state)
    logger.info("API session cleaned up on shutdown.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="NanoArt Studio",
    description="Text-to-image generation and instruction-based image editing.",
    version=__version__,
    lifespan=lifespan,
)


def _session(request: Request) -> UIState:
    return request.app.state.ui_state


def _require_prompt(prompt: str) -> None:
    """Reject empty or oversized prompts with a 400."""
    if not prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must not be empty")
    try:
        validate_prompt_content(prompt)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _event_to_dict(event: WorkflowEvent) -> dict:
    """Serialise a workflow event as one NDJSON line payload."""
    if isinstance(event, ProgressEvent):
        return {
            "type": "progress",
            "current": event.progress.current,
            "total": event.progress.total,
        }
    if isinstance(event, ImageAddedEvent):
        return {"type": "image", "image": event.record.to_dict()}
    if isinstance(event, ErrorEvent):
        return {"type": "error", "message": event.message}
    raise TypeError(f"Unknown workflow event: {event!r}")


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/")
async def index() -> RedirectResponse:
    """Redirect the browser to the Gradio UI."""
    return RedirectResponse(url="/ui")


@app.get("/api/config")
async def get_config() -> dict:
    """Return the client-facing configuration.

    Returns:
        Dictionary with keys ``version``, ``model_id``, ``aspect_ratios``,
        ``min_count``, ``max_count``, ``max_upload_mb`` and ``defaults``.
    """
    return {
        "version": __version__,
        "model_id": config.model_id,
        "aspect_ratios": list(ASPECT_RATIOS),
        "min_count": MIN_IMAGE_COUNT,
        "max_count": MAX_IMAGE_COUNT,
        "max_upload_mb": config.max_upload_mb,
        "defaults": {
            "prompt": config.default_prompt,
            "aspect_ratio": config.default_aspect_ratio,
            "count": config.default_count,
        },
    }


@app.post("/api/generate")
async def generate_images(req: GenerateRequest, request: Request) -> StreamingResponse:
    """Generate ``count`` images sequentially, streaming progress as NDJSON.

    Each line of the response body is one JSON object:

    - ``{"type": "progress", "current": i, "total": N}`` before image *i*
    - ``{"type": "image", "image": {...}}`` once image *i* is in the gallery
    - ``{"type": "error", "message": "..."}`` if the run stopped early

    Images produced before a failure stay in the gallery. The run keeps
    going if the client disconnects.

    Raises:
        HTTPException: 400 for an empty prompt, 409 if a generation run is
            already in progress.
    """
    _require_prompt(req.prompt)

    generation_request = GenerationRequest(
        prompt=req.prompt, aspect_ratio=req.aspect_ratio, count=req.count
    )

    # start() marks the controller busy before the response is returned
    events = _session(request).generation.start(generation_request)
    if events is None:
        raise HTTPException(status_code=409, detail="A generation run is already in progress")

    async def event_stream() -> AsyncIterator[str]:
        async for event in events:
            yield json.dumps(_event_to_dict(event)) + "\n"

    return StreamingResponse(event_stream(), media_type="application/x-ndjson")


@app.post("/api/edit")
async def edit_image(req: EditRequest, request: Request) -> dict:
    """Edit a source image according to an instruction.

    Returns:
        The new gallery record (its ``source_prompt`` is ``"Edit: <prompt>"``).

    Raises:
        HTTPException: 400 for an empty prompt or an invalid/non-image source,
            409 if an edit is already in progress, 502 if the image service
            failed.
    """
    _require_prompt(req.prompt)

    workflow = _session(request).edit
    if workflow.is_busy:
        raise HTTPException(status_code=409, detail="An edit is already in progress")

    try:
        data, mime_type = decode_data_uri(req.source_image)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if workflow.ingest(data, mime_type) is None:
        raise HTTPException(status_code=400, detail=workflow.error)

    record = await workflow.submit(req.prompt)
    if record is None:
        raise HTTPException(status_code=502, detail=workflow.error or workflow.fallback_message)

    return record.to_dict()


@app.get("/api/gallery")
async def list_gallery(request: Request) -> dict:
    """Return all gallery records, newest first.

    Returns:
        Dictionary with keys ``images`` and ``total``.
    """
    gallery = _session(request).gallery
    return {
        "images": [record.to_dict() for record in gallery],
        "total": len(gallery),
    }


@app.get("/api/gallery/{image_id}")
async def get_gallery_image(image_id: str, request: Request) -> dict:
    """Return a single gallery record.

    Raises:
        HTTPException: 404 if the image is not found.
    """
    record = _session(request).gallery.get(image_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return record.to_dict()


@app.get("/api/gallery/{image_id}/download")
async def download_gallery_image(image_id: str, request: Request) -> Response:
    """Return the decoded image bytes as a file attachment.

    The file is named ``nanoart-<id>.<ext>``.

    Raises:
        HTTPException: 404 if the image is not found.
    """
    record = _session(request).gallery.get(image_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Image not found")

    data, mime_type = decode_data_uri(record.image_data)
    filename = f"nanoart-{record.id}.{extension_for_mime(mime_type)}"
    return Response(
        content=data,
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.delete("/api/gallery/{image_id}")
async def delete_gallery_image(image_id: str, request: Request) -> dict:
    """Remove a record from the gallery.

    Raises:
        HTTPException: 404 if the image is not found.
    """
    if not _session(request).gallery.remove_by_id(image_id):
        raise HTTPException(status_code=404, detail="Image not found")

    logger.info(f"Deleted gallery image {image_id}")
    return {"success": True, "deleted": image_id}


# ---------------------------------------------------------------------------
# Gradio UI, mounted last so the API routes take precedence.
# ---------------------------------------------------------------------------
app = gr.mount_gradio_app(app, create_ui(), path="/ui")


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~nanoart.core.config.config` (which
    loads from ``NANOART_SERVER_HOST`` and ``NANOART_SERVER_PORT``
    environment variables). Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``nanoart`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "nanoart.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
