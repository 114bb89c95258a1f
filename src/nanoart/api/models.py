"""Pydantic request models for the NanoArt HTTP API.

FastAPI uses these for request validation (schema violations become 422
responses) and for the generated OpenAPI documentation.

Models
------
GenerateRequest
    Payload for ``POST /api/generate``.
EditRequest
    Payload for ``POST /api/edit``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from nanoart.core.config import MAX_IMAGE_COUNT, MIN_IMAGE_COUNT, AspectRatio


class GenerateRequest(BaseModel):
    """Request body for the ``POST /api/generate`` endpoint.

    Attributes:
        prompt: Text description of the image(s) to create.
        aspect_ratio: One of ``1:1``, ``16:9``, ``9:16``, ``4:3``, ``3:4``.
        count: Number of images to generate, one request after another.
    """

    prompt: str = Field(
        ...,
        description="Text prompt. Must contain non-whitespace characters.",
    )
    aspect_ratio: AspectRatio = Field(
        default="16:9",
        description="Aspect ratio of the generated images.",
    )
    count: int = Field(
        default=1,
        ge=MIN_IMAGE_COUNT,
        le=MAX_IMAGE_COUNT,
        description="Number of images to generate (1-5).",
    )


class EditRequest(BaseModel):
    """Request body for the ``POST /api/edit`` endpoint.

    Attributes:
        prompt: Edit instruction.
        source_image: Source image as a ``data:<mime>;base64,<payload>`` URI.
    """

    prompt: str = Field(..., description="Edit instruction.")
    source_image: str = Field(
        ...,
        description="Source image as a base64 data URI.",
    )
