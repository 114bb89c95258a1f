"""Validation of user input before it reaches the image service."""

import logging

from .requests import GenerationRequest

logger = logging.getLogger(__name__)

INVALID_IMAGE_MESSAGE = "Please upload a valid image file."


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_generation_request(request: GenerationRequest) -> None:
    """Validate generation parameters with user-friendly messages.

    Args:
        request: Generation request to validate

    Raises:
        ValidationError: If validation fails with user-friendly message
    """
    try:
        request.validate()
    except ValueError as e:
        raise ValidationError(str(e)) from e

    validate_prompt_content(request.prompt)


def validate_prompt_content(prompt: str, max_length: int = 100000) -> None:
    """Validate prompt text content.

    Note:
        The limit is only a guard against pasted garbage; the service enforces
        its own token limit.

    Args:
        prompt: Prompt text to validate
        max_length: Maximum allowed prompt length (default: 100,000 characters)

    Raises:
        ValidationError: If prompt is too long
    """
    if len(prompt) > max_length:
        raise ValidationError(
            f"Prompt is too long ({len(prompt)} characters). Maximum is {max_length} characters."
        )


def validate_source_image(mime_type: str | None, size: int, max_bytes: int) -> None:
    """Validate an uploaded source image before it is ingested.

    Args:
        mime_type: Declared media type of the upload (may be None if unknown)
        size: Size of the upload in bytes
        max_bytes: Largest accepted upload in bytes

    Raises:
        ValidationError: If the upload is not an image or is too large
    """
    if not mime_type or not mime_type.startswith("image/"):
        logger.warning(f"Rejected upload with media type {mime_type!r}")
        raise ValidationError(INVALID_IMAGE_MESSAGE)

    if size == 0:
        raise ValidationError("The selected file is empty.")

    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise ValidationError(
            f"Image is too large ({size / (1024 * 1024):.1f} MB). Maximum is {limit_mb:g} MB."
        )
