"""Client for the remote image generation / editing service.

This module provides :class:`GeminiImageService`, the single point of contact
with the external Gemini image model.  It exposes two coroutines:

- :meth:`~ImageServiceBase.generate`: text prompt + aspect ratio → image
- :meth:`~ImageServiceBase.edit`: text instruction + source image → image

Key Responsibilities
--------------------
- **One call, one image**: each coroutine issues exactly one request and
  returns exactly one image.  Producing several images is the caller's job.
- **No retries**: failures propagate to the caller immediately.
- **Error normalisation**: every failure (transport, authentication, quota,
  empty response, SDK misconfiguration) is converted into
  :class:`ImageServiceError`, whose ``display_message`` is never empty.
  Downstream code therefore never has to inspect foreign exception types.
- **Canonical payload**: results are returned as a data URI
  (``data:<mime>;base64,<payload>``) regardless of how the SDK delivered
  the bytes.

Usage
-----
::

    from nanoart.core.config import config
    from nanoart.core.image_service import GeminiImageService

    service = GeminiImageService(config)
    image_data = await service.generate("a lighthouse in a storm", "16:9")
"""

from __future__ import annotations

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import Any

from google import genai
from google.genai import types

from nanoart.core.config import NanoArtConfig
from nanoart.core.data_uri import encode_data_uri

logger = logging.getLogger(__name__)

GENERATE_FALLBACK_MESSAGE = "An unknown error occurred"
EDIT_FALLBACK_MESSAGE = "An unknown error occurred during editing"


class ImageServiceError(Exception):
    """Failure of a single image service call.

    The error carries an optional human-readable ``message`` taken from the
    underlying failure, plus a ``fallback`` used when no such message exists.

    Attributes:
        message: Message from the underlying failure, or None when the cause
            is unknown.
        fallback: Text shown when ``message`` is None.
    """

    def __init__(self, message: str | None = None, *, fallback: str = GENERATE_FALLBACK_MESSAGE):
        self.message = message.strip() if message and message.strip() else None
        self.fallback = fallback
        super().__init__(self.display_message)

    @property
    def display_message(self) -> str:
        """Message suitable for direct display; never empty."""
        return self.message or self.fallback

    @classmethod
    def from_exception(
        cls, exc: BaseException, fallback: str = GENERATE_FALLBACK_MESSAGE
    ) -> ImageServiceError:
        """Normalise an arbitrary exception into an ImageServiceError.

        Args:
            exc: Exception raised by the SDK or transport.
            fallback: Text to use when ``exc`` carries no message.

        Returns:
            ``exc`` itself if it is already an ImageServiceError, otherwise a
            new error wrapping its message.
        """
        if isinstance(exc, ImageServiceError):
            return exc
        return cls(str(exc) or None, fallback=fallback)


class ImageServiceBase(ABC):
    """Contract of the external image service as seen by the workflows."""

    @abstractmethod
    async def generate(self, prompt: str, aspect_ratio: str) -> str:
        """Generate one image from a text prompt.

        Args:
            prompt: Non-empty text prompt.
            aspect_ratio: One of the supported aspect ratios (e.g. ``"16:9"``).

        Returns:
            The generated image as a data URI.

        Raises:
            ImageServiceError: On any failure.
        """

    @abstractmethod
    async def edit(self, prompt: str, source_image_base64: str, source_mime_type: str) -> str:
        """Edit one image according to a text instruction.

        Args:
            prompt: Non-empty edit instruction.
            source_image_base64: Base64 payload of the source image, without
                any data-URI prefix.
            source_mime_type: Declared MIME type of the source (``image/*``).

        Returns:
            The edited image as a data URI.

        Raises:
            ImageServiceError: On any failure.
        """

    def close(self) -> None:
        """Release any client resources.  Default is a no-op."""


class GeminiImageService(ImageServiceBase):
    """Image service backed by the Gemini image model via ``google-genai``.

    The SDK client is created lazily on the first call so that constructing
    the service (e.g. when a UI session starts) never touches the network or
    fails on a missing API key.  A missing key therefore surfaces as an
    ordinary :class:`ImageServiceError` on the first request.

    Attributes:
        _config (NanoArtConfig):
            Application configuration: API key and model id.
        _client:
            Lazily created ``genai.Client``, or ``None``.
    """

    def __init__(self, config: NanoArtConfig, client: Any | None = None) -> None:
        """Initialise the service.

        Args:
            config: Application configuration.
            client: Optional pre-built ``genai.Client`` (used by tests).
        """
        self._config = config
        self._client = client

    @property
    def model_id(self) -> str:
        """Remote model identifier used for every call."""
        return self._config.model_id

    def _get_client(self) -> Any:
        if self._client is None:
            logger.info(f"Creating google-genai client for model {self.model_id}")
            self._client = genai.Client(api_key=self._config.api_key())
        return self._client

    # -- Public interface ---------------------------------------------------

    async def generate(self, prompt: str, aspect_ratio: str) -> str:
        logger.info(f"Requesting generation (aspect_ratio={aspect_ratio})")
        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model_id,
                contents=[types.Part.from_text(text=prompt)],
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE", "TEXT"],
                    image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
                ),
            )
            return self._extract_image(response)
        except ImageServiceError:
            raise
        except Exception as e:
            raise ImageServiceError.from_exception(e, GENERATE_FALLBACK_MESSAGE) from e

    async def edit(self, prompt: str, source_image_base64: str, source_mime_type: str) -> str:
        logger.info(f"Requesting edit (source mime={source_mime_type})")
        try:
            try:
                source_bytes = base64.b64decode(source_image_base64, validate=True)
            except binascii.Error as e:
                raise ImageServiceError(
                    f"Source image payload is not valid base64: {e}",
                    fallback=EDIT_FALLBACK_MESSAGE,
                ) from e

            response = await self._get_client().aio.models.generate_content(
                model=self.model_id,
                contents=[
                    types.Part.from_bytes(data=source_bytes, mime_type=source_mime_type),
                    types.Part.from_text(text=prompt),
                ],
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE", "TEXT"],
                ),
            )
            return self._extract_image(response, fallback=EDIT_FALLBACK_MESSAGE)
        except ImageServiceError:
            raise
        except Exception as e:
            raise ImageServiceError.from_exception(e, EDIT_FALLBACK_MESSAGE) from e

    def close(self) -> None:
        self._client = None

    # -- Internal helpers ---------------------------------------------------

    @staticmethod
    def _extract_image(response: Any, fallback: str = GENERATE_FALLBACK_MESSAGE) -> str:
        """Return the first inline image of a response as a data URI.

        The model may answer with text only (for example when it declines a
        prompt).  That text is the most useful explanation available, so it
        becomes the error message.

        Raises:
            ImageServiceError: If the response contains no image part.
        """
        texts: list[str] = []

        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline = getattr(part, "inline_data", None)
                if inline is not None and inline.data:
                    mime_type = inline.mime_type or "image/png"
                    if not mime_type.startswith("image/"):
                        continue
                    data = inline.data
                    if isinstance(data, str):
                        # Some SDK versions hand back base64 text instead of bytes.
                        data = base64.b64decode(data)
                    logger.info(f"Received image ({len(data)} bytes, mime={mime_type})")
                    return encode_data_uri(data, mime_type)
                text = getattr(part, "text", None)
                if text:
                    texts.append(text.strip())

        if texts:
            raise ImageServiceError(f"No image was returned: {' '.join(texts)}", fallback=fallback)
        raise ImageServiceError("No image was returned by the model.", fallback=fallback)
