"""Core functionality for NanoArt Studio.

This package holds the pieces that do not depend on any UI toolkit:

- **config**: Pydantic Settings configuration (``NANOART_*`` environment)
- **data_uri**: Encoding/decoding of inline ``data:`` image payloads
- **image_service**: Client for the remote Gemini image model
- **gallery**: Immutable image records and the session-scoped gallery
- **requests** and **validation**: Workflow request types and input checks

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with NANOART_ in .env files

2. **Service Layer** (image_service.py):
   - One request, one image; no retries
   - All failures normalised into ImageServiceError

3. **State Layer** (gallery.py):
   - Newest-first, in-memory gallery owned by a session
   - Mutated only by prepend and remove-by-id

The workflow controllers in :mod:`nanoart.workflows` combine these layers.
"""

from .config import ASPECT_RATIOS, MAX_IMAGE_COUNT, MIN_IMAGE_COUNT, NanoArtConfig, config
from .gallery import EDIT_PROMPT_PREFIX, GalleryState, GeneratedImageRecord
from .image_service import GeminiImageService, ImageServiceBase, ImageServiceError

__all__ = [
    "ASPECT_RATIOS",
    "EDIT_PROMPT_PREFIX",
    "MAX_IMAGE_COUNT",
    "MIN_IMAGE_COUNT",
    "GalleryState",
    "GeneratedImageRecord",
    "GeminiImageService",
    "ImageServiceBase",
    "ImageServiceError",
    "NanoArtConfig",
    "config",
]
