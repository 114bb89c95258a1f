"""NanoArt Studio - Text-to-image generation and instruction-based image editing."""

__version__ = "0.3.0"

from nanoart.core.config import NanoArtConfig, config
from nanoart.core.gallery import GalleryState, GeneratedImageRecord
from nanoart.core.image_service import GeminiImageService, ImageServiceBase, ImageServiceError

__all__ = [
    "GalleryState",
    "GeneratedImageRecord",
    "GeminiImageService",
    "ImageServiceBase",
    "ImageServiceError",
    "NanoArtConfig",
    "config",
]
