"""Configuration management for NanoArt Studio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the NANOART_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (NANOART_* prefix)
2. .env file in the project root
3. Default values defined in NanoArtConfig

Example .env file:
    NANOART_GEMINI_API_KEY=your-key-here
    NANOART_MODEL_ID=gemini-2.5-flash-image
    NANOART_DEFAULT_ASPECT_RATIO=16:9
    NANOART_SERVER_PORT=7860

API Key Resolution
------------------
``gemini_api_key`` is optional.  When it is not set, the google-genai SDK
falls back to its own ``GEMINI_API_KEY`` / ``GOOGLE_API_KEY`` environment
variables, so an existing Gemini setup works without extra configuration.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from nanoart.core.config import config

    print(config.model_id)
    print(config.default_aspect_ratio)
"""

import tempfile
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Aspect ratios accepted by the image service, in display order.
ASPECT_RATIOS: tuple[str, ...] = ("1:1", "16:9", "9:16", "4:3", "3:4")

AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4"]

MIN_IMAGE_COUNT = 1
MAX_IMAGE_COUNT = 5


class NanoArtConfig(BaseSettings):
    """Main configuration for NanoArt Studio.

    Values are loaded from environment variables with the NANOART_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    Service Settings:
        gemini_api_key : SecretStr | None
            API key for the Gemini image service (SDK env fallback when unset)
        model_id : str
            Remote model used for both generation and editing

    Generation Defaults:
        default_prompt : str
            Prompt pre-filled in the Generate tab
        default_aspect_ratio : AspectRatio
            Aspect ratio selected by default
        default_count : int
            Number of images requested by default (1-5)

    Edit Settings:
        max_upload_mb : float
            Largest accepted source image, in megabytes

    Paths:
        downloads_dir : Path
            Scratch directory for files handed to the browser for download

    Server Settings:
        server_host : str
            Bind address for the HTTP server and UI
        server_port : int
            Port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)
        log_level : str
            Root logging level

    Examples
    --------
        >>> custom_config = NanoArtConfig(
        ...     model_id="gemini-2.5-flash-image",
        ...     default_aspect_ratio="1:1",
        ...     default_count=3,
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NANOART_",
        case_sensitive=False,
        extra="ignore",
    )

    # Service settings
    gemini_api_key: SecretStr | None = Field(
        default=None,
        description="Gemini API key (falls back to GEMINI_API_KEY/GOOGLE_API_KEY)",
    )
    model_id: str = Field(
        default="gemini-2.5-flash-image",
        description="Remote model used for generation and editing",
    )

    # Generation defaults
    default_prompt: str = Field(
        default="A serene mountain landscape at sunset with vibrant colors",
        description="Prompt pre-filled in the Generate tab",
    )
    default_aspect_ratio: AspectRatio = Field(
        default="16:9",
        description="Aspect ratio selected by default",
    )
    default_count: int = Field(
        default=1,
        description="Number of images requested by default",
        ge=MIN_IMAGE_COUNT,
        le=MAX_IMAGE_COUNT,
    )

    # Edit settings
    max_upload_mb: float = Field(
        default=5.0,
        description="Largest accepted source image in megabytes",
        gt=0,
    )

    # Paths
    downloads_dir: Path = Field(
        default=Path(tempfile.gettempdir()) / "nanoart",
        description="Scratch directory for browser downloads",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root logging level",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the downloads directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.downloads_dir.mkdir(parents=True, exist_ok=True)

    @property
    def max_upload_bytes(self) -> int:
        """Upload limit in bytes."""
        return int(self.max_upload_mb * 1024 * 1024)

    def api_key(self) -> str | None:
        """Return the plain API key, or None to let the SDK resolve it."""
        if self.gemini_api_key is None:
            return None
        return self.gemini_api_key.get_secret_value() or None


# Global configuration instance
# Loads values from environment variables (NANOART_* prefix) and .env file.
config = NanoArtConfig()
