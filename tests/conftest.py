"""Shared pytest fixtures for NanoArt tests."""

import io
import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from nanoart.core.config import NanoArtConfig
from nanoart.core.data_uri import encode_data_uri
from nanoart.core.gallery import GalleryState
from nanoart.core.image_service import ImageServiceBase
from nanoart.ui.models import UIState
from nanoart.ui.state import initialize_ui_state


def make_png(color: str = "red", size: tuple[int, int] = (4, 4)) -> bytes:
    """Encode a tiny solid-color PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> NanoArtConfig:
    """Create a test configuration with temporary directories.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        NanoArtConfig instance for testing
    """
    return NanoArtConfig(
        gemini_api_key="test-key",
        model_id="gemini-test-image",
        downloads_dir=temp_dir / "downloads",
        _env_file=None,
    )


@pytest.fixture
def png_factory():
    """Factory for tiny PNGs of a given color."""
    return make_png


@pytest.fixture
def png_bytes() -> bytes:
    """Raw bytes of a 4x4 red PNG."""
    return make_png()


@pytest.fixture
def png_data_uri(png_bytes: bytes) -> str:
    """The red PNG as a data URI."""
    return encode_data_uri(png_bytes, "image/png")


@pytest.fixture
def png_file(temp_dir: Path, png_bytes: bytes) -> Path:
    """The red PNG written to disk, as the browser upload would be."""
    path = temp_dir / "source.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def image_service(png_data_uri: str) -> MagicMock:
    """Image service double.

    ``generate`` and ``edit`` are AsyncMocks returning the red PNG; tests
    script failures through ``side_effect``.
    """
    service = MagicMock(spec=ImageServiceBase)
    service.generate = AsyncMock(return_value=png_data_uri)
    service.edit = AsyncMock(return_value=png_data_uri)
    return service


@pytest.fixture
def gallery() -> GalleryState:
    """Empty gallery."""
    return GalleryState()


@pytest.fixture
def ui_state(image_service: MagicMock, test_config: NanoArtConfig) -> UIState:
    """Fully initialized UI state wired to the service double.

    Returns:
        UIState instance
    """
    return initialize_ui_state(UIState(), image_service=image_service, app_config=test_config)


@pytest.fixture
def sample_prompts() -> list[str]:
    """Sample prompts for testing.

    Returns:
        List of test prompts
    """
    return [
        "A red fox in the snow",
        "A watercolor lighthouse on a cliff at dawn, soft light",
        "Cat",
        "A very long prompt " * 20,
    ]
