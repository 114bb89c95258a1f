"""Unit tests for validation functions."""

import pytest

from nanoart.core.requests import GenerationRequest
from nanoart.core.validation import (
    INVALID_IMAGE_MESSAGE,
    ValidationError,
    validate_generation_request,
    validate_prompt_content,
    validate_source_image,
)


class TestValidateGenerationRequest:
    """Tests for validate_generation_request function."""

    def test_valid_request(self):
        validate_generation_request(GenerationRequest("a red fox", "4:3", 2))

    def test_invalid_aspect_ratio_raises_validation_error(self):
        with pytest.raises(ValidationError, match="Aspect ratio"):
            validate_generation_request(GenerationRequest("a red fox", "21:9", 1))

    def test_invalid_count_raises_validation_error(self):
        with pytest.raises(ValidationError, match="Image count"):
            validate_generation_request(GenerationRequest("a red fox", "1:1", 10))

    def test_overlong_prompt(self):
        with pytest.raises(ValidationError, match="too long"):
            validate_generation_request(GenerationRequest("x" * 100001, "1:1", 1))


class TestValidatePromptContent:
    """Tests for validate_prompt_content function."""

    def test_normal_prompt(self, sample_prompts):
        for prompt in sample_prompts:
            validate_prompt_content(prompt)

    def test_custom_max_length(self):
        with pytest.raises(ValidationError):
            validate_prompt_content("abcdef", max_length=5)


class TestValidateSourceImage:
    """Tests for validate_source_image function."""

    @pytest.mark.parametrize("mime_type", ["image/png", "image/jpeg", "image/webp"])
    def test_images_accepted(self, mime_type):
        validate_source_image(mime_type, 100, 1000)

    @pytest.mark.parametrize("mime_type", [None, "", "text/plain", "application/pdf"])
    def test_non_images_rejected(self, mime_type):
        with pytest.raises(ValidationError) as exc_info:
            validate_source_image(mime_type, 100, 1000)
        assert str(exc_info.value) == INVALID_IMAGE_MESSAGE

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            validate_source_image("image/png", 0, 1000)

    def test_size_limit(self):
        validate_source_image("image/png", 1000, 1000)
        with pytest.raises(ValidationError, match="too large"):
            validate_source_image("image/png", 1001, 1000)
