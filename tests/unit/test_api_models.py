"""Tests for nanoart.api.models: Pydantic request models.

Tests cover:
- Required field validation.
- Default values for optional fields.
- Aspect ratio and image count constraints.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from nanoart.api.models import EditRequest, GenerateRequest


class TestGenerateRequest:
    """Test GenerateRequest Pydantic model."""

    def test_valid_minimal_request(self):
        """Only the prompt is required."""
        req = GenerateRequest(prompt="A goblin workshop.")
        assert req.aspect_ratio == "16:9"
        assert req.count == 1

    def test_missing_prompt_raises(self):
        with pytest.raises(ValidationError):
            GenerateRequest(aspect_ratio="1:1")

    def test_unknown_aspect_ratio_raises(self):
        with pytest.raises(ValidationError):
            GenerateRequest(prompt="a fox", aspect_ratio="2:1")

    @pytest.mark.parametrize("count", [0, 6])
    def test_count_out_of_range_raises(self, count):
        with pytest.raises(ValidationError):
            GenerateRequest(prompt="a fox", count=count)

    @pytest.mark.parametrize("count", [1, 5])
    def test_count_bounds_accepted(self, count):
        assert GenerateRequest(prompt="a fox", count=count).count == count


class TestEditRequest:
    """Test EditRequest Pydantic model."""

    def test_valid_request(self, png_data_uri):
        req = EditRequest(prompt="make it blue", source_image=png_data_uri)
        assert req.source_image == png_data_uri

    def test_source_image_required(self):
        with pytest.raises(ValidationError):
            EditRequest(prompt="make it blue")
