"""Request types consumed by the workflow controllers."""

from dataclasses import dataclass

from .config import ASPECT_RATIOS, MAX_IMAGE_COUNT, MIN_IMAGE_COUNT
from .data_uri import strip_data_uri_prefix


@dataclass(frozen=True)
class SourceImage:
    """An ingested source image for the edit workflow.

    ``data_uri`` is the preview form (it embeds the MIME type);
    ``mime_type`` is kept separately because the service request needs it
    next to the bare payload.
    """

    data_uri: str
    mime_type: str
    filename: str = ""

    @property
    def payload(self) -> str:
        """Base64 payload with the data-URI prefix stripped."""
        return strip_data_uri_prefix(self.data_uri)


@dataclass
class GenerationRequest:
    """Parameters for one text-to-image run.

    An empty prompt is not a validation error: the workflow simply refuses
    to start.  Everything else is checked by :meth:`validate`.
    """

    prompt: str
    aspect_ratio: str = "16:9"
    count: int = 1

    def validate(self) -> None:
        """Validate generation parameters.

        Raises:
            ValueError: If any parameter is invalid, with descriptive message
        """
        if self.aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(
                f"Aspect ratio must be one of {', '.join(ASPECT_RATIOS)}, got {self.aspect_ratio}"
            )

        if not isinstance(self.count, int) or isinstance(self.count, bool):
            raise ValueError(f"Image count must be a whole number, got {self.count!r}")

        if self.count < MIN_IMAGE_COUNT or self.count > MAX_IMAGE_COUNT:
            raise ValueError(
                f"Image count must be {MIN_IMAGE_COUNT}-{MAX_IMAGE_COUNT}, got {self.count}"
            )


@dataclass
class EditRequest:
    """Parameters for one instruction-based edit."""

    prompt: str
    source_image: SourceImage | None = None

    def is_ready(self) -> bool:
        """Both a non-empty prompt and a source image are present."""
        return bool(self.prompt and self.prompt.strip()) and self.source_image is not None
