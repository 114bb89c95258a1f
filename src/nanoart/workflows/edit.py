"""Instruction-based image editing workflow.

Editing has two independent parts:

1. **Source ingestion**: the user picks or drops a file.  It is validated
   (declared media type must start with ``image/``), turned into a data URI
   for preview, and kept together with its raw MIME type.  Ingestion is not
   part of the state machine and can happen at any time.
2. **Submission**: one service call with the instruction, the bare base64
   payload and the MIME type, producing exactly one gallery record.
"""

import logging
import mimetypes
from pathlib import Path

from nanoart.core.data_uri import encode_data_uri
from nanoart.core.gallery import EDIT_PROMPT_PREFIX, GeneratedImageRecord
from nanoart.core.image_service import EDIT_FALLBACK_MESSAGE
from nanoart.core.requests import EditRequest, SourceImage
from nanoart.core.validation import ValidationError, validate_prompt_content, validate_source_image

from .base import WorkflowBase, WorkflowStatus

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class EditWorkflow(WorkflowBase):
    """Controller for the Edit mode.

    Attributes
    ----------
    source_image : SourceImage | None
        The ingested source image, or None if nothing has been uploaded
    """

    name = "Edit"
    busy_status = WorkflowStatus.EDITING
    fallback_message = EDIT_FALLBACK_MESSAGE

    def __init__(self, service, gallery, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
        super().__init__(service, gallery)
        self.max_upload_bytes = max_upload_bytes
        self.source_image: SourceImage | None = None

    # -- Source ingestion ---------------------------------------------------

    def ingest(self, data: bytes, mime_type: str | None, filename: str = "") -> SourceImage | None:
        """Accept raw file contents as the new source image.

        On rejection the previous source image (if any) is kept and
        :attr:`error` is set to a user-visible message.

        Args:
            data: File contents.
            mime_type: Declared media type of the file.
            filename: Original filename, for display.

        Returns:
            The new SourceImage, or None if the file was rejected.
        """
        try:
            validate_source_image(mime_type, len(data), self.max_upload_bytes)
        except ValidationError as e:
            self.error = str(e)
            return None

        self.source_image = SourceImage(
            data_uri=encode_data_uri(data, mime_type),
            mime_type=mime_type,
            filename=filename,
        )
        self.error = None
        logger.info(f"Ingested source image {filename or '(unnamed)'} ({mime_type}, {len(data)}B)")
        return self.source_image

    def ingest_path(self, path: str | Path, mime_type: str | None = None) -> SourceImage | None:
        """Ingest a file from disk (browser uploads arrive as temp files).

        Args:
            path: Path of the uploaded file.
            mime_type: Declared media type; guessed from the filename if omitted.

        Returns:
            The new SourceImage, or None if the file was rejected.
        """
        path = Path(path)
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)

        # Reject on type before reading what may be a large non-image file.
        try:
            validate_source_image(mime_type, 1, self.max_upload_bytes)
        except ValidationError as e:
            self.error = str(e)
            return None

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error(f"Could not read upload {path}: {e}")
            self.error = f"Could not read the selected file: {e.strerror or e}"
            return None

        return self.ingest(data, mime_type, filename=path.name)

    def clear_source(self) -> None:
        """Forget the ingested source image."""
        self.source_image = None

    # -- Submission ---------------------------------------------------------

    def can_submit(self, prompt: str) -> bool:
        """Whether a submission with ``prompt`` would be accepted."""
        return not self.is_busy and EditRequest(prompt, self.source_image).is_ready()

    async def submit(self, prompt: str) -> GeneratedImageRecord | None:
        """Edit the ingested source image according to ``prompt``.

        Without a non-empty prompt and a source image this is a no-op.

        Args:
            prompt: Edit instruction.

        Returns:
            The new gallery record, or None if nothing was produced (no-op
            or failure; see :attr:`error`).
        """
        if not self.can_submit(prompt):
            logger.debug("Ignoring edit submit (missing prompt/source or busy)")
            return None

        try:
            validate_prompt_content(prompt)
        except ValidationError as e:
            logger.warning(f"Validation error: {e}")
            self.error = str(e)
            return None

        source = self.source_image
        self._begin()
        logger.info(f"Starting edit of {source.filename or 'source image'}")

        try:
            image_data = await self._service.edit(prompt, source.payload, source.mime_type)
            record = GeneratedImageRecord(
                image_data=image_data,
                source_prompt=f"{EDIT_PROMPT_PREFIX}{prompt}",
            )
            self._gallery.prepend(record)
            logger.info(f"Edit complete: {record.id}")
            return record

        except Exception as e:
            self._record_failure(e)
            return None

        finally:
            self._finish()
