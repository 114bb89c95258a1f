"""Base classes shared by the NanoArt workflow controllers.

A workflow controller owns one user-facing task: its input state, its
validation, and the lifecycle of the service calls it issues.  Two
controllers exist:

- :class:`~nanoart.workflows.generation.GenerationWorkflow`: text-to-image,
  possibly several images per run
- :class:`~nanoart.workflows.edit.EditWorkflow`: one source image plus an
  instruction, one result

Both follow the same small state machine::

    IDLE ──submit──▶ GENERATING / EDITING ──(success or failure)──▶ IDLE

There is no error state.  A failure is recorded in :attr:`WorkflowBase.error`
(auxiliary display state) while the machine returns to ``IDLE``.  Errors
never escape a controller.

Example workflow usage:

    >>> gallery = GalleryState()
    >>> workflow = GenerationWorkflow(service, gallery)
    >>> async for event in workflow.submit(GenerationRequest("a red fox", "1:1", 3)):
    ...     print(event)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from nanoart.core.image_service import GENERATE_FALLBACK_MESSAGE, ImageServiceError

if TYPE_CHECKING:
    from nanoart.core.gallery import GalleryState, GeneratedImageRecord
    from nanoart.core.image_service import ImageServiceBase

logger = logging.getLogger(__name__)


class WorkflowStatus(str, Enum):
    """States of a workflow controller."""

    IDLE = "idle"
    GENERATING = "generating"
    EDITING = "editing"


@dataclass(frozen=True)
class Progress:
    """Position of a generation run: ``current`` of ``total``.

    ``Progress(0, 0)`` means no run is in progress.
    """

    current: int = 0
    total: int = 0


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted immediately before service call ``progress.current`` is issued."""

    progress: Progress


@dataclass(frozen=True)
class ImageAddedEvent:
    """Emitted after a result has been prepended to the gallery."""

    record: "GeneratedImageRecord"


@dataclass(frozen=True)
class ErrorEvent:
    """Emitted when a run stops because of a failure."""

    message: str


WorkflowEvent = ProgressEvent | ImageAddedEvent | ErrorEvent


class WorkflowBase:
    """Common state and error handling for workflow controllers.

    Attributes
    ----------
    name : str
        Human-readable name of the workflow
    busy_status : WorkflowStatus
        Status entered while a request is in flight
    status : WorkflowStatus
        Current state of the controller
    error : str | None
        Most recent display error, cleared by the next accepted submission
    """

    name: str = "Base Workflow"
    busy_status: WorkflowStatus = WorkflowStatus.GENERATING
    fallback_message: str = GENERATE_FALLBACK_MESSAGE

    def __init__(self, service: "ImageServiceBase", gallery: "GalleryState") -> None:
        """Initialize the workflow.

        Args:
            service: Image service used for every request of this workflow
            gallery: Gallery that receives the results
        """
        self._service = service
        self._gallery = gallery
        self.status = WorkflowStatus.IDLE
        self.error: str | None = None
        logger.info(f"Initialized workflow: {self.name}")

    @property
    def gallery(self) -> "GalleryState":
        return self._gallery

    @property
    def is_busy(self) -> bool:
        """True while a request is in flight."""
        return self.status is not WorkflowStatus.IDLE

    def _begin(self) -> None:
        self.status = self.busy_status
        self.error = None

    def _finish(self) -> None:
        self.status = WorkflowStatus.IDLE

    def _record_failure(self, exc: Exception) -> str:
        """Convert a failure into the display error and return it.

        Service failures were already normalised by the client; anything
        else is unexpected and logged with a traceback.
        """
        if isinstance(exc, ImageServiceError):
            logger.warning(f"{self.name} failed: {exc.display_message}")
        else:
            logger.error(f"Unexpected error in {self.name}: {exc}", exc_info=True)

        self.error = ImageServiceError.from_exception(exc, self.fallback_message).display_message
        return self.error

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status.value}, error={self.error!r})"
