"""Text-to-image generation workflow.

The generation loop is strictly sequential: image *i + 1* is requested only
after the request for image *i* has completed and its result has been put
into the gallery.  This trades raw throughput for two things: it stays well
inside the service's rate limits, and it gives the user meaningful progress
("Generating image 2 of 5").

An accepted run is driven by an :class:`asyncio.Task` owned by the
workflow.  The task pushes events into a queue and callers read them back
as an async iterator, so a Gradio streaming handler and an HTTP streaming
response can both observe progress.  A reader that goes away does not stop
the run.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from nanoart.core.gallery import GeneratedImageRecord, now_ms
from nanoart.core.image_service import GENERATE_FALLBACK_MESSAGE
from nanoart.core.requests import GenerationRequest
from nanoart.core.validation import ValidationError, validate_generation_request

from .base import (
    ErrorEvent,
    ImageAddedEvent,
    Progress,
    ProgressEvent,
    WorkflowBase,
    WorkflowEvent,
    WorkflowStatus,
)

logger = logging.getLogger(__name__)


class GenerationWorkflow(WorkflowBase):
    """Controller for the Generate mode.

    Attributes
    ----------
    progress : Progress
        ``(current, total)`` of the running loop, ``(0, 0)`` when idle
    """

    name = "Generation"
    busy_status = WorkflowStatus.GENERATING
    fallback_message = GENERATE_FALLBACK_MESSAGE

    def __init__(self, service, gallery) -> None:
        super().__init__(service, gallery)
        self.progress = Progress()
        self._task: asyncio.Task | None = None

    def can_submit(self, prompt: str) -> bool:
        """Whether a submission with ``prompt`` would be accepted."""
        return not self.is_busy and bool(prompt and prompt.strip())

    def start(self, request: GenerationRequest) -> AsyncIterator[WorkflowEvent] | None:
        """Accept ``request`` and launch its run in the background.

        The controller is marked busy before this returns, so a second
        ``start`` made before anyone reads the first stream is refused.
        Must be called from a running event loop.

        Args:
            request: Prompt, aspect ratio and image count.

        Returns:
            Async iterator over the run's events, or None if the request was
            ignored (empty prompt, or a run is already in progress).
        """
        if not self.can_submit(request.prompt):
            logger.debug("Ignoring generation submit (empty prompt or busy)")
            return None

        events: asyncio.Queue = asyncio.Queue()

        try:
            validate_generation_request(request)
        except ValidationError as e:
            logger.warning(f"Validation error: {e}")
            self.error = str(e)
            events.put_nowait(ErrorEvent(self.error))
            events.put_nowait(None)
            return self._relay(events)

        self._begin()
        self.progress = Progress(0, request.count)
        self._task = asyncio.create_task(self._run_loop(request, events))
        return self._relay(events)

    async def submit(self, request: GenerationRequest) -> AsyncIterator[WorkflowEvent]:
        """Run one generation request, yielding events as it progresses.

        Events, in order:

        - ``ProgressEvent(i, N)`` before each service call
        - ``ImageAddedEvent(record)`` after each result is in the gallery
        - ``ErrorEvent(message)`` once, if the run stops on a failure

        A request with an empty prompt, or one submitted while a run is
        already in progress, is ignored: nothing is yielded and no service
        call is made.  Closing the iterator early leaves the run going.

        Args:
            request: Prompt, aspect ratio and image count.

        Yields:
            Workflow events describing the run.
        """
        stream = self.start(request)
        if stream is None:
            return

        async for event in stream:
            yield event

    async def run(self, request: GenerationRequest) -> list[GeneratedImageRecord]:
        """Drive :meth:`submit` to completion.

        Returns:
            Records added to the gallery by this run, in generation order.
            Check :attr:`error` to find out whether the run stopped early.
        """
        added: list[GeneratedImageRecord] = []
        async for event in self.submit(request):
            if isinstance(event, ImageAddedEvent):
                added.append(event.record)
        return added

    async def wait(self) -> None:
        """Wait until the current run, if any, has finished."""
        if self._task is not None:
            await self._task

    async def _run_loop(self, request: GenerationRequest, events: asyncio.Queue) -> None:
        total = request.count
        last_created_at = 0

        logger.info(f"Starting generation of {total} image(s) ({request.aspect_ratio})")

        try:
            for index in range(1, total + 1):
                self.progress = Progress(index, total)
                events.put_nowait(ProgressEvent(self.progress))

                image_data = await self._service.generate(request.prompt, request.aspect_ratio)

                last_created_at = max(now_ms(), last_created_at)
                record = GeneratedImageRecord(
                    image_data=image_data,
                    source_prompt=request.prompt,
                    created_at=last_created_at,
                )
                self._gallery.prepend(record)
                logger.info(f"Image {index}/{total} complete: {record.id}")
                events.put_nowait(ImageAddedEvent(record))

        except Exception as e:
            message = self._record_failure(e)
            logger.info(f"Generation stopped after {self.progress.current - 1}/{total} image(s)")
            events.put_nowait(ErrorEvent(message))

        finally:
            self.progress = Progress()
            self._finish()
            # End of stream
            events.put_nowait(None)

    @staticmethod
    async def _relay(events: asyncio.Queue) -> AsyncIterator[WorkflowEvent]:
        while True:
            event = await events.get()
            if event is None:
                return
            yield event
