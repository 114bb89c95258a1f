"""In-memory gallery of generated images.

The gallery is the only state shared by the generation and edit workflows.
It is small:

- records are immutable once created
- order is insertion order, newest first
- the only mutations are :meth:`GalleryState.prepend` and
  :meth:`GalleryState.remove_by_id`

Nothing here is persisted.  A gallery lives exactly as long as the session
that owns it, so reloading the browser page starts over with an empty one.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

EDIT_PROMPT_PREFIX = "Edit: "


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class GeneratedImageRecord:
    """One produced image and its provenance.

    Attributes:
        image_data: Data URI holding the image bytes and MIME type.
        source_prompt: Prompt that produced the image.  Edit results carry
            the ``"Edit: "`` prefix; the prefix is for display only.
        id: Unique identifier, generated at creation time.
        created_at: Creation time in epoch milliseconds.
    """

    image_data: str
    source_prompt: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: int = field(default_factory=now_ms)

    def to_dict(self) -> dict:
        """Serialise the record for JSON responses."""
        return {
            "id": self.id,
            "image_data": self.image_data,
            "source_prompt": self.source_prompt,
            "created_at": self.created_at,
        }


class GalleryState:
    """Ordered, newest-first collection of :class:`GeneratedImageRecord`.

    One instance is owned by each session and handed to both workflow
    controllers.  All access happens on a single event loop, so the list
    operations below need no locking.

    Examples
    --------
        >>> gallery = GalleryState()
        >>> record = GeneratedImageRecord("data:image/png;base64,AAAA", "a cat")
        >>> gallery.prepend(record)
        >>> len(gallery)
        1
        >>> gallery.remove_by_id(record.id)
        True
    """

    def __init__(self) -> None:
        self._records: list[GeneratedImageRecord] = []

    def prepend(self, record: GeneratedImageRecord) -> None:
        """Insert a record at the head of the gallery.

        No deduplication is performed; callers are expected to create a new
        record (with a fresh id) for every produced image.
        """
        self._records.insert(0, record)
        logger.debug(f"Gallery prepend {record.id} (size={len(self._records)})")

    def remove_by_id(self, record_id: str) -> bool:
        """Remove the record with ``record_id``.

        Args:
            record_id: Identifier of the record to remove.

        Returns:
            True if a record was removed, False if no record matched (the
            gallery is left unchanged in that case).
        """
        for index, record in enumerate(self._records):
            if record.id == record_id:
                del self._records[index]
                logger.debug(f"Gallery removed {record_id} (size={len(self._records)})")
                return True
        return False

    def get(self, record_id: str) -> GeneratedImageRecord | None:
        """Return the record with ``record_id``, or None."""
        return next((r for r in self._records if r.id == record_id), None)

    @property
    def records(self) -> tuple[GeneratedImageRecord, ...]:
        """Snapshot of the records, newest first."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[GeneratedImageRecord]:
        return iter(tuple(self._records))

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)

    def __repr__(self) -> str:
        return f"GalleryState(size={len(self._records)})"
