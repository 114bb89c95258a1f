"""Unit tests for the in-memory gallery."""

import dataclasses

import pytest

from nanoart.core.gallery import GeneratedImageRecord


def _record(prompt: str = "a cat") -> GeneratedImageRecord:
    return GeneratedImageRecord(image_data="data:image/png;base64,AAAA", source_prompt=prompt)


class TestGeneratedImageRecord:
    """Tests for GeneratedImageRecord."""

    def test_ids_are_unique(self):
        assert _record().id != _record().id

    def test_created_at_is_epoch_ms(self):
        assert _record().created_at > 1_600_000_000_000

    def test_record_is_immutable(self):
        record = _record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.source_prompt = "changed"

    def test_to_dict(self):
        record = _record()
        assert record.to_dict() == {
            "id": record.id,
            "image_data": record.image_data,
            "source_prompt": "a cat",
            "created_at": record.created_at,
        }


class TestGalleryState:
    """Tests for GalleryState ordering and removal."""

    def test_prepend_puts_newest_first(self, gallery):
        first, second = _record("first"), _record("second")
        gallery.prepend(first)
        gallery.prepend(second)
        assert gallery.records == (second, first)

    def test_remove_present_id_removes_only_that_record(self, gallery):
        keep_a, target, keep_b = _record("a"), _record("target"), _record("b")
        for record in (keep_a, target, keep_b):
            gallery.prepend(record)

        assert gallery.remove_by_id(target.id) is True
        assert gallery.records == (keep_b, keep_a)

    def test_remove_absent_id_leaves_gallery_unchanged(self, gallery):
        record = _record()
        gallery.prepend(record)

        assert gallery.remove_by_id("does-not-exist") is False
        assert gallery.records == (record,)

    def test_get_and_contains(self, gallery):
        record = _record()
        gallery.prepend(record)
        assert gallery.get(record.id) is record
        assert gallery.get("missing") is None
        assert record.id in gallery
        assert "missing" not in gallery

    def test_iteration_is_a_snapshot(self, gallery):
        records = [_record(str(i)) for i in range(3)]
        for record in records:
            gallery.prepend(record)

        for record in gallery:
            gallery.remove_by_id(record.id)

        assert len(gallery) == 0
