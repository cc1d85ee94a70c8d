import pytest

from inkmark.core.annotations import (
    AnnotationManager,
    AnnotationSnapshot,
    AnnotationType,
    EraseRegion,
    RegionAnnotation,
    TextAnnotation,
)
from inkmark.core.errors import InvalidPageError


def note(page=1, x=10.0, y=10.0, text="note"):
    return TextAnnotation(page, "#000000", x, y, text, 16.0)


class TestAddAnnotation:

    def test_add_marks_dirty(self, manager):
        assert not manager.has_unsaved_changes
        manager.add_annotation(note())
        assert manager.get_annotation_count() == 1
        assert manager.has_unsaved_changes

    @pytest.mark.parametrize("page", [0, 4, -1])
    def test_rejects_page_outside_document(self, manager, page):
        with pytest.raises(InvalidPageError):
            manager.add_annotation(note(page=page))
        assert manager.get_annotation_count() == 0

    def test_invalid_page_is_a_value_error(self, manager):
        with pytest.raises(ValueError):
            manager.add_annotation(note(page=99))

    def test_rejects_eraser_region(self, manager):
        eraser = RegionAnnotation(AnnotationType.ERASER, 1, "#3b82f6", 2.0, 0, 0, 5, 5)
        with pytest.raises(ValueError):
            manager.add_annotation(eraser)

    def test_insertion_order_kept(self, manager):
        first, second = note(text="a"), note(text="b")
        manager.add_annotation(first)
        manager.add_annotation(second)
        assert manager.annotations == (first, second)

    def test_annotations_is_read_only_view(self, manager):
        manager.add_annotation(note())
        assert isinstance(manager.annotations, tuple)


class TestRemoval:

    def test_remove_where_is_atomic(self, manager):
        for page in (1, 2, 1):
            manager.add_annotation(note(page=page))
        manager.mark_saved()

        removed = manager.remove_where(lambda ann: ann.page == 1)

        assert len(removed) == 2
        assert [ann.page for ann in manager.annotations] == [2]
        assert manager.has_unsaved_changes

    def test_remove_nothing_keeps_flag(self, manager):
        manager.add_annotation(note())
        manager.mark_saved()
        assert manager.remove_where(lambda ann: False) == []
        assert not manager.has_unsaved_changes

    def test_erase_limited_to_page(self, manager):
        manager.add_annotation(note(page=1))
        manager.add_annotation(note(page=2))
        erased = manager.erase(EraseRegion(0, 0, 20, 20), page=2)
        assert [ann.page for ann in erased] == [2]
        assert manager.get_annotations_for_page(1) != []


class TestSnapshots:

    def test_serialize_is_detached(self, manager):
        manager.add_annotation(note())
        snapshot = manager.serialize_snapshot()
        manager.clear_all()
        assert snapshot.document_name == "report.pdf"
        assert len(snapshot.annotations) == 1

    def test_load_drops_invalid_entries(self, manager):
        snapshot = AnnotationSnapshot("report.pdf", [
            note(page=1),
            note(page=7),
            RegionAnnotation(AnnotationType.ERASER, 1, "#3b82f6", 2.0, 0, 0, 5, 5),
            note(page=3),
        ])
        manager.add_annotation(note(page=2))

        assert manager.load_snapshot(snapshot) == 2
        assert [ann.page for ann in manager.annotations] == [1, 3]
        assert not manager.has_unsaved_changes

    def test_clear_all_resets(self, manager):
        manager.add_annotation(note())
        manager.clear_all()
        assert manager.get_annotation_count() == 0
        assert manager.page_count == 0
        assert not manager.has_unsaved_changes

    def test_set_document_starts_clean(self):
        manager = AnnotationManager()
        manager.set_document("a.pdf", 1)
        manager.add_annotation(note())
        manager.set_document("b.pdf", 5)
        assert manager.document_name == "b.pdf"
        assert manager.annotations == ()
